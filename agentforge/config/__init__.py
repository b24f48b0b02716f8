"""Configuration for AgentForge."""

from agentforge.config.settings import (
    DEFAULT_ENDPOINTS,
    DEFAULT_LOCAL_ENDPOINT,
    DEFAULT_MODELS,
    ChatSettings,
    LogSettings,
    ProviderSettings,
    RelaySettings,
    Settings,
    WebSettings,
    configure,
    get_settings,
    settings,
)

__all__ = [
    "DEFAULT_ENDPOINTS",
    "DEFAULT_LOCAL_ENDPOINT",
    "DEFAULT_MODELS",
    "ChatSettings",
    "LogSettings",
    "ProviderSettings",
    "RelaySettings",
    "Settings",
    "WebSettings",
    "configure",
    "get_settings",
    "settings",
]
