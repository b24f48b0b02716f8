"""
Unified configuration management for AgentForge.

Supports loading from:
- Environment variables (.env)
- YAML config files (config.yaml)
- Programmatic overrides

Priority (highest to lowest):
1. Programmatic overrides
2. Environment variables
3. YAML config files
4. Default values

Usage:
    from agentforge.config import settings

    settings.provider.model
    settings.chat.history_window

    settings.reload()
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml


# =============================================================================
# Static Provider Defaults
# =============================================================================

DEFAULT_MODELS = {
    "openrouter": "deepseek/deepseek-r1:free",
    "huggingface": "mistralai/Mixtral-8x7B-Instruct-v0.1",
    "local": "llama3",
}

DEFAULT_LOCAL_ENDPOINT = "http://localhost:11434/api/chat"

DEFAULT_ENDPOINTS = {
    "local": DEFAULT_LOCAL_ENDPOINT,
}


# =============================================================================
# Configuration Dataclasses
# =============================================================================

@dataclass
class ProviderSettings:
    """Default provider selection used when a caller does not pass one."""
    provider: str = "openrouter"
    model: str = DEFAULT_MODELS["openrouter"]
    api_key: str = ""
    local_endpoint: str = DEFAULT_LOCAL_ENDPOINT


@dataclass
class ChatSettings:
    """Request shaping shared by all adapters."""
    history_window: int = 6
    temperature: float = 0.7
    max_tokens: int = 500
    request_timeout: Optional[float] = None  # None waits forever


@dataclass
class RelaySettings:
    """
    Read-through relay used once when a direct request is blocked.

    Off unless ``url_template`` is set. Credentials are only sent to a
    relay marked ``trusted``.
    """
    url_template: str = ""
    trusted: bool = False


@dataclass
class WebSettings:
    """Same-origin web service configuration."""
    host: str = "127.0.0.1"
    port: int = 8000
    origin: str = "http://localhost:8000"
    app_title: str = "AgentForge Lite"
    debug: bool = False
    auto_open_browser: bool = True


@dataclass
class LogSettings:
    """Logging configuration."""
    level: str = "INFO"
    json_format: bool = False


@dataclass
class Settings:
    """
    Main settings container.

    Provides unified access to all configuration.
    """
    provider: ProviderSettings = field(default_factory=ProviderSettings)
    chat: ChatSettings = field(default_factory=ChatSettings)
    relay: RelaySettings = field(default_factory=RelaySettings)
    web: WebSettings = field(default_factory=WebSettings)
    log: LogSettings = field(default_factory=LogSettings)

    _config_file: Optional[Path] = None
    _env_prefix: str = "AGENTFORGE_"

    def __post_init__(self):
        # YAML first so the environment wins
        self._load_from_yaml()
        self._load_from_env()

    def _load_from_env(self):
        """Load settings from environment variables."""
        prefix = self._env_prefix

        # Provider settings
        if val := os.getenv(f"{prefix}PROVIDER"):
            self.provider.provider = val
            if not os.getenv(f"{prefix}MODEL"):
                self.provider.model = DEFAULT_MODELS.get(val, self.provider.model)
        if val := os.getenv(f"{prefix}MODEL"):
            self.provider.model = val
        if val := os.getenv(f"{prefix}API_KEY"):
            self.provider.api_key = val
        if val := os.getenv(f"{prefix}LOCAL_ENDPOINT"):
            self.provider.local_endpoint = val

        # Chat settings
        if val := os.getenv(f"{prefix}HISTORY_WINDOW"):
            self.chat.history_window = int(val)
        if val := os.getenv(f"{prefix}TEMPERATURE"):
            self.chat.temperature = float(val)
        if val := os.getenv(f"{prefix}MAX_TOKENS"):
            self.chat.max_tokens = int(val)
        if val := os.getenv(f"{prefix}TIMEOUT"):
            self.chat.request_timeout = float(val)

        # Relay: an explicitly empty value disables the fallback
        if (val := os.getenv(f"{prefix}RELAY_URL")) is not None:
            self.relay.url_template = val
        if val := os.getenv(f"{prefix}RELAY_TRUSTED"):
            self.relay.trusted = val.lower() in ("true", "1", "yes")

        # Web settings
        if val := os.getenv(f"{prefix}HOST"):
            self.web.host = val
        if val := os.getenv(f"{prefix}PORT"):
            self.web.port = int(val)
        if val := os.getenv(f"{prefix}ORIGIN"):
            self.web.origin = val
        if val := os.getenv(f"{prefix}DEBUG"):
            self.web.debug = val.lower() in ("true", "1", "yes")
        if val := os.getenv(f"{prefix}OPEN_BROWSER"):
            self.web.auto_open_browser = val.lower() in ("true", "1", "yes")

        # Log settings
        if val := os.getenv(f"{prefix}LOG_LEVEL"):
            self.log.level = val.upper()
        if val := os.getenv(f"{prefix}LOG_JSON"):
            self.log.json_format = val.lower() in ("true", "1", "yes")

    def _load_from_yaml(self):
        """Load settings from the first YAML config file found."""
        search_paths = [
            Path.cwd() / "config.yaml",
            Path.cwd() / "config.yml",
            Path.home() / ".agentforge" / "config.yaml",
        ]

        for config_path in search_paths:
            if config_path.exists():
                self._config_file = config_path
                self.apply_yaml(config_path)
                break

    def apply_yaml(self, path: Path):
        """Apply config sections from a YAML file; unknown keys are ignored."""
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        for section_name in ("provider", "chat", "relay", "web", "log"):
            section = data.get(section_name)
            if not isinstance(section, dict):
                continue
            target = getattr(self, section_name)
            for key, val in section.items():
                if hasattr(target, key):
                    setattr(target, key, val)

    def reload(self):
        """Reload configuration from all sources."""
        self.provider = ProviderSettings()
        self.chat = ChatSettings()
        self.relay = RelaySettings()
        self.web = WebSettings()
        self.log = LogSettings()

        self._load_from_yaml()
        self._load_from_env()

    def to_dict(self) -> dict:
        """Convert settings to dictionary."""
        return {
            "provider": {
                "provider": self.provider.provider,
                "model": self.provider.model,
                "local_endpoint": self.provider.local_endpoint,
                # api_key excluded
            },
            "chat": {
                "history_window": self.chat.history_window,
                "temperature": self.chat.temperature,
                "max_tokens": self.chat.max_tokens,
                "request_timeout": self.chat.request_timeout,
            },
            "relay": {
                "url_template": self.relay.url_template,
                "trusted": self.relay.trusted,
            },
            "web": {
                "host": self.web.host,
                "port": self.web.port,
                "origin": self.web.origin,
                "app_title": self.web.app_title,
                "debug": self.web.debug,
                "auto_open_browser": self.web.auto_open_browser,
            },
            "log": {
                "level": self.log.level,
                "json_format": self.log.json_format,
            },
        }

    def __repr__(self) -> str:
        return f"Settings(config_file={self._config_file})"


# =============================================================================
# Global Settings Instance
# =============================================================================

settings = Settings()


def get_settings() -> Settings:
    """Get the global settings instance."""
    return settings


def configure(**kwargs):
    """
    Configure settings programmatically.

    Args:
        **kwargs: Settings to override in format "section_key=value"

    Example:
        configure(chat_history_window=10, web_port=9000)
    """
    for key, value in kwargs.items():
        parts = key.split("_", 1)
        if len(parts) == 2:
            section, attr = parts
            if hasattr(settings, section):
                section_obj = getattr(settings, section)
                if hasattr(section_obj, attr):
                    setattr(section_obj, attr, value)
