"""Provider adapters. Importing this package registers the built-in providers."""

from agentforge.providers.base import (
    ChatMessage,
    MessageLike,
    PreparedRequest,
    ProviderAdapter,
    ProviderConfig,
    available_providers,
    get_adapter_class,
    normalize_messages,
    register_provider,
)
from agentforge.providers.huggingface import HuggingFaceAdapter, flatten_messages
from agentforge.providers.local import LocalAdapter
from agentforge.providers.openrouter import OpenRouterAdapter
from agentforge.providers.relay import Relay, is_blocked_failure

__all__ = [
    "ChatMessage",
    "MessageLike",
    "PreparedRequest",
    "ProviderAdapter",
    "ProviderConfig",
    "available_providers",
    "get_adapter_class",
    "normalize_messages",
    "register_provider",
    "HuggingFaceAdapter",
    "LocalAdapter",
    "OpenRouterAdapter",
    "flatten_messages",
    "Relay",
    "is_blocked_failure",
]
