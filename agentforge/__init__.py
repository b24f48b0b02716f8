"""
AgentForge - test AI agent configurations against hosted and local models.

This package normalizes several chat APIs behind one ProviderGateway so
the UI can send a chat turn without knowing which provider answers it.
"""

from agentforge.cancellation import AsyncCancellationToken
from agentforge.conversation import AgentProfile, MessageBuilder, build_messages
from agentforge.exceptions import (
    AgentForgeError,
    ChatCancelledError,
    CORSFallbackError,
    InvalidResponseFormatError,
    LocalServerUnreachableError,
    MissingCredentialsError,
    NetworkError,
    ProviderError,
    RemoteAPIError,
    UnsupportedProviderError,
    get_error_kind,
    get_user_message,
)
from agentforge.gateway import ChatResult, ProviderGateway, send_chat
from agentforge.logging import LogLevel, StructuredLogger, get_logger, set_global_queue
from agentforge.providers import (
    ChatMessage,
    ProviderAdapter,
    ProviderConfig,
    available_providers,
    register_provider,
)

__version__ = "0.1.0"
__all__ = [
    # Core
    "ProviderGateway",
    "ChatResult",
    "send_chat",
    "AsyncCancellationToken",
    # Data
    "ChatMessage",
    "ProviderConfig",
    "AgentProfile",
    "MessageBuilder",
    "build_messages",
    # Providers
    "ProviderAdapter",
    "available_providers",
    "register_provider",
    # Logging
    "get_logger",
    "set_global_queue",
    "StructuredLogger",
    "LogLevel",
    # Exceptions
    "AgentForgeError",
    "ProviderError",
    "UnsupportedProviderError",
    "MissingCredentialsError",
    "RemoteAPIError",
    "InvalidResponseFormatError",
    "NetworkError",
    "CORSFallbackError",
    "LocalServerUnreachableError",
    "ChatCancelledError",
    "get_error_kind",
    "get_user_message",
]
