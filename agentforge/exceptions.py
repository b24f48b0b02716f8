"""
Exception hierarchy for AgentForge.

Every failure raised by the provider gateway derives from ProviderError,
so callers handle one error shape and inspect ``kind`` when they need to
react programmatically:

- ``config``: caller error (unknown provider, missing API key)
- ``remote``: the target API answered with a non-2xx status
- ``format``: 2xx answer with an unexpected body shape
- ``network``: transport failure, including the cross-origin relay path
- ``cancelled``: the caller cancelled the request

Usage:
    from agentforge.exceptions import ProviderError

    try:
        reply = await gateway.send_chat("openrouter", model, messages, key)
    except ProviderError as e:
        print(e.kind, e)
"""

from typing import Any, Optional


class AgentForgeError(Exception):
    """
    Base exception for all AgentForge errors.

    Attributes:
        user_message: User-friendly error description
        context: Additional context for debugging
    """

    user_message: str = "An error occurred"

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        base = super().__str__()
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{base} ({ctx_str})"
        return base


# ============================================================================
# Provider Errors
# ============================================================================

class ProviderError(AgentForgeError):
    """
    Uniform failure type for a chat request.

    The gateway re-raises every adapter error as an instance of the same
    class with a prefixed message, so ``type(e)`` and ``e.kind`` survive
    the trip through the gateway boundary.
    """
    kind: str = "internal"
    user_message = "AI request failed"

    def with_prefix(self, prefix: str) -> "ProviderError":
        """Return a copy of this error with ``prefix`` prepended to the message."""
        clone = self.__class__.__new__(self.__class__)
        AgentForgeError.__init__(clone, f"{prefix}: {self.message}", **self.context)
        clone.__dict__.update(
            {k: v for k, v in self.__dict__.items() if k not in ("message", "context")}
        )
        return clone


class UnsupportedProviderError(ProviderError):
    """Provider identifier is not registered. Fatal, caller error."""
    kind = "config"
    user_message = "Unsupported AI provider"


class MissingCredentialsError(ProviderError):
    """A required API key was not supplied. Fatal, caller error."""
    kind = "config"
    user_message = "API key is required for this provider. Please add it in settings."


class RemoteAPIError(ProviderError):
    """
    The target service answered with a non-2xx status.

    The message carries the remote error text when the body held a
    parseable error envelope, otherwise the numeric status.
    """
    kind = "remote"
    user_message = "The AI service returned an error"

    def __init__(self, message: str, status: Optional[int] = None, **context: Any):
        super().__init__(message, **context)
        self.status = status


class InvalidResponseFormatError(ProviderError):
    """2xx response whose body does not have the expected shape."""
    kind = "format"
    user_message = "AI returned a response in an unexpected format"


class NetworkError(ProviderError):
    """Transport-level failure that is not retried."""
    kind = "network"
    user_message = "Cannot connect to AI service. Please check your network."


class CORSFallbackError(NetworkError):
    """The direct request was blocked and the relay retry failed too."""
    user_message = "Request was blocked and the relay fallback failed"


class LocalServerUnreachableError(NetworkError):
    """The local chat server could not be reached."""
    user_message = "Cannot connect to the local model server. Is it running?"


class ChatCancelledError(ProviderError):
    """
    The caller cancelled the request.

    This is a clean cancellation, not an error condition.
    """
    kind = "cancelled"
    user_message = "Request cancelled"


# ============================================================================
# Utility Functions
# ============================================================================

def get_error_kind(error: Exception) -> str:
    """
    Classify an exception into a ChatResult origin kind.

    Args:
        error: The exception to classify

    Returns:
        The ProviderError kind, or "internal" for anything else
    """
    if isinstance(error, ProviderError):
        return error.kind
    return "internal"


def get_user_message(error: Exception) -> str:
    """
    Get a user-friendly error message.

    Args:
        error: The exception

    Returns:
        User-friendly message string
    """
    if isinstance(error, AgentForgeError):
        return error.user_message
    return str(error)
