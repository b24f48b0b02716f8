"""Provider adapter interface, shared data types and the adapter registry."""

import json
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field
from typing import Any, Iterable, Optional, Union

import httpx

from agentforge.config import DEFAULT_LOCAL_ENDPOINT, Settings, get_settings
from agentforge.exceptions import (
    CORSFallbackError,
    InvalidResponseFormatError,
    NetworkError,
    ProviderError,
    RemoteAPIError,
    UnsupportedProviderError,
)


@dataclass
class ChatMessage:
    """A single chat turn. List order is chronological."""

    role: str
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ChatMessage":
        return cls(role=str(data.get("role", "")), content=str(data.get("content", "")))


MessageLike = Union[ChatMessage, dict[str, Any]]


def normalize_messages(messages: Iterable[MessageLike]) -> list[dict[str, str]]:
    """Convert ChatMessage objects or dicts into plain role/content dicts."""
    result = []
    for msg in messages:
        if isinstance(msg, ChatMessage):
            result.append(msg.to_dict())
        else:
            result.append(ChatMessage.from_dict(msg).to_dict())
    return result


@dataclass
class ProviderConfig:
    """
    Everything one send_chat call needs to know about the target.

    ``api_key`` is required by openrouter, optional for huggingface and
    ignored by local. ``endpoint`` only applies to local.
    """

    provider: str
    model: str
    api_key: Optional[str] = None
    endpoint: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProviderConfig":
        return cls(
            provider=data["provider"],
            model=data["model"],
            api_key=data.get("api_key") or data.get("apiKey") or None,
            endpoint=data.get("endpoint") or data.get("localEndpoint") or None,
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, raw: str) -> "ProviderConfig":
        return cls.from_dict(json.loads(raw))

    @property
    def local_endpoint(self) -> str:
        return self.endpoint or DEFAULT_LOCAL_ENDPOINT

    def redacted(self) -> dict[str, Any]:
        data = self.to_dict()
        if data["api_key"]:
            data["api_key"] = "[REDACTED]"
        return data


@dataclass
class PreparedRequest:
    """A fully-built POST: target URL, headers and JSON body."""

    url: str
    body: dict[str, Any]
    headers: dict[str, str] = field(default_factory=lambda: {"Content-Type": "application/json"})


class ProviderAdapter(ABC):
    """
    One adapter per provider.

    Adapters only translate: they build the request, read the response and
    map failures to errors. The gateway owns the HTTP round trip.

    Args:
        settings: Settings supplying temperature, token limit and
            identifying headers. Defaults to the global settings.
    """

    name: str = ""
    label: str = ""
    # Whether a blocked direct request may be retried through the relay
    supports_relay: bool = False

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def validate(self, config: ProviderConfig) -> None:
        """Raise before any network call when the config is unusable."""

    @abstractmethod
    def build_request(self, config: ProviderConfig, messages: list[dict[str, str]]) -> PreparedRequest:
        ...

    @abstractmethod
    def parse_reply(self, data: Any, config: ProviderConfig) -> str:
        """Extract the reply text from a decoded 2xx body."""

    def read_response(self, response: httpx.Response, config: ProviderConfig) -> str:
        """Turn an HTTP response into reply text or raise."""
        if not response.is_success:
            raise self.status_error(response, config)
        try:
            data = response.json()
        except ValueError as e:
            raise InvalidResponseFormatError(
                f"{self.label} returned a non-JSON body", status=response.status_code
            ) from e
        return self.parse_reply(data, config)

    def status_error(self, response: httpx.Response, config: ProviderConfig) -> RemoteAPIError:
        """Build the error for a non-2xx response."""
        message = envelope_message(response) or self.status_fallback_message(response.status_code)
        return RemoteAPIError(message, status=response.status_code)

    def status_fallback_message(self, status: int) -> str:
        return f"HTTP {status}"

    def transport_error(self, exc: httpx.TransportError, config: ProviderConfig) -> ProviderError:
        """Build the error for a transport failure that is not retried."""
        return NetworkError(f"{self.label} request failed: {exc.__class__.__name__}: {exc}")

    def relay_error(self, config: ProviderConfig) -> ProviderError:
        """Build the error raised when the relay retry fails."""
        return CORSFallbackError(f"{self.label} request was blocked and the relay fallback failed")


def envelope_message(response: httpx.Response) -> Optional[str]:
    """
    Pull ``error.message`` (or a string ``error``) out of a JSON error body.

    Returns None when the body is not JSON or carries no message.
    """
    try:
        data = response.json()
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    error = data.get("error")
    if isinstance(error, dict):
        message = error.get("message")
        return str(message) if message else None
    if isinstance(error, str) and error:
        return error
    return None


# =============================================================================
# Registry
# =============================================================================

_registry: dict[str, type[ProviderAdapter]] = {}


def register_provider(cls: type[ProviderAdapter]) -> type[ProviderAdapter]:
    """Class decorator adding an adapter under its ``name``."""
    if not cls.name:
        raise ValueError(f"{cls.__name__} has no provider name")
    _registry[cls.name] = cls
    return cls


def get_adapter_class(provider: str) -> type[ProviderAdapter]:
    try:
        return _registry[provider]
    except (KeyError, TypeError):
        raise UnsupportedProviderError(f"Unsupported provider: {provider}") from None


def available_providers() -> list[str]:
    return list(_registry)
