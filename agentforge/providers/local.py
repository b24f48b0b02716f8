"""Local adapter for an Ollama-style chat server (loopback by default)."""

from typing import Any

import httpx

from agentforge.exceptions import InvalidResponseFormatError, LocalServerUnreachableError, RemoteAPIError
from agentforge.providers.base import (
    PreparedRequest,
    ProviderAdapter,
    ProviderConfig,
    register_provider,
)


@register_provider
class LocalAdapter(ProviderAdapter):
    """
    Adapter for ``POST <endpoint>`` on a locally running server.

    No authentication is sent and the relay is never used, since a
    remote relay cannot reach a loopback address.
    """

    name = "local"
    label = "Ollama"
    supports_relay = False

    def build_request(self, config: ProviderConfig, messages: list[dict[str, str]]) -> PreparedRequest:
        chat = self.settings.chat
        return PreparedRequest(
            url=config.local_endpoint,
            body={
                "model": config.model,
                "messages": messages,
                "stream": False,
                "options": {
                    "temperature": chat.temperature,
                    "num_predict": chat.max_tokens,
                },
            },
        )

    def parse_reply(self, data: Any, config: ProviderConfig) -> str:
        message = data.get("message") if isinstance(data, dict) else None
        content = message.get("content") if isinstance(message, dict) else None
        if not content or not isinstance(content, str):
            raise InvalidResponseFormatError("Invalid response format from Ollama")
        return content.strip()

    def status_error(self, response: httpx.Response, config: ProviderConfig) -> RemoteAPIError:
        return RemoteAPIError(
            f"Ollama server error: HTTP {response.status_code}. Make sure Ollama is running "
            f"and model '{config.model}' is installed.",
            status=response.status_code,
        )

    def transport_error(self, exc: httpx.TransportError, config: ProviderConfig) -> LocalServerUnreachableError:
        return LocalServerUnreachableError(
            "Cannot connect to Ollama server. Make sure Ollama is running on the specified "
            "endpoint and CORS is enabled.",
            endpoint=config.local_endpoint,
        )
