"""OpenRouter adapter: key-authenticated, chat-completions style API."""

from typing import Any

from agentforge.exceptions import CORSFallbackError, InvalidResponseFormatError, MissingCredentialsError
from agentforge.providers.base import (
    PreparedRequest,
    ProviderAdapter,
    ProviderConfig,
    register_provider,
)

OPENROUTER_URL = "https://openrouter.ai/api/v1/chat/completions"


@register_provider
class OpenRouterAdapter(ProviderAdapter):
    """
    Adapter for ``POST https://openrouter.ai/api/v1/chat/completions``.

    Messages are passed through verbatim. The origin and client title
    headers identify the calling app to OpenRouter.
    """

    name = "openrouter"
    label = "OpenRouter"
    supports_relay = True

    def validate(self, config: ProviderConfig) -> None:
        if not config.api_key:
            raise MissingCredentialsError("OpenRouter API key is required")

    def build_request(self, config: ProviderConfig, messages: list[dict[str, str]]) -> PreparedRequest:
        chat = self.settings.chat
        web = self.settings.web
        return PreparedRequest(
            url=OPENROUTER_URL,
            body={
                "model": config.model,
                "messages": messages,
                "temperature": chat.temperature,
                "max_tokens": chat.max_tokens,
            },
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {config.api_key}",
                "HTTP-Referer": web.origin,
                "X-Title": web.app_title,
            },
        )

    def parse_reply(self, data: Any, config: ProviderConfig) -> str:
        choices = data.get("choices") if isinstance(data, dict) else None
        if not choices or not isinstance(choices, list):
            raise InvalidResponseFormatError("Invalid response format from OpenRouter")

        first = choices[0] if isinstance(choices[0], dict) else {}
        message = first.get("message") or {}
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(content, str):
            raise InvalidResponseFormatError("Invalid response format from OpenRouter")
        return content.strip()

    def relay_error(self, config: ProviderConfig) -> CORSFallbackError:
        return CORSFallbackError(
            "CORS error - the direct request was blocked and the relay fallback failed; "
            "configure a different relay or use a different provider"
        )
