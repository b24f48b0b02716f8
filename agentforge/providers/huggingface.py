"""HuggingFace inference adapter: prompt-completion, one model per URL."""

from typing import Any
from urllib.parse import quote

from agentforge.exceptions import CORSFallbackError, InvalidResponseFormatError
from agentforge.providers.base import (
    PreparedRequest,
    ProviderAdapter,
    ProviderConfig,
    register_provider,
)

HUGGINGFACE_URL = "https://api-inference.huggingface.co/models/{model}"

ROLE_LABELS = {
    "system": "System",
    "user": "User",
    "assistant": "Assistant",
}


def flatten_messages(messages: list[dict[str, str]]) -> str:
    """
    Flatten a chat into a single completion prompt.

    Each message becomes ``"<Label>: <content>"``; unknown roles contribute
    their raw content. A trailing ``"\\nAssistant:"`` cues the reply.

    >>> flatten_messages([{"role": "system", "content": "A"}, {"role": "user", "content": "B"}])
    'System: A\\nUser: B\\nAssistant:'
    """
    lines = []
    for msg in messages:
        label = ROLE_LABELS.get(msg.get("role", ""))
        content = msg.get("content", "")
        lines.append(f"{label}: {content}" if label else content)
    return "\n".join(lines) + "\nAssistant:"


@register_provider
class HuggingFaceAdapter(ProviderAdapter):
    """Adapter for the HuggingFace serverless inference API."""

    name = "huggingface"
    label = "HuggingFace"
    supports_relay = True

    def build_request(self, config: ProviderConfig, messages: list[dict[str, str]]) -> PreparedRequest:
        chat = self.settings.chat
        headers = {"Content-Type": "application/json"}
        if config.api_key:
            headers["Authorization"] = f"Bearer {config.api_key}"

        return PreparedRequest(
            # model ids contain "/" which must stay a path separator
            url=HUGGINGFACE_URL.format(model=quote(config.model, safe="/:")),
            body={
                "inputs": flatten_messages(messages),
                "parameters": {
                    "max_new_tokens": chat.max_tokens,
                    "temperature": chat.temperature,
                    "return_full_text": False,
                },
            },
            headers=headers,
        )

    def parse_reply(self, data: Any, config: ProviderConfig) -> str:
        if isinstance(data, list):
            first = data[0] if data else None
            text = first.get("generated_text") if isinstance(first, dict) else None
        elif isinstance(data, dict):
            text = data.get("generated_text")
        else:
            text = None

        if not text or not isinstance(text, str):
            raise InvalidResponseFormatError("Invalid response format from HuggingFace")
        return text.strip()

    def status_fallback_message(self, status: int) -> str:
        return f"HTTP {status} - Model may be loading, try again in a moment"

    def relay_error(self, config: ProviderConfig) -> CORSFallbackError:
        return CORSFallbackError(
            "CORS error - HuggingFace may require an API key, or try a different model"
        )
