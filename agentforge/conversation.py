"""Agent profiles and chat message assembly."""

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from agentforge.config import get_settings


class MessageBuilder:
    """Helper class for building conversation messages."""

    @staticmethod
    def create_system_message(content: str) -> dict[str, str]:
        return {"role": "system", "content": content}

    @staticmethod
    def create_user_message(content: str) -> dict[str, str]:
        return {"role": "user", "content": content}

    @staticmethod
    def create_assistant_message(content: str) -> dict[str, str]:
        return {"role": "assistant", "content": content}

    @staticmethod
    def from_history_entry(entry: dict[str, Any]) -> dict[str, str]:
        """
        Convert a stored chat entry into a message.

        UI entries carry ``sender`` ("user" or "ai"); anything that already
        has a ``role`` is kept as is.
        """
        if "role" in entry:
            return {"role": entry["role"], "content": entry.get("content", "")}
        role = "user" if entry.get("sender") == "user" else "assistant"
        return {"role": role, "content": entry.get("content", "")}


def build_messages(
    system_prompt: str,
    history: Iterable[dict[str, Any]],
    user_message: str,
    window: Optional[int] = None,
) -> list[dict[str, str]]:
    """
    Assemble the message list for one chat turn.

    Keeps the system prompt, the last ``window`` history entries and the
    new user message, in that order. ``window`` defaults to
    ``settings.chat.history_window``.
    """
    if window is None:
        window = get_settings().chat.history_window

    messages = []
    if system_prompt:
        messages.append(MessageBuilder.create_system_message(system_prompt))

    entries = list(history)
    recent = entries[-window:] if window > 0 else []
    messages.extend(MessageBuilder.from_history_entry(e) for e in recent)

    messages.append(MessageBuilder.create_user_message(user_message))
    return messages


@dataclass
class AgentProfile:
    """An agent configuration under test."""

    name: str
    system_prompt: str
    personality: str = ""
    response_style: str = ""
    tags: list[str] = field(default_factory=list)

    def build_messages(
        self,
        history: Iterable[dict[str, Any]],
        user_message: str,
        window: Optional[int] = None,
    ) -> list[dict[str, str]]:
        return build_messages(self.system_prompt, history, user_message, window)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AgentProfile":
        return cls(
            name=data.get("name", ""),
            system_prompt=data.get("system_prompt") or data.get("systemPrompt", ""),
            personality=data.get("personality", ""),
            response_style=data.get("response_style") or data.get("responseStyle", ""),
            tags=list(data.get("tags") or []),
        )
