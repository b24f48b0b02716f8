"""Pydantic models for API requests/responses."""

from typing import List, Optional

from pydantic import BaseModel, Field

from agentforge.config import DEFAULT_MODELS, ProviderSettings
from agentforge.conversation import AgentProfile
from agentforge.providers import ProviderConfig


class Message(BaseModel):
    """One chat turn."""
    role: str  # system | user | assistant
    content: str


class HistoryEntry(BaseModel):
    """A stored UI chat entry ("user" or "ai" sender)."""
    sender: str
    content: str


class ProviderSelection(BaseModel):
    """
    Provider, model and credentials for one request.

    Omitted fields fall back to the server's provider settings. The
    configured key and model are only used for the configured provider.
    """
    provider: Optional[str] = None
    model: Optional[str] = None
    api_key: Optional[str] = None
    endpoint: Optional[str] = None

    def to_config(self, defaults: Optional[ProviderSettings] = None) -> ProviderConfig:
        defaults = defaults or ProviderSettings()
        provider = self.provider or defaults.provider
        same_provider = provider == defaults.provider

        model = self.model
        if not model:
            model = defaults.model if same_provider else DEFAULT_MODELS.get(provider, "")
        api_key = self.api_key or (defaults.api_key if same_provider else None)

        return ProviderConfig(
            provider=provider,
            model=model,
            api_key=api_key or None,
            endpoint=self.endpoint or defaults.local_endpoint or None,
        )


class ChatRequest(ProviderSelection):
    """Request body for /api/chat."""
    messages: List[Message]


class Agent(BaseModel):
    """Agent configuration being tested."""
    name: str
    system_prompt: str
    personality: str = ""
    response_style: str = ""
    tags: List[str] = Field(default_factory=list)

    def to_profile(self) -> AgentProfile:
        return AgentProfile(**self.model_dump())


class AgentChatRequest(BaseModel):
    """Request body for /api/agents/chat."""
    agent: Agent
    config: ProviderSelection = Field(default_factory=ProviderSelection)
    history: List[HistoryEntry] = Field(default_factory=list)
    message: str


class ChatReply(BaseModel):
    """Successful chat response."""
    reply: str


class ChatFailure(BaseModel):
    """Failed chat response; ``kind`` is config, remote, format, network, cancelled or internal."""
    error: str
    kind: str
