"""Web package for the AgentForge service."""

from web.state import app_state, AppState
from web.models import Agent, AgentChatRequest, ChatRequest, Message, ProviderSelection

__all__ = [
    "app_state",
    "AppState",
    "Agent",
    "AgentChatRequest",
    "ChatRequest",
    "Message",
    "ProviderSelection",
]
