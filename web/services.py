"""Chat services behind the web routes."""

from typing import List

from fastapi.responses import JSONResponse

from agentforge.config import DEFAULT_ENDPOINTS, DEFAULT_MODELS
from agentforge.gateway import ChatResult
from agentforge.providers import available_providers
from web.models import AgentChatRequest, ChatRequest, ProviderSelection
from web.state import app_state

# HTTP status per failure kind; 499 mirrors "client closed request"
STATUS_BY_KIND = {
    "config": 400,
    "remote": 502,
    "format": 502,
    "network": 502,
    "cancelled": 499,
}


def provider_catalog() -> dict:
    """Provider ids with their default models and endpoints."""
    providers = available_providers()
    return {
        "providers": providers,
        "default_models": {p: DEFAULT_MODELS.get(p) for p in providers},
        "default_endpoints": DEFAULT_ENDPOINTS,
    }


def to_response(result: ChatResult) -> JSONResponse:
    if result.ok:
        return JSONResponse(result.to_dict())
    return JSONResponse(result.to_dict(), status_code=STATUS_BY_KIND.get(result.kind, 500))


async def _send(selection: ProviderSelection, messages: List[dict]) -> ChatResult:
    gateway = app_state.get_gateway()
    config = selection.to_config(gateway.settings.provider)
    return await gateway.try_send_chat(
        config.provider,
        config.model,
        messages,
        config.api_key or "",
        config.endpoint or "",
    )


async def handle_chat(req: ChatRequest) -> JSONResponse:
    """Forward a prepared message list to the gateway."""
    messages = [m.model_dump() for m in req.messages]
    result = await _send(req, messages)
    app_state.drain_logs()
    return to_response(result)


async def handle_agent_chat(req: AgentChatRequest) -> JSONResponse:
    """Assemble system prompt + recent history + new turn, then send."""
    profile = req.agent.to_profile()
    history = [h.model_dump() for h in req.history]
    messages = profile.build_messages(history, req.message)
    result = await _send(req.config, messages)
    app_state.drain_logs()
    return to_response(result)
