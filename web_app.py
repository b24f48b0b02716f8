"""
AgentForge Web Service - Main FastAPI Application

Same-origin HTTP surface for the browser UI. The UI never calls provider
APIs directly; it posts here and the gateway makes the request server-side.
"""

from contextlib import asynccontextmanager
from pathlib import Path

import httpx
from dotenv import load_dotenv
from fastapi import FastAPI

from agentforge import __version__
from agentforge.config import get_settings
from agentforge.gateway import ProviderGateway
from agentforge.logging import configure_logging, get_logger, set_global_queue
from web.models import AgentChatRequest, ChatFailure, ChatReply, ChatRequest
from web.services import handle_agent_chat, handle_chat, provider_catalog
from web.state import app_state

logger = get_logger("web")


# ============================================================================
# Application Lifecycle
# ============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown lifecycle."""
    load_dotenv(Path.cwd() / ".env")
    settings = get_settings()
    settings.reload()

    configure_logging(settings.log.level, settings.log.json_format)
    set_global_queue(app_state.log_queue)

    client = httpx.AsyncClient(timeout=settings.chat.request_timeout)
    app_state.gateway = ProviderGateway(settings, client=client)
    logger.info("AgentForge web service starting", **settings.to_dict()["web"])

    yield

    await client.aclose()
    app_state.gateway = None
    set_global_queue(None)
    logger.info("AgentForge web service stopped")


app = FastAPI(title="AgentForge Lite", version=__version__, lifespan=lifespan)

# Failure bodies share one shape; the status follows the error kind
CHAT_FAILURES = {
    400: {"model": ChatFailure, "description": "Invalid provider or missing credentials"},
    499: {"model": ChatFailure, "description": "Request cancelled"},
    502: {"model": ChatFailure, "description": "Provider, format or network failure"},
    500: {"model": ChatFailure, "description": "Unexpected failure"},
}


# ============================================================================
# Status & Catalog
# ============================================================================

@app.get("/api/status")
async def check_status():
    """Liveness check."""
    return {"status": "ok", "version": __version__}


@app.get("/api/providers")
async def get_providers():
    """Registered providers with their default models and endpoints."""
    return provider_catalog()


# ============================================================================
# Chat API
# ============================================================================

@app.post("/api/chat", response_model=ChatReply, responses=CHAT_FAILURES)
async def chat(request: ChatRequest):
    """Send a prepared message list to the selected provider."""
    return await handle_chat(request)


@app.post("/api/agents/chat", response_model=ChatReply, responses=CHAT_FAILURES)
async def agent_chat(request: AgentChatRequest):
    """Send one user turn for an agent, with its recent history."""
    return await handle_agent_chat(request)


# ============================================================================
# Logs API
# ============================================================================

@app.get("/api/logs")
async def get_logs(since: int = 0):
    """Get logs since the specified cursor position."""
    app_state.drain_logs()
    current = app_state.removed_log_count + len(app_state.logs)
    start = max(since - app_state.removed_log_count, 0)
    if since >= current:
        return {"logs": [], "next_cursor": current}
    return {"logs": app_state.logs[start:], "next_cursor": current}


# ============================================================================
# Main Entry Point
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(app, host=settings.web.host, port=settings.web.port)
