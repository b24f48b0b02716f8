"""
Pytest configuration and shared fixtures.
"""
import json
import sys
from pathlib import Path

import httpx
import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))


# =============================================================================
# Settings fixtures
# =============================================================================

@pytest.fixture
def settings(monkeypatch, tmp_path):
    """Fresh settings isolated from the developer's env and config files."""
    import os
    from agentforge.config import Settings

    for key in list(os.environ):
        if key.startswith("AGENTFORGE_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))

    s = Settings()
    s.relay.url_template = "https://relay.test/raw?url={url}"
    return s


# =============================================================================
# HTTP fixtures
# =============================================================================

class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler):
        self.requests: list[httpx.Request] = []

        def record(request: httpx.Request):
            self.requests.append(request)
            return handler(request)

        super().__init__(record)

    def bodies(self) -> list[dict]:
        return [json.loads(r.content) for r in self.requests]


@pytest.fixture
def make_gateway(settings):
    """
    Build a gateway whose HTTP calls are answered by ``handler``.

    Returns (gateway, transport); ``transport.requests`` lists what was sent.
    """
    from agentforge.gateway import ProviderGateway

    def factory(handler):
        transport = RecordingTransport(handler)
        client = httpx.AsyncClient(transport=transport)
        return ProviderGateway(settings, client=client), transport

    return factory


# =============================================================================
# Message fixtures
# =============================================================================

@pytest.fixture
def messages():
    """A short system + user exchange."""
    return [
        {"role": "system", "content": "You are a helpful assistant."},
        {"role": "user", "content": "Hello!"},
    ]


@pytest.fixture
def openrouter_reply():
    return {
        "id": "gen-1",
        "choices": [{"message": {"role": "assistant", "content": "  Hi there!  "}}],
    }


@pytest.fixture
def huggingface_reply():
    return [{"generated_text": "\n Hi from HF \n"}]


@pytest.fixture
def ollama_reply():
    return {"model": "llama3", "message": {"role": "assistant", "content": " Hi from Ollama\n"}, "done": True}
