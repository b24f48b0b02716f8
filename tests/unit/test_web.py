"""
Unit tests for the FastAPI web service.
"""
import httpx
import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def client():
    from web_app import app
    return TestClient(app)


@pytest.fixture
def use_gateway(make_gateway):
    """Install a mocked gateway on the shared app state."""
    from web.state import app_state

    def install(handler):
        gateway, transport = make_gateway(handler)
        app_state.gateway = gateway
        return transport

    yield install
    app_state.gateway = None


class TestCatalog:

    def test_status(self, client):
        response = client.get("/api/status")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_providers(self, client):
        data = client.get("/api/providers").json()

        assert {"openrouter", "huggingface", "local"} <= set(data["providers"])
        assert data["default_models"]["local"] == "llama3"
        assert data["default_endpoints"]["local"] == "http://localhost:11434/api/chat"


class TestChat:

    def test_chat_success(self, client, use_gateway, ollama_reply):
        use_gateway(lambda request: httpx.Response(200, json=ollama_reply))

        response = client.post("/api/chat", json={
            "provider": "local",
            "model": "llama3",
            "messages": [{"role": "user", "content": "hi"}],
        })

        assert response.status_code == 200
        assert response.json() == {"reply": "Hi from Ollama"}

    def test_missing_key_is_client_error(self, client, use_gateway):
        transport = use_gateway(lambda request: httpx.Response(200, json={}))

        response = client.post("/api/chat", json={
            "provider": "openrouter",
            "model": "any",
            "messages": [{"role": "user", "content": "hi"}],
        })

        assert response.status_code == 400
        assert response.json()["kind"] == "config"
        assert transport.requests == []

    def test_remote_error_is_bad_gateway(self, client, use_gateway):
        use_gateway(lambda request: httpx.Response(401, json={"error": {"message": "No auth"}}))

        response = client.post("/api/chat", json={
            "provider": "openrouter",
            "model": "any",
            "api_key": "bad",
            "messages": [{"role": "user", "content": "hi"}],
        })

        assert response.status_code == 502
        assert response.json() == {"error": "AI request failed: No auth", "kind": "remote"}

    def test_invalid_body(self, client):
        response = client.post("/api/chat", json={"provider": "local"})
        assert response.status_code == 422

    def test_configured_key_used_when_omitted(self, client, use_gateway, settings, openrouter_reply):
        settings.provider.api_key = "sk-env"
        transport = use_gateway(lambda request: httpx.Response(200, json=openrouter_reply))

        response = client.post("/api/chat", json={
            "provider": "openrouter",
            "model": "any",
            "messages": [{"role": "user", "content": "hi"}],
        })

        assert response.status_code == 200
        assert transport.requests[0].headers["Authorization"] == "Bearer sk-env"

    def test_configured_provider_used_when_omitted(self, client, use_gateway, settings, ollama_reply):
        settings.provider.provider = "local"
        settings.provider.model = "llama3:8b"
        settings.provider.local_endpoint = "http://gpu-box:11434/api/chat"
        transport = use_gateway(lambda request: httpx.Response(200, json=ollama_reply))

        response = client.post("/api/chat", json={"messages": [{"role": "user", "content": "hi"}]})

        assert response.status_code == 200
        sent = transport.requests[0]
        assert sent.url.host == "gpu-box"
        assert transport.bodies()[0]["model"] == "llama3:8b"

    def test_configured_key_not_sent_to_other_provider(self, client, use_gateway, settings, huggingface_reply):
        settings.provider.api_key = "sk-openrouter"
        transport = use_gateway(lambda request: httpx.Response(200, json=huggingface_reply))

        response = client.post("/api/chat", json={
            "provider": "huggingface",
            "messages": [{"role": "user", "content": "hi"}],
        })

        assert response.status_code == 200
        assert "Authorization" not in transport.requests[0].headers
        assert "Mixtral-8x7B-Instruct-v0.1" in str(transport.requests[0].url)


class TestAgentChat:

    def test_agent_chat_builds_window(self, client, use_gateway, ollama_reply):
        transport = use_gateway(lambda request: httpx.Response(200, json=ollama_reply))
        history = [
            {"sender": "user" if i % 2 == 0 else "ai", "content": f"m{i}"}
            for i in range(8)
        ]

        response = client.post("/api/agents/chat", json={
            "agent": {"name": "Tutor", "system_prompt": "Be patient."},
            "config": {"provider": "local", "model": "llama3"},
            "history": history,
            "message": "next",
        })

        assert response.status_code == 200
        sent = transport.bodies()[0]["messages"]
        assert sent[0] == {"role": "system", "content": "Be patient."}
        assert [m["content"] for m in sent[1:-1]] == ["m2", "m3", "m4", "m5", "m6", "m7"]
        assert sent[-1] == {"role": "user", "content": "next"}

    def test_agent_chat_without_config(self, client, use_gateway, settings, ollama_reply):
        settings.provider.provider = "local"
        settings.provider.model = "llama3"
        transport = use_gateway(lambda request: httpx.Response(200, json=ollama_reply))

        response = client.post("/api/agents/chat", json={
            "agent": {"name": "Tutor", "system_prompt": "Be patient."},
            "message": "hi",
        })

        assert response.status_code == 200
        assert transport.bodies()[0]["model"] == "llama3"


class TestOpenAPI:

    def test_chat_routes_document_bodies(self, client):
        schema = client.get("/openapi.json").json()

        assert {"ChatReply", "ChatFailure"} <= set(schema["components"]["schemas"])
        for path in ("/api/chat", "/api/agents/chat"):
            responses = schema["paths"][path]["post"]["responses"]
            assert responses["200"]["content"]["application/json"]["schema"]["$ref"].endswith("ChatReply")
            for status in ("400", "499", "502"):
                assert responses[status]["content"]["application/json"]["schema"]["$ref"].endswith("ChatFailure")


class TestLogs:

    def test_logs_cursor(self, client):
        from web.state import app_state

        app_state.log_queue.put('{"msg": "one"}')
        first = client.get("/api/logs").json()
        assert '{"msg": "one"}' in first["logs"]

        again = client.get("/api/logs", params={"since": first["next_cursor"]}).json()
        assert again["logs"] == []
