"""
Unit tests for provider adapters, the registry and the relay.
"""
import httpx
import pytest


class TestFlattenMessages:
    """Prompt flattening for the HuggingFace adapter."""

    def test_system_and_user(self):
        from agentforge.providers import flatten_messages

        prompt = flatten_messages([
            {"role": "system", "content": "A"},
            {"role": "user", "content": "B"},
        ])
        assert prompt == "System: A\nUser: B\nAssistant:"

    def test_assistant_and_unknown_role(self):
        from agentforge.providers import flatten_messages

        prompt = flatten_messages([
            {"role": "assistant", "content": "Hi"},
            {"role": "tool", "content": "raw output"},
        ])
        assert prompt == "Assistant: Hi\nraw output\nAssistant:"

    def test_empty(self):
        from agentforge.providers import flatten_messages

        assert flatten_messages([]) == "\nAssistant:"


class TestRequestBodies:
    """Each adapter builds the body its API expects."""

    def test_openrouter_request(self, settings, messages):
        from agentforge.providers import OpenRouterAdapter, ProviderConfig

        config = ProviderConfig("openrouter", "deepseek/deepseek-r1:free", api_key="sk-1")
        request = OpenRouterAdapter(settings).build_request(config, messages)

        assert request.body == {
            "model": "deepseek/deepseek-r1:free",
            "messages": messages,
            "temperature": 0.7,
            "max_tokens": 500,
        }
        assert request.headers["Authorization"] == "Bearer sk-1"
        assert request.headers["X-Title"] == "AgentForge Lite"
        assert request.headers["HTTP-Referer"] == settings.web.origin

    def test_huggingface_request_without_key(self, settings, messages):
        from agentforge.providers import HuggingFaceAdapter, ProviderConfig

        config = ProviderConfig("huggingface", "gpt2")
        request = HuggingFaceAdapter(settings).build_request(config, messages)

        assert "Authorization" not in request.headers
        assert request.body["parameters"] == {
            "max_new_tokens": 500,
            "temperature": 0.7,
            "return_full_text": False,
        }
        assert request.body["inputs"].endswith("\nAssistant:")

    def test_huggingface_request_with_key(self, settings, messages):
        from agentforge.providers import HuggingFaceAdapter, ProviderConfig

        config = ProviderConfig("huggingface", "gpt2", api_key="hf_abc")
        request = HuggingFaceAdapter(settings).build_request(config, messages)

        assert request.headers["Authorization"] == "Bearer hf_abc"

    def test_local_request(self, settings, messages):
        from agentforge.providers import LocalAdapter, ProviderConfig

        config = ProviderConfig("local", "llama3", api_key="ignored")
        request = LocalAdapter(settings).build_request(config, messages)

        assert request.url == "http://localhost:11434/api/chat"
        assert "Authorization" not in request.headers
        assert request.body == {
            "model": "llama3",
            "messages": messages,
            "stream": False,
            "options": {"temperature": 0.7, "num_predict": 500},
        }

    def test_settings_shape_requests(self, settings, messages):
        from agentforge.providers import LocalAdapter, ProviderConfig

        settings.chat.temperature = 0.2
        settings.chat.max_tokens = 64
        request = LocalAdapter(settings).build_request(ProviderConfig("local", "llama3"), messages)

        assert request.body["options"] == {"temperature": 0.2, "num_predict": 64}


class TestMessages:

    def test_normalize_mixed(self):
        from agentforge.providers import ChatMessage, normalize_messages

        result = normalize_messages([
            ChatMessage("system", "s"),
            {"role": "user", "content": "u", "extra": "dropped"},
        ])
        assert result == [
            {"role": "system", "content": "s"},
            {"role": "user", "content": "u"},
        ]


class TestProviderConfig:

    def test_default_local_endpoint(self):
        from agentforge.providers import ProviderConfig

        assert ProviderConfig("local", "llama3").local_endpoint == "http://localhost:11434/api/chat"

    def test_from_dict_accepts_ui_keys(self):
        from agentforge.providers import ProviderConfig

        config = ProviderConfig.from_dict({
            "provider": "local",
            "model": "llama3",
            "apiKey": "",
            "localEndpoint": "http://box:11434/api/chat",
        })
        assert config.api_key is None
        assert config.endpoint == "http://box:11434/api/chat"

    def test_redacted(self):
        from agentforge.providers import ProviderConfig

        config = ProviderConfig("openrouter", "m", api_key="sk-secret")
        assert config.redacted()["api_key"] == "[REDACTED]"
        assert config.api_key == "sk-secret"


class TestEnvelope:

    def test_nested_message(self):
        from agentforge.providers.base import envelope_message

        response = httpx.Response(400, json={"error": {"message": "bad model", "code": 400}})
        assert envelope_message(response) == "bad model"

    def test_no_envelope(self):
        from agentforge.providers.base import envelope_message

        assert envelope_message(httpx.Response(400, json={"detail": "x"})) is None
        assert envelope_message(httpx.Response(400, text="plain")) is None
        assert envelope_message(httpx.Response(400, json=["x"])) is None


class TestRegistry:

    def test_builtin_providers(self):
        from agentforge.providers import available_providers

        assert {"openrouter", "huggingface", "local"} <= set(available_providers())

    def test_unknown_provider(self):
        from agentforge import UnsupportedProviderError
        from agentforge.providers import get_adapter_class

        with pytest.raises(UnsupportedProviderError):
            get_adapter_class("nope")

    @pytest.mark.asyncio
    async def test_registered_provider_is_dispatched(self, make_gateway, messages):
        from agentforge.providers import PreparedRequest, ProviderAdapter, register_provider
        from agentforge.providers.base import _registry

        @register_provider
        class EchoAdapter(ProviderAdapter):
            name = "echo"
            label = "Echo"

            def build_request(self, config, messages):
                return PreparedRequest(url="https://echo.test/chat", body={"n": len(messages)})

            def parse_reply(self, data, config):
                return f"got {data['n']}"

        try:
            gateway, _ = make_gateway(lambda request: httpx.Response(200, content=request.content))
            assert await gateway.send_chat("echo", "any", messages) == "got 2"
        finally:
            _registry.pop("echo", None)

    def test_adapter_without_name_rejected(self):
        from agentforge.providers import ProviderAdapter, register_provider

        class Nameless(ProviderAdapter):
            def build_request(self, config, messages):
                raise NotImplementedError

            def parse_reply(self, data, config):
                raise NotImplementedError

        with pytest.raises(ValueError):
            register_provider(Nameless)


class TestRelay:

    def test_wrap_url_encodes_target(self):
        from agentforge.providers import Relay

        relay = Relay("https://api.allorigins.win/raw?url={url}")
        assert relay.wrap_url("https://openrouter.ai/api/v1/chat/completions") == (
            "https://api.allorigins.win/raw?url=https%3A%2F%2Fopenrouter.ai%2Fapi%2Fv1%2Fchat%2Fcompletions"
        )

    def test_template_required(self):
        from agentforge.providers import Relay

        with pytest.raises(ValueError):
            Relay("https://relay.example/")
        assert Relay.from_template("") is None

    def test_wrap_drops_credentials_unless_trusted(self):
        from agentforge.providers import PreparedRequest, Relay

        request = PreparedRequest(
            url="https://openrouter.ai/api/v1/chat/completions",
            body={"model": "m"},
            headers={"Content-Type": "application/json", "authorization": "Bearer sk-secret"},
        )

        wrapped = Relay("https://relay.example/?url={url}").wrap(request)
        assert wrapped.headers == {"Content-Type": "application/json"}
        assert wrapped.body == {"model": "m"}
        assert request.headers["authorization"] == "Bearer sk-secret"

        trusted = Relay.from_template("https://relay.example/?url={url}", trusted=True).wrap(request)
        assert trusted.headers["authorization"] == "Bearer sk-secret"

    def test_blocked_classification(self):
        from agentforge.providers import is_blocked_failure

        request = httpx.Request("POST", "https://x.test")
        assert is_blocked_failure(httpx.ConnectError("refused", request=request))
        assert not is_blocked_failure(httpx.ReadTimeout("slow", request=request))
        assert not is_blocked_failure(httpx.RemoteProtocolError("bad", request=request))
