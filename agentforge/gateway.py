"""ProviderGateway: one send_chat entry point over every registered provider."""

import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Awaitable, Iterable, Optional

import httpx

from agentforge.cancellation import AsyncCancellationToken
from agentforge.config import Settings, get_settings
from agentforge.exceptions import ChatCancelledError, ProviderError, get_error_kind
from agentforge.logging import get_logger
from agentforge.providers import (
    MessageLike,
    PreparedRequest,
    ProviderAdapter,
    ProviderConfig,
    Relay,
    get_adapter_class,
    is_blocked_failure,
    normalize_messages,
)

logger = get_logger("gateway")

ERROR_PREFIX = "AI request failed"


@dataclass
class ChatResult:
    """Outcome of a chat call: a reply, or an error message plus its kind."""

    reply: Optional[str] = None
    error: Optional[str] = None
    kind: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, reply: str) -> "ChatResult":
        return cls(reply=reply)

    @classmethod
    def failure(cls, error: Exception) -> "ChatResult":
        return cls(error=str(error), kind=get_error_kind(error))

    def to_dict(self) -> dict[str, Any]:
        if self.ok:
            return {"reply": self.reply}
        return {"error": self.error, "kind": self.kind}


class ProviderGateway:
    """
    Dispatches chat requests to provider adapters.

    The gateway holds no per-request state: each call builds its own body
    and reads its own response, so one instance may serve concurrent calls.

    Args:
        settings: Settings for request shaping and the relay. Defaults to
            the global settings.
        client: Optional httpx.AsyncClient to reuse. The caller owns it;
            without one a client is opened and closed per call.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.settings = settings or get_settings()
        self.client = client
        self.relay = Relay.from_template(
            self.settings.relay.url_template, trusted=self.settings.relay.trusted
        )

    def adapter_for(self, provider: str) -> ProviderAdapter:
        """Instantiate the adapter registered for ``provider``."""
        return get_adapter_class(provider)(self.settings)

    async def send_chat(
        self,
        provider: str,
        model: str,
        messages: Iterable[MessageLike],
        api_key: str = "",
        local_endpoint: str = "",
        cancel_token: Optional[AsyncCancellationToken] = None,
    ) -> str:
        """
        Send a chat to ``provider`` and return the assistant reply.

        Args:
            provider: Provider id ("openrouter", "huggingface", "local").
            model: Model id understood by the provider.
            messages: Chronological role/content messages.
            api_key: Required for openrouter, optional for huggingface.
            local_endpoint: Chat URL for the local provider.
            cancel_token: Optional token that aborts the call when cancelled.

        Returns:
            The reply text, trimmed.

        Raises:
            ProviderError: Any failure, as its specific subclass.
        """
        config = ProviderConfig(
            provider=provider,
            model=model,
            api_key=api_key or None,
            endpoint=local_endpoint or None,
        )
        return await self.send_chat_config(config, messages, cancel_token=cancel_token)

    async def send_chat_config(
        self,
        config: ProviderConfig,
        messages: Iterable[MessageLike],
        cancel_token: Optional[AsyncCancellationToken] = None,
    ) -> str:
        """Same as send_chat, taking a ProviderConfig."""
        try:
            if cancel_token is None:
                return await self._dispatch(config, messages)
            cancel_token.raise_if_cancelled()
            return await self._run_cancellable(self._dispatch(config, messages), cancel_token)
        except ProviderError as e:
            logger.error("AI provider error", provider=config.provider, kind=e.kind, error=e.message)
            raise e.with_prefix(ERROR_PREFIX) from e
        except Exception as e:
            logger.error("Unexpected provider failure", provider=config.provider, error=repr(e))
            raise ProviderError(f"{ERROR_PREFIX}: {e}") from e

    async def try_send_chat(self, *args: Any, **kwargs: Any) -> ChatResult:
        """Like send_chat, but returns a ChatResult instead of raising."""
        try:
            return ChatResult.success(await self.send_chat(*args, **kwargs))
        except ProviderError as e:
            return ChatResult.failure(e)

    def send_chat_sync(self, *args: Any, **kwargs: Any) -> str:
        """Blocking send_chat for callers without an event loop."""
        return asyncio.run(self.send_chat(*args, **kwargs))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _dispatch(self, config: ProviderConfig, messages: Iterable[MessageLike]) -> str:
        adapter = self.adapter_for(config.provider)
        adapter.validate(config)

        payload = normalize_messages(messages)
        request = adapter.build_request(config, payload)
        logger.request(
            config.provider, config.model, messages=len(payload), config=config.redacted()
        )

        async with self._session() as client:
            try:
                response = await self._post(client, request)
            except httpx.TransportError as exc:
                if not (adapter.supports_relay and is_blocked_failure(exc)):
                    raise adapter.transport_error(exc, config) from exc
                reply = await self._relay(client, adapter, config, request, exc)
            else:
                reply = adapter.read_response(response, config)

        logger.reply(config.provider, chars=len(reply))
        return reply

    async def _relay(
        self,
        client: httpx.AsyncClient,
        adapter: ProviderAdapter,
        config: ProviderConfig,
        request: PreparedRequest,
        cause: httpx.TransportError,
    ) -> str:
        """Retry a blocked request exactly once through the relay."""
        if self.relay is None:
            raise adapter.relay_error(config) from cause

        logger.fallback(config.provider, error=cause.__class__.__name__)
        try:
            response = await self._post(client, self.relay.wrap(request))
            return adapter.read_response(response, config)
        except (httpx.TransportError, ProviderError) as e:
            logger.warn("Relay fallback failed", provider=config.provider, error=str(e))
            raise adapter.relay_error(config) from e

    async def _post(self, client: httpx.AsyncClient, request: PreparedRequest) -> httpx.Response:
        return await client.post(request.url, json=request.body, headers=request.headers)

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[httpx.AsyncClient]:
        if self.client is not None:
            yield self.client
            return
        async with httpx.AsyncClient(timeout=self.settings.chat.request_timeout) as client:
            yield client

    async def _run_cancellable(self, coro: Awaitable[str], token: AsyncCancellationToken) -> str:
        request_task = asyncio.ensure_future(coro)
        waiter = asyncio.ensure_future(token.wait())
        try:
            done, _ = await asyncio.wait(
                {request_task, waiter}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            waiter.cancel()
            if not request_task.done():
                request_task.cancel()

        if request_task in done:
            return request_task.result()

        await asyncio.gather(request_task, return_exceptions=True)
        raise ChatCancelledError("Request cancelled by caller")


async def send_chat(
    provider: str,
    model: str,
    messages: Iterable[MessageLike],
    api_key: str = "",
    local_endpoint: str = "",
    cancel_token: Optional[AsyncCancellationToken] = None,
) -> str:
    """Module-level shortcut using a gateway over the global settings."""
    return await ProviderGateway().send_chat(
        provider, model, messages, api_key, local_endpoint, cancel_token=cancel_token
    )
