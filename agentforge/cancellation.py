"""Cancellation token accepted by ProviderGateway.send_chat."""

import asyncio

from agentforge.exceptions import ChatCancelledError


class AsyncCancellationToken:
    """
    Cancellation token for in-flight chat requests.

    Usage:
        token = AsyncCancellationToken()
        task = asyncio.create_task(gateway.send_chat(..., cancel_token=token))

        # elsewhere, on the same event loop:
        token.cancel()

    ``cancel()`` must be called from the event loop thread; use
    ``loop.call_soon_threadsafe(token.cancel)`` from other threads.
    """

    def __init__(self):
        self._cancelled = asyncio.Event()

    def cancel(self):
        """Request cancellation."""
        self._cancelled.set()

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled.is_set()

    def reset(self):
        """Reset the token for reuse."""
        self._cancelled.clear()

    def raise_if_cancelled(self, message: str = "Request cancelled by caller"):
        if self.is_cancelled:
            raise ChatCancelledError(message)

    async def wait(self) -> None:
        """Block until cancellation is requested."""
        await self._cancelled.wait()
