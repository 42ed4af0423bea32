"""HTTP client for the relay endpoint."""

import logging
from collections.abc import AsyncGenerator, AsyncIterator, Sequence
from contextlib import asynccontextmanager

import httpx

from chat_relay.models import ChatMessage

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 120.0


class RelayClientError(Exception):
    """Raised when the relay answers with a non-success status."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"HTTP error! status: {status_code}")
        self.status_code = status_code


class RelayClient:
    """Streams replies from ``POST /api/chat``.

    Args:
        base_url: Where the relay is served.
        timeout: Per-operation timeout in seconds.
        transport: Optional httpx transport, mainly for tests.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @asynccontextmanager
    async def open_stream(
        self, messages: Sequence[ChatMessage]
    ) -> AsyncGenerator[AsyncIterator[str]]:
        """Open a reply stream for a conversation.

        Entering the context waits for the response headers and raises
        ``RelayClientError`` on a non-2xx status. The yielded iterator
        produces decoded text fragments in arrival order.
        """
        payload = {"messages": [m.model_dump() for m in messages]}
        async with (
            httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout, transport=self._transport
            ) as client,
            client.stream("POST", "/api/chat", json=payload) as response,
        ):
            if not response.is_success:
                await response.aread()
                logger.warning(f"Relay returned {response.status_code}: {response.text[:200]}")
                raise RelayClientError(response.status_code)
            yield response.aiter_text()
