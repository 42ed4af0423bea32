"""Pytest fixtures and shared test configuration.

Fixtures:
    - async_client: HTTPX client for API testing
    - fake_agent: Provider stand-in patched into the relay route
"""

from collections.abc import AsyncGenerator, Iterator, Sequence
from unittest.mock import patch

import pytest
from httpx import ASGITransport, AsyncClient

from chat_relay.api import app
from chat_relay.models import ChatMessage


class FakeAgentService:
    """Replays canned fragments instead of calling the provider.

    Attributes:
        fragments: Text fragments to stream, in order.
        error: Exception to raise, if any.
        fail_at: Fragment index at which ``error`` is raised.
        received: Messages passed to the last ``stream_reply`` call.
    """

    def __init__(self) -> None:
        self.fragments: list[str] = []
        self.error: Exception | None = None
        self.fail_at = 0
        self.received: list[ChatMessage] = []

    async def stream_reply(self, messages: Sequence[ChatMessage]) -> AsyncGenerator[str]:
        self.received = list(messages)
        for index, fragment in enumerate(self.fragments):
            if self.error is not None and index == self.fail_at:
                raise self.error
            yield fragment
        if self.error is not None and self.fail_at >= len(self.fragments):
            raise self.error


@pytest.fixture
def fake_agent() -> Iterator[FakeAgentService]:
    """Patch the relay route to use a fake agent service.

    Yields:
        The fake service; tests set its fragments or error.
    """
    service = FakeAgentService()
    with patch("chat_relay.api.chat.get_agent_service", return_value=service):
        yield service


@pytest.fixture
async def async_client() -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
