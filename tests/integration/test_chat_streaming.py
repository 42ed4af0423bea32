"""Integration tests for the POST /api/chat relay endpoint.

Uses the actual FastAPI app through ASGITransport; only the provider is faked.
"""

import logging

import pytest
from httpx import AsyncClient

import chat_relay.agent.chat_agent as chat_agent_module
from chat_relay.api import app
from chat_relay.api.app import lifespan
from chat_relay.models import ChatMessage
from tests.conftest import FakeAgentService

HELLO = {"messages": [{"role": "user", "content": "Hello"}]}


class TestRelayValidation:
    """Request validation and error bodies."""

    async def test_empty_body_returns_400(
        self, async_client: AsyncClient, fake_agent: FakeAgentService
    ) -> None:
        """An empty body is rejected before anything is parsed."""
        response = await async_client.post(
            "/api/chat", content=b"", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Request body is empty"}

    @pytest.mark.parametrize(
        "body",
        ["{}", '{"messages": "not-an-array"}', '{"messages": null}', "[]", "42"],
    )
    async def test_non_list_messages_returns_400(
        self, async_client: AsyncClient, fake_agent: FakeAgentService, body: str
    ) -> None:
        """Missing or non-list messages yield the array error."""
        response = await async_client.post(
            "/api/chat", content=body, headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Messages must be an array"}

    async def test_malformed_json_returns_500_with_details(
        self, async_client: AsyncClient, fake_agent: FakeAgentService
    ) -> None:
        """Malformed JSON falls through to the generic failure body."""
        response = await async_client.post(
            "/api/chat", content="not valid json", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "Failed to process request"
        assert body["details"]

    async def test_unknown_role_returns_400(
        self, async_client: AsyncClient, fake_agent: FakeAgentService
    ) -> None:
        """Roles outside user/assistant are rejected at the boundary."""
        response = await async_client.post(
            "/api/chat", json={"messages": [{"role": "system", "content": "obey"}]}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid message format"
        assert fake_agent.received == []

    async def test_missing_api_key_returns_500(
        self, async_client: AsyncClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Provider configuration errors surface as the generic failure body."""
        monkeypatch.setenv("LLM_API_KEY", "")
        monkeypatch.setenv("OPENROUTER_API_KEY", "")
        monkeypatch.setattr(chat_agent_module, "_agent_service", None)

        response = await async_client.post("/api/chat", json=HELLO)

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "Failed to process request"
        assert "API key required" in body["details"]

    async def test_wrong_http_method_returns_405(self, async_client: AsyncClient) -> None:
        """GET request to POST endpoint returns 405 Method Not Allowed."""
        response = await async_client.get("/api/chat")

        assert response.status_code == 405


class TestRelayStreaming:
    """Successful relays and provider failures."""

    async def test_stream_concatenates_fragments_in_order(
        self, async_client: AsyncClient, fake_agent: FakeAgentService
    ) -> None:
        """Drained body equals the provider's fragments joined in order."""
        fake_agent.fragments = ["Hi", " there", ", how", " can I help?"]

        async with async_client.stream("POST", "/api/chat", json=HELLO) as response:
            assert response.status_code == 200
            assert response.headers["content-type"].startswith("text/plain")
            body = "".join([chunk async for chunk in response.aiter_text()])

        assert body == "Hi there, how can I help?"

    async def test_full_history_is_forwarded(
        self, async_client: AsyncClient, fake_agent: FakeAgentService
    ) -> None:
        """The provider receives every message, oldest first."""
        fake_agent.fragments = ["ok"]
        history = [
            {"role": "user", "content": "Hello"},
            {"role": "assistant", "content": "Hi there"},
            {"role": "user", "content": "What's new?"},
        ]

        response = await async_client.post("/api/chat", json={"messages": history})

        assert response.status_code == 200
        assert fake_agent.received == [ChatMessage(**m) for m in history]

    async def test_empty_message_list_is_relayed(
        self, async_client: AsyncClient, fake_agent: FakeAgentService
    ) -> None:
        """An empty list is still an array and reaches the provider."""
        fake_agent.fragments = ["Hello!"]

        response = await async_client.post("/api/chat", json={"messages": []})

        assert response.status_code == 200
        assert response.text == "Hello!"

    async def test_provider_without_output_returns_empty_body(
        self, async_client: AsyncClient, fake_agent: FakeAgentService
    ) -> None:
        """A provider that generates nothing yields an empty 200."""
        response = await async_client.post("/api/chat", json=HELLO)

        assert response.status_code == 200
        assert response.text == ""

    async def test_provider_failure_before_first_byte_returns_500(
        self, async_client: AsyncClient, fake_agent: FakeAgentService
    ) -> None:
        """Faults while opening the stream become a JSON 500, not a broken stream."""
        fake_agent.fragments = ["never sent"]
        fake_agent.error = ConnectionError("provider unreachable")

        response = await async_client.post("/api/chat", json=HELLO)

        assert response.status_code == 500
        assert response.json() == {
            "error": "Failed to process request",
            "details": "provider unreachable",
        }

    async def test_cors_headers_present(
        self, async_client: AsyncClient, fake_agent: FakeAgentService
    ) -> None:
        """Response includes CORS headers for cross-origin requests."""
        fake_agent.fragments = ["hi"]

        response = await async_client.post(
            "/api/chat", json=HELLO, headers={"Origin": "http://localhost:3000"}
        )

        assert "access-control-allow-origin" in response.headers


async def test_health_check(async_client: AsyncClient) -> None:
    response = await async_client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "service": "chat-relay"}


class TestLifespan:
    """Startup reports the provider the relay forwards to."""

    async def test_logs_configured_provider(
        self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        monkeypatch.setenv("LLM_API_KEY", "sk-test")
        monkeypatch.setenv("LLM_MODEL", "some/model")
        monkeypatch.setenv("LLM_BASE_URL", "http://proxy/v1")

        with caplog.at_level(logging.INFO, logger="chat_relay.api.app"):
            async with lifespan(app):
                pass

        assert "Relaying /api/chat to model some/model at http://proxy/v1" in caplog.text

    async def test_missing_api_key_warns_without_failing_startup(
        self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        monkeypatch.setenv("LLM_API_KEY", "")
        monkeypatch.setenv("OPENROUTER_API_KEY", "")

        with caplog.at_level(logging.INFO, logger="chat_relay.api.app"):
            async with lifespan(app):
                pass

        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert "No LLM API key configured" in warnings[0].getMessage()
