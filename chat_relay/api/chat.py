"""Chat relay endpoint.

Forwards the conversation history to the LLM provider and re-emits the
generated text as a chunked plain-text response.
"""

import json
import logging
from collections.abc import AsyncGenerator, AsyncIterator

from fastapi import APIRouter, Request
from fastapi.responses import StreamingResponse
from pydantic import ValidationError

from chat_relay.agent.chat_agent import get_agent_service
from chat_relay.api.errors import (
    EmptyBodyError,
    InvalidMessageFormatError,
    InvalidMessagesError,
    ProviderFailure,
    RelayError,
)
from chat_relay.models import ChatRequest, ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])


def parse_chat_request(body: bytes) -> ChatRequest:
    """Validate a raw request body.

    Args:
        body: The undecoded request body.

    Returns:
        The validated chat request.

    Raises:
        EmptyBodyError: Body is empty.
        InvalidMessagesError: ``messages`` is missing or not a list.
        InvalidMessageFormatError: A message has a bad role or content.
        ValueError: Body is not valid JSON (left to the generic handler).
    """
    if not body:
        raise EmptyBodyError()

    payload = json.loads(body)
    messages = payload.get("messages") if isinstance(payload, dict) else None
    if not isinstance(messages, list):
        raise InvalidMessagesError()

    try:
        return ChatRequest.model_validate({"messages": messages})
    except ValidationError as e:
        raise InvalidMessageFormatError(str(e)) from e


async def _first_fragment(fragments: AsyncIterator[str]) -> str | None:
    try:
        return await anext(fragments)
    except StopAsyncIteration:
        return None


async def _relay(first: str | None, fragments: AsyncIterator[str]) -> AsyncGenerator[str]:
    if first is None:
        return
    yield first
    try:
        async for fragment in fragments:
            yield fragment
    except Exception:
        # Headers are already sent; the client sees a truncated body.
        logger.exception("Provider stream failed mid-response")
        raise


@router.post(
    "/chat",
    response_class=StreamingResponse,
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def chat(request: Request) -> StreamingResponse:
    """Relay a conversation to the LLM provider.

    Expects ``{"messages": [{"role", "content"}, ...]}``. The provider is
    asked for its first fragment before the response starts, so failures
    while opening the stream are still reported as JSON.

    Returns:
        Chunked ``text/plain`` stream of generated text.

    Raises:
        400: Empty body, missing/non-list messages, malformed message.
        500: Anything else, with ``details``.
    """
    try:
        body = await request.body()
        chat_request = parse_chat_request(body)
        fragments = get_agent_service().stream_reply(chat_request.messages)
        first = await _first_fragment(fragments)
    except RelayError:
        raise
    except Exception as e:
        logger.exception("Error in chat route")
        raise ProviderFailure(str(e) or type(e).__name__) from e

    logger.info(f"Streaming reply for conversation of {len(chat_request.messages)} messages")
    return StreamingResponse(_relay(first, fragments), media_type="text/plain")
