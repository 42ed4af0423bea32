"""Pydantic models shared by the relay and the chat client.

Models:
    - ChatMessage: Individual message in a conversation
    - ChatRequest: Relay request payload
    - Conversation: Conversation display metadata
    - ErrorResponse: Relay error body
"""

from chat_relay.models.schemas import (
    DEFAULT_TITLE,
    ChatMessage,
    ChatRequest,
    Conversation,
    ErrorResponse,
    Role,
    make_title,
)

__all__ = [
    "DEFAULT_TITLE",
    "ChatMessage",
    "ChatRequest",
    "Conversation",
    "ErrorResponse",
    "Role",
    "make_title",
]
