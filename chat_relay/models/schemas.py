from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["user", "assistant"]

DEFAULT_TITLE = "New Chat"
TITLE_LIMIT = 20


def _now_label() -> str:
    return datetime.now().strftime("%I:%M %p")


def make_title(text: str, limit: int = TITLE_LIMIT) -> str:
    """Derive a conversation title from the first user message."""
    if len(text) > limit:
        return text[:limit] + "..."
    return text


class ChatMessage(BaseModel):
    """A single chat message in the conversation.

    Frozen: the streaming assistant reply is replaced with a new instance
    on every fragment rather than mutated.

    Attributes:
        role: The speaker identifier (user or assistant).
        content: The message text.
    """

    model_config = ConfigDict(frozen=True)

    role: Role = Field(..., description="Message role: 'user' or 'assistant'")
    content: str = Field(..., description="The message content")


class ChatRequest(BaseModel):
    """Request payload for the relay endpoint.

    Attributes:
        messages: Full conversation history, oldest first.
    """

    messages: list[ChatMessage] = Field(..., description="Ordered conversation history")


class Conversation(BaseModel):
    """Display metadata for a conversation thread.

    Attributes:
        id: Unique, monotonically assigned identifier.
        title: Sidebar title, derived from the first user message.
        timestamp: Creation time label.
    """

    id: int = Field(..., ge=1)
    title: str = DEFAULT_TITLE
    timestamp: str = Field(default_factory=_now_label)


class ErrorResponse(BaseModel):
    """JSON body returned by the relay on failure.

    Attributes:
        error: Machine-readable error summary.
        details: Diagnostic text, present on server-side failures.
    """

    error: str
    details: str | None = None
