"""Conversation state machine driving the chat page.

A send moves through ``IDLE -> SENDING -> STREAMING -> SETTLED``. Every
store write made by a send is addressed to the conversation id captured
when the send started, so switching conversations mid-stream never blends
transcripts; the page only re-renders changes to the active conversation.
"""

import logging
from collections.abc import AsyncIterator, Callable, Sequence
from contextlib import AbstractAsyncContextManager
from enum import Enum
from typing import Protocol

from chat_relay.chat.store import ConversationStore
from chat_relay.models import ChatMessage, make_title

logger = logging.getLogger(__name__)

ERROR_REPLY = "Sorry, there was an error processing your request. Please try again."


class SendState(str, Enum):
    """Lifecycle of a single send operation."""

    IDLE = "idle"
    SENDING = "sending"
    STREAMING = "streaming"
    SETTLED = "settled"


class ReplySource(Protocol):
    """Anything that can stream a reply, such as RelayClient."""

    def open_stream(
        self, messages: Sequence[ChatMessage]
    ) -> AbstractAsyncContextManager[AsyncIterator[str]]: ...


ChangeListener = Callable[[int], None]


class ChatController:
    """Owns the active selection and the send-in-flight flag.

    Args:
        store: Conversation store to read and write.
        client: Source of streamed replies, normally a RelayClient.
        on_change: Called with a conversation id after its transcript or
            metadata changed.
    """

    def __init__(
        self,
        store: ConversationStore,
        client: ReplySource,
        on_change: ChangeListener | None = None,
    ) -> None:
        self.store = store
        self.client = client
        self.on_change = on_change
        self.active_id: int | None = store.first_id()
        self.is_sending = False
        self.sending_id: int | None = None
        self.state = SendState.IDLE
        self.last_error: str | None = None

    @property
    def messages(self) -> list[ChatMessage]:
        """Displayed transcript: the active conversation's, or empty."""
        if self.active_id is None:
            return []
        return self.store.messages(self.active_id)

    def _notify(self, conversation_id: int) -> None:
        if self.on_change is not None:
            self.on_change(conversation_id)

    def _write_reply(self, conversation_id: int, pending: list[ChatMessage], reply: str) -> None:
        self.store.save(conversation_id, [*pending, ChatMessage(role="assistant", content=reply)])
        self._notify(conversation_id)

    def can_send(self, text: str) -> bool:
        """Whether 'text' would be sent: non-blank and no send in flight."""
        return bool(text.strip()) and not self.is_sending

    async def send(self, text: str) -> bool:
        """Send a user message and stream the assistant reply.

        Args:
            text: Raw input; ignored if blank.

        Returns:
            False if nothing was sent (blank input or a send in flight).
            True once the send has settled, successfully or not.
        """
        if not self.can_send(text):
            return False

        if self.active_id is None:
            self.new_chat()
        conversation_id = self.active_id
        if conversation_id is None:
            logger.error("No conversation to send into")
            return False

        self.is_sending = True
        self.sending_id = conversation_id
        self.state = SendState.SENDING
        self.last_error = None
        history = self.store.messages(conversation_id)
        pending = [*history, ChatMessage(role="user", content=text)]
        try:
            if not any(m.role == "user" for m in history):
                self.store.set_title(conversation_id, make_title(text))
            self.store.save(conversation_id, pending)
            self._notify(conversation_id)

            async with self.client.open_stream(pending) as fragments:
                self.state = SendState.STREAMING
                reply = ""
                self._write_reply(conversation_id, pending, reply)
                async for fragment in fragments:
                    reply += fragment
                    self._write_reply(conversation_id, pending, reply)
            logger.info(f"Conversation {conversation_id}: reply settled ({len(reply)} chars)")
        except Exception as e:
            logger.exception(f"Conversation {conversation_id}: send failed")
            self.last_error = str(e) or type(e).__name__
            self._write_reply(conversation_id, pending, ERROR_REPLY)
        finally:
            self.is_sending = False
            self.sending_id = None
            self.state = SendState.SETTLED
        return True

    def new_chat(self) -> int:
        """Start an empty conversation and make it active.

        Returns:
            The new conversation id.
        """
        if self.active_id is not None and self.messages:
            self.store.save(self.active_id, self.messages)
        conversation = self.store.create()
        self.active_id = conversation.id
        self._notify(conversation.id)
        return conversation.id

    def switch(self, conversation_id: int) -> None:
        """Make a conversation active; never creates one."""
        if conversation_id == self.active_id:
            return
        self.active_id = conversation_id
        self._notify(conversation_id)

    def delete(self, conversation_id: int) -> None:
        """Delete a conversation, moving the selection if it was active."""
        if not self.store.delete(conversation_id):
            return
        if self.active_id == conversation_id:
            self.active_id = self.store.first_id()
        self._notify(conversation_id)
