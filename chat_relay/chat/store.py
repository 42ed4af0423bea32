"""In-memory conversation store.

Holds conversation metadata in display order (newest first) and one
transcript per conversation id. Lives as long as the page that owns it;
nothing is persisted.
"""

import itertools
import logging
from collections.abc import Iterable

from chat_relay.models import ChatMessage, Conversation

logger = logging.getLogger(__name__)


class ConversationStore:
    """Conversation metadata and transcripts keyed by conversation id.

    Ids come from a counter and are never reused, even after deletion.
    Every id in the display order has a transcript entry.
    """

    def __init__(self, create_default: bool = True) -> None:
        """Initialize the store.

        Args:
            create_default: Start with one empty conversation.
        """
        self._ids = itertools.count(1)
        self._conversations: list[Conversation] = []
        self._transcripts: dict[int, list[ChatMessage]] = {}
        if create_default:
            self.create()

    def __len__(self) -> int:
        return len(self._conversations)

    def __contains__(self, conversation_id: object) -> bool:
        return conversation_id in self._transcripts

    @property
    def conversations(self) -> list[Conversation]:
        """Conversations in display order, most recently created first."""
        return list(self._conversations)

    def first_id(self) -> int | None:
        return self._conversations[0].id if self._conversations else None

    def get(self, conversation_id: int) -> Conversation | None:
        return next((c for c in self._conversations if c.id == conversation_id), None)

    def create(self) -> Conversation:
        """Create an empty conversation at the front of the display order."""
        conversation = Conversation(id=next(self._ids))
        self._conversations.insert(0, conversation)
        self._transcripts[conversation.id] = []
        logger.debug(f"Created conversation {conversation.id}")
        return conversation

    def delete(self, conversation_id: int) -> bool:
        """Remove a conversation and its transcript.

        Returns:
            Whether the conversation existed.
        """
        if conversation_id not in self._transcripts:
            return False
        self._conversations = [c for c in self._conversations if c.id != conversation_id]
        del self._transcripts[conversation_id]
        logger.debug(f"Deleted conversation {conversation_id}")
        return True

    def messages(self, conversation_id: int) -> list[ChatMessage]:
        """Return a copy of a transcript, empty if the id is unknown."""
        return list(self._transcripts.get(conversation_id, []))

    def save(self, conversation_id: int, messages: Iterable[ChatMessage]) -> bool:
        """Replace a conversation's transcript.

        Writes to a deleted (or never created) id are dropped so a late
        stream cannot resurrect a conversation.

        Returns:
            Whether the write was applied.
        """
        if conversation_id not in self._transcripts:
            logger.debug(f"Dropped write to unknown conversation {conversation_id}")
            return False
        self._transcripts[conversation_id] = list(messages)
        return True

    def set_title(self, conversation_id: int, title: str) -> None:
        self._conversations = [
            c.model_copy(update={"title": title}) if c.id == conversation_id else c
            for c in self._conversations
        ]
