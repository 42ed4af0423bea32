"""Client-side conversation core.

Responsibilities:
    - In-memory store of conversations and their transcripts
    - Send state machine folding streamed fragments into the transcript
    - HTTP streaming client for the relay endpoint

Independent of NiceGUI so the state machine can be driven from tests.
"""

from chat_relay.chat.client import RelayClient, RelayClientError
from chat_relay.chat.controller import ERROR_REPLY, ChatController, SendState
from chat_relay.chat.store import ConversationStore

__all__ = [
    "ERROR_REPLY",
    "ChatController",
    "ConversationStore",
    "RelayClient",
    "RelayClientError",
    "SendState",
]
