"""Agno-backed provider wrapper for the chat relay.

The relay owns no conversation state: the browser sends the full transcript
on every request, so the agent runs without storage, history or instructions
and simply streams the model's continuation of the given messages.
"""

import logging
from collections.abc import AsyncGenerator, Sequence

from agno.agent import Agent
from agno.models.message import Message
from agno.models.openai import OpenAIChat

from chat_relay.agent.config import AgentConfig, get_agent_config
from chat_relay.models import ChatMessage

logger = logging.getLogger(__name__)

# Agno run event names
_RUN_CONTENT = "RunContent"
_RUN_ERROR = "RunError"


class ProviderStreamError(Exception):
    """Raised when the provider reports a failed run mid-stream."""


class AgentService:
    """Service wrapping a stateless Agno agent.

    Wraps Agno's Agent with:
    - A fixed model identifier on an OpenAI-compatible endpoint
    - Conversion of chat records to Agno messages
    - A plain text fragment stream for the relay endpoint
    """

    def __init__(self, config: AgentConfig | None = None) -> None:
        """Initialize the agent service.

        Args:
            config: Optional agent configuration.
                    Loads from environment if not provided.
        """
        self._config = config or get_agent_config()
        self._agent = self._create_agent()

    def _create_agent(self) -> Agent:
        """Create the Agno agent instance.

        Returns:
            Agent with the configured model and no storage or instructions.
        """
        model = OpenAIChat(
            id=self._config.model_name,
            api_key=self._config.api_key,
            base_url=self._config.base_url,
        )
        return Agent(model=model)

    @staticmethod
    def to_agent_messages(messages: Sequence[ChatMessage]) -> list[Message]:
        """Convert chat records into Agno messages, preserving order."""
        return [Message(role=m.role, content=m.content) for m in messages]

    async def stream_reply(
        self,
        messages: Sequence[ChatMessage],
    ) -> AsyncGenerator[str]:
        """Stream the model's reply to a conversation.

        Args:
            messages: Full conversation history, oldest first.

        Yields:
            Generated text fragments in arrival order.

        Raises:
            ProviderStreamError: If the provider reports a run error.
        """
        response_stream = self._agent.arun(
            self.to_agent_messages(messages),
            stream=True,
        )

        async for chunk in response_stream:
            event = getattr(chunk, "event", None)
            if event == _RUN_ERROR:
                raise ProviderStreamError(str(getattr(chunk, "content", "") or "Provider run failed"))
            if event != _RUN_CONTENT:
                continue
            content = getattr(chunk, "content", None)
            if isinstance(content, str) and content:
                yield content


# Module-level singleton instance
_agent_service: AgentService | None = None


def get_agent_service() -> AgentService:
    """Get or create the global agent service.

    Returns:
        The AgentService instance.
    """
    global _agent_service
    if _agent_service is None:
        _agent_service = AgentService()
    return _agent_service
