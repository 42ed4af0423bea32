"""LLM provider access for the relay.

Responsibilities:
    - Provider configuration from the environment
    - Conversion of chat records to Agno messages
    - Streaming token generation for a full conversation history

Leverages the Agno framework for the model client.
Maintains clean separation from the HTTP layer.
"""

from chat_relay.agent.chat_agent import AgentService, ProviderStreamError, get_agent_service
from chat_relay.agent.config import AgentConfig, get_agent_config

__all__ = [
    "AgentConfig",
    "AgentService",
    "ProviderStreamError",
    "get_agent_config",
    "get_agent_service",
]
