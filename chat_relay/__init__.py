"""Chat Relay - multi-conversation chat UI over a streaming LLM relay.

Combines FastAPI for HTTP streaming, Agno for the provider client,
NiceGUI for visualization, and Pydantic for data validation.

Components:
    - api: Relay endpoint and error rendering
    - agent: LLM provider configuration and streaming
    - chat: Conversation store, send state machine and relay client
    - ui: Web interface for chat interactions
    - models: Message and conversation records
"""

__version__ = "0.1.0"
