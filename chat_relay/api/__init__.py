"""FastAPI endpoints for the chat relay.

Endpoints:
    - GET /health: Service health status
    - POST /api/chat: Stream an LLM reply to a conversation history
"""

from chat_relay.api.app import app, create_app

__all__ = ["app", "create_app"]
