"""FastAPI application serving the chat relay endpoint.

Registers the relay router, renders RelayError subclasses as JSON bodies
and reports the configured provider at startup.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError

from chat_relay.agent.config import get_agent_config
from chat_relay.api.chat import router as chat_router
from chat_relay.api.errors import RelayError, relay_error_handler

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Report which provider the relay will forward to.

    A missing API key does not stop startup: ``/api/chat`` answers 500 with
    the configuration error until the key is set.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application while it runs.
    """
    try:
        config = get_agent_config()
    except ValidationError:
        logger.warning("No LLM API key configured; /api/chat will answer 500 until one is set")
    else:
        logger.info(f"Relaying /api/chat to model {config.model_name} at {config.base_url}")
    yield
    logger.info("Relay stopped")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    application = FastAPI(
        title="Chat Relay API",
        description=(
            "Relays a chat transcript to an LLM provider and streams the "
            "generated reply back as plain text."
        ),
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["*"],
    )

    application.add_exception_handler(RelayError, relay_error_handler)
    application.include_router(chat_router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Check service health status."""
        return {"status": "healthy", "service": "chat-relay"}

    return application


app = create_app()
