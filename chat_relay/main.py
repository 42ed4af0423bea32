"""Command-line entry point for the chat relay.

One uvicorn process serves the relay endpoint and the NiceGUI chat page.
The page's RelayClient posts back to API_BASE_URL, which must point at this
same server unless the relay is hosted elsewhere.
"""

import logging
import os
import sys

from dotenv import load_dotenv

# Load environment variables before any other imports that might need them
load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


def main() -> None:
    """Serve POST /api/chat, /health and the chat page on one port."""
    import uvicorn
    from nicegui import ui

    from chat_relay.api.app import create_app
    from chat_relay.ui.chat_page import API_BASE_URL, chat_page  # noqa: F401 - Registers the page

    app = create_app()
    ui.run_with(
        app,
        title="AI Assistant",
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "chat-relay-secret"),
    )

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    logger.info(f"Chat page on http://localhost:{port}/")
    logger.info(f"Chat page relays through {API_BASE_URL}/api/chat")

    uvicorn.run(app, host=host, port=port, log_level=os.getenv("LOG_LEVEL", "info").lower())


if __name__ == "__main__":
    main()
