"""Main application entry point.

Serves the NiceGUI chat page. Environment variables are loaded from .env file.
"""

import logging
import os
import sys

from dotenv import load_dotenv

# Load environment variables before any other imports that might need them
load_dotenv()

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


def main() -> None:
    """Application entry point."""
    from nicegui import ui

    from src.client.config import get_client_config
    from src.ui.chat_page import chat_page  # noqa: F401 - Registers the page

    config = get_client_config()
    if not config.token:
        logger.warning("ASSISTANT_TOKEN is not set; requests will carry an empty bearer token")

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8080"))
    logger.info(f"Chat UI available at http://localhost:{port}/ (backend {config.endpoint_url})")

    ui.run(
        title="X-AI",
        favicon="🤖",
        host=host,
        port=port,
        dark=True,
        reload=False,
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "x-ai-chat-secret"),
    )


if __name__ in {"__main__", "__mp_main__"}:
    main()
