"""Web server entry point for the AuthGate gateway"""

import sys

import uvicorn

# Load environment variables from .env file BEFORE importing anything else
from dotenv import load_dotenv
load_dotenv()

from authgate.app import AuthGateApp
from authgate.utils.exceptions import ConfigError
from authgate.utils.logger import get_logger
from web.main import create_app

logger = get_logger(__name__)


def main() -> None:
    try:
        gateway = AuthGateApp()
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)

    server = gateway.settings.server
    logger.info(
        "Starting server",
        name=gateway.name,
        version=gateway.version,
        host=server.host,
        port=server.port,
    )

    # uvicorn handles SIGINT/SIGTERM and drains in-flight requests before exiting
    uvicorn.run(
        create_app(gateway),
        host=server.host,
        port=server.port,
        log_config=None,  # keep our structlog handlers
        access_log=False,
    )
    logger.info("Server stopped")


if __name__ == "__main__":
    main()
