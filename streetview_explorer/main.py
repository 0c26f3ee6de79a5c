"""
Street View Explorer - fetches Street View imagery and builds virtual tour pages
for AI agents, served over MCP (stdio) or HTTP.
"""
import argparse
import logging
import platform
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import anyio

from streetview_explorer.config import LOG_FORMAT, LOG_SESSION_FORMAT, SERVER_VERSION, Settings
from streetview_explorer.dispatcher import ToolDispatcher
from streetview_explorer.server import create_server, run_stdio

logger = logging.getLogger(__name__)


def setup_logging(settings: Settings) -> Optional[Path]:
    """
    Log to stderr (stdout belongs to the MCP transport) and, when a log
    directory is configured, to a session-specific file as well.
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(console_handler)

    if not settings.log_dir:
        return None

    # Create session-specific log file
    settings.log_dir.mkdir(parents=True, exist_ok=True)
    session_timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = settings.log_dir / LOG_SESSION_FORMAT.format(timestamp=session_timestamp)

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))  # Same as terminal
    root_logger.addHandler(file_handler)

    logger.info(f"Session started - Log file: {log_file}")
    return log_file


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Street View Explorer tool server")
    parser.add_argument("--http", action="store_true", help="Serve the tools over HTTP instead of MCP stdio")
    parser.add_argument("--host", default="127.0.0.1", help="HTTP bind address (with --http)")
    parser.add_argument("--port", type=int, default=8000, help="HTTP port (with --http)")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    settings = Settings()
    setup_logging(settings)

    logger.info(
        f"Starting Street View Explorer {SERVER_VERSION} "
        f"(hasApiKey={settings.has_api_key}, python={platform.python_version()}, platform={sys.platform})"
    )
    if not settings.has_api_key:
        logger.warning(
            "GOOGLE_API_KEY not found. Please set your Google Maps API key in environment variables"
        )

    dispatcher = ToolDispatcher(settings)

    try:
        if args.http:
            import uvicorn
            from streetview_explorer.http_app import create_app

            uvicorn.run(create_app(dispatcher), host=args.host, port=args.port)
        else:
            anyio.run(run_stdio, create_server(dispatcher))
    except KeyboardInterrupt:
        logger.info("Received interrupt, shutting down")
    except Exception as e:
        logger.exception(f"Server stopped: {str(e)}")
        sys.exit(1)


if __name__ == "__main__":
    main()
