"""
Main entry point for the canvas_mcp_server package.
This allows running the package with `python -m canvas_mcp_server` or with
the `canvas-mcp-server` console script.
"""

import logging
import signal
import sys

import canvas_mcp_server.config as config
from canvas_mcp_server.server import handle_shutdown_signal, mcp

logger = logging.getLogger("canvas_mcp_server")


def main() -> None:
    missing = config.validate_config()
    if missing:
        logger.error(f"Missing required environment variables: {', '.join(missing)}")
        sys.exit(1)

    try:
        signal.signal(signal.SIGINT, handle_shutdown_signal)
        logger.info("Starting Canvas MCP server over stdio")
        mcp.run()
    except KeyboardInterrupt:
        logger.info("KeyboardInterrupt received. Exiting gracefully.")
        sys.exit(0)


if __name__ == "__main__":
    main()
