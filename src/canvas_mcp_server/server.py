"""
Canvas MCP Server

This module provides the main server for Canvas MCP Server.
It exposes the Canvas LMS REST API as MCP tools and resources, backed by a
single authenticated HTTP client shared by every request.
"""

import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from mcp.server.fastmcp import FastMCP

import canvas_mcp_server.config as config
from canvas_mcp_server.canvas_api_adapter import CanvasApiAdapter
from canvas_mcp_server.http_client import CanvasHttpClient, ClientOptions
from canvas_mcp_server.insights import InsightsService
from canvas_mcp_server.resources import register_resources
from canvas_mcp_server.tools.accounts import register_account_tools
from canvas_mcp_server.tools.assignments import register_assignment_tools
from canvas_mcp_server.tools.calendar import register_calendar_tools
from canvas_mcp_server.tools.courses import register_course_tools
from canvas_mcp_server.tools.discussions import register_discussion_tools
from canvas_mcp_server.tools.files import register_file_tools
from canvas_mcp_server.tools.health import register_health_tools
from canvas_mcp_server.tools.modules import register_module_tools
from canvas_mcp_server.tools.quizzes import register_quiz_tools
from canvas_mcp_server.tools.submissions import register_submission_tools
from canvas_mcp_server.tools.teacher import register_teacher_tools
from canvas_mcp_server.tools.users import register_user_tools

# Configure logging (stderr; stdout carries the MCP protocol)
logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger("canvas_mcp_server")


def handle_shutdown_signal(signum, frame):
    logger.info(f"Signal {signum} received, shutting down...")
    sys.exit(0)


def create_http_client() -> CanvasHttpClient:
    """Build the shared Canvas HTTP client from configuration."""
    options = ClientOptions(
        max_retries=config.MAX_RETRIES,
        retry_delay=config.RETRY_DELAY,
        timeout=config.TIMEOUT,
    )
    return CanvasHttpClient(config.API_TOKEN, config.DOMAIN, options)


@asynccontextmanager
async def app_lifespan(_: FastMCP) -> AsyncIterator[dict[str, Any]]:
    """Manage application lifecycle with resources"""
    logger.info(f"Initializing Canvas client for domain: {config.DOMAIN}")

    http_client = create_http_client()
    api_adapter = CanvasApiAdapter(http_client)
    insights = InsightsService(api_adapter)
    logger.info("Canvas API adapter initialized successfully")

    lifespan_context = {
        "http_client": http_client,
        "api_adapter": api_adapter,
        "insights": insights,
    }

    try:
        yield lifespan_context
    finally:
        logger.info("Shutting down Canvas MCP server")
        http_client.close()
        logger.info("Shutdown complete.")


# Create an MCP server with lifespan
mcp = FastMCP(
    "Canvas MCP Server",
    instructions="Access Canvas LMS courses, assignments, submissions, users and teacher analytics.",
    lifespan=app_lifespan,
)

# Register all tools
register_health_tools(mcp)
register_course_tools(mcp)
register_assignment_tools(mcp)
register_submission_tools(mcp)
register_file_tools(mcp)
register_calendar_tools(mcp)
register_user_tools(mcp)
register_module_tools(mcp)
register_discussion_tools(mcp)
register_quiz_tools(mcp)
register_account_tools(mcp)
register_teacher_tools(mcp)

# Register all resources
register_resources(mcp)


if __name__ == "__main__":
    mcp.run()
