"""
Canvas MCP Health Tools

This module contains the connectivity check tool.
"""

import logging
from typing import Any

from mcp.server.fastmcp import Context, FastMCP

from canvas_mcp_server.utils.context import run_accessor

logger = logging.getLogger(__name__)


def register_health_tools(mcp: FastMCP) -> None:
    """Register health tools with the MCP server."""

    @mcp.tool()
    async def canvas_health_check(ctx: Context) -> dict[str, Any]:
        """
        Check the health and connectivity of the Canvas API.

        Args:
            ctx: Request context containing resources

        Returns:
            Dictionary with status ("ok" or "error"), timestamp and the
            authenticated user when the check succeeds
        """
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        result = await run_accessor(ctx, api_adapter.health_check)
        logger.info(f"Canvas health check: {result['status']}")
        return result
