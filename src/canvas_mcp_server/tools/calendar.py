"""
Canvas MCP Calendar Tools

This module contains tools for calendar events and upcoming due dates.
"""

from typing import Any

from mcp.server.fastmcp import Context, FastMCP

from canvas_mcp_server.utils.context import run_accessor


def register_calendar_tools(mcp: FastMCP) -> None:
    """Register calendar tools with the MCP server."""

    @mcp.tool()
    async def canvas_list_calendar_events(
        ctx: Context, start_date: str | None = None, end_date: str | None = None
    ) -> list[dict[str, Any]]:
        """
        List calendar events.

        Args:
            ctx: Request context containing resources
            start_date: Start date (ISO format)
            end_date: End date (ISO format)

        Returns:
            List of calendar events
        """
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        return await run_accessor(
            ctx, api_adapter.list_calendar_events, start_date=start_date, end_date=end_date
        )

    @mcp.tool()
    async def canvas_get_upcoming_assignments(
        ctx: Context, limit: int = 10
    ) -> list[dict[str, Any]]:
        """
        Get upcoming assignment due dates.

        Args:
            ctx: Request context containing resources
            limit: Maximum number of assignments to return

        Returns:
            Upcoming events that carry an assignment
        """
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        return await run_accessor(ctx, api_adapter.get_upcoming_assignments, limit=limit)
