"""
Canvas MCP Module Tools

This module contains tools for course modules and module items.
"""

import logging
from typing import Any

from mcp.server.fastmcp import Context, FastMCP

from canvas_mcp_server.utils.context import run_accessor

from canvas_mcp_server.utils.validation import require_fields

logger = logging.getLogger(__name__)


def register_module_tools(mcp: FastMCP) -> None:
    """Register module tools with the MCP server."""

    @mcp.tool()
    async def canvas_list_modules(ctx: Context, course_id: int) -> list[dict[str, Any]]:
        """
        List all modules in a course.

        Args:
            ctx: Request context containing resources
            course_id: ID of the course

        Returns:
            List of modules with their items
        """
        require_fields(course_id=course_id)
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        return await run_accessor(ctx, api_adapter.list_modules, course_id)

    @mcp.tool()
    async def canvas_get_module(ctx: Context, course_id: int, module_id: int) -> dict[str, Any]:
        """Get details of a specific module."""
        require_fields(course_id=course_id, module_id=module_id)
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        return await run_accessor(ctx, api_adapter.get_module, course_id, module_id)

    @mcp.tool()
    async def canvas_list_module_items(
        ctx: Context, course_id: int, module_id: int
    ) -> list[dict[str, Any]]:
        """List all items in a module."""
        require_fields(course_id=course_id, module_id=module_id)
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        return await run_accessor(ctx, api_adapter.list_module_items, course_id, module_id)

    @mcp.tool()
    async def canvas_get_module_item(
        ctx: Context, course_id: int, module_id: int, item_id: int
    ) -> dict[str, Any]:
        """Get details of a specific module item."""
        require_fields(course_id=course_id, module_id=module_id, item_id=item_id)
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        return await run_accessor(ctx, api_adapter.get_module_item, course_id, module_id, item_id)

    @mcp.tool()
    async def canvas_mark_module_item_complete(
        ctx: Context, course_id: int, module_id: int, item_id: int
    ) -> str:
        """
        Mark a module item as complete.

        Args:
            ctx: Request context containing resources
            course_id: ID of the course
            module_id: ID of the module
            item_id: ID of the module item

        Returns:
            Confirmation message
        """
        require_fields(course_id=course_id, module_id=module_id, item_id=item_id)
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        await run_accessor(
            ctx, api_adapter.mark_module_item_complete, course_id, module_id, item_id
        )
        logger.info(f"Marked module item {item_id} complete in course {course_id}")
        return "Module item marked as complete"
