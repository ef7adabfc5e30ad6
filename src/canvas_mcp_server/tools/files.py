"""
Canvas MCP File Tools

This module contains tools for course files, folders and pages.
"""

from typing import Any

from mcp.server.fastmcp import Context, FastMCP

from canvas_mcp_server.utils.context import run_accessor

from canvas_mcp_server.utils.validation import require_fields


def register_file_tools(mcp: FastMCP) -> None:
    """Register file and page tools with the MCP server."""

    @mcp.tool()
    async def canvas_list_files(
        ctx: Context, course_id: int, folder_id: int | None = None
    ) -> list[dict[str, Any]]:
        """
        List files in a course or folder.

        Args:
            ctx: Request context containing resources
            course_id: ID of the course
            folder_id: Optional folder to list instead of the whole course

        Returns:
            List of file information
        """
        require_fields(course_id=course_id)
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        return await run_accessor(ctx, api_adapter.list_files, course_id, folder_id=folder_id)

    @mcp.tool()
    async def canvas_get_file(ctx: Context, file_id: int) -> dict[str, Any]:
        """Get information about a specific file."""
        require_fields(file_id=file_id)
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        return await run_accessor(ctx, api_adapter.get_file, file_id)

    @mcp.tool()
    async def canvas_list_folders(ctx: Context, course_id: int) -> list[dict[str, Any]]:
        """List folders in a course."""
        require_fields(course_id=course_id)
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        return await run_accessor(ctx, api_adapter.list_folders, course_id)

    @mcp.tool()
    async def canvas_list_pages(ctx: Context, course_id: int) -> list[dict[str, Any]]:
        """List wiki pages in a course."""
        require_fields(course_id=course_id)
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        return await run_accessor(ctx, api_adapter.list_pages, course_id)

    @mcp.tool()
    async def canvas_get_page(ctx: Context, course_id: int, page_url: str) -> dict[str, Any]:
        """
        Get the content of a specific page.

        Args:
            ctx: Request context containing resources
            course_id: ID of the course
            page_url: URL slug of the page

        Returns:
            Page details including its HTML body
        """
        require_fields(course_id=course_id, page_url=page_url)
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        return await run_accessor(ctx, api_adapter.get_page, course_id, page_url)
