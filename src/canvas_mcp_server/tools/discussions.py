"""
Canvas MCP Discussion Tools

This module contains tools for discussion topics and announcements.
"""

from typing import Any

from mcp.server.fastmcp import Context, FastMCP

from canvas_mcp_server.utils.context import run_accessor

from canvas_mcp_server.utils.validation import require_fields


def register_discussion_tools(mcp: FastMCP) -> None:
    """Register discussion and announcement tools with the MCP server."""

    @mcp.tool()
    async def canvas_list_discussion_topics(ctx: Context, course_id: int) -> list[dict[str, Any]]:
        """List all discussion topics in a course."""
        require_fields(course_id=course_id)
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        return await run_accessor(ctx, api_adapter.list_discussion_topics, course_id)

    @mcp.tool()
    async def canvas_get_discussion_topic(
        ctx: Context, course_id: int, topic_id: int
    ) -> dict[str, Any]:
        """Get details of a specific discussion topic."""
        require_fields(course_id=course_id, topic_id=topic_id)
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        return await run_accessor(ctx, api_adapter.get_discussion_topic, course_id, topic_id)

    @mcp.tool()
    async def canvas_post_to_discussion(
        ctx: Context, course_id: int, topic_id: int, message: str
    ) -> dict[str, Any]:
        """
        Post a message to a discussion topic.

        Args:
            ctx: Request context containing resources
            course_id: ID of the course
            topic_id: ID of the discussion topic
            message: Message content

        Returns:
            The created discussion entry
        """
        require_fields(course_id=course_id, topic_id=topic_id, message=message)
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        return await run_accessor(ctx, api_adapter.post_to_discussion, course_id, topic_id, message)

    @mcp.tool()
    async def canvas_list_announcements(ctx: Context, course_id: int) -> list[dict[str, Any]]:
        """
        List all announcements in a course.

        Args:
            ctx: Request context containing resources
            course_id: ID of the course

        Returns:
            List of announcements
        """
        require_fields(course_id=course_id)
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        return await run_accessor(ctx, api_adapter.list_announcements, course_id)
