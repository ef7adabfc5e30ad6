"""
Canvas MCP Assignment Tools

This module contains tools for assignments, assignment groups and rubrics.
"""

import logging
from typing import Any

from mcp.server.fastmcp import Context, FastMCP

from canvas_mcp_server.utils.context import run_accessor

from canvas_mcp_server.utils.validation import require_fields

logger = logging.getLogger(__name__)


def register_assignment_tools(mcp: FastMCP) -> None:
    """Register assignment tools with the MCP server."""

    @mcp.tool()
    async def canvas_list_assignments(
        ctx: Context, course_id: int, include_submissions: bool = False
    ) -> list[dict[str, Any]]:
        """
        List assignments for a course.

        Args:
            ctx: Request context containing resources
            course_id: ID of the course
            include_submissions: Include the current user's submission data

        Returns:
            List of assignments
        """
        require_fields(course_id=course_id)
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        return await run_accessor(
            ctx, api_adapter.list_assignments, course_id, include_submissions=include_submissions
        )

    @mcp.tool()
    async def canvas_get_assignment(
        ctx: Context, course_id: int, assignment_id: int, include_submission: bool = False
    ) -> dict[str, Any]:
        """
        Get detailed information about a specific assignment.

        Args:
            ctx: Request context containing resources
            course_id: ID of the course
            assignment_id: ID of the assignment
            include_submission: Include the current user's submission

        Returns:
            Assignment details
        """
        require_fields(course_id=course_id, assignment_id=assignment_id)
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        return await run_accessor(
            ctx,
            api_adapter.get_assignment,
            course_id,
            assignment_id,
            include_submission=include_submission,
        )

    @mcp.tool()
    async def canvas_create_assignment(
        ctx: Context,
        course_id: int,
        name: str,
        description: str | None = None,
        due_at: str | None = None,
        points_possible: float | None = None,
        submission_types: list[str] | None = None,
        allowed_extensions: list[str] | None = None,
        published: bool | None = None,
    ) -> dict[str, Any]:
        """
        Create a new assignment in a course.

        Args:
            ctx: Request context containing resources
            course_id: ID of the course
            name: Name of the assignment
            description: Assignment description/instructions
            due_at: Due date (ISO format)
            points_possible: Maximum points possible
            submission_types: Allowed submission types
            allowed_extensions: Allowed file extensions for submissions
            published: Whether the assignment is published

        Returns:
            The created assignment
        """
        require_fields(course_id=course_id, name=name)
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        assignment = await run_accessor(
            ctx,
            api_adapter.create_assignment,
            course_id,
            name=name,
            description=description,
            due_at=due_at,
            points_possible=points_possible,
            submission_types=submission_types,
            allowed_extensions=allowed_extensions,
            published=published,
        )
        logger.info(f"Created assignment {assignment.get('id')} in course {course_id}")
        return assignment

    @mcp.tool()
    async def canvas_update_assignment(
        ctx: Context,
        course_id: int,
        assignment_id: int,
        name: str | None = None,
        description: str | None = None,
        due_at: str | None = None,
        points_possible: float | None = None,
        published: bool | None = None,
    ) -> dict[str, Any]:
        """
        Update an existing assignment.

        Args:
            ctx: Request context containing resources
            course_id: ID of the course
            assignment_id: ID of the assignment to update
            name: New name for the assignment
            description: New assignment description
            due_at: New due date (ISO format)
            points_possible: New maximum points
            published: Whether the assignment is published

        Returns:
            The updated assignment
        """
        require_fields(course_id=course_id, assignment_id=assignment_id)
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        return await run_accessor(
            ctx,
            api_adapter.update_assignment,
            course_id,
            assignment_id,
            name=name,
            description=description,
            due_at=due_at,
            points_possible=points_possible,
            published=published,
        )

    @mcp.tool()
    async def canvas_list_assignment_groups(ctx: Context, course_id: int) -> list[dict[str, Any]]:
        """List assignment groups (with their assignments) for a course."""
        require_fields(course_id=course_id)
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        return await run_accessor(ctx, api_adapter.list_assignment_groups, course_id)

    @mcp.tool()
    async def canvas_list_rubrics(ctx: Context, course_id: int) -> list[dict[str, Any]]:
        """List rubrics for a course."""
        require_fields(course_id=course_id)
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        return await run_accessor(ctx, api_adapter.list_rubrics, course_id)

    @mcp.tool()
    async def canvas_get_rubric(ctx: Context, course_id: int, rubric_id: int) -> dict[str, Any]:
        """Get details of a specific rubric."""
        require_fields(course_id=course_id, rubric_id=rubric_id)
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        return await run_accessor(ctx, api_adapter.get_rubric, course_id, rubric_id)
