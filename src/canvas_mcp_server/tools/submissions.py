"""
Canvas MCP Submission Tools

This module contains tools for reading, making and grading submissions.
"""

import logging
from typing import Any, Literal

from mcp.server.fastmcp import Context, FastMCP

from canvas_mcp_server.utils.context import run_accessor

from canvas_mcp_server.utils.validation import require_fields

logger = logging.getLogger(__name__)


def register_submission_tools(mcp: FastMCP) -> None:
    """Register submission tools with the MCP server."""

    @mcp.tool()
    async def canvas_get_submission(
        ctx: Context, course_id: int, assignment_id: int, user_id: int | str = "self"
    ) -> dict[str, Any]:
        """
        Get submission details for an assignment.

        Args:
            ctx: Request context containing resources
            course_id: ID of the course
            assignment_id: ID of the assignment
            user_id: ID of the user (defaults to "self")

        Returns:
            Submission details with comments and rubric assessment
        """
        require_fields(course_id=course_id, assignment_id=assignment_id)
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        return await run_accessor(
            ctx, api_adapter.get_submission, course_id, assignment_id, user_id or "self"
        )

    @mcp.tool()
    async def canvas_submit_assignment(
        ctx: Context,
        course_id: int,
        assignment_id: int,
        submission_type: Literal["online_text_entry", "online_url", "online_upload"],
        body: str | None = None,
        url: str | None = None,
        file_ids: list[int] | None = None,
    ) -> dict[str, Any]:
        """
        Submit work for an assignment.

        Args:
            ctx: Request context containing resources
            course_id: ID of the course
            assignment_id: ID of the assignment
            submission_type: Type of submission
            body: Text content for text submissions
            url: URL for URL submissions
            file_ids: File IDs for file submissions

        Returns:
            The created submission
        """
        require_fields(
            course_id=course_id, assignment_id=assignment_id, submission_type=submission_type
        )
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        return await run_accessor(
            ctx,
            api_adapter.submit_assignment,
            course_id,
            assignment_id,
            submission_type,
            body=body,
            url=url,
            file_ids=file_ids,
        )

    @mcp.tool()
    async def canvas_submit_grade(
        ctx: Context,
        course_id: int,
        assignment_id: int,
        user_id: int,
        grade: float | str,
        comment: str | None = None,
    ) -> dict[str, Any]:
        """
        Submit a grade for a student's assignment.

        Args:
            ctx: Request context containing resources
            course_id: ID of the course
            assignment_id: ID of the assignment
            user_id: ID of the student
            grade: Grade to assign (points, percentage or letter grade)
            comment: Optional comment on the submission

        Returns:
            The graded submission
        """
        require_fields(course_id=course_id, assignment_id=assignment_id, user_id=user_id)
        # A grade of 0 is valid
        if grade is None or grade == "":
            raise ValueError("Missing required field: grade")

        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        submission = await run_accessor(
            ctx, api_adapter.submit_grade, course_id, assignment_id, user_id, grade, comment=comment
        )
        logger.info(
            f"Posted grade {grade} for user {user_id} on assignment {assignment_id}"
        )
        return submission
