"""
Canvas MCP Quiz Tools

This module contains tools for quizzes and quiz attempts.
"""

import logging
from typing import Any, Literal

from mcp.server.fastmcp import Context, FastMCP

from canvas_mcp_server.utils.context import run_accessor

from canvas_mcp_server.utils.validation import require_fields

logger = logging.getLogger(__name__)

QuizType = Literal["practice_quiz", "assignment", "graded_survey", "survey"]


def register_quiz_tools(mcp: FastMCP) -> None:
    """Register quiz tools with the MCP server."""

    @mcp.tool()
    async def canvas_list_quizzes(ctx: Context, course_id: int) -> list[dict[str, Any]]:
        """List all quizzes in a course."""
        require_fields(course_id=course_id)
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        return await run_accessor(ctx, api_adapter.list_quizzes, course_id)

    @mcp.tool()
    async def canvas_get_quiz(ctx: Context, course_id: int, quiz_id: int) -> dict[str, Any]:
        """Get details of a specific quiz."""
        require_fields(course_id=course_id, quiz_id=quiz_id)
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        return await run_accessor(ctx, api_adapter.get_quiz, course_id, quiz_id)

    @mcp.tool()
    async def canvas_create_quiz(
        ctx: Context,
        course_id: int,
        title: str,
        description: str | None = None,
        quiz_type: QuizType | None = None,
        time_limit: int | None = None,
        published: bool | None = None,
        due_at: str | None = None,
    ) -> dict[str, Any]:
        """
        Create a new quiz in a course.

        Args:
            ctx: Request context containing resources
            course_id: ID of the course
            title: Title of the quiz
            description: Description of the quiz
            quiz_type: Type of the quiz
            time_limit: Time limit in minutes
            published: Is the quiz published
            due_at: Due date (ISO format)

        Returns:
            The created quiz
        """
        require_fields(course_id=course_id, title=title)
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        quiz = await run_accessor(
            ctx,
            api_adapter.create_quiz,
            course_id,
            title=title,
            description=description,
            quiz_type=quiz_type,
            time_limit=time_limit,
            published=published,
            due_at=due_at,
        )
        logger.info(f"Created quiz {quiz.get('id')} in course {course_id}")
        return quiz

    @mcp.tool()
    async def canvas_start_quiz_attempt(
        ctx: Context, course_id: int, quiz_id: int
    ) -> dict[str, Any]:
        """Start a new attempt on a quiz."""
        require_fields(course_id=course_id, quiz_id=quiz_id)
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        return await run_accessor(ctx, api_adapter.start_quiz_attempt, course_id, quiz_id)
