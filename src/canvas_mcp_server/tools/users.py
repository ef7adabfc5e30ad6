"""
Canvas MCP User Tools

This module contains tools for the current user's profile, dashboard,
grades and conversations, and for course enrollments.
"""

import logging
from typing import Any, Literal

from mcp.server.fastmcp import Context, FastMCP

from canvas_mcp_server.utils.context import run_accessor

from canvas_mcp_server.utils.validation import require_fields

logger = logging.getLogger(__name__)


def register_user_tools(mcp: FastMCP) -> None:
    """Register user tools with the MCP server."""

    @mcp.tool()
    async def canvas_get_user_profile(ctx: Context) -> dict[str, Any]:
        """Get the current user's profile."""
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        return await run_accessor(ctx, api_adapter.get_user_profile)

    @mcp.tool()
    async def canvas_update_user_profile(
        ctx: Context,
        name: str | None = None,
        short_name: str | None = None,
        bio: str | None = None,
        title: str | None = None,
        time_zone: str | None = None,
    ) -> dict[str, Any]:
        """
        Update the current user's profile.

        Args:
            ctx: Request context containing resources
            name: User's full name
            short_name: User's display name
            bio: User's biography
            title: User's title
            time_zone: User's time zone

        Returns:
            The updated user
        """
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        return await run_accessor(
            ctx,
            api_adapter.update_user_profile,
            name=name,
            short_name=short_name,
            bio=bio,
            title=title,
            time_zone=time_zone,
        )

    @mcp.tool()
    async def canvas_enroll_user(
        ctx: Context,
        course_id: int,
        user_id: int,
        role: Literal[
            "StudentEnrollment",
            "TeacherEnrollment",
            "TaEnrollment",
            "ObserverEnrollment",
            "DesignerEnrollment",
        ] = "StudentEnrollment",
        enrollment_state: Literal["active", "invited", "inactive"] = "active",
    ) -> dict[str, Any]:
        """
        Enroll a user in a course.

        Args:
            ctx: Request context containing resources
            course_id: ID of the course
            user_id: ID of the user to enroll
            role: Role for the enrollment
            enrollment_state: State of the enrollment

        Returns:
            The created enrollment
        """
        require_fields(course_id=course_id, user_id=user_id)
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        enrollment = await run_accessor(
            ctx,
            api_adapter.enroll_user,
            course_id,
            user_id,
            role=role,
            enrollment_state=enrollment_state,
        )
        logger.info(f"Enrolled user {user_id} in course {course_id} as {role}")
        return enrollment

    @mcp.tool()
    async def canvas_get_user_grades(ctx: Context) -> Any:
        """Get the current user's grades across all courses."""
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        return await run_accessor(ctx, api_adapter.get_user_grades)

    @mcp.tool()
    async def canvas_get_dashboard(ctx: Context) -> dict[str, Any]:
        """Get the current user's dashboard information."""
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        return await run_accessor(ctx, api_adapter.get_dashboard)

    @mcp.tool()
    async def canvas_get_dashboard_cards(ctx: Context) -> list[dict[str, Any]]:
        """Get the current user's dashboard course cards."""
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        return await run_accessor(ctx, api_adapter.get_dashboard_cards)

    @mcp.tool()
    async def canvas_list_conversations(ctx: Context) -> list[dict[str, Any]]:
        """List the current user's conversations."""
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        return await run_accessor(ctx, api_adapter.list_conversations)

    @mcp.tool()
    async def canvas_get_conversation(ctx: Context, conversation_id: int) -> dict[str, Any]:
        """Get details of a specific conversation."""
        require_fields(conversation_id=conversation_id)
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        return await run_accessor(ctx, api_adapter.get_conversation, conversation_id)

    @mcp.tool()
    async def canvas_create_conversation(
        ctx: Context, recipients: list[str], body: str, subject: str | None = None
    ) -> list[dict[str, Any]]:
        """
        Create a new conversation.

        Args:
            ctx: Request context containing resources
            recipients: Recipient IDs (users, or codes such as course_123)
            body: Message body
            subject: Message subject

        Returns:
            The created conversation(s)
        """
        require_fields(recipients=recipients, body=body)
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        return await run_accessor(
            ctx, api_adapter.create_conversation, recipients, body, subject=subject
        )

    @mcp.tool()
    async def canvas_list_notifications(ctx: Context) -> list[dict[str, Any]]:
        """List the current user's notifications (activity stream)."""
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        return await run_accessor(ctx, api_adapter.list_notifications)
