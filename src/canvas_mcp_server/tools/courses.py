"""
Canvas MCP Course Tools

This module contains tools for reading and managing courses.
"""

import logging
from typing import Any

from mcp.server.fastmcp import Context, FastMCP

from canvas_mcp_server.utils.context import run_accessor

from canvas_mcp_server.utils.validation import require_fields

logger = logging.getLogger(__name__)


def register_course_tools(mcp: FastMCP) -> None:
    """Register course tools with the MCP server."""

    @mcp.tool()
    async def canvas_list_courses(
        ctx: Context, include_ended: bool = False
    ) -> list[dict[str, Any]]:
        """
        List all courses for the current user.

        Args:
            ctx: Request context containing resources
            include_ended: Include ended courses

        Returns:
            List of course information
        """
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        return await run_accessor(ctx, api_adapter.list_courses, include_ended=include_ended)

    @mcp.tool()
    async def canvas_get_course(ctx: Context, course_id: int) -> dict[str, Any]:
        """
        Get detailed information about a specific course.

        Args:
            ctx: Request context containing resources
            course_id: ID of the course

        Returns:
            Course details including teachers, term and sections
        """
        require_fields(course_id=course_id)
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        return await run_accessor(ctx, api_adapter.get_course, course_id)

    @mcp.tool()
    async def canvas_create_course(
        ctx: Context,
        account_id: int,
        name: str,
        course_code: str | None = None,
        start_at: str | None = None,
        end_at: str | None = None,
        license: str | None = None,
        is_public: bool | None = None,
        is_public_to_auth_users: bool | None = None,
        public_syllabus: bool | None = None,
        public_syllabus_to_auth: bool | None = None,
        public_description: str | None = None,
        allow_student_wiki_edits: bool | None = None,
        allow_wiki_comments: bool | None = None,
        allow_student_forum_attachments: bool | None = None,
        open_enrollment: bool | None = None,
        self_enrollment: bool | None = None,
        restrict_enrollments_to_course_dates: bool | None = None,
        term_id: int | None = None,
        sis_course_id: str | None = None,
        integration_id: str | None = None,
        hide_final_grades: bool | None = None,
        apply_assignment_group_weights: bool | None = None,
        time_zone: str | None = None,
        syllabus_body: str | None = None,
    ) -> dict[str, Any]:
        """
        Create a new course in an account.

        Args:
            ctx: Request context containing resources
            account_id: ID of the account to create the course in
            name: Name of the course
            course_code: Course code (e.g. CS101)
            start_at: Course start date (ISO format)
            end_at: Course end date (ISO format)
            term_id: Enrollment term ID
            syllabus_body: Course syllabus HTML
            (remaining arguments map one-to-one onto Canvas course attributes)

        Returns:
            The created course
        """
        require_fields(account_id=account_id, name=name)
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        course = await run_accessor(
            ctx,
            api_adapter.create_course,
            account_id,
            name=name,
            course_code=course_code,
            start_at=start_at,
            end_at=end_at,
            license=license,
            is_public=is_public,
            is_public_to_auth_users=is_public_to_auth_users,
            public_syllabus=public_syllabus,
            public_syllabus_to_auth=public_syllabus_to_auth,
            public_description=public_description,
            allow_student_wiki_edits=allow_student_wiki_edits,
            allow_wiki_comments=allow_wiki_comments,
            allow_student_forum_attachments=allow_student_forum_attachments,
            open_enrollment=open_enrollment,
            self_enrollment=self_enrollment,
            restrict_enrollments_to_course_dates=restrict_enrollments_to_course_dates,
            term_id=term_id,
            sis_course_id=sis_course_id,
            integration_id=integration_id,
            hide_final_grades=hide_final_grades,
            apply_assignment_group_weights=apply_assignment_group_weights,
            time_zone=time_zone,
            syllabus_body=syllabus_body,
        )
        logger.info(f"Created course {course.get('id')} in account {account_id}")
        return course

    @mcp.tool()
    async def canvas_update_course(
        ctx: Context,
        course_id: int,
        name: str | None = None,
        course_code: str | None = None,
        start_at: str | None = None,
        end_at: str | None = None,
        license: str | None = None,
        is_public: bool | None = None,
        public_description: str | None = None,
        term_id: int | None = None,
        time_zone: str | None = None,
        syllabus_body: str | None = None,
        event: str | None = None,
    ) -> dict[str, Any]:
        """
        Update an existing course.

        Args:
            ctx: Request context containing resources
            course_id: ID of the course to update
            name: New name for the course
            course_code: New course code
            start_at: New start date (ISO format)
            end_at: New end date (ISO format)
            syllabus_body: Updated syllabus HTML
            event: Course state event (claim, offer, conclude, delete, undelete)

        Returns:
            The updated course
        """
        require_fields(course_id=course_id)
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        return await run_accessor(
            ctx,
            api_adapter.update_course,
            course_id,
            name=name,
            course_code=course_code,
            start_at=start_at,
            end_at=end_at,
            license=license,
            is_public=is_public,
            public_description=public_description,
            term_id=term_id,
            time_zone=time_zone,
            syllabus_body=syllabus_body,
            event=event,
        )

    @mcp.tool()
    async def canvas_get_syllabus(ctx: Context, course_id: int) -> dict[str, Any]:
        """
        Get the syllabus for a course.

        Args:
            ctx: Request context containing resources
            course_id: ID of the course

        Returns:
            Dictionary with course_id and syllabus_body
        """
        require_fields(course_id=course_id)
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        return await run_accessor(ctx, api_adapter.get_syllabus, course_id)

    @mcp.tool()
    async def canvas_get_course_grades(ctx: Context, course_id: int) -> list[dict[str, Any]]:
        """
        Get grades for a course from its enrollments.

        Args:
            ctx: Request context containing resources
            course_id: ID of the course

        Returns:
            Enrollments with grades
        """
        require_fields(course_id=course_id)
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        return await run_accessor(ctx, api_adapter.get_course_grades, course_id)
