"""
Canvas MCP Teacher Tools

This module contains the teacher-facing insight tools. Each tool delegates
to the InsightsService, which combines several Canvas calls concurrently and
summarizes the results.
"""

import logging
from typing import Any, Literal

from mcp.server.fastmcp import Context, FastMCP

from canvas_mcp_server.utils.validation import require_fields

logger = logging.getLogger(__name__)

ContentType = Literal["assignment", "discussion_topic", "wiki_page", "quiz", "file"]


def register_teacher_tools(mcp: FastMCP) -> None:
    """Register teacher insight tools with the MCP server."""

    @mcp.tool()
    async def canvas_get_teacher_courses(
        ctx: Context,
        enrollment_state: Literal["active", "completed", "invited", "all"] = "active",
        include_student_count: bool = True,
        include_needs_grading: bool = True,
        include_recent_activity: bool = False,
        term_id: int | None = None,
    ) -> list[dict[str, Any]]:
        """
        Get all courses where the current user is a teacher.

        Args:
            ctx: Request context containing resources
            enrollment_state: Filter by enrollment state
            include_student_count: Include total student count
            include_needs_grading: Include count of submissions needing grading
            include_recent_activity: Include course progress
            term_id: Filter by enrollment term

        Returns:
            List of courses
        """
        insights = ctx.request_context.lifespan_context["insights"]
        return await insights.get_teacher_courses(
            enrollment_state=enrollment_state,
            include_student_count=include_student_count,
            include_needs_grading=include_needs_grading,
            include_recent_activity=include_recent_activity,
            term_id=term_id,
        )

    @mcp.tool()
    async def canvas_get_grading_queue(
        ctx: Context,
        course_id: int | None = None,
        include_quiz_submissions: bool = True,
        limit: int = 50,
    ) -> list[dict[str, Any]]:
        """
        Get submissions that need grading across courses or for one course.

        Args:
            ctx: Request context containing resources
            course_id: Optional course to limit results to
            include_quiz_submissions: Include quiz submissions
            limit: Maximum number of items to return

        Returns:
            List of grading queue items
        """
        insights = ctx.request_context.lifespan_context["insights"]
        return await insights.get_grading_queue(
            course_id=course_id, include_quiz_submissions=include_quiz_submissions, limit=limit
        )

    @mcp.tool()
    async def canvas_get_course_students(
        ctx: Context,
        course_id: int,
        include_grades: bool = True,
        include_activity: bool = True,
        include_avatar: bool = False,
        enrollment_state: Literal["active", "invited", "completed", "all"] = "active",
        sort_by: Literal["name", "sortable_name", "email", "last_login"] = "name",
    ) -> list[dict[str, Any]]:
        """
        Get detailed student information for a course.

        Args:
            ctx: Request context containing resources
            course_id: ID of the course
            include_grades: Include current grades
            include_activity: Include last activity time
            include_avatar: Include avatar URLs
            enrollment_state: Filter by enrollment state
            sort_by: Sort students by field

        Returns:
            List of students
        """
        require_fields(course_id=course_id)
        insights = ctx.request_context.lifespan_context["insights"]
        return await insights.get_course_students(
            course_id,
            include_grades=include_grades,
            include_activity=include_activity,
            include_avatar=include_avatar,
            enrollment_state=enrollment_state,
            sort_by=sort_by,
        )

    @mcp.tool()
    async def canvas_get_course_assignments(
        ctx: Context,
        course_id: int,
        include_submissions: bool = True,
        include_rubric: bool = False,
        include_overrides: bool = False,
        assignment_group_id: int | None = None,
        due_date_filter: Literal["past_due", "upcoming", "no_due_date", "all"] = "all",
        search_term: str | None = None,
    ) -> list[dict[str, Any]]:
        """
        Get assignments for a course with grading statistics.

        Args:
            ctx: Request context containing resources
            course_id: ID of the course
            include_submissions: Include submission statistics
            include_rubric: Include rubric information
            include_overrides: Include due date overrides
            assignment_group_id: Filter by assignment group
            due_date_filter: Filter by due date status
            search_term: Search assignments by name

        Returns:
            List of assignments
        """
        require_fields(course_id=course_id)
        insights = ctx.request_context.lifespan_context["insights"]
        return await insights.get_course_assignments(
            course_id,
            include_submissions=include_submissions,
            include_rubric=include_rubric,
            include_overrides=include_overrides,
            assignment_group_id=assignment_group_id,
            due_date_filter=due_date_filter,
            search_term=search_term,
        )

    @mcp.tool()
    async def canvas_get_upcoming_events(
        ctx: Context,
        course_id: int | None = None,
        days_ahead: int = 7,
        include_assignments: bool = True,
        include_calendar_events: bool = True,
        include_quiz_due_dates: bool = True,
    ) -> list[dict[str, Any]]:
        """
        Get upcoming assignments, quizzes and events for teachers.

        Args:
            ctx: Request context containing resources
            course_id: Optional course to limit results to
            days_ahead: Number of days to look ahead
            include_assignments: Include assignment due dates
            include_calendar_events: Include calendar events
            include_quiz_due_dates: Include quiz due dates

        Returns:
            Events sorted by due date
        """
        insights = ctx.request_context.lifespan_context["insights"]
        return await insights.get_upcoming_events(
            course_id=course_id,
            days_ahead=days_ahead,
            include_assignments=include_assignments,
            include_calendar_events=include_calendar_events,
            include_quiz_due_dates=include_quiz_due_dates,
        )

    @mcp.tool()
    async def canvas_get_student_performance(
        ctx: Context,
        course_id: int,
        sort_by: Literal["score", "name", "last_login", "participation"] = "name",
        include_missing_assignments: bool = True,
        include_late_submissions: bool = True,
    ) -> list[dict[str, Any]]:
        """
        Get a student performance summary for a course.

        Args:
            ctx: Request context containing resources
            course_id: ID of the course
            sort_by: Sort students by metric
            include_missing_assignments: Include missing assignment count
            include_late_submissions: Include late submission count

        Returns:
            One performance summary per student
        """
        require_fields(course_id=course_id)
        insights = ctx.request_context.lifespan_context["insights"]
        return await insights.get_student_performance(
            course_id,
            sort_by=sort_by,
            include_missing_assignments=include_missing_assignments,
            include_late_submissions=include_late_submissions,
        )

    @mcp.tool()
    async def canvas_get_course_analytics(
        ctx: Context,
        course_id: int,
        include_assignment_analytics: bool = True,
        include_participation_data: bool = True,
        include_grade_distribution: bool = True,
    ) -> dict[str, Any]:
        """
        Get comprehensive course analytics.

        Args:
            ctx: Request context containing resources
            course_id: ID of the course
            include_assignment_analytics: Include assignment completion rate
            include_participation_data: Include participation rate
            include_grade_distribution: Include grade distribution

        Returns:
            Course analytics
        """
        require_fields(course_id=course_id)
        insights = ctx.request_context.lifespan_context["insights"]
        return await insights.get_course_analytics(
            course_id,
            include_assignment_analytics=include_assignment_analytics,
            include_participation_data=include_participation_data,
            include_grade_distribution=include_grade_distribution,
        )

    @mcp.tool()
    async def canvas_get_assignment_analytics(
        ctx: Context,
        course_id: int,
        assignment_id: int | None = None,
        include_score_distribution: bool = True,
        include_submission_timing: bool = True,
    ) -> list[dict[str, Any]]:
        """
        Get analytics for one assignment or every assignment in a course.

        Args:
            ctx: Request context containing resources
            course_id: ID of the course
            assignment_id: Optional specific assignment
            include_score_distribution: Include the list of scores
            include_submission_timing: Include on-time, late and missing counts

        Returns:
            One analytics summary per assignment
        """
        require_fields(course_id=course_id)
        insights = ctx.request_context.lifespan_context["insights"]
        return await insights.get_assignment_analytics(
            course_id,
            assignment_id=assignment_id,
            include_score_distribution=include_score_distribution,
            include_submission_timing=include_submission_timing,
        )

    @mcp.tool()
    async def canvas_get_missing_submissions(
        ctx: Context,
        course_id: int | None = None,
        student_id: int | None = None,
        include_late_submissions: bool = True,
        assignment_group_id: int | None = None,
        days_overdue: int | None = None,
    ) -> list[dict[str, Any]]:
        """
        Get missing and late submissions across courses or for one course.

        Args:
            ctx: Request context containing resources
            course_id: Optional course to limit results to
            student_id: Optional student to limit results to
            include_late_submissions: Include late submissions
            assignment_group_id: Filter by assignment group
            days_overdue: Minimum days overdue

        Returns:
            List of missing submissions
        """
        insights = ctx.request_context.lifespan_context["insights"]
        return await insights.get_missing_submissions(
            course_id=course_id,
            student_id=student_id,
            include_late_submissions=include_late_submissions,
            assignment_group_id=assignment_group_id,
            days_overdue=days_overdue,
        )

    @mcp.tool()
    async def canvas_get_course_statistics(
        ctx: Context,
        course_id: int,
        include_grade_distribution: bool = True,
        include_participation_stats: bool = True,
        include_submission_stats: bool = True,
        include_engagement_metrics: bool = False,
    ) -> dict[str, Any]:
        """
        Get a comprehensive course statistics report.

        Args:
            ctx: Request context containing resources
            course_id: ID of the course
            include_grade_distribution: Include grade distribution
            include_participation_stats: Include participation statistics
            include_submission_stats: Include submission statistics
            include_engagement_metrics: Include engagement metrics

        Returns:
            Course statistics report
        """
        require_fields(course_id=course_id)
        insights = ctx.request_context.lifespan_context["insights"]
        return await insights.get_course_statistics(
            course_id,
            include_grade_distribution=include_grade_distribution,
            include_participation_stats=include_participation_stats,
            include_submission_stats=include_submission_stats,
            include_engagement_metrics=include_engagement_metrics,
        )

    @mcp.tool()
    async def canvas_get_student_details(
        ctx: Context,
        course_id: int,
        student_id: int,
        include_progress: bool = True,
        include_analytics: bool = True,
        include_submissions: bool = True,
    ) -> dict[str, Any]:
        """
        Get detailed information about a student in a course.

        Args:
            ctx: Request context containing resources
            course_id: ID of the course
            student_id: ID of the student
            include_progress: Include course progress
            include_analytics: Include recent page views
            include_submissions: Include submissions

        Returns:
            Student details
        """
        require_fields(course_id=course_id, student_id=student_id)
        insights = ctx.request_context.lifespan_context["insights"]
        return await insights.get_student_details(
            course_id,
            student_id,
            include_progress=include_progress,
            include_analytics=include_analytics,
            include_submissions=include_submissions,
        )

    @mcp.tool()
    async def canvas_get_student_activity(
        ctx: Context,
        course_id: int,
        student_id: int | None = None,
        include_page_views: bool = True,
        include_participation: bool = True,
    ) -> list[dict[str, Any]]:
        """
        Get activity summaries for one or all students in a course.

        Args:
            ctx: Request context containing resources
            course_id: ID of the course
            student_id: Optional specific student
            include_page_views: Include page view counts
            include_participation: Include participation fields

        Returns:
            One activity summary per student
        """
        require_fields(course_id=course_id)
        insights = ctx.request_context.lifespan_context["insights"]
        return await insights.get_student_activity(
            course_id,
            student_id=student_id,
            include_page_views=include_page_views,
            include_participation=include_participation,
        )

    @mcp.tool()
    async def canvas_get_course_details(
        ctx: Context,
        course_id: int,
        include_sections: bool = True,
        include_teachers: bool = True,
        include_enrollment_counts: bool = True,
        include_syllabus: bool = False,
        include_assignments_summary: bool = True,
    ) -> dict[str, Any]:
        """
        Get detailed course information with sections, teachers and an
        assignments summary.

        Args:
            ctx: Request context containing resources
            course_id: ID of the course
            include_sections: Include course sections
            include_teachers: Include course teachers
            include_enrollment_counts: Include enrollment counts
            include_syllabus: Include syllabus content
            include_assignments_summary: Include assignments summary

        Returns:
            Course details
        """
        require_fields(course_id=course_id)
        insights = ctx.request_context.lifespan_context["insights"]
        return await insights.get_course_details(
            course_id,
            include_sections=include_sections,
            include_teachers=include_teachers,
            include_enrollment_counts=include_enrollment_counts,
            include_syllabus=include_syllabus,
            include_assignments_summary=include_assignments_summary,
        )

    @mcp.tool()
    async def canvas_get_course_discussions(
        ctx: Context,
        course_id: int,
        include_unread_count: bool = True,
        include_recent_posts: bool = True,
        only_announcements: bool = False,
        search_term: str | None = None,
    ) -> list[dict[str, Any]]:
        """
        Get course discussions with participation information.

        Args:
            ctx: Request context containing resources
            course_id: ID of the course
            include_unread_count: Include unread post counts
            include_recent_posts: Include recent posts
            only_announcements: Only return announcements
            search_term: Search discussions by title

        Returns:
            List of discussion topics
        """
        require_fields(course_id=course_id)
        insights = ctx.request_context.lifespan_context["insights"]
        return await insights.get_course_discussions(
            course_id,
            include_unread_count=include_unread_count,
            include_recent_posts=include_recent_posts,
            only_announcements=only_announcements,
            search_term=search_term,
        )

    @mcp.tool()
    async def canvas_get_teacher_activity(
        ctx: Context,
        course_id: int | None = None,
        activity_types: list[str] | None = None,
        limit: int = 20,
    ) -> list[dict[str, Any]]:
        """
        Get recent activity from the activity stream.

        Args:
            ctx: Request context containing resources
            course_id: Optional course to limit results to
            activity_types: Activity types to include (e.g. Submission, DiscussionTopic, Message)
            limit: Maximum number of activities to return

        Returns:
            List of activity stream items
        """
        insights = ctx.request_context.lifespan_context["insights"]
        return await insights.get_teacher_activity(
            course_id=course_id, activity_types=activity_types, limit=limit
        )

    @mcp.tool()
    async def canvas_get_gradebook_data(
        ctx: Context,
        course_id: int,
        include_unposted_grades: bool = False,
        include_custom_columns: bool = False,
        student_ids: list[int] | None = None,
        assignment_group_id: int | None = None,
    ) -> dict[str, Any]:
        """
        Export gradebook data for a course.

        Args:
            ctx: Request context containing resources
            course_id: ID of the course
            include_unposted_grades: Keep grades that are not yet posted
            include_custom_columns: Include custom gradebook columns
            student_ids: Limit to these students
            assignment_group_id: Filter by assignment group

        Returns:
            Assignments, students, submissions and custom columns
        """
        require_fields(course_id=course_id)
        insights = ctx.request_context.lifespan_context["insights"]
        return await insights.get_gradebook_data(
            course_id,
            include_unposted_grades=include_unposted_grades,
            include_custom_columns=include_custom_columns,
            student_ids=student_ids,
            assignment_group_id=assignment_group_id,
        )

    @mcp.tool()
    async def canvas_get_module_progress(
        ctx: Context,
        course_id: int,
        student_id: int | None = None,
        module_id: int | None = None,
        include_items: bool = True,
        include_completion_dates: bool = True,
    ) -> list[dict[str, Any]]:
        """
        Get student progress through course modules.

        Args:
            ctx: Request context containing resources
            course_id: ID of the course
            student_id: Optional specific student
            module_id: Optional specific module
            include_items: Include module item details
            include_completion_dates: Include completion timestamps

        Returns:
            One entry per module with per-student progress
        """
        require_fields(course_id=course_id)
        insights = ctx.request_context.lifespan_context["insights"]
        return await insights.get_module_progress(
            course_id,
            student_id=student_id,
            module_id=module_id,
            include_items=include_items,
            include_completion_dates=include_completion_dates,
        )

    @mcp.tool()
    async def canvas_search_course_content(
        ctx: Context,
        course_id: int,
        search_term: str,
        content_types: list[ContentType] | None = None,
        include_body: bool = False,
    ) -> list[dict[str, Any]]:
        """
        Search across course content.

        Args:
            ctx: Request context containing resources
            course_id: ID of the course
            search_term: Text to search for
            content_types: Types of content to search
            include_body: Search within content body and include an excerpt

        Returns:
            Matching content records
        """
        require_fields(course_id=course_id, search_term=search_term)
        insights = ctx.request_context.lifespan_context["insights"]
        return await insights.search_course_content(
            course_id, search_term, content_types=content_types, include_body=include_body
        )

    @mcp.tool()
    async def canvas_get_user_enrollments(
        ctx: Context,
        user_id: int | None = None,
        course_id: int | None = None,
        enrollment_type: Literal[
            "StudentEnrollment",
            "TeacherEnrollment",
            "TaEnrollment",
            "ObserverEnrollment",
            "DesignerEnrollment",
        ] | None = None,
        enrollment_state: Literal[
            "active", "invited", "creation_pending", "deleted", "rejected", "completed", "inactive"
        ] | None = None,
        include_grades: bool = True,
    ) -> list[dict[str, Any]]:
        """
        Get enrollment information for a user or a course.

        Args:
            ctx: Request context containing resources
            user_id: User ID (defaults to the current user)
            course_id: Optional course to limit results to
            enrollment_type: Filter by enrollment type
            enrollment_state: Filter by enrollment state
            include_grades: Include grade information

        Returns:
            List of enrollments
        """
        insights = ctx.request_context.lifespan_context["insights"]
        return await insights.get_user_enrollments(
            user_id=user_id,
            course_id=course_id,
            enrollment_type=enrollment_type,
            enrollment_state=enrollment_state,
            include_grades=include_grades,
        )
