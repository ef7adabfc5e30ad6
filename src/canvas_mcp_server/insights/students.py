"""
Student Insights

Composite accessors about the students of a course: rosters enriched with
activity, per-student performance summaries, detail views and enrollments.

Each per-student lookup runs concurrently. When an enrichment call fails the
student stays in the result with that field set to None (or an empty list),
so one bad record never hides the rest of the roster.
"""

import asyncio
import logging
from datetime import timedelta
from typing import TYPE_CHECKING, Any

from canvas_mcp_server.utils.date_formatter import (
    parse_canvas_datetime,
    sort_key,
    utc_now,
)

if TYPE_CHECKING:
    from canvas_mcp_server.insights.service import InsightsService

# Configure logging
logger = logging.getLogger(__name__)

RECENT_ACTIVITY_DAYS = 7


def first_enrollment(student: dict[str, Any]) -> dict[str, Any] | None:
    """First enrollment embedded in a user record, None if there is none."""
    enrollments = student.get("enrollments") or []
    return enrollments[0] if enrollments else None


async def _last_activity(insights_service: "InsightsService", user_id: int) -> str | None:
    """Timestamp of the most recent page view, None if unknown."""
    # Only the newest row is needed, so the page-view history is not drained
    page_views = await insights_service.fetch_or_default(
        None,
        f"users/{user_id}/page_views",
        {"per_page": 1},
        description=f"page views for user {user_id}",
        paginate=False,
    )
    if not page_views:
        return None
    return page_views[0].get("created_at")


async def get_course_students(
    insights_service: "InsightsService",
    course_id: int,
    include_grades: bool = True,
    include_activity: bool = True,
    include_avatar: bool = False,
    enrollment_state: str = "active",
    sort_by: str = "name",
) -> list[dict[str, Any]]:
    """
    List the students of a course.

    Args:
        insights_service: The insights service instance
        course_id: Canvas course ID
        include_grades: Include enrollments (and their grades)
        include_activity: Add last_activity from each student's page views
        include_avatar: Include avatar_url
        enrollment_state: active, invited, completed or all
        sort_by: Canvas sort order

    Returns:
        List of user dictionaries
    """
    include = []
    if include_grades:
        include.append("enrollments")
    if include_avatar:
        include.append("avatar_url")

    params: dict[str, Any] = {"enrollment_type[]": ["student"], "sort": sort_by}
    if enrollment_state and enrollment_state != "all":
        params["enrollment_state[]"] = [enrollment_state]
    if include:
        params["include[]"] = include

    students = await insights_service.fetch(f"courses/{course_id}/users", params)

    if include_activity and students:
        activity = await asyncio.gather(
            *(_last_activity(insights_service, student["id"]) for student in students)
        )
        for student, last_activity in zip(students, activity):
            student["last_activity"] = last_activity

    return students


async def _performance_summary(
    insights_service: "InsightsService",
    course_id: int,
    student: dict[str, Any],
    include_missing: bool,
    include_late: bool,
) -> dict[str, Any]:
    enrollment = first_enrollment(student)
    grades = (enrollment or {}).get("grades") or {}

    summary: dict[str, Any] = {
        "user": student,
        "enrollment": enrollment,
        "current_score": grades.get("current_score"),
        "final_score": grades.get("final_score"),
        "current_grade": grades.get("current_grade"),
        "final_grade": grades.get("final_grade"),
        "missing_assignments": 0,
        "late_submissions": 0,
        "last_activity": None,
        "participation_score": None,
    }

    submissions_call = None
    if include_missing or include_late:
        submissions_call = insights_service.fetch_or_default(
            None,
            f"courses/{course_id}/students/submissions",
            {"student_ids[]": [student["id"]], "include[]": ["assignment"]},
            description=f"submissions for student {student['id']}",
        )

    if submissions_call is not None:
        submissions, last_activity = await asyncio.gather(
            submissions_call, _last_activity(insights_service, student["id"])
        )
        if submissions is None:
            summary["missing_assignments"] = None
            summary["late_submissions"] = None
        else:
            if include_missing:
                summary["missing_assignments"] = sum(
                    1 for s in submissions if s.get("missing")
                )
            if include_late:
                summary["late_submissions"] = sum(1 for s in submissions if s.get("late"))
    else:
        last_activity = await _last_activity(insights_service, student["id"])

    summary["last_activity"] = last_activity
    return summary


async def get_student_performance(
    insights_service: "InsightsService",
    course_id: int,
    sort_by: str = "name",
    include_missing_assignments: bool = True,
    include_late_submissions: bool = True,
) -> list[dict[str, Any]]:
    """
    Summarize grades, missing and late work and last activity per student.

    Args:
        insights_service: The insights service instance
        course_id: Canvas course ID
        sort_by: score, name, last_login or participation
        include_missing_assignments: Count missing submissions
        include_late_submissions: Count late submissions

    Returns:
        One summary per enrolled student
    """
    students = await insights_service.fetch(
        f"courses/{course_id}/users",
        {"enrollment_type[]": ["student"], "include[]": ["enrollments"]},
    )

    summaries = await asyncio.gather(
        *(
            _performance_summary(
                insights_service,
                course_id,
                student,
                include_missing_assignments,
                include_late_submissions,
            )
            for student in students
        )
    )

    if sort_by == "score":
        summaries.sort(key=lambda s: s["current_score"] or 0, reverse=True)
    elif sort_by == "name":
        summaries.sort(key=lambda s: s["user"].get("sortable_name") or "")
    elif sort_by == "last_login":
        summaries.sort(key=lambda s: sort_key(s["last_activity"]), reverse=True)

    return summaries


async def get_student_details(
    insights_service: "InsightsService",
    course_id: int,
    student_id: int,
    include_progress: bool = True,
    include_analytics: bool = True,
    include_submissions: bool = True,
) -> dict[str, Any]:
    """
    Get one student of a course with progress, submissions and recent
    page views.

    The student record must load. Progress falls back to None, submissions
    and recent activity to empty lists.
    """
    student = await insights_service.fetch(
        f"courses/{course_id}/users/{student_id}",
        {"include[]": ["enrollments", "avatar_url"]},
    )

    async def nothing(default: Any) -> Any:
        return default

    progress, submissions, recent_activity = await asyncio.gather(
        insights_service.fetch_or_default(
            None,
            f"courses/{course_id}/users/{student_id}/progress",
            description=f"progress for student {student_id}",
        )
        if include_progress
        else nothing(None),
        insights_service.fetch_or_default(
            [],
            f"courses/{course_id}/students/submissions",
            {"student_ids[]": [student_id], "include[]": ["assignment"]},
            description=f"submissions for student {student_id}",
        )
        if include_submissions
        else nothing([]),
        insights_service.fetch_or_default(
            [],
            f"users/{student_id}/page_views",
            {"per_page": 10},
            description=f"page views for student {student_id}",
            paginate=False,
        )
        if include_analytics
        else nothing([]),
    )

    return {
        "student": student,
        "progress": progress,
        "submissions": submissions,
        "recent_activity": recent_activity,
    }


async def _activity_summary(
    insights_service: "InsightsService",
    course_id: int,
    student: dict[str, Any],
    include_page_views: bool,
) -> dict[str, Any]:
    student_id = student["id"]

    summary: dict[str, Any] = {
        "user": student,
        "last_login": None,
        "total_page_views": None,
        "recent_page_views": None,
        "participation_count": None,
        "discussion_posts": None,
        "assignment_submissions": None,
        "quiz_submissions": None,
    }

    submissions_call = insights_service.fetch_or_default(
        None,
        f"courses/{course_id}/students/submissions",
        {"student_ids[]": [student_id]},
        description=f"submissions for student {student_id}",
    )

    if include_page_views:
        page_views, submissions = await asyncio.gather(
            insights_service.fetch_or_default(
                None,
                f"users/{student_id}/page_views",
                {"per_page": 100},
                description=f"page views for student {student_id}",
            ),
            submissions_call,
        )
        if page_views is not None:
            cutoff = utc_now() - timedelta(days=RECENT_ACTIVITY_DAYS)
            summary["total_page_views"] = len(page_views)
            summary["recent_page_views"] = sum(
                1
                for view in page_views
                if (created := parse_canvas_datetime(view.get("created_at")))
                and created > cutoff
            )
            if page_views:
                summary["last_login"] = page_views[0].get("created_at")
    else:
        submissions = await submissions_call

    if submissions is not None:
        summary["assignment_submissions"] = sum(
            1 for s in submissions if s.get("workflow_state") == "submitted"
        )

    return summary


async def get_student_activity(
    insights_service: "InsightsService",
    course_id: int,
    student_id: int | None = None,
    include_page_views: bool = True,
    include_participation: bool = True,
) -> list[dict[str, Any]]:
    """
    Summarize page views and submissions for one or all students.

    Args:
        insights_service: The insights service instance
        course_id: Canvas course ID
        student_id: Limit to a single student
        include_page_views: Count total and recent page views
        include_participation: Include participation fields (reported as
            None when Canvas does not expose them)

    Returns:
        One activity summary per student
    """
    if student_id:
        student = await insights_service.fetch(f"courses/{course_id}/users/{student_id}")
        students = [student]
    else:
        students = await insights_service.fetch(
            f"courses/{course_id}/users", {"enrollment_type[]": ["student"]}
        )

    summaries = await asyncio.gather(
        *(
            _activity_summary(insights_service, course_id, student, include_page_views)
            for student in students
        )
    )

    if not include_participation:
        for summary in summaries:
            for key in ("participation_count", "discussion_posts", "quiz_submissions"):
                summary.pop(key)

    return summaries


async def get_user_enrollments(
    insights_service: "InsightsService",
    user_id: int | None = None,
    course_id: int | None = None,
    enrollment_type: str | None = None,
    enrollment_state: str | None = None,
    include_grades: bool = True,
) -> list[dict[str, Any]]:
    """
    List enrollments for a course, a user, or the current user.

    Args:
        insights_service: The insights service instance
        user_id: Canvas user ID (defaults to the current user)
        course_id: Canvas course ID
        enrollment_type: Filter by enrollment type, e.g. StudentEnrollment
        enrollment_state: Filter by enrollment state
        include_grades: Include grades on each enrollment

    Returns:
        List of enrollment dictionaries
    """
    params: dict[str, Any] = {}
    if enrollment_type:
        params["type[]"] = [enrollment_type]
    if enrollment_state:
        params["state[]"] = [enrollment_state]
    if include_grades:
        params["include[]"] = ["grades"]

    if course_id:
        path = f"courses/{course_id}/enrollments"
        if user_id:
            params["user_id"] = user_id
    elif user_id:
        path = f"users/{user_id}/enrollments"
    else:
        path = "users/self/enrollments"

    return await insights_service.fetch(path, params)
