"""
Course Insights

Composite accessors that summarize whole courses for a teacher: the courses
they teach, a detailed course view, and enrollment and grade analytics.
"""

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from canvas_mcp_server.errors import CanvasAPIError
from canvas_mcp_server.insights.students import first_enrollment
from canvas_mcp_server.utils.date_formatter import parse_canvas_datetime, utc_now
from canvas_mcp_server.utils.statistics import (
    grade_distribution,
    mean,
    numeric_scores,
    percentage,
)

if TYPE_CHECKING:
    from canvas_mcp_server.insights.service import InsightsService

# Configure logging
logger = logging.getLogger(__name__)


def _current_score(student: dict[str, Any]) -> Any:
    return ((first_enrollment(student) or {}).get("grades") or {}).get("current_score")


async def get_teacher_courses(
    insights_service: "InsightsService",
    enrollment_state: str = "active",
    include_student_count: bool = True,
    include_needs_grading: bool = True,
    include_recent_activity: bool = False,
    term_id: int | None = None,
) -> list[dict[str, Any]]:
    """
    List the courses the current user teaches.

    Args:
        insights_service: The insights service instance
        enrollment_state: active, completed, invited or all
        include_student_count: Include total_students per course
        include_needs_grading: Include needs_grading_count per course
        include_recent_activity: Include course_progress per course
        term_id: Restrict to one enrollment term

    Returns:
        List of course dictionaries
    """
    include = ["term"]
    if include_student_count:
        include.append("total_students")
    if include_needs_grading:
        include.append("needs_grading_count")
    if include_recent_activity:
        include.append("course_progress")

    params: dict[str, Any] = {"enrollment_type": "teacher", "include[]": include}
    if enrollment_state and enrollment_state != "all":
        params["enrollment_state"] = enrollment_state
    if term_id:
        params["enrollment_term_id"] = term_id

    return await insights_service.fetch("courses", params)


async def get_course_details(
    insights_service: "InsightsService",
    course_id: int,
    include_sections: bool = True,
    include_teachers: bool = True,
    include_enrollment_counts: bool = True,
    include_syllabus: bool = False,
    include_assignments_summary: bool = True,
) -> dict[str, Any]:
    """
    Get one course with optional sections, teachers, syllabus and an
    assignments summary.

    The course itself must load; the assignments summary is None when the
    assignments cannot be fetched.
    """
    include = ["term"]
    if include_sections:
        include.append("sections")
    if include_teachers:
        include.append("teachers")
    if include_enrollment_counts:
        include.append("total_students")
    if include_syllabus:
        include.append("syllabus_body")

    course = await insights_service.fetch(f"courses/{course_id}", {"include[]": include})

    if include_assignments_summary:
        assignments = await insights_service.fetch_or_default(
            None,
            f"courses/{course_id}/assignments",
            description=f"assignments summary for course {course_id}",
        )
        if assignments is None:
            course["assignments_summary"] = None
        else:
            course["assignments_summary"] = {
                "total": len(assignments),
                "published": sum(1 for a in assignments if a.get("published")),
                "with_due_dates": sum(1 for a in assignments if a.get("due_at")),
            }

    return course


async def get_course_analytics(
    insights_service: "InsightsService",
    course_id: int,
    include_assignment_analytics: bool = True,
    include_participation_data: bool = True,
    include_grade_distribution: bool = True,
) -> dict[str, Any]:
    """
    Summarize enrollment, scores and completion for a course.

    Args:
        insights_service: The insights service instance
        course_id: Canvas course ID
        include_assignment_analytics: Compute assignment_completion_rate
        include_participation_data: Compute participation_rate
        include_grade_distribution: Bucket current scores by letter grade

    Returns:
        Analytics dictionary for the course
    """
    course, students = await asyncio.gather(
        insights_service.fetch(f"courses/{course_id}", {"include[]": ["total_students"]}),
        insights_service.fetch(
            f"courses/{course_id}/users",
            {"enrollment_type[]": ["student"], "include[]": ["enrollments"]},
        ),
    )

    total_students = len(students)
    active_students = sum(
        1
        for s in students
        if (first_enrollment(s) or {}).get("enrollment_state") == "active"
    )
    scores = numeric_scores(_current_score(s) for s in students)

    analytics: dict[str, Any] = {
        "course_id": course_id,
        "course_name": course.get("name"),
        "total_students": total_students,
        "active_students": active_students,
        "average_grade": mean(scores),
        "recent_activity_count": 0,
    }

    if include_grade_distribution:
        analytics["grade_distribution"] = grade_distribution(scores, total_students)
    if include_participation_data:
        analytics["participation_rate"] = percentage(active_students, total_students)

    if include_assignment_analytics:
        analytics["assignment_completion_rate"] = await _assignment_completion_rate(
            insights_service, course_id, total_students
        )

    return analytics


async def _assignment_completion_rate(
    insights_service: "InsightsService", course_id: int, total_students: int
) -> float:
    try:
        assignments, submissions = await _fetch_assignments_and_submissions(
            insights_service, course_id
        )
    except CanvasAPIError as e:
        logger.warning(f"Could not compute completion rate for course {course_id}: {e}")
        return 0.0

    expected = len(assignments) * total_students
    submitted = sum(1 for s in submissions if s.get("workflow_state") == "submitted")
    return percentage(submitted, expected)


async def _fetch_assignments_and_submissions(
    insights_service: "InsightsService", course_id: int
) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
    assignments = await insights_service.fetch(f"courses/{course_id}/assignments")
    submissions = await insights_service.fetch(
        f"courses/{course_id}/students/submissions",
        {"student_ids[]": ["all"], "include[]": ["assignment"]},
    )
    return assignments, submissions


async def get_course_statistics(
    insights_service: "InsightsService",
    course_id: int,
    include_grade_distribution: bool = True,
    include_participation_stats: bool = True,
    include_submission_stats: bool = True,
    include_engagement_metrics: bool = False,
) -> dict[str, Any]:
    """
    Build a statistics report for a course.

    Submission statistics are collected per assignment; an assignment whose
    submissions cannot be fetched contributes nothing to the totals.
    """
    course = await insights_service.fetch(f"courses/{course_id}")

    stats: dict[str, Any] = {
        "course_info": {
            "id": course.get("id"),
            "name": course.get("name"),
            "course_code": course.get("course_code"),
            "total_students": course.get("total_students"),
            "start_at": course.get("start_at"),
            "end_at": course.get("end_at"),
        },
        "generated_at": utc_now().isoformat(),
    }

    if include_grade_distribution or include_participation_stats:
        analytics = await insights_service.get_course_analytics(
            course_id,
            include_assignment_analytics=False,
            include_participation_data=include_participation_stats,
            include_grade_distribution=include_grade_distribution,
        )
        if include_grade_distribution:
            stats["grade_distribution"] = analytics["grade_distribution"]
        if include_participation_stats:
            stats["participation_stats"] = {
                "total_students": analytics["total_students"],
                "active_students": analytics["active_students"],
                "participation_rate": analytics["participation_rate"],
                "average_grade": analytics["average_grade"],
            }

    if include_submission_stats:
        stats["submission_stats"] = await _submission_stats(insights_service, course_id)

    if include_engagement_metrics:
        stats["engagement_metrics"] = {
            "note": "Engagement metrics require Canvas Analytics API access"
        }

    return stats


async def _submission_stats(
    insights_service: "InsightsService", course_id: int
) -> dict[str, Any]:
    assignments = await insights_service.fetch(f"courses/{course_id}/assignments")

    results = await insights_service.gather_settled(
        insights_service.fetch(
            f"courses/{course_id}/assignments/{assignment['id']}/submissions"
        )
        for assignment in assignments
    )

    total = late = missing = on_time = 0
    for assignment, result in zip(assignments, results):
        submissions = insights_service.settle(
            result, [], f"submissions of assignment {assignment.get('id')}"
        )
        due = parse_canvas_datetime(assignment.get("due_at"))
        for submission in submissions:
            if submission.get("missing"):
                missing += 1
                continue
            submitted_at = parse_canvas_datetime(submission.get("submitted_at"))
            if submitted_at is None:
                continue
            total += 1
            if submission.get("late"):
                late += 1
            elif due is None or submitted_at <= due:
                on_time += 1

    return {
        "total_assignments": len(assignments),
        "total_submissions": total,
        "late_submissions": late,
        "missing_submissions": missing,
        "on_time_rate": percentage(on_time, total),
    }
