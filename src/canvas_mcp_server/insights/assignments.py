"""
Assignment Insights

Composite accessors about assignments and their submissions: the grading
queue, filtered assignment lists, upcoming due dates, per-assignment
analytics, missing work and gradebook exports.
"""

import asyncio
import logging
from datetime import datetime
from typing import TYPE_CHECKING, Any

from canvas_mcp_server.utils.date_formatter import (
    days_from_now,
    days_overdue,
    is_date_in_range,
    parse_canvas_datetime,
    sort_key,
    utc_now,
)
from canvas_mcp_server.utils.statistics import mean, median, numeric_scores

if TYPE_CHECKING:
    from canvas_mcp_server.insights.service import InsightsService

# Configure logging
logger = logging.getLogger(__name__)

QUIZ_SUBMISSION_TYPE = "online_quiz"


def _is_quiz(assignment: dict[str, Any] | None) -> bool:
    if not assignment:
        return False
    return bool(assignment.get("quiz_id")) or QUIZ_SUBMISSION_TYPE in (
        assignment.get("submission_types") or []
    )


async def get_grading_queue(
    insights_service: "InsightsService",
    course_id: int | None = None,
    include_quiz_submissions: bool = True,
    limit: int = 50,
) -> list[dict[str, Any]]:
    """
    List work waiting to be graded.

    With a course, assignments of that course with a positive
    needs_grading_count are returned. Without one, grading items from the
    current user's to-do list are returned.

    Args:
        insights_service: The insights service instance
        course_id: Limit to one course
        include_quiz_submissions: Keep quiz assignments in the queue
        limit: Maximum number of to-do items to request

    Returns:
        List of grading queue items
    """
    if course_id:
        course, assignments = await asyncio.gather(
            insights_service.fetch(f"courses/{course_id}"),
            insights_service.fetch(
                f"courses/{course_id}/assignments",
                {"include[]": ["needs_grading_count"]},
            ),
        )
        return [
            {
                "id": assignment["id"],
                "title": assignment.get("name"),
                "course_id": course_id,
                "course_name": course.get("name"),
                "assignment_id": assignment["id"],
                "needs_grading_count": assignment.get("needs_grading_count"),
                "due_date": assignment.get("due_at"),
                "html_url": assignment.get("html_url"),
                "type": "assignment",
            }
            for assignment in assignments
            if (assignment.get("needs_grading_count") or 0) > 0
            and (include_quiz_submissions or not _is_quiz(assignment))
        ]

    todos = await insights_service.fetch("users/self/todo", {"per_page": limit})
    queue = []
    for todo in todos:
        if todo.get("type") != "grading":
            continue
        assignment = todo.get("assignment") or {}
        if not include_quiz_submissions and _is_quiz(assignment):
            continue
        queue.append(
            {
                "id": assignment.get("id"),
                "title": assignment.get("name"),
                "course_id": todo.get("course_id"),
                "course_name": todo.get("context_name"),
                "assignment_id": assignment.get("id"),
                "needs_grading_count": todo.get("needs_grading_count"),
                "due_date": assignment.get("due_at"),
                "html_url": todo.get("html_url"),
                "type": "assignment",
            }
        )
    return queue


def _matches_due_date_filter(
    assignment: dict[str, Any], due_date_filter: str, now: datetime
) -> bool:
    due = parse_canvas_datetime(assignment.get("due_at"))
    if due_date_filter == "no_due_date":
        return due is None
    if due_date_filter == "past_due":
        return due is not None and due < now
    if due_date_filter == "upcoming":
        return due is not None and due > now
    return True


async def get_course_assignments(
    insights_service: "InsightsService",
    course_id: int,
    include_submissions: bool = True,
    include_rubric: bool = False,
    include_overrides: bool = False,
    assignment_group_id: int | None = None,
    due_date_filter: str = "all",
    search_term: str | None = None,
) -> list[dict[str, Any]]:
    """
    List the assignments of a course with optional includes and a due date
    filter (past_due, upcoming, no_due_date or all).
    """
    include = ["submission"]
    if include_submissions:
        include.append("needs_grading_count")
    if include_rubric:
        include.append("rubric")
    if include_overrides:
        include.append("overrides")

    params: dict[str, Any] = {"include[]": include}
    if assignment_group_id:
        params["assignment_group_id"] = assignment_group_id
    if search_term:
        params["search_term"] = search_term

    assignments = await insights_service.fetch(f"courses/{course_id}/assignments", params)

    if due_date_filter == "all":
        return assignments
    now = utc_now()
    return [a for a in assignments if _matches_due_date_filter(a, due_date_filter, now)]


async def get_upcoming_events(
    insights_service: "InsightsService",
    course_id: int | None = None,
    days_ahead: int = 7,
    include_assignments: bool = True,
    include_calendar_events: bool = True,
    include_quiz_due_dates: bool = True,
) -> list[dict[str, Any]]:
    """
    Collect assignments and calendar events due in the next `days_ahead` days.

    Args:
        insights_service: The insights service instance
        course_id: Limit to one course
        days_ahead: Size of the window, in days from now
        include_assignments: Include assignment due dates
        include_calendar_events: Include calendar events
        include_quiz_due_dates: Keep quiz assignments

    Returns:
        Events sorted by due date, earliest first
    """
    now = utc_now()
    end = days_from_now(days_ahead, now)

    async def nothing() -> list:
        return []

    if include_assignments:
        if course_id:
            assignments_call = insights_service.fetch(
                f"courses/{course_id}/assignments", {"include[]": ["submission"]}
            )
        else:
            assignments_call = insights_service.fetch("users/self/upcoming_events")
    else:
        assignments_call = nothing()

    if include_calendar_events:
        params: dict[str, Any] = {
            "start_date": now.date().isoformat(),
            "end_date": end.date().isoformat(),
        }
        if course_id:
            params["context_codes[]"] = [f"course_{course_id}"]
        calendar_call = insights_service.fetch("calendar_events", params)
    else:
        calendar_call = nothing()

    assignments, calendar_events = await asyncio.gather(assignments_call, calendar_call)

    events = []
    for item in assignments:
        assignment = item.get("assignment") or item
        if not include_quiz_due_dates and _is_quiz(assignment):
            continue
        due_at = item.get("due_at") or assignment.get("due_at")
        if not is_date_in_range(due_at, now, end):
            continue
        events.append(
            {
                "id": item.get("id") or assignment.get("id"),
                "title": item.get("name") or item.get("title") or assignment.get("name"),
                "type": "assignment",
                "due_date": due_at,
                "course_id": course_id or assignment.get("course_id"),
                "course_name": item.get("context_name"),
                "html_url": item.get("html_url"),
                "points_possible": assignment.get("points_possible"),
            }
        )

    for event in calendar_events:
        events.append(
            {
                "id": event.get("id"),
                "title": event.get("title"),
                "type": "calendar_event",
                "due_date": event.get("start_at"),
                "course_id": course_id,
                "course_name": event.get("context_name"),
                "html_url": event.get("html_url"),
                "description": event.get("description"),
            }
        )

    events.sort(key=lambda e: sort_key(e["due_date"]))
    return events


def _submission_summary(
    assignment: dict[str, Any],
    submissions: list[dict[str, Any]],
    include_score_distribution: bool,
    include_submission_timing: bool,
) -> dict[str, Any]:
    due = parse_canvas_datetime(assignment.get("due_at"))
    scores = numeric_scores(s.get("score") for s in submissions)

    summary: dict[str, Any] = {
        "assignment": assignment,
        "submission_count": sum(
            1 for s in submissions if s.get("workflow_state") == "submitted"
        ),
        "graded_count": sum(1 for s in submissions if s.get("workflow_state") == "graded"),
        "average_score": mean(scores),
        "median_score": median(scores),
    }
    if include_score_distribution:
        summary["score_distribution"] = scores
    if include_submission_timing:
        on_time = 0
        for s in submissions:
            submitted_at = parse_canvas_datetime(s.get("submitted_at"))
            if submitted_at and (due is None or submitted_at <= due):
                on_time += 1
        summary["on_time_submissions"] = on_time
        summary["late_submissions"] = sum(1 for s in submissions if s.get("late"))
        summary["missing_submissions"] = sum(1 for s in submissions if s.get("missing"))
    return summary


async def get_assignment_analytics(
    insights_service: "InsightsService",
    course_id: int,
    assignment_id: int | None = None,
    include_score_distribution: bool = True,
    include_submission_timing: bool = True,
) -> list[dict[str, Any]]:
    """
    Compute submission, score and timing statistics per assignment.

    For a whole course, an assignment whose submissions cannot be fetched is
    left out of the result.
    """
    if assignment_id:
        assignment, submissions = await asyncio.gather(
            insights_service.fetch(f"courses/{course_id}/assignments/{assignment_id}"),
            insights_service.fetch(
                f"courses/{course_id}/assignments/{assignment_id}/submissions",
                {"include[]": ["user"]},
            ),
        )
        return [
            _submission_summary(
                assignment, submissions, include_score_distribution, include_submission_timing
            )
        ]

    assignments = await insights_service.fetch(f"courses/{course_id}/assignments")
    results = await insights_service.gather_settled(
        insights_service.fetch(
            f"courses/{course_id}/assignments/{assignment['id']}/submissions",
            {"include[]": ["user"]},
        )
        for assignment in assignments
    )

    analytics = []
    for assignment, result in zip(assignments, results):
        submissions = insights_service.settle(
            result, None, f"submissions of assignment {assignment.get('id')}"
        )
        if submissions is None:
            continue
        analytics.append(
            _submission_summary(
                assignment, submissions, include_score_distribution, include_submission_timing
            )
        )
    return analytics


def _is_missing(submission: dict[str, Any], include_late: bool, now: datetime) -> bool:
    if submission.get("missing"):
        return True
    assignment = submission.get("assignment") or {}
    due = parse_canvas_datetime(assignment.get("due_at"))
    if not submission.get("submitted_at") and due is not None and due < now:
        return True
    return include_late and bool(submission.get("late"))


async def _course_missing_submissions(
    insights_service: "InsightsService",
    course_id: int,
    student_id: int | None,
    include_late: bool,
    assignment_group_id: int | None,
    min_days_overdue: int | None,
) -> list[dict[str, Any]]:
    params: dict[str, Any] = {
        "student_ids[]": [student_id] if student_id else ["all"],
        "include[]": ["assignment", "user"],
    }
    submissions = await insights_service.fetch(
        f"courses/{course_id}/students/submissions", params
    )

    now = utc_now()
    missing = []
    for submission in submissions:
        if not _is_missing(submission, include_late, now):
            continue
        assignment = submission.get("assignment") or {}
        if assignment_group_id and assignment.get("assignment_group_id") != assignment_group_id:
            continue
        overdue = days_overdue(assignment.get("due_at"), now)
        if min_days_overdue is not None and overdue < min_days_overdue:
            continue
        missing.append(
            {
                "assignment": assignment,
                "student": submission.get("user"),
                "course_id": course_id,
                "days_overdue": overdue,
                "points_possible": assignment.get("points_possible"),
                "late": bool(submission.get("late")),
                "missing": bool(submission.get("missing")),
            }
        )
    return missing


async def get_missing_submissions(
    insights_service: "InsightsService",
    course_id: int | None = None,
    student_id: int | None = None,
    include_late_submissions: bool = True,
    assignment_group_id: int | None = None,
    days_overdue: int | None = None,
) -> list[dict[str, Any]]:
    """
    Find missing (and optionally late) submissions.

    Args:
        insights_service: The insights service instance
        course_id: Limit to one course; all actively taught courses otherwise
        student_id: Limit to one student
        include_late_submissions: Also report late submissions
        assignment_group_id: Limit to one assignment group
        days_overdue: Only report work at least this many days overdue

    Returns:
        List of missing submission records
    """
    if course_id:
        return await _course_missing_submissions(
            insights_service,
            course_id,
            student_id,
            include_late_submissions,
            assignment_group_id,
            days_overdue,
        )

    courses = await insights_service.get_teacher_courses(
        enrollment_state="active",
        include_student_count=False,
        include_needs_grading=False,
    )
    results = await insights_service.gather_settled(
        _course_missing_submissions(
            insights_service,
            course["id"],
            student_id,
            include_late_submissions,
            assignment_group_id,
            days_overdue,
        )
        for course in courses
    )

    missing: list[dict[str, Any]] = []
    for course, result in zip(courses, results):
        missing.extend(
            insights_service.settle(result, [], f"missing submissions for course {course['id']}")
        )
    return missing


def _hide_unposted(submission: dict[str, Any]) -> dict[str, Any]:
    if submission.get("posted_at") or submission.get("score") is None:
        return submission
    return {**submission, "score": None, "grade": None}


async def get_gradebook_data(
    insights_service: "InsightsService",
    course_id: int,
    include_unposted_grades: bool = False,
    include_custom_columns: bool = False,
    student_ids: list[int] | None = None,
    assignment_group_id: int | None = None,
) -> dict[str, Any]:
    """
    Export assignments, students and submissions of a course in one payload.

    Custom gradebook columns are optional and default to an empty list when
    they cannot be fetched.
    """
    assignment_params: dict[str, Any] = {}
    if assignment_group_id:
        assignment_params["assignment_group_id"] = assignment_group_id

    student_params: dict[str, Any] = {
        "enrollment_type[]": ["student"],
        "include[]": ["enrollments"],
    }
    if student_ids:
        student_params["user_ids[]"] = student_ids

    async def nothing() -> list:
        return []

    assignments, students, submissions, custom_columns = await asyncio.gather(
        insights_service.fetch(f"courses/{course_id}/assignments", assignment_params),
        insights_service.fetch(f"courses/{course_id}/users", student_params),
        insights_service.fetch(
            f"courses/{course_id}/students/submissions",
            {"student_ids[]": student_ids or ["all"]},
        ),
        insights_service.fetch_or_default(
            [],
            f"courses/{course_id}/custom_gradebook_columns",
            description=f"custom gradebook columns for course {course_id}",
        )
        if include_custom_columns
        else nothing(),
    )

    if not include_unposted_grades:
        submissions = [_hide_unposted(s) for s in submissions]

    return {
        "course_id": course_id,
        "assignments": assignments,
        "students": students,
        "submissions": submissions,
        "custom_columns": custom_columns,
        "generated_at": utc_now().isoformat(),
    }
