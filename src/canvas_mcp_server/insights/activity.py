"""
Course Activity Insights

Composite accessors for discussions, the activity stream, module completion
progress and full-text search across course content.
"""

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from canvas_mcp_server.insights.service import InsightsService

# Configure logging
logger = logging.getLogger(__name__)

BODY_EXCERPT_LENGTH = 200

# content type -> (endpoint, title field, body field)
SEARCHABLE_CONTENT = {
    "assignment": ("assignments", "name", "description"),
    "discussion_topic": ("discussion_topics", "title", "message"),
    "wiki_page": ("pages", "title", "body"),
    "quiz": ("quizzes", "title", "description"),
    "file": ("files", "display_name", None),
}


async def get_course_discussions(
    insights_service: "InsightsService",
    course_id: int,
    include_unread_count: bool = True,
    include_recent_posts: bool = True,
    only_announcements: bool = False,
    search_term: str | None = None,
) -> list[dict[str, Any]]:
    """List discussion topics (or announcements) of a course."""
    include = []
    if include_unread_count:
        include.append("unread_count")
    if include_recent_posts:
        include.append("recent_posts")

    params: dict[str, Any] = {"only_announcements": only_announcements}
    if include:
        params["include[]"] = include
    if search_term:
        params["search_term"] = search_term

    return await insights_service.fetch(f"courses/{course_id}/discussion_topics", params)


async def get_teacher_activity(
    insights_service: "InsightsService",
    course_id: int | None = None,
    activity_types: list[str] | None = None,
    limit: int = 20,
) -> list[dict[str, Any]]:
    """
    Read the activity stream of the current user or of one course.

    Args:
        insights_service: The insights service instance
        course_id: Use the course activity stream instead of the user's
        activity_types: Keep only these types, e.g. Submission, Message
        limit: Maximum number of activities to return

    Returns:
        List of activity stream items
    """
    path = f"courses/{course_id}/activity_stream" if course_id else "users/self/activity_stream"
    activities = await insights_service.fetch(path, {"per_page": limit})

    if activity_types:
        activities = [a for a in activities if a.get("type") in activity_types]
    return activities[:limit]


def _module_entry(
    module: dict[str, Any],
    items: list[dict[str, Any]] | None,
    include_items: bool,
    include_completion_dates: bool,
) -> dict[str, Any]:
    entry: dict[str, Any] = {
        "state": module.get("state"),
        "current_position": 0,
        "items_completed": None,
        "items_total": None,
    }
    if include_completion_dates:
        entry["completed_at"] = module.get("completed_at")
    if items is not None:
        entry["items_completed"] = sum(
            1 for item in items if (item.get("completion_requirement") or {}).get("completed")
        )
        entry["items_total"] = len(items)
        if include_items:
            entry["items"] = items
    return entry


async def get_module_progress(
    insights_service: "InsightsService",
    course_id: int,
    student_id: int | None = None,
    module_id: int | None = None,
    include_items: bool = True,
    include_completion_dates: bool = True,
) -> list[dict[str, Any]]:
    """
    Report module completion per student.

    Items are fetched per (module, student) pair. When a pair fails its
    counts are None and the student stays in the report.

    Returns:
        One entry per module, each with a student_progress list
    """
    if module_id:
        module = await insights_service.fetch(
            f"courses/{course_id}/modules/{module_id}", {"include[]": ["items"]}
        )
        modules = [module]
    else:
        modules = await insights_service.fetch(
            f"courses/{course_id}/modules", {"include[]": ["items"]}
        )

    if student_id:
        students = [await insights_service.fetch(f"courses/{course_id}/users/{student_id}")]
    else:
        students = await insights_service.fetch(
            f"courses/{course_id}/users", {"enrollment_type[]": ["student"]}
        )

    pairs = [(module, student) for module in modules for student in students]
    results = await insights_service.gather_settled(
        insights_service.fetch(
            f"courses/{course_id}/modules/{module['id']}/items",
            {"student_id": student["id"], "include[]": ["content_details"]},
        )
        for module, student in pairs
    )

    progress: dict[int, list[dict[str, Any]]] = {module["id"]: [] for module in modules}
    for (module, student), result in zip(pairs, results):
        items = insights_service.settle(
            result, None, f"module {module['id']} items for student {student['id']}"
        )
        entry = _module_entry(module, items, include_items, include_completion_dates)
        progress[module["id"]].append({"user": student, **entry})

    return [
        {
            "module_id": module["id"],
            "module_name": module.get("name"),
            "position": module.get("position"),
            "student_progress": progress[module["id"]],
        }
        for module in modules
    ]


def _matches(
    record: dict[str, Any],
    title_field: str,
    body_field: str | None,
    term: str,
    include_body: bool,
) -> bool:
    if term in (record.get(title_field) or "").lower():
        return True
    if include_body and body_field:
        return term in (record.get(body_field) or "").lower()
    return False


def _search_result(
    record: dict[str, Any],
    content_type: str,
    course_id: int,
    title_field: str,
    body_field: str | None,
    include_body: bool,
) -> dict[str, Any]:
    result: dict[str, Any] = {
        "id": record.get("id") or record.get("page_id"),
        "title": record.get(title_field),
        "content_type": content_type,
        "course_id": course_id,
        "html_url": record.get("html_url") or record.get("url"),
        "created_at": record.get("created_at"),
        "updated_at": record.get("updated_at"),
    }
    if include_body and body_field:
        body = record.get(body_field) or ""
        result["body_excerpt"] = (
            body[:BODY_EXCERPT_LENGTH] + "..." if len(body) > BODY_EXCERPT_LENGTH else body
        )
    return result


async def search_course_content(
    insights_service: "InsightsService",
    course_id: int,
    search_term: str,
    content_types: list[str] | None = None,
    include_body: bool = False,
) -> list[dict[str, Any]]:
    """
    Search assignments, discussions, pages, quizzes and files of a course.

    Each content type is searched independently; a type that cannot be
    fetched contributes no results.

    Args:
        insights_service: The insights service instance
        course_id: Canvas course ID
        search_term: Case-insensitive text to look for
        content_types: Subset of assignment, discussion_topic, wiki_page,
            quiz and file (all when None)
        include_body: Also match against, and excerpt, the content body

    Returns:
        Matching content records
    """
    types = [t for t in (content_types or SEARCHABLE_CONTENT) if t in SEARCHABLE_CONTENT]
    term = search_term.lower()

    results = await insights_service.gather_settled(
        insights_service.fetch(
            f"courses/{course_id}/{SEARCHABLE_CONTENT[content_type][0]}",
            {"search_term": search_term},
        )
        for content_type in types
    )

    matches = []
    for content_type, result in zip(types, results):
        records = insights_service.settle(result, [], f"{content_type} search in course {course_id}")
        _, title_field, body_field = SEARCHABLE_CONTENT[content_type]
        matches.extend(
            _search_result(record, content_type, course_id, title_field, body_field, include_body)
            for record in records
            if _matches(record, title_field, body_field, term, include_body)
        )
    return matches
