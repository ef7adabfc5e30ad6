"""
Canvas API Adapter

This module provides a dedicated adapter for interacting with the Canvas API.
Each method maps one Canvas operation onto one HTTP call and returns the
decoded JSON payload. Retries, pagination and error normalization are
handled by CanvasHttpClient; CanvasAPIError propagates to the caller.
"""

import logging
from datetime import UTC, datetime
from typing import Any

from canvas_mcp_server.errors import CanvasAPIError
from canvas_mcp_server.http_client import CanvasHttpClient

# Configure logging
logger = logging.getLogger(__name__)

UserRef = int | str


def _without_none(values: dict[str, Any]) -> dict[str, Any]:
    """Drop keys whose value is None so they are not sent to Canvas."""
    return {key: value for key, value in values.items() if value is not None}


class CanvasApiAdapter:
    """
    Adapter for interacting with the Canvas LMS API.

    This class is responsible for making all direct calls to the Canvas API.
    """

    def __init__(self, http_client: CanvasHttpClient):
        """
        Initialize the Canvas API adapter.

        Args:
            http_client: Transport used for every request
        """
        self.http = http_client

    # ---------------------------------------------------------------
    # Health
    # ---------------------------------------------------------------

    def health_check(self) -> dict[str, Any]:
        """
        Check connectivity by fetching the current user's profile.

        Returns:
            Dictionary with status, timestamp and, when healthy, the user
        """
        timestamp = datetime.now(UTC).isoformat()
        try:
            user = self.get_user_profile()
        except CanvasAPIError as e:
            logger.error(f"Canvas health check failed: {e}")
            return {"status": "error", "timestamp": timestamp}

        return {
            "status": "ok",
            "timestamp": timestamp,
            "user": {"id": user.get("id"), "name": user.get("name")},
        }

    # ---------------------------------------------------------------
    # Courses
    # ---------------------------------------------------------------

    def list_courses(self, include_ended: bool = False) -> list[dict[str, Any]]:
        """
        List courses for the current user.

        Args:
            include_ended: Include courses whose term has ended

        Returns:
            List of course dictionaries
        """
        params: dict[str, Any] = {
            "include[]": ["total_students", "teachers", "term", "course_progress"],
        }
        if not include_ended:
            params["state[]"] = ["available", "completed"]
        return self.http.get("courses", params=params)

    def get_course(self, course_id: int) -> dict[str, Any]:
        return self.http.get(
            f"courses/{course_id}",
            params={
                "include[]": [
                    "total_students",
                    "teachers",
                    "term",
                    "course_progress",
                    "sections",
                    "syllabus_body",
                ]
            },
        )

    def create_course(self, account_id: int, **course_data: Any) -> dict[str, Any]:
        """
        Create a course in an account.

        Args:
            account_id: Account that will own the course
            **course_data: Course attributes (name, course_code, start_at, ...)

        Returns:
            The created course
        """
        return self.http.post(
            f"accounts/{account_id}/courses",
            body={"course": _without_none(course_data)},
        )

    def update_course(self, course_id: int, **course_data: Any) -> dict[str, Any]:
        return self.http.put(
            f"courses/{course_id}", body={"course": _without_none(course_data)}
        )

    def delete_course(self, course_id: int) -> None:
        self.http.delete(f"courses/{course_id}")

    def list_student_courses(self) -> list[dict[str, Any]]:
        """List active courses with enrollment details for the current user."""
        return self.http.get(
            "courses",
            params={
                "include[]": ["enrollments", "total_students", "term", "course_progress"],
                "enrollment_state": "active",
            },
        )

    def get_syllabus(self, course_id: int) -> dict[str, Any]:
        """
        Get the syllabus of a course.

        Args:
            course_id: Canvas course ID

        Returns:
            Dictionary with course_id and syllabus_body
        """
        course = self.http.get(
            f"courses/{course_id}", params={"include[]": ["syllabus_body"]}
        )
        return {"course_id": course_id, "syllabus_body": course.get("syllabus_body")}

    # ---------------------------------------------------------------
    # Assignments
    # ---------------------------------------------------------------

    def list_assignments(
        self, course_id: int, include_submissions: bool = False
    ) -> list[dict[str, Any]]:
        """
        List assignments in a course.

        Args:
            course_id: Canvas course ID
            include_submissions: Include the current user's submission

        Returns:
            List of assignment dictionaries
        """
        include = ["assignment_group", "rubric", "due_at"]
        if include_submissions:
            include.append("submission")
        return self.http.get(
            f"courses/{course_id}/assignments", params={"include[]": include}
        )

    def get_assignment(
        self, course_id: int, assignment_id: int, include_submission: bool = False
    ) -> dict[str, Any]:
        include = ["assignment_group", "rubric"]
        if include_submission:
            include.append("submission")
        return self.http.get(
            f"courses/{course_id}/assignments/{assignment_id}",
            params={"include[]": include},
        )

    def create_assignment(self, course_id: int, **assignment_data: Any) -> dict[str, Any]:
        return self.http.post(
            f"courses/{course_id}/assignments",
            body={"assignment": _without_none(assignment_data)},
        )

    def update_assignment(
        self, course_id: int, assignment_id: int, **assignment_data: Any
    ) -> dict[str, Any]:
        return self.http.put(
            f"courses/{course_id}/assignments/{assignment_id}",
            body={"assignment": _without_none(assignment_data)},
        )

    def delete_assignment(self, course_id: int, assignment_id: int) -> None:
        self.http.delete(f"courses/{course_id}/assignments/{assignment_id}")

    def list_assignment_groups(self, course_id: int) -> list[dict[str, Any]]:
        return self.http.get(
            f"courses/{course_id}/assignment_groups",
            params={"include[]": ["assignments"]},
        )

    def get_assignment_group(self, course_id: int, group_id: int) -> dict[str, Any]:
        return self.http.get(
            f"courses/{course_id}/assignment_groups/{group_id}",
            params={"include[]": ["assignments"]},
        )

    # ---------------------------------------------------------------
    # Submissions
    # ---------------------------------------------------------------

    def list_submissions(self, course_id: int, assignment_id: int) -> list[dict[str, Any]]:
        return self.http.get(
            f"courses/{course_id}/assignments/{assignment_id}/submissions",
            params={"include[]": ["submission_comments", "rubric_assessment", "assignment"]},
        )

    def get_submission(
        self, course_id: int, assignment_id: int, user_id: UserRef = "self"
    ) -> dict[str, Any]:
        """
        Get one user's submission for an assignment.

        Args:
            course_id: Canvas course ID
            assignment_id: Canvas assignment ID
            user_id: Canvas user ID, or "self" for the current user

        Returns:
            Submission dictionary
        """
        return self.http.get(
            f"courses/{course_id}/assignments/{assignment_id}/submissions/{user_id}",
            params={"include[]": ["submission_comments", "rubric_assessment", "assignment"]},
        )

    def submit_grade(
        self,
        course_id: int,
        assignment_id: int,
        user_id: int,
        grade: str | float,
        comment: str | None = None,
    ) -> dict[str, Any]:
        """
        Grade a student's submission.

        Args:
            course_id: Canvas course ID
            assignment_id: Canvas assignment ID
            user_id: Student's Canvas user ID
            grade: Grade to post (points, percentage or letter)
            comment: Optional text comment attached to the grade

        Returns:
            Updated submission
        """
        submission: dict[str, Any] = {"posted_grade": grade}
        if comment:
            submission["comment"] = {"text_comment": comment}
        return self.http.put(
            f"courses/{course_id}/assignments/{assignment_id}/submissions/{user_id}",
            body={"submission": submission},
        )

    def submit_assignment(
        self,
        course_id: int,
        assignment_id: int,
        submission_type: str,
        body: str | None = None,
        url: str | None = None,
        file_ids: list[int] | None = None,
    ) -> dict[str, Any]:
        """
        Submit work for an assignment as the current user.

        Args:
            course_id: Canvas course ID
            assignment_id: Canvas assignment ID
            submission_type: online_text_entry, online_url or online_upload
            body: Text content for text entries
            url: URL for URL submissions
            file_ids: Previously uploaded file IDs for uploads

        Returns:
            The created submission
        """
        submission: dict[str, Any] = {"submission_type": submission_type}
        if body:
            submission["body"] = body
        if url:
            submission["url"] = url
        if file_ids:
            submission["file_ids"] = file_ids
        return self.http.post(
            f"courses/{course_id}/assignments/{assignment_id}/submissions",
            body={"submission": submission},
        )

    # ---------------------------------------------------------------
    # Files, folders and pages
    # ---------------------------------------------------------------

    def list_files(self, course_id: int, folder_id: int | None = None) -> list[dict[str, Any]]:
        path = f"folders/{folder_id}/files" if folder_id else f"courses/{course_id}/files"
        return self.http.get(path)

    def get_file(self, file_id: int) -> dict[str, Any]:
        return self.http.get(f"files/{file_id}")

    def upload_file(
        self,
        course_id: int,
        name: str,
        size: int,
        content_type: str | None = None,
        folder_id: int | None = None,
    ) -> dict[str, Any]:
        """
        Start a file upload.

        Only the first step of the Canvas upload flow is performed; the
        returned upload target must be used to send the file bytes.
        """
        path = f"folders/{folder_id}/files" if folder_id else f"courses/{course_id}/files"
        return self.http.post(
            path,
            body={
                "name": name,
                "size": size,
                "content_type": content_type or "application/octet-stream",
            },
        )

    def list_folders(self, course_id: int) -> list[dict[str, Any]]:
        return self.http.get(f"courses/{course_id}/folders")

    def list_pages(self, course_id: int) -> list[dict[str, Any]]:
        return self.http.get(f"courses/{course_id}/pages")

    def get_page(self, course_id: int, page_url: str) -> dict[str, Any]:
        return self.http.get(f"courses/{course_id}/pages/{page_url}")

    # ---------------------------------------------------------------
    # Calendar
    # ---------------------------------------------------------------

    def list_calendar_events(
        self, start_date: str | None = None, end_date: str | None = None
    ) -> list[dict[str, Any]]:
        params = {
            "type": "event",
            "all_events": True,
            "start_date": start_date,
            "end_date": end_date,
        }
        return self.http.get("calendar_events", params=params)

    def get_upcoming_assignments(self, limit: int = 10) -> list[dict[str, Any]]:
        """
        Get upcoming events that are assignments.

        Args:
            limit: Maximum number of upcoming events requested from Canvas

        Returns:
            Upcoming events carrying an assignment
        """
        events = self.http.get("users/self/upcoming_events", params={"limit": limit})
        return [event for event in events if event.get("assignment")]

    # ---------------------------------------------------------------
    # Rubrics
    # ---------------------------------------------------------------

    def list_rubrics(self, course_id: int) -> list[dict[str, Any]]:
        return self.http.get(f"courses/{course_id}/rubrics")

    def get_rubric(self, course_id: int, rubric_id: int) -> dict[str, Any]:
        return self.http.get(f"courses/{course_id}/rubrics/{rubric_id}")

    # ---------------------------------------------------------------
    # Dashboard
    # ---------------------------------------------------------------

    def get_dashboard(self) -> dict[str, Any]:
        return self.http.get("users/self/dashboard")

    def get_dashboard_cards(self) -> list[dict[str, Any]]:
        return self.http.get("dashboard/dashboard_cards")

    # ---------------------------------------------------------------
    # Conversations and notifications
    # ---------------------------------------------------------------

    def list_conversations(self) -> list[dict[str, Any]]:
        return self.http.get("conversations")

    def get_conversation(self, conversation_id: int) -> dict[str, Any]:
        return self.http.get(f"conversations/{conversation_id}")

    def create_conversation(
        self, recipients: list[str], body: str, subject: str | None = None
    ) -> list[dict[str, Any]]:
        return self.http.post(
            "conversations",
            body=_without_none({"recipients": recipients, "body": body, "subject": subject}),
        )

    def list_notifications(self) -> list[dict[str, Any]]:
        return self.http.get("users/self/activity_stream")

    # ---------------------------------------------------------------
    # Users, enrollments and grades
    # ---------------------------------------------------------------

    def list_users(self, course_id: int) -> list[dict[str, Any]]:
        return self.http.get(
            f"courses/{course_id}/users",
            params={"include[]": ["email", "enrollments", "avatar_url"]},
        )

    def list_enrollments(self, course_id: int) -> list[dict[str, Any]]:
        return self.http.get(f"courses/{course_id}/enrollments")

    def enroll_user(
        self,
        course_id: int,
        user_id: int,
        role: str = "StudentEnrollment",
        enrollment_state: str = "active",
    ) -> dict[str, Any]:
        """
        Enroll a user in a course.

        Args:
            course_id: Canvas course ID
            user_id: Canvas user ID
            role: Enrollment type, e.g. StudentEnrollment or TeacherEnrollment
            enrollment_state: Initial enrollment state

        Returns:
            The created enrollment
        """
        return self.http.post(
            f"courses/{course_id}/enrollments",
            body={
                "enrollment": {
                    "user_id": user_id,
                    "type": role,
                    "enrollment_state": enrollment_state,
                }
            },
        )

    def unenroll_user(self, course_id: int, enrollment_id: int) -> None:
        self.http.delete(f"courses/{course_id}/enrollments/{enrollment_id}")

    def get_course_grades(self, course_id: int) -> list[dict[str, Any]]:
        return self.http.get(
            f"courses/{course_id}/enrollments",
            params={"include[]": ["grades", "observed_users"]},
        )

    def get_user_grades(self) -> Any:
        return self.http.get("users/self/grades")

    def get_user_profile(self) -> dict[str, Any]:
        return self.http.get("users/self/profile")

    def update_user_profile(self, **profile_data: Any) -> dict[str, Any]:
        return self.http.put("users/self", body={"user": _without_none(profile_data)})

    # ---------------------------------------------------------------
    # Modules
    # ---------------------------------------------------------------

    def list_modules(self, course_id: int) -> list[dict[str, Any]]:
        return self.http.get(
            f"courses/{course_id}/modules", params={"include[]": ["items"]}
        )

    def get_module(self, course_id: int, module_id: int) -> dict[str, Any]:
        return self.http.get(
            f"courses/{course_id}/modules/{module_id}", params={"include[]": ["items"]}
        )

    def list_module_items(self, course_id: int, module_id: int) -> list[dict[str, Any]]:
        return self.http.get(
            f"courses/{course_id}/modules/{module_id}/items",
            params={"include[]": ["content_details"]},
        )

    def get_module_item(self, course_id: int, module_id: int, item_id: int) -> dict[str, Any]:
        return self.http.get(
            f"courses/{course_id}/modules/{module_id}/items/{item_id}",
            params={"include[]": ["content_details"]},
        )

    def mark_module_item_complete(self, course_id: int, module_id: int, item_id: int) -> None:
        self.http.put(f"courses/{course_id}/modules/{module_id}/items/{item_id}/done")

    # ---------------------------------------------------------------
    # Discussions and announcements
    # ---------------------------------------------------------------

    def list_discussion_topics(self, course_id: int) -> list[dict[str, Any]]:
        return self.http.get(
            f"courses/{course_id}/discussion_topics", params={"include[]": ["assignment"]}
        )

    def get_discussion_topic(self, course_id: int, topic_id: int) -> dict[str, Any]:
        return self.http.get(
            f"courses/{course_id}/discussion_topics/{topic_id}",
            params={"include[]": ["assignment"]},
        )

    def post_to_discussion(self, course_id: int, topic_id: int, message: str) -> dict[str, Any]:
        return self.http.post(
            f"courses/{course_id}/discussion_topics/{topic_id}/entries",
            body={"message": message},
        )

    def list_announcements(self, course_id: int) -> list[dict[str, Any]]:
        return self.http.get(
            f"courses/{course_id}/discussion_topics",
            params={"only_announcements": True, "include[]": ["assignment"]},
        )

    # ---------------------------------------------------------------
    # Quizzes
    # ---------------------------------------------------------------

    def list_quizzes(self, course_id: int) -> list[dict[str, Any]]:
        return self.http.get(f"courses/{course_id}/quizzes")

    def get_quiz(self, course_id: int, quiz_id: int) -> dict[str, Any]:
        return self.http.get(f"courses/{course_id}/quizzes/{quiz_id}")

    def create_quiz(self, course_id: int, **quiz_data: Any) -> dict[str, Any]:
        return self.http.post(
            f"courses/{course_id}/quizzes", body={"quiz": _without_none(quiz_data)}
        )

    def update_quiz(self, course_id: int, quiz_id: int, **quiz_data: Any) -> dict[str, Any]:
        return self.http.put(
            f"courses/{course_id}/quizzes/{quiz_id}", body={"quiz": _without_none(quiz_data)}
        )

    def delete_quiz(self, course_id: int, quiz_id: int) -> None:
        self.http.delete(f"courses/{course_id}/quizzes/{quiz_id}")

    def start_quiz_attempt(self, course_id: int, quiz_id: int) -> dict[str, Any]:
        return self.http.post(f"courses/{course_id}/quizzes/{quiz_id}/submissions")

    def submit_quiz_attempt(
        self, course_id: int, quiz_id: int, submission_id: int, answers: Any
    ) -> dict[str, Any]:
        return self.http.post(
            f"courses/{course_id}/quizzes/{quiz_id}/submissions/{submission_id}/complete",
            body={"quiz_submissions": [{"attempt": 1, "questions": answers}]},
        )

    # ---------------------------------------------------------------
    # Accounts and reports
    # ---------------------------------------------------------------

    def list_token_scopes(self, account_id: int, group_by: str | None = None) -> list[dict[str, Any]]:
        return self.http.get(f"accounts/{account_id}/scopes", params={"group_by": group_by})

    def get_account(self, account_id: int) -> dict[str, Any]:
        return self.http.get(f"accounts/{account_id}")

    def list_account_courses(self, account_id: int, **filters: Any) -> list[dict[str, Any]]:
        """
        List courses in an account.

        Args:
            account_id: Canvas account ID
            **filters: Query filters (with_enrollments, published, search_term, sort, ...)

        Returns:
            List of course dictionaries
        """
        return self.http.get(f"accounts/{account_id}/courses", params=filters)

    def list_account_users(self, account_id: int, **filters: Any) -> list[dict[str, Any]]:
        return self.http.get(f"accounts/{account_id}/users", params=filters)

    def create_user(
        self, account_id: int, user: dict[str, Any], pseudonym: dict[str, Any]
    ) -> dict[str, Any]:
        return self.http.post(
            f"accounts/{account_id}/users", body={"user": user, "pseudonym": pseudonym}
        )

    def list_sub_accounts(self, account_id: int) -> list[dict[str, Any]]:
        return self.http.get(f"accounts/{account_id}/sub_accounts")

    def get_account_reports(self, account_id: int) -> list[dict[str, Any]]:
        return self.http.get(f"accounts/{account_id}/reports")

    def create_account_report(
        self, account_id: int, report: str, parameters: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        return self.http.post(
            f"accounts/{account_id}/reports/{report}",
            body={"parameters": parameters or {}},
        )

    def get_account_report(self, account_id: int, report_type: str, report_id: int) -> dict[str, Any]:
        return self.http.get(f"accounts/{account_id}/reports/{report_type}/{report_id}")
