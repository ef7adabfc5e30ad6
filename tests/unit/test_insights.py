"""
Unit tests for the composite insight accessors.

These tests verify the fan-out and summarizing logic, and that a failing
per-entity sub-call leaves the rest of the result intact.
"""

import asyncio
from datetime import timedelta

import pytest

from canvas_mcp_server.errors import CanvasAPIError
from canvas_mcp_server.utils.date_formatter import utc_now
from tests.fakes.fake_http import BASE_URL, error, make_response, page


def iso(delta: timedelta) -> str:
    return (utc_now() + delta).strftime("%Y-%m-%dT%H:%M:%SZ")


def student(user_id: int, name: str, score=None, state: str = "active") -> dict:
    return {
        "id": user_id,
        "name": name,
        "sortable_name": name,
        "enrollments": [{"enrollment_state": state, "grades": {"current_score": score}}],
    }


@pytest.fixture
def roster() -> list[dict]:
    return [
        student(1, "Adams, Ann", 92),
        student(2, "Baker, Bob", 71),
        student(3, "Clark, Cy"),
        student(4, "Diaz, Dee", 85, state="invited"),
        student(5, "Evans, Eve", 55),
    ]


class TestCourseStudents:
    def test_partial_page_view_failure_keeps_whole_roster(self, insights, fake_session, roster):
        fake_session.route("GET", "courses/1/users", page(roster))
        for s in roster:
            fake_session.route(
                "GET",
                f"users/{s['id']}/page_views",
                page([{"created_at": f"2024-09-1{s['id']}T10:00:00Z"}]),
            )
        fake_session.route("GET", "users/3/page_views", error(500, {"message": "boom"}))

        result = asyncio.run(insights.get_course_students(1))

        assert [s["id"] for s in result] == [1, 2, 3, 4, 5]
        assert result[2]["last_activity"] is None
        assert result[0]["last_activity"] == "2024-09-11T10:00:00Z"
        assert result[4]["last_activity"] == "2024-09-15T10:00:00Z"

    def test_params(self, insights, fake_session):
        fake_session.route("GET", "courses/1/users", page([]))

        asyncio.run(
            insights.get_course_students(
                1, include_activity=False, include_avatar=True, enrollment_state="all"
            )
        )

        params = fake_session.calls[0].params
        assert params["enrollment_type[]"] == ["student"]
        assert params["include[]"] == ["enrollments", "avatar_url"]
        assert "enrollment_state[]" not in params

    def test_last_activity_reads_only_newest_page_view(self, insights, fake_session, roster):
        fake_session.route("GET", "courses/1/users", page(roster[:1]))
        fake_session.route(
            "GET",
            "users/1/page_views",
            page(
                [{"created_at": "2024-09-20T08:00:00Z"}],
                next_url=f"{BASE_URL}/users/1/page_views?page=2&per_page=1",
            ),
        )
        fake_session.route(
            "GET",
            "users/1/page_views?page=2&per_page=1",
            page([{"created_at": "2024-09-01T08:00:00Z"}]),
        )

        result = asyncio.run(insights.get_course_students(1))

        assert result[0]["last_activity"] == "2024-09-20T08:00:00Z"
        assert len(fake_session.calls_to("users/1/page_views")) == 1

    def test_roster_failure_propagates(self, insights, fake_session):
        fake_session.route("GET", "courses/1/users", error(403, {"message": "unauthorized"}))

        with pytest.raises(CanvasAPIError):
            asyncio.run(insights.get_course_students(1))


class TestStudentPerformance:
    def test_summaries_sorted_by_score(self, insights, fake_session, roster):
        fake_session.route("GET", "courses/1/users", page(roster[:3]))

        def submissions(params):
            if params["student_ids[]"] == [2]:
                return error(500, {"message": "boom"})
            return page([{"missing": True}, {"late": True}, {"missing": False}])

        fake_session.route("GET", "courses/1/students/submissions", submissions)
        for user_id in (1, 2, 3):
            fake_session.route("GET", f"users/{user_id}/page_views", page([]))

        result = asyncio.run(insights.get_student_performance(1, sort_by="score"))

        assert [s["user"]["id"] for s in result] == [1, 2, 3]
        assert result[0]["current_score"] == 92
        assert result[0]["missing_assignments"] == 1
        assert result[0]["late_submissions"] == 1
        assert result[1]["missing_assignments"] is None
        assert result[1]["late_submissions"] is None
        assert result[2]["current_score"] is None

    def test_sorted_by_name(self, insights, fake_session, roster):
        fake_session.route("GET", "courses/1/users", page(list(reversed(roster[:2]))))
        fake_session.route("GET", "courses/1/students/submissions", page([]))
        fake_session.route("GET", "users/1/page_views", page([]))
        fake_session.route("GET", "users/2/page_views", page([]))

        result = asyncio.run(insights.get_student_performance(1))

        assert [s["user"]["sortable_name"] for s in result] == ["Adams, Ann", "Baker, Bob"]


    def test_student_without_enrollments(self, insights, fake_session, roster):
        unenrolled = {"id": 9, "name": "Nobody", "sortable_name": "Nobody"}
        fake_session.route("GET", "courses/1/users", page([roster[0], unenrolled]))
        fake_session.route("GET", "courses/1/students/submissions", page([]))
        fake_session.route("GET", "users/1/page_views", page([]))
        fake_session.route("GET", "users/9/page_views", page([]))

        result = asyncio.run(insights.get_student_performance(1))

        assert [s["user"]["id"] for s in result] == [1, 9]
        assert result[1]["enrollment"] is None
        assert result[1]["current_score"] is None


class TestGradingQueue:
    def test_course_queue(self, insights, fake_session):
        fake_session.route("GET", "courses/1", make_response(json_body={"id": 1, "name": "Bio"}))
        fake_session.route(
            "GET",
            "courses/1/assignments",
            page(
                [
                    {"id": 10, "name": "Lab 1", "needs_grading_count": 3},
                    {"id": 11, "name": "Lab 2", "needs_grading_count": 0},
                    {"id": 12, "name": "Lab 3"},
                    {
                        "id": 13,
                        "name": "Quiz 1",
                        "needs_grading_count": 2,
                        "submission_types": ["online_quiz"],
                    },
                ]
            ),
        )

        result = asyncio.run(insights.get_grading_queue(course_id=1))
        assert [item["assignment_id"] for item in result] == [10, 13]
        assert result[0]["course_name"] == "Bio"
        assert result[0]["type"] == "assignment"

        without_quizzes = asyncio.run(
            insights.get_grading_queue(course_id=1, include_quiz_submissions=False)
        )
        assert [item["assignment_id"] for item in without_quizzes] == [10]

    def test_todo_queue(self, insights, fake_session):
        fake_session.route(
            "GET",
            "users/self/todo",
            page(
                [
                    {
                        "type": "grading",
                        "assignment": {"id": 5, "name": "Essay"},
                        "course_id": 2,
                        "context_name": "English",
                        "needs_grading_count": 4,
                    },
                    {"type": "submitting", "assignment": {"id": 6}},
                ]
            ),
        )

        result = asyncio.run(insights.get_grading_queue(limit=25))

        assert len(result) == 1
        assert result[0]["title"] == "Essay"
        assert result[0]["needs_grading_count"] == 4
        assert fake_session.calls[0].params == {"per_page": 25}


class TestCourseAssignments:
    def test_due_date_filters(self, insights, fake_session):
        fake_session.route(
            "GET",
            "courses/1/assignments",
            page(
                [
                    {"id": 1, "due_at": iso(timedelta(days=-2))},
                    {"id": 2, "due_at": iso(timedelta(days=2))},
                    {"id": 3, "due_at": None},
                ]
            ),
        )

        def ids(due_date_filter):
            result = asyncio.run(
                insights.get_course_assignments(1, due_date_filter=due_date_filter)
            )
            return [a["id"] for a in result]

        assert ids("past_due") == [1]
        assert ids("upcoming") == [2]
        assert ids("no_due_date") == [3]
        assert ids("all") == [1, 2, 3]


class TestUpcomingEvents:
    def test_merges_and_sorts(self, insights, fake_session):
        fake_session.route(
            "GET",
            "users/self/upcoming_events",
            page(
                [
                    {"id": "assignment_1", "assignment": {"id": 1, "name": "Soon", "due_at": iso(timedelta(days=2))}},
                    {"id": "assignment_2", "assignment": {"id": 2, "name": "Later", "due_at": iso(timedelta(days=20))}},
                    {"id": "assignment_3", "assignment": {"id": 3, "name": "Past", "due_at": iso(timedelta(days=-1))}},
                ]
            ),
        )
        fake_session.route(
            "GET",
            "calendar_events",
            page([{"id": 9, "title": "Office hours", "start_at": iso(timedelta(days=1))}]),
        )

        result = asyncio.run(insights.get_upcoming_events(days_ahead=7))

        assert [e["type"] for e in result] == ["calendar_event", "assignment"]
        assert result[1]["title"] == "Soon"
        calendar_call = fake_session.calls_to("calendar_events")[0]
        assert "context_codes[]" not in calendar_call.params

    def test_course_filter(self, insights, fake_session):
        fake_session.route("GET", "courses/4/assignments", page([]))
        fake_session.route("GET", "calendar_events", page([]))

        asyncio.run(insights.get_upcoming_events(course_id=4))

        assert fake_session.calls_to("calendar_events")[0].params["context_codes[]"] == [
            "course_4"
        ]


class TestMissingSubmissions:
    def submissions(self):
        past = iso(timedelta(days=-5))
        future = iso(timedelta(days=5))
        return [
            {"missing": True, "assignment": {"id": 1, "due_at": past}, "user": {"id": 1}},
            {"submitted_at": None, "assignment": {"id": 2, "due_at": past}, "user": {"id": 2}},
            {
                "submitted_at": past,
                "late": True,
                "assignment": {"id": 3, "due_at": iso(timedelta(days=-1))},
                "user": {"id": 3},
            },
            {"submitted_at": past, "assignment": {"id": 4, "due_at": future}, "user": {"id": 4}},
            {"submitted_at": None, "assignment": {"id": 5, "due_at": future}, "user": {"id": 5}},
        ]

    def test_course_missing_and_late(self, insights, fake_session):
        fake_session.route("GET", "courses/1/students/submissions", page(self.submissions()))

        result = asyncio.run(insights.get_missing_submissions(course_id=1))

        assert [m["assignment"]["id"] for m in result] == [1, 2, 3]
        assert result[0]["days_overdue"] == 5

    def test_excluding_late_and_days_filter(self, insights, fake_session):
        fake_session.route("GET", "courses/1/students/submissions", page(self.submissions()))

        result = asyncio.run(
            insights.get_missing_submissions(
                course_id=1, include_late_submissions=False, days_overdue=2
            )
        )

        assert [m["assignment"]["id"] for m in result] == [1, 2]

    def test_across_courses_tolerates_failing_course(self, insights, fake_session):
        fake_session.route("GET", "courses", page([{"id": 1}, {"id": 2}]))
        fake_session.route("GET", "courses/1/students/submissions", page(self.submissions()[:1]))
        fake_session.route(
            "GET", "courses/2/students/submissions", error(403, {"message": "unauthorized"})
        )

        result = asyncio.run(insights.get_missing_submissions())

        assert len(result) == 1
        assert result[0]["course_id"] == 1


class TestCourseAnalytics:
    def test_analytics(self, insights, fake_session, roster):
        fake_session.route("GET", "courses/1", make_response(json_body={"id": 1, "name": "Bio"}))
        fake_session.route("GET", "courses/1/users", page(roster))
        fake_session.route("GET", "courses/1/assignments", page([{"id": 1}, {"id": 2}]))
        fake_session.route(
            "GET",
            "courses/1/students/submissions",
            page([{"workflow_state": "submitted"}] * 4 + [{"workflow_state": "unsubmitted"}]),
        )

        result = asyncio.run(insights.get_course_analytics(1))

        assert result["total_students"] == 5
        assert result["active_students"] == 4
        assert result["average_grade"] == pytest.approx((92 + 71 + 85 + 55) / 4)
        assert result["participation_rate"] == 80.0
        assert result["assignment_completion_rate"] == 40.0
        assert result["grade_distribution"] == {
            "a_range": 1,
            "b_range": 1,
            "c_range": 1,
            "d_range": 0,
            "f_range": 1,
            "no_grade": 1,
        }

    def test_student_without_enrollments_counts_as_inactive(self, insights, fake_session, roster):
        unenrolled = {"id": 9, "name": "Nobody", "sortable_name": "Nobody"}
        fake_session.route("GET", "courses/1", make_response(json_body={"id": 1}))
        fake_session.route("GET", "courses/1/users", page([roster[0], unenrolled]))

        result = asyncio.run(
            insights.get_course_analytics(1, include_assignment_analytics=False)
        )

        assert result["total_students"] == 2
        assert result["active_students"] == 1
        assert result["average_grade"] == 92
        assert result["participation_rate"] == 50.0

    def test_empty_course(self, insights, fake_session):
        fake_session.route("GET", "courses/1", make_response(json_body={"id": 1}))
        fake_session.route("GET", "courses/1/users", page([]))

        result = asyncio.run(
            insights.get_course_analytics(1, include_assignment_analytics=False)
        )

        assert result["participation_rate"] == 0.0
        assert result["average_grade"] is None


class TestAssignmentAnalytics:
    def test_single_assignment(self, insights, fake_session):
        due = iso(timedelta(days=-3))
        fake_session.route(
            "GET", "courses/1/assignments/7", make_response(json_body={"id": 7, "due_at": due})
        )
        fake_session.route(
            "GET",
            "courses/1/assignments/7/submissions",
            page(
                [
                    {"workflow_state": "graded", "score": 90, "submitted_at": iso(timedelta(days=-4))},
                    {"workflow_state": "graded", "score": 70, "submitted_at": iso(timedelta(days=-2)), "late": True},
                    {"workflow_state": "submitted", "score": None, "submitted_at": iso(timedelta(days=-5))},
                    {"workflow_state": "unsubmitted", "missing": True},
                ]
            ),
        )

        [summary] = asyncio.run(insights.get_assignment_analytics(1, assignment_id=7))

        assert summary["submission_count"] == 1
        assert summary["graded_count"] == 2
        assert summary["average_score"] == 80
        assert summary["median_score"] == 90
        assert summary["score_distribution"] == [90, 70]
        assert summary["on_time_submissions"] == 2
        assert summary["late_submissions"] == 1
        assert summary["missing_submissions"] == 1

    def test_course_skips_failing_assignment(self, insights, fake_session):
        fake_session.route("GET", "courses/1/assignments", page([{"id": 1}, {"id": 2}]))
        fake_session.route("GET", "courses/1/assignments/1/submissions", page([]))
        fake_session.route(
            "GET", "courses/1/assignments/2/submissions", error(404, {"message": "gone"})
        )

        result = asyncio.run(insights.get_assignment_analytics(1))

        assert [s["assignment"]["id"] for s in result] == [1]


class TestModuleProgress:
    def test_failed_pair_keeps_student(self, insights, fake_session):
        fake_session.route(
            "GET", "courses/1/modules", page([{"id": 1, "name": "Week 1"}, {"id": 2, "name": "Week 2"}])
        )
        fake_session.route("GET", "courses/1/users", page([{"id": 10}, {"id": 20}]))
        items = page(
            [
                {"id": 1, "completion_requirement": {"completed": True}},
                {"id": 2, "completion_requirement": {"completed": False}},
                {"id": 3},
            ]
        )

        def module_one(params):
            if params["student_id"] == 20:
                return error(500, {"message": "boom"})
            return items

        fake_session.route("GET", "courses/1/modules/1/items", module_one)
        fake_session.route("GET", "courses/1/modules/2/items", items)

        result = asyncio.run(insights.get_module_progress(1, include_items=False))

        week1 = result[0]["student_progress"]
        assert [entry["user"]["id"] for entry in week1] == [10, 20]
        assert week1[0]["items_completed"] == 1
        assert week1[0]["items_total"] == 3
        assert week1[1]["items_completed"] is None
        assert result[1]["student_progress"][1]["items_total"] == 3


class TestSearchCourseContent:
    def test_search_tolerates_failing_type(self, insights, fake_session):
        fake_session.route(
            "GET", "courses/1/assignments", page([{"id": 1, "name": "Photosynthesis Lab"}, {"id": 2, "name": "Essay"}])
        )
        fake_session.route(
            "GET",
            "courses/1/pages",
            page([{"page_id": 3, "title": "Notes", "body": "All about photosynthesis in plants"}]),
        )
        fake_session.route("GET", "courses/1/quizzes", error(404, {"message": "disabled"}))

        result = asyncio.run(
            insights.search_course_content(
                1,
                "photosynthesis",
                content_types=["assignment", "wiki_page", "quiz"],
                include_body=True,
            )
        )

        assert [(r["content_type"], r["id"]) for r in result] == [
            ("assignment", 1),
            ("wiki_page", 3),
        ]
        assert result[1]["body_excerpt"] == "All about photosynthesis in plants"

    def test_body_not_searched_by_default(self, insights, fake_session):
        fake_session.route(
            "GET", "courses/1/pages", page([{"page_id": 3, "title": "Notes", "body": "photosynthesis"}])
        )

        result = asyncio.run(
            insights.search_course_content(1, "photosynthesis", content_types=["wiki_page"])
        )

        assert result == []


class TestDetailViews:
    def test_student_details_defaults(self, insights, fake_session):
        fake_session.route("GET", "courses/1/users/5", make_response(json_body={"id": 5}))
        fake_session.route("GET", "courses/1/users/5/progress", error(404, {"message": "no"}))
        fake_session.route("GET", "courses/1/students/submissions", page([{"id": 1}]))
        fake_session.route("GET", "users/5/page_views", error(401, {"message": "no"}))

        result = asyncio.run(insights.get_student_details(1, 5))

        assert result["student"] == {"id": 5}
        assert result["progress"] is None
        assert result["submissions"] == [{"id": 1}]
        assert result["recent_activity"] == []

    def test_course_details_summary_failure(self, insights, fake_session):
        fake_session.route("GET", "courses/1", make_response(json_body={"id": 1}))
        fake_session.route("GET", "courses/1/assignments", error(403, {"message": "no"}))

        result = asyncio.run(insights.get_course_details(1))

        assert result["assignments_summary"] is None

    def test_course_details_summary(self, insights, fake_session):
        fake_session.route("GET", "courses/1", make_response(json_body={"id": 1}))
        fake_session.route(
            "GET",
            "courses/1/assignments",
            page([{"published": True, "due_at": "2024-09-01T00:00:00Z"}, {"published": False}]),
        )

        result = asyncio.run(insights.get_course_details(1, include_syllabus=True))

        assert result["assignments_summary"] == {"total": 2, "published": 1, "with_due_dates": 1}
        assert "syllabus_body" in fake_session.calls_to("courses/1")[0].params["include[]"]


class TestMisc:
    def test_teacher_courses_params(self, insights, fake_session):
        fake_session.route("GET", "courses", page([]))

        asyncio.run(insights.get_teacher_courses(enrollment_state="all", term_id=3))

        params = fake_session.calls[0].params
        assert params["enrollment_type"] == "teacher"
        assert "enrollment_state" not in params
        assert params["enrollment_term_id"] == 3
        assert params["include[]"] == ["term", "total_students", "needs_grading_count"]

    def test_teacher_activity_filter_and_limit(self, insights, fake_session):
        fake_session.route(
            "GET",
            "courses/1/activity_stream",
            page([{"type": "Submission"}, {"type": "Message"}, {"type": "Submission"}]),
        )

        result = asyncio.run(
            insights.get_teacher_activity(course_id=1, activity_types=["Submission"], limit=1)
        )

        assert result == [{"type": "Submission"}]

    def test_gradebook_hides_unposted_grades(self, insights, fake_session):
        fake_session.route("GET", "courses/1/assignments", page([{"id": 1}]))
        fake_session.route("GET", "courses/1/users", page([{"id": 5}]))
        fake_session.route(
            "GET",
            "courses/1/students/submissions",
            page(
                [
                    {"id": 1, "score": 9, "grade": "9", "posted_at": "2024-09-01T00:00:00Z"},
                    {"id": 2, "score": 7, "grade": "7", "posted_at": None},
                ]
            ),
        )

        result = asyncio.run(insights.get_gradebook_data(1))

        assert [s["score"] for s in result["submissions"]] == [9, None]
        assert result["custom_columns"] == []
        assert "generated_at" in result

    @pytest.mark.parametrize(
        "kwargs,path",
        [
            ({}, "users/self/enrollments"),
            ({"user_id": 4}, "users/4/enrollments"),
            ({"course_id": 2}, "courses/2/enrollments"),
            ({"course_id": 2, "user_id": 4}, "courses/2/enrollments"),
        ],
    )
    def test_user_enrollments_endpoint(self, insights, fake_session, kwargs, path):
        fake_session.route("GET", path, page([]))

        asyncio.run(insights.get_user_enrollments(**kwargs))

        assert fake_session.calls[0].path == path
