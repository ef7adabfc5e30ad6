"""
Canvas Insights Service

This module provides the orchestrator for composite accessors: operations
that combine several Canvas endpoints and summarize the results client-side.
Per-entity sub-calls run concurrently in worker threads; a failing sub-call
is recorded as a default value for its entity and never aborts the whole
aggregate.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import Any, TypeVar

from canvas_mcp_server.canvas_api_adapter import CanvasApiAdapter
from canvas_mcp_server.errors import CanvasAPIError
from canvas_mcp_server.insights.activity import (
    get_course_discussions,
    get_module_progress,
    get_teacher_activity,
    search_course_content,
)
from canvas_mcp_server.insights.assignments import (
    get_assignment_analytics,
    get_course_assignments,
    get_gradebook_data,
    get_grading_queue,
    get_missing_submissions,
    get_upcoming_events,
)
from canvas_mcp_server.insights.courses import (
    get_course_analytics,
    get_course_details,
    get_course_statistics,
    get_teacher_courses,
)
from canvas_mcp_server.insights.students import (
    get_course_students,
    get_student_activity,
    get_student_details,
    get_student_performance,
    get_user_enrollments,
)

# Configure logging
logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_CONCURRENCY = 10


class InsightsService:
    """
    Service for composite, read-mostly Canvas operations.

    Primitive calls go through the shared CanvasApiAdapter and its HTTP
    client; this class only adds the scatter/gather plumbing.
    """

    def __init__(
        self, api_adapter: CanvasApiAdapter, max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    ):
        """
        Initialize the insights service.

        Args:
            api_adapter: Canvas API adapter for API interactions
            max_concurrency: Maximum number of Canvas requests in flight
        """
        self.api_adapter = api_adapter
        self.http = api_adapter.http
        self.api_semaphore = asyncio.Semaphore(max_concurrency)
        logger.info(f"Insights API concurrency limited to {max_concurrency} calls.")

        self.get_teacher_courses = get_teacher_courses.__get__(self)
        self.get_course_details = get_course_details.__get__(self)
        self.get_course_analytics = get_course_analytics.__get__(self)
        self.get_course_statistics = get_course_statistics.__get__(self)

        self.get_course_students = get_course_students.__get__(self)
        self.get_student_performance = get_student_performance.__get__(self)
        self.get_student_details = get_student_details.__get__(self)
        self.get_student_activity = get_student_activity.__get__(self)
        self.get_user_enrollments = get_user_enrollments.__get__(self)

        self.get_grading_queue = get_grading_queue.__get__(self)
        self.get_course_assignments = get_course_assignments.__get__(self)
        self.get_upcoming_events = get_upcoming_events.__get__(self)
        self.get_assignment_analytics = get_assignment_analytics.__get__(self)
        self.get_missing_submissions = get_missing_submissions.__get__(self)
        self.get_gradebook_data = get_gradebook_data.__get__(self)

        self.get_course_discussions = get_course_discussions.__get__(self)
        self.get_teacher_activity = get_teacher_activity.__get__(self)
        self.get_module_progress = get_module_progress.__get__(self)
        self.search_course_content = search_course_content.__get__(self)

    async def run(self, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Run a blocking accessor in a worker thread under the semaphore."""
        async with self.api_semaphore:
            return await asyncio.to_thread(func, *args, **kwargs)

    async def fetch(
        self, path: str, params: dict[str, Any] | None = None, paginate: bool = True
    ) -> Any:
        """GET a Canvas path; CanvasAPIError propagates."""
        return await self.run(self.http.get, path, params, paginate=paginate)

    async def fetch_or_default(
        self,
        default: Any,
        path: str,
        params: dict[str, Any] | None = None,
        description: str = "",
        paginate: bool = True,
    ) -> Any:
        """
        GET a Canvas path, returning `default` if the call fails.

        Args:
            default: Value recorded for the entity when the call fails
            path: Canvas API path
            params: Optional query parameters
            description: What is being fetched, for the log line
            paginate: Follow rel="next" links of array responses

        Returns:
            Decoded payload, or default on CanvasAPIError
        """
        try:
            return await self.fetch(path, params, paginate=paginate)
        except CanvasAPIError as e:
            logger.warning(f"Could not fetch {description or path}: {e}")
            return default

    async def gather_settled(
        self, coroutines: Iterable[Awaitable[T]]
    ) -> list[T | BaseException]:
        """Wait for every coroutine; exceptions are returned in place of results."""
        return await asyncio.gather(*coroutines, return_exceptions=True)

    def settle(self, result: Any, default: Any, description: str) -> Any:
        """
        Resolve one gathered result.

        A CanvasAPIError is logged and replaced by `default`; any other
        exception is re-raised.
        """
        if isinstance(result, CanvasAPIError):
            logger.warning(f"Could not fetch {description}: {result}")
            return default
        if isinstance(result, BaseException):
            raise result
        return result
