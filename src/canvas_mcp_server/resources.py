"""
Canvas MCP Resources

This module exposes read-only Canvas data as MCP resources. Each resource
renders its payload as indented JSON; a Canvas failure is rendered as an
error object instead of being raised.
"""

import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from mcp.server.fastmcp import FastMCP

from canvas_mcp_server.canvas_api_adapter import CanvasApiAdapter
from canvas_mcp_server.errors import CanvasAPIError
from canvas_mcp_server.utils.context import run_accessor

logger = logging.getLogger(__name__)


async def render(fetch: Awaitable[Any]) -> str:
    """
    Await a fetch and render its result as JSON.

    Args:
        fetch: Awaitable resolving to the resource payload

    Returns:
        Pretty-printed JSON of the payload, or of {"error": message}
    """
    try:
        payload = await fetch
    except CanvasAPIError as e:
        logger.error(f"Error reading resource: {e}")
        payload = {"error": e.message}
    return json.dumps(payload, indent=2)


def register_resources(mcp: FastMCP) -> None:
    """Register Canvas resources with the MCP server."""

    async def read(accessor: Callable[[CanvasApiAdapter], Any]) -> str:
        ctx = mcp.get_context()
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        return await render(run_accessor(ctx, accessor, api_adapter))

    @mcp.resource("canvas://health", name="Health Check", mime_type="application/json")
    async def health_resource() -> str:
        """Canvas API connectivity status."""
        return await read(lambda api: api.health_check())

    @mcp.resource("courses://list", name="All Courses", mime_type="application/json")
    async def courses_resource() -> str:
        """All courses of the current user."""
        return await read(lambda api: api.list_courses())

    @mcp.resource("dashboard://user", name="User Dashboard", mime_type="application/json")
    async def dashboard_resource() -> str:
        """Dashboard cards of the current user."""
        return await read(lambda api: api.get_dashboard_cards())

    @mcp.resource("profile://user", name="User Profile", mime_type="application/json")
    async def profile_resource() -> str:
        """Profile of the current user."""
        return await read(lambda api: api.get_user_profile())

    @mcp.resource("calendar://upcoming", name="Upcoming Events", mime_type="application/json")
    async def calendar_resource() -> str:
        """Upcoming assignment due dates."""
        return await read(lambda api: api.get_upcoming_assignments())

    @mcp.resource("course://{course_id}", name="Course", mime_type="application/json")
    async def course_resource(course_id: str) -> str:
        """Details of one course."""
        return await read(lambda api: api.get_course(course_id))

    @mcp.resource(
        "assignments://{course_id}", name="Course Assignments", mime_type="application/json"
    )
    async def assignments_resource(course_id: str) -> str:
        """Assignments of one course, with the current user's submissions."""
        return await read(lambda api: api.list_assignments(course_id, include_submissions=True))

    @mcp.resource("modules://{course_id}", name="Course Modules", mime_type="application/json")
    async def modules_resource(course_id: str) -> str:
        """Modules of one course."""
        return await read(lambda api: api.list_modules(course_id))

    @mcp.resource(
        "discussions://{course_id}", name="Course Discussions", mime_type="application/json"
    )
    async def discussions_resource(course_id: str) -> str:
        """Discussion topics of one course."""
        return await read(lambda api: api.list_discussion_topics(course_id))

    @mcp.resource(
        "announcements://{course_id}", name="Course Announcements", mime_type="application/json"
    )
    async def announcements_resource(course_id: str) -> str:
        """Announcements of one course."""
        return await read(lambda api: api.list_announcements(course_id))

    @mcp.resource("quizzes://{course_id}", name="Course Quizzes", mime_type="application/json")
    async def quizzes_resource(course_id: str) -> str:
        """Quizzes of one course."""
        return await read(lambda api: api.list_quizzes(course_id))

    @mcp.resource("pages://{course_id}", name="Course Pages", mime_type="application/json")
    async def pages_resource(course_id: str) -> str:
        """Wiki pages of one course."""
        return await read(lambda api: api.list_pages(course_id))

    @mcp.resource("files://{course_id}", name="Course Files", mime_type="application/json")
    async def files_resource(course_id: str) -> str:
        """Files of one course."""
        return await read(lambda api: api.list_files(course_id))
