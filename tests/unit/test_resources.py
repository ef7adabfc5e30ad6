"""
Unit tests for the MCP resources.
"""

import asyncio
import json

from canvas_mcp_server.resources import register_resources
from tests.fakes.fake_http import error, make_response, page


class TestResources:
    def test_registered_uris(self, mock_mcp):
        register_resources(mock_mcp)

        assert set(mock_mcp.resources) == {
            "canvas://health",
            "courses://list",
            "dashboard://user",
            "profile://user",
            "calendar://upcoming",
            "course://{course_id}",
            "assignments://{course_id}",
            "modules://{course_id}",
            "discussions://{course_id}",
            "announcements://{course_id}",
            "quizzes://{course_id}",
            "pages://{course_id}",
            "files://{course_id}",
        }

    def test_renders_indented_json(self, mock_mcp, fake_session):
        register_resources(mock_mcp)
        fake_session.route("GET", "courses/12/modules", page([{"id": 1, "name": "Week 1"}]))

        text = asyncio.run(mock_mcp.resources["modules://{course_id}"]("12"))

        assert json.loads(text) == [{"id": 1, "name": "Week 1"}]
        assert text == json.dumps([{"id": 1, "name": "Week 1"}], indent=2)

    def test_canvas_error_rendered(self, mock_mcp, fake_session):
        register_resources(mock_mcp)
        fake_session.route("GET", "courses/12", error(404, {"message": "Not found"}))

        text = asyncio.run(mock_mcp.resources["course://{course_id}"]("12"))

        assert json.loads(text) == {"error": "API Error (404): Not found"}

    def test_profile(self, mock_mcp, fake_session):
        register_resources(mock_mcp)
        fake_session.route("GET", "users/self/profile", make_response(json_body={"id": 3}))

        assert json.loads(asyncio.run(mock_mcp.resources["profile://user"]())) == {"id": 3}
