"""
Configuration file for pytest.

This file contains fixtures shared by the Canvas MCP Server tests. HTTP is
faked at the requests.Session seam, so every layer above it runs for real.
"""

import pytest

from canvas_mcp_server.canvas_api_adapter import CanvasApiAdapter
from canvas_mcp_server.http_client import CanvasHttpClient, ClientOptions
from canvas_mcp_server.insights import InsightsService
from tests.fakes.fake_http import FakeSession
from tests.fakes.mock_mcp import MockMCP

TEST_DOMAIN = "canvas.test"
TEST_TOKEN = "test-token"


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def make_client(fake_session):
    """Factory for clients bound to the fake session."""

    def factory(**options) -> CanvasHttpClient:
        return CanvasHttpClient(
            TEST_TOKEN, TEST_DOMAIN, ClientOptions(**options), session=fake_session
        )

    return factory


@pytest.fixture
def http_client(make_client) -> CanvasHttpClient:
    """Client with retries enabled but no backoff sleep."""
    return make_client(max_retries=2, retry_delay=0)


@pytest.fixture
def api_adapter(http_client) -> CanvasApiAdapter:
    return CanvasApiAdapter(http_client)


@pytest.fixture
def insights(api_adapter) -> InsightsService:
    return InsightsService(api_adapter)


@pytest.fixture
def mock_mcp(http_client, api_adapter, insights) -> MockMCP:
    """Mock MCP server whose request context holds the real accessors."""
    return MockMCP(
        {"http_client": http_client, "api_adapter": api_adapter, "insights": insights}
    )
