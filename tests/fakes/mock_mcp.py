"""
Mock MCP Server for Testing

This module provides a simplified mock of FastMCP that captures registered
tools and resources so they can be called directly.
"""

from types import SimpleNamespace
from typing import Any


def make_context(lifespan_context: dict[str, Any]) -> SimpleNamespace:
    """Build a request context shaped like the one FastMCP passes to tools."""
    request_context = SimpleNamespace(lifespan_context=lifespan_context)
    return SimpleNamespace(request_context=request_context)


class MockMCP:
    """Mock MCP server for testing tools and resources."""

    def __init__(self, lifespan_context: dict[str, Any] | None = None):
        self.tools = {}
        self.resources = {}
        self.context = make_context(lifespan_context or {})

    def tool(self):
        """Decorator for registering tools."""

        def decorator(func):
            self.tools[func.__name__] = func
            return func

        return decorator

    def resource(self, uri: str, **kwargs):
        """Decorator for registering resources."""

        def decorator(func):
            self.resources[uri] = func
            return func

        return decorator

    def get_context(self):
        return self.context
