"""
Canvas MCP Server Tools

This package contains the tool functions for the Canvas MCP server.
Each module in this package contains related tool functions that are
registered with the MCP server.
"""

__all__ = [
    "accounts",
    "assignments",
    "calendar",
    "courses",
    "discussions",
    "files",
    "health",
    "modules",
    "quizzes",
    "submissions",
    "teacher",
    "users",
]
