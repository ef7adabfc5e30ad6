"""
Canvas MCP Server

An MCP server exposing the Canvas LMS REST API.
"""

__version__ = "1.0.0"
