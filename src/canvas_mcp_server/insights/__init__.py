"""
Canvas Insights

Composite accessors built on top of the Canvas API adapter.
"""

from canvas_mcp_server.insights.service import InsightsService

__all__ = ["InsightsService"]
