"""
Canvas MCP Server Utilities

This package contains helper modules shared by the accessors and tools.
"""

from canvas_mcp_server.utils.date_formatter import (
    days_overdue,
    is_date_in_range,
    parse_canvas_datetime,
)
from canvas_mcp_server.utils.statistics import grade_distribution, mean, median, percentage
from canvas_mcp_server.utils.validation import require_fields
