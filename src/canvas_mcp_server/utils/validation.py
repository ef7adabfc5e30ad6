"""
Argument validation for tool handlers.
"""

from typing import Any


def require_fields(**fields: Any) -> None:
    """
    Ensure required tool arguments were provided.

    A value counts as missing when it is None, an empty string, an empty
    list, or 0 (Canvas IDs are never 0).

    Raises:
        ValueError: Naming every missing field
    """
    missing = [
        name
        for name, value in fields.items()
        if value is None or value == "" or value == [] or value == 0
    ]
    if not missing:
        return
    if len(missing) == 1:
        raise ValueError(f"Missing required field: {missing[0]}")
    raise ValueError(f"Missing required fields: {', '.join(missing)}")
