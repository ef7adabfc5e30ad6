"""
Statistics Helpers

Small aggregation helpers used by the analytics accessors to summarize
scores that were already fetched from Canvas.
"""

from collections.abc import Iterable
from typing import Any


def numeric_scores(values: Iterable[Any]) -> list[float]:
    """Keep only real numbers (booleans and None are dropped)."""
    return [
        value
        for value in values
        if isinstance(value, (int, float)) and not isinstance(value, bool)
    ]


def mean(scores: list[float]) -> float | None:
    if not scores:
        return None
    return sum(scores) / len(scores)


def median(scores: list[float]) -> float | None:
    """
    Median of the scores.

    For an even number of scores the upper of the two middle values is
    returned rather than their average.
    """
    if not scores:
        return None
    ordered = sorted(scores)
    return ordered[len(ordered) // 2]


def percentage(part: float, whole: float) -> float:
    """part / whole as a percentage, 0 when whole is 0."""
    if not whole:
        return 0.0
    return part / whole * 100


def grade_distribution(scores: list[float], total_students: int) -> dict[str, int]:
    """
    Bucket percentage scores into letter-grade ranges.

    Args:
        scores: Current scores of graded students
        total_students: Number of students, graded or not

    Returns:
        Counts per range plus the number of students without a grade
    """
    return {
        "a_range": sum(1 for s in scores if s >= 90),
        "b_range": sum(1 for s in scores if 80 <= s < 90),
        "c_range": sum(1 for s in scores if 70 <= s < 80),
        "d_range": sum(1 for s in scores if 60 <= s < 70),
        "f_range": sum(1 for s in scores if s < 60),
        "no_grade": total_students - len(scores),
    }
