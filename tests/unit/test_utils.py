"""
Unit tests for the statistics, date and validation helpers.
"""

from datetime import UTC, datetime

import pytest

from canvas_mcp_server.utils.date_formatter import (
    days_overdue,
    is_date_in_range,
    parse_canvas_datetime,
    sort_key,
)
from canvas_mcp_server.utils.statistics import (
    grade_distribution,
    mean,
    median,
    numeric_scores,
    percentage,
)
from canvas_mcp_server.utils.validation import require_fields

NOW = datetime(2024, 9, 20, 12, 0, tzinfo=UTC)


class TestStatistics:
    def test_mean_and_median(self):
        assert mean([80, 90, 100]) == 90
        assert median([100, 80, 90]) == 90

    def test_even_median_is_upper_middle(self):
        assert median([70, 80, 90, 100]) == 90

    def test_empty_scores(self):
        assert mean([]) is None
        assert median([]) is None

    def test_numeric_scores_drops_none_and_bools(self):
        assert numeric_scores([90, None, 75.5, True, "A"]) == [90, 75.5]

    def test_percentage(self):
        assert percentage(3, 4) == 75.0
        assert percentage(1, 0) == 0.0

    def test_grade_distribution(self):
        assert grade_distribution([95, 90, 85, 72, 65, 40], 8) == {
            "a_range": 2,
            "b_range": 1,
            "c_range": 1,
            "d_range": 1,
            "f_range": 1,
            "no_grade": 2,
        }


class TestDates:
    def test_parse_zulu_timestamp(self):
        assert parse_canvas_datetime("2024-09-15T23:59:59Z") == datetime(
            2024, 9, 15, 23, 59, 59, tzinfo=UTC
        )

    def test_parse_naive_assumes_utc(self):
        assert parse_canvas_datetime("2024-09-15T10:00:00").tzinfo is UTC

    @pytest.mark.parametrize("value", [None, "", "not a date"])
    def test_parse_invalid(self, value):
        assert parse_canvas_datetime(value) is None

    def test_days_overdue(self):
        assert days_overdue("2024-09-17T12:00:00Z", NOW) == 3
        assert days_overdue("2024-09-25T12:00:00Z", NOW) == 0
        assert days_overdue(None, NOW) == 0

    def test_is_date_in_range(self):
        start = datetime(2024, 9, 1, tzinfo=UTC)
        assert is_date_in_range("2024-09-15T00:00:00Z", start, NOW)
        assert not is_date_in_range("2024-10-15T00:00:00Z", start, NOW)
        assert not is_date_in_range(None, start, NOW)

    def test_sort_key_puts_missing_first(self):
        dates = ["2024-09-20T00:00:00Z", None, "2024-09-10T00:00:00Z"]
        assert sorted(dates, key=sort_key) == [
            None,
            "2024-09-10T00:00:00Z",
            "2024-09-20T00:00:00Z",
        ]


class TestRequireFields:
    def test_all_present(self):
        require_fields(course_id=1, name="Biology")

    def test_single_missing(self):
        with pytest.raises(ValueError, match="Missing required field: course_id"):
            require_fields(course_id=None, name="Biology")

    def test_several_missing(self):
        with pytest.raises(ValueError, match="Missing required fields: course_id, name"):
            require_fields(course_id=0, name="")

    def test_empty_list_is_missing(self):
        with pytest.raises(ValueError, match="recipients"):
            require_fields(recipients=[])
