"""
Unit tests for Canvas error normalization.
"""

import pytest

from canvas_mcp_server.errors import (
    CanvasAPIError,
    ErrorBodyKind,
    classify_error_body,
    error_from_network_failure,
    error_from_response,
    extract_error_detail,
)


class TestClassifyErrorBody:
    @pytest.mark.parametrize(
        "body,kind",
        [
            ("Internal Server Error", ErrorBodyKind.TEXT),
            ({"message": "Not found"}, ErrorBodyKind.MESSAGE),
            ({"errors": [{"message": "bad"}]}, ErrorBodyKind.ERROR_LIST),
            ({"errors": {"name": ["blank"]}}, ErrorBodyKind.STRUCTURED),
            ({"status": "unauthenticated"}, ErrorBodyKind.STRUCTURED),
            ([1, 2], ErrorBodyKind.STRUCTURED),
            (None, ErrorBodyKind.OTHER),
            (42, ErrorBodyKind.OTHER),
        ],
    )
    def test_kinds(self, body, kind):
        assert classify_error_body(body) is kind

    def test_message_wins_over_errors(self):
        body = {"message": "primary", "errors": [{"message": "secondary"}]}
        assert classify_error_body(body) is ErrorBodyKind.MESSAGE


class TestExtractErrorDetail:
    def test_short_text_kept(self):
        assert extract_error_detail("Bad Gateway") == "Bad Gateway"

    def test_text_of_exactly_200_chars_not_truncated(self):
        assert extract_error_detail("a" * 200) == "a" * 200

    def test_long_text_truncated(self):
        assert extract_error_detail("a" * 201) == "a" * 200 + "..."

    def test_error_entries_without_message(self):
        body = {"errors": [{"message": "first"}, "second", {"code": 3}]}
        assert extract_error_detail(body) == "first, second, {'code': 3}"

    def test_structured_body_serialized(self):
        assert extract_error_detail({"status": "unauthorized"}) == '{"status": "unauthorized"}'

    def test_other_body(self):
        assert extract_error_detail(None) == "None"


class TestErrorConstruction:
    def test_error_from_response(self):
        err = error_from_response(404, {"message": "The specified resource does not exist."})

        assert isinstance(err, CanvasAPIError)
        assert str(err) == "API Error (404): The specified resource does not exist."
        assert err.status_code == 404
        assert err.response_body == {"message": "The specified resource does not exist."}
        assert not err.is_network_error

    def test_error_from_network_failure(self):
        err = error_from_network_failure(ConnectionError("refused"))

        assert err.message == "Network error: refused"
        assert err.status_code == 0
        assert err.response_body is None
        assert err.is_network_error
