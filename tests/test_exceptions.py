"""Tests for exceptions.py — hierarchy, exit codes, structured payloads."""

import pytest

from ghproject_cli.exceptions import (
    UPDATE_ERRORS,
    AmbiguousMatchError,
    CliError,
    ClientError,
    HTTPError,
    InvalidStatusError,
    ItemNotFoundError,
    ParseError,
    SetupError,
    UpdateError,
)


class TestHierarchy:
    def test_exit_codes(self):
        assert CliError.exit_code == 1
        assert SetupError.exit_code == 2
        assert ParseError("x").exit_code == 1

    @pytest.mark.parametrize("cls", UPDATE_ERRORS)
    def test_update_errors_are_cli_errors(self, cls):
        assert issubclass(cls, UpdateError)
        assert issubclass(cls, CliError)

    def test_closed_set_tags_unique(self):
        tags = [cls.error_type for cls in UPDATE_ERRORS]
        assert tags == [
            "parse_error",
            "item_not_found",
            "ambiguous_match",
            "invalid_status",
            "client_error",
        ]

    def test_http_error_is_not_cli_error(self):
        err = HTTPError(500, "Server Error", "body")
        assert not isinstance(err, CliError)
        assert err.headers == {}


class TestPayloads:
    def test_parse_error(self):
        err = ParseError("gibberish")
        assert err.to_dict() == {
            "type": "parse_error",
            "message": str(err),
            "text": "gibberish",
        }

    def test_item_not_found_with_suggestions(self):
        err = ItemNotFoundError("docs", ["#12: API documentation"])
        assert "Did you mean: #12: API documentation?" in str(err)
        assert err.to_dict()["suggestions"] == ["#12: API documentation"]

    def test_item_not_found_without_suggestions(self):
        err = ItemNotFoundError("docs")
        assert str(err) == '[ERROR] No item found matching "docs"'
        assert err.suggestions == []

    def test_ambiguous_match(self):
        candidates = [
            {"number": 1, "title": "Fix login bug", "score": 0.7769},
            {"number": 2, "title": "Fix login flow", "score": 0.7714},
        ]
        err = AmbiguousMatchError("login", candidates)
        assert "#1: Fix login bug, #2: Fix login flow" in str(err)
        assert err.to_dict()["candidates"] == candidates

    def test_invalid_status(self):
        err = InvalidStatusError("shipped", ["Todo", "Done"])
        assert "Available statuses: Todo, Done" in str(err)
        assert err.to_dict()["available_statuses"] == ["Todo", "Done"]

    def test_client_error(self):
        err = ClientError("[ERROR] HTTP 503", status_code=503, retryable=True)
        assert err.to_dict() == {
            "type": "client_error",
            "message": "[ERROR] HTTP 503",
            "status_code": 503,
            "retryable": True,
        }

    def test_client_error_defaults(self):
        err = ClientError("[ERROR] boom")
        assert err.retryable is False
        assert err.status_code is None
        assert err.retry_after is None
