"""Tests for updater.py — the status update pipeline end to end."""

import pytest
from conftest import FakeClock, FakeTransport, make_item

from ghproject_cli.board import BoardClient
from ghproject_cli.exceptions import (
    AmbiguousMatchError,
    ClientError,
    InvalidStatusError,
    ItemNotFoundError,
    ParseError,
)
from ghproject_cli.models import MatchResult, StatusUpdateRequest, UpdaterSettings
from ghproject_cli.updater import StatusUpdater, check_ambiguity


def _updater(items, settings=None, transport=None):
    transport = transport or FakeTransport(items=items)
    client = BoardClient(transport, cache_ttl=60, clock=FakeClock())
    return StatusUpdater(client, settings), transport


def _matches(*scores):
    return [
        MatchResult(item=make_item(n, f"Item {n}"), score=s, title=f"Item {n}", number=n)
        for n, s in enumerate(scores, start=1)
    ]


class TestCheckAmbiguity:
    def test_close_scores_raise(self):
        with pytest.raises(AmbiguousMatchError) as exc_info:
            check_ambiguity("item", _matches(0.80, 0.78, 0.50), UpdaterSettings())
        assert [c["number"] for c in exc_info.value.candidates] == [1, 2]

    def test_certain_top_never_ambiguous(self):
        check_ambiguity("item", _matches(0.95, 0.90), UpdaterSettings())

    def test_clear_gap(self):
        check_ambiguity("item", _matches(0.80, 0.70), UpdaterSettings())

    def test_single_match(self):
        check_ambiguity("item", _matches(0.4), UpdaterSettings())

    def test_candidates_capped(self):
        with pytest.raises(AmbiguousMatchError) as exc_info:
            check_ambiguity("item", _matches(*([0.7] * 8)), UpdaterSettings())
        assert len(exc_info.value.candidates) == 5

    def test_threshold_is_configurable(self):
        settings = UpdaterSettings(ambiguity_threshold=0.2)
        with pytest.raises(AmbiguousMatchError):
            check_ambiguity("item", _matches(0.80, 0.70), settings)


class TestProcessUpdate:
    def test_partial_word_match_end_to_end(self):
        updater, transport = _updater([make_item(12, "API documentation", status="Todo")])
        result = updater.process_update("move docs to done", "acme", 7)
        assert result.success is True
        assert result.number == 12
        assert result.title == "API documentation"
        assert result.match_score == 0.65
        assert result.new_status == "done"
        assert result.previous_status == "Todo"
        assert result.message is None
        assert transport.updates == [("PVT_board", "PVTI_12", "PVTSSF_status", "opt-done")]

    def test_alias_status(self, board_items):
        updater, transport = _updater(board_items)
        result = updater.process_update("set pdf extraction as wip", "acme", 7)
        assert result.new_status == "in progress"
        assert transport.updates[0][3] == "opt-in progress"

    def test_number_reference(self, board_items):
        updater, _ = _updater(board_items)
        result = updater.process_update("mark #15 as done", "acme", 7)
        assert result.number == 15
        assert result.match_score == 1.0
        assert result.previous_status is None

    def test_blocked_reason_message(self, board_items):
        updater, _ = _updater(board_items)
        result = updater.process_update(
            "set PDF extraction as blocked - waiting on review", "acme", 7
        )
        assert result.new_status == "blocked"
        assert result.message == "Blocked: waiting on review"

    def test_dry_run_skips_mutation(self, board_items):
        updater, transport = _updater(board_items)
        result = updater.process_update("move docs to done", "acme", 7, dry_run=True)
        assert result.dry_run is True
        assert result.new_status == "done"
        assert transport.updates == []

    def test_board_fetched_once_across_updates(self, board_items):
        updater, transport = _updater(board_items)
        updater.process_update("move docs to done", "acme", 7)
        updater.process_update("move pdf to done", "acme", 7)
        assert transport.count("fetch_board") == 1
        assert transport.count("fetch_items") == 2

    def test_parse_error_before_network(self, board_items):
        updater, transport = _updater(board_items)
        with pytest.raises(ParseError):
            updater.process_update("gibberish", "acme", 7)
        assert transport.calls == []


class TestPipelineErrors:
    def test_item_not_found_carries_suggestions(self):
        items = [make_item(12, "API documentation", status="Todo")]
        settings = UpdaterSettings(min_score=0.7)
        updater, transport = _updater(items, settings)
        with pytest.raises(ItemNotFoundError) as exc_info:
            updater.process_update("move docs to done", "acme", 7)
        assert exc_info.value.suggestions == ["#12: API documentation"]
        assert transport.updates == []

    def test_ambiguous_match(self):
        items = [make_item(1, "Fix login bug"), make_item(2, "Fix login flow")]
        updater, transport = _updater(items)
        with pytest.raises(AmbiguousMatchError) as exc_info:
            updater.process_update("move login to done", "acme", 7)
        assert {c["number"] for c in exc_info.value.candidates} == {1, 2}
        assert transport.updates == []

    def test_near_certain_match_wins_over_close_second(self):
        items = [make_item(1, "Login page header"), make_item(2, "Login page footer")]
        updater, _ = _updater(items)
        result = updater.process_update("move login page to done", "acme", 7)
        assert result.number == 1
        assert result.match_score == 0.95

    def test_invalid_status_lists_board_statuses(self, board_items):
        updater, transport = _updater(board_items)
        with pytest.raises(InvalidStatusError) as exc_info:
            updater.process_update("move docs to shipped", "acme", 7)
        assert exc_info.value.available_statuses == ["Todo", "In Progress", "Done", "Blocked"]
        assert transport.updates == []

    def test_client_error_propagates_unchanged(self, board_items):
        err = ClientError("[ERROR] HTTP 404", status_code=404)

        class BrokenTransport(FakeTransport):
            def fetch_items(self, board_id):
                raise err

        updater, _ = _updater(board_items, transport=BrokenTransport(items=board_items))
        with pytest.raises(ClientError) as exc_info:
            updater.process_update("move docs to done", "acme", 7)
        assert exc_info.value is err


class TestAliasesAndSettings:
    def test_custom_alias(self, board_items):
        updater, _ = _updater(board_items)
        updater.add_status_alias("shipped", "done")
        request = StatusUpdateRequest(query="docs", target_status="shipped")
        assert updater.update_status(request, "acme", 7).new_status == "done"

    def test_remove_alias(self, board_items):
        updater, _ = _updater(board_items)
        assert updater.remove_status_alias("wip") is True
        with pytest.raises(InvalidStatusError):
            updater.process_update("move docs to wip", "acme", 7)

    def test_settings_not_shared(self, board_items):
        first, _ = _updater(board_items)
        second, _ = _updater(board_items)
        first.add_status_alias("shipped", "done")
        assert "shipped" not in second.resolver.aliases

    def test_clear_cache_refetches_board(self, board_items):
        updater, transport = _updater(board_items)
        updater.process_update("move docs to done", "acme", 7)
        updater.clear_cache()
        updater.process_update("move docs to done", "acme", 7)
        assert transport.count("fetch_board") == 2
