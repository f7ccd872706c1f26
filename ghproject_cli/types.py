"""Typed response definitions for GhProjectClient methods.

These TypedDicts document the shape of dicts returned by public API methods.
They are optional — runtime behavior is unchanged (plain dicts).
"""

from __future__ import annotations

from typing import TypedDict


class BoardInfo(TypedDict):
    id: str
    number: int
    title: str
    url: str | None


class ItemRow(TypedDict, total=False):
    """Flat board item returned in list results."""

    id: str
    number: int | None
    title: str | None
    status: str | None
    type: str | None
    state: str | None
    url: str | None
    labels: list[str]
    assignees: list[str]


class ItemListResult(TypedDict):
    """Return type of GhProjectClient.list_items()."""

    board: BoardInfo
    items: list[ItemRow]
    total: int


class MatchRow(TypedDict, total=False):
    number: int
    title: str
    score: float
    status: str | None


class FindResult(TypedDict):
    """Return type of GhProjectClient.find_items()."""

    query: str
    matches: list[MatchRow]
    suggestions: list[str]


class StatusGroup(TypedDict):
    status: str
    count: int
    items: list[MatchRow]


class StatusSummary(TypedDict):
    """Return type of GhProjectClient.status_summary()."""

    board: BoardInfo
    total: int
    statuses: list[StatusGroup]


class StatusList(TypedDict):
    """Return type of GhProjectClient.list_statuses()."""

    board: BoardInfo
    status_field: str
    statuses: list[str]
    aliases: dict[str, str]


class UpdateResult(TypedDict):
    """Return type of update_status() / set_item_status()."""

    success: bool
    item_id: str
    title: str
    number: int
    new_status: str
    previous_status: str | None
    match_score: float
    message: str | None
    dry_run: bool
