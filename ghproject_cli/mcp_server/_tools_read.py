"""Read tools: board statuses, items, summaries and title search (4 tools)."""

from __future__ import annotations

from ghproject_cli import CliError
from ghproject_cli.mcp_server._core import _call, _contract_error, _finalize_tool_result
from ghproject_cli.mcp_server._security import _sanitize_row, _validate_input


def list_statuses() -> dict:
    """List the board's status options and the status alias table.

    Returns:
        Dict with board, status_field, statuses (display names), aliases.
    """
    return _finalize_tool_result(_call("list_statuses"))


def list_items(status: str | None = None, limit: int = 50) -> dict:
    """List board items, optionally filtered by status.

    Args:
        status: Status name or alias (e.g. 'done', 'wip').
        limit: Maximum items returned (default 50).

    Returns:
        Dict with board, items, total.
    """
    result = _call("list_items", status=status, limit=limit)
    if isinstance(result, dict) and result.get("ok") is not False:
        result = dict(result)
        result["items"] = [_sanitize_row(i) for i in result.get("items", [])]
    return _finalize_tool_result(result)


def status_summary(max_items: int = 5) -> dict:
    """Items grouped by status column, with counts.

    Args:
        max_items: Items listed per status (default 5).
    """
    result = _call("status_summary", max_items=max_items)
    if isinstance(result, dict) and result.get("ok") is not False:
        result = dict(result)
        result["statuses"] = [
            {**g, "items": [_sanitize_row(i) for i in g.get("items", [])]}
            for g in result.get("statuses", [])
        ]
    return _finalize_tool_result(result)


def find_items(query: str, limit: int = 5) -> dict:
    """Rank board items against a title fragment or '#number'.

    Args:
        query: Title fragment ('api docs') or item number ('#12').
        limit: Maximum matches (default 5).

    Returns:
        Dict with query, matches (number/title/score/status), suggestions.
    """
    try:
        query = _validate_input(query, "query")
    except CliError as e:
        return _finalize_tool_result(_contract_error(str(e), "error"))
    result = _call("find_items", query=query, limit=limit)
    if isinstance(result, dict) and result.get("ok") is not False:
        result = dict(result)
        result["matches"] = [_sanitize_row(m) for m in result.get("matches", [])]
    return _finalize_tool_result(result)


def register(mcp):
    """Register all read tools with the FastMCP instance."""
    mcp.tool()(list_statuses)
    mcp.tool()(list_items)
    mcp.tool()(status_summary)
    mcp.tool()(find_items)
