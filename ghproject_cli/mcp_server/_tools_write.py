"""Write tools: free-text and explicit status updates (2 tools)."""

from __future__ import annotations

from ghproject_cli import CliError
from ghproject_cli.mcp_server._core import _call, _contract_error, _finalize_tool_result
from ghproject_cli.mcp_server._security import _validate_input


def update_status(command: str, dry_run: bool = False) -> dict:
    """Apply a free-text status command to the board.

    Accepted forms: 'move <item> to <status>', 'set <item> as <status>',
    'mark #12 as in progress', 'set <item> as blocked - <reason>'.

    Args:
        command: The free-text instruction.
        dry_run: Resolve item and status without changing the board.

    Returns:
        Dict with success, item_id, title, number, new_status,
        previous_status, match_score, message, dry_run. On ambiguous or
        missing items the error_detail lists candidates or suggestions.
    """
    try:
        command = _validate_input(command, "command")
    except CliError as e:
        return _finalize_tool_result(_contract_error(str(e), "error"))
    return _finalize_tool_result(_call("update_status", command=command, dry_run=dry_run))


def set_item_status(
    query: str,
    status: str,
    blocked_reason: str | None = None,
    dry_run: bool = False,
) -> dict:
    """Set the status of the item matching ``query``.

    Args:
        query: Title fragment or '#number'.
        status: Status name or alias ('done', 'wip', 'on hold').
        blocked_reason: Reason text, only with a blocked status.
        dry_run: Resolve item and status without changing the board.
    """
    try:
        query = _validate_input(query, "query")
        status = _validate_input(status, "status")
        if blocked_reason is not None:
            blocked_reason = _validate_input(blocked_reason, "blocked_reason")
    except CliError as e:
        return _finalize_tool_result(_contract_error(str(e), "error"))
    return _finalize_tool_result(
        _call(
            "set_item_status",
            query=query,
            status=status,
            blocked_reason=blocked_reason,
            dry_run=dry_run,
        )
    )


def register(mcp):
    """Register all write tools with the FastMCP instance."""
    mcp.tool()(update_status)
    mcp.tool()(set_item_status)
