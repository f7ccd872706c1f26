"""
Command implementations for ghproject-cli.
Each cmd_*() function receives an argparse.Namespace and handles one CLI command.

Business logic lives in client.py (GhProjectClient). These thin wrappers
handle argparse → keyword args, format selection, and formatter dispatch.
"""

from ghproject_cli import config
from ghproject_cli.client import GhProjectClient
from ghproject_cli.formatters import (
    format_items_table,
    format_matches_table,
    format_statuses_table,
    format_summary_table,
    format_update_summary,
    format_whoami_table,
    mutation_response,
    output,
)


def _client(ns):
    """Build a client from .env values plus any --org/--project/--user overrides."""
    return GhProjectClient(
        org=getattr(ns, "org", None),
        project_number=getattr(ns, "project", None),
        is_org=getattr(ns, "is_org", None),
    )


def _report_update(result, fmt):
    if fmt == "json":
        output(result, fmt=fmt)
        return
    mutation_response(format_update_summary(result), result, fmt)


# ---------------------------------------------------------------------------
# Read commands
# ---------------------------------------------------------------------------


def cmd_whoami(ns):
    output(_client(ns).whoami(), format_whoami_table, ns.format)


def cmd_statuses(ns):
    output(_client(ns).list_statuses(), format_statuses_table, ns.format)


def cmd_items(ns):
    result = _client(ns).list_items(status=ns.status, limit=ns.limit)
    output(result, format_items_table, ns.format)


def cmd_summary(ns):
    result = _client(ns).status_summary(max_items=ns.max_items)
    output(result, format_summary_table, ns.format)


def cmd_find(ns):
    result = _client(ns).find_items(ns.query, limit=ns.limit)
    output(result, format_matches_table, ns.format)


# ---------------------------------------------------------------------------
# Mutation commands
# ---------------------------------------------------------------------------


def cmd_move(ns):
    text = " ".join(ns.text)
    result = _client(ns).update_status(text, dry_run=config.RUNTIME_DRY_RUN)
    _report_update(result, ns.format)


def cmd_set(ns):
    result = _client(ns).set_item_status(
        ns.query,
        ns.status,
        blocked_reason=ns.reason,
        dry_run=config.RUNTIME_DRY_RUN,
    )
    _report_update(result, ns.format)


def cmd_add(ns):
    result = _client(ns).add_item(ns.content_id, dry_run=config.RUNTIME_DRY_RUN)
    if ns.format == "json":
        output(result, fmt=ns.format)
        return
    action = f"Added {ns.content_id} to the board"
    if result.get("item_id"):
        action += f" (item {result['item_id']})"
    mutation_response(action, result, ns.format)
