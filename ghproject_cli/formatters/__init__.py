"""Output formatting package for ghproject-cli.

Re-exports all public names so consumers can do:
    from ghproject_cli.formatters import format_items_table
"""

from ghproject_cli.formatters._board import (
    format_items_table,
    format_matches_table,
    format_statuses_table,
    format_summary_table,
    format_update_summary,
    format_whoami_table,
)
from ghproject_cli.formatters._core import (
    mutation_response,
    output,
    pretty_print,
)
from ghproject_cli.formatters._table import (
    _CONTROL_RE,
    _sanitize_str,
    _table,
    _trunc,
)

__all__ = [
    "_CONTROL_RE",
    "_sanitize_str",
    "_table",
    "_trunc",
    "format_items_table",
    "format_matches_table",
    "format_statuses_table",
    "format_summary_table",
    "format_update_summary",
    "format_whoami_table",
    "mutation_response",
    "output",
    "pretty_print",
]
