"""
ghproject-cli — free-text status updates for GitHub Projects boards
"""

import argparse
import json
import sys

from ghproject_cli import config
from ghproject_cli.commands import (
    cmd_add,
    cmd_find,
    cmd_items,
    cmd_move,
    cmd_set,
    cmd_statuses,
    cmd_summary,
    cmd_whoami,
)
from ghproject_cli.exceptions import CliError, SetupError, UpdateError

HELP_TEXT = """\
Usage: ghproject <command> [args...]

Global flags:
  --format table          Output as readable text instead of JSON (default: json)
  --dry-run               Resolve item and status without changing the board
  --quiet, -q             Suppress confirmations and warnings
  --verbose, -v           Enable HTTP request logging
  --version               Show version number
  --org <login>           Board owner (overrides GHPROJECT_ORG)
  --project <n>           Project number (overrides GHPROJECT_NUMBER)
  --user                  Board belongs to a user account, not an organization

Commands:
  move <text...>          - Apply a free-text update, e.g.
                              move API docs to done
                              set PDF extraction as blocked - waiting on review
                              mark #12 as in progress
  set <query> <status>    - Set the status of the item matching <query>
    --reason <text>         Blocked reason (blocked statuses only)
  find <query>            - Rank board items against a title or "#number"
    --limit <n>             Number of matches to show (default: 5)
  statuses                - List the board's status options and aliases
  items                   - List board items
    -s, --status <s>        Filter by status name or alias (e.g. wip)
    --limit <n>             Limit output count
  summary                 - Items grouped by status
    --max-items <n>         Items listed per status (default: 5)
  add <content_id>        - Add an issue or pull request (GraphQL node id)
  whoami                  - Validate the token and show the configured board
  version                 - Show version number
"""


# ---------------------------------------------------------------------------
# Global flag extraction (before argparse, so --format works after subcommand)
# ---------------------------------------------------------------------------


def _extract_global_flags(argv):
    """Extract global flags from argv regardless of position.

    Returns (options_dict, remaining_argv). Handles --version directly.
    """
    opts = {
        "format": "json",
        "dry_run": False,
        "quiet": False,
        "verbose": False,
        "org": None,
        "project": None,
        "is_org": None,
    }
    remaining = []
    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg == "--version":
            print(f"ghproject-cli {config.VERSION}")
            sys.exit(0)
        elif arg == "--dry-run":
            opts["dry_run"] = True
        elif arg in ("--quiet", "-q"):
            opts["quiet"] = True
        elif arg in ("--verbose", "-v"):
            opts["verbose"] = True
        elif arg == "--user":
            opts["is_org"] = False
        elif arg == "--format" and i + 1 < len(argv):
            fmt = argv[i + 1]
            if fmt not in config.VALID_FORMATS:
                raise CliError(f"[ERROR] Invalid format '{fmt}'. Use: json, table")
            opts["format"] = fmt
            i += 1
        elif arg == "--org" and i + 1 < len(argv):
            opts["org"] = argv[i + 1]
            i += 1
        elif arg == "--project" and i + 1 < len(argv):
            opts["project"] = _positive_project(argv[i + 1])
            i += 1
        else:
            remaining.append(arg)
        i += 1
    if opts["quiet"] and opts["verbose"]:
        raise CliError("[ERROR] --quiet and --verbose are mutually exclusive.")
    return opts, remaining


def _positive_project(value):
    try:
        parsed = int(value)
    except ValueError:
        parsed = 0
    if parsed <= 0:
        raise CliError(f"[ERROR] --project must be a positive integer, got '{value}'.")
    return parsed


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


class _SubcommandParser(argparse.ArgumentParser):
    """Subparser that raises CliError instead of printing full help text."""

    def error(self, message):
        raise CliError(f"[ERROR] {message}")


def _positive_int(value):
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be a positive integer") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("must be a positive integer")
    return parsed


def _non_negative_int(value):
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be a non-negative integer") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("must be a non-negative integer")
    return parsed


def build_parser():
    parser = _SubcommandParser(
        prog="ghproject",
        description="Free-text status updates for GitHub Projects boards",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
    )
    parser.add_argument("--help", "-h", action="store_true", dest="show_help")
    sub = parser.add_subparsers(dest="command", parser_class=_SubcommandParser)

    # --- move ---
    p = sub.add_parser("move")
    p.add_argument("text", nargs="+")
    p.set_defaults(func=cmd_move)

    # --- set ---
    p = sub.add_parser("set")
    p.add_argument("query")
    p.add_argument("status")
    p.add_argument("--reason")
    p.set_defaults(func=cmd_set)

    # --- find ---
    p = sub.add_parser("find")
    p.add_argument("query")
    p.add_argument("--limit", type=_positive_int, default=5)
    p.set_defaults(func=cmd_find)

    # --- statuses / whoami ---
    sub.add_parser("statuses").set_defaults(func=cmd_statuses)
    sub.add_parser("whoami").set_defaults(func=cmd_whoami)

    # --- items ---
    p = sub.add_parser("items")
    p.add_argument("--status", "-s")
    p.add_argument("--limit", type=_positive_int)
    p.set_defaults(func=cmd_items)

    # --- summary ---
    p = sub.add_parser("summary")
    p.add_argument("--max-items", type=_non_negative_int, default=5, dest="max_items")
    p.set_defaults(func=cmd_summary)

    # --- add ---
    p = sub.add_parser("add")
    p.add_argument("content_id")
    p.set_defaults(func=cmd_add)

    # --- version (bare word) ---
    sub.add_parser("version").set_defaults(func=None)

    return parser


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

NO_TOKEN_COMMANDS = {"version"}


def _check_token():
    if not config.GITHUB_TOKEN:
        raise SetupError(
            "[SETUP_NEEDED] GITHUB_TOKEN is not set.\n"
            "  Add GITHUB_TOKEN=<token> to .env or export it."
        )


def _error_type_from_message(message):
    if message.startswith("[TOKEN_EXPIRED]"):
        return "token_expired"
    if message.startswith("[SETUP_NEEDED]"):
        return "setup_needed"
    if message.startswith("[ERROR]"):
        return "error"
    return "cli_error"


def _emit_cli_error(err, fmt):
    msg = str(err)
    if fmt == "json":
        if isinstance(err, UpdateError):
            detail = err.to_dict()
        else:
            detail = {"type": _error_type_from_message(msg), "message": msg}
        detail["exit_code"] = getattr(err, "exit_code", 1)
        payload = {
            "ok": False,
            "schema_version": config.CONTRACT_SCHEMA_VERSION,
            "error": detail,
        }
        print(json.dumps(payload, ensure_ascii=False), file=sys.stderr)
        return
    print(msg, file=sys.stderr)


def main():
    if hasattr(sys.stdout, "reconfigure"):
        sys.stdout.reconfigure(encoding="utf-8", errors="replace")

    if len(sys.argv) < 2:
        print(HELP_TEXT)
        sys.exit(0)

    fmt = "json"
    try:
        # Extract global flags from anywhere in argv
        opts, remaining_argv = _extract_global_flags(sys.argv[1:])
        fmt = opts["format"]
        config.RUNTIME_DRY_RUN = opts["dry_run"]
        config.RUNTIME_QUIET = opts["quiet"]
        config.RUNTIME_VERBOSE = opts["verbose"]
        if opts["verbose"]:
            config.HTTP_LOG_ENABLED = True

        if not remaining_argv:
            print(HELP_TEXT)
            sys.exit(0)

        parser = build_parser()
        ns = parser.parse_args(remaining_argv)
        ns.format = fmt  # inject global flags
        ns.org = opts["org"]
        ns.project = opts["project"]
        ns.is_org = opts["is_org"]

        if ns.show_help or not ns.command:
            print(HELP_TEXT)
            sys.exit(0)

        cmd = ns.command

        if cmd == "version":
            print(f"ghproject-cli {config.VERSION}")
            sys.exit(0)

        if cmd not in NO_TOKEN_COMMANDS:
            _check_token()

        handler = getattr(ns, "func", None)
        if handler:
            handler(ns)
        else:
            raise CliError(f"[ERROR] Unknown command: {cmd}")

    except CliError as e:
        _emit_cli_error(e, fmt)
        sys.exit(e.exit_code)


if __name__ == "__main__":
    main()
