"""Core output dispatchers."""

import json

from ghproject_cli import config


def pretty_print(data):
    print(json.dumps(data, indent=2, ensure_ascii=False))


def output(data, formatter=None, fmt="json"):
    """Output data in requested format."""
    if fmt == "table" and formatter:
        print(formatter(data))
    else:
        pretty_print(data)


def mutation_response(action, result, fmt="json"):
    """Print a mutation confirmation: one summary line for tables, JSON otherwise.

    --quiet suppresses the table confirmation; JSON is always printed.
    """
    if fmt == "json":
        pretty_print(result)
        return
    if config.RUNTIME_QUIET:
        return
    prefix = "DRY RUN" if result.get("dry_run") else "OK"
    print(f"{prefix}: {action}")
