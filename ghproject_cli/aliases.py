"""Status alias registry — natural-language terms for board status columns.

Standalone module (no project imports). Keys and values are lowercase; a
value names the canonical status the alias points at, which is then looked
up among the options the board actually defines.
"""

DEFAULT_STATUS_ALIASES: dict[str, str] = {
    # todo
    "todo": "todo",
    "to do": "todo",
    "backlog": "todo",
    "new": "todo",
    "open": "todo",
    "not started": "todo",
    # in progress
    "in progress": "in progress",
    "in-progress": "in progress",
    "inprogress": "in progress",
    "started": "in progress",
    "working": "in progress",
    "active": "in progress",
    "doing": "in progress",
    "wip": "in progress",
    # done
    "done": "done",
    "complete": "done",
    "completed": "done",
    "finished": "done",
    "closed": "done",
    "resolved": "done",
    # blocked
    "blocked": "blocked",
    "on hold": "blocked",
    "waiting": "blocked",
    "paused": "blocked",
}

BLOCKED_STATUSES = frozenset({"blocked", "on hold", "waiting", "paused"})


def is_blocked_status(status):
    """True when the status text names one of the blocked states."""
    return (status or "").strip().lower() in BLOCKED_STATUSES
