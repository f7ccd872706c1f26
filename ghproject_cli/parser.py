"""
Free-text command parser: "move API docs to done" -> StatusUpdateRequest.

Three patterns are tried in order against the lowercased, trimmed input:
blocked-with-reason, standard "<verb> <subject> to|as|is <status>", and a
bare "<subject> <status>" suffix form for the common column names.
"""

import re

from ghproject_cli.aliases import is_blocked_status
from ghproject_cli.exceptions import ParseError
from ghproject_cli.models import StatusUpdateRequest

_VERB = r"(?:(?:move|set|mark|change)\s+)?"

_BLOCKED_WITH_REASON_RE = re.compile(
    r"^" + _VERB + r"(.+?)\s+(?:(?:to|as|is)\s+)?blocked\s*[-:]\s*(.+)$"
)
_STANDARD_RE = re.compile(r"^" + _VERB + r"(.+?)\s+(?:to|as|is)\s+(.+)$")
_SIMPLE_SUFFIX_RE = re.compile(r"^(.+?)\s+(done|todo|in\s*progress|completed?|blocked|backlog)$")


def parse_command(text):
    """Parse a free-text update command.

    Examples:
        "move API docs to done"
        "set PDF extraction as blocked - waiting on design review"
        "mark #12 as in progress"
        "login page done"

    Raises:
        ParseError: when no pattern matches.
    """
    normalized = (text or "").strip().lower()

    m = _BLOCKED_WITH_REASON_RE.match(normalized)
    if m:
        return StatusUpdateRequest(
            query=m.group(1).strip(),
            target_status="blocked",
            blocked_reason=m.group(2).strip(),
            is_blocked=True,
        )

    m = _STANDARD_RE.match(normalized)
    if m:
        target = m.group(2).strip()
        return StatusUpdateRequest(
            query=m.group(1).strip(),
            target_status=target,
            is_blocked=is_blocked_status(target),
        )

    m = _SIMPLE_SUFFIX_RE.match(normalized)
    if m:
        target = m.group(2).strip()
        return StatusUpdateRequest(
            query=m.group(1).strip(),
            target_status=target,
            is_blocked=is_blocked_status(target),
        )

    raise ParseError(text)
