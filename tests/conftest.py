"""
Shared test fixtures for ghproject-cli tests.
Patches config module to avoid loading a real .env and making API calls.
"""

import os
import sys

import pytest

# Add project root to path so imports work
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ghproject_cli.models import (  # noqa: E402
    BoardContext,
    BoardItem,
    FieldValue,
    ItemContent,
)

DEFAULT_STATUSES = ("Todo", "In Progress", "Done", "Blocked")


@pytest.fixture(autouse=True)
def _isolate_config(monkeypatch):
    """Ensure every test starts with a clean config state.
    Prevents tests from reading the real .env or talking to GitHub."""
    from ghproject_cli import config

    monkeypatch.setattr(config, "env", {})
    monkeypatch.setattr(config, "GITHUB_TOKEN", "fake-token")
    monkeypatch.setattr(config, "ORG", "acme")
    monkeypatch.setattr(config, "PROJECT_NUMBER", 7)
    monkeypatch.setattr(config, "IS_ORG", True)
    monkeypatch.setattr(config, "STATUS_FIELD_NAME", "Status")
    monkeypatch.setattr(config, "MIN_MATCH_SCORE", 0.3)
    monkeypatch.setattr(config, "CACHE_TTL_SECONDS", 3600.0)
    monkeypatch.setattr(config, "HTTP_LOG_ENABLED", False)
    monkeypatch.setattr(config, "HTTP_MAX_RETRIES", 2)
    monkeypatch.setattr(config, "HTTP_RETRY_BASE_SECONDS", 1.0)
    monkeypatch.setattr(config, "HTTP_RETRY_MAX_SECONDS", 30.0)
    monkeypatch.setattr(config, "RUNTIME_DRY_RUN", False)
    monkeypatch.setattr(config, "RUNTIME_QUIET", False)
    monkeypatch.setattr(config, "RUNTIME_VERBOSE", False)


# ---------------------------------------------------------------------------
# Board builders
# ---------------------------------------------------------------------------


def make_item(number, title, status=None, item_id=None, kind="Issue"):
    """Build a BoardItem linked to an issue with the given number and title."""
    values = {}
    if status is not None:
        values["status"] = FieldValue(
            field_name="Status", name=status, option_id=f"opt-{status.lower()}"
        )
    content = ItemContent(
        id=f"I_{number}",
        kind=kind,
        number=number,
        title=title,
        url=f"https://github.com/acme/app/issues/{number}",
        state="OPEN",
    )
    return BoardItem(id=item_id or f"PVTI_{number}", field_values=values, content=content)


def make_board(statuses=DEFAULT_STATUSES, captured_at=0.0):
    options = {name.lower(): f"opt-{name.lower()}" for name in statuses}
    labels = {name.lower(): name for name in statuses}
    return BoardContext(
        board_id="PVT_board",
        number=7,
        title="Roadmap",
        status_field_id="PVTSSF_status",
        status_options=options,
        status_labels=labels,
        captured_at=captured_at,
        url="https://github.com/orgs/acme/projects/7",
    )


class FakeTransport:
    """In-memory board transport that records every call."""

    def __init__(self, board=None, items=None):
        self.board = board or make_board()
        self.items = list(items or [])
        self.calls = []
        self.updates = []
        self.added = []

    def fetch_board(self, org, project_number, is_org=True):
        self.calls.append(("fetch_board", org, project_number, is_org))
        return self.board

    def fetch_items(self, board_id):
        self.calls.append(("fetch_items", board_id))
        return list(self.items)

    def update_item_status(self, board_id, item_id, field_id, option_id):
        self.calls.append(("update_item_status", board_id, item_id))
        self.updates.append((board_id, item_id, field_id, option_id))
        return item_id

    def add_item(self, board_id, content_id):
        self.calls.append(("add_item", board_id, content_id))
        self.added.append((board_id, content_id))
        return f"PVTI_new_{len(self.added)}"

    def count(self, name):
        return sum(1 for call in self.calls if call[0] == name)


class FakeClock:
    """Manually advanced time source for cache tests."""

    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def board_items():
    return [
        make_item(12, "API documentation", status="Todo"),
        make_item(13, "PDF extraction", status="In Progress"),
        make_item(14, "Login page redesign", status="Done"),
        make_item(15, "Release 12 notes"),
    ]


@pytest.fixture
def transport(board_items):
    return FakeTransport(items=board_items)
