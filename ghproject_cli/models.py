"""
Typed models for board snapshots and status-update requests/results.
"""

from dataclasses import dataclass, field

from ghproject_cli import config
from ghproject_cli.aliases import DEFAULT_STATUS_ALIASES
from ghproject_cli.exceptions import ClientError


@dataclass(frozen=True)
class FieldValue:
    """One field value on a board item: text, single-select or date."""

    field_name: str
    text: str | None = None
    name: str | None = None
    option_id: str | None = None
    date: str | None = None

    @property
    def value(self):
        if self.name is not None:
            return self.name
        if self.text is not None:
            return self.text
        return self.date

    @classmethod
    def from_node(cls, node):
        if not isinstance(node, dict):
            return None
        field_name = (node.get("field") or {}).get("name")
        if not field_name:
            return None
        return cls(
            field_name=field_name,
            text=node.get("text"),
            name=node.get("name"),
            option_id=node.get("optionId"),
            date=node.get("date"),
        )


@dataclass(frozen=True)
class ItemContent:
    """Issue or pull request linked to a board item."""

    id: str
    kind: str
    number: int | None
    title: str | None
    url: str | None = None
    state: str | None = None
    labels: tuple[str, ...] = ()
    assignees: tuple[str, ...] = ()
    updated_at: str | None = None
    closed_at: str | None = None

    @classmethod
    def from_node(cls, node):
        """Build from a GraphQL content node. Draft issues and redacted
        content carry no title or number and yield None."""
        if not isinstance(node, dict):
            return None
        if node.get("title") is None and node.get("number") is None:
            return None
        labels = tuple(
            lbl["name"] for lbl in (node.get("labels") or {}).get("nodes") or [] if lbl
        )
        assignees = tuple(
            a["login"] for a in (node.get("assignees") or {}).get("nodes") or [] if a
        )
        return cls(
            id=node.get("id", ""),
            kind=node.get("__typename") or ("Issue" if "labels" in node else "PullRequest"),
            number=node.get("number"),
            title=node.get("title"),
            url=node.get("url"),
            state=node.get("state"),
            labels=labels,
            assignees=assignees,
            updated_at=node.get("updatedAt"),
            closed_at=node.get("closedAt"),
        )


@dataclass(frozen=True)
class BoardItem:
    """Immutable snapshot of one board item, fetched per operation.

    ``field_values`` is keyed by lowercased field name; field lookups are
    case-insensitive like the status field lookup in BoardContext.
    """

    id: str
    field_values: dict[str, FieldValue] = field(default_factory=dict)
    content: ItemContent | None = None

    @property
    def title(self) -> str | None:
        return self.content.title if self.content else None

    @property
    def number(self) -> int | None:
        return self.content.number if self.content else None

    def status(self, field_name="Status") -> str | None:
        """Display name of the single-select value for ``field_name``."""
        fv = self.field_values.get(field_name.lower())
        if fv is None or fv.name is None:
            return None
        return fv.name

    def to_dict(self, status_field="Status"):
        content = self.content
        return {
            "id": self.id,
            "number": self.number,
            "title": self.title,
            "status": self.status(status_field),
            "type": content.kind if content else None,
            "state": content.state if content else None,
            "url": content.url if content else None,
            "labels": list(content.labels) if content else [],
            "assignees": list(content.assignees) if content else [],
        }

    @classmethod
    def from_node(cls, node):
        values = {}
        for raw in (node.get("fieldValues") or {}).get("nodes") or []:
            fv = FieldValue.from_node(raw)
            if fv is not None:
                values[fv.field_name.lower()] = fv
        return cls(
            id=node["id"],
            field_values=values,
            content=ItemContent.from_node(node.get("content")),
        )


@dataclass(frozen=True)
class BoardContext:
    """Board metadata needed to resolve and apply a status change.

    ``status_options`` maps lowercased status name to option id, in board
    order; ``status_labels`` maps the same keys to display names.
    """

    board_id: str
    number: int
    title: str
    status_field_id: str
    status_options: dict[str, str]
    status_labels: dict[str, str]
    captured_at: float
    url: str | None = None

    @property
    def status_names(self) -> list[str]:
        return list(self.status_labels.values())

    @classmethod
    def from_project(cls, project, status_field_name, captured_at):
        """Build from a projectV2 node; the status field must be single-select."""
        wanted = status_field_name.lower()
        status_field = None
        for node in (project.get("fields") or {}).get("nodes") or []:
            if not node or "options" not in node:
                continue
            if (node.get("name") or "").lower() == wanted:
                status_field = node
                break
        if status_field is None:
            raise ClientError(
                f'[ERROR] No {status_field_name} field found in project "{project.get("title")}". '
                f"The board needs a single-select {status_field_name} field."
            )
        options = {}
        labels = {}
        for option in status_field.get("options") or []:
            key = option["name"].lower()
            options[key] = option["id"]
            labels[key] = option["name"]
        return cls(
            board_id=project["id"],
            number=project.get("number", 0),
            title=project.get("title", ""),
            status_field_id=status_field["id"],
            status_options=options,
            status_labels=labels,
            captured_at=captured_at,
            url=project.get("url"),
        )


@dataclass(frozen=True)
class MatchResult:
    """A scored candidate from fuzzy title matching."""

    item: BoardItem
    score: float
    title: str
    number: int

    def to_dict(self):
        return {"number": self.number, "title": self.title, "score": round(self.score, 4)}


@dataclass(frozen=True)
class StatusUpdateRequest:
    """Structured form of a free-text update command."""

    query: str
    target_status: str
    blocked_reason: str | None = None
    is_blocked: bool = False


@dataclass(frozen=True)
class StatusUpdateResult:
    success: bool
    item_id: str
    title: str
    number: int
    new_status: str
    match_score: float
    previous_status: str | None = None
    message: str | None = None
    dry_run: bool = False

    def to_dict(self):
        return {
            "success": self.success,
            "item_id": self.item_id,
            "title": self.title,
            "number": self.number,
            "new_status": self.new_status,
            "previous_status": self.previous_status,
            "match_score": round(self.match_score, 4),
            "message": self.message,
            "dry_run": self.dry_run,
        }


@dataclass(frozen=True)
class UpdaterSettings:
    """Thresholds and alias table used by the resolver and orchestrator."""

    min_score: float = 0.3
    ambiguity_threshold: float = 0.05
    certainty_score: float = 0.9
    max_ambiguous: int = 5
    max_suggestions: int = 3
    suggestion_floor: float = 0.1
    status_field_name: str = "Status"
    status_aliases: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_STATUS_ALIASES))

    @classmethod
    def from_config(cls):
        return cls(
            min_score=config.MIN_MATCH_SCORE,
            status_field_name=config.STATUS_FIELD_NAME,
        )
