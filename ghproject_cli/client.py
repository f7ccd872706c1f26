"""
GhProjectClient — public Python API for GitHub Projects status updates.

Single entry point for the CLI and the MCP server.
All methods return flat dicts suitable for JSON serialization.
"""

from __future__ import annotations

import time

# TypedDict return types live in ghproject_cli.types for documentation.
from ghproject_cli import api, config
from ghproject_cli.aliases import is_blocked_status
from ghproject_cli.board import BoardClient
from ghproject_cli.exceptions import CliError, InvalidStatusError, SetupError
from ghproject_cli.matcher import find_matches, get_suggestions
from ghproject_cli.models import StatusUpdateRequest, UpdaterSettings
from ghproject_cli.transport import GraphQLTransport
from ghproject_cli.types import (
    FindResult,
    ItemListResult,
    StatusList,
    StatusSummary,
    UpdateResult,
)
from ghproject_cli.updater import StatusUpdater

NO_STATUS_LABEL = "No Status"


def _board_info(board):
    return {
        "id": board.board_id,
        "number": board.number,
        "title": board.title,
        "url": board.url,
    }


class GhProjectClient:
    """Public API surface for one GitHub Projects board.

    All methods use keyword-only options and return plain dicts suitable
    for JSON serialization. Raises CliError/SetupError on failure; status
    update failures are UpdateError subclasses with a ``to_dict()`` payload.
    """

    def __init__(
        self,
        *,
        token=None,
        org=None,
        project_number=None,
        is_org=None,
        transport=None,
        settings=None,
        clock=time.time,
        validate_token=False,
    ):
        """Initialize the client.

        Args:
            token, org, project_number, is_org: override the .env values.
            transport: board transport; defaults to GraphQLTransport.
            settings: UpdaterSettings; defaults to UpdaterSettings.from_config().
            clock: time source for the board cache.
            validate_token: If True, check the token and its scopes now.
        """
        self.token = config.GITHUB_TOKEN if token is None else token
        self.org = org or config.ORG
        self.project_number = int(project_number or config.PROJECT_NUMBER or 0)
        self.is_org = config.IS_ORG if is_org is None else bool(is_org)
        self.settings = settings or UpdaterSettings.from_config()

        if transport is None:
            if not self.token:
                raise SetupError(
                    "[SETUP_NEEDED] GITHUB_TOKEN is not set.\n"
                    "  Add GITHUB_TOKEN=<token> to .env or export it."
                )
            transport = GraphQLTransport(
                self.token, status_field_name=self.settings.status_field_name
            )
        self.board_client = BoardClient(
            transport, cache_ttl=config.CACHE_TTL_SECONDS, clock=clock
        )
        self.updater = StatusUpdater(self.board_client, self.settings)

        if validate_token:
            api.validate_token(self.token)

    # -------------------------------------------------------------------
    # Internal helpers
    # -------------------------------------------------------------------

    def _board(self, force_refresh=False):
        if not self.org or not self.project_number:
            raise SetupError(
                "[SETUP_NEEDED] No board configured.\n"
                "  Set GHPROJECT_ORG and GHPROJECT_NUMBER in .env, "
                "or pass --org and --project."
            )
        return self.board_client.get_board(
            self.org, self.project_number, self.is_org, force_refresh=force_refresh
        )

    def _board_and_items(self):
        board = self._board()
        return board, self.board_client.get_items(board.board_id)

    # -------------------------------------------------------------------
    # Read commands
    # -------------------------------------------------------------------

    def whoami(self) -> dict:
        """Validate the token and report the configured board.

        Returns:
            dict with keys: login, scopes, org, project_number, is_org.
        """
        info = api.validate_token(self.token)
        return {
            "login": info["login"],
            "scopes": info["scopes"],
            "org": self.org,
            "project_number": self.project_number,
            "is_org": self.is_org,
        }

    def list_statuses(self) -> StatusList:
        """List the board's status options and the alias table."""
        board = self._board()
        return {
            "board": _board_info(board),
            "status_field": self.settings.status_field_name,
            "statuses": board.status_names,
            "aliases": dict(self.updater.resolver.aliases),
        }

    def list_items(self, *, status=None, limit=None) -> ItemListResult:
        """List board items, optionally filtered by status.

        Args:
            status: Status name or alias (e.g. "wip").
            limit: Maximum number of items to return.
        """
        board, items = self._board_and_items()
        field_name = self.settings.status_field_name
        if status:
            resolved = self.updater.resolve_status(status, board.status_options)
            if resolved is None:
                raise InvalidStatusError(status, board.status_names)
            wanted = resolved[0]
            items = [i for i in items if (i.status(field_name) or "").lower() == wanted]
        rows = [i.to_dict(field_name) for i in items]
        total = len(rows)
        if limit is not None:
            if limit < 1:
                raise CliError("[ERROR] --limit must be a positive integer.")
            rows = rows[:limit]
        return {"board": _board_info(board), "items": rows, "total": total}

    def status_summary(self, *, max_items=5) -> StatusSummary:
        """Items grouped by status, in board column order.

        Items without a status are grouped under "No Status" at the end.
        """
        board, items = self._board_and_items()
        field_name = self.settings.status_field_name
        groups = {key: [] for key in board.status_labels}
        unset = []
        for item in items:
            current = (item.status(field_name) or "").lower()
            groups.get(current, unset).append(item)

        def _group(label, members):
            return {
                "status": label,
                "count": len(members),
                "items": [
                    {"number": i.number, "title": i.title} for i in members[: max(0, max_items)]
                ],
            }

        statuses = [_group(board.status_labels[key], groups[key]) for key in groups]
        if unset:
            statuses.append(_group(NO_STATUS_LABEL, unset))
        return {"board": _board_info(board), "total": len(items), "statuses": statuses}

    def find_items(self, query, *, limit=5) -> FindResult:
        """Rank board items against a title query or "#number".

        Returns:
            dict with keys: query, matches, suggestions (only filled when
            nothing cleared the minimum score).
        """
        _board, items = self._board_and_items()
        field_name = self.settings.status_field_name
        matches = find_matches(items, query, self.settings.min_score)
        rows = [
            {**m.to_dict(), "status": m.item.status(field_name)} for m in matches[: max(1, limit)]
        ]
        suggestions = []
        if not rows:
            suggestions = get_suggestions(
                items, query, self.settings.max_suggestions, self.settings.suggestion_floor
            )
        return {"query": query, "matches": rows, "suggestions": suggestions}

    # -------------------------------------------------------------------
    # Mutation commands
    # -------------------------------------------------------------------

    def update_status(self, command, *, dry_run=False) -> UpdateResult:
        """Apply a free-text command such as "move API docs to done"."""
        self._board()
        result = self.updater.process_update(
            command, self.org, self.project_number, self.is_org, dry_run=dry_run
        )
        return result.to_dict()  # type: ignore[return-value]

    def set_item_status(
        self, query, status, *, blocked_reason=None, dry_run=False
    ) -> UpdateResult:
        """Set an item's status from an explicit query and status.

        Args:
            query: Title fragment or "#number".
            status: Status name or alias.
            blocked_reason: Reason text; only valid with a blocked status.
        """
        query = (query or "").strip()
        if not query:
            raise CliError("[ERROR] Item query cannot be empty.")
        blocked = is_blocked_status(status)
        if blocked_reason and not blocked:
            raise CliError(
                f"[ERROR] A blocked reason only applies to blocked statuses, not '{status}'."
            )
        self._board()
        request = StatusUpdateRequest(
            query=query.lower(),
            target_status=(status or "").strip().lower(),
            blocked_reason=blocked_reason.strip() if blocked_reason else None,
            is_blocked=blocked,
        )
        result = self.updater.update_status(
            request, self.org, self.project_number, self.is_org, dry_run=dry_run
        )
        return result.to_dict()  # type: ignore[return-value]

    def add_item(self, content_id, *, dry_run=False) -> dict:
        """Add an issue or pull request (by GraphQL node id) to the board."""
        content_id = (content_id or "").strip()
        if not content_id:
            raise CliError("[ERROR] Content id cannot be empty.")
        board = self._board()
        item_id = None if dry_run else self.board_client.add_item(board.board_id, content_id)
        return {
            "ok": True,
            "dry_run": dry_run,
            "board_id": board.board_id,
            "content_id": content_id,
            "item_id": item_id,
        }

    # -------------------------------------------------------------------
    # Aliases and cache
    # -------------------------------------------------------------------

    def add_status_alias(self, alias, status) -> dict:
        alias = (alias or "").strip()
        status = (status or "").strip()
        if not alias or not status:
            raise CliError("[ERROR] Alias and status cannot be empty.")
        self.updater.add_status_alias(alias, status)
        return {"ok": True, "alias": alias.lower(), "status": status.lower()}

    def remove_status_alias(self, alias) -> dict:
        removed = self.updater.remove_status_alias(alias or "")
        return {"ok": True, "alias": (alias or "").strip().lower(), "removed": removed}

    def clear_cache(self) -> dict:
        self.updater.clear_cache()
        return {"ok": True}
