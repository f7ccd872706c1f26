"""
Status update orchestrator.

Pipeline: parse -> resolve board -> fetch items -> resolve item (with the
ambiguity check) -> resolve status -> mutate. Each stage either hands its
result to the next or raises one of the UpdateError kinds.
"""

from ghproject_cli.exceptions import AmbiguousMatchError, InvalidStatusError, ItemNotFoundError
from ghproject_cli.matcher import find_best_match, find_matches, get_suggestions
from ghproject_cli.models import StatusUpdateResult, UpdaterSettings
from ghproject_cli.parser import parse_command
from ghproject_cli.status import StatusResolver, get_current_status


def check_ambiguity(query, matches, settings):
    """Raise AmbiguousMatchError when the top two scores are too close.

    A top score at or above ``settings.certainty_score`` is never ambiguous.
    The error lists every candidate within the threshold of the top score.
    """
    if len(matches) < 2:
        return
    top = matches[0].score
    if top >= settings.certainty_score:
        return
    if top - matches[1].score >= settings.ambiguity_threshold:
        return
    close = [m for m in matches if top - m.score < settings.ambiguity_threshold]
    raise AmbiguousMatchError(query, [m.to_dict() for m in close[: settings.max_ambiguous]])


class StatusUpdater:
    """Apply free-text status updates to one board through a BoardClient."""

    def __init__(self, board_client, settings=None):
        self.board_client = board_client
        self.settings = settings or UpdaterSettings()
        self.resolver = StatusResolver(self.settings.status_aliases)

    # -- stages -------------------------------------------------------------

    def parse_request(self, text):
        return parse_command(text)

    def resolve_status(self, text, status_options):
        return self.resolver.resolve(text, status_options)

    def get_current_status(self, item):
        return get_current_status(item, self.settings.status_field_name)

    def find_best_match(self, items, query):
        return find_best_match(items, query, self.settings.min_score)

    def resolve_item(self, items, query):
        """Single best match for ``query`` or the matching UpdateError."""
        s = self.settings
        matches = find_matches(items, query, s.min_score)
        if not matches:
            raise ItemNotFoundError(
                query,
                get_suggestions(items, query, s.max_suggestions, s.suggestion_floor),
            )
        check_ambiguity(query, matches, s)
        return matches[0]

    # -- pipeline -----------------------------------------------------------

    def update_status(self, request, org, project_number, is_org=True, dry_run=False):
        """Run the pipeline for a parsed request.

        With ``dry_run`` every stage runs except the mutation and the result
        is flagged ``dry_run=True``.
        """
        board = self.board_client.get_board(org, project_number, is_org)
        items = self.board_client.get_items(board.board_id)

        match = self.resolve_item(items, request.query)

        resolved = self.resolve_status(request.target_status, board.status_options)
        if resolved is None:
            raise InvalidStatusError(request.target_status, board.status_names)
        status_name, option_id = resolved

        previous = self.get_current_status(match.item)

        if not dry_run:
            self.board_client.update_item_status(
                board.board_id, match.item.id, board.status_field_id, option_id
            )

        message = None
        if request.is_blocked and request.blocked_reason:
            message = f"Blocked: {request.blocked_reason}"

        return StatusUpdateResult(
            success=True,
            item_id=match.item.id,
            title=match.title,
            number=match.number,
            new_status=status_name,
            previous_status=previous,
            match_score=match.score,
            message=message,
            dry_run=dry_run,
        )

    def process_update(self, text, org, project_number, is_org=True, dry_run=False):
        """Parse ``text`` and run the update in one call."""
        request = self.parse_request(text)
        return self.update_status(request, org, project_number, is_org, dry_run=dry_run)

    # -- aliases and cache --------------------------------------------------

    def add_status_alias(self, alias, target_status):
        self.resolver.add_alias(alias, target_status)

    def remove_status_alias(self, alias):
        return self.resolver.remove_alias(alias)

    def clear_cache(self):
        self.board_client.clear_cache()
