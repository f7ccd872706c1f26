"""
Map free-text status names onto the options a board defines.
"""

from ghproject_cli.aliases import DEFAULT_STATUS_ALIASES


class StatusResolver:
    """Resolve target-status text against a board's status options.

    Lookup order: direct (case-normalized) name, alias table, then the first
    option in board order whose name contains the text or is contained in it.
    """

    def __init__(self, aliases=None):
        self.aliases = dict(DEFAULT_STATUS_ALIASES if aliases is None else aliases)

    def resolve(self, text, status_options):
        """Return ``(status_name, option_id)`` or None.

        ``status_options`` maps lowercased status name to option id.
        """
        normalized = (text or "").strip().lower()
        if not normalized:
            return None

        if normalized in status_options:
            return normalized, status_options[normalized]

        aliased = self.aliases.get(normalized)
        if aliased is not None and aliased in status_options:
            return aliased, status_options[aliased]

        for name, option_id in status_options.items():
            if normalized in name or name in normalized:
                return name, option_id
        return None

    def add_alias(self, alias, target):
        self.aliases[alias.strip().lower()] = target.strip().lower()

    def remove_alias(self, alias):
        """Drop an alias. Returns True if it existed."""
        return self.aliases.pop(alias.strip().lower(), None) is not None


def get_current_status(item, field_name="Status"):
    """Current single-select status display name of ``item``, or None."""
    return item.status(field_name)
