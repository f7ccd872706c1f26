"""ghproject-cli — free-text status updates for GitHub Projects boards."""

from ghproject_cli.client import GhProjectClient
from ghproject_cli.config import VERSION
from ghproject_cli.exceptions import (
    UPDATE_ERRORS,
    AmbiguousMatchError,
    CliError,
    ClientError,
    InvalidStatusError,
    ItemNotFoundError,
    ParseError,
    SetupError,
    UpdateError,
)
from ghproject_cli.types import (
    FindResult,
    ItemListResult,
    ItemRow,
    MatchRow,
    StatusList,
    StatusSummary,
    UpdateResult,
)

__all__ = [
    "VERSION",
    "GhProjectClient",
    "CliError",
    "SetupError",
    "UpdateError",
    "UPDATE_ERRORS",
    "ParseError",
    "ItemNotFoundError",
    "AmbiguousMatchError",
    "InvalidStatusError",
    "ClientError",
    "FindResult",
    "ItemListResult",
    "ItemRow",
    "MatchRow",
    "StatusList",
    "StatusSummary",
    "UpdateResult",
]
