"""
ghproject-cli exception hierarchy.

All custom exceptions live here to avoid circular imports.

Status-update failures form a closed set under UpdateError. Each kind carries
an ``error_type`` tag and a ``to_dict()`` payload with enough context for a
caller to render an actionable message without re-querying the board.
"""


class CliError(Exception):
    """Exit code 1 — validation, not-found, network, parse errors."""

    exit_code = 1


class SetupError(CliError):
    """Exit code 2 — token expired, no config."""

    exit_code = 2


class HTTPError(Exception):
    """Raised by _http_request for HTTP errors that callers want to handle."""

    def __init__(self, code, reason, body, headers=None):
        self.code = code
        self.reason = reason
        self.body = body
        self.headers = headers or {}


class UpdateError(CliError):
    """Base of the closed set of status-update failures."""

    error_type = "update_error"

    def context(self):
        return {}

    def to_dict(self):
        return {"type": self.error_type, "message": str(self), **self.context()}


class ParseError(UpdateError):
    """The command did not match any accepted grammar. The user must rephrase."""

    error_type = "parse_error"

    def __init__(self, text):
        self.text = text
        super().__init__(
            f'[ERROR] Could not parse update request: "{text}". '
            'Expected format: "move [task] to [status]" or "set [task] as [status]"'
        )

    def context(self):
        return {"text": self.text}


class ItemNotFoundError(UpdateError):
    """No board item cleared the minimum match score."""

    error_type = "item_not_found"

    def __init__(self, query, suggestions=None):
        self.query = query
        self.suggestions = list(suggestions or [])
        message = f'[ERROR] No item found matching "{query}"'
        if self.suggestions:
            message += f". Did you mean: {', '.join(self.suggestions)}?"
        super().__init__(message)

    def context(self):
        return {"query": self.query, "suggestions": self.suggestions}


class AmbiguousMatchError(UpdateError):
    """Several items matched too closely to pick one.

    ``candidates`` is a list of ``{"title", "number", "score"}`` dicts.
    """

    error_type = "ambiguous_match"

    def __init__(self, query, candidates):
        self.query = query
        self.candidates = list(candidates)
        listing = ", ".join(f"#{c['number']}: {c['title']}" for c in self.candidates)
        super().__init__(
            f'[ERROR] Multiple items match "{query}": {listing}. Please be more specific.'
        )

    def context(self):
        return {"query": self.query, "candidates": self.candidates}


class InvalidStatusError(UpdateError):
    """The target status text does not resolve to a status the board defines."""

    error_type = "invalid_status"

    def __init__(self, status, available_statuses):
        self.status = status
        self.available_statuses = list(available_statuses)
        super().__init__(
            f'[ERROR] Status "{status}" is not valid. '
            f"Available statuses: {', '.join(self.available_statuses)}"
        )

    def context(self):
        return {"status": self.status, "available_statuses": self.available_statuses}


class ClientError(UpdateError):
    """Transport failure talking to GitHub.

    ``retryable`` records whether the failure was classified as transient;
    ``status_code`` is the HTTP status observed, if any.
    """

    error_type = "client_error"

    def __init__(self, message, status_code=None, retryable=False, retry_after=None):
        self.status_code = status_code
        self.retryable = retryable
        self.retry_after = retry_after
        super().__init__(message)

    def context(self):
        return {"status_code": self.status_code, "retryable": self.retryable}


UPDATE_ERRORS = (
    ParseError,
    ItemNotFoundError,
    AmbiguousMatchError,
    InvalidStatusError,
    ClientError,
)
