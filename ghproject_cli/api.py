"""
HTTP request layer, retry policy, and token validation for ghproject-cli.

``_http_request`` performs exactly one attempt. ``with_retry`` wraps any
callable that raises ClientError and retries the ones classified as
transient, so the GraphQL transport and token validation share one policy.
"""

import email.utils
import hashlib
import http.client
import json
import sys
import time
import urllib.error
import urllib.request
import uuid

from ghproject_cli import config
from ghproject_cli.exceptions import ClientError, HTTPError, SetupError

_RETRYABLE_HTTP_CODES = frozenset({429, 500, 502, 503, 504})


# ---------------------------------------------------------------------------
# Security helpers
# ---------------------------------------------------------------------------


def _mask_token(token):
    """Show only first 6 chars of a token for safe logging."""
    return token[:6] + "..." if len(token) > 6 else token


def _sanitize_error(body, max_len=500):
    """Truncate and clean error body for safe display."""
    if not body:
        return ""
    cleaned = " ".join(str(body).replace("<", " <").split())
    cleaned = "".join(_strip_tags(cleaned)).strip()
    cleaned = " ".join(cleaned.split())
    if len(cleaned) > max_len:
        return cleaned[:max_len] + "... [truncated]"
    return cleaned


def _strip_tags(text):
    inside = False
    for ch in text:
        if ch == "<":
            inside = True
        elif ch == ">" and inside:
            inside = False
        elif not inside:
            yield ch


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


def _log_http_event(**fields):
    """Emit structured HTTP logs to stderr when enabled."""
    if not config.HTTP_LOG_ENABLED:
        return
    print("[HTTP] " + json.dumps(fields, ensure_ascii=False, sort_keys=True), file=sys.stderr)


def _is_sampled_request(request_id):
    """Decide if a request should be logged based on sample rate."""
    rate = config.HTTP_LOG_SAMPLE_RATE
    if rate <= 0:
        return False
    if rate >= 1:
        return True
    if not request_id:
        return False
    digest = hashlib.sha256(request_id.encode("utf-8")).digest()
    bucket = int.from_bytes(digest[:4], "big") / 4294967295.0
    return bucket < rate


# ---------------------------------------------------------------------------
# Error classification
# ---------------------------------------------------------------------------


def _error_envelope(message, status=None, request_id=None, retryable=None, detail=None):
    """Build a consistent CLI-safe HTTP error message."""
    meta = []
    if status is not None:
        meta.append(f"status={status}")
    if request_id:
        meta.append(f"request_id={request_id}")
    if retryable is not None:
        meta.append(f"retryable={'yes' if retryable else 'no'}")
    suffix = f" ({', '.join(meta)})" if meta else ""
    body = f"[ERROR] {message}{suffix}"
    if detail:
        body += f"\n{detail}"
    return body


def _header(headers, name):
    """Case-insensitive header lookup that works for dicts and HTTPMessage."""
    if not headers:
        return None
    value = headers.get(name)
    if value is not None:
        return value
    lowered = name.lower()
    for key, val in headers.items():
        if key.lower() == lowered:
            return val
    return None


def _parse_retry_after(headers, now=None):
    """Return Retry-After seconds from response headers, or None.

    Accepts both forms GitHub may send: delta-seconds and an HTTP-date,
    which is converted to seconds from ``now`` (epoch, default time.time()).
    """
    value = _header(headers, "Retry-After")
    if value is None:
        return None
    text = str(value).strip()
    try:
        return max(0, int(text))
    except ValueError:
        pass
    try:
        when = email.utils.parsedate_to_datetime(text)
    except (TypeError, ValueError):
        return None
    if when.tzinfo is None:
        return None
    current = time.time() if now is None else now
    return max(0, int(when.timestamp() - current))


def _is_rate_limited(code, headers):
    """GitHub signals primary limits with 429 and secondary limits with 403."""
    if code == 429:
        return True
    if code == 403:
        if str(_header(headers, "X-RateLimit-Remaining") or "").strip() == "0":
            return True
        if _header(headers, "Retry-After") is not None:
            return True
    return False


def classify_http_error(err):
    """Convert a raw HTTPError into a ClientError tagged retryable or fatal."""
    request_id = _header(err.headers, "X-GitHub-Request-Id")
    if err.code == 401:
        return ClientError(
            _error_envelope(
                "Authentication failed. Check your GitHub token.",
                status=401,
                request_id=request_id,
                retryable=False,
            ),
            status_code=401,
        )
    if _is_rate_limited(err.code, err.headers):
        return ClientError(
            _error_envelope(
                "Rate limited by GitHub. Wait a moment and try again.",
                status=err.code,
                request_id=request_id,
                retryable=True,
            ),
            status_code=err.code,
            retryable=True,
            retry_after=_parse_retry_after(err.headers),
        )
    if err.code == 403:
        return ClientError(
            _error_envelope(
                "Access denied. Ensure your token has the 'repo' and 'project' scopes.",
                status=403,
                request_id=request_id,
                retryable=False,
                detail=_sanitize_error(err.body),
            ),
            status_code=403,
        )
    retryable = err.code in _RETRYABLE_HTTP_CODES or err.code >= 500
    return ClientError(
        _error_envelope(
            f"HTTP {err.code}: {err.reason}",
            status=err.code,
            request_id=request_id,
            retryable=retryable,
            detail=_sanitize_error(err.body),
        ),
        status_code=err.code,
        retryable=retryable,
    )


# ---------------------------------------------------------------------------
# HTTP request layer
# ---------------------------------------------------------------------------


def _http_request(url, data=None, headers=None, method="POST"):
    """Make a single HTTP request.

    Returns (parsed_json, response_headers).
    Raises HTTPError for HTTP status errors (see classify_http_error) and a
    retryable ClientError for network failures, including responses cut
    off mid-read.
    """
    body = json.dumps(data).encode("utf-8") if data is not None else None
    request_id = (headers or {}).get("X-Request-Id")
    sampled = _is_sampled_request(request_id)
    timeout = max(1, config.HTTP_TIMEOUT_SECONDS)
    start = time.perf_counter()
    req = urllib.request.Request(url, data=body, headers=headers or {}, method=method)
    if sampled:
        _log_http_event(
            phase="request",
            method=method,
            url=url,
            request_id=request_id,
            timeout_seconds=timeout,
        )
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            content_type = resp.headers.get("Content-Type", "")
            raw = resp.read(config.HTTP_MAX_RESPONSE_BYTES + 1)
            if len(raw) > config.HTTP_MAX_RESPONSE_BYTES:
                raise ClientError(
                    "[ERROR] Response too large from GitHub API "
                    f"(>{config.HTTP_MAX_RESPONSE_BYTES} bytes)."
                )
            if sampled:
                _log_http_event(
                    phase="response",
                    method=method,
                    url=url,
                    status=getattr(resp, "status", 200),
                    content_type=content_type,
                    bytes=len(raw),
                    latency_ms=round((time.perf_counter() - start) * 1000, 2),
                    request_id=request_id,
                )
            try:
                return json.loads(raw.decode("utf-8")), resp.headers
            except (json.JSONDecodeError, UnicodeDecodeError):
                if content_type and "json" not in content_type.lower():
                    raise ClientError(
                        f"[ERROR] Unexpected Content-Type from server "
                        f"({content_type}). This may be a proxy or "
                        "network issue."
                    ) from None
                raise ClientError(
                    "[ERROR] Unexpected response from GitHub API (not valid JSON)."
                ) from None
    except urllib.error.HTTPError as e:
        error_body = (
            e.read(config.HTTP_MAX_RESPONSE_BYTES).decode("utf-8", errors="replace")
            if e.fp
            else ""
        )
        if sampled:
            _log_http_event(
                phase="response",
                method=method,
                url=url,
                status=e.code,
                latency_ms=round((time.perf_counter() - start) * 1000, 2),
                request_id=request_id,
            )
        raise HTTPError(e.code, e.reason, error_body, headers=e.headers) from e
    except TimeoutError as e:
        if sampled:
            _log_http_event(
                phase="network_error",
                method=method,
                url=url,
                error="timeout",
                request_id=request_id,
            )
        raise ClientError(
            _error_envelope(
                f"Request timed out after {timeout} seconds. Is GitHub reachable?",
                request_id=request_id,
                retryable=True,
            ),
            retryable=True,
        ) from e
    except (urllib.error.URLError, ConnectionError) as e:
        reason = getattr(e, "reason", e)
        if sampled:
            _log_http_event(
                phase="network_error",
                method=method,
                url=url,
                error=f"url_error: {reason}",
                request_id=request_id,
            )
        raise ClientError(
            _error_envelope(
                f"Connection failed: {reason}",
                request_id=request_id,
                retryable=True,
            ),
            retryable=True,
        ) from e
    except (http.client.HTTPException, OSError) as e:
        if sampled:
            _log_http_event(
                phase="network_error",
                method=method,
                url=url,
                error=f"{type(e).__name__}: {e}",
                request_id=request_id,
            )
        raise ClientError(
            _error_envelope(
                f"Connection interrupted: {type(e).__name__}",
                request_id=request_id,
                retryable=True,
            ),
            retryable=True,
        ) from e


def send_request(url, data=None, headers=None, method="POST"):
    """One attempt; every failure comes out as a classified ClientError."""
    try:
        return _http_request(url, data, headers, method)
    except HTTPError as e:
        raise classify_http_error(e) from e


def with_retry(
    fn,
    *,
    max_retries=None,
    base_seconds=None,
    max_seconds=None,
    sleeper=None,
    operation="request",
):
    """Call ``fn()``; retry retryable ClientErrors with exponential backoff.

    The delay is the server's Retry-After when given, otherwise
    ``base_seconds * 2**attempt``, capped at ``max_seconds``. When the
    attempts run out the last ClientError is re-raised unchanged.
    """
    retries = config.HTTP_MAX_RETRIES if max_retries is None else max_retries
    base = config.HTTP_RETRY_BASE_SECONDS if base_seconds is None else base_seconds
    cap = config.HTTP_RETRY_MAX_SECONDS if max_seconds is None else max_seconds
    sleep = sleeper or time.sleep
    max_attempts = 1 + max(0, retries)

    for attempt in range(max_attempts):
        try:
            return fn()
        except ClientError as e:
            if not e.retryable or attempt >= max_attempts - 1:
                raise
            delay = e.retry_after if e.retry_after is not None else base * (2**attempt)
            delay = min(max(0.0, float(delay)), cap)
            _log_http_event(
                phase="retry",
                operation=operation,
                attempt=attempt + 1,
                max_attempts=max_attempts,
                status=e.status_code,
                delay_seconds=delay,
            )
            sleep(delay)
    raise ClientError(_error_envelope("Request failed."))


# ---------------------------------------------------------------------------
# GitHub endpoints
# ---------------------------------------------------------------------------


def _github_headers(token):
    return {
        "Authorization": f"Bearer {token}",
        "Accept": "application/vnd.github+json",
        "Content-Type": "application/json",
        "User-Agent": f"ghproject-cli/{config.VERSION}",
        "X-Request-Id": str(uuid.uuid4()),
    }


def graphql_request(query, variables, *, token, url=None):
    """Run one GraphQL document and return its ``data`` object.

    ``RATE_LIMITED`` errors are retryable. ``NOT_FOUND`` errors are tolerated
    when data is present so callers can inspect the null branch themselves.
    """
    payload, _headers = send_request(
        url or config.GRAPHQL_URL,
        {"query": query, "variables": variables},
        _github_headers(token),
    )
    if not isinstance(payload, dict):
        raise ClientError(
            "[ERROR] Unexpected GraphQL response shape: "
            f"expected JSON object, got {type(payload).__name__}."
        )
    errors = payload.get("errors") or []
    data = payload.get("data")
    if errors:
        types = {str(err.get("type", "")).upper() for err in errors if isinstance(err, dict)}
        if "RATE_LIMITED" in types:
            raise ClientError(
                _error_envelope("Rate limited by GitHub GraphQL API.", retryable=True),
                retryable=True,
            )
        if isinstance(data, dict) and types and types <= {"NOT_FOUND"}:
            return data
        first = errors[0]
        message = first.get("message") if isinstance(first, dict) else str(first)
        raise ClientError(f"[ERROR] GraphQL error: {message}")
    if not isinstance(data, dict):
        raise ClientError("[ERROR] GraphQL response is missing 'data'.")
    return data


def rest_request(path, *, token, method="GET"):
    """Call the GitHub REST API. Returns (parsed_json, response_headers)."""
    return send_request(config.REST_URL + path, None, _github_headers(token), method)


# ---------------------------------------------------------------------------
# Token validation
# ---------------------------------------------------------------------------


def validate_token(token):
    """Check the token against GET /user and verify its OAuth scopes.

    Fine-grained tokens send no X-OAuth-Scopes header; the scope check is
    skipped for them.

    Returns:
        dict with keys: login, scopes.
    """
    if not token:
        raise SetupError(
            "[SETUP_NEEDED] GITHUB_TOKEN is not set.\n"
            "  Add GITHUB_TOKEN=<token> to .env or export it."
        )
    try:
        user, headers = with_retry(
            lambda: rest_request("/user", token=token), operation="validate_token"
        )
    except ClientError as e:
        if e.status_code == 401:
            raise SetupError(
                "[TOKEN_EXPIRED] The GitHub token is invalid or expired.\n"
                "  Create a new token with the 'repo' and 'project' scopes."
            ) from e
        raise

    raw_scopes = _header(headers, "X-OAuth-Scopes")
    scopes = [s.strip() for s in (raw_scopes or "").split(",") if s.strip()]
    if raw_scopes is not None:
        missing = [s for s in config.REQUIRED_SCOPES if not any(s in scope for scope in scopes)]
        if missing:
            raise SetupError(
                f"[ERROR] Token missing required scopes: {', '.join(missing)}. "
                f"Current scopes: {', '.join(scopes) or 'none'}"
            )
    login = user.get("login", "") if isinstance(user, dict) else ""
    return {"login": login, "scopes": scopes}
