"""Core helpers: client caching, _call dispatcher, response contract."""

from __future__ import annotations

from ghproject_cli import CliError, GhProjectClient, SetupError, UpdateError
from ghproject_cli.config import CONTRACT_SCHEMA_VERSION, MCP_RESPONSE_MODE

_client: GhProjectClient | None = None


def _get_client() -> GhProjectClient:
    """Return a cached GhProjectClient, creating one on first use.

    The cached client keeps its board cache between tool calls.
    """
    global _client
    if _client is None:
        _client = GhProjectClient()
    return _client


def _contract_error(message: str, error_type: str = "error", context: dict | None = None) -> dict:
    """Return a stable MCP error envelope with legacy compatibility fields.

    ``context`` carries the structured payload of status-update failures
    (suggestions, candidates, available statuses).
    """
    detail = {"type": error_type, "message": message}
    if context:
        detail.update(context)
    return {
        "ok": False,
        "schema_version": CONTRACT_SCHEMA_VERSION,
        "type": error_type,  # legacy
        "error": message,  # legacy
        "error_detail": detail,
    }


def _ensure_contract_dict(payload: dict) -> dict:
    """Add stable contract metadata to dict responses."""
    out = dict(payload)
    out.setdefault("schema_version", CONTRACT_SCHEMA_VERSION)
    if out.get("ok") is False:
        error_type = str(out.get("type", "error"))
        error_message = out.get("error", "Unknown error")
        if not isinstance(error_message, str):
            error_message = str(error_message)
            out["error"] = error_message
        out.setdefault("error_detail", {"type": error_type, "message": error_message})
        return out
    out.setdefault("ok", True)
    return out


def _finalize_tool_result(result):
    """Finalize tool response based on configured MCP response mode.

    Modes:
        - legacy (default): dicts gain contract metadata (ok/schema_version).
        - envelope: always return {"ok", "schema_version", "data"} for success.
    """
    if isinstance(result, dict):
        normalized = _ensure_contract_dict(result)
        if normalized.get("ok") is False:
            return normalized
        if MCP_RESPONSE_MODE == "envelope":
            data = dict(normalized)
            data.pop("ok", None)
            data.pop("schema_version", None)
            return {"ok": True, "schema_version": CONTRACT_SCHEMA_VERSION, "data": data}
        return normalized
    if MCP_RESPONSE_MODE == "envelope":
        return {"ok": True, "schema_version": CONTRACT_SCHEMA_VERSION, "data": result}
    return result


_ALLOWED_METHODS = {
    "list_statuses",
    "list_items",
    "status_summary",
    "find_items",
    "update_status",
    "set_item_status",
}


def _call(method_name: str, **kwargs):
    """Call a GhProjectClient method, converting exceptions to error dicts."""
    if method_name not in _ALLOWED_METHODS:
        return _contract_error(f"Unknown method: {method_name}", "error")
    try:
        client = _get_client()
        return getattr(client, method_name)(**kwargs)
    except SetupError as e:
        return _contract_error(str(e), "setup")
    except UpdateError as e:
        payload = e.to_dict()
        payload.pop("type", None)
        payload.pop("message", None)
        return _contract_error(str(e), e.error_type, payload)
    except CliError as e:
        return _contract_error(str(e), "error")
    except Exception as e:
        return _contract_error(f"Unexpected error: {e}", "error")
