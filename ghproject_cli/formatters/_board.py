"""Table formatters for board, item and status-update payloads."""

from ghproject_cli.formatters._table import _sanitize_str, _table, _trunc


def format_update_summary(result):
    """One-line description of a status change, e.g.
    ``#12 API documentation: Todo -> done (match 0.65)``."""
    previous = result.get("previous_status") or "-"
    line = (
        f"#{result['number']} {_sanitize_str(result['title'])}: "
        f"{previous} -> {result['new_status']} (match {result['match_score']:.2f})"
    )
    if result.get("message"):
        line += f" [{_sanitize_str(result['message'])}]"
    return line


def format_items_table(data):
    rows = [
        (
            f"#{i['number']}" if i.get("number") is not None else "-",
            _trunc(i.get("status") or "-", 14),
            _trunc(i.get("type") or "-", 11),
            _trunc(i.get("title") or "(draft)", 70),
        )
        for i in data.get("items", [])
    ]
    board = data.get("board") or {}
    footer = f"Board: {board.get('title', '')} — {len(rows)} of {data.get('total', len(rows))} items"
    return _table([("Number", 7), ("Status", 14), ("Type", 11), ("Title", 0)], rows, footer)


def format_matches_table(data):
    matches = data.get("matches", [])
    if not matches:
        lines = [f'No items match "{data.get("query", "")}".']
        for s in data.get("suggestions", []):
            lines.append(f"  Did you mean: {_sanitize_str(s)}")
        return "\n".join(lines)
    rows = [
        (f"#{m['number']}", f"{m['score']:.2f}", _trunc(m.get("status") or "-", 14), m["title"])
        for m in matches
    ]
    return _table([("Number", 7), ("Score", 6), ("Status", 14), ("Title", 0)], rows)


def format_statuses_table(data):
    board = data.get("board") or {}
    lines = [f"{board.get('title', '')} (#{board.get('number', '')})", ""]
    lines.append(f"{data.get('status_field', 'Status')} options:")
    for name in data.get("statuses", []):
        lines.append(f"  - {_sanitize_str(name)}")
    aliases = data.get("aliases") or {}
    if aliases:
        lines.append("")
        lines.append("Aliases:")
        for alias, target in sorted(aliases.items()):
            lines.append(f"  {alias:<14} -> {target}")
    return "\n".join(lines)


def format_summary_table(data):
    board = data.get("board") or {}
    lines = [f"{board.get('title', '')}: {data.get('total', 0)} items", ""]
    for group in data.get("statuses", []):
        lines.append(f"{group['status']} ({group['count']}):")
        if not group["items"]:
            lines.append("  - none")
        for item in group["items"]:
            lines.append(f"  - #{item['number']} {_trunc(_sanitize_str(item['title']) or '', 70)}")
        extra = group["count"] - len(group["items"])
        if extra > 0:
            lines.append(f"  ... and {extra} more")
        lines.append("")
    return "\n".join(lines).rstrip()


def format_whoami_table(data):
    owner = "org" if data.get("is_org") else "user"
    scopes = ", ".join(data.get("scopes") or []) or "(not reported)"
    return "\n".join(
        [
            f"Login:   {data.get('login', '')}",
            f"Scopes:  {scopes}",
            f"Board:   {data.get('org') or '-'} ({owner}) #{data.get('project_number') or '-'}",
        ]
    )
