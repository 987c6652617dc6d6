from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Optional

from setae.client.models import ProtocolEndpoint, ProtocolMessage, dump_models


def pad_end(value: str, width: int) -> str:
    return value.ljust(width)


def _parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def relative_time(value: str, *, now: Optional[datetime] = None) -> str:
    try:
        then = _parse_timestamp(value)
    except ValueError:
        return value
    current = now or datetime.now(timezone.utc)
    seconds = int((current - then).total_seconds())
    if seconds < 60:
        return f"{seconds}s ago"
    minutes = seconds // 60
    if minutes < 60:
        return f"{minutes}m ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours}h ago"
    return f"{hours // 24}d ago"


def format_clock_time(value: str) -> str:
    """Local wall-clock time like ``3:07 PM``."""
    try:
        local = _parse_timestamp(value).astimezone()
    except ValueError:
        return value
    hour = local.hour % 12 or 12
    suffix = "AM" if local.hour < 12 else "PM"
    return f"{hour}:{local.minute:02d} {suffix}"


def format_threads(endpoints: list[ProtocolEndpoint], as_json: bool = False) -> str:
    if as_json:
        return json.dumps(dump_models(endpoints), indent=2, ensure_ascii=False)
    if not endpoints:
        return "No threads found."

    rows = [f"{pad_end('CATEGORY', 16)}{pad_end('NAME', 26)}{pad_end('DISPLAY NAME', 30)}LAST ACTIVITY"]
    for endpoint in endpoints:
        activity = relative_time(endpoint.last_activity) if endpoint.last_activity else "-"
        rows.append(
            f"{pad_end(endpoint.category, 16)}{pad_end(endpoint.name, 26)}"
            f"{pad_end(endpoint.display_name or '-', 30)}{activity}"
        )
    return "\n".join(rows)


def format_messages(messages: list[ProtocolMessage], as_json: bool = False) -> str:
    if as_json:
        return json.dumps(dump_models(messages), indent=2, ensure_ascii=False)
    if not messages:
        return "No messages."
    return "\n".join(
        f"[{format_clock_time(message.timestamp)}] {message.author}: {message.text}"
        for message in messages
    )
