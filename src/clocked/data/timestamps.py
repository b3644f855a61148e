"""ISO-8601 timestamp parsing and normalization."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

_MILLISECOND = timedelta(milliseconds=1)


def parse_timestamp(value: object) -> datetime | None:
    """Parse an ISO-8601 string into an aware UTC datetime.

    Naive values are assumed to be UTC. Returns None for anything that is not a
    non-empty, parseable string.
    """
    if not isinstance(value, str):
        return None
    token = value.strip()
    if not token:
        return None
    try:
        parsed = datetime.fromisoformat(token.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def format_timestamp(value: datetime) -> str:
    """Format a datetime as a sortable UTC string, e.g. '2026-01-05T10:00:00.000Z'."""
    dt = value if value.tzinfo else value.replace(tzinfo=UTC)
    return dt.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def normalize_timestamp(value: object) -> str:
    """Normalize a timestamp string; returns '' when it cannot be parsed."""
    parsed = parse_timestamp(value)
    return format_timestamp(parsed) if parsed else ""


def from_epoch(seconds: float) -> datetime:
    return datetime.fromtimestamp(seconds, tz=UTC)


def duration_ms(start: datetime, end: datetime) -> int:
    """Milliseconds from start to end (negative when end precedes start)."""
    return (end - start) // _MILLISECOND
