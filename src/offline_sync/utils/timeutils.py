"""Timestamp helpers.

All timestamps are naive datetimes in UTC so values read back from SQLite
and from the wire compare without tz errors.
"""

from __future__ import annotations

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Current UTC time as a naive datetime."""
    return datetime.now(UTC).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """Normalize an aware datetime to naive UTC; naive values pass through."""
    if value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


def parse_timestamp(raw: str | datetime | None) -> datetime | None:
    """Parse an ISO-8601 string (or datetime) into a naive UTC datetime."""
    if raw is None or raw == "":
        return None
    if isinstance(raw, datetime):
        return to_naive_utc(raw)
    text = raw.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return to_naive_utc(datetime.fromisoformat(text))
