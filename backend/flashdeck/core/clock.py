"""Time helpers shared by models and services."""

from __future__ import annotations

from datetime import date, datetime, time, timezone


def current_timestamp() -> datetime:
    """Return the current moment as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def timestamp_from_date(value: datetime | date | str) -> datetime:
    """Convert a date, datetime or ISO-8601 string into an aware UTC datetime.

    Naive values are assumed to already be in UTC. Plain dates resolve to
    midnight of that day.
    """
    if isinstance(value, str):
        candidate = value.strip()
        if candidate.endswith("Z"):
            candidate = f"{candidate[:-1]}+00:00"
        value = datetime.fromisoformat(candidate)
    if not isinstance(value, datetime):
        value = datetime.combine(value, time.min)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def ensure_aware(value: datetime) -> datetime:
    """Attach UTC to naive datetimes read back from SQLite."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


__all__ = ["current_timestamp", "ensure_aware", "timestamp_from_date"]
