from datetime import datetime, timezone
from typing import Any, Optional


def as_utc(value: Any) -> Optional[datetime]:
    """Firestore timestamps come back aware; request bodies may be naive (treated as UTC)."""
    if value is None:
        return None
    if hasattr(value, "to_datetime") and not isinstance(value, datetime):
        value = value.to_datetime()
    if not isinstance(value, datetime):
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def timestamp_key(value: Any) -> float:
    """Sort key for optional timestamps (missing ones sort as oldest)."""
    dt = as_utc(value)
    return dt.timestamp() if dt else 0.0
