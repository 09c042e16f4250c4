"""UTC datetime utilities."""

from datetime import datetime


def to_iso(dt: datetime | None) -> str | None:
    """ISO8601 string for an optional timestamp."""
    return dt.isoformat() if dt is not None else None
