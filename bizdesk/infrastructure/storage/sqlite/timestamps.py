"""Timestamp encoding for SQLite TEXT columns."""

from datetime import datetime

from bizdesk.core.clock import as_utc


def to_db(value: datetime | None) -> str | None:
    """Encode as fixed-width ISO-8601 UTC so text comparison orders correctly."""
    if value is None:
        return None
    return as_utc(value).isoformat(timespec="microseconds")


def from_db(value: str | None) -> datetime | None:
    """Decode a stored timestamp; naive legacy values are read as UTC."""
    if not value:
        return None
    return as_utc(datetime.fromisoformat(value))
