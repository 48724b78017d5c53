"""Organization-local time. The intranet's "today" is the office calendar day, not UTC."""

from __future__ import annotations

from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo

from intranet.config import get_settings


def local_now() -> datetime:
    """Current time in the organization time zone."""
    return datetime.now(ZoneInfo(get_settings().timezone))


def local_today() -> date:
    """Current calendar date in the organization time zone."""
    return local_now().date()


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes read back from the database as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
