"""Clock and notification timestamp formatting."""

from collections.abc import Callable
from datetime import UTC, datetime
from zoneinfo import ZoneInfo

from ecare.core.config import settings

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(UTC)


def _localize(moment: datetime, timezone: str | None = None) -> datetime:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(ZoneInfo(timezone or settings.NOTIFICATION_TIMEZONE))


def format_notification_date(moment: datetime, timezone: str | None = None) -> str:
    """Format a date as ``03 Feb 2026``."""
    return _localize(moment, timezone).strftime("%d %b %Y")


def format_notification_time(moment: datetime, timezone: str | None = None) -> str:
    """Format a time of day as ``04:30 PM``."""
    return _localize(moment, timezone).strftime("%I:%M %p")


def format_notification_datetime(moment: datetime, timezone: str | None = None) -> str:
    """Format a timestamp as ``03 Feb 2026 at 04:30 PM``."""
    return (
        f"{format_notification_date(moment, timezone)} "
        f"at {format_notification_time(moment, timezone)}"
    )
