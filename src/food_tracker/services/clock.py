"""Calendar-day helpers."""

from datetime import date, datetime
from zoneinfo import ZoneInfo


def today(timezone_name: str | None = None) -> date:
    """Return the current calendar day in the given or system local timezone."""
    if timezone_name is None:
        return datetime.now().astimezone().date()
    return datetime.now(tz=ZoneInfo(timezone_name)).date()
