# =============================================================================
# daycare_core/utils/dates.py
# Date and time-of-day helpers
# =============================================================================

from datetime import date, datetime, timedelta
from typing import Optional


DATE_FORMAT = "%Y-%m-%d"


def today_str(now: Optional[datetime] = None) -> str:
    """Local date as YYYY-MM-DD."""
    return (now or datetime.now()).strftime(DATE_FORMAT)


def current_time_str(now: Optional[datetime] = None) -> str:
    """Local time of day as 24-hour HH:MM."""
    return (now or datetime.now()).strftime("%H:%M")


def format_12h(time_str: Optional[str]) -> str:
    """
    Render an HH:MM string as "h:MM AM/PM".

    Returns "--:--" for blank or unparseable input.
    """
    if not time_str or ":" not in time_str:
        return "--:--"
    hours, _, minutes = time_str.partition(":")
    try:
        h = int(hours)
    except ValueError:
        return "--:--"
    minutes = minutes or "00"
    suffix = "PM" if h >= 12 else "AM"
    h = h % 12 or 12
    return f"{h}:{minutes} {suffix}"


def parse_date(value: str) -> date:
    return datetime.strptime(value, DATE_FORMAT).date()


def minutes_between(start: str, end: str) -> Optional[int]:
    """Minutes from start to end (HH:MM); None if invalid or not positive."""
    try:
        s = datetime.strptime(start, "%H:%M")
        e = datetime.strptime(end, "%H:%M")
    except (TypeError, ValueError):
        return None
    delta = int((e - s).total_seconds() // 60)
    return delta if delta > 0 else None


def date_range(end: str, days: int) -> list:
    """The ``days`` dates ending at ``end`` (inclusive), oldest first."""
    last = parse_date(end)
    return [
        (last - timedelta(days=offset)).strftime(DATE_FORMAT)
        for offset in range(days - 1, -1, -1)
    ]
