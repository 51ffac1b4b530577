from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Optional

Clock = Callable[[], datetime]


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_iso_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO timestamp into naive local time (aware values are converted)."""
    if not value:
        return None
    text = value.strip().replace(" ", "T")
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def format_iso_date(value: date) -> str:
    return value.strftime("%Y-%m-%d")


def format_clock_time(value: datetime) -> str:
    """24-hour wall-clock time, e.g. 09:15."""
    return value.strftime("%H:%M")


def now_local() -> datetime:
    """Current local time.

    Note: Passed around as a Clock so tests can supply a fixed instant.
    """
    return datetime.now()


def fixed_clock(instant: datetime) -> Clock:
    return lambda: instant
