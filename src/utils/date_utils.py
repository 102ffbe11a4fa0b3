"""Date, timestamp and clock utilities."""
import time
from datetime import datetime, timezone
from typing import Optional, Protocol
from zoneinfo import ZoneInfo

DATE_FORMAT = "%d %b %Y"
DATETIME_FORMAT = "%d %b %Y %H:%M"


class Clock(Protocol):
    """Source of the current time as a Unix timestamp."""

    def now(self) -> int:
        ...


class SystemClock:
    """Clock backed by the system time."""

    def now(self) -> int:
        return int(time.time())


class FixedClock:
    """Clock frozen at a given timestamp (used by tests and previews)."""

    def __init__(self, timestamp: int):
        self.timestamp = int(timestamp)

    def now(self) -> int:
        return self.timestamp

    def advance(self, seconds: int) -> None:
        self.timestamp += int(seconds)


def _zone(tz_name: Optional[str]):
    if not tz_name or tz_name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(tz_name)


def to_timestamp(date_str: str, tz_name: str = "UTC") -> int:
    """
    Convert a date or datetime string to a Unix timestamp.

    Args:
        date_str: "YYYY-MM-DD" or "YYYY-MM-DD HH:MM"
        tz_name: IANA timezone the string is expressed in

    Returns:
        int: seconds since the epoch

    Raises:
        ValueError: If the string matches neither format
    """
    for fmt in ("%Y-%m-%d %H:%M", "%Y-%m-%d"):
        try:
            parsed = datetime.strptime(date_str.strip(), fmt)
        except (ValueError, AttributeError):
            continue
        return int(parsed.replace(tzinfo=_zone(tz_name)).timestamp())
    raise ValueError(f"Invalid date format: {date_str}")


def format_date(timestamp: int, tz_name: str = "UTC") -> str:
    """Render a timestamp as a day, e.g. "01 May 2024"."""
    return datetime.fromtimestamp(int(timestamp), tz=_zone(tz_name)).strftime(DATE_FORMAT)


def format_datetime(timestamp: int, tz_name: str = "UTC") -> str:
    """Render a timestamp with minutes, e.g. "01 May 2024 09:30"."""
    return datetime.fromtimestamp(int(timestamp), tz=_zone(tz_name)).strftime(DATETIME_FORMAT)


def parse_timestamp(value) -> Optional[int]:
    """
    Coerce a widget or query value into a timestamp.

    Returns None for empty values and for anything that is not an integer.
    """
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
