from datetime import date, datetime, time, timezone as dt_timezone
from typing import Optional, Protocol
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


class Clock(Protocol):
    def now(self) -> datetime:
        ...


class SystemClock:
    """Wall clock, always UTC-aware."""

    def now(self) -> datetime:
        return datetime.now(dt_timezone.utc)


class FixedClock:
    """Clock pinned to one instant; used by `--now` and in tests."""

    def __init__(self, instant: datetime):
        self._instant = to_utc_aware(instant)

    def now(self) -> datetime:
        return self._instant


def to_utc_aware(dt: datetime | None) -> datetime | None:
    """
    Normalize any datetime to UTC-aware (tzinfo=UTC).
    - Aware datetimes are converted to UTC
    - Naive datetimes are assumed UTC and tz attached
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=dt_timezone.utc)
    return dt.astimezone(dt_timezone.utc)


def parse_instant(value: str) -> datetime:
    """Parse an ISO 8601 instant (accepts a trailing Z); naive means UTC."""
    dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    return to_utc_aware(dt)


def get_zoneinfo(tz_name: Optional[str]) -> ZoneInfo:
    """Resolve an IANA name, raising ValueError for unknown or empty names."""
    if not tz_name or not tz_name.strip():
        raise ValueError("timezone is empty")
    try:
        return ZoneInfo(tz_name.strip())
    except (ZoneInfoNotFoundError, ValueError, OSError) as e:
        # Directory names such as "America" surface as OSError
        raise ValueError(f"unknown timezone {tz_name!r}") from e


def _pad_hour(time_str: str) -> str:
    # "9:00" -> "09:00"
    if len(time_str) > 1 and time_str[0].isdigit() and time_str[1] == ":":
        return f"0{time_str}"
    return time_str


def parse_local_datetime(date_str: str, time_str: str, tz_name: str) -> datetime:
    """
    Combine a calendar date and time-of-day into an aware datetime in `tz_name`.

    `date_str` is YYYY-MM-DD; `time_str` is H:MM, HH:MM or HH:MM:SS (the store's
    `time` column serializes with seconds). Wall times inside a DST gap or
    overlap resolve with fold=0.
    """
    tz = get_zoneinfo(tz_name)
    d = date.fromisoformat(date_str.strip())
    t = time.fromisoformat(_pad_hour(time_str.strip()))
    if t.tzinfo is not None:
        raise ValueError(f"time {time_str!r} must not carry an offset")
    return datetime.combine(d, t, tzinfo=tz)


def format_long_date(dt: datetime) -> str:
    """e.g. January 15, 2024"""
    return f"{dt.strftime('%B')} {dt.day}, {dt.year}"


def format_clock_time(dt: datetime) -> str:
    """e.g. 9:00 AM"""
    hour = dt.hour % 12 or 12
    return f"{hour}:{dt.minute:02d} {'AM' if dt.hour < 12 else 'PM'}"
