"""UTC-everywhere time handling. Eliminates timezone bugs at the source."""

from datetime import date, datetime, time, timezone


def now_utc() -> datetime:
    """
    Current time in UTC.

    Use this instead of datetime.now() everywhere.
    """
    return datetime.now(timezone.utc)


def today_utc() -> date:
    """Current calendar date in UTC."""
    return now_utc().date()


def to_utc(dt: datetime) -> datetime:
    """
    Convert a datetime to UTC.

    Raises ValueError if datetime is naive (no timezone).
    """
    if dt.tzinfo is None:
        raise ValueError(
            "Cannot convert naive datetime to UTC. Datetime must be timezone-aware."
        )
    return dt.astimezone(timezone.utc)


def start_of_day_utc(d: date) -> datetime:
    """Midnight UTC at the start of a calendar date."""
    return datetime.combine(d, time.min, tzinfo=timezone.utc)


def as_utc_datetime(value: date | datetime) -> datetime:
    """
    Normalize a calendar date or an aware datetime to a UTC datetime.

    Dates (check-in/check-out days, expense days) are treated as midnight UTC.

    Raises:
        ValueError: If value is a naive datetime
    """
    if isinstance(value, datetime):
        return to_utc(value)
    return start_of_day_utc(value)


def parse_iso(iso_string: str) -> datetime:
    """
    Parse ISO 8601 datetime string to UTC datetime.

    Raises ValueError if string has no timezone info.
    """
    dt = datetime.fromisoformat(iso_string)
    if dt.tzinfo is None:
        raise ValueError(
            "Cannot parse naive datetime string. "
            "Include timezone offset (e.g., 'Z' or '+00:00')."
        )
    return to_utc(dt)


def parse_date(date_string: str) -> date:
    """
    Parse a YYYY-MM-DD calendar date.

    Raises ValueError on any other format.
    """
    try:
        return date.fromisoformat(date_string)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid date '{date_string}'. Expected YYYY-MM-DD.")
