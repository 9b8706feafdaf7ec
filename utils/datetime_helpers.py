import re
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Tuple

TIME_STRING_PATTERN = re.compile(r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")


def current_datetime() -> datetime:
    """Naive local 'now'. All shift instants are naive local values."""
    return datetime.now()


def is_valid_time_string(time_string: str) -> bool:
    return bool(TIME_STRING_PATTERN.match(time_string or ""))


def is_date_in_past(value: date, today: Optional[date] = None) -> bool:
    """True if the calendar date is before today (time of day is ignored)."""
    if isinstance(value, datetime):
        value = value.date()
    return value < (today or date.today())


def create_date_time(base_date: date, time_string: str) -> datetime:
    """
    Anchor an "HH:MM" string to midnight of the given calendar date.

    Args:
        base_date: Calendar date (a datetime is truncated to its date)
        time_string: Time in 24-hour HH:MM format

    Returns:
        datetime: Naive instant with seconds and microseconds zeroed
    """
    if isinstance(base_date, datetime):
        base_date = base_date.date()
    hours, minutes = (int(part) for part in time_string.split(":"))
    return datetime.combine(base_date, time.min) + timedelta(hours=hours, minutes=minutes)


def create_shift_date_times(
    shift_date: date, start_time: str, finish_time: str
) -> Tuple[datetime, datetime]:
    """
    Build the (start, finish) instant pair for a shift.

    A finish at or before the start is a night shift ending the next
    calendar day, so 22:00-06:00 on D becomes D 22:00 -> D+1 06:00 and an
    equal start/finish is a 24 hour shift. The returned finish is always
    strictly after the start.
    """
    start_dt = create_date_time(shift_date, start_time)
    finish_dt = create_date_time(shift_date, finish_time)

    if finish_dt <= start_dt:
        finish_dt += timedelta(days=1)

    return start_dt, finish_dt


def format_time_string(dt: Optional[datetime]) -> Optional[str]:
    """Format an instant as bare HH:MM, dropping the date. None stays None."""
    if dt is None:
        return None
    return dt.strftime("%H:%M")


def format_utc_datetime(dt: Optional[datetime]) -> Optional[str]:
    """
    Format a timezone-aware datetime as ISO 8601 with a 'Z' suffix.

    Naive values are assumed to already be UTC.
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    else:
        dt = dt.astimezone(timezone.utc)

    iso_string = dt.isoformat()
    if iso_string.endswith("+00:00"):
        return iso_string.replace("+00:00", "Z")
    return iso_string


def minutes_between(earlier: datetime, later: datetime) -> int:
    """Whole minutes from earlier to later, rounded up so a partial minute counts."""
    seconds = (later - earlier).total_seconds()
    return int(-(-seconds // 60))


def plural_minutes(count: int) -> str:
    return f"{count} minute" if count == 1 else f"{count} minutes"
