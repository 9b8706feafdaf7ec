from datetime import datetime, timedelta
from typing import Optional

from pydantic import BaseModel

from services.shift_constants import EARLY_CLOCK_IN_BUFFER, MINIMUM_CLOCK_OUT_BUFFER
from utils.datetime_helpers import current_datetime, minutes_between, plural_minutes


class ClockWindowCheck(BaseModel):
    """Outcome of a clock-in/clock-out window check. Never mutates anything."""

    is_valid: bool
    message: str
    error_code: Optional[str] = None


def validate_clock_in_time(
    start_dt: datetime,
    finish_dt: datetime,
    early_clock_in_minutes: int = EARLY_CLOCK_IN_BUFFER,
    now: Optional[datetime] = None,
) -> ClockWindowCheck:
    """
    Clock-in is open from (start - buffer) through finish, both inclusive.

    Args:
        start_dt: Shift start instant
        finish_dt: Shift finish instant
        early_clock_in_minutes: How early before start a worker may clock in
        now: Instant to check; defaults to the process clock

    Returns:
        ClockWindowCheck: CLOCK_IN_TOO_EARLY before the window opens,
        SHIFT_TIME_EXPIRED once the finish instant has passed.
    """
    now = now or current_datetime()
    earliest_clock_in = start_dt - timedelta(minutes=early_clock_in_minutes)

    if now < earliest_clock_in:
        early_by = minutes_between(now, earliest_clock_in)
        return ClockWindowCheck(
            is_valid=False,
            message=(
                f"Cannot clock in more than {early_clock_in_minutes} minutes before shift starts "
                f"(too early by {plural_minutes(early_by)})"
            ),
            error_code="CLOCK_IN_TOO_EARLY",
        )

    if now > finish_dt:
        expired_by = minutes_between(finish_dt, now)
        return ClockWindowCheck(
            is_valid=False,
            message=f"Cannot clock in after shift end time (shift time expired {plural_minutes(expired_by)} ago)",
            error_code="SHIFT_TIME_EXPIRED",
        )

    return ClockWindowCheck(is_valid=True, message="Clock-in time is valid")


def validate_clock_out_time(
    finish_dt: datetime,
    minimum_clock_out_buffer_minutes: int = MINIMUM_CLOCK_OUT_BUFFER,
    now: Optional[datetime] = None,
) -> ClockWindowCheck:
    """
    Clock-out opens at (finish - buffer) and has no upper bound.

    Shifts shorter than the buffer can therefore only be clocked out of
    once the worker is that close to, or past, the finish instant.
    """
    now = now or current_datetime()
    earliest_clock_out = finish_dt - timedelta(minutes=minimum_clock_out_buffer_minutes)

    if now < earliest_clock_out:
        early_by = minutes_between(now, earliest_clock_out)
        return ClockWindowCheck(
            is_valid=False,
            message=(
                f"Cannot clock out more than {minimum_clock_out_buffer_minutes} minutes before shift ends "
                f"(too early by {plural_minutes(early_by)})"
            ),
            error_code="CLOCK_OUT_TOO_EARLY",
        )

    return ClockWindowCheck(is_valid=True, message="Clock-out time is valid")
