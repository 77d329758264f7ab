"""
Clock and interval helpers for bookings.

The temporal predicates only use comparison operators and `&`, so they can be evaluated on python datetimes
as well as on SQLAlchemy columns:
```python
is_current(booking.start, booking.end, now)  # bool
is_current(models_booking.Booking.start, models_booking.Booking.end, now)  # SQL expression
```
"""

from datetime import UTC, datetime
from typing import Any

from app.modules.booking.types_booking import BookingState, BookingStatus
from app.types.result import Ok, Result, invalid_request


def utcnow() -> datetime:
    return datetime.now(UTC)


def ensure_utc(value: datetime) -> datetime:
    """
    Naive datetimes are considered to be UTC, aware ones are converted to UTC
    """
    if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def is_current(start: Any, end: Any, now: datetime) -> Any:
    """The interval contains `now`, bounds included"""
    return (start <= now) & (end >= now)


def is_past(end: Any, now: datetime) -> Any:
    return end < now


def is_future(start: Any, now: datetime) -> Any:
    return start > now


def state_condition(
    state: BookingState,
    start: Any,
    end: Any,
    status: Any,
    now: datetime,
) -> Any:
    """
    Return the condition a booking must satisfy to belong to `state`, or None if every booking belongs to it.
    """
    if state == BookingState.current:
        return is_current(start, end, now)
    if state == BookingState.past:
        return is_past(end, now)
    if state == BookingState.future:
        return is_future(start, now)
    if state == BookingState.waiting:
        return status == BookingStatus.waiting
    if state == BookingState.rejected:
        return status == BookingStatus.rejected
    return None


def matches_state(
    start: datetime,
    end: datetime,
    status: BookingStatus,
    state: BookingState,
    now: datetime,
) -> bool:
    condition = state_condition(state, start, end, status, now)
    return True if condition is None else bool(condition)


def check_interval(
    start: datetime | None,
    end: datetime | None,
    now: datetime,
) -> Result[tuple[datetime, datetime]]:
    """
    Check that `[start, end]` can be booked at `now`. The returned bounds are in UTC.

    The start may be `now`. The end must be strictly after the start, and thus in the future.
    """
    if start is None:
        return invalid_request("The start of the booking is required")
    if end is None:
        return invalid_request("The end of the booking is required")

    start = ensure_utc(start)
    end = ensure_utc(end)

    if end < start:
        return invalid_request("The end of the booking must be after its start")
    if end == start:
        return invalid_request("The start and the end of the booking must differ")
    if start < now:
        return invalid_request("The start of the booking can not be in the past")

    return Ok((start, end))
