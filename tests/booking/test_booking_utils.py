from datetime import UTC, datetime, timedelta, timezone

import pytest
from sqlalchemy import ColumnElement

from app.modules.booking import models_booking
from app.modules.booking.types_booking import BookingState, BookingStatus
from app.modules.booking.utils_booking import (
    check_interval,
    ensure_utc,
    is_current,
    is_future,
    is_past,
    matches_state,
    state_condition,
    utcnow,
)
from app.types.result import Err, ErrorKind, Ok

now = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)
hour = timedelta(hours=1)


def test_utcnow_is_aware() -> None:
    assert utcnow().tzinfo == UTC


def test_ensure_utc_on_naive_datetime() -> None:
    assert ensure_utc(datetime(2026, 10, 19, 12, 0)) == now
    assert ensure_utc(datetime(2026, 10, 19, 12, 0)).tzinfo == UTC


def test_ensure_utc_converts_aware_datetime() -> None:
    paris = timezone(timedelta(hours=2))
    converted = ensure_utc(datetime(2026, 10, 19, 14, 0, tzinfo=paris))
    assert converted == now
    assert converted.tzinfo == UTC


def test_current_interval_includes_bounds() -> None:
    assert is_current(now, now + hour, now)
    assert is_current(now - hour, now, now)
    assert not is_current(now + hour, now + 2 * hour, now)
    assert not is_current(now - 2 * hour, now - hour, now)


def test_past_and_future() -> None:
    assert is_past(now - hour, now)
    assert not is_past(now, now)
    assert is_future(now + hour, now)
    assert not is_future(now, now)


@pytest.mark.parametrize(
    ("start", "end"),
    [
        (now - 2 * hour, now - hour),
        (now - hour, now + hour),
        (now, now + hour),
        (now - hour, now),
        (now + hour, now + 2 * hour),
    ],
)
def test_time_buckets_partition_bookings(start: datetime, end: datetime) -> None:
    buckets = [
        state
        for state in (BookingState.current, BookingState.past, BookingState.future)
        if matches_state(start, end, BookingStatus.waiting, state, now)
    ]
    assert len(buckets) == 1


def test_status_buckets() -> None:
    assert matches_state(now, now + hour, BookingStatus.waiting, BookingState.waiting, now)
    assert not matches_state(
        now,
        now + hour,
        BookingStatus.approved,
        BookingState.waiting,
        now,
    )
    assert matches_state(
        now,
        now + hour,
        BookingStatus.rejected,
        BookingState.rejected,
        now,
    )
    assert matches_state(now, now + hour, BookingStatus.approved, BookingState.all, now)


def test_state_condition_for_all_is_none() -> None:
    assert (
        state_condition(
            BookingState.all,
            models_booking.Booking.start,
            models_booking.Booking.end,
            models_booking.Booking.status,
            now,
        )
        is None
    )


@pytest.mark.parametrize(
    "state",
    [
        BookingState.current,
        BookingState.past,
        BookingState.future,
        BookingState.waiting,
        BookingState.rejected,
    ],
)
def test_state_condition_on_columns(state: BookingState) -> None:
    condition = state_condition(
        state,
        models_booking.Booking.start,
        models_booking.Booking.end,
        models_booking.Booking.status,
        now,
    )
    assert isinstance(condition, ColumnElement)


def test_check_interval() -> None:
    result = check_interval(now + hour, now + 2 * hour, now)
    assert isinstance(result, Ok)
    assert result.value == (now + hour, now + 2 * hour)


def test_check_interval_starting_now() -> None:
    assert isinstance(check_interval(now, now + hour, now), Ok)


def test_check_interval_with_naive_bounds() -> None:
    result = check_interval(datetime(2026, 10, 19, 13, 0), datetime(2026, 10, 19, 14, 0), now)
    assert isinstance(result, Ok)
    assert result.value == (now + hour, now + 2 * hour)


@pytest.mark.parametrize(
    ("start", "end", "detail"),
    [
        (None, now + hour, "The start of the booking is required"),
        (now + hour, None, "The end of the booking is required"),
        (now + 2 * hour, now + hour, "The end of the booking must be after its start"),
        (now + hour, now + hour, "The start and the end of the booking must differ"),
        (now - hour, now + hour, "The start of the booking can not be in the past"),
    ],
)
def test_check_interval_refused(
    start: datetime | None,
    end: datetime | None,
    detail: str,
) -> None:
    result = check_interval(start, end, now)
    assert isinstance(result, Err)
    assert result.kind == ErrorKind.invalid_request
    assert result.detail == detail
