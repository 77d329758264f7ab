import uuid
from datetime import timedelta

import pytest

from app.modules.booking import queries_booking
from app.modules.booking.types_booking import BookingState, BookingStatus
from app.types.result import Err, ErrorKind, Ok
from tests.booking.fakes_booking import (
    NOW,
    InMemoryBookings,
    InMemoryItems,
    InMemoryUsers,
    make_booking,
    make_item,
    make_user,
)

hour = timedelta(hours=1)
day = timedelta(days=1)

owner = make_user("Owner")
booker = make_user("Booker")
stranger = make_user("Stranger")
item = make_item(owner)
other_item = make_item(stranger, name="Tent")

past_booking = make_booking(
    item,
    booker,
    NOW - 3 * day,
    NOW - 2 * day,
    BookingStatus.approved,
)
older_past_booking = make_booking(
    item,
    booker,
    NOW - 6 * day,
    NOW - 5 * day,
    BookingStatus.approved,
)
current_booking = make_booking(item, booker, NOW - hour, NOW + hour, BookingStatus.approved)
future_booking = make_booking(item, booker, NOW + day, NOW + 2 * day)
later_booking = make_booking(
    item,
    booker,
    NOW + 3 * day,
    NOW + 4 * day,
    BookingStatus.rejected,
)
# Booking of an item owned by the stranger, made by the owner
other_booking = make_booking(other_item, owner, NOW + hour, NOW + 2 * hour)

users = InMemoryUsers([owner, booker, stranger])
items = InMemoryItems([item, other_item])
bookings = InMemoryBookings(
    items,
    [
        past_booking,
        older_past_booking,
        current_booking,
        future_booking,
        later_booking,
        other_booking,
    ],
)


async def list_for_booker(state: str = "ALL", offset: int = 0, size: int = 10):
    return await queries_booking.list_for_booker(
        booker_id=booker.id,
        state=state,
        offset=offset,
        size=size,
        users=users,
        bookings=bookings,
        now=NOW,
    )


@pytest.mark.parametrize(
    ("state", "expected"),
    [
        ("ALL", BookingState.all),
        ("current", BookingState.current),
        ("Past", BookingState.past),
        ("fUtUrE", BookingState.future),
        ("WAITING", BookingState.waiting),
        ("rejected", BookingState.rejected),
    ],
)
def test_parse_state(state: str, expected: BookingState) -> None:
    result = queries_booking.parse_state(state)
    assert isinstance(result, Ok)
    assert result.value == expected


def test_parse_unknown_state() -> None:
    result = queries_booking.parse_state("UNSUPPORTED_STATUS")
    assert isinstance(result, Err)
    assert result.kind == ErrorKind.invalid_request
    assert result.detail == "Unknown state: UNSUPPORTED_STATUS"


@pytest.mark.parametrize(
    ("offset", "size", "page"),
    [(0, 10, 0), (9, 10, 0), (10, 10, 1), (5, 2, 2)],
)
def test_get_page_index(offset: int, size: int, page: int) -> None:
    result = queries_booking.get_page_index(offset, size)
    assert isinstance(result, Ok)
    assert result.value == page


@pytest.mark.parametrize(("offset", "size"), [(-1, 10), (0, 0), (0, -3)])
def test_get_page_index_refused(offset: int, size: int) -> None:
    result = queries_booking.get_page_index(offset, size)
    assert isinstance(result, Err)
    assert result.kind == ErrorKind.invalid_request


async def test_list_all_bookings_of_booker() -> None:
    result = await list_for_booker()
    assert isinstance(result, Ok)
    assert list(result.value) == [
        later_booking,
        future_booking,
        current_booking,
        past_booking,
        older_past_booking,
    ]


@pytest.mark.parametrize(
    ("state", "expected"),
    [
        ("current", [current_booking]),
        ("PAST", [past_booking, older_past_booking]),
        ("FUTURE", [later_booking, future_booking]),
        ("WAITING", [future_booking]),
        ("REJECTED", [later_booking]),
    ],
)
async def test_list_bookings_of_booker_by_state(state: str, expected: list) -> None:
    result = await list_for_booker(state)
    assert isinstance(result, Ok)
    assert list(result.value) == expected


async def test_time_buckets_cover_all_bookings_once() -> None:
    all_bookings = await list_for_booker()
    assert isinstance(all_bookings, Ok)

    bucketed = []
    for state in ("CURRENT", "PAST", "FUTURE"):
        result = await list_for_booker(state)
        assert isinstance(result, Ok)
        bucketed += result.value

    assert sorted(booking.id for booking in bucketed) == sorted(
        booking.id for booking in all_bookings.value
    )


async def test_pages_follow_the_full_listing() -> None:
    all_bookings = await list_for_booker()
    assert isinstance(all_bookings, Ok)

    paged = []
    for offset in (0, 2):
        result = await list_for_booker(offset=offset, size=2)
        assert isinstance(result, Ok)
        paged += result.value

    assert paged == list(all_bookings.value)[:4]


async def test_list_last_page() -> None:
    result = await list_for_booker(offset=4, size=2)
    assert isinstance(result, Ok)
    assert list(result.value) == [older_past_booking]


async def test_list_bookings_of_unknown_booker() -> None:
    result = await queries_booking.list_for_booker(
        booker_id=uuid.uuid4(),
        state="ALL",
        offset=0,
        size=10,
        users=users,
        bookings=bookings,
        now=NOW,
    )
    assert isinstance(result, Err)
    assert result.kind == ErrorKind.not_found


async def test_list_bookings_with_unknown_state() -> None:
    result = await list_for_booker("SOON")
    assert isinstance(result, Err)
    assert result.kind == ErrorKind.invalid_request


async def test_list_bookings_with_invalid_page() -> None:
    for offset, size in ((-1, 10), (0, 0)):
        result = await list_for_booker(offset=offset, size=size)
        assert isinstance(result, Err)
        assert result.kind == ErrorKind.invalid_request


async def test_list_bookings_of_owner() -> None:
    result = await queries_booking.list_for_owner(
        owner_id=owner.id,
        state="ALL",
        offset=0,
        size=10,
        users=users,
        bookings=bookings,
        now=NOW,
    )
    assert isinstance(result, Ok)
    assert other_booking not in result.value
    assert len(result.value) == 5


async def test_list_future_bookings_of_owner() -> None:
    result = await queries_booking.list_for_owner(
        owner_id=stranger.id,
        state="future",
        offset=0,
        size=10,
        users=users,
        bookings=bookings,
        now=NOW,
    )
    assert isinstance(result, Ok)
    assert list(result.value) == [other_booking]


async def test_list_bookings_of_unknown_owner() -> None:
    result = await queries_booking.list_for_owner(
        owner_id=uuid.uuid4(),
        state="ALL",
        offset=0,
        size=10,
        users=users,
        bookings=bookings,
        now=NOW,
    )
    assert isinstance(result, Err)
    assert result.kind == ErrorKind.not_found


async def test_find_last_completed() -> None:
    assert (
        await queries_booking.find_last_completed(item.id, bookings, now=NOW)
        is past_booking
    )
    assert await queries_booking.find_last_completed(other_item.id, bookings, now=NOW) is None


async def test_find_next_upcoming() -> None:
    assert (
        await queries_booking.find_next_upcoming(item.id, bookings, now=NOW)
        is future_booking
    )
    assert (
        await queries_booking.find_next_upcoming(other_item.id, bookings, now=NOW)
        is other_booking
    )


async def test_has_completed_rental() -> None:
    assert await queries_booking.has_completed_rental(
        item.id,
        booker.id,
        bookings,
        now=NOW,
    )
    assert not await queries_booking.has_completed_rental(
        item.id,
        stranger.id,
        bookings,
        now=NOW,
    )


async def test_has_completed_rental_requires_an_approved_finished_booking() -> None:
    renter = make_user("Renter")
    waiting = make_booking(item, renter, NOW - 3 * day, NOW - 2 * day)
    ongoing = make_booking(item, renter, NOW - hour, NOW + hour, BookingStatus.approved)
    rejected = make_booking(
        item,
        renter,
        NOW - 3 * day,
        NOW - 2 * day,
        BookingStatus.rejected,
    )
    renter_bookings = InMemoryBookings(items, [waiting, ongoing, rejected])
    assert not await queries_booking.has_completed_rental(
        item.id,
        renter.id,
        renter_bookings,
        now=NOW,
    )

    assert await queries_booking.has_completed_rental(
        item.id,
        renter.id,
        renter_bookings,
        now=NOW + 2 * hour,
    )


async def test_pages_of_bookings_sharing_their_start() -> None:
    renter = make_user("Renter")
    same_start = [
        make_booking(item, renter, NOW + day, NOW + day + (index + 1) * hour)
        for index in range(4)
    ]
    renter_users = InMemoryUsers([renter])
    renter_bookings = InMemoryBookings(items, same_start)

    async def list_page(offset: int, size: int):
        result = await queries_booking.list_for_booker(
            booker_id=renter.id,
            state="FUTURE",
            offset=offset,
            size=size,
            users=renter_users,
            bookings=renter_bookings,
            now=NOW,
        )
        assert isinstance(result, Ok)
        return list(result.value)

    all_bookings = await list_page(0, 10)
    assert all_bookings == sorted(
        same_start,
        key=lambda booking: booking.id,
        reverse=True,
    )

    paged = []
    for offset in range(4):
        paged += await list_page(offset, 1)
    assert paged == all_bookings
