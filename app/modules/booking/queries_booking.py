"""
Listing and lookup of bookings relative to the current instant.

`now` is sampled once per call, when the caller does not provide it.
"""

import uuid
from collections.abc import Sequence
from datetime import datetime

from app.modules.booking import models_booking
from app.modules.booking.types_booking import BookingState, BookingStore, UserLookup
from app.modules.booking.utils_booking import utcnow
from app.types.result import Err, Ok, Result, invalid_request, not_found


def parse_state(state: str) -> Result[BookingState]:
    """Return the bucket named `state`, ignoring case"""
    try:
        return Ok(BookingState(state.upper()))
    except ValueError:
        return invalid_request(f"Unknown state: {state}")


def get_page_index(offset: int, size: int) -> Result[int]:
    """
    Return the index of the page of `size` bookings containing `offset`
    """
    if offset < 0:
        return invalid_request("The offset can not be negative")
    if size <= 0:
        return invalid_request("The page size must be positive")
    return Ok(offset // size)


async def list_for_booker(
    booker_id: uuid.UUID,
    state: str,
    offset: int,
    size: int,
    users: UserLookup,
    bookings: BookingStore,
    now: datetime | None = None,
) -> Result[Sequence[models_booking.Booking]]:
    """
    Return the bookings made by the user, most recent start first
    """
    if not await users.exists(booker_id):
        return not_found(f"User {booker_id} not found")

    parsed_state = parse_state(state)
    if isinstance(parsed_state, Err):
        return parsed_state

    page = get_page_index(offset, size)
    if isinstance(page, Err):
        return page

    return Ok(
        await bookings.find_for_booker(
            booker_id,
            parsed_state.value,
            now or utcnow(),
            page.value,
            size,
        ),
    )


async def list_for_owner(
    owner_id: uuid.UUID,
    state: str,
    offset: int,
    size: int,
    users: UserLookup,
    bookings: BookingStore,
    now: datetime | None = None,
) -> Result[Sequence[models_booking.Booking]]:
    """
    Return the bookings of every item owned by the user, most recent start first
    """
    if not await users.exists(owner_id):
        return not_found(f"User {owner_id} not found")

    parsed_state = parse_state(state)
    if isinstance(parsed_state, Err):
        return parsed_state

    page = get_page_index(offset, size)
    if isinstance(page, Err):
        return page

    return Ok(
        await bookings.find_for_owner(
            owner_id,
            parsed_state.value,
            now or utcnow(),
            page.value,
            size,
        ),
    )


async def find_last_completed(
    item_id: uuid.UUID,
    bookings: BookingStore,
    now: datetime | None = None,
) -> models_booking.Booking | None:
    """The booking of the item which ended most recently"""
    return await bookings.find_last_completed(item_id, now or utcnow())


async def find_next_upcoming(
    item_id: uuid.UUID,
    bookings: BookingStore,
    now: datetime | None = None,
) -> models_booking.Booking | None:
    """The booking of the item which starts the soonest"""
    return await bookings.find_next_upcoming(item_id, now or utcnow())


async def has_completed_rental(
    item_id: uuid.UUID,
    user_id: uuid.UUID,
    bookings: BookingStore,
    now: datetime | None = None,
) -> bool:
    """
    Whether the user had an approved booking of the item which is now over. Required to comment the item.
    """
    return await bookings.has_completed_rental(item_id, user_id, now or utcnow())
