"""
Rules of a single booking: who may create it, who may decide on it and who may see it.

Every operation returns a `Result`. The only write of `decide_booking` is the final status transition,
made after every check passed.
"""

import logging
import uuid
from datetime import datetime

from app.modules.booking import models_booking
from app.modules.booking.types_booking import (
    BookingStatus,
    BookingStore,
    ItemLookup,
    UserLookup,
)
from app.modules.booking.utils_booking import check_interval, utcnow
from app.types.result import (
    Err,
    Ok,
    Result,
    invalid_request,
    not_found,
    not_permitted,
)

shareit_booking_logger = logging.getLogger("shareit.booking")


async def create_booking(
    requester_id: uuid.UUID,
    item_id: uuid.UUID,
    start: datetime | None,
    end: datetime | None,
    users: UserLookup,
    items: ItemLookup,
    bookings: BookingStore,
    now: datetime | None = None,
) -> Result[models_booking.Booking]:
    """
    Create a waiting booking of the item for the requester.

    An owner trying to book their own item gets the same error as for a missing item.
    Overlapping bookings of the same item are accepted.
    """
    now = now or utcnow()

    interval = check_interval(start, end, now)
    if isinstance(interval, Err):
        shareit_booking_logger.info(
            f"Booking of item {item_id} by user {requester_id} refused: {interval.detail}",
        )
        return interval
    start, end = interval.value

    requester = await users.resolve(requester_id)
    if isinstance(requester, Err):
        return requester

    item = await items.resolve(item_id)
    if isinstance(item, Err):
        return item

    if item.value.owner_id == requester_id:
        shareit_booking_logger.info(
            f"Booking of item {item_id} refused: user {requester_id} is its owner",
        )
        return not_found(f"Item {item_id} not found")

    if not item.value.available:
        shareit_booking_logger.info(
            f"Booking of item {item_id} by user {requester_id} refused: item unavailable",
        )
        return invalid_request(f"Item {item_id} is not available")

    booking = await bookings.save(
        models_booking.Booking(
            id=uuid.uuid4(),
            start=start,
            end=end,
            item_id=item_id,
            booker_id=requester_id,
            status=BookingStatus.waiting,
        ),
    )
    shareit_booking_logger.info(
        f"Booking {booking.id} of item {item_id} created by user {requester_id}",
    )
    return Ok(booking)


async def decide_booking(
    owner_id: uuid.UUID,
    booking_id: uuid.UUID,
    approved: bool,
    items: ItemLookup,
    bookings: BookingStore,
) -> Result[models_booking.Booking]:
    """
    Approve or reject a waiting booking. Only the owner of the booked item may decide, and only once.
    """
    booking = await bookings.find_by_id(booking_id)
    if booking is None:
        return not_found(f"Booking {booking_id} not found")

    item = await items.resolve(booking.item_id)
    if isinstance(item, Err):
        return item

    if item.value.owner_id != owner_id:
        shareit_booking_logger.warning(
            f"User {owner_id} tried to decide on booking {booking_id} of an item they do not own",
        )
        return not_permitted(f"Only the owner of the item can decide on booking {booking_id}")

    if booking.status != BookingStatus.waiting:
        return invalid_request(f"Booking {booking_id} was already decided")

    status = BookingStatus.approved if approved else BookingStatus.rejected
    # A concurrent decision may have been written since the booking was read
    if not await bookings.transition(booking_id, status):
        return invalid_request(f"Booking {booking_id} was already decided")

    decided = await bookings.find_by_id(booking_id)
    if decided is None:
        return not_found(f"Booking {booking_id} not found")

    shareit_booking_logger.info(
        f"Booking {booking_id} set to {status.value} by user {owner_id}",
    )
    return Ok(decided)


async def get_booking(
    requester_id: uuid.UUID,
    booking_id: uuid.UUID,
    items: ItemLookup,
    bookings: BookingStore,
) -> Result[models_booking.Booking]:
    """
    Return the booking to its booker or to the owner of the item.

    Any other user gets a not found error, as if the booking did not exist.
    """
    booking = await bookings.find_by_id(booking_id)
    if booking is None:
        return not_found(f"Booking {booking_id} not found")

    if booking.booker_id == requester_id:
        return Ok(booking)

    item = await items.resolve(booking.item_id)
    if isinstance(item, Err):
        return item

    if item.value.owner_id != requester_id:
        return not_found(f"Booking {booking_id} not found")

    return Ok(booking)
