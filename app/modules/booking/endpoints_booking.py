import uuid

from fastapi import Depends, Query

from app.core.utils.config import Settings
from app.dependencies import get_settings, get_user_id
from app.modules.booking import logic_booking, queries_booking, schemas_booking
from app.modules.booking.dependencies_booking import (
    SqlBookingStore,
    SqlItemLookup,
    SqlUserLookup,
    get_booking_store,
    get_item_lookup,
    get_user_lookup,
)
from app.types.module import Module
from app.utils.tools import unwrap

module = Module(
    root="bookings",
    tag="Bookings",
)


@module.router.post(
    "/bookings",
    response_model=schemas_booking.BookingReturn,
    status_code=201,
)
async def create_booking(
    booking: schemas_booking.BookingBase,
    user_id: uuid.UUID = Depends(get_user_id),
    users: SqlUserLookup = Depends(get_user_lookup),
    items: SqlItemLookup = Depends(get_item_lookup),
    bookings: SqlBookingStore = Depends(get_booking_store),
):
    """
    Request a booking of an item. The booking is created waiting for the decision of the item's owner.

    **The item must be available and must not belong to the user**
    """
    return unwrap(
        await logic_booking.create_booking(
            requester_id=user_id,
            item_id=booking.item_id,
            start=booking.start,
            end=booking.end,
            users=users,
            items=items,
            bookings=bookings,
        ),
    )


@module.router.get(
    "/bookings",
    response_model=list[schemas_booking.BookingReturn],
    status_code=200,
)
async def get_bookings_by_booker(
    state: str = "ALL",
    offset: int = Query(default=0, alias="from"),
    size: int | None = None,
    user_id: uuid.UUID = Depends(get_user_id),
    users: SqlUserLookup = Depends(get_user_lookup),
    bookings: SqlBookingStore = Depends(get_booking_store),
    settings: Settings = Depends(get_settings),
):
    """
    Return the bookings made by the user, most recent start first.

    `state` is one of ALL, CURRENT, PAST, FUTURE, WAITING or REJECTED, case insensitive.
    """
    return unwrap(
        await queries_booking.list_for_booker(
            booker_id=user_id,
            state=state,
            offset=offset,
            size=size if size is not None else settings.BOOKING_DEFAULT_PAGE_SIZE,
            users=users,
            bookings=bookings,
        ),
    )


@module.router.get(
    "/bookings/owner",
    response_model=list[schemas_booking.BookingReturn],
    status_code=200,
)
async def get_bookings_by_owner(
    state: str = "ALL",
    offset: int = Query(default=0, alias="from"),
    size: int | None = None,
    user_id: uuid.UUID = Depends(get_user_id),
    users: SqlUserLookup = Depends(get_user_lookup),
    bookings: SqlBookingStore = Depends(get_booking_store),
    settings: Settings = Depends(get_settings),
):
    """
    Return the bookings of the items owned by the user, most recent start first.

    `state` is one of ALL, CURRENT, PAST, FUTURE, WAITING or REJECTED, case insensitive.
    """
    return unwrap(
        await queries_booking.list_for_owner(
            owner_id=user_id,
            state=state,
            offset=offset,
            size=size if size is not None else settings.BOOKING_DEFAULT_PAGE_SIZE,
            users=users,
            bookings=bookings,
        ),
    )


@module.router.get(
    "/bookings/{booking_id}",
    response_model=schemas_booking.BookingReturn,
    status_code=200,
)
async def get_booking(
    booking_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_user_id),
    items: SqlItemLookup = Depends(get_item_lookup),
    bookings: SqlBookingStore = Depends(get_booking_store),
):
    """
    Return a booking.

    **Only the booker and the owner of the item can see the booking**
    """
    return unwrap(
        await logic_booking.get_booking(
            requester_id=user_id,
            booking_id=booking_id,
            items=items,
            bookings=bookings,
        ),
    )


@module.router.patch(
    "/bookings/{booking_id}",
    response_model=schemas_booking.BookingReturn,
    status_code=200,
)
async def decide_booking(
    booking_id: uuid.UUID,
    approved: bool,
    user_id: uuid.UUID = Depends(get_user_id),
    items: SqlItemLookup = Depends(get_item_lookup),
    bookings: SqlBookingStore = Depends(get_booking_store),
):
    """
    Approve or reject a waiting booking.

    **Only the owner of the item can decide, once**
    """
    return unwrap(
        await logic_booking.decide_booking(
            owner_id=user_id,
            booking_id=booking_id,
            approved=approved,
            items=items,
            bookings=bookings,
        ),
    )
