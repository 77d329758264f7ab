from collections.abc import Sequence
from datetime import datetime
from uuid import UUID

from sqlalchemy import Select, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.booking import models_booking
from app.modules.booking.types_booking import BookingState, BookingStatus
from app.modules.booking.utils_booking import (
    is_future,
    is_past,
    state_condition,
)
from app.modules.item import models_item


def _filter_and_paginate(
    query: Select[tuple[models_booking.Booking]],
    state: BookingState,
    now: datetime,
    page: int,
    size: int,
) -> Select[tuple[models_booking.Booking]]:
    condition = state_condition(
        state,
        models_booking.Booking.start,
        models_booking.Booking.end,
        models_booking.Booking.status,
        now,
    )
    if condition is not None:
        query = query.where(condition)
    return (
        query.order_by(
            models_booking.Booking.start.desc(),
            models_booking.Booking.id.desc(),
        )
        .offset(page * size)
        .limit(size)
    )


async def get_booking_by_id(
    db: AsyncSession,
    booking_id: UUID,
) -> models_booking.Booking | None:
    result = await db.execute(
        select(models_booking.Booking)
        .where(models_booking.Booking.id == booking_id)
        .execution_options(populate_existing=True),
    )
    return result.scalars().first()


async def create_booking(
    db: AsyncSession,
    booking: models_booking.Booking,
) -> None:
    db.add(booking)
    await db.flush()


async def update_waiting_booking_status(
    db: AsyncSession,
    booking_id: UUID,
    status: BookingStatus,
) -> bool:
    """
    Set the status of the booking if it is still waiting. Return False if the booking was already decided.
    """
    result = await db.execute(
        update(models_booking.Booking)
        .where(
            models_booking.Booking.id == booking_id,
            models_booking.Booking.status == BookingStatus.waiting,
        )
        .values(status=status)
        .execution_options(synchronize_session=False),
    )
    await db.flush()
    return result.rowcount == 1


async def get_bookings_by_booker(
    db: AsyncSession,
    booker_id: UUID,
    state: BookingState,
    now: datetime,
    page: int,
    size: int,
) -> Sequence[models_booking.Booking]:
    result = await db.execute(
        _filter_and_paginate(
            select(models_booking.Booking).where(
                models_booking.Booking.booker_id == booker_id,
            ),
            state=state,
            now=now,
            page=page,
            size=size,
        ),
    )
    return result.unique().scalars().all()


async def get_bookings_by_item_owner(
    db: AsyncSession,
    owner_id: UUID,
    state: BookingState,
    now: datetime,
    page: int,
    size: int,
) -> Sequence[models_booking.Booking]:
    result = await db.execute(
        _filter_and_paginate(
            select(models_booking.Booking)
            .join(
                models_item.Item,
                models_item.Item.id == models_booking.Booking.item_id,
            )
            .where(models_item.Item.owner_id == owner_id),
            state=state,
            now=now,
            page=page,
            size=size,
        ),
    )
    return result.unique().scalars().all()


async def get_last_completed_booking(
    db: AsyncSession,
    item_id: UUID,
    now: datetime,
) -> models_booking.Booking | None:
    result = await db.execute(
        select(models_booking.Booking)
        .where(
            models_booking.Booking.item_id == item_id,
            is_past(models_booking.Booking.end, now),
        )
        .order_by(models_booking.Booking.end.desc())
        .limit(1),
    )
    return result.scalars().first()


async def get_next_upcoming_booking(
    db: AsyncSession,
    item_id: UUID,
    now: datetime,
) -> models_booking.Booking | None:
    result = await db.execute(
        select(models_booking.Booking)
        .where(
            models_booking.Booking.item_id == item_id,
            is_future(models_booking.Booking.start, now),
        )
        .order_by(models_booking.Booking.start)
        .limit(1),
    )
    return result.scalars().first()


async def has_approved_past_booking(
    db: AsyncSession,
    item_id: UUID,
    booker_id: UUID,
    now: datetime,
) -> bool:
    result = await db.execute(
        select(models_booking.Booking.id)
        .where(
            models_booking.Booking.item_id == item_id,
            models_booking.Booking.booker_id == booker_id,
            models_booking.Booking.status == BookingStatus.approved,
            is_past(models_booking.Booking.end, now),
        )
        .limit(1),
    )
    return result.scalars().first() is not None
