"""
Database backed collaborators of the booking logic, and the FastAPI dependencies providing them.

They share the request database session, so every write of a request is committed or rolled back together by `get_db`.
"""

from collections.abc import Sequence
from datetime import datetime
from uuid import UUID

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.users import cruds_users, models_users
from app.dependencies import get_db
from app.modules.booking import cruds_booking, models_booking
from app.modules.booking.types_booking import BookingState, BookingStatus
from app.modules.item import cruds_item, models_item
from app.types.result import Ok, Result, not_found


class SqlUserLookup:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def exists(self, user_id: UUID) -> bool:
        return await cruds_users.get_user_by_id(db=self.db, user_id=user_id) is not None

    async def resolve(self, user_id: UUID) -> Result[models_users.CoreUser]:
        user = await cruds_users.get_user_by_id(db=self.db, user_id=user_id)
        if user is None:
            return not_found(f"User {user_id} not found")
        return Ok(user)


class SqlItemLookup:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def resolve(self, item_id: UUID) -> Result[models_item.Item]:
        item = await cruds_item.get_item_by_id(db=self.db, item_id=item_id)
        if item is None:
            return not_found(f"Item {item_id} not found")
        return Ok(item)


class SqlBookingStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def save(self, booking: models_booking.Booking) -> models_booking.Booking:
        await cruds_booking.create_booking(db=self.db, booking=booking)
        # Reload the booking with its booker and item
        saved = await cruds_booking.get_booking_by_id(db=self.db, booking_id=booking.id)
        return saved if saved is not None else booking

    async def find_by_id(self, booking_id: UUID) -> models_booking.Booking | None:
        return await cruds_booking.get_booking_by_id(db=self.db, booking_id=booking_id)

    async def transition(self, booking_id: UUID, status: BookingStatus) -> bool:
        return await cruds_booking.update_waiting_booking_status(
            db=self.db,
            booking_id=booking_id,
            status=status,
        )

    async def find_for_booker(
        self,
        booker_id: UUID,
        state: BookingState,
        now: datetime,
        page: int,
        size: int,
    ) -> Sequence[models_booking.Booking]:
        return await cruds_booking.get_bookings_by_booker(
            db=self.db,
            booker_id=booker_id,
            state=state,
            now=now,
            page=page,
            size=size,
        )

    async def find_for_owner(
        self,
        owner_id: UUID,
        state: BookingState,
        now: datetime,
        page: int,
        size: int,
    ) -> Sequence[models_booking.Booking]:
        return await cruds_booking.get_bookings_by_item_owner(
            db=self.db,
            owner_id=owner_id,
            state=state,
            now=now,
            page=page,
            size=size,
        )

    async def find_last_completed(
        self,
        item_id: UUID,
        now: datetime,
    ) -> models_booking.Booking | None:
        return await cruds_booking.get_last_completed_booking(
            db=self.db,
            item_id=item_id,
            now=now,
        )

    async def find_next_upcoming(
        self,
        item_id: UUID,
        now: datetime,
    ) -> models_booking.Booking | None:
        return await cruds_booking.get_next_upcoming_booking(
            db=self.db,
            item_id=item_id,
            now=now,
        )

    async def has_completed_rental(
        self,
        item_id: UUID,
        user_id: UUID,
        now: datetime,
    ) -> bool:
        return await cruds_booking.has_approved_past_booking(
            db=self.db,
            item_id=item_id,
            booker_id=user_id,
            now=now,
        )


def get_user_lookup(db: AsyncSession = Depends(get_db)) -> SqlUserLookup:
    return SqlUserLookup(db)


def get_item_lookup(db: AsyncSession = Depends(get_db)) -> SqlItemLookup:
    return SqlItemLookup(db)


def get_booking_store(db: AsyncSession = Depends(get_db)) -> SqlBookingStore:
    return SqlBookingStore(db)
