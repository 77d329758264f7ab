from collections.abc import Sequence
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Protocol
from uuid import UUID

if TYPE_CHECKING:
    from app.core.users.models_users import CoreUser
    from app.modules.booking.models_booking import Booking
    from app.modules.item.models_item import Item
    from app.types.result import Result


class BookingStatus(str, Enum):
    waiting = "WAITING"
    approved = "APPROVED"
    rejected = "REJECTED"

    def __str__(self) -> str:
        return f"{self.name}<{self.value}>"


class BookingState(str, Enum):
    """Buckets used to filter the bookings of a booker or of an owner"""

    all = "ALL"
    current = "CURRENT"
    past = "PAST"
    future = "FUTURE"
    waiting = "WAITING"
    rejected = "REJECTED"

    def __str__(self) -> str:
        return f"{self.name}<{self.value}>"


class UserLookup(Protocol):
    async def exists(self, user_id: UUID) -> bool: ...

    async def resolve(self, user_id: UUID) -> "Result[CoreUser]": ...


class ItemLookup(Protocol):
    async def resolve(self, item_id: UUID) -> "Result[Item]": ...


class BookingStore(Protocol):
    """
    Storage used by the booking logic and queries.

    `transition` must change the status only if the booking is still waiting, in a single atomic write,
    and return whether it did.
    Listing methods return bookings ordered by descending start, `page` being the index of the page of `size` bookings.
    """

    async def save(self, booking: "Booking") -> "Booking": ...

    async def find_by_id(self, booking_id: UUID) -> "Booking | None": ...

    async def transition(self, booking_id: UUID, status: BookingStatus) -> bool: ...

    async def find_for_booker(
        self,
        booker_id: UUID,
        state: BookingState,
        now: datetime,
        page: int,
        size: int,
    ) -> Sequence["Booking"]: ...

    async def find_for_owner(
        self,
        owner_id: UUID,
        state: BookingState,
        now: datetime,
        page: int,
        size: int,
    ) -> Sequence["Booking"]: ...

    async def find_last_completed(
        self,
        item_id: UUID,
        now: datetime,
    ) -> "Booking | None": ...

    async def find_next_upcoming(
        self,
        item_id: UUID,
        now: datetime,
    ) -> "Booking | None": ...

    async def has_completed_rental(
        self,
        item_id: UUID,
        user_id: UUID,
        now: datetime,
    ) -> bool: ...
