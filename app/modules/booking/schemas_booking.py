"""Schemas file for endpoint /bookings"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from app.core.users.schemas_users import CoreUserSimple
from app.modules.booking.types_booking import BookingStatus
from app.modules.item.schemas_item import ItemSimple


class BookingBase(BaseModel):
    """
    Booking request sent by the booker. Missing bounds are refused with a 400.
    Naive datetimes are considered to be UTC.
    """

    item_id: UUID
    start: datetime | None = None
    end: datetime | None = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BookingReturn(BaseModel):
    id: UUID
    start: datetime
    end: datetime
    status: BookingStatus
    booker: CoreUserSimple
    item: ItemSimple

    model_config = ConfigDict(from_attributes=True)
