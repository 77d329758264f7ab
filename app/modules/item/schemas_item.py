"""Schemas file for endpoint /items"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from app.utils import validators


class ItemBase(BaseModel):
    """
    Base schema for item's model

    Every field is optional, missing values are refused by the endpoint with a 400
    """

    name: str | None = None
    description: str | None = None
    available: bool | None = None
    request_id: UUID | None = None

    _normalize_name = field_validator("name")(validators.trailing_spaces_remover)
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ItemUpdate(ItemBase):
    pass


class ItemComplete(BaseModel):
    id: UUID
    name: str
    description: str
    available: bool
    request_id: UUID | None = None

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class BookingShort(BaseModel):
    """Last or next booking of an item, only shown to its owner"""

    id: UUID
    booker_id: UUID

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class CommentBase(BaseModel):
    text: str

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CommentComplete(CommentBase):
    id: UUID
    author_name: str
    created: datetime


class ItemWithBookings(ItemComplete):
    last_booking: BookingShort | None = None
    next_booking: BookingShort | None = None
    comments: list[CommentComplete] = []


class ItemSimple(BaseModel):
    """Public part of an item, embedded in bookings"""

    id: UUID
    name: str

    model_config = ConfigDict(from_attributes=True)
