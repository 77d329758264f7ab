from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator

from app.utils import validators


class CoreUserBase(BaseModel):
    """Base schema for user's model"""

    name: str
    email: EmailStr

    _normalize_name = field_validator("name")(validators.trailing_spaces_remover)
    # Email normalization, this will modify the email variable
    _normalize_email = field_validator("email", mode="before")(validators.email_normalizer)


class CoreUserSimple(BaseModel):
    """Public part of a user, embedded in bookings"""

    id: UUID
    name: str

    model_config = ConfigDict(from_attributes=True)


class CoreUser(CoreUserBase):
    """Schema for user's model similar to core_user table in database"""

    id: UUID

    model_config = ConfigDict(from_attributes=True)


class CoreUserUpdate(BaseModel):
    name: str | None = None
    email: EmailStr | None = None

    _normalize_name = field_validator("name")(validators.trailing_spaces_remover)
    _normalize_email = field_validator("email", mode="before")(validators.email_normalizer)
