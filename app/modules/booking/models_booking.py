"""model file for booking"""

import uuid
from datetime import datetime

from sqlalchemy import ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.users.models_users import CoreUser
from app.modules.booking.types_booking import BookingStatus
from app.modules.item.models_item import Item
from app.types.sqlalchemy import Base, PrimaryKey


class Booking(Base):
    __tablename__ = "booking"

    id: Mapped[PrimaryKey]
    start: Mapped[datetime] = mapped_column(index=True)
    end: Mapped[datetime]
    item_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("item.id"),
        index=True,
    )
    booker_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("core_user.id"),
        index=True,
    )
    status: Mapped[BookingStatus]

    booker: Mapped[CoreUser] = relationship("CoreUser", lazy="joined", init=False)
    item: Mapped[Item] = relationship("Item", lazy="joined", init=False)
