"""model file for item"""

import uuid
from datetime import datetime

from sqlalchemy import ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.users.models_users import CoreUser
from app.types.sqlalchemy import Base, PrimaryKey


class Item(Base):
    __tablename__ = "item"

    id: Mapped[PrimaryKey]
    name: Mapped[str]
    description: Mapped[str]
    available: Mapped[bool]
    owner_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("core_user.id"),
        index=True,
    )
    created: Mapped[datetime]
    # Identifier of the request the item was listed for, if any
    request_id: Mapped[uuid.UUID | None] = mapped_column(default=None)

    comments: Mapped[list["Comment"]] = relationship(
        lazy="selectin",
        order_by="Comment.created",
        default_factory=list,
    )


class Comment(Base):
    __tablename__ = "item_comment"

    id: Mapped[PrimaryKey]
    text: Mapped[str]
    item_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("item.id"),
        index=True,
    )
    author_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("core_user.id"),
    )
    created: Mapped[datetime]

    author: Mapped[CoreUser] = relationship("CoreUser", lazy="joined", init=False)
