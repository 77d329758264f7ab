"""initial schema: users, items, comments and bookings

Create Date: 2026-10-19 10:12:41.318164
"""

import uuid
from collections.abc import Sequence
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pytest_alembic import MigrationContext

import sqlalchemy as sa
from alembic import op

from app.types.sqlalchemy import TZDateTime

# revision identifiers, used by Alembic.
revision: str = "5c1d0a7e93b2"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "core_user",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_core_user_email"),
        "core_user",
        ["email"],
        unique=True,
    )
    op.create_table(
        "item",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=False),
        sa.Column("available", sa.Boolean(), nullable=False),
        sa.Column("owner_id", sa.Uuid(), nullable=False),
        sa.Column("created", TZDateTime(), nullable=False),
        sa.Column("request_id", sa.Uuid(), nullable=True),
        sa.ForeignKeyConstraint(["owner_id"], ["core_user.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_item_owner_id"), "item", ["owner_id"], unique=False)
    op.create_table(
        "item_comment",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("text", sa.String(), nullable=False),
        sa.Column("item_id", sa.Uuid(), nullable=False),
        sa.Column("author_id", sa.Uuid(), nullable=False),
        sa.Column("created", TZDateTime(), nullable=False),
        sa.ForeignKeyConstraint(["author_id"], ["core_user.id"]),
        sa.ForeignKeyConstraint(["item_id"], ["item.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_item_comment_item_id"),
        "item_comment",
        ["item_id"],
        unique=False,
    )
    op.create_table(
        "booking",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("start", TZDateTime(), nullable=False),
        sa.Column("end", TZDateTime(), nullable=False),
        sa.Column("item_id", sa.Uuid(), nullable=False),
        sa.Column("booker_id", sa.Uuid(), nullable=False),
        sa.Column(
            "status",
            sa.Enum("waiting", "approved", "rejected", name="bookingstatus"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["booker_id"], ["core_user.id"]),
        sa.ForeignKeyConstraint(["item_id"], ["item.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_booking_start"), "booking", ["start"], unique=False)
    op.create_index(op.f("ix_booking_item_id"), "booking", ["item_id"], unique=False)
    op.create_index(
        op.f("ix_booking_booker_id"),
        "booking",
        ["booker_id"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_booking_booker_id"), table_name="booking")
    op.drop_index(op.f("ix_booking_item_id"), table_name="booking")
    op.drop_index(op.f("ix_booking_start"), table_name="booking")
    op.drop_table("booking")
    sa.Enum(name="bookingstatus").drop(op.get_bind(), checkfirst=True)
    op.drop_index(op.f("ix_item_comment_item_id"), table_name="item_comment")
    op.drop_table("item_comment")
    op.drop_index(op.f("ix_item_owner_id"), table_name="item")
    op.drop_table("item")
    op.drop_index(op.f("ix_core_user_email"), table_name="core_user")
    op.drop_table("core_user")


# Identifiers are inserted through reflected tables, where SQLite uuids are plain 32 characters strings
owner_id = uuid.uuid4().hex
booker_id = uuid.uuid4().hex
item_id = uuid.uuid4().hex
booking_id = uuid.uuid4().hex


def pre_test_upgrade(
    alembic_runner: "MigrationContext",
    alembic_connection: sa.Connection,
) -> None:
    pass


def test_upgrade(
    alembic_runner: "MigrationContext",
    alembic_connection: sa.Connection,
) -> None:
    now = datetime.now(UTC)
    alembic_runner.insert_into(
        "core_user",
        [
            {"id": owner_id, "name": "Owner", "email": "owner@shareit.org"},
            {"id": booker_id, "name": "Booker", "email": "booker@shareit.org"},
        ],
    )
    alembic_runner.insert_into(
        "item",
        {
            "id": item_id,
            "name": "Drill",
            "description": "Cordless drill",
            "available": True,
            "owner_id": owner_id,
            "created": now.replace(tzinfo=None),
        },
    )
    alembic_runner.insert_into(
        "booking",
        {
            "id": booking_id,
            "start": (now + timedelta(hours=1)).replace(tzinfo=None),
            "end": (now + timedelta(hours=2)).replace(tzinfo=None),
            "item_id": item_id,
            "booker_id": booker_id,
            "status": "waiting",
        },
    )

    rows = alembic_connection.execute(
        sa.text("SELECT status FROM booking WHERE booker_id = :booker_id"),
        {"booker_id": booker_id},
    ).fetchall()
    assert len(rows) == 1
