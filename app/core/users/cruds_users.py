"""File defining the functions called by the endpoints, making queries to the table using the models"""

from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.users import models_users, schemas_users


async def get_users(db: AsyncSession) -> Sequence[models_users.CoreUser]:
    """Return all users from database, ordered by name"""

    result = await db.execute(
        select(models_users.CoreUser).order_by(models_users.CoreUser.name),
    )
    return result.scalars().all()


async def get_user_by_id(
    db: AsyncSession,
    user_id: UUID,
) -> models_users.CoreUser | None:
    result = await db.execute(
        select(models_users.CoreUser).where(models_users.CoreUser.id == user_id),
    )
    return result.scalars().first()


async def get_user_by_email(
    db: AsyncSession,
    email: str,
) -> models_users.CoreUser | None:
    """Return the user with the given email, the email should already be normalized"""

    result = await db.execute(
        select(models_users.CoreUser).where(models_users.CoreUser.email == email),
    )
    return result.scalars().first()


async def create_user(
    db: AsyncSession,
    user: models_users.CoreUser,
) -> None:
    db.add(user)
    await db.flush()


async def update_user(
    db: AsyncSession,
    user_id: UUID,
    user_update: schemas_users.CoreUserUpdate,
) -> None:
    values = user_update.model_dump(exclude_none=True)
    if not values:
        return
    await db.execute(
        update(models_users.CoreUser)
        .where(models_users.CoreUser.id == user_id)
        .values(**values),
    )
    await db.flush()


async def delete_user(db: AsyncSession, user_id: UUID) -> None:
    await db.execute(
        delete(models_users.CoreUser).where(models_users.CoreUser.id == user_id),
    )
    await db.flush()
