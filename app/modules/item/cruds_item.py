"""File defining the functions called by the endpoints, making queries to the table using the models"""

from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.item import models_item, schemas_item


async def get_item_by_id(
    db: AsyncSession,
    item_id: UUID,
) -> models_item.Item | None:
    result = await db.execute(
        select(models_item.Item).where(models_item.Item.id == item_id),
    )
    return result.scalars().first()


async def get_items_by_owner(
    db: AsyncSession,
    owner_id: UUID,
) -> Sequence[models_item.Item]:
    result = await db.execute(
        select(models_item.Item)
        .where(models_item.Item.owner_id == owner_id)
        .order_by(models_item.Item.created),
    )
    return result.scalars().all()


async def search_available_items(
    db: AsyncSession,
    text: str,
) -> Sequence[models_item.Item]:
    """
    Return available items whose name or description contains `text`, ignoring case
    """
    # The text is searched literally, LIKE wildcards typed by the user are escaped
    escaped_text = (
        text.lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    )
    pattern = f"%{escaped_text}%"
    result = await db.execute(
        select(models_item.Item)
        .where(
            models_item.Item.available,
            or_(
                func.lower(models_item.Item.name).like(pattern, escape="\\"),
                func.lower(models_item.Item.description).like(pattern, escape="\\"),
            ),
        )
        .order_by(models_item.Item.created),
    )
    return result.scalars().all()


async def create_item(
    db: AsyncSession,
    item: models_item.Item,
) -> None:
    db.add(item)
    await db.flush()


async def update_item(
    db: AsyncSession,
    item_id: UUID,
    item_update: schemas_item.ItemUpdate,
) -> None:
    values = item_update.model_dump(exclude_none=True)
    if not values:
        return
    await db.execute(
        update(models_item.Item)
        .where(models_item.Item.id == item_id)
        .values(**values),
    )
    await db.flush()


async def create_comment(
    db: AsyncSession,
    comment: models_item.Comment,
) -> None:
    db.add(comment)
    await db.flush()
