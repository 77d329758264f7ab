import logging
import uuid
from collections.abc import Sequence

from fastapi import Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.users import cruds_users
from app.dependencies import get_db, get_request_id, get_user_id
from app.modules.booking import queries_booking
from app.modules.booking.dependencies_booking import SqlBookingStore, get_booking_store
from app.modules.booking.utils_booking import utcnow
from app.modules.item import cruds_item, models_item, schemas_item
from app.types.module import Module
from app.utils.tools import is_blank

module = Module(
    root="items",
    tag="Items",
)

shareit_item_logger = logging.getLogger("shareit.item")


def comment_to_schema(comment: models_item.Comment) -> schemas_item.CommentComplete:
    return schemas_item.CommentComplete(
        id=comment.id,
        text=comment.text,
        author_name=comment.author.name,
        created=comment.created,
    )


async def item_to_schema(
    item: models_item.Item,
    requester_id: uuid.UUID,
    bookings: SqlBookingStore,
) -> schemas_item.ItemWithBookings:
    """
    Add the comments of the item and, for its owner only, its last and next bookings
    """
    last_booking = None
    next_booking = None
    if item.owner_id == requester_id:
        now = utcnow()
        last_booking = await queries_booking.find_last_completed(
            item_id=item.id,
            bookings=bookings,
            now=now,
        )
        next_booking = await queries_booking.find_next_upcoming(
            item_id=item.id,
            bookings=bookings,
            now=now,
        )

    return schemas_item.ItemWithBookings(
        id=item.id,
        name=item.name,
        description=item.description,
        available=item.available,
        request_id=item.request_id,
        last_booking=schemas_item.BookingShort.model_validate(last_booking)
        if last_booking is not None
        else None,
        next_booking=schemas_item.BookingShort.model_validate(next_booking)
        if next_booking is not None
        else None,
        comments=[comment_to_schema(comment) for comment in item.comments],
    )


@module.router.get(
    "/items",
    response_model=list[schemas_item.ItemWithBookings],
    status_code=200,
)
async def get_items_by_owner(
    user_id: uuid.UUID = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
    bookings: SqlBookingStore = Depends(get_booking_store),
):
    """
    Return the items of the user, with their comments and their last and next bookings
    """
    items: Sequence[models_item.Item] = await cruds_item.get_items_by_owner(
        db=db,
        owner_id=user_id,
    )
    return [
        await item_to_schema(item=item, requester_id=user_id, bookings=bookings)
        for item in items
    ]


@module.router.get(
    "/items/search",
    response_model=list[schemas_item.ItemComplete],
    status_code=200,
)
async def search_items(
    text: str = "",
    db: AsyncSession = Depends(get_db),
):
    """
    Search available items whose name or description contains `text`, ignoring case.

    An empty search returns no item.
    """
    if is_blank(text):
        return []

    return await cruds_item.search_available_items(db=db, text=text)


@module.router.get(
    "/items/{item_id}",
    response_model=schemas_item.ItemWithBookings,
    status_code=200,
)
async def get_item_by_id(
    item_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
    bookings: SqlBookingStore = Depends(get_booking_store),
):
    """
    Return an item with its comments.

    **The last and next bookings are only given to the owner of the item**
    """
    item = await cruds_item.get_item_by_id(db=db, item_id=item_id)
    if item is None:
        raise HTTPException(status_code=404, detail=f"Item {item_id} not found")

    return await item_to_schema(item=item, requester_id=user_id, bookings=bookings)


@module.router.post(
    "/items",
    response_model=schemas_item.ItemComplete,
    status_code=201,
)
async def create_item(
    item: schemas_item.ItemBase,
    user_id: uuid.UUID = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
    request_id: str = Depends(get_request_id),
):
    """
    List a new item owned by the user
    """
    if await cruds_users.get_user_by_id(db=db, user_id=user_id) is None:
        raise HTTPException(status_code=404, detail=f"User {user_id} not found")

    if is_blank(item.name) or is_blank(item.description) or item.available is None:
        raise HTTPException(
            status_code=400,
            detail="Name, description and availability are required",
        )

    db_item = models_item.Item(
        id=uuid.uuid4(),
        name=item.name,
        description=item.description,
        available=item.available,
        owner_id=user_id,
        created=utcnow(),
        request_id=item.request_id,
    )
    await cruds_item.create_item(db=db, item=db_item)
    shareit_item_logger.info(
        f"Item {db_item.id} created by user {user_id} ({request_id})",
    )

    return db_item


@module.router.patch(
    "/items/{item_id}",
    response_model=schemas_item.ItemComplete,
    status_code=200,
)
async def update_item(
    item_id: uuid.UUID,
    item_update: schemas_item.ItemUpdate,
    user_id: uuid.UUID = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Update an item, only the fields which are set are modified

    **Only the owner of the item can update it**
    """
    item = await cruds_item.get_item_by_id(db=db, item_id=item_id)
    if item is None:
        raise HTTPException(status_code=404, detail=f"Item {item_id} not found")
    if item.owner_id != user_id:
        raise HTTPException(
            status_code=403,
            detail="Only the owner of the item can update it",
        )

    if (item_update.name is not None and is_blank(item_update.name)) or (
        item_update.description is not None and is_blank(item_update.description)
    ):
        raise HTTPException(
            status_code=400,
            detail="Name and description should not be blank",
        )

    await cruds_item.update_item(db=db, item_id=item_id, item_update=item_update)
    await db.refresh(item)

    return item


@module.router.post(
    "/items/{item_id}/comment",
    response_model=schemas_item.CommentComplete,
    status_code=200,
)
async def create_comment(
    item_id: uuid.UUID,
    comment: schemas_item.CommentBase,
    user_id: uuid.UUID = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
    bookings: SqlBookingStore = Depends(get_booking_store),
):
    """
    Comment an item.

    **The user must have had an approved booking of the item which is over**
    """
    if is_blank(comment.text):
        raise HTTPException(status_code=400, detail="The comment should not be blank")

    author = await cruds_users.get_user_by_id(db=db, user_id=user_id)
    if author is None:
        raise HTTPException(status_code=404, detail=f"User {user_id} not found")

    item = await cruds_item.get_item_by_id(db=db, item_id=item_id)
    if item is None:
        raise HTTPException(status_code=404, detail=f"Item {item_id} not found")

    now = utcnow()
    if not await queries_booking.has_completed_rental(
        item_id=item_id,
        user_id=user_id,
        bookings=bookings,
        now=now,
    ):
        raise HTTPException(
            status_code=400,
            detail="Only users who completed a rental of the item can comment it",
        )

    db_comment = models_item.Comment(
        id=uuid.uuid4(),
        text=comment.text,
        item_id=item_id,
        author_id=user_id,
        created=now,
    )
    await cruds_item.create_comment(db=db, comment=db_comment)

    return schemas_item.CommentComplete(
        id=db_comment.id,
        text=db_comment.text,
        author_name=author.name,
        created=db_comment.created,
    )
