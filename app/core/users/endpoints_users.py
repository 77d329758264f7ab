import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.users import cruds_users, models_users, schemas_users
from app.dependencies import get_db, get_request_id
from app.types.module import CoreModule
from app.utils.tools import is_blank

router = APIRouter(tags=["Users"])

core_module = CoreModule(
    root="users",
    tag="Users",
    router=router,
)

shareit_error_logger = logging.getLogger("shareit.error")


@router.get(
    "/users",
    response_model=list[schemas_users.CoreUser],
    status_code=200,
)
async def read_users(
    db: AsyncSession = Depends(get_db),
):
    """
    Return all users from database
    """
    return await cruds_users.get_users(db)


@router.get(
    "/users/{user_id}",
    response_model=schemas_users.CoreUser,
    status_code=200,
)
async def read_user(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """
    Return the user with id `user_id`
    """
    user = await cruds_users.get_user_by_id(db=db, user_id=user_id)
    if user is None:
        raise HTTPException(status_code=404, detail=f"User {user_id} not found")

    return user


@router.post(
    "/users",
    response_model=schemas_users.CoreUser,
    status_code=201,
)
async def create_user(
    user: schemas_users.CoreUserBase,
    db: AsyncSession = Depends(get_db),
    request_id: str = Depends(get_request_id),
):
    """
    Create a new user

    **The email must not be used by another user**
    """
    if is_blank(user.name):
        raise HTTPException(status_code=400, detail="Name is required")

    if await cruds_users.get_user_by_email(db=db, email=user.email) is not None:
        raise HTTPException(
            status_code=409,
            detail=f"A user with the email {user.email} already exists",
        )

    db_user = models_users.CoreUser(
        id=uuid.uuid4(),
        name=user.name,
        email=user.email,
    )
    await cruds_users.create_user(db=db, user=db_user)
    shareit_error_logger.debug(f"User {db_user.id} created ({request_id})")

    return db_user


@router.patch(
    "/users/{user_id}",
    response_model=schemas_users.CoreUser,
    status_code=200,
)
async def update_user(
    user_id: uuid.UUID,
    user_update: schemas_users.CoreUserUpdate,
    db: AsyncSession = Depends(get_db),
):
    """
    Update the user with id `user_id`, only the fields which are set are modified

    **The new email must not be used by another user**
    """
    user = await cruds_users.get_user_by_id(db=db, user_id=user_id)
    if user is None:
        raise HTTPException(status_code=404, detail=f"User {user_id} not found")

    if user_update.name is not None and is_blank(user_update.name):
        raise HTTPException(status_code=400, detail="Name should not be blank")
    if user_update.email is not None:
        owner = await cruds_users.get_user_by_email(db=db, email=user_update.email)
        if owner is not None and owner.id != user_id:
            raise HTTPException(
                status_code=409,
                detail=f"A user with the email {user_update.email} already exists",
            )

    await cruds_users.update_user(db=db, user_id=user_id, user_update=user_update)
    await db.refresh(user)

    return user


@router.delete(
    "/users/{user_id}",
    status_code=204,
)
async def delete_user(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """
    Delete the user with id `user_id`
    """
    user = await cruds_users.get_user_by_id(db=db, user_id=user_id)
    if user is None:
        raise HTTPException(status_code=404, detail=f"User {user_id} not found")

    await cruds_users.delete_user(db=db, user_id=user_id)
