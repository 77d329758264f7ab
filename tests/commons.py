import logging
import secrets
import string
import uuid
from collections.abc import Callable
from functools import lru_cache

from fastapi import FastAPI
from sqlalchemy import NullPool
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.core.users import cruds_users, models_users
from app.core.utils.config import Settings
from app.types.sqlalchemy import Base
from app.utils.state import LifespanState


class FailedToAddObjectToDB(Exception):
    """Exception raised when an object cannot be added to the database."""


async def override_init_app_state(
    app: FastAPI,
    settings: Settings,
    shareit_error_logger: logging.Logger,
) -> LifespanState:
    """
    Initialize the state of the application with the test database engine and session maker.
    """
    return LifespanState(
        engine=init_test_engine(),
        SessionLocal=init_test_SessionLocal(),
    )


@lru_cache
def override_get_settings() -> Settings:
    """Override the get_settings function to use the testing session"""

    return Settings(
        _env_file="./tests/.env.test",
        _yaml_file="./tests/config.test.yaml",
    )


settings = override_get_settings()


# Connect to the test's database
if settings.SQLITE_DB:
    SQLALCHEMY_DATABASE_URL = f"sqlite+aiosqlite:///./{settings.SQLITE_DB}"
    SQLALCHEMY_DATABASE_URL_SYNC = f"sqlite:///./{settings.SQLITE_DB}"
else:
    SQLALCHEMY_DATABASE_URL = f"postgresql+asyncpg://{settings.POSTGRES_USER}:{settings.POSTGRES_PASSWORD}@{settings.POSTGRES_HOST}/{settings.POSTGRES_DB}"
    SQLALCHEMY_DATABASE_URL_SYNC = f"postgresql+psycopg://{settings.POSTGRES_USER}:{settings.POSTGRES_PASSWORD}@{settings.POSTGRES_HOST}/{settings.POSTGRES_DB}"


engine = create_async_engine(
    SQLALCHEMY_DATABASE_URL,
    echo=settings.DATABASE_DEBUG,
    # We need to use NullPool to run tests with Postgresql
    # See https://docs.sqlalchemy.org/en/20/orm/extensions/asyncio.html#using-multiple-asyncio-event-loops
    poolclass=NullPool,
)

# Create a session for testing purposes
TestingSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


def init_test_engine() -> AsyncEngine:
    return engine


def init_test_SessionLocal() -> Callable[[], AsyncSession]:
    return TestingSessionLocal


def get_random_string(length: int = 5) -> str:
    return "".join(
        secrets.choice(string.ascii_letters + string.digits) for _ in range(length)
    )


async def add_object_to_db(db_object: Base) -> None:
    """
    Add an object to the database
    """
    async with TestingSessionLocal() as db:
        try:
            db.add(db_object)
            await db.commit()
        except Exception as error:
            await db.rollback()
            raise FailedToAddObjectToDB from error
        finally:
            await db.close()


async def create_user(
    name: str | None = None,
    email: str | None = None,
    user_id: uuid.UUID | None = None,
) -> models_users.CoreUser:
    """
    Add a dummy user to the database
    User property will be randomly generated if not provided
    """
    user = models_users.CoreUser(
        id=user_id or uuid.uuid4(),
        name=name or get_random_string(),
        email=email or (get_random_string(10).lower() + "@shareit.org"),
    )
    await add_object_to_db(user)
    return user


def user_headers(user: models_users.CoreUser) -> dict[str, str]:
    """Headers identifying `user` as the author of a request"""
    return {"X-Sharer-User-Id": str(user.id)}
