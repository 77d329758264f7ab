import importlib
import logging
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from pytest_alembic import MigrationContext
from pytest_alembic.config import Config
from pytest_alembic.tests import (
    test_single_head_revision,  # noqa: F401
    test_up_down_consistency,  # noqa: F401
    test_upgrade,  # noqa: F401
)
from sqlalchemy import create_engine, inspect
from sqlalchemy.engine import Connection

from app.utils.initialization import drop_db_sync
from tests.commons import SQLALCHEMY_DATABASE_URL_SYNC

MigrationHook = Callable[[MigrationContext, Connection], None]

pre_test_upgrade_hooks: dict[str, MigrationHook] = {}
test_upgrade_hooks: dict[str, MigrationHook] = {}

logger = logging.getLogger("shareit_tests")


class MigrationTestError(Exception):
    def __init__(self, step: str, revision: str):
        super().__init__(f"{step} failed for revision {revision}")


class MissingMigrationTestOrPretest(Exception):
    def __init__(self, revision: str):
        super().__init__(
            f"Revision {revision} should define `pre_test_upgrade` and `test_upgrade`",
        )


@pytest.fixture
def alembic_config() -> Config:
    return Config()


@pytest.fixture
def alembic_engine(alembic_connection: Connection) -> Connection:
    """
    pytest-alembic database handle. Despite its name, the fixture gives a synchronous connection:
    alembic can not be run from the event loop of the tests.
    """
    return alembic_connection


@pytest.fixture
def alembic_connection() -> Generator[Connection, None, None]:
    """
    A connection to an empty test database
    """
    connectable = create_engine(SQLALCHEMY_DATABASE_URL_SYNC, echo=False)

    with connectable.begin() as connection:
        # The application client of this module created the tables on startup
        drop_db_sync(connection)

        yield connection

    connectable.dispose()


@pytest.fixture(scope="module")
def migration_hooks() -> None:
    """
    Collect the `pre_test_upgrade` and `test_upgrade` functions of every migration script
    """
    for migration_file_path in Path().glob("migrations/versions/*.py"):
        migration_file = importlib.import_module(
            ".".join(migration_file_path.with_suffix("").parts),
        )
        if hasattr(migration_file, "revision"):
            revision = migration_file.revision
            if hasattr(migration_file, "pre_test_upgrade"):
                pre_test_upgrade_hooks[revision] = migration_file.pre_test_upgrade
            if hasattr(migration_file, "test_upgrade"):
                test_upgrade_hooks[revision] = migration_file.test_upgrade


def test_all_migrations_have_tests(
    alembic_runner: MigrationContext,
    migration_hooks: None,
) -> None:
    for revision in alembic_runner.history.revisions:
        if revision in ["base", "heads"]:
            continue
        if revision not in pre_test_upgrade_hooks or revision not in test_upgrade_hooks:
            raise MissingMigrationTestOrPretest(revision)


def test_migrations(
    alembic_runner: MigrationContext,
    alembic_connection: Connection,
    migration_hooks: None,
) -> None:
    for revision in alembic_runner.history.revisions:
        logger.info(f"Running tests for revision {revision}")
        steps: list[tuple[str, Callable[[], object]]] = [
            (
                "pre_test_upgrade",
                lambda: pre_test_upgrade_hooks.get(revision, lambda *_: None)(
                    alembic_runner,
                    alembic_connection,
                ),
            ),
            ("upgrade", lambda: alembic_runner.managed_upgrade(revision)),
            (
                "test_upgrade",
                lambda: test_upgrade_hooks.get(revision, lambda *_: None)(
                    alembic_runner,
                    alembic_connection,
                ),
            ),
        ]
        for step, run in steps:
            try:
                run()
            except Exception as error:
                raise MigrationTestError(step, revision) from error


def test_migrations_create_every_table(
    alembic_runner: MigrationContext,
    alembic_connection: Connection,
) -> None:
    alembic_runner.migrate_up_to("heads")

    assert {"core_user", "item", "item_comment", "booking"} <= set(
        inspect(alembic_connection).get_table_names(),
    )
