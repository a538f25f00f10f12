from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker

from possync.adapters.sqlalchemy import start_mappers
from possync.adapters.sqlalchemy.migrations import upgrade_head
from possync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemySyncUnitOfWork,
    create_sqlalchemy_engine,
    shutdown,
    startup,
)
from possync.config import TenantSyncConfig
from tests.helpers.fakes import FakeSyncUnitOfWork

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture
def sync_config() -> TenantSyncConfig:
    return TenantSyncConfig()


@pytest.fixture
def fake_uow() -> FakeSyncUnitOfWork:
    return FakeSyncUnitOfWork()


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_sqlalchemy_engine("sqlite+pysqlite:///:memory:")
    start_mappers()
    upgrade_head(engine=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=sqlite_engine, future=True)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemySyncUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemySyncUnitOfWork:
        return SqlAlchemySyncUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()
