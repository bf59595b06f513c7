"""Root conftest - shared fixtures for all test layers.

Markers:
    @pytest.mark.unit        - No external deps (sqlite file DBs in tmp_path are fine)
    @pytest.mark.integration - Needs running services
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from src.infra.config import StoreConfig
from src.infra.db import create_db_engine
from src.store.document_store import SqlDocumentStore
from tests.fakes import FakeClock

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Callable
    from pathlib import Path

    from sqlalchemy.ext.asyncio import AsyncEngine


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(1_700_000_000)


@pytest.fixture
def sqlite_config(tmp_path: Path) -> Callable[..., StoreConfig]:
    """Build sqlite-backed configs sharing one database file."""
    db_path = str(tmp_path / "entries.db")

    def _make(expire: int | None = None) -> StoreConfig:
        return StoreConfig(driver="sqlite+aiosqlite", database=db_path, expire=expire)

    return _make


@pytest.fixture
async def db_engine(
    sqlite_config: Callable[..., StoreConfig],
) -> AsyncGenerator[AsyncEngine, None]:
    """Independent engine on the shared sqlite file, for inspecting rows."""
    engine = create_db_engine(sqlite_config().url)
    yield engine
    await engine.dispose()


@pytest.fixture
async def make_store(
    sqlite_config: Callable[..., StoreConfig],
    clock: FakeClock,
) -> AsyncGenerator[Callable[..., SqlDocumentStore], None]:
    """Factory for stores on the shared sqlite file, all on the same clock.

    Every store built here is closed (renewals drained) at teardown.
    """
    created: list[SqlDocumentStore] = []

    def _make(expire: int | None = None) -> SqlDocumentStore:
        store = SqlDocumentStore(sqlite_config(expire), clock=clock)
        created.append(store)
        return store

    yield _make

    for store in created:
        await store.close()
