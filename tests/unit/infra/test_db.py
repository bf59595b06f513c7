"""Tests for the async engine factory.

Verifies that:
- create_db_engine() returns an AsyncEngine for the given URL
- the engine does not pool connections (one fresh connection per checkout)
- echo defaults to False
"""

from __future__ import annotations

import pytest
from sqlalchemy.pool import NullPool

from src.infra.config import StoreConfig
from src.infra.db import create_db_engine


@pytest.mark.unit
class TestCreateDbEngine:
    """Verify engine factory produces an unpooled async engine."""

    def test_returns_async_engine(self) -> None:
        engine = create_db_engine("sqlite+aiosqlite:///:memory:")
        assert hasattr(engine, "begin")
        assert hasattr(engine, "dispose")
        assert "aiosqlite" in str(engine.url)

    def test_uses_null_pool(self) -> None:
        engine = create_db_engine("sqlite+aiosqlite:///:memory:")
        assert isinstance(engine.pool, NullPool)

    def test_echo_defaults_to_false(self) -> None:
        engine = create_db_engine("sqlite+aiosqlite:///:memory:")
        assert engine.echo is False

    def test_accepts_config_url(self, tmp_path) -> None:
        config = StoreConfig(driver="sqlite+aiosqlite", database=str(tmp_path / "x.db"))
        engine = create_db_engine(config.url)
        assert engine.url.database == str(tmp_path / "x.db")

    async def test_connection_opens_and_closes(self) -> None:
        import sqlalchemy as sa

        engine = create_db_engine("sqlite+aiosqlite:///:memory:")
        async with engine.connect() as conn:
            result = await conn.execute(sa.text("SELECT 1"))
            assert result.scalar_one() == 1
        await engine.dispose()
