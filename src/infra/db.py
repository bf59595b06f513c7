"""Async database engine factory for the document store.

Provides:
- create_db_engine(): AsyncEngine without connection pooling, so every
  `engine.begin()` opens a fresh connection and closes it on exit

Each store operation owns exactly one connection for its lifetime; nothing
is reused across calls.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool

if TYPE_CHECKING:
    import sqlalchemy as sa


def create_db_engine(
    url: str | sa.engine.URL,
    *,
    echo: bool = False,
) -> AsyncEngine:
    """Create an async SQLAlchemy engine with one connection per checkout.

    Args:
        url: Database URL with an async driver (postgresql+asyncpg,
            mysql+aiomysql or sqlite+aiosqlite).
        echo: Whether to log SQL statements.

    Returns:
        Configured AsyncEngine instance.
    """
    return create_async_engine(
        url,
        echo=echo,
        poolclass=NullPool,
    )
