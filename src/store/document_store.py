"""SQL-backed implementation of DocumentStorePort.

- One fresh connection per operation (NullPool engine), released on every
  exit path by the _connection() scope
- Schema provisioned once, at initialize() or lazily on first use
- Writes are a single atomic upsert (see src.infra.upsert for the
  expiration merge rule)
- Reads see only live rows; a hit on a finite-TTL row schedules a detached
  read-extension write that the caller never awaits
- Failures are logged as structured errors and reported as False / ERROR,
  never raised to the caller (purge_expired excepted)
"""

from __future__ import annotations

import asyncio
import json
import logging
import math
import time
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, Literal

import sqlalchemy as sa
from sqlalchemy.exc import SQLAlchemyError

from src.infra.db import create_db_engine
from src.infra.models import Base, entries_table
from src.infra.upsert import build_upsert
from src.ports.document_store_port import DocumentStorePort
from src.shared.errors import (
    DocstoreError,
    SchemaError,
    SerializationError,
    StoreQueryError,
    StoreUnavailableError,
)
from src.shared.logging.error_handler import log_structured_error
from src.shared.types import NEVER_EXPIRES, LookupResult

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable

    from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

    from src.infra.config import StoreConfig

logger = logging.getLogger(__name__)


class SqlDocumentStore(DocumentStorePort):
    """Relational document store with lazy, read-extendable expiration.

    Usage:
        store = SqlDocumentStore(StoreConfig.resolve({"expire": 3600}))
        await store.initialize()
        await store.set("abc", {"data": "hello"})
        doc = await store.get("abc")   # document, or False
        await store.close()
    """

    def __init__(
        self,
        config: StoreConfig,
        *,
        engine: AsyncEngine | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._config = config
        self._owns_engine = engine is None
        self._engine = engine if engine is not None else create_db_engine(config.url)
        self._clock = clock
        self._schema_ready = False
        self._schema_lock = asyncio.Lock()
        self._renewals: set[asyncio.Task[None]] = set()

    @property
    def config(self) -> StoreConfig:
        return self._config

    @property
    def pending_renewals(self) -> int:
        """Number of read-extension writes still in flight."""
        return len(self._renewals)

    async def __aenter__(self) -> SqlDocumentStore:
        await self.initialize()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    # -- Schema + connection lifecycle --

    async def initialize(self) -> None:
        """Create the entries table and its expiration index if absent.

        Idempotent: an already provisioned schema is left untouched. When
        another process creates the table between the existence check and
        CREATE TABLE, the duplicate-table failure is accepted once the table
        is confirmed present.

        Raises:
            StoreUnavailableError: The engine could not be reached.
            SchemaError: Table or index creation failed.
        """
        try:
            async with self._connection("initialize") as conn:
                await conn.run_sync(Base.metadata.create_all)
        except StoreQueryError as exc:
            if not await self._table_exists():
                raise SchemaError(str(exc)) from exc
            logger.info("Table %s created concurrently, reusing it", entries_table.name)
        self._schema_ready = True
        logger.info("Document store schema ready (table=%s)", entries_table.name)

    async def _table_exists(self) -> bool:
        try:
            async with self._connection("initialize") as conn:
                return bool(await conn.run_sync(_has_entries_table))
        except StoreQueryError:
            return False

    async def _ensure_schema(self) -> None:
        if self._schema_ready:
            return
        async with self._schema_lock:
            if not self._schema_ready:
                await self.initialize()

    @asynccontextmanager
    async def _connection(self, operation: str) -> AsyncIterator[AsyncConnection]:
        """Open one connection + transaction; always closed on exit."""
        try:
            conn = await self._engine.connect()
        except (SQLAlchemyError, OSError) as exc:
            raise StoreUnavailableError(str(exc)) from exc
        try:
            async with conn.begin():
                yield conn
        except SQLAlchemyError as exc:
            raise StoreQueryError(operation, str(exc)) from exc
        finally:
            await conn.close()

    # -- Write path --

    async def set(
        self,
        key: str,
        value: Any,
        *,
        skip_expire: bool = False,
    ) -> bool:
        """Upsert a document. Returns True on success, False on any failure."""
        now = self._now()
        expiration = self._candidate_expiration(now, skip_expire=skip_expire)
        try:
            document = _encode(key, value)
            await self._ensure_schema()
            async with self._connection("set") as conn:
                stmt = build_upsert(
                    conn.dialect.name,
                    key=key,
                    value=document,
                    expiration=expiration,
                    now=now,
                )
                await conn.execute(stmt)
        except DocstoreError as exc:
            log_structured_error(logger, exc, operation="set", key=key)
            return False
        return True

    # -- Read path --

    async def get(
        self,
        key: str,
        *,
        skip_expire: bool = False,
    ) -> Any | Literal[False]:
        """Return the live document for key, or False (missing, expired or error)."""
        result = await self.lookup(key, skip_expire=skip_expire)
        return result.value if result.found else False

    async def lookup(
        self,
        key: str,
        *,
        skip_expire: bool = False,
    ) -> LookupResult:
        """Read a live document, reporting missing and failed reads separately.

        A hit on a finite-TTL entry schedules a read-extension to
        now + ttl unless skip_expire is set or no TTL is configured.
        The result is returned without waiting for that write.
        """
        now = self._now()
        try:
            await self._ensure_schema()
            async with self._connection("get") as conn:
                result = await conn.execute(_select_live(key, now))
                row = result.first()
            if row is None:
                return LookupResult.miss()
            document = _decode(key, row.value)
        except DocstoreError as exc:
            structured = log_structured_error(logger, exc, operation="get", key=key)
            return LookupResult.failure(structured.error_code)

        if row.expiration != NEVER_EXPIRES and self._config.ttl and not skip_expire:
            self._schedule_renewal(key, now + self._config.ttl)
        return LookupResult.hit(document)

    # -- Read-extension (detached) --

    def _schedule_renewal(self, key: str, expiration: int) -> None:
        task = asyncio.create_task(self._renew(key, expiration))
        self._renewals.add(task)
        task.add_done_callback(self._renewals.discard)

    async def _renew(self, key: str, expiration: int) -> None:
        stmt = (
            sa.update(entries_table)
            .where(entries_table.c.entry_id == key)
            .values(expiration=expiration)
        )
        try:
            async with self._connection("renew") as conn:
                await conn.execute(stmt)
        except Exception as exc:
            # Best effort: never surfaced to the reader, never retried.
            log_structured_error(
                logger,
                exc,
                operation="renew",
                key=key,
                context={"expiration": expiration},
                level=logging.WARNING,
            )

    async def drain(self) -> None:
        """Wait until all scheduled read-extension writes have finished."""
        while self._renewals:
            await asyncio.gather(*self._renewals, return_exceptions=True)

    # -- Housekeeping --

    async def purge_expired(self) -> int:
        """Delete rows whose finite expiration is at or before now.

        Raises:
            DocstoreError: If the schema or the delete fails.
        """
        now = self._now()
        expiration = entries_table.c.expiration
        stmt = sa.delete(entries_table).where(
            expiration != NEVER_EXPIRES,
            expiration <= now,
        )
        try:
            await self._ensure_schema()
            async with self._connection("purge_expired") as conn:
                result = await conn.execute(stmt)
        except DocstoreError as exc:
            log_structured_error(logger, exc, operation="purge_expired")
            raise
        logger.info("Purged %d expired entries", result.rowcount)
        return result.rowcount

    async def close(self) -> None:
        """Drain pending renewals and dispose the engine if this store created it."""
        await self.drain()
        if self._owns_engine:
            await self._engine.dispose()

    # -- Helpers --

    def _now(self) -> int:
        return math.floor(self._clock())

    def _candidate_expiration(self, now: int, *, skip_expire: bool) -> int:
        if self._config.ttl and not skip_expire:
            return now + self._config.ttl
        return NEVER_EXPIRES


def _select_live(key: str, now: int) -> sa.Select[Any]:
    c = entries_table.c
    return (
        sa.select(c.value, c.expiration)
        .where(
            c.entry_id == key,
            sa.or_(c.expiration == NEVER_EXPIRES, c.expiration > now),
        )
        .limit(1)
    )


def _has_entries_table(sync_conn: Any) -> bool:
    return sa.inspect(sync_conn).has_table(entries_table.name)


def _encode(key: str, value: Any) -> str:
    try:
        return json.dumps(value)
    except (TypeError, ValueError, RecursionError) as exc:
        raise SerializationError(key, str(exc)) from exc


def _decode(key: str, raw: str) -> Any:
    try:
        return json.loads(raw)
    except (TypeError, ValueError, RecursionError) as exc:
        msg = f"Stored document for key {key!r} is not valid JSON"
        raise SerializationError(key, msg) from exc
