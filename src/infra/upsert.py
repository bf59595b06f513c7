"""Dialect-aware atomic upsert for the entries table.

A write inserts (key, value, candidate_expiration) or, when the key exists,
overwrites the value and merges the expiration:

    expiration = CASE
        WHEN expiration = -1 OR expiration > :now THEN <candidate>
        ELSE expiration
    END

The condition looks at the *existing* row's liveness, not at the candidate.
A live row (never-expire or not yet expired) takes the candidate, which may
be shorter or -1. An already expired row keeps its stale expiration, so the
rewritten value stays invisible to readers.

Supported backends: postgresql, mysql/mariadb (ON DUPLICATE KEY UPDATE),
sqlite (ON CONFLICT).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import sqlalchemy as sa
from sqlalchemy.dialects import mysql, postgresql, sqlite

from src.infra.models import entries_table
from src.shared.errors import ConfigError
from src.shared.types import NEVER_EXPIRES

if TYPE_CHECKING:
    from sqlalchemy.sql.expression import ColumnElement, Executable


def merged_expiration(candidate: ColumnElement[int], now: int) -> ColumnElement[int]:
    """CASE expression choosing the stored expiration after a write."""
    existing = entries_table.c.expiration
    return sa.case(
        (sa.or_(existing == NEVER_EXPIRES, existing > now), candidate),
        else_=existing,
    )


def build_upsert(
    dialect_name: str,
    *,
    key: str,
    value: str,
    expiration: int,
    now: int,
) -> Executable:
    """Build the upsert statement for the given SQLAlchemy dialect.

    Raises:
        ConfigError: If the dialect has no native upsert support here.
    """
    row = {"entry_id": key, "value": value, "expiration": expiration}

    if dialect_name in ("mysql", "mariadb"):
        my_stmt = mysql.insert(entries_table).values(**row)
        return my_stmt.on_duplicate_key_update(
            value=my_stmt.inserted.value,
            expiration=merged_expiration(my_stmt.inserted.expiration, now),
        )

    if dialect_name == "postgresql":
        pg_stmt = postgresql.insert(entries_table).values(**row)
        return pg_stmt.on_conflict_do_update(
            index_elements=[entries_table.c.entry_id],
            set_={
                "value": pg_stmt.excluded.value,
                "expiration": merged_expiration(pg_stmt.excluded.expiration, now),
            },
        )

    if dialect_name == "sqlite":
        lite_stmt = sqlite.insert(entries_table).values(**row)
        return lite_stmt.on_conflict_do_update(
            index_elements=[entries_table.c.entry_id],
            set_={
                "value": lite_stmt.excluded.value,
                "expiration": merged_expiration(lite_stmt.excluded.expiration, now),
            },
        )

    msg = f"No upsert support for dialect {dialect_name!r}"
    raise ConfigError(msg, field="driver")
