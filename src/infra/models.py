"""SQLAlchemy ORM models for the document store.

Maps to migration DDL in migrations/versions/:
  001_create_entries.py -> EntryModel

The store provisions this table itself via Base.metadata.create_all
(idempotent); the alembic revision exists for deployments that manage
schema out of band. Both must stay in sync (see tests/unit/infra/test_models.py).
"""

from __future__ import annotations

import sqlalchemy as sa
from sqlalchemy.dialects import mysql
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# LONGTEXT on MySQL/MariaDB; plain TEXT is already unbounded elsewhere.
_DOCUMENT_TEXT = sa.Text().with_variant(mysql.LONGTEXT(), "mysql", "mariadb")


class Base(DeclarativeBase):
    """Declarative base for document store ORM models."""


class EntryModel(Base):
    """One stored document with its expiration.

    expiration is Unix seconds, or -1 for never-expire.
    See: 001_create_entries migration
    """

    __tablename__ = "entries"

    entry_id: Mapped[str] = mapped_column(sa.String(255), primary_key=True)
    value: Mapped[str] = mapped_column(_DOCUMENT_TEXT, nullable=False)
    expiration: Mapped[int] = mapped_column(sa.Integer(), nullable=False)

    __table_args__ = (sa.Index("idx_expiration", "expiration"),)


entries_table: sa.Table = EntryModel.__table__  # type: ignore[assignment]
