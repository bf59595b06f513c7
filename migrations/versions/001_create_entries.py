"""Create the entries table for the document store.

Revision ID: 001_entries
Revises: None
Create Date: 2026-10-18

Rollback: alembic downgrade -1
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import mysql

revision = "001_entries"
down_revision = None
branch_labels = None
depends_on = None

# LONGTEXT on MySQL/MariaDB, TEXT elsewhere (matches src.infra.models)
_DOCUMENT_TEXT = sa.Text().with_variant(mysql.LONGTEXT(), "mysql", "mariadb")


def upgrade() -> None:
    op.create_table(
        "entries",
        sa.Column("entry_id", sa.String(255), primary_key=True),
        sa.Column("value", _DOCUMENT_TEXT, nullable=False),
        sa.Column(
            "expiration",
            sa.Integer(),
            nullable=False,
            comment="Unix seconds, or -1 for never-expire",
        ),
    )

    # Supports expiration filtering on reads and expired-row purges
    op.create_index(
        "idx_expiration",
        "entries",
        ["expiration"],
    )


def downgrade() -> None:
    op.drop_index("idx_expiration", table_name="entries")
    op.drop_table("entries")
