"""Integration test conftest - tests requiring a live database.

Requires:
    - PostgreSQL reachable via DB_HOST / DB_PORT / DB_USER / DB_PASSWORD / DB_NAME
      (defaults: localhost:5432, docstore/docstore, database docstore_test)
    Tests skip themselves when the server is unreachable.

Usage:
    pytest tests/integration/ -m integration
"""

from __future__ import annotations
