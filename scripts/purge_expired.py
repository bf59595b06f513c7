#!/usr/bin/env python3
"""Delete expired document store entries.

Reads do not see expired rows, but nothing removes them; run this
periodically (cron, k8s CronJob) to reclaim space.

Usage:
    uv run python scripts/purge_expired.py

Environment: DB_DRIVER, DB_HOST, DB_PORT, DB_USER, DB_PASSWORD, DB_NAME
"""

from __future__ import annotations

import asyncio
import logging
import sys

from src.main import build_document_store
from src.shared.errors import DocstoreError


async def main() -> int:
    store = build_document_store()
    try:
        removed = await store.purge_expired()
    except DocstoreError as exc:
        print(f"Purge failed [{exc.code}]: {exc}", file=sys.stderr)
        return 1
    finally:
        await store.close()
    print(f"Purged {removed} expired entries")
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    sys.exit(asyncio.run(main()))
