"""Composition root -- wires configuration into a ready document store.

- Reads configuration from environment variables (DB_* via StoreConfig,
  DOCUMENT_STORE_EXPIRE for the default TTL)
- Creates the engine + SqlDocumentStore
- No module-level store instance: callers own the store they build

Usage:
    store = build_document_store({"expire": 86400})
    await store.initialize()
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Any

from src.infra.config import StoreConfig
from src.store.document_store import SqlDocumentStore

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)


def build_document_store(
    options: Mapping[str, Any] | None = None,
    *,
    env: Mapping[str, str] | None = None,
) -> SqlDocumentStore:
    """Build a SqlDocumentStore from explicit options and the environment.

    Explicit options win for `expire`; DOCUMENT_STORE_EXPIRE only fills it
    in when no TTL was supplied. Connection parameters follow
    StoreConfig.resolve (environment overrides options).
    """
    env = os.environ if env is None else env
    resolved: dict[str, Any] = dict(options or {})
    if resolved.get("expire") is None and env.get("DOCUMENT_STORE_EXPIRE"):
        resolved["expire"] = env["DOCUMENT_STORE_EXPIRE"]

    config = StoreConfig.resolve(resolved, env=env)
    store = SqlDocumentStore(config)
    logger.info(
        "Document store assembled: driver=%s host=%s database=%s ttl=%s",
        config.driver,
        config.host,
        config.database,
        config.ttl or "never",
    )
    return store
