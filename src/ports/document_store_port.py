"""DocumentStorePort - TTL-aware document persistence interface.

Values are opaque JSON documents. Each entry may expire; a read of a live,
finite-TTL entry may push its expiration forward (read-extension).
Expiration is enforced lazily at read time, never by in-process eviction.

Real implementation: src.store.document_store.SqlDocumentStore
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Literal

if TYPE_CHECKING:
    from src.shared.types import LookupResult


class DocumentStorePort(ABC):
    """Port: TTL-aware document read/write."""

    @abstractmethod
    async def set(
        self,
        key: str,
        value: Any,
        *,
        skip_expire: bool = False,
    ) -> bool:
        """Store a document, merging expiration with any existing entry.

        Args:
            key: Entry key.
            value: JSON-serializable document.
            skip_expire: Write with never-expire instead of the default TTL.

        Returns:
            True on success, False on any failure.
        """

    @abstractmethod
    async def get(
        self,
        key: str,
        *,
        skip_expire: bool = False,
    ) -> Any | Literal[False]:
        """Retrieve a live document.

        Args:
            key: Entry key.
            skip_expire: Do not extend the entry's expiration on this read.

        Returns:
            The document, or False if absent, expired, or on any error.
        """

    @abstractmethod
    async def lookup(
        self,
        key: str,
        *,
        skip_expire: bool = False,
    ) -> LookupResult:
        """Retrieve a live document as a tagged result.

        Same semantics as get(), but a missing/expired key and a store
        failure are reported as distinct statuses.
        """

    @abstractmethod
    async def purge_expired(self) -> int:
        """Delete expired entries.

        Returns:
            Number of entries removed.
        """

    @abstractmethod
    async def close(self) -> None:
        """Release resources held by the store."""
