"""Document store implementations of DocumentStorePort."""

from src.store.document_store import SqlDocumentStore

__all__ = ["SqlDocumentStore"]
