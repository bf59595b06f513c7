"""Port interfaces - Layer boundary contracts.

    DocumentStorePort - TTL-aware document persistence
"""

from src.ports.document_store_port import DocumentStorePort

__all__ = [
    "DocumentStorePort",
]
