"""Unified error hierarchy for the document store.

All store errors inherit from DocstoreError and carry a machine-readable
code. The public read/write surface never raises these; they are logged
and folded into the boolean / tagged results instead.
"""

from __future__ import annotations


class DocstoreError(Exception):
    """Base error for all document store exceptions."""

    def __init__(self, message: str, code: str = "DOCSTORE_ERROR") -> None:
        self.code = code
        super().__init__(message)


class ConfigError(DocstoreError):
    """Store configuration is invalid."""

    def __init__(self, message: str, field: str = "") -> None:
        self.field = field
        super().__init__(message, code="CONFIG_INVALID")


# -- Backing engine errors --


class StoreUnavailableError(DocstoreError):
    """The backing engine cannot be reached."""

    def __init__(self, message: str = "") -> None:
        super().__init__(
            message or "Backing store is unavailable",
            code="STORE_UNAVAILABLE",
        )


class SchemaError(DocstoreError):
    """Provisioning the entries table failed."""

    def __init__(self, message: str = "Schema provisioning failed") -> None:
        super().__init__(message, code="SCHEMA_FAILED")


class StoreQueryError(DocstoreError):
    """A statement was rejected or failed inside the backing engine."""

    def __init__(self, operation: str, message: str = "") -> None:
        self.operation = operation
        super().__init__(
            message or f"Query failed during {operation}",
            code="QUERY_FAILED",
        )


class SerializationError(DocstoreError):
    """A document could not be encoded to or decoded from text."""

    def __init__(self, key: str, message: str = "") -> None:
        self.key = key
        super().__init__(
            message or f"Document for key {key!r} is not serializable",
            code="SERIALIZATION_FAILED",
        )


__all__ = [
    "ConfigError",
    "DocstoreError",
    "SchemaError",
    "SerializationError",
    "StoreQueryError",
    "StoreUnavailableError",
]
