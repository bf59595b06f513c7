"""Shared domain types used across layers.

These types flow through the DocumentStorePort interface and must remain
stable. Stored rows themselves are described by src.infra.models.EntryModel.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any

NEVER_EXPIRES = -1
"""Sentinel expiration: the entry never expires."""


class LookupStatus(enum.Enum):
    FOUND = "found"
    MISSING = "missing"  # absent or expired
    ERROR = "error"


@dataclass(frozen=True)
class LookupResult:
    """Tagged outcome of a read.

    Distinguishes a missing/expired key from a store malfunction, which the
    boolean-compatible `get` surface collapses into `False`.
    """

    status: LookupStatus
    value: Any = None
    error_code: str = ""

    @property
    def found(self) -> bool:
        return self.status is LookupStatus.FOUND

    @classmethod
    def hit(cls, value: Any) -> LookupResult:
        return cls(status=LookupStatus.FOUND, value=value)

    @classmethod
    def miss(cls) -> LookupResult:
        return cls(status=LookupStatus.MISSING)

    @classmethod
    def failure(cls, error_code: str) -> LookupResult:
        return cls(status=LookupStatus.ERROR, error_code=error_code)
