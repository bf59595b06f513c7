"""Shared Fake adapters for testing without unittest.mock.

Real Python classes with preset behavior, no AsyncMock/MagicMock.
"""

from tests.fakes.clock import FakeClock
from tests.fakes.engine import FakeConnection, FakeEngine, FakeResult, FakeRow

__all__ = [
    "FakeClock",
    "FakeConnection",
    "FakeEngine",
    "FakeResult",
    "FakeRow",
]
