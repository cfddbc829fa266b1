"""
Core Module Package.

Infrastructure shared by the scoring package and the API.

Components:
- clock: Unified time abstraction
"""

from .clock import (
    ClockProtocol,
    SystemClock,
    MockClock,
    to_db_time,
    from_db_time,
)

__all__ = [
    "ClockProtocol",
    "SystemClock",
    "MockClock",
    "to_db_time",
    "from_db_time",
]
