"""
Shared FastAPI dependencies.
"""
from functools import lru_cache

from violation_scoring import ViolationService


@lru_cache()
def get_violation_service() -> ViolationService:
    """Process-wide service bound to the configured database."""
    return ViolationService()
