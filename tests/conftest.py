"""
Shared fixtures: in-memory SQLite database and a controllable clock.
"""

import pytest
from datetime import datetime, timezone

from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from core.clock import MockClock
from database.engine import create_all_tables, create_session_factory
from violation_scoring import ViolationService


START_TIME = datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def engine():
    """Fresh in-memory database with both tables."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    create_all_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def session(session_factory):
    session = session_factory()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def clock():
    return MockClock(START_TIME)


@pytest.fixture
def service(session_factory, clock):
    return ViolationService(session_factory=session_factory, clock=clock)
