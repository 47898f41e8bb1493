"""
Pytest configuration and shared fixtures for the laundry shop tests.
"""

from datetime import datetime, timedelta, timezone

import pytest

from laundry.domain.entities import Repository
from laundry.services.authentication import SessionManager
from laundry.services.orders import OrderService
from laundry.storage.kv_store import MemoryKeyValueStore
from laundry.storage.record_store import RecordStore


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc))


@pytest.fixture
def kv_store():
    """Isolated in-memory key-value store."""
    return MemoryKeyValueStore()


@pytest.fixture
def record_store(kv_store, clock):
    """Record store seeded with the default admin and packages."""
    records = RecordStore(kv_store, clock=clock)
    records.initialize()
    return records


@pytest.fixture
def repo(record_store):
    return Repository(record_store)


@pytest.fixture
def sessions(repo, clock):
    return SessionManager(repo, clock=clock)


@pytest.fixture
def order_service(repo, clock):
    return OrderService(repo, clock=clock)


@pytest.fixture
def customer(sessions):
    """A registered customer; registration leaves them logged in."""
    return sessions.register(
        name="Siti Aminah",
        email="siti@example.com",
        phone="081234567890",
        username="siti",
        password="rahasia",
    )
