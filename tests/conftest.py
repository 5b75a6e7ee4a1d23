"""Pytest configuration and fixtures."""

import itertools
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_optional_registry, get_registry
from app.db.link_store import InMemoryLinkStore
from app.services.link_registry import LinkRegistry


class FakeClock:
    """Deterministic clock: each call is one second after the previous one."""

    def __init__(self, start=None):
        self.current = start or datetime(2024, 1, 1, tzinfo=timezone.utc)
        self.calls = []

    def __call__(self):
        self.current = self.current + timedelta(seconds=1)
        self.calls.append(self.current)
        return self.current


@pytest.fixture
def sequence_generator():
    """Factory for id generators yielding the given identifiers, then numbered fallbacks."""
    def make(*short_ids):
        fallback = (f"gen{n:05d}" for n in itertools.count())
        return itertools.chain(short_ids, fallback).__next__
    return make


@pytest.fixture
def store():
    return InMemoryLinkStore()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def registry(store, clock):
    return LinkRegistry(store, clock=clock)


@pytest.fixture
def client(registry):
    """Test client wired to an in-memory registry (no MongoDB needed)."""
    from app.main import app

    app.dependency_overrides[get_registry] = lambda: registry
    app.dependency_overrides[get_optional_registry] = lambda: registry

    test_client = TestClient(app)
    yield test_client

    app.dependency_overrides.clear()
