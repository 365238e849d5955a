"""Pytest configuration and fixtures."""

from datetime import datetime
from decimal import Decimal

import pytest

from microcredit.book import MicrocreditBook
from microcredit.models import Client
from microcredit.store import InMemoryKeyValueStore

FIXED_NOW = datetime(2026, 3, 15, 10, 30, 0)


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def kv() -> InMemoryKeyValueStore:
    """Fresh in-memory key-value store."""
    return InMemoryKeyValueStore()


@pytest.fixture
def book(kv: InMemoryKeyValueStore) -> MicrocreditBook:
    """Book over an in-memory store with a frozen clock and capital 10000."""
    return MicrocreditBook(kv, clock=lambda: FIXED_NOW)


@pytest.fixture
def client(book: MicrocreditBook) -> Client:
    """Registered sample client."""
    return book.clients.create_client("Maria Silva", "11999990000", notes="Pays on time")


@pytest.fixture
def starting_capital() -> Decimal:
    return Decimal("10000")
