"""
Shared fixtures for the stock tracker tests.

- FakeStore: in-memory ledger store that can be told to fail
- ledgers: empty and pre-filled Ledger instances
- sqlite: per-test SQLite database for persistence and HTTP tests
"""

from collections.abc import Generator
from typing import List, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from core.ledger import Ledger
from db.stock_store import deserialize_items, serialize_items
from schemas.stock import StockItem


class FakeStore:
    """Ledger store that keeps the serialized blob in memory."""

    def __init__(self, items: Optional[List[StockItem]] = None):
        self.blob: Optional[bytes] = serialize_items(items) if items else None
        self.fail_saves = False
        self.fail_clears = False
        self.saves = 0

    async def load(self) -> List[StockItem]:
        if self.blob is None:
            return []
        return deserialize_items(self.blob)

    async def save(self, items: List[StockItem]) -> bool:
        if self.fail_saves:
            return False
        self.blob = serialize_items(items)
        self.saves += 1
        return True

    async def clear(self) -> bool:
        if self.fail_clears:
            return False
        self.blob = None
        return True

    def stored(self) -> List[StockItem]:
        return deserialize_items(self.blob) if self.blob is not None else []


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def empty_ledger() -> Ledger:
    return Ledger()


@pytest.fixture
def rice_ledger() -> Ledger:
    ledger = Ledger()
    ledger.add_item("Rice Bag", "Grains", 25000, 10)
    return ledger


@pytest.fixture
def mixed_ledger() -> Ledger:
    ledger = Ledger()
    ledger.add_item("Rice Bag", "Grains", 25000, 10)
    ledger.add_item("Palm Oil 5L", "Oils", 9500.5, 4)
    ledger.add_item("Sugar 1kg", "", 1200, 50)
    ledger.record_sale(0, 3)
    ledger.record_sale(2, 50)
    return ledger


@pytest.fixture
def sqlite_engine(tmp_path):
    return create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'shoply-test.db'}", poolclass=NullPool)


@pytest.fixture
def sqlite_session_maker(sqlite_engine):
    return async_sessionmaker(sqlite_engine, expire_on_commit=False)


@pytest.fixture
def app(sqlite_engine, sqlite_session_maker):
    from main import create_app
    return create_app(engine=sqlite_engine, session_maker=sqlite_session_maker)


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    # Entering the client runs the lifespan (tables + session load)
    with TestClient(app) as c:
        yield c
