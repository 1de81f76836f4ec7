"""
Persistence adapter for the stock ledger.

The whole ledger is stored as one JSON array under a fixed key in the
key-value store. Missing or unreadable data loads as an empty ledger.
"""

import logging
from typing import List

from pydantic import TypeAdapter, ValidationError
from sqlalchemy.exc import SQLAlchemyError

from schemas.stock import StockItem

from .kv_store import KeyValueStore

logger = logging.getLogger(__name__)

STORAGE_KEY = "stocks"

_items_adapter = TypeAdapter(List[StockItem])


def serialize_items(items: List[StockItem]) -> bytes:
    return _items_adapter.dump_json(items)


def deserialize_items(blob: bytes) -> List[StockItem]:
    return _items_adapter.validate_json(blob)


class StockStore:
    def __init__(self, kv: KeyValueStore, key: str = STORAGE_KEY):
        self.kv = kv
        self.key = key

    async def load(self) -> List[StockItem]:
        try:
            blob = await self.kv.get(self.key)
        except SQLAlchemyError:
            logger.exception("Could not read %r from the store; starting empty", self.key)
            return []
        if blob is None:
            return []
        try:
            items = deserialize_items(blob)
        except ValidationError as e:
            logger.warning("Discarding corrupt ledger under %r: %s", self.key, e.errors()[:3])
            return []
        logger.info("Loaded %d stock items", len(items))
        return items

    async def save(self, items: List[StockItem]) -> bool:
        try:
            await self.kv.set(self.key, serialize_items(items))
        except SQLAlchemyError:
            logger.exception("Could not save %d stock items", len(items))
            return False
        return True

    async def clear(self) -> bool:
        try:
            await self.kv.delete(self.key)
        except SQLAlchemyError:
            logger.exception("Could not clear %r", self.key)
            return False
        return True
