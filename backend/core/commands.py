"""
Command handlers for the stock dashboard.

StockSession owns the ledger for the lifetime of the app. Each command
runs as one unit under a lock: validate -> mutate or reject -> persist ->
refresh_all. Rejected commands never touch the ledger or the store.
"""

import asyncio
import logging
import math
from typing import Optional, Protocol

from core.exceptions import (
    ConfirmationRequiredError,
    InvalidQuantityError,
    InvalidTargetError,
    PersistenceFailure,
    ValidationError,
)
from core.export import export_csv
from core.ledger import Ledger
from core.views import is_placeholder, refresh_all
from schemas.stock import AddStockForm, RecordSaleForm, StockItem, stock_value
from schemas.views import Dashboard

logger = logging.getLogger(__name__)

PLACEHOLDER_TARGET_MESSAGE = (
    'This is a placeholder item. Please add stock for this item first using the "Add Stock" form.'
)


class LedgerStore(Protocol):
    async def load(self) -> list[StockItem]: ...

    async def save(self, items: list[StockItem]) -> bool: ...

    async def clear(self) -> bool: ...


def _parse_float(raw) -> Optional[float]:
    if raw is None or isinstance(raw, bool):
        return None
    try:
        v = float(raw.strip() if isinstance(raw, str) else raw)
    except (TypeError, ValueError):
        return None
    return v if math.isfinite(v) else None


def _parse_int(raw) -> Optional[int]:
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if raw.is_integer() else None
    try:
        return int(str(raw).strip())
    except ValueError:
        return None


class StockSession:
    def __init__(self, store: LedgerStore, ledger: Optional[Ledger] = None):
        self.store = store
        self.ledger = ledger if ledger is not None else Ledger()
        self._lock = asyncio.Lock()

    @classmethod
    async def open(cls, store: LedgerStore) -> "StockSession":
        items = await store.load()
        return cls(store, Ledger(items))

    async def close(self) -> None:
        async with self._lock:
            await self._persist()

    def dashboard(self) -> Dashboard:
        return refresh_all(self.ledger)

    def export(self) -> str:
        return export_csv(self.ledger)

    async def _persist(self) -> Optional[PersistenceFailure]:
        if await self.store.save(self.ledger.items):
            return None
        return PersistenceFailure(items=len(self.ledger))

    async def add_stock(self, form: AddStockForm) -> tuple[StockItem, Dashboard, Optional[PersistenceFailure]]:
        name = (form.name or "").strip()
        category = (form.category or "").strip()
        price = _parse_float(form.price)
        quantity = _parse_int(form.quantity)

        if not name:
            raise ValidationError("Item name is required", field="name")
        if price is None or price <= 0:
            raise ValidationError("Price must be a number greater than 0", field="price")
        if quantity is None or quantity <= 0:
            raise ValidationError("Quantity must be a whole number greater than 0", field="quantity")
        if stock_value(price, quantity) is None:
            raise ValidationError("Price times quantity is too large", field="quantity")

        async with self._lock:
            item = self.ledger.add_item(name, category, price, quantity)
            if item is None:
                raise ValidationError("Total stock value is too large", field="quantity")
            failure = await self._persist()
            logger.info("Added stock %r x%d at %s", item.name, item.quantity, item.price)
            return item, refresh_all(self.ledger), failure

    def _resolve_target(self, raw) -> int:
        if raw is None or isinstance(raw, bool) or raw == "":
            raise InvalidTargetError(item=raw)
        if isinstance(raw, str) and is_placeholder(raw):
            raise InvalidTargetError(PLACEHOLDER_TARGET_MESSAGE, item=raw)
        index = _parse_int(raw)
        if index is None or not 0 <= index < len(self.ledger):
            raise InvalidTargetError(item=raw)
        return index

    async def record_sale(self, form: RecordSaleForm) -> tuple[int, StockItem, Dashboard, Optional[PersistenceFailure]]:
        async with self._lock:
            index = self._resolve_target(form.item)
            qty = _parse_int(form.quantity)
            if qty is None:
                raise InvalidQuantityError(quantity=form.quantity)
            item = self.ledger.record_sale(index, qty)
            failure = await self._persist()
            logger.info("Recorded sale of %d x %r (%d left)", qty, item.name, item.remaining)
            return index, item, refresh_all(self.ledger), failure

    async def reset(self, confirmed: bool) -> tuple[Dashboard, Optional[PersistenceFailure]]:
        if not confirmed:
            raise ConfirmationRequiredError()
        async with self._lock:
            self.ledger.reset()
            failure = None
            if not await self.store.clear():
                failure = PersistenceFailure("Stored stock could not be cleared")
            logger.info("Stock ledger reset")
            return refresh_all(self.ledger), failure
