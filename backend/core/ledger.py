"""
In-memory stock ledger.

The ledger is an ordered, append-only list of StockItem. Insertion order is
display order and the index used to address items when recording sales.
Only add_item, record_sale and reset mutate it.
"""

import math
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional

from core.exceptions import InsufficientStockError, InvalidQuantityError, InvalidTargetError
from schemas.stock import StockItem, stock_value


@dataclass(frozen=True)
class Totals:
    total_stock: int
    stock_sold: int
    stock_remaining: int
    total_value: float


class Ledger:
    def __init__(self, items: Optional[Iterable[StockItem]] = None):
        self._items: List[StockItem] = list(items or [])

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[StockItem]:
        return iter(self._items)

    def __getitem__(self, index: int) -> StockItem:
        return self._items[index]

    @property
    def items(self) -> List[StockItem]:
        """Snapshot copy; mutating it does not touch the ledger."""
        return [item.model_copy() for item in self._items]

    def add_item(self, name: str, category: str, price: float, quantity: int) -> Optional[StockItem]:
        """
        Append a new item with sold = 0.

        Returns None (and leaves the ledger untouched) when the name is blank,
        price is not a positive number or quantity is not a positive integer,
        or when the line value (or the ledger total) would overflow a float.
        """
        name = (name or "").strip()
        if not name:
            return None
        if isinstance(price, bool) or not isinstance(price, (int, float)):
            return None
        if not math.isfinite(price) or price <= 0:
            return None
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            return None
        worth = stock_value(price, quantity)
        if worth is None or not math.isfinite(self.aggregate().total_value + worth):
            return None

        item = StockItem(
            name=name,
            category=(category or "").strip(),
            price=float(price),
            quantity=quantity,
            sold=0,
        )
        self._items.append(item)
        return item

    def record_sale(self, index: int, qty: int) -> StockItem:
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(self._items):
            raise InvalidTargetError(index=index)
        if isinstance(qty, bool) or not isinstance(qty, int) or qty <= 0:
            raise InvalidQuantityError(quantity=qty)

        item = self._items[index]
        if qty > item.remaining:
            raise InsufficientStockError(requested=qty, available=item.remaining)

        item.sold += qty
        return item

    def reset(self) -> None:
        self._items = []

    def aggregate(self) -> Totals:
        total_stock = 0
        stock_sold = 0
        total_value = 0.0
        for item in self._items:
            total_stock += item.quantity
            stock_sold += item.sold
            total_value += item.price * (item.quantity - item.sold)
        return Totals(
            total_stock=total_stock,
            stock_sold=stock_sold,
            stock_remaining=total_stock - stock_sold,
            total_value=total_value,
        )
