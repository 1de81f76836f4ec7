import math
from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from schemas.views import Dashboard


# Form fields arrive either as raw text (HTML form) or as JSON numbers;
# parsing happens in the command handlers.
RawNumber = Union[int, float, str, None]


def stock_value(price: float, quantity: int) -> Optional[float]:
    """price * quantity as a float, or None when it does not fit in one."""
    try:
        worth = float(price) * float(quantity)
    except (OverflowError, TypeError, ValueError):
        return None
    return worth if math.isfinite(worth) else None


class StockItem(BaseModel):
    name: str
    category: str = ""
    price: float
    quantity: int
    sold: int = 0

    @field_validator("name")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("name is required")
        return v

    @field_validator("category", mode="before")
    @classmethod
    def _strip_category(cls, v: Optional[str]) -> str:
        return (v or "").strip()

    @field_validator("price")
    @classmethod
    def _price_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("price must be > 0")
        return v

    @field_validator("quantity")
    @classmethod
    def _quantity_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("quantity must be > 0")
        return v

    @model_validator(mode="after")
    def _sold_within_quantity(self):
        if self.sold < 0 or self.sold > self.quantity:
            raise ValueError("sold must be between 0 and quantity")
        if stock_value(self.price, self.quantity) is None:
            raise ValueError("price * quantity is too large")
        return self

    @property
    def remaining(self) -> int:
        return self.quantity - self.sold

    @property
    def value(self) -> float:
        return self.price * self.remaining


class StockItemOut(BaseModel):
    index: int
    name: str
    category: str
    price: float
    quantity: int
    sold: int
    remaining: int
    value: float


class AddStockForm(BaseModel):
    name: Optional[str] = None
    category: Optional[str] = None
    price: RawNumber = None
    quantity: RawNumber = None


class RecordSaleForm(BaseModel):
    # Sale-target option value: a ledger index or a placeholder id
    item: Union[int, str, None] = None
    quantity: RawNumber = None


class ResetRequest(BaseModel):
    confirm: bool = False


class CommandResult(BaseModel):
    item: Optional[StockItemOut] = None
    dashboard: Dashboard
    warning: Optional[str] = Field(default=None, description="Set when the ledger could not be persisted")
