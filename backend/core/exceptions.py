"""
Errors raised by the stock ledger and its command handlers.

Every error carries a structured code for programmatic handling:

    try:
        session.ledger.record_sale(0, 8)
    except InsufficientStockError as e:
        print(f"Only {e.data['available']} left")
"""

from typing import Any, Optional


class StockError(Exception):
    code = "STOCK_ERROR"
    default_message = "Stock operation failed"

    def __init__(self, message: Optional[str] = None, **data: Any):
        self.message = message or self.default_message
        self.data = data
        super().__init__(self.message)

    def as_dict(self) -> dict[str, Any]:
        """Serialize to dict (useful for APIs)."""
        return {"code": self.code, "message": self.message, "data": self.data}


class ValidationError(StockError):
    code = "VALIDATION_ERROR"
    default_message = "Invalid input"


class InvalidQuantityError(ValidationError):
    code = "INVALID_QUANTITY"
    default_message = "Invalid quantity"


class InsufficientStockError(InvalidQuantityError):
    code = "INSUFFICIENT_STOCK"
    default_message = "Invalid quantity: not enough stock remaining"


class InvalidTargetError(StockError):
    code = "INVALID_TARGET"
    default_message = "Please select a valid stock item to record a sale."


class ConfirmationRequiredError(ValidationError):
    code = "CONFIRMATION_REQUIRED"
    default_message = "Resetting deletes all stock data and must be confirmed"


class PersistenceFailure(StockError):
    code = "PERSISTENCE_FAILURE"
    default_message = "Stock could not be saved; changes are kept for this session only"
