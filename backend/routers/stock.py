import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from core.commands import StockSession
from core.exceptions import InsufficientStockError, InvalidTargetError, StockError
from core.export import EXPORT_FILENAME
from schemas.stock import (
    AddStockForm,
    CommandResult,
    RecordSaleForm,
    ResetRequest,
    StockItem,
    StockItemOut,
)
from schemas.views import Dashboard

logger = logging.getLogger(__name__)

router = APIRouter()


def get_stock_session(request: Request) -> StockSession:
    return request.app.state.stock_session


def _item_out(index: int, item: StockItem) -> StockItemOut:
    return StockItemOut(index=index, remaining=item.remaining, value=item.value, **item.model_dump())


def _http_error(e: StockError) -> HTTPException:
    if isinstance(e, InvalidTargetError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(e, InsufficientStockError):
        code = status.HTTP_409_CONFLICT
    else:
        code = 422
    logger.info("Rejected stock command: %s", e.as_dict())
    return HTTPException(status_code=code, detail=e.as_dict())


@router.get("", response_model=Dashboard)
async def get_dashboard(session: StockSession = Depends(get_stock_session)):
    """Stats, table, sale targets and chart series for the current ledger"""
    return session.dashboard()


@router.get("/items", response_model=List[StockItemOut])
async def list_items(session: StockSession = Depends(get_stock_session)):
    return [_item_out(i, item) for i, item in enumerate(session.ledger)]


@router.post("/items", response_model=CommandResult, status_code=status.HTTP_201_CREATED)
async def add_stock(form: AddStockForm, session: StockSession = Depends(get_stock_session)):
    """Add a stock line; name, price and quantity are required"""
    try:
        item, dashboard, failure = await session.add_stock(form)
    except StockError as e:
        raise _http_error(e)
    return CommandResult(
        item=_item_out(len(session.ledger) - 1, item),
        dashboard=dashboard,
        warning=failure.message if failure else None,
    )


@router.post("/sales", response_model=CommandResult)
async def record_sale(form: RecordSaleForm, session: StockSession = Depends(get_stock_session)):
    try:
        index, item, dashboard, failure = await session.record_sale(form)
    except StockError as e:
        raise _http_error(e)
    return CommandResult(
        item=_item_out(index, item),
        dashboard=dashboard,
        warning=failure.message if failure else None,
    )


@router.post("/reset", response_model=CommandResult)
async def reset_stock(payload: ResetRequest, session: StockSession = Depends(get_stock_session)):
    """Delete all stock. Irreversible, so the body must carry confirm=true"""
    try:
        dashboard, failure = await session.reset(payload.confirm)
    except StockError as e:
        raise _http_error(e)
    return CommandResult(dashboard=dashboard, warning=failure.message if failure else None)


@router.get("/export")
async def export_stock(session: StockSession = Depends(get_stock_session)):
    return Response(
        content=session.export(),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )
