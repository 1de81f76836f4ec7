"""
Delete the persisted stock ledger.

The running API keeps its in-memory ledger until restart; use
POST /stock/reset for a live reset.

  PYTHONPATH=backend python backend/scripts/reset_stock.py
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

# Allow running from repo root by ensuring `backend/` is on sys.path
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from db.database import create_db_and_tables  # noqa: E402
from db.kv_store import KeyValueStore  # noqa: E402
from db.stock_store import StockStore  # noqa: E402


async def reset(store: StockStore | None = None) -> int:
    if store is None:
        await create_db_and_tables()
        store = StockStore(KeyValueStore())

    items = await store.load()
    if not await store.clear():
        raise SystemExit("Could not clear stored stock")
    print(f"Deleted stored stock: {len(items)} items")
    return len(items)


async def main() -> None:
    await reset()


if __name__ == "__main__":
    asyncio.run(main())
