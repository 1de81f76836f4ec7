import argparse
import asyncio
import sys
from pathlib import Path

"""
Seed the stock ledger with a few demo lines.

  PYTHONPATH=backend python backend/scripts/seed_demo_stock.py --replace
  PYTHONPATH=backend python backend/scripts/seed_demo_stock.py --dry-run
"""

# Allow running from repo root by ensuring `backend/` is on sys.path
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from core.ledger import Ledger  # noqa: E402
from db.database import create_db_and_tables  # noqa: E402
from db.kv_store import KeyValueStore  # noqa: E402
from db.stock_store import StockStore  # noqa: E402


# (name, category, price, quantity, sold)
DEMO_STOCK = [
    ("Rice Bag", "Grains", 25000, 10, 3),
    ("Beans (50kg)", "Grains", 48000, 6, 1),
    ("Palm Oil 5L", "Oils", 9500, 20, 12),
    ("Sugar 1kg", "Groceries", 1200, 50, 18),
    ("Indomie Carton", "Noodles", 8800, 15, 0),
]


def apply_demo_stock(ledger: Ledger) -> int:
    added = 0
    existing = {item.name.lower() for item in ledger}
    for name, category, price, quantity, sold in DEMO_STOCK:
        if name.lower() in existing:
            continue
        ledger.add_item(name, category, price, quantity)
        if sold:
            ledger.record_sale(len(ledger) - 1, sold)
        added += 1
    return added


async def seed(replace: bool, dry_run: bool, store: StockStore | None = None) -> int:
    if store is None:
        await create_db_and_tables()
        store = StockStore(KeyValueStore())

    ledger = Ledger([] if replace else await store.load())
    added = apply_demo_stock(ledger)

    if dry_run:
        print(f"[dry-run] would add {added} items ({len(ledger)} total)")
        return added

    if not await store.save(ledger.items):
        raise SystemExit("Could not save stock")
    print(f"Added {added} demo items ({len(ledger)} total)")
    return added


def main() -> None:
    p = argparse.ArgumentParser(description="Seed demo stock lines")
    p.add_argument("--replace", action="store_true", help="Drop existing stock before seeding")
    p.add_argument("--dry-run", action="store_true")
    args = p.parse_args()
    asyncio.run(seed(replace=args.replace, dry_run=args.dry_run))


if __name__ == "__main__":
    main()
