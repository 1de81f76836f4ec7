"""
Key-value byte store.

One row per key; values are opaque bytes. The stock ledger is the only
tenant today (see db/stock_store.py).
"""

from typing import Optional

from sqlalchemy import Column, LargeBinary, String, delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from .database import Base, async_session_maker


class KeyValue(Base):
    __tablename__ = "kv_store"

    key = Column(String, primary_key=True)
    value = Column(LargeBinary, nullable=False)


class KeyValueStore:
    def __init__(self, session_maker: async_sessionmaker[AsyncSession] = async_session_maker):
        self._session_maker = session_maker

    async def get(self, key: str) -> Optional[bytes]:
        async with self._session_maker() as db:
            res = await db.execute(select(KeyValue.value).where(KeyValue.key == key))
            return res.scalar_one_or_none()

    async def set(self, key: str, value: bytes) -> None:
        async with self._session_maker() as db:
            row = await db.get(KeyValue, key)
            if row is None:
                db.add(KeyValue(key=key, value=value))
            else:
                row.value = value
            await db.commit()

    async def delete(self, key: str) -> bool:
        async with self._session_maker() as db:
            res = await db.execute(delete(KeyValue).where(KeyValue.key == key))
            await db.commit()
            return bool(getattr(res, "rowcount", 0) or 0)
