import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
import uvicorn
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from core.commands import StockSession
from core.config import settings
from db.database import async_session_maker, create_db_and_tables, engine as default_engine
from db.kv_store import KeyValueStore
from db.stock_store import StockStore
from routers.stock import router as stock_router

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def create_app(
    engine: Optional[AsyncEngine] = None,
    session_maker: Optional[async_sessionmaker] = None,
) -> FastAPI:
    engine = engine or default_engine
    session_maker = session_maker or async_session_maker

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await create_db_and_tables(engine)
        app.state.stock_session = await StockSession.open(StockStore(KeyValueStore(session_maker)))
        logger.info("Stock session opened with %d items", len(app.state.stock_session.ledger))
        yield
        await app.state.stock_session.close()

    app = FastAPI(
        title="Shoply Stock API",
        description="Stock tracking: add stock, record sales, dashboard views and CSV export",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/", tags=["health"])
    async def root():
        return {"message": "Shoply Stock API is running"}

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "healthy"}

    app.include_router(stock_router, prefix="/stock", tags=["stock"])
    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
