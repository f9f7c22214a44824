# backend/app/db/session.py
import contextlib
import logging
from collections.abc import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.core.config import settings

logger = logging.getLogger(__name__)

# Created on startup by `lifespan_db_manager`; tests override the request dependency instead.
board_engine: AsyncEngine | None = None
BoardSessionLocal: async_sessionmaker[AsyncSession] | None = None


def engine_options(db_url: str) -> dict:
    """SQLite gets a single-file connection; server databases get a checked pool."""
    if make_url(db_url).get_backend_name() == "sqlite":
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
    }


def init_board_engine(db_url: str | None = None) -> AsyncEngine:
    global board_engine, BoardSessionLocal

    if board_engine is not None:
        return board_engine

    db_url = db_url or settings.ASYNC_DATABASE_URL
    try:
        board_engine = create_async_engine(db_url, echo=settings.DB_ECHO, **engine_options(db_url))
    except Exception as e:
        logger.critical(f"Could not create the board database engine: {e}", exc_info=True)
        raise RuntimeError(f"Could not create the board database engine: {e}") from e

    BoardSessionLocal = async_sessionmaker(
        bind=board_engine, autoflush=False, expire_on_commit=False, class_=AsyncSession
    )
    logger.info(f"Board database engine ready ({make_url(db_url).render_as_string(hide_password=True)}).")
    return board_engine


async def dispose_board_engine() -> None:
    global board_engine, BoardSessionLocal
    if board_engine is None:
        return
    await board_engine.dispose()
    board_engine = None
    BoardSessionLocal = None
    logger.info("Board database engine disposed.")


async def _session_scope(origin: str) -> AsyncGenerator[AsyncSession, None]:
    if BoardSessionLocal is None:
        raise RuntimeError("Board database is not initialized; it is set up in the app lifespan.")
    async with BoardSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            logger.error(f"{origin} DB session rolled back after an error.", exc_info=True)
            raise


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    async for session in _session_scope("Request"):
        yield session


@contextlib.asynccontextmanager
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Session for code running outside a request, such as startup seeding and maintenance."""
    async for session in _session_scope("Background"):
        yield session


async def lifespan_db_manager(_app_instance, event_type: str):
    if event_type == "shutdown":
        await dispose_board_engine()
        return

    engine = init_board_engine()
    try:
        async with engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
            if settings.DB_CREATE_ALL:
                from app.db.base import Base

                await conn.run_sync(Base.metadata.create_all)
                logger.info("Board tables checked (DB_CREATE_ALL).")
    except Exception as e:
        logger.error(f"Board database is unreachable on startup: {e}", exc_info=True)
        await dispose_board_engine()
        raise RuntimeError(f"Board database is unreachable on startup: {e}") from e
