# backend/tests/conftest.py
from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.db.base import Base
from app.db.session import get_async_session
from app.main import app as fastapi_app
from app.modules.board.core.notifications import NotificationCenter
from app.modules.board.core.scheduler import ManualScheduler
from app.modules.board.core.store import TileStore
from app.modules.board.persistence.base import MemoryStorage
from app.modules.board.persistence.local import LocalStorageAdapter

# One shared in-memory database per test; StaticPool keeps the single connection alive.
TEST_DATABASE_URL = "sqlite+aiosqlite://"

FIXED_NOW = datetime(2024, 5, 10, 12, 0, tzinfo=UTC)


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Creates/Disposes an async engine FOR EACH TEST FUNCTION."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Yields a database session per function, using the function-scoped engine."""
    TestSessionFactory = async_sessionmaker(
        test_engine, expire_on_commit=False, class_=AsyncSession
    )
    async with TestSessionFactory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


@pytest_asyncio.fixture(scope="function")
async def test_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    httpx AsyncClient bound to the FastAPI app through ASGITransport.
    Routes share the function-scoped test session.
    """

    async def override_get_async_session_for_test() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    fastapi_app.dependency_overrides[get_async_session] = override_get_async_session_for_test

    async with AsyncClient(
        transport=ASGITransport(app=fastapi_app), base_url="http://test"
    ) as client:
        yield client

    fastapi_app.dependency_overrides.clear()


# --- Board core fixtures ---


class FakeClock:
    """Deterministic clock; each call returns the current value, `tick` moves it."""

    def __init__(self, start: datetime = FIXED_NOW):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def tick(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def memory_storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def local_adapter(memory_storage: MemoryStorage) -> LocalStorageAdapter:
    return LocalStorageAdapter(memory_storage)


@pytest.fixture
def notifications(memory_storage: MemoryStorage, clock: FakeClock) -> NotificationCenter:
    return NotificationCenter(memory_storage, clock=clock)


@pytest.fixture
def store(
    local_adapter: LocalStorageAdapter,
    scheduler: ManualScheduler,
    notifications: NotificationCenter,
    clock: FakeClock,
) -> TileStore:
    """A loaded store on an empty in-memory storage, i.e. the default board."""
    tile_store = TileStore(
        local_adapter,
        scheduler=scheduler,
        debounce_seconds=0.5,
        notifications=notifications,
        clock=clock,
    )
    tile_store.load()
    return tile_store
