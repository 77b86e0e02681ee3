import pytest_asyncio
from datetime import datetime
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from invoice_lifecycle.adapter.services.clock import FixedClock
from invoice_lifecycle.depends import get_session, init_models


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path):
    """Create test database engine on a temporary SQLite file"""
    test_db_url = f"sqlite+aiosqlite:///{tmp_path / 'invoices_test.db'}"

    engine = create_async_engine(test_db_url, echo=False, future=True)
    await init_models(engine)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    """Create a new database session for each test"""
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    async with Session() as session:
        yield session


@pytest_asyncio.fixture
def api_clock():
    return FixedClock(datetime(2024, 2, 1, 9, 0, 0))


@pytest_asyncio.fixture
async def client(db_session, api_clock):
    """Create test client with database session and clock overrides"""
    from invoice_lifecycle.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)
    app.state.clock = api_clock

    # Override the session dependency to use test session
    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session

    # Use ASGITransport for httpx AsyncClient
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
