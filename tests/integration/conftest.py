"""
Fixtures for integration tests.

Provides:
- In-memory SQLite database shared by every session of a test
- Test client for the FastAPI app, one transaction per request
- Helpers to fund wallets and configure plans
"""

from typing import AsyncGenerator, Awaitable, Callable

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from src.main import app
from src.domain.entities import Wallet
from src.infrastructure.database import Base, DatabaseSessionManager, get_db_session
from src.infrastructure.repositories import PostgresWalletRepository


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def test_engine():
    """Create an in-memory SQLite async engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_manager(test_engine) -> DatabaseSessionManager:
    """Session manager bound to the test engine; commits like production."""
    manager = DatabaseSessionManager()
    manager.bind(test_engine)
    return manager


@pytest_asyncio.fixture
async def test_session(session_manager) -> AsyncGenerator[AsyncSession, None]:
    """A single committing session, for repository-level tests."""
    async with session_manager.session() as session:
        yield session


# =============================================================================
# App Client Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def client(session_manager: DatabaseSessionManager) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client backed by the in-memory database.

    Every request gets its own session that commits on success and rolls
    back on error, exactly as get_db_session does in production.
    """
    async def override_get_db_session():
        async with session_manager.session() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_get_db_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# =============================================================================
# Helper Fixtures
# =============================================================================

@pytest.fixture
def fund_wallet(session_manager) -> Callable[[str, int], Awaitable[None]]:
    """Set a buyer's wallet balance directly in the database."""
    async def _fund(buyer_id: str, balance_cents: int) -> None:
        async with session_manager.session() as session:
            await PostgresWalletRepository(session).save(
                Wallet(buyer_id=buyer_id, balance_cents=balance_cents)
            )

    return _fund


@pytest.fixture
def plan_request() -> dict:
    """30% deposit, 3 monthly installments."""
    return {
        "seller_id": "seller_1",
        "initial_deposit_percent": 30,
        "frequency": "monthly",
        "duration_periods": 3,
        "min_payment_cents": 0,
        "grace_period_days": 3,
        "allow_partial_payments": True,
        "allow_early_completion": True,
    }


@pytest_asyncio.fixture
async def configured_product(client: AsyncClient, plan_request: dict) -> str:
    """A product with the default plan attached."""
    response = await client.put("/v1/products/product_1/plan", json=plan_request)
    assert response.status_code == 201
    return "product_1"


@pytest_asyncio.fixture
async def active_order(client: AsyncClient, configured_product: str, fund_wallet) -> dict:
    """
    A 1000.00 order for buyer_1 with the 300.00 deposit paid.

    buyer_1 has 1000.00 left in the wallet afterwards.
    """
    await fund_wallet("buyer_1", 130_000)
    response = await client.post(
        "/v1/orders",
        json={
            "buyer_id": "buyer_1",
            "product_id": configured_product,
            "total_cents": 100_000,
        },
    )
    assert response.status_code == 201
    return response.json()
