"""
Pytest configuration and shared fixtures.

Provides an in-memory SQLite session per test, an httpx client bound to the
FastAPI app with get_db overridden, and sample gateways/orders/statuses.
"""
from decimal import Decimal
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from database import Base, get_db
from config import Settings


# ── Database Fixtures ────────────────────────────────────────────────


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Create an in-memory SQLite database session for each test.

    Uses StaticPool to allow in-memory SQLite with async SQLAlchemy.
    """
    import db_models  # noqa: F401

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session_maker = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session_maker() as session:
        yield session

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def test_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    httpx client against the app with the in-memory database.

    Overrides get_db dependency to use test DB session.
    """
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


# ── Settings ────────────────────────────────────────────────────────


@pytest.fixture
def test_settings() -> Settings:
    """Settings with the fake gateway as fallback, independent of any .env."""
    return Settings(
        _env_file=None,
        default_payment_gateway="fake",
        default_currency="INR",
        stripe_timeout_seconds=15,
    )


# ── Test Data Fixtures ────────────────────────────────────────────────


@pytest_asyncio.fixture
async def fake_gateway(db_session: AsyncSession):
    """Active default fake gateway."""
    from db_models import PaymentGateway

    gateway = PaymentGateway(
        name="Fake Gateway",
        slug="fake",
        driver="fake",
        is_active=True,
        is_default=True,
        config={},
    )
    db_session.add(gateway)
    await db_session.commit()
    await db_session.refresh(gateway)
    return gateway


@pytest_asyncio.fixture
async def stripe_gateway(db_session: AsyncSession):
    """Inactive Stripe gateway with test credentials."""
    from db_models import PaymentGateway

    gateway = PaymentGateway(
        name="Stripe",
        slug="stripe",
        driver="stripe",
        is_active=False,
        is_default=False,
        config={
            "publishable_key": "pk_test_123",
            "secret_key": "sk_test_456",
            "webhook_secret": "whsec_789",
        },
    )
    db_session.add(gateway)
    await db_session.commit()
    await db_session.refresh(gateway)
    return gateway


@pytest_asyncio.fixture
async def sample_order(db_session: AsyncSession):
    """An order awaiting payment."""
    from db_models import Order

    order = Order(
        reference="ORD-2026-0001",
        total_amount=Decimal("1234.50"),
        currency="INR",
        status="pending_payment",
    )
    db_session.add(order)
    await db_session.commit()
    await db_session.refresh(order)
    return order


@pytest_asyncio.fixture
async def pending_and_shipped(db_session: AsyncSession):
    """Two statuses: 'Pending' (default) and 'Shipped'."""
    from services import order_status_service

    pending = await order_status_service.create_status(db_session, name="Pending", is_default=True)
    shipped = await order_status_service.create_status(db_session, name="Shipped", position=1)
    return pending, shipped
