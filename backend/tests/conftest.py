"""
Pytest configuration and shared fixtures.

Provides an in-memory SQLite session, a fake payment gateway, a
PaymentService wired to both, and an httpx client bound to the ASGI app
with the database and gateway dependencies overridden.
"""
import os

# Test-only settings; must be in place before config.settings is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ["ENVIRONMENT"] = "test"
os.environ["RAZORPAY_KEY_ID"] = "rzp_test_key"
os.environ["RAZORPAY_KEY_SECRET"] = "test_checkout_secret"
os.environ["RAZORPAY_SECRET"] = "test_travel_secret"
os.environ["JWT_SECRET"] = "test-jwt-secret-for-pytest-only"
os.environ["SUPPORTED_CURRENCIES"] = "INR,USD"

from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from config import PaymentConfig
from database import Base, get_db
from deps import get_gateway_client
from domain.errors import GatewayError
from main import app
from middleware.rate_limit import limiter
from services.order_ledger import OrderLedger
from services.payment_service import OrderLocks, PaymentService

CHECKOUT_SECRET = "test_checkout_secret"
TRAVEL_SECRET = "test_travel_secret"


# ── Fake gateway ─────────────────────────────────────────────────────


class FakeGateway:
    """Stands in for RazorpayGatewayClient; hands out sequential order ids."""

    def __init__(self, order_ids=None, error: Exception | None = None):
        self.key_id = "rzp_test_key"
        self._ids = list(order_ids or [])
        self._counter = 0
        self.error = error
        self.calls = []

    async def create_remote_order(self, amount, currency, *, receipt=None, notes=None):
        self.calls.append(
            {"amount": amount, "currency": currency, "receipt": receipt, "notes": notes}
        )
        if self.error is not None:
            raise self.error
        if self._ids:
            order_id = self._ids.pop(0)
        else:
            self._counter += 1
            order_id = f"order_test_{self._counter}"
        return {"id": order_id, "amount": amount, "currency": currency, "status": "created"}


@pytest.fixture
def fake_gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def failing_gateway() -> FakeGateway:
    return FakeGateway(error=GatewayError("Payment gateway timed out"))


# ── Database Fixtures ────────────────────────────────────────────────


@pytest.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Create an in-memory SQLite database session for each test.

    Uses StaticPool to allow in-memory SQLite with async SQLAlchemy.
    """
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


# ── Payment Fixtures ─────────────────────────────────────────────────


@pytest.fixture
def payment_config() -> PaymentConfig:
    return PaymentConfig(
        key_id="rzp_test_key",
        secret=CHECKOUT_SECRET,
        supported_currencies=("INR", "USD"),
        gateway_timeout_seconds=1.0,
        purposes=("checkout", "donation"),
    )


@pytest.fixture
def ledger(db_session: AsyncSession) -> OrderLedger:
    return OrderLedger(db_session)


@pytest.fixture
def payment_service(payment_config, fake_gateway, ledger) -> PaymentService:
    return PaymentService(payment_config, fake_gateway, ledger, locks=OrderLocks())


# ── HTTP client ──────────────────────────────────────────────────────


@pytest.fixture(scope="function")
async def client(db_session: AsyncSession, fake_gateway: FakeGateway) -> AsyncGenerator[AsyncClient, None]:
    """
    httpx client bound to the app with the test DB and fake gateway.

    Lifespan is not run, so no tables are created on the configured engine.
    """
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_gateway_client] = lambda: fake_gateway
    limiter.reset()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
    limiter.reset()


# ── Test Data Fixtures ────────────────────────────────────────────────


@pytest.fixture
async def pending_order(payment_service: PaymentService):
    """A Pending checkout order for 50000 paise with gateway id order_test_1."""
    await payment_service.create_order(50_000, "INR")
    return await payment_service.ledger.find_by_order_id("order_test_1")
