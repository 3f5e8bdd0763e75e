"""Pytest configuration and fixtures."""

import os
import tempfile

# Settings are read once at import time; point them at throwaway resources
os.environ["ENV_MODE"] = "development"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["GATEWAY_KEY_SECRET"] = "test_key_secret"
os.environ["PUBLIC_DIRECTORY"] = tempfile.mkdtemp(prefix="orderdesk-public-")

from datetime import datetime
from typing import Any, AsyncIterator, Optional

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.database import build_engine, build_sessionmaker, get_db, init_db
from orderdesk.main import app, get_broadcaster
from orderdesk.models import Order, OrderStatus
from orderdesk.services.payment import get_payment_gateway
from orderdesk.services.payment.mock import MockPaymentGateway

TEST_SECRET = "test_key_secret"


class RecordingBroadcaster:
    """Stand-in for the WebSocket broadcaster that remembers every event."""

    def __init__(self):
        self.events: list[tuple[str, Any]] = []

    async def broadcast(self, event: str, data: Any) -> None:
        self.events.append((getattr(event, "value", event), data))

    def names(self) -> list[str]:
        return [name for name, _ in self.events]


@pytest.fixture
async def db_engine():
    """Fresh in-memory database per test."""
    engine = build_engine("sqlite+aiosqlite:///:memory:")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(db_engine) -> AsyncIterator[AsyncSession]:
    async with build_sessionmaker(db_engine)() as session:
        yield session


@pytest.fixture
def gateway() -> MockPaymentGateway:
    return MockPaymentGateway(key_secret=TEST_SECRET)


@pytest.fixture
def broadcaster() -> RecordingBroadcaster:
    return RecordingBroadcaster()


@pytest.fixture
async def client(db_engine, gateway, broadcaster) -> AsyncIterator[httpx.AsyncClient]:
    """HTTP client bound to the app with test database, gateway and broadcaster."""
    session_maker = build_sessionmaker(db_engine)

    async def override_get_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    app.dependency_overrides[get_broadcaster] = lambda: broadcaster

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def make_order(db_session: AsyncSession):
    """Insert an order directly, bypassing payment verification."""

    async def _make_order(
        created_at: datetime,
        items: Optional[list[dict]] = None,
        total: Optional[float] = None,
        status: OrderStatus = OrderStatus.NEW,
        **fields,
    ) -> Order:
        items = items if items is not None else [{"name": "Margherita", "price": 200.0, "qty": 1}]
        order = Order(
            items=items,
            total=total if total is not None else sum(i["price"] * i["qty"] for i in items),
            status=status,
            created_at=created_at,
            **fields,
        )
        db_session.add(order)
        await db_session.commit()
        await db_session.refresh(order)
        return order

    return _make_order
