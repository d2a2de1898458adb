import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from src.depends import (
    get_account_gateway,
    get_cart_item_counter,
    get_change_notifier,
    get_checkout_registry,
    get_inventory_gateway,
    get_order_gateway,
    get_session,
)
from src.adapter.services.notification_service import CartItemCounter, create_change_notifier
from src.app.services.checkout_registry import CheckoutRegistry
from src.domain.cart_slot import CartSlot  # noqa: F401
from tests.fixtures.fakes import FakeAccountGateway, FakeInventoryGateway, FakeOrderGateway, make_account


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path):
    """Create test database engine on a throwaway SQLite file"""
    test_db_url = f"sqlite+aiosqlite:///{tmp_path / 'cart_test.db'}"

    engine = create_async_engine(test_db_url, echo=False, future=True)

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    """Create a new database session for each test"""
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    async with Session() as session:
        yield session


@pytest.fixture
def backend():
    """Fake backend gateways shared by one test"""
    return {
        "inventory": FakeInventoryGateway({"p1": 10, "p2": 3}),
        "accounts": FakeAccountGateway([make_account()]),
        "orders": FakeOrderGateway(),
    }


@pytest.fixture
def cart_item_counter():
    return CartItemCounter()


@pytest_asyncio.fixture
async def client(db_session, backend, cart_item_counter):
    """Create test client with database session and gateway overrides"""
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_session():
        yield db_session

    registry = CheckoutRegistry()
    notifier = create_change_notifier(subscribers=[cart_item_counter])

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_inventory_gateway] = lambda: backend["inventory"]
    app.dependency_overrides[get_account_gateway] = lambda: backend["accounts"]
    app.dependency_overrides[get_order_gateway] = lambda: backend["orders"]
    app.dependency_overrides[get_checkout_registry] = lambda: registry
    app.dependency_overrides[get_change_notifier] = lambda: notifier
    app.dependency_overrides[get_cart_item_counter] = lambda: cart_item_counter

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
