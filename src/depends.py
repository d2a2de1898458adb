from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.services.account_gateway import HttpAccountGateway
from src.adapter.services.inventory_gateway import HttpInventoryGateway
from src.adapter.services.notification_service import CartItemCounter, create_change_notifier
from src.adapter.services.order_gateway import HttpOrderGateway
from src.app.services.checkout_registry import CheckoutRegistry
from src.app.use_cases.cart.calculate_pricing import CalculatePricing

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

# Process-wide singletons: checkout progress and the change channel
checkout_registry = CheckoutRegistry()
cart_item_counter = CartItemCounter()
change_notifier = create_change_notifier(
    webhook_url=ApplicationConfig.CART_CHANGE_WEBHOOK,
    subscribers=[cart_item_counter],
)

_gateway_settings = dict(
    base_url=ApplicationConfig.BACKEND_API_URL,
    token=ApplicationConfig.BACKEND_API_TOKEN,
    timeout=ApplicationConfig.GATEWAY_TIMEOUT_SECONDS,
)
inventory_gateway = HttpInventoryGateway(**_gateway_settings)
account_gateway = HttpAccountGateway(**_gateway_settings)
order_gateway = HttpOrderGateway(**_gateway_settings)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


def get_checkout_registry() -> CheckoutRegistry:
    return checkout_registry


def get_cart_item_counter() -> CartItemCounter:
    return cart_item_counter


def get_change_notifier():
    return change_notifier


def get_inventory_gateway():
    return inventory_gateway


def get_account_gateway():
    return account_gateway


def get_order_gateway():
    return order_gateway


def get_pricing() -> CalculatePricing:
    return CalculatePricing(
        delivery_fee=ApplicationConfig.DELIVERY_FEE,
        free_delivery_threshold=ApplicationConfig.DELIVERY_FREE_THRESHOLD,
    )
