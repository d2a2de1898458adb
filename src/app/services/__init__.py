from .unit_of_work import UnitOfWork
from .notification_service import ChangeNotifier, CartChangedEvent, CartChangeReason
from .inventory_gateway import InventoryGateway
from .account_gateway import AccountGateway
from .order_gateway import OrderGateway
from .checkout_registry import CheckoutRegistry
from .errors import (
    GatewayError,
    StockFetchError,
    AccountGatewayError,
    OrderGatewayError,
    StoreUnavailableError,
)

__all__ = [
    "UnitOfWork",
    "ChangeNotifier",
    "CartChangedEvent",
    "CartChangeReason",
    "InventoryGateway",
    "AccountGateway",
    "OrderGateway",
    "CheckoutRegistry",
    "GatewayError",
    "StockFetchError",
    "AccountGatewayError",
    "OrderGatewayError",
    "StoreUnavailableError",
]
