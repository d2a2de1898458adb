from .unit_of_work import SqlAlchemyUnitOfWork
from .notification_service import (
    InMemoryChangeNotifier,
    LoggingChangeNotifier,
    WebhookChangeNotifier,
    CompositeChangeNotifier,
    CartItemCounter,
    create_change_notifier,
)
from .inventory_gateway import HttpInventoryGateway
from .account_gateway import HttpAccountGateway
from .order_gateway import HttpOrderGateway

__all__ = [
    "SqlAlchemyUnitOfWork",
    "InMemoryChangeNotifier",
    "LoggingChangeNotifier",
    "WebhookChangeNotifier",
    "CompositeChangeNotifier",
    "CartItemCounter",
    "create_change_notifier",
    "HttpInventoryGateway",
    "HttpAccountGateway",
    "HttpOrderGateway",
]
