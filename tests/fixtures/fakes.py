"""In-memory collaborators and builders shared by the cart tests"""

from decimal import Decimal
from typing import Any, Optional, Sequence
from src.app.repositories.line_item_store import LineItemStore
from src.app.services.account_gateway import AccountGateway
from src.app.services.errors import AccountGatewayError, OrderGatewayError, StockFetchError
from src.app.services.inventory_gateway import InventoryGateway
from src.app.services.notification_service import CartChangedEvent, ChangeNotifier
from src.app.services.order_gateway import OrderGateway
from src.domain.account import Account
from src.domain.line_item import LineItem
from src.domain.order import OrderDraft


def make_item(entry_id: str, **overrides: Any) -> LineItem:
    fields = dict(
        entry_id=entry_id,
        product_id="p1",
        product_name="Nitrile Gloves",
        employee="Sara",
        company="Seef Dental Clinic",
        unit_price=Decimal("10"),
        quantity=1,
        vat_rate=Decimal("0"),
        stock=10,
    )
    fields.update(overrides)
    return LineItem(**fields)


def make_account(**overrides: Any) -> Account:
    fields = dict(
        id="acc-1",
        name="Seef Dental Clinic",
        credit_limit=Decimal("100"),
        current_balance=Decimal("0"),
        email="accounts@seefdental.bh",
        address={"flatShopNo": "12", "building": "204", "road": "2803", "block": "428", "area": "Seef"},
        company={"_id": "cmp-1"},
        staff=[{"name": "Dr. Huda", "email": "huda@seefdental.bh", "phone": "+973 1700 0000"}],
    )
    fields.update(overrides)
    return Account(**fields)


class InMemoryLineItemStore(LineItemStore):
    """Keeps store dicts, so every load re-parses like the real store"""

    def __init__(self, items: Optional[dict[str, Sequence[LineItem]]] = None):
        self.slots: dict[str, list[dict]] = {
            session_id: [item.to_store_dict() for item in entries]
            for session_id, entries in (items or {}).items()
        }
        self.save_calls = 0
        self.clear_calls = 0

    async def load(self, session_id: str) -> list[LineItem]:
        return [LineItem.model_validate(raw) for raw in self.slots.get(session_id, [])]

    async def save(self, session_id: str, items: Sequence[LineItem]) -> None:
        self.save_calls += 1
        self.slots[session_id] = [item.to_store_dict() for item in items]

    async def clear(self, session_id: str) -> None:
        self.clear_calls += 1
        self.slots.pop(session_id, None)

    def raw(self, session_id: str) -> list[dict]:
        return self.slots.get(session_id, [])


class FakeInventoryGateway(InventoryGateway):
    """Stock per product id; ids listed in `failing` raise StockFetchError"""

    def __init__(self, stock: Optional[dict[str, int]] = None, failing: Sequence[str] = ()):
        self.stock = dict(stock or {})
        self.failing = set(failing)
        self.calls: list[str] = []

    async def get_current_stock(self, product_id: str) -> int:
        self.calls.append(product_id)
        if product_id in self.failing or product_id not in self.stock:
            raise StockFetchError(product_id, f"stock unavailable for {product_id}")
        return self.stock[product_id]


class FakeAccountGateway(AccountGateway):
    def __init__(self, accounts: Sequence[Account] = (), error: Optional[str] = None):
        self.accounts = list(accounts)
        self.error = error

    async def list_accounts(self) -> list[Account]:
        if self.error:
            raise AccountGatewayError(self.error, status_code=500)
        return list(self.accounts)


class FakeOrderGateway(OrderGateway):
    def __init__(self, response: Optional[dict] = None, error: Optional[str] = None):
        self.response = response if response is not None else {"_id": "ord-1", "orderNumber": "INV-0001"}
        self.error = error
        self.drafts: list[OrderDraft] = []

    async def create_order(self, draft: OrderDraft) -> dict:
        self.drafts.append(draft)
        if self.error:
            raise OrderGatewayError(self.error, status_code=400)
        return self.response


class RecordingNotifier(ChangeNotifier):
    def __init__(self):
        self.events: list[CartChangedEvent] = []

    async def publish(self, event: CartChangedEvent) -> bool:
        self.events.append(event)
        return True
