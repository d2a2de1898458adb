"""Unit tests for AddLineItem use case"""

from decimal import Decimal
import pytest

from src.app.use_cases.cart.add_line_item import AddLineItem
from src.app.use_cases.cart.dtos import AddLineItemCommandDTO
from src.domain.checkout import CheckoutState
from src.domain.line_item import OrderPriority
from tests.fixtures.fakes import make_item


@pytest.fixture
def use_case(mock_uow, store, notifier, pricing, checkout_registry):
    return AddLineItem(mock_uow, store, notifier, pricing, checkout_registry)


def add_command(**overrides) -> AddLineItemCommandDTO:
    fields = dict(
        session_id="s1",
        product_id="p1",
        product_name="Nitrile Gloves",
        brand="SafeTouch",
        category="Consumables",
        employee="Sara",
        company="Seef Dental Clinic",
        unit_price=Decimal("4.5"),
        vat_rate=Decimal("10"),
        stock=5,
        quantity=1,
        order_status=OrderPriority.URGENT,
    )
    fields.update(overrides)
    return AddLineItemCommandDTO(**fields)


@pytest.mark.asyncio
class TestAddLineItem:
    async def test_appends_raw_entry(self, use_case, store, notifier, mock_uow):
        # Act
        result = await use_case.execute(add_command(quantity=2))

        # Assert
        assert result.is_ok()
        raw = store.raw("s1")
        assert len(raw) == 1
        assert raw[0]["productName"] == "Nitrile Gloves"
        assert raw[0]["quantity"] == 2
        assert raw[0]["orderStatus"] == "urgent"
        assert raw[0]["orderDate"]
        assert raw[0]["entryId"]
        mock_uow.commit.assert_awaited_once()
        assert notifier.events[0].item_count == 1

    async def test_second_add_is_merged_in_view_but_stored_raw(self, use_case, store):
        await use_case.execute(add_command())

        result = await use_case.execute(add_command(quantity=2))

        assert len(store.raw("s1")) == 2
        assert result.value.item_count == 1
        assert result.value.items[0].quantity == 3

    async def test_out_of_stock(self, use_case, store):
        result = await use_case.execute(add_command(stock=0))

        assert result.error.code == "OUT_OF_STOCK"
        assert store.save_calls == 0

    async def test_cart_quantity_plus_request_above_stock(self, use_case, store):
        # Arrange
        store.slots["s1"] = [make_item("e1", quantity=4, stock=5).to_store_dict()]

        # Act
        result = await use_case.execute(add_command(quantity=2))

        # Assert
        assert result.error.code == "STOCK_EXCEEDED"
        assert result.error.details["in_cart"] == 4
        assert result.error.details["available"] == 5
        assert len(store.raw("s1")) == 1

    async def test_other_employee_quantity_does_not_count(self, use_case, store):
        store.slots["s1"] = [make_item("e1", quantity=5, employee="Ali", stock=5).to_store_dict()]

        result = await use_case.execute(add_command(quantity=5))

        assert result.is_ok()
        assert result.value.item_count == 2

    async def test_cart_targets_a_single_company(self, use_case, store):
        store.slots["s1"] = [make_item("e1", company="Juffair Clinic").to_store_dict()]

        result = await use_case.execute(add_command())

        assert result.error.code == "COMPANY_MISMATCH"

    async def test_locked_while_submitting(self, use_case, store, checkout_registry):
        checkout_registry.get("s1").state = CheckoutState.SUBMITTING

        result = await use_case.execute(add_command())

        assert result.error.code == "CART_LOCKED"
        assert store.save_calls == 0
