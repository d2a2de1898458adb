"""Unit tests for SubmissionController

Tests cover:
- Pre-submission stock re-validation
- Credit admission gate
- Successful submission clears the cart once
- Gateway failure keeps the cart verbatim
- One submission in flight per cart
- Stock re-checked at submit for changes made after review
"""

import asyncio
from decimal import Decimal
import pytest

from src.app.services.notification_service import CartChangeReason
from src.app.use_cases.cart.dtos import SetQuantityCommandDTO, SubmitOrderCommandDTO
from src.app.use_cases.cart.set_quantity import SetQuantity
from src.app.use_cases.cart.submission_controller import SubmissionController
from src.domain.checkout import CheckoutState
from src.domain.order import PaymentMethod
from tests.fixtures.fakes import (
    FakeAccountGateway,
    FakeOrderGateway,
    make_account,
    make_item,
)


@pytest.fixture
def accounts():
    return FakeAccountGateway([make_account()])


@pytest.fixture
def orders():
    return FakeOrderGateway()


@pytest.fixture
def controller(checkout_registry, mock_uow, store, inventory, accounts, orders, notifier, pricing):
    return SubmissionController(
        checkout_registry=checkout_registry,
        uow=mock_uow,
        store=store,
        inventory_gateway=inventory,
        account_gateway=accounts,
        order_gateway=orders,
        notifier=notifier,
        pricing=pricing,
    )


def submit(method: str, session_id: str = "s1") -> SubmitOrderCommandDTO:
    return SubmitOrderCommandDTO(session_id=session_id, payment_method=method)


@pytest.fixture
def cart_of_100(store, inventory):
    """One line worth exactly 100 (free delivery, no VAT)"""
    store.slots["s1"] = [make_item("e1", unit_price=Decimal("100"), quantity=1, stock=10).to_store_dict()]
    inventory.stock = {"p1": 10}


@pytest.mark.asyncio
class TestRequestReview:
    async def test_valid_cart_moves_to_payment_selection(self, controller, cart_of_100):
        result = await controller.request_review("s1")

        assert result.is_ok()
        assert result.value.state == "payment_selection"

    async def test_stock_mismatch_aborts_to_idle_with_refreshed_stock(
        self, controller, store, inventory, notifier
    ):
        # Arrange
        store.slots["s1"] = [
            make_item("e1", product_id="p1", product_name="Nitrile Gloves", quantity=2, stock=5).to_store_dict(),
            make_item("e2", product_id="p2", product_name="Face Masks", quantity=1, stock=5).to_store_dict(),
        ]
        inventory.stock = {"p1": 0, "p2": 5}

        # Act
        result = await controller.request_review("s1")

        # Assert
        assert result.is_err()
        assert result.error.code == "PRE_SUBMISSION_STOCK_MISMATCH"
        assert result.error.details == [
            {"product_name": "Nitrile Gloves", "requested": 2, "available": 0}
        ]
        assert controller.get_state("s1").state == "idle"
        raw = store.raw("s1")
        assert [entry["entryId"] for entry in raw] == ["e1", "e2"]
        assert raw[0]["quantity"] == 2
        assert raw[0]["stock"] == 0
        assert store.clear_calls == 0
        assert len(notifier.events) == 1

    async def test_failed_lookup_falls_back_to_last_known_stock(self, controller, store, inventory):
        store.slots["s1"] = [make_item("e1", quantity=3, stock=2).to_store_dict()]
        inventory.failing = {"p1"}

        result = await controller.request_review("s1")

        assert result.error.code == "PRE_SUBMISSION_STOCK_MISMATCH"
        assert result.error.details[0]["available"] == 2

    async def test_empty_cart(self, controller):
        result = await controller.request_review("s1")

        assert result.error.code == "EMPTY_CART"
        assert controller.get_state("s1").last_error_code == "EMPTY_CART"

    async def test_review_twice_is_invalid(self, controller, cart_of_100):
        await controller.request_review("s1")

        result = await controller.request_review("s1")

        assert result.error.code == "INVALID_CHECKOUT_STATE"


@pytest.mark.asyncio
class TestSubmitCredit:
    async def test_credit_above_available_balance_never_calls_gateway(
        self, controller, cart_of_100, store, orders, notifier
    ):
        # Arrange - limit 200, balance 150 -> available 50
        controller.account_gateway = FakeAccountGateway([
            make_account(credit_limit=Decimal("200"), current_balance=Decimal("150"))
        ])
        await controller.request_review("s1")
        before = list(store.raw("s1"))

        # Act
        result = await controller.submit(submit("credit"))

        # Assert
        assert result.is_err()
        assert result.error.code == "CREDIT_LIMIT_EXCEEDED"
        assert result.error.details["available_balance"] == "50"
        assert orders.drafts == []
        assert store.raw("s1") == before
        assert notifier.events == []
        assert controller.get_state("s1").state == "credit_blocked"

    async def test_blocked_credit_can_switch_to_cash(self, controller, cart_of_100, store, orders):
        controller.account_gateway = FakeAccountGateway([
            make_account(credit_limit=Decimal("200"), current_balance=Decimal("150"))
        ])
        await controller.request_review("s1")
        await controller.submit(submit("credit"))

        result = await controller.submit(submit("cash"))

        assert result.is_ok()
        assert len(orders.drafts) == 1
        assert store.raw("s1") == []

    async def test_credit_within_available_balance(self, controller, cart_of_100, orders):
        await controller.request_review("s1")

        result = await controller.submit(submit("credit"))

        assert result.is_ok()
        assert orders.drafts[0].payment_method == PaymentMethod.CREDIT


@pytest.mark.asyncio
class TestSubmit:
    async def test_cash_success_empties_store_and_notifies_once(
        self, controller, cart_of_100, store, orders, notifier, mock_uow
    ):
        # Arrange
        await controller.request_review("s1")

        # Act
        result = await controller.submit(submit("cash"))

        # Assert
        assert result.is_ok()
        assert result.value.state == "submitted"
        assert result.value.order_id == "ord-1"
        assert result.value.pricing.grand_total == Decimal("100.00")
        assert store.raw("s1") == []
        assert store.clear_calls == 1
        mock_uow.commit.assert_awaited_once()
        assert len(notifier.events) == 1
        assert notifier.events[0].reason == CartChangeReason.CLEARED
        assert notifier.events[0].item_count == 0

    async def test_draft_carries_customer_and_pricing(self, controller, cart_of_100, orders):
        await controller.request_review("s1")

        await controller.submit(submit("BenefitPay"))

        payload = orders.drafts[0].to_payload()
        assert payload["payment"] == {"method": "benefit", "status": "pending"}
        assert payload["accountantReviewStatus"] == "PENDING_REVIEW"
        assert payload["customer"]["company"] == "cmp-1"
        assert payload["customer"]["employee"] == "Sara"
        assert payload["customer"]["contactInfo"]["email"] == "accounts@seefdental.bh"
        assert payload["customer"]["contactInfo"]["address"] == "12 204 2803 428 Seef"
        assert payload["shipping"] == {"address": "12 204 2803 428 Seef", "city": "Seef", "country": "Bahrain"}
        assert payload["pricing"]["total"] == 100.0
        assert payload["items"][0]["quantity"] == 1

    async def test_gateway_failure_keeps_cart_verbatim(self, controller, cart_of_100, store, notifier):
        # Arrange
        controller.order_gateway = FakeOrderGateway(error="Customer is on hold")
        await controller.request_review("s1")
        before = list(store.raw("s1"))

        # Act
        result = await controller.submit(submit("visa"))

        # Assert
        assert result.is_err()
        assert result.error.code == "ORDER_GATEWAY_FAILURE"
        assert result.error.message == "Customer is on hold"
        assert store.raw("s1") == before
        assert store.clear_calls == 0
        assert notifier.events == []
        state = controller.get_state("s1")
        assert state.state == "payment_selection"
        assert state.last_error_code == "ORDER_GATEWAY_FAILURE"

    async def test_manual_retry_after_gateway_failure(self, controller, cart_of_100, store):
        controller.order_gateway = FakeOrderGateway(error="timeout")
        await controller.request_review("s1")
        await controller.submit(submit("visa"))
        controller.order_gateway = FakeOrderGateway()

        result = await controller.submit(submit("visa"))

        assert result.is_ok()
        assert store.raw("s1") == []

    async def test_unknown_payment_method(self, controller, cart_of_100, orders):
        await controller.request_review("s1")

        result = await controller.submit(submit("bitcoin"))

        assert result.error.code == "INVALID_PAYMENT_METHOD"
        assert orders.drafts == []
        assert controller.get_state("s1").state == "payment_selection"

    async def test_submit_without_review(self, controller, cart_of_100, orders):
        result = await controller.submit(submit("cash"))

        assert result.error.code == "INVALID_CHECKOUT_STATE"
        assert orders.drafts == []

    async def test_account_must_resolve_for_any_method(self, controller, cart_of_100, orders):
        controller.account_gateway = FakeAccountGateway([make_account(name="Another Clinic")])
        await controller.request_review("s1")

        result = await controller.submit(submit("cash"))

        assert result.error.code == "ACCOUNT_NOT_FOUND"
        assert orders.drafts == []

    async def test_account_gateway_failure_blocks_submission(self, controller, cart_of_100, orders):
        controller.account_gateway = FakeAccountGateway(error="accounts service down")
        await controller.request_review("s1")

        result = await controller.submit(submit("credit"))

        assert result.error.code == "ACCOUNT_NOT_FOUND"
        assert result.error.reason == "accounts service down"
        assert orders.drafts == []

    async def test_numeric_contact_fields_are_sent_as_text(self, controller, cart_of_100, orders):
        # Arrange - backend returns the staff phone and block as numbers
        controller.account_gateway = FakeAccountGateway([
            make_account(
                staff=[{"name": "Dr", "phone": 17000000}],
                address={"block": 428, "area": "Seef"},
            )
        ])
        await controller.request_review("s1")

        # Act
        result = await controller.submit(submit("cash"))

        # Assert
        assert result.is_ok()
        contact = orders.drafts[0].customer.contact_info
        assert contact.phone == "17000000"
        assert contact.address == "428 Seef"

    async def test_draft_failure_does_not_leave_checkout_submitting(
        self, controller, cart_of_100, store, orders, checkout_registry
    ):
        # Arrange
        await controller.request_review("s1")

        def broken_draft(*args, **kwargs):
            raise ValueError("unreadable account record")

        controller._build_draft = broken_draft

        # Act
        with pytest.raises(ValueError):
            await controller.submit(submit("cash"))

        # Assert
        assert orders.drafts == []
        assert controller.get_state("s1").state == "payment_selection"
        assert not checkout_registry.is_submitting("s1")
        cancel = await controller.cancel("s1")
        assert cancel.value.state == "cancelled"

    async def test_quantity_raised_after_review_is_rechecked_at_submit(
        self, controller, store, inventory, orders, notifier, checkout_registry, mock_uow, pricing
    ):
        # Arrange - review passes, then live stock drops and the quantity is raised
        store.slots["s1"] = [make_item("e1", quantity=1, stock=10).to_store_dict()]
        inventory.stock = {"p1": 10}
        await controller.request_review("s1")
        inventory.stock["p1"] = 1
        set_quantity = SetQuantity(mock_uow, store, inventory, notifier, pricing, checkout_registry)
        changed = await set_quantity.execute(
            SetQuantityCommandDTO(session_id="s1", line_item_id="e1", quantity=9)
        )
        assert changed.is_ok()

        # Act
        result = await controller.submit(submit("cash"))

        # Assert
        assert result.is_err()
        assert result.error.code == "PRE_SUBMISSION_STOCK_MISMATCH"
        assert result.error.details == [
            {"product_name": "Nitrile Gloves", "requested": 9, "available": 1}
        ]
        assert orders.drafts == []
        assert controller.get_state("s1").state == "idle"
        assert store.raw("s1")[0]["quantity"] == 9
        assert store.raw("s1")[0]["stock"] == 1
        assert store.clear_calls == 0

    async def test_only_one_submission_in_flight(self, controller, cart_of_100, checkout_registry):
        # Arrange - gateway holds the first submission open
        release = asyncio.Event()
        entered = asyncio.Event()

        class SlowOrderGateway(FakeOrderGateway):
            async def create_order(self, draft):
                entered.set()
                await release.wait()
                return await super().create_order(draft)

        controller.order_gateway = SlowOrderGateway()
        await controller.request_review("s1")

        # Act
        first = asyncio.create_task(controller.submit(submit("cash")))
        await asyncio.wait_for(entered.wait(), timeout=1)
        second = await controller.submit(submit("cash"))
        cancel = await controller.cancel("s1")
        assert checkout_registry.is_submitting("s1")
        release.set()
        first_result = await first

        # Assert
        assert second.error.code == "SUBMISSION_IN_PROGRESS"
        assert cancel.error.code == "SUBMISSION_IN_PROGRESS"
        assert first_result.is_ok()
        assert len(controller.order_gateway.drafts) == 1

    async def test_new_checkout_after_submission(self, controller, cart_of_100, store):
        await controller.request_review("s1")
        await controller.submit(submit("cash"))
        store.slots["s1"] = [make_item("e9", stock=10).to_store_dict()]

        result = await controller.request_review("s1")

        assert result.is_ok()
        assert result.value.order_id is None


@pytest.mark.asyncio
class TestCancel:
    async def test_cancel_keeps_cart(self, controller, cart_of_100, store):
        await controller.request_review("s1")

        result = await controller.cancel("s1")

        assert result.value.state == "cancelled"
        assert len(store.raw("s1")) == 1

    async def test_cancel_twice(self, controller):
        await controller.cancel("s1")

        result = await controller.cancel("s1")

        assert result.error.code == "INVALID_CHECKOUT_STATE"

    async def test_state_is_reported(self, controller):
        assert controller.get_state("s1").state == CheckoutState.IDLE.value
