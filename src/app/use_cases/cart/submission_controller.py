"""Submission Controller (admission & order submission)

Drives a cart through the checkout state machine:

    Idle -> PaymentSelection -> CreditCheck (credit only) -> Submitting -> Submitted
                                    -> CreditBlocked -> PaymentSelection
    Submitting -> PaymentSelection on gateway failure (cart preserved)
    PaymentSelection -> Idle when stock no longer covers the cart at submit
"""

import logging
from typing import Optional
from libs.result import Result, Return, Error
from src.app.repositories.line_item_store import LineItemStore
from src.app.services.account_gateway import AccountGateway
from src.app.services.checkout_registry import CheckoutRegistry
from src.app.services.errors import AccountGatewayError, OrderGatewayError, StockFetchError
from src.app.services.inventory_gateway import InventoryGateway
from src.app.services.notification_service import CartChangedEvent, CartChangeReason, ChangeNotifier
from src.app.services.order_gateway import OrderGateway
from src.app.services.unit_of_work import UnitOfWork
from src.domain.account import Account
from src.domain.checkout import CheckoutSession, CheckoutState
from src.domain.consolidation import merge_line_items
from src.domain.line_item import ConsolidatedLineItem
from src.domain.order import (
    ContactInfo,
    OrderCustomer,
    OrderDraft,
    OrderDraftItem,
    PaymentMethod,
    ShippingInfo,
)
from src.domain.pricing import PricingSummary
from .calculate_pricing import CalculatePricing
from .dtos import CheckoutStateDTO, OrderSubmissionResponseDTO, StockMismatchDTO, SubmitOrderCommandDTO
from .stock_levels import fetch_stock_levels

logger = logging.getLogger(__name__)

ADDRESS_FIELDS = ("flatShopNo", "building", "road", "block", "area")


def _text(value) -> Optional[str]:
    """Backend records mix strings and numbers (phones, block numbers)"""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class SubmissionController:
    """
    Use Case: Send the cart for review as an order

    Business Rules:
    1. Review request re-validates stock for every line; any line above
       fresh stock aborts to Idle with the full mismatch list, and the
       cart keeps its entries with refreshed stock
    2. Payment method must be one of cash, visa, benefitpay, flooss, credit
    3. The cart's account must resolve, whatever the payment method
    4. Credit payments need grand_total <= available balance; this check
       runs before any order gateway call
    5. Only one submission per cart may be in flight
    6. Gateway success clears the cart in one write and notifies once
    7. Gateway failure leaves the cart untouched and returns to
       PaymentSelection, no retry
    8. Submit repeats the stock check, since the cart can change after
       review; a mismatch returns the checkout to Idle
    """

    def __init__(
        self,
        checkout_registry: CheckoutRegistry,
        uow: UnitOfWork,
        store: LineItemStore,
        inventory_gateway: InventoryGateway,
        account_gateway: AccountGateway,
        order_gateway: OrderGateway,
        notifier: ChangeNotifier,
        pricing: Optional[CalculatePricing] = None,
        currency: str = "BD",
        shipping_country: str = "Bahrain",
    ):
        self.checkout_registry = checkout_registry
        self.uow = uow
        self.store = store
        self.inventory_gateway = inventory_gateway
        self.account_gateway = account_gateway
        self.order_gateway = order_gateway
        self.notifier = notifier
        self.pricing = pricing or CalculatePricing()
        self.currency = currency
        self.shipping_country = shipping_country

    def get_state(self, session_id: str) -> CheckoutStateDTO:
        return self._to_state_dto(self.checkout_registry.get(session_id))

    async def request_review(self, session_id: str) -> Result[CheckoutStateDTO]:
        """
        Idle -> PaymentSelection, after pre-submission stock validation

        Args:
            session_id: Cart session identifier

        Returns:
            Result[CheckoutStateDTO]: New checkout state or error

        Errors:
            SUBMISSION_IN_PROGRESS: An order for this cart is in flight
            INVALID_CHECKOUT_STATE: Checkout already past Idle
            EMPTY_CART: Nothing to order
            PRE_SUBMISSION_STOCK_MISMATCH: Lines above fresh stock (details list them)
        """
        if self.checkout_registry.is_submitting(session_id):
            return self._in_progress_error()

        checkout = self.checkout_registry.get(session_id)
        if checkout.is_terminal:
            checkout = self.checkout_registry.restart(session_id)

        if checkout.state != CheckoutState.IDLE:
            return self._invalid_state_error(checkout, "request review")

        items = merge_line_items(await self.store.load(session_id))
        if not any(item.quantity > 0 for item in items):
            return self._fail(checkout, Error(code="EMPTY_CART", message="Cart is empty"))

        mismatches, stock_refreshed = await self._revalidate_stock(items)

        if mismatches:
            return await self._reject_stock_mismatch(checkout, items, mismatches, stock_refreshed)

        checkout.transition_to(CheckoutState.PAYMENT_SELECTION)
        checkout.last_error_code = None
        logger.info(f"Cart {session_id} passed stock validation, awaiting payment method")
        return Return.ok(self._to_state_dto(checkout))

    async def submit(self, command: SubmitOrderCommandDTO) -> Result[OrderSubmissionResponseDTO]:
        """
        PaymentSelection -> [CreditCheck] -> Submitting -> Submitted

        Args:
            command: SubmitOrderCommandDTO with session_id and payment_method

        Returns:
            Result[OrderSubmissionResponseDTO]: Created order or error

        Errors:
            SUBMISSION_IN_PROGRESS: Another submission for this cart is in flight
            INVALID_CHECKOUT_STATE: Review not requested yet or checkout finished
            INVALID_PAYMENT_METHOD: Unknown payment method
            EMPTY_CART: Nothing to order
            PRE_SUBMISSION_STOCK_MISMATCH: Cart changed since review and no longer fits stock
            ACCOUNT_NOT_FOUND: Cart's company has no resolvable account
            CREDIT_LIMIT_EXCEEDED: Credit payment above available balance
            ORDER_GATEWAY_FAILURE: Backend refused or could not be reached
        """
        session_id = command.session_id
        lock = self.checkout_registry.lock_for(session_id)
        if lock.locked():
            return self._in_progress_error()

        async with lock:
            checkout = self.checkout_registry.get(session_id)

            if checkout.state == CheckoutState.CREDIT_BLOCKED:
                checkout.transition_to(CheckoutState.PAYMENT_SELECTION)

            if checkout.state != CheckoutState.PAYMENT_SELECTION:
                return self._invalid_state_error(checkout, "submit")

            try:
                method = PaymentMethod(command.payment_method.strip().lower())
            except ValueError:
                return self._fail(
                    checkout,
                    Error(
                        code="INVALID_PAYMENT_METHOD",
                        message=f"Unsupported payment method: {command.payment_method}",
                        reason=f"allowed={[m.value for m in PaymentMethod]}",
                    ),
                )
            checkout.payment_method = method

            merged = merge_line_items(await self.store.load(session_id))
            items = [item for item in merged if item.quantity > 0]
            if not items:
                return self._fail(checkout, Error(code="EMPTY_CART", message="Cart is empty"))

            # The cart may have changed since review
            mismatches, stock_refreshed = await self._revalidate_stock(merged)
            if mismatches:
                checkout.transition_to(CheckoutState.IDLE)
                return await self._reject_stock_mismatch(checkout, merged, mismatches, stock_refreshed)

            pricing = self.pricing.calculate(items)
            company = items[0].company

            resolved = await self._resolve_account(company)
            if isinstance(resolved, Error):
                return self._fail(checkout, resolved)
            account = resolved
            draft = self._build_draft(items, pricing, account, method)

            if method == PaymentMethod.CREDIT:
                checkout.transition_to(CheckoutState.CREDIT_CHECK)
                available = account.available_balance
                if pricing.grand_total > available:
                    checkout.transition_to(CheckoutState.CREDIT_BLOCKED)
                    logger.warning(
                        f"Credit refused for '{account.name}': total {pricing.grand_total} "
                        f"exceeds available balance {available}"
                    )
                    return self._fail(
                        checkout,
                        Error(
                            code="CREDIT_LIMIT_EXCEEDED",
                            message=(
                                f"Order total {pricing.rounded().grand_total} exceeds available credit "
                                f"{available} for {account.name}"
                            ),
                            reason=f"total={pricing.grand_total}, available={available}",
                            details={
                                "grand_total": str(pricing.rounded().grand_total),
                                "available_balance": str(available),
                                "credit_limit": str(account.credit_limit),
                                "current_balance": str(account.current_balance),
                            },
                        ),
                    )

            checkout.transition_to(CheckoutState.SUBMITTING)

            try:
                order = await self.order_gateway.create_order(draft)
            except OrderGatewayError as e:
                checkout.transition_to(CheckoutState.PAYMENT_SELECTION)
                logger.error(f"Order submission for cart {session_id} failed: {e.message}")
                return self._fail(
                    checkout,
                    Error(
                        code="ORDER_GATEWAY_FAILURE",
                        message=e.message or "Error sending order to accountant. Please try again.",
                        reason=f"status_code={e.status_code}",
                    ),
                )
            except Exception:
                checkout.transition_to(CheckoutState.PAYMENT_SELECTION)
                raise

            try:
                await self.store.clear(session_id)
                await self.uow.commit()
            except Exception:
                # Order exists upstream; unlock so the cart can be cleared by hand
                logger.exception(f"Order created but cart {session_id} could not be cleared")
                checkout.transition_to(CheckoutState.PAYMENT_SELECTION)
                checkout.last_error_code = "STORE_UNAVAILABLE"
                raise
            await self.notifier.publish(
                CartChangedEvent(
                    session_id=session_id,
                    reason=CartChangeReason.CLEARED,
                    item_count=0,
                )
            )

            order_id = order.get("_id") or order.get("id")
            checkout.order_id = str(order_id) if order_id is not None else None
            checkout.last_error_code = None
            checkout.transition_to(CheckoutState.SUBMITTED)
            logger.info(
                f"Order {checkout.order_id} created for '{account.name}' "
                f"({len(items)} lines, {method.value}, total {draft.pricing.grand_total})"
            )

            return Return.ok(
                OrderSubmissionResponseDTO(
                    session_id=session_id,
                    state=checkout.state.value,
                    order_id=checkout.order_id,
                    payment_method=method.value,
                    pricing=draft.pricing,
                    order=order,
                )
            )

    async def cancel(self, session_id: str) -> Result[CheckoutStateDTO]:
        """
        Any non-terminal state -> Cancelled; the cart is left as it is

        Errors:
            SUBMISSION_IN_PROGRESS: An order for this cart is in flight
            INVALID_CHECKOUT_STATE: Checkout already finished
        """
        if self.checkout_registry.is_submitting(session_id):
            return self._in_progress_error()

        checkout = self.checkout_registry.get(session_id)
        if not checkout.can_transition(CheckoutState.CANCELLED):
            return self._invalid_state_error(checkout, "cancel")

        checkout.transition_to(CheckoutState.CANCELLED)
        logger.info(f"Checkout for cart {session_id} cancelled")
        return Return.ok(self._to_state_dto(checkout))

    async def _revalidate_stock(
        self, items: list[ConsolidatedLineItem]
    ) -> tuple[list[StockMismatchDTO], bool]:
        levels = await fetch_stock_levels(
            self.inventory_gateway,
            (item.product_id for item in items if item.product_id),
        )

        mismatches: list[StockMismatchDTO] = []
        refreshed = False
        for item in items:
            level = levels.get(item.product_id) if item.product_id else None
            if level is not None and not isinstance(level, StockFetchError):
                refreshed = refreshed or item.stock != level
                item.stock = level

            available = item.stock or 0
            if item.quantity > available:
                mismatches.append(
                    StockMismatchDTO(
                        product_name=item.product_name,
                        requested=item.quantity,
                        available=available,
                    )
                )
        return mismatches, refreshed

    async def _reject_stock_mismatch(
        self,
        checkout: CheckoutSession,
        items: list[ConsolidatedLineItem],
        mismatches: list[StockMismatchDTO],
        stock_refreshed: bool,
    ) -> Result:
        session_id = checkout.session_id
        if stock_refreshed:
            await self.store.save(session_id, items)
            await self.uow.commit()
            await self.notifier.publish(
                CartChangedEvent(
                    session_id=session_id,
                    reason=CartChangeReason.UPDATED,
                    item_count=len(items),
                )
            )
        issues = "; ".join(
            f"\"{m.product_name}\": requested {m.requested}, available {m.available}"
            for m in mismatches
        )
        logger.warning(f"Cart {session_id} failed stock validation: {issues}")
        return self._fail(
            checkout,
            Error(
                code="PRE_SUBMISSION_STOCK_MISMATCH",
                message="Cannot send order. Stock issues detected.",
                reason=issues,
                details=[m.model_dump() for m in mismatches],
            ),
        )

    async def _resolve_account(self, company: Optional[str]):
        reason = None
        account = None
        if company:
            try:
                account = await self.account_gateway.find_by_name(company)
            except AccountGatewayError as e:
                reason = e.message
                logger.error(f"Account lookup for '{company}' failed: {e.message}")

        if account is None:
            return Error(
                code="ACCOUNT_NOT_FOUND",
                message="Account not found. Please try again.",
                reason=reason or f"company={company}",
            )
        return account

    def _build_draft(
        self,
        items: list[ConsolidatedLineItem],
        pricing: PricingSummary,
        account: Account,
        method: PaymentMethod,
    ) -> OrderDraft:
        first = items[0]
        contact = account.primary_contact
        address = account.address or {}

        full_address = " ".join(str(address.get(field) or "") for field in ADDRESS_FIELDS).strip()
        full_address = " ".join(full_address.split())
        area = _text(address.get("area"))
        street_address = full_address or area or "Address not provided"
        city = area or self.shipping_country
        employee = first.employee or _text(contact.get("name")) or "Unknown Employee"

        return OrderDraft(
            customer=OrderCustomer(
                company=account.company_id,
                company_name=first.company or account.name,
                employee=employee,
                contact_info=ContactInfo(
                    name=employee,
                    email=account.email or _text(contact.get("email")) or "noemail@example.com",
                    phone=_text(contact.get("phone")) or account.phone or "N/A",
                    address=street_address,
                    city=city,
                ),
            ),
            items=[
                OrderDraftItem(
                    product=item.product_id,
                    product_name=item.product_name,
                    brand=item.brand,
                    category=item.category,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    vat_rate=item.vat_rate,
                )
                for item in items
            ],
            pricing=pricing.rounded(),
            currency=self.currency,
            payment_method=method,
            order_status=first.order_status,
            shipping=ShippingInfo(
                address=street_address,
                city=city,
                country=self.shipping_country,
            ),
        )

    def _fail(self, checkout: CheckoutSession, error: Error) -> Result:
        checkout.last_error_code = error.code
        return Return.err(error)

    def _in_progress_error(self) -> Result:
        return Return.err(
            Error(
                code="SUBMISSION_IN_PROGRESS",
                message="An order for this cart is already being submitted",
            )
        )

    def _invalid_state_error(self, checkout: CheckoutSession, action: str) -> Result:
        return Return.err(
            Error(
                code="INVALID_CHECKOUT_STATE",
                message=f"Cannot {action} while checkout is {checkout.state.value}",
                reason=f"state={checkout.state.value}",
            )
        )

    @staticmethod
    def _to_state_dto(checkout: CheckoutSession) -> CheckoutStateDTO:
        return CheckoutStateDTO(
            session_id=checkout.session_id,
            state=checkout.state.value,
            payment_method=checkout.payment_method.value if checkout.payment_method else None,
            order_id=checkout.order_id,
            last_error_code=checkout.last_error_code,
        )
