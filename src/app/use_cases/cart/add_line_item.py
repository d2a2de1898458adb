"""AddLineItem Use Case

Appends a catalog product to the cart as a new raw entry.
"""

import logging
from datetime import datetime
from typing import Optional
from libs.result import Result, Return, Error
from src.app.repositories.line_item_store import LineItemStore
from src.app.services.checkout_registry import CheckoutRegistry
from src.app.services.notification_service import CartChangedEvent, CartChangeReason, ChangeNotifier
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import generate_uuid
from src.domain.consolidation import merge_line_items
from src.domain.line_item import LineItem
from .calculate_pricing import CalculatePricing
from .consolidate_cart import build_cart_view
from .dtos import AddLineItemCommandDTO, CartViewDTO

logger = logging.getLogger(__name__)


class AddLineItem:
    """
    Use Case: Add a product to the cart

    Business Rules:
    1. A cart targets a single account: the company must match existing entries
    2. A product with no stock cannot be added
    3. Quantity already in the cart for the same product and employee plus
       the new quantity must not exceed stock
    4. The entry is appended raw; merging happens on the next consolidation
    """

    def __init__(
        self,
        uow: UnitOfWork,
        store: LineItemStore,
        notifier: ChangeNotifier,
        pricing: Optional[CalculatePricing] = None,
        checkout_registry: Optional[CheckoutRegistry] = None,
    ):
        self.uow = uow
        self.store = store
        self.notifier = notifier
        self.pricing = pricing or CalculatePricing()
        self.checkout_registry = checkout_registry

    async def execute(self, command: AddLineItemCommandDTO) -> Result[CartViewDTO]:
        """
        Execute add to cart

        Args:
            command: AddLineItemCommandDTO describing the product and attribution

        Returns:
            Result[CartViewDTO]: Cart including the new entry, or error

        Errors:
            CART_LOCKED: Order submission in flight
            COMPANY_MISMATCH: Cart already targets another account
            OUT_OF_STOCK: Product stock is zero
            STOCK_EXCEEDED: Cart quantity would exceed stock
        """
        if self.checkout_registry and self.checkout_registry.is_submitting(command.session_id):
            return Return.err(
                Error(
                    code="CART_LOCKED",
                    message="Cart cannot change while its order is being submitted",
                )
            )

        raw_items = await self.store.load(command.session_id)

        if raw_items and raw_items[0].company != command.company:
            return Return.err(
                Error(
                    code="COMPANY_MISMATCH",
                    message=f"Cart already holds items for \"{raw_items[0].company}\"",
                    reason=f"cart_company={raw_items[0].company}, requested={command.company}",
                )
            )

        if command.stock <= 0:
            return Return.err(
                Error(
                    code="OUT_OF_STOCK",
                    message=f"Sorry, \"{command.product_name}\" is out of stock.",
                )
            )

        now = datetime.now()
        entry = LineItem(
            entry_id=generate_uuid(),
            product_id=command.product_id,
            product_name=command.product_name,
            brand=command.brand,
            category=command.category,
            employee=command.employee,
            company=command.company,
            unit_price=command.unit_price,
            quantity=command.quantity,
            vat_rate=command.vat_rate,
            stock=command.stock,
            order_status=command.order_status,
            order_date=now.date().isoformat(),
            order_time=now.time().replace(microsecond=0).isoformat(),
        )

        in_cart = sum(
            item.quantity
            for item in raw_items
            if item.consolidation_key == entry.consolidation_key
        )
        if in_cart + command.quantity > command.stock:
            return Return.err(
                Error(
                    code="STOCK_EXCEEDED",
                    message=(
                        f"Sorry, only {command.stock} units of \"{command.product_name}\" are available "
                        f"in stock. You already have {in_cart} in your cart."
                    ),
                    reason=f"requested={in_cart + command.quantity}, available={command.stock}",
                    details={
                        "product_name": command.product_name,
                        "requested": in_cart + command.quantity,
                        "available": command.stock,
                        "in_cart": in_cart,
                    },
                )
            )

        updated = [*raw_items, entry]
        await self.store.save(command.session_id, updated)
        await self.uow.commit()
        await self.notifier.publish(
            CartChangedEvent(
                session_id=command.session_id,
                reason=CartChangeReason.UPDATED,
                item_count=len(updated),
            )
        )

        logger.info(f"Added {command.quantity} x '{command.product_name}' to cart {command.session_id}")

        return Return.ok(build_cart_view(command.session_id, merge_line_items(updated), self.pricing))
