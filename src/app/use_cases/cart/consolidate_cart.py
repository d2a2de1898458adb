"""ConsolidateCart Use Case

Merges raw cart entries into consolidated line items, reconciles them
against live stock and writes the merged shape back to the store.
"""

import logging
from typing import Optional, Sequence
from libs.result import Result, Return
from src.app.repositories.line_item_store import LineItemStore
from src.app.services.checkout_registry import CheckoutRegistry
from src.app.services.errors import StockFetchError
from src.app.services.inventory_gateway import InventoryGateway
from src.app.services.notification_service import CartChangedEvent, CartChangeReason, ChangeNotifier
from src.app.services.unit_of_work import UnitOfWork
from src.domain.consolidation import merge_line_items
from src.domain.line_item import ConsolidatedLineItem, LineItem
from .calculate_pricing import CalculatePricing
from .dtos import CartViewDTO, StockAdjustmentDTO
from .stock_levels import fetch_stock_levels

logger = logging.getLogger(__name__)


def build_cart_view(
    session_id: str,
    items: Sequence[ConsolidatedLineItem],
    pricing: CalculatePricing,
    adjustments: Optional[list[StockAdjustmentDTO]] = None,
    stock_fetch_failures: Optional[list[str]] = None,
) -> CartViewDTO:
    return CartViewDTO(
        session_id=session_id,
        items=list(items),
        pricing=pricing.calculate(items).rounded(),
        item_count=len(items),
        adjustments=adjustments or [],
        stock_fetch_failures=stock_fetch_failures or [],
    )


def store_shape_changed(before: Sequence[LineItem], after: Sequence[LineItem]) -> bool:
    return [i.to_store_dict() for i in before] != [i.to_store_dict() for i in after]


class ConsolidateCart:
    """
    Use Case: Load the cart in its consolidated, stock-reconciled shape

    Business Rules:
    1. Entries sharing (product_key, employee) fold into one line item
    2. Stock is refreshed for every product id, concurrently
    3. A quantity above fresh stock is clamped to that stock (silent)
    4. A failed stock lookup keeps the last known stock and quantity
    5. The merged shape is written back only when it differs from storage,
       so a second run with unchanged stock writes nothing
    6. No write-back while an order for the cart is being submitted, or
       when the stored entries changed during the stock lookups; the view
       is still returned

    Flow:
    1. Load raw entries
    2. Merge by consolidation key
    3. Fetch stock for all product ids (fan-out, fan-in)
    4. Clamp quantities, record adjustments
    5. Persist and notify if the stored shape changed
    6. Return the cart view with pricing
    """

    def __init__(
        self,
        uow: UnitOfWork,
        store: LineItemStore,
        inventory_gateway: InventoryGateway,
        notifier: ChangeNotifier,
        pricing: Optional[CalculatePricing] = None,
        checkout_registry: Optional[CheckoutRegistry] = None,
    ):
        self.uow = uow
        self.store = store
        self.inventory_gateway = inventory_gateway
        self.notifier = notifier
        self.pricing = pricing or CalculatePricing()
        self.checkout_registry = checkout_registry

    async def execute(self, session_id: str) -> Result[CartViewDTO]:
        """
        Execute cart consolidation

        Args:
            session_id: Cart session identifier

        Returns:
            Result[CartViewDTO]: Consolidated cart with pricing, clamps and
            the product ids whose stock could not be refreshed
        """
        raw_items = await self.store.load(session_id)
        items = merge_line_items(raw_items)

        adjustments: list[StockAdjustmentDTO] = []
        failures: list[str] = []

        levels = await fetch_stock_levels(
            self.inventory_gateway,
            (item.product_id for item in items if item.product_id),
        )

        for item in items:
            if not item.product_id:
                continue
            level = levels[item.product_id]
            if isinstance(level, StockFetchError):
                if item.product_id not in failures:
                    failures.append(item.product_id)
                continue

            if item.quantity > level:
                adjustments.append(
                    StockAdjustmentDTO(
                        entry_id=item.entry_id,
                        product_name=item.product_name,
                        previous_quantity=item.quantity,
                        quantity=level,
                        stock=level,
                    )
                )
                item.quantity = level
            item.stock = level

        for adjustment in adjustments:
            logger.info(
                f"Clamped '{adjustment.product_name}' in cart {session_id}: "
                f"{adjustment.previous_quantity} -> {adjustment.quantity} (stock={adjustment.stock})"
            )

        if store_shape_changed(raw_items, items) and await self._can_write_back(session_id, raw_items):
            await self.store.save(session_id, items)
            await self.uow.commit()
            await self.notifier.publish(
                CartChangedEvent(
                    session_id=session_id,
                    reason=CartChangeReason.UPDATED,
                    item_count=len(items),
                )
            )
            logger.info(f"Cart {session_id} consolidated: {len(raw_items)} entries -> {len(items)} line items")

        return Return.ok(build_cart_view(session_id, items, self.pricing, adjustments, failures))

    async def _can_write_back(self, session_id: str, raw_items: Sequence[LineItem]) -> bool:
        if self.checkout_registry and self.checkout_registry.is_submitting(session_id):
            logger.info(f"Cart {session_id} is being submitted, consolidated view not written back")
            return False

        # Stock lookups await; a submission or another mutation may have
        # rewritten the slot since it was read
        current = await self.store.load(session_id)
        if store_shape_changed(raw_items, current):
            logger.info(f"Cart {session_id} changed during consolidation, write-back skipped")
            return False
        if self.checkout_registry and self.checkout_registry.is_submitting(session_id):
            return False
        return True
