"""SetQuantity Use Case

Changes the quantity of a consolidated line item, bounded by stock.
"""

import logging
from typing import Optional
from libs.result import Result, Return, Error
from src.app.repositories.line_item_store import LineItemStore
from src.app.services.checkout_registry import CheckoutRegistry
from src.app.services.errors import StockFetchError
from src.app.services.inventory_gateway import InventoryGateway
from src.app.services.notification_service import CartChangedEvent, CartChangeReason, ChangeNotifier
from src.app.services.unit_of_work import UnitOfWork
from src.domain.consolidation import find_line_item, merge_line_items, replace_entries
from .calculate_pricing import CalculatePricing
from .consolidate_cart import build_cart_view
from .dtos import CartViewDTO, RemoveLineItemCommandDTO, SetQuantityCommandDTO
from .remove_line_item import RemoveLineItem

logger = logging.getLogger(__name__)


class SetQuantity:
    """
    Use Case: Set the quantity of a line item

    Business Rules:
    1. quantity < 1 removes the line item
    2. Available stock is the cached stock, refreshed from the inventory
       gateway when the cache holds nothing
    3. quantity > available stock is rejected (STOCK_EXCEEDED), nothing changes
    4. On success the consolidated item replaces every entry folded into it
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

    async def execute(self, command: SetQuantityCommandDTO) -> Result[CartViewDTO]:
        """
        Execute quantity change

        Args:
            command: SetQuantityCommandDTO with session_id, line_item_id, quantity

        Returns:
            Result[CartViewDTO]: Updated cart or error

        Errors:
            CART_LOCKED: Order submission in flight
            LINE_ITEM_NOT_FOUND: No line item with that id
            STOCK_FETCH_FAILED: Stock unknown and the gateway lookup failed
            STOCK_EXCEEDED: Requested quantity above available stock
        """
        if command.quantity < 1:
            remove = RemoveLineItem(
                self.uow, self.store, self.notifier, self.pricing, self.checkout_registry
            )
            return await remove.execute(
                RemoveLineItemCommandDTO(
                    session_id=command.session_id,
                    line_item_id=command.line_item_id,
                )
            )

        if self.checkout_registry and self.checkout_registry.is_submitting(command.session_id):
            return Return.err(
                Error(
                    code="CART_LOCKED",
                    message="Cart cannot change while its order is being submitted",
                )
            )

        raw_items = await self.store.load(command.session_id)
        item = find_line_item(merge_line_items(raw_items), command.line_item_id)

        if not item:
            return Return.err(
                Error(
                    code="LINE_ITEM_NOT_FOUND",
                    message=f"Line item {command.line_item_id} not found in cart",
                )
            )

        available_stock = item.stock or 0
        if not item.stock and item.product_id:
            try:
                available_stock = max(await self.inventory_gateway.get_current_stock(item.product_id), 0)
            except StockFetchError as e:
                logger.warning(f"Stock lookup for '{item.product_name}' failed: {e.message}")
                return Return.err(
                    Error(
                        code="STOCK_FETCH_FAILED",
                        message=f"Could not verify stock for \"{item.product_name}\"",
                        reason=e.message,
                    )
                )

        if command.quantity > available_stock:
            logger.warning(
                f"Rejected quantity {command.quantity} for '{item.product_name}' "
                f"in cart {command.session_id}: only {available_stock} in stock"
            )
            return Return.err(
                Error(
                    code="STOCK_EXCEEDED",
                    message=f"Sorry, only {available_stock} units of \"{item.product_name}\" are available in stock.",
                    reason=f"requested={command.quantity}, available={available_stock}",
                    details={
                        "product_name": item.product_name,
                        "requested": command.quantity,
                        "available": available_stock,
                    },
                )
            )

        item.quantity = command.quantity
        item.stock = available_stock
        updated = replace_entries(raw_items, item)

        await self.store.save(command.session_id, updated)
        await self.uow.commit()
        await self.notifier.publish(
            CartChangedEvent(
                session_id=command.session_id,
                reason=CartChangeReason.UPDATED,
                item_count=len(updated),
            )
        )

        return Return.ok(build_cart_view(command.session_id, merge_line_items(updated), self.pricing))
