"""RemoveLineItem Use Case

Removes a consolidated line item and every raw entry folded into it.
"""

import logging
from typing import Optional
from libs.result import Result, Return, Error
from src.app.repositories.line_item_store import LineItemStore
from src.app.services.checkout_registry import CheckoutRegistry
from src.app.services.notification_service import CartChangedEvent, CartChangeReason, ChangeNotifier
from src.app.services.unit_of_work import UnitOfWork
from src.domain.consolidation import find_line_item, merge_line_items
from .calculate_pricing import CalculatePricing
from .consolidate_cart import build_cart_view
from .dtos import CartViewDTO, RemoveLineItemCommandDTO

logger = logging.getLogger(__name__)


class RemoveLineItem:
    """
    Use Case: Remove a line item from the cart

    Business Rules:
    1. Removing a merged line item deletes every entry in its original_ids
    2. Removing a single line item deletes its one entry
    3. The store shrinks by exactly the number of deleted entries
    4. Not allowed while an order submission for the cart is in flight
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

    async def execute(self, command: RemoveLineItemCommandDTO) -> Result[CartViewDTO]:
        """
        Execute line item removal

        Args:
            command: RemoveLineItemCommandDTO with session_id and line_item_id

        Returns:
            Result[CartViewDTO]: Re-consolidated cart or error
        """
        if self.checkout_registry and self.checkout_registry.is_submitting(command.session_id):
            return Return.err(
                Error(
                    code="CART_LOCKED",
                    message="Cart cannot change while its order is being submitted",
                )
            )

        raw_items = await self.store.load(command.session_id)
        target = find_line_item(merge_line_items(raw_items), command.line_item_id)

        if not target:
            return Return.err(
                Error(
                    code="LINE_ITEM_NOT_FOUND",
                    message=f"Line item {command.line_item_id} not found in cart",
                )
            )

        removed_ids = set(target.original_ids)
        remaining = [entry for entry in raw_items if entry.entry_id not in removed_ids]

        await self.store.save(command.session_id, remaining)
        await self.uow.commit()
        await self.notifier.publish(
            CartChangedEvent(
                session_id=command.session_id,
                reason=CartChangeReason.UPDATED,
                item_count=len(remaining),
            )
        )

        logger.info(
            f"Removed '{target.product_name}' from cart {command.session_id} "
            f"({len(raw_items) - len(remaining)} entries)"
        )

        return Return.ok(build_cart_view(command.session_id, merge_line_items(remaining), self.pricing))
