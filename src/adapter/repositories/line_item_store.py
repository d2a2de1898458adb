"""SQLAlchemy implementation of LineItemStore

Keeps each cart as one JSON payload in the cart_slots table, keyed by
(session_id, slot_name). Writes are flushed, not committed; the caller
commits through the UnitOfWork.
"""

import json
import logging
from datetime import datetime
from typing import Optional, Sequence
from pydantic import ValidationError
from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.line_item_store import LineItemStore
from src.app.services.errors import StoreUnavailableError
from src.domain.cart_slot import CartSlot
from src.domain.line_item import LineItem

logger = logging.getLogger(__name__)


class SqlAlchemyLineItemStore(LineItemStore):
    """
    SQLAlchemy implementation of LineItemStore

    Features:
    - One row per session slot, payload replaced wholesale on save
    - Legacy entries normalized on load (see LineItem validators)
    - Database errors surface as StoreUnavailableError
    """

    def __init__(self, session: AsyncSession, slot_name: str = "shoppingCart"):
        self.session = session
        self.slot_name = slot_name

    async def _get_slot(self, session_id: str) -> Optional[CartSlot]:
        stmt = select(CartSlot).where(
            CartSlot.session_id == session_id,
            CartSlot.slot_name == self.slot_name,
        ).execution_options(populate_existing=True)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def load(self, session_id: str) -> list[LineItem]:
        """
        Read and parse the session's slot

        Entries that cannot be parsed as line items are skipped with a
        warning; a payload that is not JSON raises StoreUnavailableError.
        """
        try:
            slot = await self._get_slot(session_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to read cart slot for session {session_id}: {e}")
            raise StoreUnavailableError(f"Cart store read failed: {e}") from e

        if slot is None or not slot.payload:
            return []

        try:
            raw_entries = json.loads(slot.payload)
        except json.JSONDecodeError as e:
            logger.error(f"Corrupt cart payload for session {session_id}: {e}")
            raise StoreUnavailableError(f"Cart payload is not valid JSON: {e}") from e

        if not isinstance(raw_entries, list):
            logger.warning(f"Cart payload for session {session_id} is not a list, treating as empty")
            return []

        items: list[LineItem] = []
        for raw in raw_entries:
            try:
                items.append(LineItem.model_validate(raw))
            except ValidationError as e:
                logger.warning(f"Skipping unreadable cart entry in session {session_id}: {e.error_count()} errors")
        return items

    async def save(self, session_id: str, items: Sequence[LineItem]) -> None:
        """
        Replace the slot payload

        Args:
            session_id: Cart session identifier
            items: Line items in display order
        """
        payload = json.dumps([item.to_store_dict() for item in items])
        try:
            slot = await self._get_slot(session_id)
            if slot is None:
                slot = CartSlot(session_id=session_id, slot_name=self.slot_name, payload=payload)
            else:
                slot.payload = payload
                slot.updated_at = datetime.utcnow()
            self.session.add(slot)
            await self.session.flush()
        except SQLAlchemyError as e:
            logger.error(f"Failed to write cart slot for session {session_id}: {e}")
            raise StoreUnavailableError(f"Cart store write failed: {e}") from e

    async def clear(self, session_id: str) -> None:
        """Delete the slot row in a single statement"""
        stmt = delete(CartSlot).where(
            CartSlot.session_id == session_id,
            CartSlot.slot_name == self.slot_name,
        )
        try:
            await self.session.execute(stmt)
            await self.session.flush()
        except SQLAlchemyError as e:
            logger.error(f"Failed to clear cart slot for session {session_id}: {e}")
            raise StoreUnavailableError(f"Cart store clear failed: {e}") from e
