"""Line Item Store Interface

Defines the contract for the durable, session-scoped cart slot.
"""

from abc import ABC, abstractmethod
from typing import Sequence
from src.domain.line_item import LineItem


class LineItemStore(ABC):
    """
    Repository interface for the cart's single named slot

    The slot holds the serialized list of raw line items and is the only
    durable state of the cart. Implementations raise StoreUnavailableError
    when the persistence layer itself fails.
    """

    @abstractmethod
    async def load(self, session_id: str) -> list[LineItem]:
        """
        Read every line item held for the session

        Args:
            session_id: Cart session identifier

        Returns:
            Line items in stored order (empty list when the slot is absent)
        """
        pass

    @abstractmethod
    async def save(self, session_id: str, items: Sequence[LineItem]) -> None:
        """
        Replace the slot contents with the given items

        Args:
            session_id: Cart session identifier
            items: Line items to persist, in order
        """
        pass

    @abstractmethod
    async def clear(self, session_id: str) -> None:
        """
        Remove every line item of the session in one write

        Args:
            session_id: Cart session identifier
        """
        pass
