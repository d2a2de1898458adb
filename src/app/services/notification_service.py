"""Cart Change Notification Interface

Defines the contract for broadcasting line item store mutations to
consumers that display cart state (e.g., item counters).
"""

from abc import ABC, abstractmethod
from datetime import datetime
from enum import Enum
from pydantic import BaseModel, Field


class CartChangeReason(str, Enum):
    """Why the store changed"""
    UPDATED = "updated"    # Items added, merged, re-quantified or removed
    CLEARED = "cleared"    # Cart emptied after a submitted order


class CartChangedEvent(BaseModel):
    """Broadcast after every committed write to a cart slot"""

    session_id: str
    reason: CartChangeReason
    item_count: int = Field(..., ge=0, description="Entries left in the slot")
    occurred_at: datetime = Field(default_factory=datetime.utcnow)


class ChangeNotifier(ABC):
    """
    Publish/subscribe channel for cart changes

    Implementations can deliver events:
    - In process (subscribed callbacks)
    - To the log
    - Via webhook (HTTP POST)
    """

    @abstractmethod
    async def publish(self, event: CartChangedEvent) -> bool:
        """
        Publish a cart change

        Args:
            event: CartChangedEvent to broadcast

        Returns:
            True if delivered successfully, False otherwise
        """
        pass
