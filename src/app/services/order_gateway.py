"""Order Gateway Interface"""

from abc import ABC, abstractmethod
from typing import Any
from src.domain.order import OrderDraft


class OrderGateway(ABC):
    """
    Creates orders in the backend

    Implementations raise OrderGatewayError on network errors and on
    responses that are not a success.
    """

    @abstractmethod
    async def create_order(self, draft: OrderDraft) -> dict[str, Any]:
        """
        Submit an order draft

        Args:
            draft: OrderDraft built from the consolidated cart

        Returns:
            The created order record returned by the backend
        """
        pass
