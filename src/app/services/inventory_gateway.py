"""Inventory Gateway Interface"""

from abc import ABC, abstractmethod


class InventoryGateway(ABC):
    """
    Read-only access to live product stock

    Implementations raise StockFetchError on any failure.
    """

    @abstractmethod
    async def get_current_stock(self, product_id: str) -> int:
        """
        Fetch current available units for a product

        Args:
            product_id: Product identifier

        Returns:
            Current stock (units)
        """
        pass
