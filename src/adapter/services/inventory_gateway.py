"""HTTP Inventory Gateway

Reads live stock from GET /products/{product_id}.
"""

import httpx
from src.app.services.errors import StockFetchError
from src.app.services.inventory_gateway import InventoryGateway
from .backend_client import BackendClient


class HttpInventoryGateway(BackendClient, InventoryGateway):
    """
    Inventory gateway backed by the products endpoint

    Accepts both the wrapped shape {"success": true, "data": {"stock": {"current": n}}}
    and a bare product {"stock": {"current": n}}. A product without a
    current stock figure counts as 0 units.
    """

    async def get_current_stock(self, product_id: str) -> int:
        try:
            async with self._client() as client:
                response = await client.get(f"/products/{product_id}")
        except httpx.HTTPError as e:
            raise StockFetchError(product_id, f"Stock request failed: {e}") from e

        body = self._json(response)
        if response.is_error:
            raise StockFetchError(
                product_id,
                self._error_message(body, f"Stock request returned HTTP {response.status_code}"),
                status_code=response.status_code,
            )
        if not isinstance(body, dict) or body.get("success") is False:
            raise StockFetchError(
                product_id,
                self._error_message(body, "Product lookup was not successful"),
                status_code=response.status_code,
            )

        product = body.get("data") if isinstance(body.get("data"), dict) else body
        stock = product.get("stock") or {}
        current = stock.get("current") if isinstance(stock, dict) else stock

        try:
            return int(current or 0)
        except (TypeError, ValueError) as e:
            raise StockFetchError(product_id, f"Unreadable stock value: {current!r}") from e
