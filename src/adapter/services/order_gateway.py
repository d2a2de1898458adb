"""HTTP Order Gateway

Creates orders through POST /orders.
"""

import logging
from typing import Any
import httpx
from src.app.services.errors import OrderGatewayError
from src.app.services.order_gateway import OrderGateway
from src.domain.order import OrderDraft
from .backend_client import BackendClient

logger = logging.getLogger(__name__)


class HttpOrderGateway(BackendClient, OrderGateway):
    """
    Order gateway backed by the orders endpoint

    Success needs a 2xx status and a body that does not say
    "success": false. Nothing is retried.
    """

    async def create_order(self, draft: OrderDraft) -> dict[str, Any]:
        payload = draft.to_payload()
        try:
            async with self._client() as client:
                response = await client.post("/orders", json=payload)
        except httpx.HTTPError as e:
            raise OrderGatewayError(f"Order request failed: {e}") from e

        body = self._json(response)
        if response.is_error or not isinstance(body, dict) or body.get("success") is False:
            message = self._error_message(body, "Error sending order to accountant. Please try again.")
            raise OrderGatewayError(message, status_code=response.status_code)

        order = body.get("data") if isinstance(body.get("data"), dict) else body
        logger.info(f"Backend accepted order {order.get('_id') or order.get('id')}")
        return order
