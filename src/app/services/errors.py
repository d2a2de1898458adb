"""Exceptions raised by gateways and the line item store"""

from typing import Optional


class GatewayError(Exception):
    """A backend gateway call failed (network error or non-success response)"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class StockFetchError(GatewayError):
    """Current stock for a product could not be read"""

    def __init__(self, product_id: str, message: str, status_code: Optional[int] = None):
        self.product_id = product_id
        super().__init__(message, status_code)


class AccountGatewayError(GatewayError):
    """Account list could not be read"""


class OrderGatewayError(GatewayError):
    """Order creation failed or was rejected by the backend"""


class StoreUnavailableError(Exception):
    """The line item store could not be read or written"""
