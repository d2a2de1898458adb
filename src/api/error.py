"""HTTP error translation for use case failures"""

from typing import Any
from fastapi import status
from libs.result import Error


class ClientError(Exception):
    """
    Raised by routes when a use case returns an error

    Rendered by the app's exception handler as
    {"error": {"code", "message", "reason", "details"}}.
    """

    def __init__(self, error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.error = error
        self.status_code = status_code
        super().__init__(error.message)

    def to_content(self) -> dict[str, Any]:
        return {"error": self.error.model_dump(mode="json")}


STATUS_BY_CODE = {
    "LINE_ITEM_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "ACCOUNT_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "STOCK_EXCEEDED": status.HTTP_409_CONFLICT,
    "OUT_OF_STOCK": status.HTTP_409_CONFLICT,
    "COMPANY_MISMATCH": status.HTTP_409_CONFLICT,
    "PRE_SUBMISSION_STOCK_MISMATCH": status.HTTP_409_CONFLICT,
    "INVALID_CHECKOUT_STATE": status.HTTP_409_CONFLICT,
    "SUBMISSION_IN_PROGRESS": status.HTTP_409_CONFLICT,
    "CART_LOCKED": status.HTTP_409_CONFLICT,
    "CREDIT_LIMIT_EXCEEDED": status.HTTP_402_PAYMENT_REQUIRED,
    "STOCK_FETCH_FAILED": status.HTTP_502_BAD_GATEWAY,
    "ACCOUNT_GATEWAY_FAILURE": status.HTTP_502_BAD_GATEWAY,
    "ORDER_GATEWAY_FAILURE": status.HTTP_502_BAD_GATEWAY,
}


def client_error(error: Error) -> ClientError:
    """ClientError with the HTTP status matching the error code (400 otherwise)"""
    return ClientError(error, status_code=STATUS_BY_CODE.get(error.code, status.HTTP_400_BAD_REQUEST))
