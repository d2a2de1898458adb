"""HTTP Account Gateway

Lists customer accounts from GET /accounts.
"""

import logging
import httpx
from pydantic import ValidationError
from src.app.services.account_gateway import AccountGateway
from src.app.services.errors import AccountGatewayError
from src.domain.account import Account
from .backend_client import BackendClient

logger = logging.getLogger(__name__)


class HttpAccountGateway(BackendClient, AccountGateway):
    """
    Account gateway backed by the accounts endpoint

    The endpoint has answered with a bare list, {"data": [...]} and
    {"accounts": [...]} over time; all three are accepted.
    """

    async def list_accounts(self) -> list[Account]:
        try:
            async with self._client() as client:
                response = await client.get("/accounts")
        except httpx.HTTPError as e:
            raise AccountGatewayError(f"Account request failed: {e}") from e

        body = self._json(response)
        if response.is_error:
            raise AccountGatewayError(
                self._error_message(body, f"Account request returned HTTP {response.status_code}"),
                status_code=response.status_code,
            )

        if isinstance(body, list):
            raw_accounts = body
        elif isinstance(body, dict) and isinstance(body.get("data"), list):
            raw_accounts = body["data"]
        elif isinstance(body, dict) and isinstance(body.get("accounts"), list):
            raw_accounts = body["accounts"]
        else:
            raise AccountGatewayError("Unexpected accounts response shape", status_code=response.status_code)

        accounts: list[Account] = []
        for raw in raw_accounts:
            try:
                accounts.append(Account.model_validate(raw))
            except ValidationError as e:
                logger.warning(f"Skipping unreadable account record: {e.error_count()} errors")
        return accounts
