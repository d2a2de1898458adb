"""Get Account Status Use Case

Retrieves an account's credit standing for display next to the cart.
"""

from libs.result import Result, Return, Error
from src.app.services.account_gateway import AccountGateway
from src.app.services.errors import AccountGatewayError
from .dtos import AccountStatusDTO


class GetAccountStatus:
    """
    Get Account Status Use Case

    Read-only operation that resolves an account by name and derives its
    available balance and credit status.
    """

    def __init__(self, account_gateway: AccountGateway):
        self.account_gateway = account_gateway

    async def execute(self, name: str) -> Result[AccountStatusDTO]:
        """
        Execute account status lookup

        Args:
            name: Account name

        Returns:
            Result[AccountStatusDTO]: Credit standing or error

        Errors:
            ACCOUNT_GATEWAY_FAILURE: Accounts could not be listed
            ACCOUNT_NOT_FOUND: No account with that name
        """
        try:
            account = await self.account_gateway.find_by_name(name)
        except AccountGatewayError as e:
            return Return.err(
                Error(
                    code="ACCOUNT_GATEWAY_FAILURE",
                    message="Failed to load accounts",
                    reason=e.message,
                )
            )

        if not account:
            return Return.err(
                Error(
                    code="ACCOUNT_NOT_FOUND",
                    message=f"No account found with name {name}",
                )
            )

        return Return.ok(
            AccountStatusDTO(
                name=account.name,
                is_active=account.is_active,
                status=account.credit_status.value,
                credit_limit=account.credit_limit,
                current_balance=account.current_balance,
                available_balance=account.available_balance,
            )
        )
