"""Account Gateway Interface"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.account import Account


class AccountGateway(ABC):
    """
    Read-only access to customer accounts and their credit terms

    Implementations raise AccountGatewayError on any failure.
    """

    @abstractmethod
    async def list_accounts(self) -> list[Account]:
        """
        List every account visible to the caller

        Returns:
            Accounts with credit limit, current balance and active flag
        """
        pass

    async def find_by_name(self, name: str) -> Optional[Account]:
        """
        Resolve an account by its exact name

        Args:
            name: Account (company) name as stored on cart entries

        Returns:
            Account if found, None otherwise
        """
        for account in await self.list_accounts():
            if account.name == name:
                return account
        return None
