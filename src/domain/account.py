"""Account Domain Entity

Customer account as returned by the Account Gateway. Read-only to the
cart core; used for the credit-limit admission check and the order's
customer block.
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from src.domain.money import parse_money

WARNING_RATIO = Decimal("0.9")


class CreditStatus(str, Enum):
    """Credit standing derived from balance vs limit"""
    ACTIVE = "active"
    WARNING = "warning"        # Balance at or above 90% of limit
    OVER_LIMIT = "over_limit"  # Balance above limit


class Account(BaseModel):
    """
    Account - Customer account with credit terms

    Domain Rules:
    - available_balance = max(credit_limit - current_balance, 0)
    - WARNING when current_balance >= 0.9 * credit_limit
    - OVER_LIMIT when current_balance > credit_limit
    - Thresholds only apply when both limit and balance are positive
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("_id", "id"),
    )
    name: str
    credit_limit: Decimal = Decimal("0")
    current_balance: Decimal = Decimal("0")
    is_active: bool = True
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[dict[str, Any]] = None
    company: Optional[Any] = None
    staff: list[dict[str, Any]] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v: Any) -> Optional[str]:
        return None if v is None else str(v)

    @field_validator("credit_limit", "current_balance", mode="before")
    @classmethod
    def _parse_amount(cls, v: Any) -> Decimal:
        return parse_money(v)

    @field_validator("is_active", mode="before")
    @classmethod
    def _default_active(cls, v: Any) -> bool:
        # Only an explicit false deactivates an account
        return v is not False

    @field_validator("staff", mode="before")
    @classmethod
    def _default_staff(cls, v: Any) -> list:
        return v or []

    @property
    def available_balance(self) -> Decimal:
        return max(self.credit_limit - self.current_balance, Decimal("0"))

    @property
    def credit_status(self) -> CreditStatus:
        if self.current_balance > 0 and self.credit_limit > 0:
            if self.current_balance > self.credit_limit:
                return CreditStatus.OVER_LIMIT
            if self.current_balance >= self.credit_limit * WARNING_RATIO:
                return CreditStatus.WARNING
        return CreditStatus.ACTIVE

    @property
    def company_id(self) -> Optional[str]:
        """Company reference: populated object id, raw id, or the account id"""
        if isinstance(self.company, dict):
            company_id = self.company.get("_id") or self.company.get("id")
            if company_id:
                return str(company_id)
        elif self.company:
            return str(self.company)
        return self.id

    @property
    def primary_contact(self) -> dict[str, Any]:
        return self.staff[0] if self.staff else {}
