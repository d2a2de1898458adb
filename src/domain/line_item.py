"""Line Item Domain Entities

Raw cart entries as persisted in the Line Item Store, and the
consolidated view derived from them.
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel
from src.domain.money import parse_money


class OrderPriority(str, Enum):
    """Priority tag attached to a cart entry"""
    NORMAL = "normal"
    URGENT = "urgent"
    RUSH = "rush"
    EMERGENCY = "emergency"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if member.value == normalized:
                    return member
        return cls.NORMAL


class LineItem(BaseModel):
    """
    LineItem - One entry in the cart as stored

    Domain Rules:
    - entry_id is unique per addition (opaque string)
    - product_id is optional (ad-hoc entries are keyed by product_name)
    - unit_price and vat_rate are Decimal; display strings are parsed on load
    - original_ids is present only on entries written back after consolidation
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    entry_id: str = Field(
        ...,
        alias="entryId",
        validation_alias=AliasChoices("entryId", "id", "entry_id"),
    )
    product_id: Optional[str] = None
    product_name: str = ""
    brand: Optional[str] = None
    category: Optional[str] = None
    employee: Optional[str] = None
    company: Optional[str] = None
    unit_price: Decimal = Decimal("0")
    quantity: int = Field(default=1, ge=0)
    vat_rate: Decimal = Decimal("0")
    stock: Optional[int] = None
    order_status: OrderPriority = OrderPriority.NORMAL
    order_date: Optional[str] = None
    order_time: Optional[str] = None
    original_ids: Optional[list[str]] = None

    @field_validator("entry_id", mode="before")
    @classmethod
    def _coerce_entry_id(cls, v: Any) -> str:
        return str(v)

    @field_validator("product_id", mode="before")
    @classmethod
    def _coerce_product_id(cls, v: Any) -> Optional[str]:
        if v is None or v == "":
            return None
        return str(v)

    @field_validator("unit_price", mode="before")
    @classmethod
    def _parse_unit_price(cls, v: Any) -> Decimal:
        return parse_money(v)

    @field_validator("vat_rate", mode="before")
    @classmethod
    def _parse_vat_rate(cls, v: Any) -> Decimal:
        return parse_money(v)

    @field_validator("quantity", mode="before")
    @classmethod
    def _default_quantity(cls, v: Any) -> Any:
        return 1 if v is None else v

    @field_validator("order_status", mode="before")
    @classmethod
    def _parse_order_status(cls, v: Any) -> OrderPriority:
        return OrderPriority(v) if v is not None else OrderPriority.NORMAL

    @field_validator("original_ids", mode="before")
    @classmethod
    def _coerce_original_ids(cls, v: Any) -> Optional[list[str]]:
        if v is None:
            return None
        return [str(i) for i in v]

    @field_serializer("unit_price", "vat_rate")
    def _serialize_decimal(self, v: Decimal) -> float:
        return float(v)

    @property
    def product_key(self) -> str:
        """Product identity used for merging: product id, else product name"""
        return self.product_id or self.product_name or self.entry_id

    @property
    def consolidation_key(self) -> str:
        return f"{self.product_key}|{self.employee or 'unknown'}"

    @property
    def contributing_ids(self) -> list[str]:
        """Raw entry ids folded into this entry (itself when never merged)"""
        return list(self.original_ids) if self.original_ids else [self.entry_id]

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity

    @property
    def vat_amount(self) -> Decimal:
        return self.line_total * self.vat_rate / Decimal(100)

    def to_store_dict(self) -> dict[str, Any]:
        """Serialize to the JSON shape kept in the Store slot"""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ConsolidatedLineItem(LineItem):
    """
    ConsolidatedLineItem - A LineItem plus the raw entries folded into it

    Domain Rules:
    - At most one per (product_key, employee)
    - quantity equals the sum of the contributing entries' quantities
    - entry_id is the id of the first contributing entry
    """

    original_ids: list[str] = Field(default_factory=list)
