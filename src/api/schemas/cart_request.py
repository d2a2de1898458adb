"""Request schemas for Cart API

Pydantic models for validating incoming HTTP requests.
"""

from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from src.domain.line_item import OrderPriority


class AddLineItemRequestSchema(BaseModel):
    """
    Request schema for adding a product to the cart

    Used for POST /carts/{session_id}/items endpoint.
    """

    product_id: Optional[str] = Field(
        default=None,
        description="Product identifier (omit for ad-hoc entries)"
    )

    product_name: str = Field(
        ...,
        min_length=1,
        description="Product display name (required, non-empty)"
    )

    brand: Optional[str] = Field(default=None, description="Brand name")

    category: Optional[str] = Field(default=None, description="Category name")

    employee: str = Field(
        ...,
        min_length=1,
        description="Salesperson the entry is attributed to"
    )

    company: str = Field(
        ...,
        min_length=1,
        description="Account (company) name the cart is built for"
    )

    unit_price: Decimal = Field(
        ...,
        ge=0,
        description="Unit price in BD"
    )

    vat_rate: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        le=100,
        description="VAT percent (e.g., 10 for 10%)"
    )

    stock: int = Field(
        ...,
        description="Stock shown in the catalog when adding"
    )

    quantity: int = Field(
        default=1,
        ge=1,
        description="Units to add (default 1)"
    )

    order_status: OrderPriority = Field(
        default=OrderPriority.NORMAL,
        description="Priority tag: normal, urgent, rush or emergency"
    )

    @field_validator("order_status", mode="before")
    @classmethod
    def normalize_priority(cls, v):
        """Accept priority tags in any case"""
        return OrderPriority(v) if v is not None else OrderPriority.NORMAL

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "product_id": "665f1c2ab0e4",
                "product_name": "Nitrile Gloves (M)",
                "brand": "SafeTouch",
                "category": "Consumables",
                "employee": "Sara",
                "company": "Seef Dental Clinic",
                "unit_price": "4.500",
                "vat_rate": "10",
                "stock": 40,
                "quantity": 2,
                "order_status": "urgent"
            }
        }
    )


class SetQuantityRequestSchema(BaseModel):
    """
    Request schema for changing a line item quantity

    Used for PATCH /carts/{session_id}/items/{item_id}. A quantity below
    1 removes the line item.
    """

    quantity: int = Field(..., description="Requested quantity")


class SubmitOrderRequestSchema(BaseModel):
    """
    Request schema for submitting the cart

    Used for POST /carts/{session_id}/checkout/submit endpoint.
    """

    payment_method: str = Field(
        ...,
        min_length=1,
        description="cash, visa, benefitpay, flooss or credit"
    )

    model_config = ConfigDict(json_schema_extra={"example": {"payment_method": "credit"}})


class CartCountResponseSchema(BaseModel):
    """Response body of GET /carts/{session_id}/count"""

    session_id: str
    count: int = Field(..., ge=0, description="Entries currently stored for the session")
