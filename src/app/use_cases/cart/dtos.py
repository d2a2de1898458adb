"""Data Transfer Objects for Cart Use Cases

Pydantic models for command inputs and response outputs.
"""

from decimal import Decimal
from typing import Any, Optional
from pydantic import BaseModel, Field
from src.domain.line_item import ConsolidatedLineItem, OrderPriority
from src.domain.pricing import PricingSummary


class StockAdjustmentDTO(BaseModel):
    """Quantity clamped down during stock reconciliation"""

    entry_id: str = Field(..., description="Consolidated line item id")
    product_name: str = Field(..., description="Product display name")
    previous_quantity: int = Field(..., description="Quantity before clamping")
    quantity: int = Field(..., description="Quantity after clamping")
    stock: int = Field(..., description="Freshly observed stock")


class StockMismatchDTO(BaseModel):
    """Line whose requested quantity exceeds fresh stock at submission time"""

    product_name: str
    requested: int
    available: int


class CartViewDTO(BaseModel):
    """
    Response DTO for cart reads and mutations

    Returned by ConsolidateCart, AddLineItem, SetQuantity, RemoveLineItem.
    """

    session_id: str = Field(
        ...,
        description="Cart session identifier"
    )

    items: list[ConsolidatedLineItem] = Field(
        default_factory=list,
        description="Consolidated line items"
    )

    pricing: PricingSummary = Field(
        ...,
        description="Two-decimal pricing summary of the items"
    )

    item_count: int = Field(
        ...,
        description="Number of consolidated line items"
    )

    adjustments: list[StockAdjustmentDTO] = Field(
        default_factory=list,
        description="Quantities clamped to live stock during this read"
    )

    stock_fetch_failures: list[str] = Field(
        default_factory=list,
        description="Product ids whose stock could not be refreshed"
    )


class AddLineItemCommandDTO(BaseModel):
    """
    Command DTO for adding a product to the cart

    Used as input to AddLineItem use case.
    """

    session_id: str = Field(..., description="Cart session identifier")
    product_id: Optional[str] = Field(default=None, description="Product id (None for ad-hoc entries)")
    product_name: str = Field(..., min_length=1, description="Product display name")
    brand: Optional[str] = None
    category: Optional[str] = None
    employee: str = Field(..., min_length=1, description="Salesperson attribution")
    company: str = Field(..., min_length=1, description="Target account name")
    unit_price: Decimal = Field(..., ge=0, description="Unit price")
    vat_rate: Decimal = Field(default=Decimal("0"), ge=0, description="VAT percent")
    stock: int = Field(..., description="Stock known at the time of adding")
    quantity: int = Field(default=1, ge=1, description="Units to add")
    order_status: OrderPriority = Field(default=OrderPriority.NORMAL, description="Priority tag")


class SetQuantityCommandDTO(BaseModel):
    """
    Command DTO for changing a line item quantity

    A quantity below 1 removes the line item.
    """

    session_id: str = Field(..., description="Cart session identifier")
    line_item_id: str = Field(..., description="Consolidated line item id")
    quantity: int = Field(..., description="Requested quantity")


class RemoveLineItemCommandDTO(BaseModel):
    """Command DTO for removing a consolidated line item"""

    session_id: str = Field(..., description="Cart session identifier")
    line_item_id: str = Field(..., description="Consolidated line item id")


class AccountStatusDTO(BaseModel):
    """
    Response DTO for account credit standing

    Returned by GetAccountStatus use case.
    """

    name: str
    is_active: bool
    status: str = Field(..., description="active, warning or over_limit")
    credit_limit: Decimal
    current_balance: Decimal
    available_balance: Decimal


class SubmitOrderCommandDTO(BaseModel):
    """Command DTO for submitting the cart with a payment method"""

    session_id: str = Field(..., description="Cart session identifier")
    payment_method: str = Field(..., description="cash, visa, benefitpay, flooss or credit")


class CheckoutStateDTO(BaseModel):
    """Current checkout state of a cart session"""

    session_id: str
    state: str
    payment_method: Optional[str] = None
    order_id: Optional[str] = None
    last_error_code: Optional[str] = None


class OrderSubmissionResponseDTO(BaseModel):
    """
    Response DTO for a successful order submission

    Returned by SubmissionController.submit.
    """

    session_id: str
    state: str
    order_id: Optional[str] = None
    payment_method: str
    pricing: PricingSummary
    order: dict[str, Any] = Field(default_factory=dict, description="Order record returned by the backend")
