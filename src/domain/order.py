"""Order Draft Domain Entity

Built only at submission time from the consolidated cart, the selected
account and the chosen payment method. Never persisted locally; it
exists to produce the Order Gateway payload.
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field
from src.domain.line_item import OrderPriority
from src.domain.pricing import PricingSummary

ACCOUNTANT_REVIEW_PENDING = "PENDING_REVIEW"


class PaymentMethod(str, Enum):
    """Payment methods offered at checkout"""
    CASH = "cash"
    VISA = "visa"
    BENEFITPAY = "benefitpay"
    FLOOSS = "flooss"
    CREDIT = "credit"

    @property
    def wire_value(self) -> str:
        """Spelling expected by the order backend"""
        return _WIRE_VALUES[self]


_WIRE_VALUES = {
    PaymentMethod.CASH: "cash",
    PaymentMethod.VISA: "visa",
    PaymentMethod.BENEFITPAY: "benefit",
    PaymentMethod.FLOOSS: "floos",
    PaymentMethod.CREDIT: "credit",
}


class PaymentStatus(str, Enum):
    PENDING = "pending"


class ContactInfo(BaseModel):
    name: str
    email: str
    phone: str
    address: str
    city: str


class OrderCustomer(BaseModel):
    company: Optional[str] = None
    company_name: str
    employee: str
    contact_info: ContactInfo


class OrderDraftItem(BaseModel):
    product: Optional[str] = None
    product_name: str
    brand: Optional[str] = None
    category: Optional[str] = None
    quantity: int
    unit_price: Decimal
    vat_rate: Decimal


class ShippingInfo(BaseModel):
    address: str
    city: str
    country: str


class OrderDraft(BaseModel):
    """
    OrderDraft - Order about to be created

    Domain Rules:
    - pricing is the rounded PricingSummary of the same items
    - payment status starts as pending
    - accountant review status starts as PENDING_REVIEW
    """

    customer: OrderCustomer
    items: list[OrderDraftItem] = Field(..., min_length=1)
    pricing: PricingSummary
    currency: str
    payment_method: PaymentMethod
    payment_status: PaymentStatus = PaymentStatus.PENDING
    order_status: OrderPriority = OrderPriority.NORMAL
    shipping: ShippingInfo
    accountant_review_status: str = ACCOUNTANT_REVIEW_PENDING

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the POST /orders body"""
        contact = self.customer.contact_info
        return {
            "orderType": "invoice",
            "status": "pending",
            "customer": {
                "company": self.customer.company,
                "companyName": self.customer.company_name,
                "employee": self.customer.employee,
                "contactInfo": {
                    "name": contact.name,
                    "email": contact.email,
                    "phone": contact.phone,
                    "address": contact.address,
                    "city": contact.city,
                },
            },
            "items": [
                {
                    "product": item.product,
                    "productName": item.product_name,
                    "brand": item.brand,
                    "category": item.category,
                    "quantity": item.quantity,
                    "unitPrice": float(item.unit_price),
                    "vatRate": float(item.vat_rate),
                }
                for item in self.items
            ],
            "pricing": {
                "subtotal": float(self.pricing.subtotal),
                "deliveryCost": float(self.pricing.delivery_fee),
                "totalVat": float(self.pricing.total_vat),
                "total": float(self.pricing.grand_total),
                "currency": self.currency,
            },
            "payment": {
                "method": self.payment_method.wire_value,
                "status": self.payment_status.value,
            },
            # Backend expects the capitalized tag ("Normal", "Urgent", ...)
            "orderStatus": self.order_status.value.capitalize(),
            "shipping": {
                "address": self.shipping.address,
                "city": self.shipping.city,
                "country": self.shipping.country,
            },
            "accountantReviewStatus": self.accountant_review_status,
        }
