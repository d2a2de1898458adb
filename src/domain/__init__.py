from .base import BaseModel, generate_uuid
from .line_item import LineItem, ConsolidatedLineItem, OrderPriority
from .consolidation import merge_line_items
from .account import Account, CreditStatus
from .pricing import PricingSummary
from .order import OrderDraft, OrderDraftItem, OrderCustomer, ContactInfo, ShippingInfo, PaymentMethod
from .checkout import CheckoutSession, CheckoutState, InvalidCheckoutTransition
from .cart_slot import CartSlot

__all__ = [
    "BaseModel",
    "generate_uuid",
    "LineItem",
    "ConsolidatedLineItem",
    "OrderPriority",
    "merge_line_items",
    "Account",
    "CreditStatus",
    "PricingSummary",
    "OrderDraft",
    "OrderDraftItem",
    "OrderCustomer",
    "ContactInfo",
    "ShippingInfo",
    "PaymentMethod",
    "CheckoutSession",
    "CheckoutState",
    "InvalidCheckoutTransition",
    "CartSlot",
]
