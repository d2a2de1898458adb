"""Cart domain use cases"""
from .consolidate_cart import ConsolidateCart
from .add_line_item import AddLineItem
from .set_quantity import SetQuantity
from .remove_line_item import RemoveLineItem
from .calculate_pricing import CalculatePricing
from .get_account_status import GetAccountStatus
from .submission_controller import SubmissionController
from .dtos import (
    StockAdjustmentDTO,
    StockMismatchDTO,
    CartViewDTO,
    AddLineItemCommandDTO,
    SetQuantityCommandDTO,
    RemoveLineItemCommandDTO,
    AccountStatusDTO,
    SubmitOrderCommandDTO,
    CheckoutStateDTO,
    OrderSubmissionResponseDTO,
)

__all__ = [
    "ConsolidateCart",
    "AddLineItem",
    "SetQuantity",
    "RemoveLineItem",
    "CalculatePricing",
    "GetAccountStatus",
    "SubmissionController",
    "StockAdjustmentDTO",
    "StockMismatchDTO",
    "CartViewDTO",
    "AddLineItemCommandDTO",
    "SetQuantityCommandDTO",
    "RemoveLineItemCommandDTO",
    "AccountStatusDTO",
    "SubmitOrderCommandDTO",
    "CheckoutStateDTO",
    "OrderSubmissionResponseDTO",
]
