"""
Calculate Pricing Use Case

Computes cart totals from consolidated line items. Pure: no I/O and no
rounding until the caller asks for the presentation view.
"""
from decimal import Decimal
from typing import Iterable, Optional
from src.domain.line_item import LineItem
from src.domain.pricing import PricingSummary


DEFAULT_DELIVERY_FEE = Decimal("2")
DEFAULT_FREE_DELIVERY_THRESHOLD = Decimal("50")


class CalculatePricing:
    """
    Use case: Cart pricing

    - subtotal = sum(unit_price * quantity)
    - delivery fee is waived once subtotal reaches the threshold
    - total_vat = sum(unit_price * quantity * vat_rate / 100)
    - grand_total = subtotal + delivery_fee + total_vat
    """

    def __init__(
        self,
        delivery_fee: Optional[Decimal] = None,
        free_delivery_threshold: Optional[Decimal] = None,
    ):
        self.delivery_fee = DEFAULT_DELIVERY_FEE if delivery_fee is None else delivery_fee
        self.free_delivery_threshold = (
            DEFAULT_FREE_DELIVERY_THRESHOLD
            if free_delivery_threshold is None
            else free_delivery_threshold
        )

    def calculate(self, items: Iterable[LineItem]) -> PricingSummary:
        subtotal = Decimal("0")
        total_vat = Decimal("0")
        for item in items:
            subtotal += item.line_total
            total_vat += item.vat_amount

        delivery_fee = Decimal("0") if subtotal >= self.free_delivery_threshold else self.delivery_fee

        return PricingSummary(
            subtotal=subtotal,
            delivery_fee=delivery_fee,
            total_vat=total_vat,
            grand_total=subtotal + delivery_fee + total_vat,
        )
