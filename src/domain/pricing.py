"""Pricing Summary Value Object

Derived from the consolidated cart on every read. Never persisted.
"""

from decimal import Decimal
from pydantic import BaseModel, Field
from src.domain.money import quantize_money


class PricingSummary(BaseModel):
    """
    PricingSummary - Cart totals

    Domain Rules:
    - grand_total = subtotal + delivery_fee + total_vat
    - Values are exact Decimals; rounded() gives the two-decimal view
    """

    subtotal: Decimal = Field(..., description="Sum of unit_price * quantity")
    delivery_fee: Decimal = Field(..., description="Flat fee, waived at/above threshold")
    total_vat: Decimal = Field(..., description="Sum of per-line VAT")
    grand_total: Decimal = Field(..., description="subtotal + delivery_fee + total_vat")

    def rounded(self) -> "PricingSummary":
        """
        Two-decimal presentation of the summary

        The grand total is the sum of the rounded parts so the presented
        figures still add up.
        """
        subtotal = quantize_money(self.subtotal)
        delivery_fee = quantize_money(self.delivery_fee)
        total_vat = quantize_money(self.total_vat)
        return PricingSummary(
            subtotal=subtotal,
            delivery_fee=delivery_fee,
            total_vat=total_vat,
            grand_total=subtotal + delivery_fee + total_vat,
        )
