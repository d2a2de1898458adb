"""Unit tests for CalculatePricing use case"""

from decimal import Decimal
import pytest
from src.app.use_cases.cart.calculate_pricing import CalculatePricing
from src.domain.consolidation import merge_line_items
from tests.fixtures.fakes import make_item


class TestCalculatePricing:
    def test_merged_cart_at_threshold_gets_free_delivery(self, pricing):
        # Arrange
        items = merge_line_items([
            make_item("e1", quantity=2, unit_price=Decimal("10"), vat_rate=Decimal("5")),
            make_item("e2", quantity=3, unit_price=Decimal("10"), vat_rate=Decimal("5")),
        ])

        # Act
        summary = pricing.calculate(items)

        # Assert
        assert items[0].quantity == 5
        assert summary.subtotal == Decimal("50")
        assert summary.delivery_fee == Decimal("0")
        assert summary.total_vat == Decimal("2.5")
        assert summary.grand_total == Decimal("52.5")

    def test_small_cart_pays_delivery(self, pricing):
        items = [make_item("e1", unit_price=Decimal("20"), quantity=1, vat_rate=Decimal("0"))]

        summary = pricing.calculate(items)

        assert summary.subtotal == Decimal("20")
        assert summary.delivery_fee == Decimal("2")
        assert summary.total_vat == Decimal("0")
        assert summary.grand_total == Decimal("22")

    def test_just_below_threshold_pays_delivery(self, pricing):
        items = [make_item("e1", unit_price=Decimal("49.99"), quantity=1)]

        assert pricing.calculate(items).delivery_fee == Decimal("2")

    def test_no_float_drift(self, pricing):
        # 0.1 * 3 is not 0.3 in binary floating point
        items = [make_item("e1", unit_price=0.1, quantity=3, vat_rate=Decimal("10"))]

        summary = pricing.calculate(items)

        assert summary.subtotal == Decimal("0.3")
        assert summary.total_vat == Decimal("0.03")

    def test_rounding_happens_only_in_presentation(self, pricing):
        # Arrange - three lines of 1.005 VAT each
        items = [
            make_item(f"e{i}", product_id=f"p{i}", unit_price=Decimal("20.1"), vat_rate=Decimal("5"))
            for i in range(3)
        ]

        # Act
        exact = pricing.calculate(items)
        shown = exact.rounded()

        # Assert
        assert exact.total_vat == Decimal("3.015")
        assert shown.total_vat == Decimal("3.02")
        assert shown.grand_total == shown.subtotal + shown.delivery_fee + shown.total_vat

    @pytest.mark.parametrize(
        "prices",
        [
            [Decimal("0")],
            [Decimal("12.345"), Decimal("7.777")],
            [Decimal("25"), Decimal("25")],
            [Decimal("99.999"), Decimal("0.001")],
        ],
    )
    def test_grand_total_is_sum_of_parts(self, pricing, prices):
        items = [
            make_item(f"e{i}", product_id=f"p{i}", unit_price=price, vat_rate=Decimal("10"))
            for i, price in enumerate(prices)
        ]

        summary = pricing.calculate(items)

        assert summary.grand_total == summary.subtotal + summary.delivery_fee + summary.total_vat
        assert (summary.delivery_fee == 0) == (summary.subtotal >= 50)

    def test_configured_fee_and_threshold(self):
        pricing = CalculatePricing(delivery_fee=Decimal("3.5"), free_delivery_threshold=Decimal("100"))
        items = [make_item("e1", unit_price=Decimal("60"))]

        assert pricing.calculate(items).delivery_fee == Decimal("3.5")

    def test_empty_cart(self, pricing):
        summary = pricing.calculate([])

        assert summary.subtotal == Decimal("0")
        assert summary.grand_total == summary.delivery_fee
