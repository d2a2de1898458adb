"""Money helpers

All monetary values inside the core are `Decimal`. Parsing from display
strings (e.g. "BD 1,250.500") happens only when data enters the core.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

CENT = Decimal("0.01")


def parse_money(value: Any) -> Decimal:
    """
    Normalize a price-like value to Decimal

    Accepts Decimal, int, float and display strings carrying a currency
    prefix and thousands separators. Unparseable values become 0.
    """
    if value is None or isinstance(value, bool):
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        # str() keeps the shortest repr, so 10.1 stays 10.1
        return Decimal(str(value))

    text = str(value).strip().replace(",", "")
    for prefix in ("BD", "BHD"):
        if text.upper().startswith(prefix):
            text = text[len(prefix):].strip()
    try:
        return Decimal(text) if text else Decimal("0")
    except InvalidOperation:
        return Decimal("0")


def quantize_money(amount: Decimal) -> Decimal:
    """Round to two decimal places for presentation"""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)
