# storefront/domain/pricing.py
from decimal import Decimal, ROUND_HALF_UP

HUNDRED = Decimal("100")
CENT = Decimal("0.01")


def discounted_unit_price(price, discount_percentage: int | None = None) -> Decimal:
    """
    Unit price after the product discount.

    No rounding here: totals are summed from the exact values and rounded
    only for display.
    """
    price = Decimal(str(price))
    if not discount_percentage:
        return price
    return price * (1 - Decimal(discount_percentage) / HUNDRED)


def line_price(amount) -> Decimal:
    """Unit price as stored on an order line: two decimal places, halves going up."""
    return Decimal(str(amount)).quantize(CENT, rounding=ROUND_HALF_UP)


def display_amount(amount) -> int:
    """Rounds to the nearest whole toman, halves going up."""
    return int(Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
