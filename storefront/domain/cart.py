# storefront/domain/cart.py
from dataclasses import dataclass
from decimal import Decimal

from storefront.domain.errors import ValidationError
from storefront.domain.pricing import discounted_unit_price, line_price
from storefront.domain.schemas import ProductOut


@dataclass
class CartLine:
    product: ProductOut
    quantity: int

    @property
    def unit_price(self) -> Decimal:
        return discounted_unit_price(self.product.price, self.product.discount_percentage)

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


class CartStore:
    """
    Products one shopping session intends to buy.

    Holds at most one line per product id, and every line has quantity >= 1.
    Pure in-memory state: persistence and inventory checks belong to the caller
    (see CartService).
    """

    def __init__(self, lines: list[CartLine] | None = None):
        self._lines: list[CartLine] = list(lines or [])

    @property
    def items(self) -> list[CartLine]:
        return list(self._lines)

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines)

    @property
    def total_price(self) -> Decimal:
        return sum((line.line_total for line in self._lines), Decimal("0"))

    def is_empty(self) -> bool:
        return not self._lines

    def get(self, product_id: int) -> CartLine | None:
        for line in self._lines:
            if line.product.id == product_id:
                return line
        return None

    def add(self, product: ProductOut, quantity: int = 1):
        if quantity < 1:
            raise ValidationError("تعداد باید حداقل ۱ باشد")

        existing = self.get(product.id)
        if existing:
            existing.quantity += quantity
        else:
            self._lines.append(CartLine(product=product, quantity=quantity))

    def remove(self, product_id: int):
        self._lines = [line for line in self._lines if line.product.id != product_id]

    def update_quantity(self, product_id: int, quantity: int):
        # zero or negative is clamped, never treated as removal
        line = self.get(product_id)
        if line:
            line.quantity = max(1, quantity)

    def clear(self):
        self._lines = []

    def to_order_items(self) -> list[dict]:
        """Lines in the shape the bulk order endpoint expects."""
        return [
            {
                "product_id": line.product.id,
                "quantity": line.quantity,
                "price": line_price(line.unit_price),
            }
            for line in self._lines
        ]

    def to_dict(self) -> dict:
        return {
            "items": [
                {"product": line.product.model_dump(mode="json"), "quantity": line.quantity}
                for line in self._lines
            ]
        }

    @classmethod
    def from_dict(cls, data: dict | None) -> "CartStore":
        if not data:
            return cls()
        return cls(
            [
                CartLine(product=ProductOut.model_validate(raw["product"]), quantity=max(1, int(raw["quantity"])))
                for raw in data.get("items", [])
            ]
        )
