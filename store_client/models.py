from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP

from store_proto.money import CENT, fmt, to_money


@dataclass(frozen=True)
class FruitPrice:
    name: str
    price: Decimal

    def __post_init__(self):
        object.__setattr__(self, "price", to_money(self.price))


@dataclass(frozen=True)
class CartItem:
    """One priced purchase. `line_total` is the cost the engine returned."""

    name: str
    quantity: int
    line_total: Decimal
    unit_price: Decimal = field(init=False)

    def __post_init__(self):
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int) \
                or self.quantity <= 0:
            raise ValueError(f"quantity must be a positive integer, got {self.quantity!r}")
        total = to_money(self.line_total)
        object.__setattr__(self, "line_total", total)
        object.__setattr__(
            self, "unit_price",
            (total / self.quantity).quantize(CENT, rounding=ROUND_HALF_UP),
        )

    def __str__(self):
        return (f"{self.name} x {self.quantity} @ ${fmt(self.unit_price)} "
                f"= ${fmt(self.line_total)}")
