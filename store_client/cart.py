# Shopping cart model and its text renderings (cart listing, receipt).
from decimal import Decimal

from store_proto.money import ZERO, fmt, to_money

from store_client.models import CartItem

RECEIPT_RULE = "=" * 30
EMPTY_CART_MESSAGE = "Shopping cart is empty."


class ShoppingCart:
    def __init__(self):
        self.items: list[CartItem] = []

    def __len__(self):
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def total(self) -> Decimal:
        # Recomputed from the line items so it never drifts from them.
        return sum((item.line_total for item in self.items), ZERO)

    def add(self, item: CartItem):
        self.items.append(item)

    def clear(self):
        self.items.clear()

    def render_listing(self) -> str:
        if self.is_empty:
            return EMPTY_CART_MESSAGE
        lines = ["", "===== SHOPPING CART ====="]
        lines += [str(item) for item in self.items]
        lines.append("=" * 25)
        lines.append(f"Total: ${fmt(self.total)}")
        return "\n".join(lines)

    def render_receipt(self, cashier_name: str, amount_given) -> str:
        """Receipt text for the current items. Change may come out negative."""
        amount = to_money(amount_given)
        total = self.total
        lines = [
            "===== FRUIT STORE RECEIPT =====",
            f"Cashier: {cashier_name}",
            RECEIPT_RULE,
            "ITEMS PURCHASED:",
        ]
        lines += [str(item) for item in self.items]
        lines += [
            RECEIPT_RULE,
            f"Total Cost: ${fmt(total)}",
            f"Amount Given: ${fmt(amount)}",
            f"Change: ${fmt(amount - total)}",
            RECEIPT_RULE,
            "Thank you for your purchase!",
        ]
        return "\n".join(lines) + "\n"
