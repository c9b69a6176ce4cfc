"""
Tests for the cart model: CartItem pricing, totals and text renderings.
"""
from decimal import Decimal

import pytest

from store_client.cart import ShoppingCart
from store_client.models import CartItem, FruitPrice
from store_proto.money import from_cents, to_cents, to_money


class TestMoney:
    def test_to_money_quantizes_half_up(self):
        assert to_money("2.005") == Decimal("2.01")
        assert to_money(3) == Decimal("3.00")
        assert to_money(0.1) == Decimal("0.10")

    def test_to_money_rejects_garbage(self):
        for bad in ("abc", "", "NaN", True):
            with pytest.raises(ValueError):
                to_money(bad)

    @pytest.mark.parametrize("huge", ["1e30", 1e30, Decimal("1E+40")])
    def test_to_money_rejects_amounts_beyond_cent_precision(self, huge):
        with pytest.raises(ValueError):
            to_money(huge)

    def test_cents_conversion(self):
        assert to_cents("6.00") == 600
        assert to_cents(Decimal("0.99")) == 99
        assert from_cents(450) == Decimal("4.50")


class TestCartItem:
    def test_unit_price_derived_from_line_total(self):
        item = CartItem("apple", 3, Decimal("6.00"))

        assert item.unit_price == Decimal("2.00")
        assert item.line_total == Decimal("6.00")
        assert str(item) == "apple x 3 @ $2.00 = $6.00"

    def test_line_total_kept_when_unit_price_rounds(self):
        item = CartItem("pear", 3, "10.00")

        assert item.unit_price == Decimal("3.33")
        assert item.line_total == Decimal("10.00")

    @pytest.mark.parametrize("qty", [0, -1, 1.5, True])
    def test_quantity_must_be_positive_int(self, qty):
        with pytest.raises(ValueError):
            CartItem("apple", qty, Decimal("1.00"))

    def test_items_are_immutable(self):
        item = CartItem("apple", 1, Decimal("2.00"))
        with pytest.raises(AttributeError):
            item.quantity = 5

    def test_fruit_price_normalizes_amount(self):
        assert FruitPrice("kiwi", "0.8").price == Decimal("0.80")


class TestShoppingCart:
    def test_total_is_sum_of_line_totals(self):
        cart = ShoppingCart()
        cart.add(CartItem("apple", 3, Decimal("6.00")))
        cart.add(CartItem("pear", 3, Decimal("10.00")))
        cart.add(CartItem("banana", 1, Decimal("0.10")))

        assert cart.total == Decimal("16.10")
        assert [i.name for i in cart] == ["apple", "pear", "banana"]

    def test_clear_resets_total(self):
        cart = ShoppingCart()
        cart.add(CartItem("apple", 3, Decimal("6.00")))
        cart.clear()

        assert cart.is_empty
        assert len(cart) == 0
        assert cart.total == Decimal("0.00")

    def test_empty_listing(self):
        assert ShoppingCart().render_listing() == "Shopping cart is empty."

    def test_listing(self):
        cart = ShoppingCart()
        cart.add(CartItem("apple", 3, Decimal("6.00")))

        assert cart.render_listing() == (
            "\n===== SHOPPING CART =====\n"
            "apple x 3 @ $2.00 = $6.00\n"
            "=========================\n"
            "Total: $6.00"
        )

    def test_receipt_layout(self):
        cart = ShoppingCart()
        cart.add(CartItem("apple", 3, Decimal("6.00")))

        receipt = cart.render_receipt("Alice", "10")

        assert receipt == (
            "===== FRUIT STORE RECEIPT =====\n"
            "Cashier: Alice\n"
            "==============================\n"
            "ITEMS PURCHASED:\n"
            "apple x 3 @ $2.00 = $6.00\n"
            "==============================\n"
            "Total Cost: $6.00\n"
            "Amount Given: $10.00\n"
            "Change: $4.00\n"
            "==============================\n"
            "Thank you for your purchase!\n"
        )

    def test_receipt_change_can_be_negative(self):
        cart = ShoppingCart()
        cart.add(CartItem("apple", 3, Decimal("6.00")))

        assert "Change: $-1.00" in cart.render_receipt("Bob", "5.00")
