"""
Tests for the in-process price book behind the FruitComputeEngine service.
"""
from decimal import Decimal

import pytest

from pricing_service.engine import (
    DEFAULT_FRUIT_PRICES,
    FruitPriceBook,
    PriceBookError,
)
from store_proto import fruit_engine_pb2 as pb2


class TestPriceMaintenance:
    def test_add_then_cost(self, book):
        book.add_fruit_price("Kiwi ", Decimal("0.80"))

        assert book.price_of("kiwi") == Decimal("0.80")
        assert book.calculate_fruit_cost("kiwi", 5) == Decimal("4.00")

    def test_add_existing_is_rejected(self, book):
        with pytest.raises(PriceBookError) as exc:
            book.add_fruit_price("apple", "9.99")
        assert exc.value.code == pb2.ALREADY_EXISTS
        assert book.price_of("apple") == Decimal("2.00")

    def test_update(self, book):
        book.update_fruit_price("apple", "2.50")
        assert book.calculate_fruit_cost("apple", 2) == Decimal("5.00")

    def test_update_missing_is_not_found(self, book):
        with pytest.raises(PriceBookError) as exc:
            book.update_fruit_price("durian", "12.00")
        assert exc.value.code == pb2.NOT_FOUND

    def test_delete(self, book):
        book.delete_fruit_price("banana")
        assert book.price_of("banana") is None

        with pytest.raises(PriceBookError) as exc:
            book.delete_fruit_price("banana")
        assert exc.value.code == pb2.NOT_FOUND

    @pytest.mark.parametrize("price", ["-1", "abc"])
    def test_bad_prices_rejected(self, book, price):
        with pytest.raises(PriceBookError) as exc:
            book.add_fruit_price("kiwi", price)
        assert exc.value.code == pb2.BAD_REQUEST

    def test_blank_name_rejected(self, book):
        with pytest.raises(PriceBookError) as exc:
            book.add_fruit_price("  ", "1.00")
        assert exc.value.code == pb2.BAD_REQUEST

    def test_seeded_book_has_default_prices(self):
        prices = FruitPriceBook.seeded().list_fruit_prices()
        assert set(prices) == set(DEFAULT_FRUIT_PRICES)


class TestCostCalculation:
    def test_unknown_fruit_costs_zero(self, book):
        assert book.calculate_fruit_cost("kiwi", 2) == Decimal("0.00")

    @pytest.mark.parametrize("qty", [0, -3, 2.5])
    def test_bad_quantity(self, book, qty):
        with pytest.raises(PriceBookError) as exc:
            book.calculate_fruit_cost("apple", qty)
        assert exc.value.code == pb2.BAD_REQUEST

    def test_list_is_a_copy(self, book):
        prices = book.list_fruit_prices()
        prices["apple"] = Decimal("0.01")
        assert book.price_of("apple") == Decimal("2.00")


class TestTasks:
    def test_price_lookup(self, book):
        found = book.execute_task("price_lookup", pb2.PriceLookupArgs(fruit_name="mango"))
        assert (found.found, found.price_cents) == (True, 299)

        missing = book.execute_task("price_lookup", pb2.PriceLookupArgs(fruit_name="kiwi"))
        assert not missing.found

    def test_bulk_cost(self, book):
        args = pb2.BulkCostArgs(items=[
            pb2.BasketItem(fruit_name="apple", quantity=3),
            pb2.BasketItem(fruit_name="banana", quantity=4),
            pb2.BasketItem(fruit_name="kiwi", quantity=10),
        ])
        assert book.execute_task("bulk_cost", args).total_cents == 800

    def test_empty_basket_costs_nothing(self, book):
        assert book.execute_task("bulk_cost", pb2.BulkCostArgs()).total_cents == 0

    def test_bulk_cost_bad_quantity(self, book):
        args = pb2.BulkCostArgs(items=[pb2.BasketItem(fruit_name="apple", quantity=0)])
        with pytest.raises(PriceBookError) as exc:
            book.execute_task("bulk_cost", args)
        assert exc.value.code == pb2.BAD_REQUEST

    @pytest.mark.parametrize("args", [
        {"items": 5},
        {"items": ["apple"]},
        None,
        pb2.PriceLookupArgs(fruit_name="apple"),
    ])
    def test_bulk_cost_wrong_argument_type(self, book, args):
        with pytest.raises(PriceBookError) as exc:
            book.execute_task("bulk_cost", args)
        assert exc.value.code == pb2.BAD_REQUEST
        assert "expects BulkCostArgs" in exc.value.message

    def test_unknown_task(self, book):
        with pytest.raises(PriceBookError) as exc:
            book.execute_task("launch_rocket", pb2.PriceLookupArgs())
        assert exc.value.code == pb2.BAD_REQUEST

    def test_huge_cost_is_bad_request(self):
        book = FruitPriceBook({"gold": "1e20"})
        with pytest.raises(PriceBookError) as exc:
            book.calculate_fruit_cost("gold", 10 ** 9)
        assert exc.value.code == pb2.BAD_REQUEST
