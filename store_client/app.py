"""
Console client for the Fruit Store.

Connects to a FruitComputeEngine, applies the requested price changes, rings
up the purchases and prints the receipt.

Usage:
    python3 -m store_client.app --buy apple:3 --buy banana:6 --cashier Alice --paid 10
    python3 -m store_client.app --add kiwi=0.80 --update apple=2.10 --prices
"""

import argparse
import sys

from store_proto.money import fmt

from store_client.engines import ENGINE_HOST, ENGINE_NAME, ENGINE_PORT
from store_client.models import FruitPrice
from store_client.registry import FruitComputeTaskRegistry


def parse_price(arg: str) -> FruitPrice:
    """'kiwi=0.80' -> FruitPrice('kiwi', Decimal('0.80'))"""
    name, sep, price = arg.partition("=")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"expected NAME=PRICE, got {arg!r}")
    try:
        return FruitPrice(name.strip(), price)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def parse_purchase(arg: str) -> tuple[str, int]:
    """'apple:3' -> ('apple', 3)"""
    name, sep, qty = arg.partition(":")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"expected NAME:QTY, got {arg!r}")
    try:
        return name.strip(), int(qty)
    except ValueError:
        raise argparse.ArgumentTypeError(f"bad quantity in {arg!r}") from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Fruit Store client")
    parser.add_argument("--host", default=ENGINE_HOST,
                        help=f"Engine host (default: {ENGINE_HOST})")
    parser.add_argument("--port", type=int, default=ENGINE_PORT,
                        help=f"Engine port (default: {ENGINE_PORT})")
    parser.add_argument("--name", default=ENGINE_NAME,
                        help=f"Engine name (default: {ENGINE_NAME})")
    parser.add_argument("--add", action="append", type=parse_price, default=[],
                        metavar="NAME=PRICE", help="Add a fruit price")
    parser.add_argument("--update", action="append", type=parse_price, default=[],
                        metavar="NAME=PRICE", help="Update a fruit price")
    parser.add_argument("--delete", action="append", default=[],
                        metavar="NAME", help="Delete a fruit price")
    parser.add_argument("--prices", action="store_true",
                        help="Print the engine's price table")
    parser.add_argument("--buy", action="append", type=parse_purchase, default=[],
                        metavar="NAME:QTY", help="Add a purchase to the cart")
    parser.add_argument("--cashier", default="Cashier",
                        help="Cashier name printed on the receipt")
    parser.add_argument("--paid", default=None,
                        help="Amount given; prints a receipt when set")
    return parser


def run(registry: FruitComputeTaskRegistry, args) -> None:
    for fruit_price in args.add:
        registry.add_fruit_price(fruit_price)
    for fruit_price in args.update:
        registry.update_fruit_price(fruit_price)
    for name in args.delete:
        registry.delete_fruit_price(name)

    if args.prices:
        outcome = registry.get_fruit_prices()
        if outcome.ok:
            for name, price in sorted(outcome.value.items()):
                print(f"  {name:<12} ${fmt(price)}", flush=True)

    for name, qty in args.buy:
        registry.calculate_fruit_cost(name, qty)

    if args.buy:
        registry.view_cart()
    if args.paid is not None:
        registry.print_receipt(args.cashier, args.paid)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    registry = FruitComputeTaskRegistry.connect(args.host, args.port, args.name)
    if not registry.available:
        return 1
    try:
        run(registry, args)
    finally:
        registry.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
