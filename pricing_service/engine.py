import threading
from decimal import Decimal

from store_proto import fruit_engine_pb2 as pb2
from store_proto.money import ZERO, to_cents, to_money


# ----------------------------
# Default price table (per unit)
# ----------------------------
DEFAULT_FRUIT_PRICES = {
    "apple":      "2.00",
    "banana":     "0.50",
    "orange":     "1.25",
    "pear":       "1.75",
    "grape":      "3.20",
    "mango":      "2.99",
    "pineapple":  "4.50",
    "strawberry": "3.99",
}


class PriceBookError(Exception):
    """Engine-side failure. `code` is one of the fruit_engine.proto Code values."""

    def __init__(self, code: int, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


def normalize_name(fruit_name) -> str:
    name = str(fruit_name or "").strip().lower()
    if not name:
        raise PriceBookError(pb2.BAD_REQUEST, "fruit name is required")
    return name


def _price(value) -> Decimal:
    try:
        price = to_money(value)
    except ValueError as e:
        raise PriceBookError(pb2.BAD_REQUEST, str(e)) from None
    if price < 0:
        raise PriceBookError(pb2.BAD_REQUEST,
                             f"price must not be negative, got {price}")
    return price


class FruitPriceBook:
    """Authoritative in-memory fruit price table plus cost computation.

    This is the compute object behind the FruitComputeEngine service; it can
    also be handed straight to a client registry for in-process use.
    """

    def __init__(self, prices: dict | None = None):
        self.lock = threading.Lock()
        self.prices: dict[str, Decimal] = {}
        for name, price in (prices or {}).items():
            self.prices[normalize_name(name)] = _price(price)

    @classmethod
    def seeded(cls) -> "FruitPriceBook":
        return cls(DEFAULT_FRUIT_PRICES)

    def add_fruit_price(self, fruit_name, price) -> None:
        name, amount = normalize_name(fruit_name), _price(price)
        with self.lock:
            if name in self.prices:
                raise PriceBookError(pb2.ALREADY_EXISTS,
                                     f"price for {name} already exists")
            self.prices[name] = amount

    def update_fruit_price(self, fruit_name, price) -> None:
        name, amount = normalize_name(fruit_name), _price(price)
        with self.lock:
            if name not in self.prices:
                raise PriceBookError(pb2.NOT_FOUND, f"no price for {name}")
            self.prices[name] = amount

    def delete_fruit_price(self, fruit_name) -> None:
        name = normalize_name(fruit_name)
        with self.lock:
            if self.prices.pop(name, None) is None:
                raise PriceBookError(pb2.NOT_FOUND, f"no price for {name}")

    def price_of(self, fruit_name) -> Decimal | None:
        name = normalize_name(fruit_name)
        with self.lock:
            return self.prices.get(name)

    def calculate_fruit_cost(self, fruit_name, quantity) -> Decimal:
        """Cost of `quantity` units. Unknown fruit costs 0."""
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise PriceBookError(pb2.BAD_REQUEST,
                                 f"quantity must be a positive integer, got {quantity!r}")
        unit_price = self.price_of(fruit_name)
        if unit_price is None:
            return ZERO
        try:
            return to_money(unit_price * quantity)
        except ValueError as e:
            raise PriceBookError(pb2.BAD_REQUEST, str(e)) from None

    def list_fruit_prices(self) -> dict[str, Decimal]:
        with self.lock:
            return dict(self.prices)

    def execute_task(self, task_name: str, args):
        """Run a built-in task. `args` is the task's argument message."""
        entry = TASK_HANDLERS.get(task_name)
        if entry is None:
            raise PriceBookError(pb2.BAD_REQUEST, f"unknown task: {task_name}")
        args_cls, handler = entry
        if not isinstance(args, args_cls):
            raise PriceBookError(
                pb2.BAD_REQUEST,
                f"{task_name} expects {args_cls.__name__}, got {type(args).__name__}")
        return handler(self, args)


# ----------------------------
# Built-in tasks
# ----------------------------
def price_lookup_task(book: FruitPriceBook, args: pb2.PriceLookupArgs):
    price = book.price_of(args.fruit_name)
    if price is None:
        return pb2.PriceLookupResult(found=False)
    return pb2.PriceLookupResult(found=True, price_cents=to_cents(price))


def bulk_cost_task(book: FruitPriceBook, args: pb2.BulkCostArgs):
    """Basket total; unknown fruit counts as 0."""
    total = ZERO
    for item in args.items:
        total += book.calculate_fruit_cost(item.fruit_name, item.quantity)
    try:
        return pb2.BulkCostResult(total_cents=to_cents(total))
    except ValueError as e:
        raise PriceBookError(pb2.BAD_REQUEST, f"basket total out of range: {e}") from None


# task name -> (argument message class, handler(book, args) -> result message)
TASK_HANDLERS = {
    "price_lookup": (pb2.PriceLookupArgs, price_lookup_task),
    "bulk_cost": (pb2.BulkCostArgs, bulk_cost_task),
}


def cents_table(prices: dict[str, Decimal]) -> list[tuple[str, int]]:
    return [(name, to_cents(price)) for name, price in sorted(prices.items())]
