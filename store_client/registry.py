import sys

from store_proto.money import fmt

from store_client.cart import ShoppingCart
from store_client.engines import (
    ENGINE_HOST,
    ENGINE_NAME,
    ENGINE_PORT,
    ENGINE_LOOKUP_TIMEOUT_SECS,
    ComputeEngine,
    LocalEngine,
    UnavailableEngine,
    lookup,
)
from store_client.models import CartItem, FruitPrice
from store_client.results import EngineError, Outcome, Status
from store_client.tasks import Task


def say(msg: str):
    print(msg, flush=True)


def warn(msg: str):
    print(msg, file=sys.stderr, flush=True)


class FruitComputeTaskRegistry:
    """Front desk of the fruit store.

    Forwards price maintenance and cost requests to a compute engine and keeps
    the shopping cart for the current customer. Engine failures never raise:
    every call returns an `Outcome` and reports on the console.
    """

    def __init__(self, engine: ComputeEngine):
        self.engine = engine
        self.cart = ShoppingCart()

    @classmethod
    def connect(cls, host: str = ENGINE_HOST, port: int = ENGINE_PORT,
                name: str = ENGINE_NAME,
                timeout: float = ENGINE_LOOKUP_TIMEOUT_SECS) -> "FruitComputeTaskRegistry":
        """Look up a remote engine; on failure the registry is left unavailable."""
        try:
            engine = lookup(name, host, port, timeout=timeout)
        except EngineError as e:
            warn(f"Error looking up {name}: {e.message}")
            engine = UnavailableEngine(e.message)
        return cls(engine)

    @classmethod
    def in_process(cls, compute) -> "FruitComputeTaskRegistry":
        return cls(LocalEngine(compute))

    @property
    def available(self) -> bool:
        return not isinstance(self.engine, UnavailableEngine)

    @property
    def total_cost(self):
        return self.cart.total

    def close(self):
        self.engine.close()

    # ----------------------------
    # Price maintenance
    # ----------------------------
    def add_fruit_price(self, fruit_price: FruitPrice) -> Outcome:
        try:
            self.engine.add_fruit_price(fruit_price.name, fruit_price.price)
        except EngineError as e:
            warn(f"Error adding fruit price: {e.message}")
            return Outcome.failure(e)
        msg = f"Successfully added fruit price: {fruit_price.name} - ${fmt(fruit_price.price)}"
        say(msg)
        return Outcome.success(msg)

    def update_fruit_price(self, fruit_price: FruitPrice) -> Outcome:
        try:
            self.engine.update_fruit_price(fruit_price.name, fruit_price.price)
        except EngineError as e:
            warn(f"Error updating fruit price: {e.message}")
            return Outcome.failure(e)
        msg = f"Successfully updated fruit price: {fruit_price.name} - ${fmt(fruit_price.price)}"
        say(msg)
        return Outcome.success(msg)

    def delete_fruit_price(self, fruit_name: str) -> Outcome:
        try:
            self.engine.delete_fruit_price(fruit_name)
        except EngineError as e:
            warn(f"Error deleting fruit price: {e.message}")
            return Outcome.failure(e)
        msg = f"Successfully deleted fruit price for: {fruit_name}"
        say(msg)
        return Outcome.success(msg)

    def get_fruit_prices(self) -> Outcome:
        try:
            prices = self.engine.list_fruit_prices()
        except EngineError as e:
            warn(f"Error listing fruit prices: {e.message}")
            return Outcome.failure(e)
        return Outcome.success(f"{len(prices)} fruit prices", prices)

    # ----------------------------
    # Cost calculation -> cart
    # ----------------------------
    def calculate_fruit_cost(self, fruit_name: str, quantity: int) -> Outcome:
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            msg = f"Quantity must be a positive whole number, got {quantity!r}"
            warn(f"Error calculating fruit cost: {msg}")
            return Outcome(Status.BAD_REQUEST, msg)

        try:
            item_cost = self.engine.calculate_fruit_cost(fruit_name, quantity)
        except EngineError as e:
            warn(f"Error calculating fruit cost: {e.message}")
            return Outcome.failure(e)

        if item_cost <= 0:
            msg = "Could not add item to cart - fruit not found or price is 0"
            say(msg)
            return Outcome(Status.NOT_FOUND, msg)

        item = CartItem(fruit_name, quantity, item_cost)
        self.cart.add(item)
        say(f"Added to cart: {item}")
        say(f"Cart total: ${fmt(self.cart.total)}")
        return Outcome.success(f"Added to cart: {item}", item)

    # ----------------------------
    # Tasks
    # ----------------------------
    def run_task(self, task: Task) -> Outcome:
        """Run `task` on the engine; the result is the Outcome's value."""
        try:
            result = self.engine.execute_task(task)
        except EngineError as e:
            warn(f"Error running task {task.name}: {e.message}")
            return Outcome.failure(e)
        return Outcome.success(f"{task.name} completed", result)

    def execute_task(self, task: Task) -> Outcome:
        outcome = self.run_task(task)
        if outcome.ok:
            say(f"Executed task: {task.name}")
        return outcome

    # ----------------------------
    # Cart
    # ----------------------------
    def view_cart(self) -> str:
        listing = self.cart.render_listing()
        say(listing)
        return listing

    def clear_cart(self):
        self.cart.clear()
        say("Shopping cart cleared.")

    def print_receipt(self, cashier_name: str, amount_given) -> Outcome:
        if self.cart.is_empty:
            msg = "Shopping cart is empty! Add items before printing receipt."
            say(msg)
            return Outcome(Status.BAD_REQUEST, msg)

        try:
            receipt = self.cart.render_receipt(cashier_name, amount_given)
        except ValueError as e:
            warn(f"Error printing receipt: {e}")
            return Outcome(Status.BAD_REQUEST, str(e))

        say("Receipt printed successfully!")
        say(receipt)
        self.clear_cart()
        return Outcome.success("Receipt printed successfully!", receipt)
