from dataclasses import dataclass

from store_proto import fruit_engine_pb2 as pb2


@dataclass(frozen=True)
class Task:
    """A named unit of work for the engine.

    `args` is the task's argument message from fruit_engine.proto; its field
    name in `TaskRequest.args` is the task name.
    """

    name: str
    args: object = None

    def to_request(self) -> pb2.TaskRequest:
        if self.args is None:
            return pb2.TaskRequest(task_name=self.name)
        return pb2.TaskRequest(task_name=self.name, **{self.name: self.args})


def decode_result(result):
    """Turn a task result message into a plain value."""
    if isinstance(result, pb2.PriceLookupResult):
        return result.price_cents if result.found else None
    if isinstance(result, pb2.BulkCostResult):
        return result.total_cents
    return result


def price_lookup(fruit_name: str) -> Task:
    """Result: unit price in cents, or None if the engine has no price."""
    return Task("price_lookup", pb2.PriceLookupArgs(fruit_name=fruit_name))


def bulk_cost(items: list[tuple[str, int]]) -> Task:
    """Result: total basket cost in cents."""
    basket = [pb2.BasketItem(fruit_name=name, quantity=qty) for name, qty in items]
    return Task("bulk_cost", pb2.BulkCostArgs(items=basket))
