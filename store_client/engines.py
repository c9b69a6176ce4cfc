"""Compute engine capability and its transports.

The registry talks to exactly one `ComputeEngine`. Which one is decided when
the registry is built:

- `LocalEngine` wraps a compute object living in this process
  (e.g. `pricing_service.engine.FruitPriceBook`).
- `RemoteEngine` talks gRPC to a running FruitComputeEngine service and is
  obtained through `lookup()`.
- `UnavailableEngine` stands in when lookup failed; every call reports
  UNAVAILABLE.

All implementations raise `EngineError` and nothing else on failure.
"""
import os
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any

import grpc

from store_proto import fruit_engine_pb2 as pb2
from store_proto import fruit_engine_pb2_grpc as engine_grpc
from store_proto.money import from_cents, to_cents, to_money

from store_client.results import EngineError, Status
from store_client.tasks import Task, decode_result


# ----------------------------
# Config
# ----------------------------
ENGINE_NAME = os.environ.get("ENGINE_NAME", "FruitComputeEngine")
ENGINE_HOST = os.environ.get("ENGINE_HOST", "localhost")
ENGINE_PORT = int(os.environ.get("ENGINE_PORT", "1099"))
ENGINE_TIMEOUT_SECS = float(os.environ.get("ENGINE_TIMEOUT_SECS", "5"))
ENGINE_LOOKUP_TIMEOUT_SECS = float(os.environ.get("ENGINE_LOOKUP_TIMEOUT_SECS", "3"))

# gRPC status codes that mean "could not reach a working engine"
_UNREACHABLE = {
    grpc.StatusCode.UNAVAILABLE,
    grpc.StatusCode.DEADLINE_EXCEEDED,
    grpc.StatusCode.UNIMPLEMENTED,
}


class ComputeEngine(ABC):
    @abstractmethod
    def add_fruit_price(self, fruit_name: str, price: Decimal) -> None:
        pass

    @abstractmethod
    def update_fruit_price(self, fruit_name: str, price: Decimal) -> None:
        pass

    @abstractmethod
    def delete_fruit_price(self, fruit_name: str) -> None:
        pass

    @abstractmethod
    def calculate_fruit_cost(self, fruit_name: str, quantity: int) -> Decimal:
        pass

    @abstractmethod
    def execute_task(self, task: Task) -> Any:
        pass

    @abstractmethod
    def list_fruit_prices(self) -> dict[str, Decimal]:
        pass

    def close(self):
        pass

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


# ----------------------------
# In-process engine
# ----------------------------
def _engine_error(e: Exception) -> EngineError:
    code = getattr(e, "code", pb2.INTERNAL_ERROR)
    message = getattr(e, "message", None) or str(e) or type(e).__name__
    return EngineError(Status.from_code(code), message)


class LocalEngine(ComputeEngine):
    """Forwards to an injected compute object in this process."""

    def __init__(self, compute):
        self.compute = compute

    def _call(self, method: str, *args):
        try:
            return getattr(self.compute, method)(*args)
        except Exception as e:
            raise _engine_error(e) from e

    def add_fruit_price(self, fruit_name, price):
        self._call("add_fruit_price", fruit_name, to_money(price))

    def update_fruit_price(self, fruit_name, price):
        self._call("update_fruit_price", fruit_name, to_money(price))

    def delete_fruit_price(self, fruit_name):
        self._call("delete_fruit_price", fruit_name)

    def calculate_fruit_cost(self, fruit_name, quantity):
        return to_money(self._call("calculate_fruit_cost", fruit_name, quantity))

    def execute_task(self, task: Task):
        return decode_result(self._call("execute_task", task.name, task.args))

    def list_fruit_prices(self):
        prices = self._call("list_fruit_prices")
        return {name: to_money(price) for name, price in prices.items()}


# ----------------------------
# gRPC engine
# ----------------------------
def _request(cls, **fields):
    try:
        return cls(**fields)
    except (TypeError, ValueError) as e:
        raise EngineError(Status.BAD_REQUEST, f"cannot encode {cls.__name__}: {e}") from e


def _rpc_error(e: grpc.RpcError) -> EngineError:
    code = e.code() if hasattr(e, "code") else None
    details = e.details() if hasattr(e, "details") else str(e)
    status = Status.UNAVAILABLE if code in _UNREACHABLE else Status.INTERNAL_ERROR
    label = code.name if code is not None else "RPC_ERROR"
    return EngineError(status, f"{label}: {details}")


class RemoteEngine(ComputeEngine):
    """Client for a FruitComputeEngine gRPC service. Owns its channel."""

    def __init__(self, channel: grpc.Channel, name: str = ENGINE_NAME,
                 timeout: float = ENGINE_TIMEOUT_SECS):
        self.channel = channel
        self.name = name
        self.timeout = timeout
        self.stub = engine_grpc.FruitComputeEngineStub(channel)

    def _call(self, rpc, request):
        try:
            reply = rpc(request, timeout=self.timeout)
        except grpc.RpcError as e:
            raise _rpc_error(e) from e
        if reply.code != pb2.OK:
            raise EngineError(Status.from_code(reply.code), reply.message)
        return reply

    def add_fruit_price(self, fruit_name, price):
        request = _request(pb2.FruitPriceRequest, fruit_name=fruit_name,
                           price_cents=to_cents(price))
        self._call(self.stub.AddFruitPrice, request)

    def update_fruit_price(self, fruit_name, price):
        request = _request(pb2.FruitPriceRequest, fruit_name=fruit_name,
                           price_cents=to_cents(price))
        self._call(self.stub.UpdateFruitPrice, request)

    def delete_fruit_price(self, fruit_name):
        self._call(self.stub.DeleteFruitPrice,
                   _request(pb2.FruitNameRequest, fruit_name=fruit_name))

    def ping(self):
        """Raise EngineError unless the server hosts an engine named self.name."""
        self._call(self.stub.Lookup, pb2.LookupRequest(name=self.name))

    def calculate_fruit_cost(self, fruit_name, quantity):
        reply = self._call(self.stub.CalculateFruitCost,
                           _request(pb2.CostRequest, fruit_name=fruit_name,
                                    quantity=quantity))
        return from_cents(reply.total_cents)

    def execute_task(self, task: Task):
        try:
            request = task.to_request()
        except (TypeError, ValueError) as e:
            raise EngineError(Status.BAD_REQUEST,
                              f"cannot encode task {task.name}: {e}") from e
        reply = self._call(self.stub.ExecuteTask, request)
        which = reply.WhichOneof("result")
        return decode_result(getattr(reply, which)) if which else None

    def list_fruit_prices(self):
        reply = self._call(self.stub.ListFruitPrices, pb2.PriceListRequest())
        return {p.fruit_name: from_cents(p.price_cents) for p in reply.prices}

    def close(self):
        self.channel.close()


class UnavailableEngine(ComputeEngine):
    """Placeholder for an engine that could not be looked up."""

    def __init__(self, reason: str = "no compute engine available"):
        self.reason = reason

    def _fail(self, *args):
        raise EngineError(Status.UNAVAILABLE, self.reason)

    add_fruit_price = _fail
    update_fruit_price = _fail
    delete_fruit_price = _fail
    calculate_fruit_cost = _fail
    execute_task = _fail
    list_fruit_prices = _fail


def lookup(name: str = ENGINE_NAME, host: str = ENGINE_HOST,
           port: int = ENGINE_PORT,
           timeout: float = ENGINE_LOOKUP_TIMEOUT_SECS) -> RemoteEngine:
    """Resolve the engine registered as `name` at host:port.

    Waits for the channel to come up, then asks the server whether it hosts
    `name`, so a wrong name fails here rather than on the first real call.
    """
    channel = grpc.insecure_channel(f"{host}:{port}")
    try:
        grpc.channel_ready_future(channel).result(timeout=timeout)
    except grpc.FutureTimeoutError:
        channel.close()
        raise EngineError(Status.UNAVAILABLE,
                          f"no engine reachable at {host}:{port}") from None

    engine = RemoteEngine(channel, name=name)
    try:
        engine.ping()
    except EngineError as e:
        channel.close()
        raise EngineError(Status.UNAVAILABLE,
                          f"lookup of {name} at {host}:{port} failed: {e.message}") from e
    return engine
