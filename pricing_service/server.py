import argparse
import os
from concurrent import futures

import grpc

from store_proto import fruit_engine_pb2 as pb2
from store_proto import fruit_engine_pb2_grpc as engine_grpc
from store_proto.money import fmt, from_cents, to_cents

from pricing_service.engine import (
    FruitPriceBook,
    PriceBookError,
    cents_table,
)


# ----------------------------
# Config
# ----------------------------
DEFAULT_HOST = os.environ.get("ENGINE_BIND_HOST", "0.0.0.0")
DEFAULT_PORT = int(os.environ.get("ENGINE_PORT", "1099"))
DEFAULT_NAME = os.environ.get("ENGINE_NAME", "FruitComputeEngine")
MAX_WORKERS = 4


def log(msg: str):
    print(f"[pricing_service] {msg}", flush=True)


# ----------------------------
# Service
# ----------------------------
class FruitComputeEngineServicer(engine_grpc.FruitComputeEngineServicer):
    """Exposes a FruitPriceBook over gRPC.

    Engine failures are reported in the reply's code/message fields, so a
    transport-level error always means the call never reached the book.
    """

    def __init__(self, book: FruitPriceBook, name: str = DEFAULT_NAME):
        self.book = book
        self.name = name

    def Lookup(self, request: pb2.LookupRequest, context):
        if request.name != self.name:
            log(f"lookup of unknown engine {request.name!r}")
            return pb2.BasicReply(code=pb2.NOT_FOUND,
                                  message=f"no engine named {request.name}")
        return pb2.BasicReply(code=pb2.OK, message=f"{self.name} ready")

    def AddFruitPrice(self, request: pb2.FruitPriceRequest, context):
        try:
            price = from_cents(request.price_cents)
            self.book.add_fruit_price(request.fruit_name, price)
        except PriceBookError as e:
            log(f"add {request.fruit_name!r} rejected: {e.message}")
            return pb2.BasicReply(code=e.code, message=e.message)

        log(f"added {request.fruit_name} at ${fmt(price)}")
        return pb2.BasicReply(code=pb2.OK,
                              message=f"Added {request.fruit_name}")

    def UpdateFruitPrice(self, request: pb2.FruitPriceRequest, context):
        try:
            price = from_cents(request.price_cents)
            self.book.update_fruit_price(request.fruit_name, price)
        except PriceBookError as e:
            log(f"update {request.fruit_name!r} rejected: {e.message}")
            return pb2.BasicReply(code=e.code, message=e.message)

        log(f"updated {request.fruit_name} to ${fmt(price)}")
        return pb2.BasicReply(code=pb2.OK,
                              message=f"Updated {request.fruit_name}")

    def DeleteFruitPrice(self, request: pb2.FruitNameRequest, context):
        try:
            self.book.delete_fruit_price(request.fruit_name)
        except PriceBookError as e:
            log(f"delete {request.fruit_name!r} rejected: {e.message}")
            return pb2.BasicReply(code=e.code, message=e.message)

        log(f"deleted {request.fruit_name}")
        return pb2.BasicReply(code=pb2.OK,
                              message=f"Deleted {request.fruit_name}")

    def CalculateFruitCost(self, request: pb2.CostRequest, context):
        try:
            total = self.book.calculate_fruit_cost(request.fruit_name,
                                                   request.quantity)
        except PriceBookError as e:
            return pb2.CostReply(code=e.code, message=e.message)

        log(f"calculated total=${fmt(total)} for "
            f"{request.quantity} x {request.fruit_name}")
        return pb2.CostReply(
            code=pb2.OK,
            message=f"Total: ${fmt(total)}",
            total_cents=to_cents(total),
        )

    def ExecuteTask(self, request: pb2.TaskRequest, context):
        which = request.WhichOneof("args")
        if which != request.task_name:
            msg = (f"task {request.task_name!r} sent with "
                   f"{which or 'no'} arguments")
            log(f"task rejected: {msg}")
            return pb2.TaskReply(code=pb2.BAD_REQUEST, message=msg)

        try:
            result = self.book.execute_task(which, getattr(request, which))
        except PriceBookError as e:
            log(f"task {which!r} failed: {e.message}")
            return pb2.TaskReply(code=e.code, message=e.message)

        log(f"task {which} done")
        return pb2.TaskReply(code=pb2.OK, message=f"{which} completed",
                             **{which: result})

    def ListFruitPrices(self, request: pb2.PriceListRequest, context):
        prices = [pb2.FruitPrice(fruit_name=name, price_cents=cents)
                  for name, cents in cents_table(self.book.list_fruit_prices())]
        return pb2.PriceListReply(code=pb2.OK,
                                  message=f"{len(prices)} prices",
                                  prices=prices)


def build_server(book: FruitPriceBook, host: str = DEFAULT_HOST,
                 port: int = DEFAULT_PORT, name: str = DEFAULT_NAME):
    """Create (but do not start) a server. Returns (server, bound_port)."""
    server = grpc.server(futures.ThreadPoolExecutor(max_workers=MAX_WORKERS))
    engine_grpc.add_FruitComputeEngineServicer_to_server(
        FruitComputeEngineServicer(book, name), server
    )
    bound_port = server.add_insecure_port(f"{host}:{port}")
    return server, bound_port


def serve(host=DEFAULT_HOST, port=DEFAULT_PORT, name=DEFAULT_NAME, seed=True):
    book = FruitPriceBook.seeded() if seed else FruitPriceBook()
    server, bound_port = build_server(book, host, port, name)
    server.start()
    log(f"{name} gRPC listening on {host}:{bound_port} "
        f"({len(book.list_fruit_prices())} prices loaded)")
    try:
        server.wait_for_termination()
    except KeyboardInterrupt:
        log("shutting down...")
        server.stop(0)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Fruit Compute Engine")
    parser.add_argument("--host", default=DEFAULT_HOST,
                        help=f"Bind address (default: {DEFAULT_HOST})")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT,
                        help=f"gRPC port (default: {DEFAULT_PORT})")
    parser.add_argument("--name", default=DEFAULT_NAME,
                        help=f"Registered engine name (default: {DEFAULT_NAME})")
    parser.add_argument("--no-seed", action="store_true",
                        help="Start with an empty price table")
    args = parser.parse_args(argv)
    serve(host=args.host, port=args.port, name=args.name,
          seed=not args.no_seed)


if __name__ == "__main__":
    main()
