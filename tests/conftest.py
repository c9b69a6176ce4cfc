import socket

import pytest

from pricing_service.engine import FruitPriceBook
from pricing_service.server import build_server
from store_client.registry import FruitComputeTaskRegistry


@pytest.fixture
def book() -> FruitPriceBook:
    return FruitPriceBook({"apple": "2.00", "banana": "0.50", "mango": "2.99"})


@pytest.fixture
def registry(book) -> FruitComputeTaskRegistry:
    """Registry wired to an in-process price book."""
    return FruitComputeTaskRegistry.in_process(book)


@pytest.fixture
def engine_server(book):
    """FruitComputeEngine served on an ephemeral localhost port."""
    server, port = build_server(book, host="localhost", port=0)
    server.start()
    yield port
    server.stop(0)


@pytest.fixture
def remote_registry(engine_server):
    registry = FruitComputeTaskRegistry.connect("localhost", engine_server)
    yield registry
    registry.close()


@pytest.fixture
def free_port() -> int:
    """A localhost port nothing is listening on."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("localhost", 0))
        return s.getsockname()[1]
