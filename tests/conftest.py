import pytest
from fastapi.testclient import TestClient

from netplay_relay.app import create_app
from netplay_relay.connection import Connection
from netplay_relay.registry import RoomRegistry


@pytest.fixture()
def registry():
    return RoomRegistry()


@pytest.fixture()
def connect():
    """Factory for socket-less connections whose queues the test can read."""

    def _connect(**kwargs) -> Connection:
        return Connection(**kwargs)

    return _connect


@pytest.fixture()
def hosted(registry, connect):
    """A registry with one room already created; returns (room, host)."""
    host = connect()
    room = registry.create_room(host)
    host.drain()
    return room, host


@pytest.fixture()
def client():
    application = create_app(RoomRegistry(code_factory=lambda: "ABC123"))
    # Entering the client keeps every websocket session on one event loop,
    # the same way uvicorn serves them.
    with TestClient(application) as test_client:
        yield test_client
