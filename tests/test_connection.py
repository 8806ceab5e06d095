import asyncio

import pytest
from fastapi import WebSocketDisconnect

from netplay_relay.connection import Connection, Role
from netplay_relay.errors import ChannelClosed
from netplay_relay.schemas import Joined


class FakeSocket:
    def __init__(self, fail_after=None):
        self.sent = []
        self.closed_with = None
        self._fail_after = fail_after

    async def send_json(self, data):
        if self._fail_after is not None and len(self.sent) >= self._fail_after:
            raise WebSocketDisconnect(code=1006)
        self.sent.append(data)

    async def close(self, code=1000):
        self.closed_with = code


def test_new_connection_defaults():
    a, b = Connection(), Connection()
    assert a.id != b.id
    assert a.role is Role.UNASSIGNED
    assert a.room_code is None
    assert a.is_open


def test_send_dumps_models_by_alias():
    conn = Connection()
    conn.send(Joined(room_code="abc123"))
    assert conn.drain() == [{"type": "joined", "roomCode": "abc123"}]


def test_send_after_close_raises():
    conn = Connection()
    conn.close()
    with pytest.raises(ChannelClosed) as info:
        conn.send({"type": "state", "state": 1})
    assert info.value.connection_id == conn.id


def test_send_after_detach_raises():
    conn = Connection()
    conn.detach()
    with pytest.raises(ChannelClosed):
        conn.send({"type": "state", "state": 1})


def test_full_queue_drops_oldest():
    conn = Connection(max_queue=3)
    for i in range(5):
        conn.send({"n": i})
    assert conn.dropped == 2
    assert conn.drain() == [{"n": 2}, {"n": 3}, {"n": 4}]


def test_pump_flushes_then_closes():
    conn = Connection()
    ws = FakeSocket()
    conn.send({"n": 1})
    conn.send({"n": 2})
    conn.close()

    asyncio.run(conn.pump(ws))

    assert ws.sent == [{"n": 1}, {"n": 2}]
    assert ws.closed_with == 1000


def test_pump_stops_when_peer_vanishes():
    conn = Connection()
    ws = FakeSocket(fail_after=1)
    conn.send({"n": 1})
    conn.send({"n": 2})

    asyncio.run(conn.pump(ws))

    assert ws.sent == [{"n": 1}]
    assert not conn.is_open
    assert ws.closed_with is None


def test_pump_stops_on_transport_error():
    class BrokenSocket(FakeSocket):
        async def send_json(self, data):
            raise ConnectionResetError("peer reset")

    conn = Connection()
    conn.send({"n": 1})

    asyncio.run(conn.pump(BrokenSocket()))

    assert not conn.is_open
