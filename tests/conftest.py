"""Shared fixtures: an in-memory relay wired to fake websockets."""

import asyncio
import json

import pytest

from backend import RoomTable
from coordinator import SessionCoordinator
from interfaces import AddressRecord
from registry import ConnectionRegistry


class FakeWebSocket:
    """Records every frame sent to it, decoded, and replays fed client frames."""

    def __init__(self, fail: bool = False, stall: bool = False):
        self.frames = []
        self.fail = fail
        self.stall = stall
        self.accepted = False
        self._inbound = asyncio.Queue()

    async def accept(self):
        self.accepted = True

    async def receive(self):
        return await self._inbound.get()

    def feed(self, event, *args):
        self._inbound.put_nowait({"type": "websocket.receive", "text": json.dumps({"event": event, "args": list(args)})})

    def hang_up(self):
        self._inbound.put_nowait({"type": "websocket.disconnect", "code": 1000})

    async def send_text(self, data: str):
        if self.stall:
            # A peer that stopped reading: the send never completes
            await asyncio.Event().wait()
        if self.fail:
            raise RuntimeError("socket closed")
        self.frames.append(json.loads(data))

    def events(self, include_log: bool = False):
        return [
            (frame["event"], frame["args"])
            for frame in self.frames
            if include_log or frame["event"] != "log"
        ]

    def clear(self):
        self.frames.clear()


HOST_ADDRESSES = [
    AddressRecord(interface="lo", family="IPv4", address="127.0.0.1"),
    AddressRecord(interface="lo", family="IPv6", address="::1"),
    AddressRecord(interface="eth0", family="IPv4", address="192.168.1.20"),
    AddressRecord(interface="eth0", family="IPv6", address="fe80::1"),
    AddressRecord(interface="tun0", family="IPv4", address="10.173.1.175"),
    AddressRecord(interface="wlan0", family="IPv4", address="10.0.0.7"),
]


@pytest.fixture
def room_table():
    return RoomTable()


@pytest.fixture
def registry(room_table):
    return ConnectionRegistry(room_table)


@pytest.fixture
def coordinator(room_table, registry):
    return SessionCoordinator(
        room_table,
        registry,
        address_source=lambda: HOST_ADDRESSES,
        ipaddr_exclude=["10.173.1.175"],
    )


@pytest.fixture
def connect(registry):
    """Register a fake websocket and return `(connection_id, websocket)`.

    Must be called from inside a running event loop.
    """

    def _connect(fail: bool = False, stall: bool = False):
        websocket = FakeWebSocket(fail=fail, stall=stall)
        return registry.register(websocket), websocket

    return _connect


async def wait_until(predicate, timeout: float = 1.0):
    """Yield to the loop until `predicate()` holds."""

    async def _poll():
        while not predicate():
            await asyncio.sleep(0)

    await asyncio.wait_for(_poll(), timeout)
