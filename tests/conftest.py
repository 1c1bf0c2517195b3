from __future__ import annotations

import asyncio
from typing import Callable

import pytest


class BufferWriter:
    """In-memory stand-in for asyncio.StreamWriter."""

    def __init__(self) -> None:
        self.buffer = bytearray()
        self.writes: list[bytes] = []
        self.closed = False

    def write(self, data: bytes) -> None:
        self.writes.append(bytes(data))
        self.buffer.extend(data)

    async def drain(self) -> None:
        pass

    def close(self) -> None:
        self.closed = True

    async def wait_closed(self) -> None:
        pass


class BrokenWriter(BufferWriter):
    def write(self, data: bytes) -> None:
        raise ConnectionResetError("connection reset by peer")


def make_reader(data: bytes = b"", eof: bool = True, limit: int = 2 ** 16) -> asyncio.StreamReader:
    """StreamReader pre-filled with ``data``. Must be called with a running loop."""
    reader = asyncio.StreamReader(limit=limit)
    if data:
        reader.feed_data(data)
    if eof:
        reader.feed_eof()
    return reader


@pytest.fixture
def reader_factory() -> Callable[..., asyncio.StreamReader]:
    return make_reader


@pytest.fixture
def buffer_writer() -> BufferWriter:
    return BufferWriter()


@pytest.fixture
def broken_writer() -> BufferWriter:
    return BrokenWriter()


class MockPeer:
    """Connector that answers every connection with the same canned reply bytes.

    With ``eof=False`` the stream stays open after the reply, like a live server.
    """

    def __init__(self, reply: bytes, eof: bool = True) -> None:
        self.reply = reply
        self.eof = eof
        self.addresses: list[str] = []
        self.writers: list[BufferWriter] = []

    async def __call__(self, address: str):
        self.addresses.append(address)
        writer = BufferWriter()
        self.writers.append(writer)
        return make_reader(self.reply, eof=self.eof), writer


@pytest.fixture
def mock_peer() -> Callable[[bytes], MockPeer]:
    return MockPeer


SUCCESS_ACK = (
    b'{"type":"AUTH_ACK","payload":{"status":"success","message":"Linked to Steve",'
    b'"minecraft_uuid":"069a79f4-44e9-4726-a5be-fca90e38aaf5","username":"Steve"}}\n'
)
FAILURE_ACK = (
    b'{"type":"AUTH_ACK","payload":{"status":"failure","message":"bad code",'
    b'"minecraft_uuid":null,"username":null}}\n'
)
