"""
Byte-stream capabilities required by the frame codec, and a TCP connector.

The codec only needs ``readline()`` on the read side and ``write()`` plus
``drain()`` on the write side, which asyncio's StreamReader/StreamWriter
provide. Tests substitute an in-memory StreamReader and a buffer writer.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Protocol

from minechat.errors import TransportError

logger = logging.getLogger(__name__)

# Longest frame accepted from the peer, in bytes.
DEFAULT_LINE_LIMIT = 1024 * 1024


class LineReader(Protocol):
    async def readline(self) -> bytes: ...


class ByteWriter(Protocol):
    def write(self, data: bytes) -> None: ...

    async def drain(self) -> None: ...


class ClosableWriter(ByteWriter, Protocol):
    def close(self) -> None: ...

    async def wait_closed(self) -> None: ...


Connector = Callable[[str], Awaitable[tuple[LineReader, ClosableWriter]]]


def split_address(address: str) -> tuple[str, int]:
    """Split ``host:port`` (or ``[v6-host]:port``) into its parts."""
    host, sep, port = address.rpartition(":")
    if not sep or not host:
        raise TransportError(f"Invalid server address {address!r}, expected host:port")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    try:
        port_num = int(port)
    except ValueError:
        raise TransportError(f"Invalid port in server address {address!r}")
    if not 0 < port_num < 65536:
        raise TransportError(f"Port out of range in server address {address!r}")
    return host, port_num


async def open_connection(
    address: str, limit: int = DEFAULT_LINE_LIMIT,
) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
    """Open a TCP connection to ``address``. No retry is attempted."""
    host, port = split_address(address)
    logger.debug("Connecting to server %s", address)
    try:
        reader, writer = await asyncio.open_connection(host, port, limit=limit)
    except OSError as e:
        raise TransportError(f"Failed to connect to {address}: {e}", {"address": address}) from e
    logger.debug("Connected to server %s", address)
    return reader, writer


async def close_writer(writer: ClosableWriter) -> None:
    """Close the write side, ignoring errors from a connection that is already gone."""
    writer.close()
    try:
        await writer.wait_closed()
    except OSError as e:
        logger.debug("Error while closing connection: %s", e)
