"""
Frame codec: one JSON message per ``\\n``-terminated line.
"""

import logging
from typing import Union

from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from minechat.errors import DisconnectedError, SerializationError, TransportError
from minechat.models.messages import MESSAGE_TYPES, MineChatMessage, message_adapter
from minechat.transport.stream import ByteWriter, LineReader

logger = logging.getLogger(__name__)

LINE_TERMINATOR = b"\n"
ENCODING = "utf-8"


def encode_message(message: MineChatMessage) -> bytes:
    """Serialize a message to its canonical frame, terminator included."""
    if not isinstance(message, MESSAGE_TYPES):
        raise SerializationError(f"Cannot encode {type(message).__name__!r} as a MineChat message")
    try:
        text = message.to_json()
    except PydanticSerializationError as e:
        raise SerializationError(f"Failed to encode {message.type} message: {e}") from e
    return text.encode(ENCODING) + LINE_TERMINATOR


def decode_message(line: Union[bytes, str]) -> MineChatMessage:
    """Parse one frame. Any mismatch between tag and payload is rejected whole."""
    if isinstance(line, str):
        line = line.encode(ENCODING)
    line = line.rstrip(b"\r\n")
    try:
        return message_adapter.validate_json(line)
    except ValidationError as e:
        raise SerializationError(
            f"Malformed message: {e.error_count()} validation error(s)",
            {"errors": e.errors(include_url=False, include_input=False)},
        ) from e


async def send_message(writer: ByteWriter, message: MineChatMessage) -> None:
    """Write one frame in a single write call and wait for it to flush.

    If the caller cancels this mid-write the stream is left in an unknown
    state and must not be reused.
    """
    logger.debug("Serializing message %r", message)
    frame = encode_message(message)
    logger.debug("Sending %s frame (%d bytes)", message.type, len(frame))
    try:
        writer.write(frame)
        await writer.drain()
    except OSError as e:
        raise TransportError(f"Failed to send {message.type} message: {e}") from e


async def receive_message(reader: LineReader) -> MineChatMessage:
    """Read exactly one frame. A clean close before any byte raises DisconnectedError."""
    try:
        line = await reader.readline()
    except ValueError as e:
        # StreamReader raises ValueError when the line outgrows its buffer limit
        raise SerializationError(f"Frame exceeds the stream's line limit: {e}") from e
    except OSError as e:
        raise TransportError(f"Failed to receive message: {e}") from e

    if not line:
        logger.debug("Peer closed the stream")
        raise DisconnectedError()

    message = decode_message(line)
    logger.debug("Received %s frame", message.type)
    return message
