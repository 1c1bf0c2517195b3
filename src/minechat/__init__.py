"""
minechat: MineChat protocol client for Python.

Chat with a Minecraft server from external clients. Newline-delimited JSON
frames over TCP, asyncio streams, one-time link handshake.
"""

__version__ = "0.1.0"

from minechat.client import MineChat, AsyncMineChat
from minechat.link import LinkHandshake, LinkState, link_with_server, handle_link
from minechat.transport.codec import encode_message, decode_message, send_message, receive_message
from minechat.transport.stream import open_connection
from minechat.models.messages import (
    Auth,
    AuthAck,
    Broadcast,
    Chat,
    Disconnect,
    MineChatMessage,
)
from minechat.models.session import LinkedSession
from minechat.errors import (
    MineChatError,
    TransportError,
    SerializationError,
    ServerNotLinkedError,
    ConfigError,
    AuthFailedError,
    IdentifierGenerationError,
    DisconnectedError,
)

__all__ = [
    "MineChat",
    "AsyncMineChat",
    "LinkHandshake",
    "LinkState",
    "link_with_server",
    "handle_link",
    "encode_message",
    "decode_message",
    "send_message",
    "receive_message",
    "open_connection",
    "Auth",
    "AuthAck",
    "Broadcast",
    "Chat",
    "Disconnect",
    "MineChatMessage",
    "LinkedSession",
    "MineChatError",
    "TransportError",
    "SerializationError",
    "ServerNotLinkedError",
    "ConfigError",
    "AuthFailedError",
    "IdentifierGenerationError",
    "DisconnectedError",
]
