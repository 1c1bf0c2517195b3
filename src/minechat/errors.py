"""
MineChat error types.

Every failure raised by the protocol layer is a MineChatError carrying a
stable ``code``. Nothing in this package retries on error.
"""

from typing import Any, Optional


class MineChatError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details


class TransportError(MineChatError):
    """Connect, read or write failed at the transport level."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("io_error", message, details)


class SerializationError(MineChatError):
    """A frame could not be encoded, or a received line could not be decoded."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("serialization_error", message, details)


class ServerNotLinkedError(MineChatError):
    def __init__(self, message: str = "Server not linked"):
        super().__init__("server_not_linked", message)


class ConfigError(MineChatError):
    def __init__(self, message: str):
        super().__init__("config_error", message)


class AuthFailedError(MineChatError):
    """The server rejected the link. ``message`` is the server's text verbatim."""

    def __init__(self, message: str):
        super().__init__("auth_failed", message)


class IdentifierGenerationError(MineChatError):
    def __init__(self, message: str):
        super().__init__("identifier_error", message)


class DisconnectedError(MineChatError):
    """Peer closed the stream cleanly while a frame was expected."""

    def __init__(self, message: str = "Disconnected"):
        super().__init__("disconnected", message)
