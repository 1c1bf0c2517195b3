"""
Link handshake: pair this client with a server-side link code.

States: DISCONNECTED -> CONNECTING -> AWAITING_ACK -> LINKED | FAILED.
LINKED and FAILED are terminal; retrying means running a new handshake.
"""

import enum
import logging
import uuid
import warnings
from typing import Optional

from minechat.errors import AuthFailedError, IdentifierGenerationError, MineChatError
from minechat.models.messages import Auth, AuthAck
from minechat.models.session import LinkedSession
from minechat.transport.codec import receive_message, send_message
from minechat.transport.stream import ClosableWriter, Connector, LineReader, close_writer, open_connection

logger = logging.getLogger(__name__)

UNEXPECTED_RESPONSE = "Unexpected response"


class LinkState(str, enum.Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    AWAITING_ACK = "awaiting_ack"
    LINKED = "linked"
    FAILED = "failed"


def generate_client_uuid() -> str:
    """Random 36-char hyphenated lowercase UUID from the OS entropy source."""
    try:
        return str(uuid.uuid4())
    except (OSError, NotImplementedError) as e:
        raise IdentifierGenerationError(f"Failed to generate client identifier: {e}") from e


class LinkHandshake:
    """One link attempt against one server.

    On success the connection stays open (``reader``/``writer``) so the
    caller may keep using it for chat traffic; ``close()`` releases it.
    """

    def __init__(
        self,
        address: str,
        link_code: str,
        client_uuid: Optional[str] = None,
        connector: Connector = open_connection,
    ):
        self.address = address
        self._link_code = link_code
        self._client_uuid = client_uuid
        self._connector = connector
        self.state = LinkState.DISCONNECTED
        self.ack: Optional[AuthAck] = None
        self.reader: Optional[LineReader] = None
        self.writer: Optional[ClosableWriter] = None

    @property
    def client_uuid(self) -> Optional[str]:
        return self._client_uuid

    async def run(self) -> LinkedSession:
        if self.state is not LinkState.DISCONNECTED:
            raise RuntimeError(f"Handshake already ran (state: {self.state.value})")

        self.state = LinkState.CONNECTING
        try:
            if self._client_uuid is None:
                self._client_uuid = generate_client_uuid()
            self.reader, self.writer = await self._connector(self.address)
            logger.debug("Sending AUTH to server %s", self.address)
            await send_message(
                self.writer,
                Auth.create(client_uuid=self._client_uuid, link_code=self._link_code),
            )
        except BaseException:
            self.state = LinkState.FAILED
            raise

        self.state = LinkState.AWAITING_ACK
        try:
            reply = await receive_message(self.reader)
            if not isinstance(reply, AuthAck):
                logger.debug("Expected AUTH_ACK, got %s", reply.type)
                raise AuthFailedError(UNEXPECTED_RESPONSE)
            if not reply.payload.ok:
                raise AuthFailedError(reply.payload.message)
        except BaseException:
            self.state = LinkState.FAILED
            raise

        self.ack = reply
        self.state = LinkState.LINKED
        logger.debug("Linked successfully: %s", reply.payload.message)
        return LinkedSession(client_uuid=self._client_uuid, server_addr=self.address)

    async def close(self) -> None:
        if self.writer is not None:
            writer, self.writer = self.writer, None
            self.reader = None
            await close_writer(writer)


async def link_with_server(
    address: str,
    link_code: str,
    *,
    connector: Connector = open_connection,
) -> LinkedSession:
    """Link with the server at ``address`` using ``link_code``.

    Returns the session descriptor ``(client_uuid, server_addr)``. Raises
    AuthFailedError when the server rejects the code, TransportError or
    SerializationError on transport and framing failures. The connection is
    closed before returning.
    """
    handshake = LinkHandshake(address, link_code, connector=connector)
    try:
        return await handshake.run()
    except MineChatError as e:
        logger.debug("Link with %s failed: %s", address, e)
        raise
    finally:
        await handshake.close()


async def handle_link(server_addr: str, code: str) -> LinkedSession:
    """Deprecated alias of link_with_server."""
    warnings.warn(
        "handle_link is deprecated, use link_with_server instead",
        DeprecationWarning,
        stacklevel=2,
    )
    return await link_with_server(server_addr, code)
