"""
AsyncMineChat / MineChat: single-session clients built on the protocol layer.
"""

import asyncio
import logging
from typing import Any, AsyncGenerator, Optional

from minechat.errors import DisconnectedError, ServerNotLinkedError, TransportError
from minechat.link import LinkHandshake
from minechat.models.messages import Chat, Disconnect, MineChatMessage
from minechat.models.session import LinkedSession
from minechat.transport.codec import receive_message, send_message
from minechat.transport.stream import Connector, open_connection

logger = logging.getLogger(__name__)

DEFAULT_DISCONNECT_REASON = "Client disconnected"


class AsyncMineChat:
    """Async MineChat client (primary). Holds at most one linked connection."""

    def __init__(
        self,
        address: str,
        client_uuid: Optional[str] = None,
        connector: Connector = open_connection,
    ):
        self._address = address
        self._client_uuid = client_uuid
        self._connector = connector
        self._handshake: Optional[LinkHandshake] = None
        self._session: Optional[LinkedSession] = None

    @property
    def address(self) -> str:
        return self._address

    @property
    def linked(self) -> bool:
        return self._session is not None and self._handshake is not None and self._handshake.writer is not None

    @property
    def session(self) -> Optional[LinkedSession]:
        return self._session

    async def link(self, link_code: str) -> LinkedSession:
        """Run the handshake and keep the connection open for chat traffic."""
        if self.linked:
            return self._session  # type: ignore[return-value]
        handshake = LinkHandshake(
            self._address, link_code,
            client_uuid=self._client_uuid,
            connector=self._connector,
        )
        try:
            session = await handshake.run()
        except BaseException:
            await handshake.close()
            raise
        self._handshake = handshake
        self._session = session
        self._client_uuid = session.client_uuid
        return session

    async def send(self, message: MineChatMessage) -> None:
        self._ensure_linked()
        await send_message(self._handshake.writer, message)  # type: ignore[union-attr,arg-type]

    async def send_chat(self, text: str) -> None:
        """Send a CHAT message to the server."""
        await self.send(Chat.create(message=text))

    async def receive(self) -> MineChatMessage:
        """Wait for the next message from the server."""
        self._ensure_linked()
        return await receive_message(self._handshake.reader)  # type: ignore[union-attr,arg-type]

    async def listen(self) -> AsyncGenerator[MineChatMessage, None]:
        """Yield incoming messages until the server sends DISCONNECT or closes the stream.

        The DISCONNECT message itself is yielded last. A clean peer close ends
        the generator without error.
        """
        self._ensure_linked()
        while True:
            try:
                message = await self.receive()
            except DisconnectedError:
                logger.debug("Server closed the connection")
                await self._close()
                return
            yield message
            if isinstance(message, Disconnect):
                await self._close()
                return

    async def disconnect(self, reason: str = DEFAULT_DISCONNECT_REASON) -> None:
        """Tell the server we are leaving, then close the connection."""
        if not self.linked:
            await self._close()
            return
        try:
            await self.send(Disconnect.create(reason=reason))
        except TransportError as e:
            logger.debug("Could not send DISCONNECT: %s", e)
        finally:
            await self._close()

    async def _close(self) -> None:
        if self._handshake is not None:
            await self._handshake.close()
            self._handshake = None

    def _ensure_linked(self) -> None:
        if not self.linked:
            raise ServerNotLinkedError("Not linked. Call link() first.")


class MineChat:
    """Sync wrapper around AsyncMineChat. Runs the event loop internally."""

    def __init__(self, address: str, **kwargs: Any):
        self._async = AsyncMineChat(address, **kwargs)
        self._loop = asyncio.new_event_loop()

    def _run(self, coro: Any) -> Any:
        return self._loop.run_until_complete(coro)

    @property
    def linked(self) -> bool:
        return self._async.linked

    @property
    def session(self) -> Optional[LinkedSession]:
        return self._async.session

    def link(self, link_code: str) -> LinkedSession:
        return self._run(self._async.link(link_code))

    def send(self, message: MineChatMessage) -> None:
        self._run(self._async.send(message))

    def send_chat(self, text: str) -> None:
        self._run(self._async.send_chat(text))

    def receive(self) -> MineChatMessage:
        return self._run(self._async.receive())

    def disconnect(self, reason: str = DEFAULT_DISCONNECT_REASON) -> None:
        self._run(self._async.disconnect(reason))

    def close(self) -> None:
        """Disconnect if needed and release the event loop."""
        if self._loop.is_closed():
            return
        try:
            self.disconnect()
        finally:
            self._loop.close()
