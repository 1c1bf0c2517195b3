"""AsyncMineChat / MineChat against mock peers."""

import json

import pytest

from conftest import SUCCESS_ACK
from minechat.client import AsyncMineChat, MineChat
from minechat.errors import AuthFailedError, SerializationError, ServerNotLinkedError
from minechat.models.messages import Broadcast, Chat, Disconnect

ADDRESS = "mc.example.net:25575"


class TestNotLinked:
    @pytest.mark.asyncio
    async def test_send_before_link(self):
        client = AsyncMineChat(ADDRESS)
        assert not client.linked
        assert client.session is None
        with pytest.raises(ServerNotLinkedError):
            await client.send_chat("hello")

    @pytest.mark.asyncio
    async def test_receive_before_link(self):
        with pytest.raises(ServerNotLinkedError):
            await AsyncMineChat(ADDRESS).receive()

    @pytest.mark.asyncio
    async def test_disconnect_before_link_is_noop(self):
        await AsyncMineChat(ADDRESS).disconnect()

    def test_sync_send_before_link(self):
        client = MineChat(ADDRESS)
        try:
            with pytest.raises(ServerNotLinkedError):
                client.send_chat("hello")
        finally:
            client.close()


class TestLinkedSession:
    @pytest.mark.asyncio
    async def test_link_keeps_connection_open(self, mock_peer):
        peer = mock_peer(SUCCESS_ACK)
        client = AsyncMineChat(ADDRESS, connector=peer)
        session = await client.link("ABC123")

        assert client.linked
        assert client.session == session
        assert not peer.writers[0].closed
        assert await client.link("ABC123") == session
        assert len(peer.addresses) == 1

    @pytest.mark.asyncio
    async def test_link_failure_closes_connection(self, mock_peer):
        peer = mock_peer(b'{"type":"AUTH_ACK","payload":{"status":"failure","message":"expired"}}\n')
        client = AsyncMineChat(ADDRESS, connector=peer)
        with pytest.raises(AuthFailedError):
            await client.link("OLD")
        assert not client.linked
        assert peer.writers[0].closed

    @pytest.mark.asyncio
    async def test_reuses_supplied_client_uuid(self, mock_peer):
        client_uuid = "3f2a5c1e-8b7d-4e2f-9a1c-0d4b6e8f2a3c"
        client = AsyncMineChat(ADDRESS, client_uuid=client_uuid, connector=mock_peer(SUCCESS_ACK))
        session = await client.link("ABC123")
        assert session.client_uuid == client_uuid

    @pytest.mark.asyncio
    async def test_send_chat(self, mock_peer):
        peer = mock_peer(SUCCESS_ACK)
        client = AsyncMineChat(ADDRESS, connector=peer)
        await client.link("ABC123")
        await client.send_chat("hello")
        assert peer.writers[0].writes[-1] == b'{"type":"CHAT","payload":{"message":"hello"}}\n'

    @pytest.mark.asyncio
    async def test_listen_until_disconnect(self, mock_peer):
        peer = mock_peer(
            SUCCESS_ACK
            + b'{"type":"BROADCAST","payload":{"from":"Alex","message":"hi"}}\n'
            + b'{"type":"CHAT","payload":{"message":"welcome"}}\n'
            + b'{"type":"DISCONNECT","payload":{"reason":"Server stopping"}}\n'
        )
        client = AsyncMineChat(ADDRESS, connector=peer)
        await client.link("ABC123")

        messages = [m async for m in client.listen()]
        assert messages == [
            Broadcast.create(from_="Alex", message="hi"),
            Chat.create(message="welcome"),
            Disconnect.create(reason="Server stopping"),
        ]
        assert not client.linked
        assert peer.writers[0].closed

    @pytest.mark.asyncio
    async def test_listen_ends_on_peer_close(self, mock_peer):
        peer = mock_peer(SUCCESS_ACK + b'{"type":"CHAT","payload":{"message":"only"}}\n')
        client = AsyncMineChat(ADDRESS, connector=peer)
        await client.link("ABC123")
        messages = [m async for m in client.listen()]
        assert messages == [Chat.create(message="only")]
        assert not client.linked

    @pytest.mark.asyncio
    async def test_listen_propagates_malformed_frames(self, mock_peer):
        client = AsyncMineChat(ADDRESS, connector=mock_peer(SUCCESS_ACK + b"garbage\n"))
        await client.link("ABC123")
        with pytest.raises(SerializationError):
            async for _ in client.listen():
                pass

    @pytest.mark.asyncio
    async def test_disconnect_sends_reason_and_closes(self, mock_peer):
        peer = mock_peer(SUCCESS_ACK)
        client = AsyncMineChat(ADDRESS, connector=peer)
        await client.link("ABC123")
        await client.disconnect("bye")

        writer = peer.writers[0]
        assert json.loads(writer.writes[-1]) == {"type": "DISCONNECT", "payload": {"reason": "bye"}}
        assert writer.closed
        assert not client.linked
        with pytest.raises(ServerNotLinkedError):
            await client.send_chat("too late")


class TestSyncClient:
    def test_link_receive_send_close(self, mock_peer):
        peer = mock_peer(SUCCESS_ACK + b'{"type":"BROADCAST","payload":{"from":"Alex","message":"hi"}}\n')
        client = MineChat(ADDRESS, connector=peer)
        try:
            session = client.link("ABC123")
            assert client.linked
            assert client.session == session
            assert client.receive() == Broadcast.create(from_="Alex", message="hi")
            client.send_chat("hello")
        finally:
            client.close()

        writer = peer.writers[0]
        assert writer.writes[-2] == b'{"type":"CHAT","payload":{"message":"hello"}}\n'
        assert json.loads(writer.writes[-1]) == {"type": "DISCONNECT", "payload": {"reason": "Client disconnected"}}
        assert writer.closed
        assert not client.linked
        client.close()
