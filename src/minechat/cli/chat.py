"""CLI: minechat chat"""

import asyncio
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from typing_extensions import assert_never

from minechat.client import AsyncMineChat
from minechat.config import remember_session, saved_session
from minechat.errors import MineChatError
from minechat.models.messages import Auth, AuthAck, Broadcast, Chat, Disconnect, MineChatMessage

console = Console()

QUIT_COMMANDS = ("/quit", "/exit")


def _load_config() -> dict:
    from minechat.cli.main import _load_config
    return _load_config()


def _save_config(cfg: dict) -> None:
    from minechat.cli.main import _save_config
    _save_config(cfg)


def _run(coro):
    from minechat.cli.main import _run
    return _run(coro)


def render_message(message: MineChatMessage) -> str:
    """Rich markup for a message received from the server."""
    if isinstance(message, Broadcast):
        return f"[cyan]{escape(message.payload.from_)}:[/cyan] {escape(message.payload.message)}"
    elif isinstance(message, Chat):
        return f"[green]Server:[/green] {escape(message.payload.message)}"
    elif isinstance(message, Disconnect):
        return f"[yellow]Disconnected by server: {escape(message.payload.reason)}[/yellow]"
    elif isinstance(message, AuthAck):
        return f"[dim]auth {escape(message.payload.status)}: {escape(message.payload.message)}[/dim]"
    elif isinstance(message, Auth):
        return "[dim]unexpected AUTH from server[/dim]"
    else:
        assert_never(message)


async def _print_incoming(client: AsyncMineChat) -> None:
    async for message in client.listen():
        console.print(render_message(message))
    console.print("[dim]Connection closed. Press Enter to exit.[/dim]")


@click.command("chat")
@click.argument("address", required=False)
@click.option("-c", "--code", "link_code", required=True, help="Link code shown in game.")
def chat_cmd(address: Optional[str], link_code: str):
    """Interactive chat with the server at ADDRESS (defaults to the linked one)."""
    cfg = _load_config()
    if not address:
        try:
            address = saved_session(cfg).server_addr
        except MineChatError as e:
            console.print(f"[red]{escape(str(e))}[/red]")
            raise SystemExit(1)

    async def _chat():
        client = AsyncMineChat(address)
        with console.status(f"Linking with {address}..."):
            session = await client.link(link_code)
        _save_config(remember_session(cfg, session))
        console.print(f"[dim]Linked as {session.client_uuid}[/dim]")
        console.print("[cyan]Type your message (/quit to exit)[/cyan]\n")

        incoming = asyncio.create_task(_print_incoming(client))
        loop = asyncio.get_running_loop()
        try:
            while not incoming.done():
                try:
                    text = await loop.run_in_executor(None, lambda: click.prompt("You", prompt_suffix=": "))
                except click.Abort:
                    break
                if text.lower() in QUIT_COMMANDS or incoming.done():
                    break
                await client.send_chat(text)
        finally:
            await client.disconnect()
            incoming.cancel()
            try:
                await incoming
            except asyncio.CancelledError:
                pass

    _run(_chat())
