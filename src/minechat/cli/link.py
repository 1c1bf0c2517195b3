"""CLI: minechat link|status|unlink"""

import asyncio

import click
from rich.console import Console
from rich.markup import escape

from minechat.config import remember_session, saved_session
from minechat.errors import AuthFailedError, MineChatError
from minechat.link import link_with_server

console = Console()


def _load_config() -> dict:
    from minechat.cli.main import _load_config
    return _load_config()


def _save_config(cfg: dict) -> None:
    from minechat.cli.main import _save_config
    _save_config(cfg)


def _fail(error: MineChatError):
    from minechat.cli.main import _fail
    _fail(error)


@click.command("link")
@click.argument("address")
@click.argument("code")
def link_cmd(address: str, code: str):
    """Link with the server at ADDRESS (host:port) using link CODE."""

    async def _link():
        with console.status(f"Linking with {address}..."):
            return await link_with_server(address, code)

    cfg = _load_config()
    try:
        session = asyncio.run(_link())
    except AuthFailedError as e:
        console.print(f"[red]Link rejected by server:[/red] {escape(e.message)}")
        console.print("[dim]Get a new code in game and try again.[/dim]")
        raise SystemExit(1)
    except MineChatError as e:
        _fail(e)
    _save_config(remember_session(cfg, session))
    console.print(f"[green]Linked with {session.server_addr}[/green] (client {session.client_uuid})")


@click.command("status")
def status_cmd():
    """Show the linked server."""
    cfg = _load_config()
    try:
        session = saved_session(cfg)
    except MineChatError:
        console.print("[yellow]Not linked. Run `minechat link <address> <code>`.[/yellow]")
        return
    console.print(f"[green]Linked[/green] with {session.server_addr} (client {session.client_uuid})")


@click.command("unlink")
def unlink_cmd():
    """Forget the linked server."""
    cfg = _load_config()
    cfg.pop("client_uuid", None)
    cfg.pop("server_addr", None)
    _save_config(cfg)
    console.print("[green]Unlinked.[/green]")
