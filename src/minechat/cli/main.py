"""
MineChat CLI: `minechat` command.

Commands:
  minechat link <address> <code>   Link with a server and remember it
  minechat status                  Show the remembered server
  minechat unlink                  Forget the remembered server
  minechat chat [address] -c CODE  Interactive chat
"""

import asyncio
import logging

try:
    import click
    from rich.console import Console
    from rich.logging import RichHandler
    from rich.markup import escape
except ImportError:
    raise SystemExit("CLI requires extras: pip install minechat[cli]")

from minechat import __version__
from minechat.config import load_config, save_config
from minechat.errors import MineChatError

console = Console()


def _load_config() -> dict:
    try:
        return load_config()
    except MineChatError as e:
        _fail(e)


def _save_config(cfg: dict) -> None:
    try:
        save_config(cfg)
    except MineChatError as e:
        _fail(e)


def _fail(error: MineChatError):
    console.print(f"[red]{escape(str(error))}[/red]")
    raise SystemExit(1)


def _run(coro):
    try:
        return asyncio.run(coro)
    except MineChatError as e:
        _fail(e)


@click.group()
@click.version_option(__version__)
@click.option("-v", "--verbose", is_flag=True, help="Log protocol traffic.")
def main(verbose: bool):
    """MineChat CLI: chat with a Minecraft server from your terminal."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )


# Register subcommands from separate modules
from minechat.cli.link import link_cmd, status_cmd, unlink_cmd
from minechat.cli.chat import chat_cmd

main.add_command(link_cmd)
main.add_command(status_cmd)
main.add_command(unlink_cmd)
main.add_command(chat_cmd)


if __name__ == "__main__":
    main()
