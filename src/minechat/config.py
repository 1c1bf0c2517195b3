"""
Saved-session config for the CLI: ``~/.minechat/config.json``.
"""

import json
import os
from pathlib import Path
from typing import Any, Optional

from minechat.errors import ConfigError
from minechat.models.session import LinkedSession

CONFIG_ENV = "MINECHAT_CONFIG"
DEFAULT_CONFIG_FILE = Path.home() / ".minechat" / "config.json"


def config_path() -> Path:
    override = os.environ.get(CONFIG_ENV)
    return Path(override) if override else DEFAULT_CONFIG_FILE


def load_config(path: Optional[Path] = None) -> dict[str, Any]:
    path = path or config_path()
    try:
        cfg = json.loads(path.read_text())
    except FileNotFoundError:
        return {}
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    if not isinstance(cfg, dict):
        raise ConfigError(f"Config file {path} must contain a JSON object")
    return cfg


def save_config(cfg: dict[str, Any], path: Optional[Path] = None) -> None:
    path = path or config_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(cfg, indent=2))
    except OSError as e:
        raise ConfigError(f"Cannot write config file {path}: {e}") from e


def saved_session(cfg: dict[str, Any]) -> LinkedSession:
    """The session stored by ``minechat link``. Raises ConfigError if there is none."""
    client_uuid = cfg.get("client_uuid")
    server_addr = cfg.get("server_addr")
    if not isinstance(client_uuid, str) or not isinstance(server_addr, str):
        raise ConfigError("No linked server. Run `minechat link <address> <code>` first.")
    return LinkedSession(client_uuid=client_uuid, server_addr=server_addr)


def remember_session(cfg: dict[str, Any], session: LinkedSession) -> dict[str, Any]:
    return {**cfg, "client_uuid": session.client_uuid, "server_addr": session.server_addr}
