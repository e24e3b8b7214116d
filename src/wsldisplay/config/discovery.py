"""Config file discovery.

Lookup order: ``WSLDISPLAY_CONFIG`` env var, then
``$XDG_CONFIG_HOME/wsldisplay/config.toml`` (``~/.config`` when unset).
An explicit ``--config`` flag bypasses discovery entirely.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_DIRNAME = "wsldisplay"
CONFIG_FILENAME = "config.toml"
CONFIG_ENV_VAR = "WSLDISPLAY_CONFIG"


def default_config_dir() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / CONFIG_DIRNAME


def find_config() -> Path | None:
    """Return the config file to load, or None if there is none.

    A ``WSLDISPLAY_CONFIG`` pointing at a missing file disables discovery
    rather than falling through to the default location.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        return p if p.is_file() else None

    candidate = default_config_dir() / CONFIG_FILENAME
    if candidate.is_file():
        return candidate
    return None
