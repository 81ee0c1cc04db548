"""
Common utilities shared across steaminfo modules.
"""

from __future__ import annotations

import os
from pathlib import Path


def env_flag(name: str, default: bool = True) -> bool:
    """Read a ``0``/``1`` style environment toggle."""
    value = os.environ.get(name)
    if value is None or value == "":
        return default
    return value.strip().lower() not in ("0", "false", "no", "off")


def xdg_dir(variable: str, fallback: str) -> Path:
    """Resolve an XDG base directory; relative values are invalid and ignored."""
    value = os.environ.get(variable, "")
    if value and os.path.isabs(value):
        return Path(value)
    return Path.home() / fallback


def cache_home() -> Path:
    return xdg_dir("XDG_CACHE_HOME", ".cache")


def config_home() -> Path:
    return xdg_dir("XDG_CONFIG_HOME", ".config")


def default_icon_cache_dir() -> Path:
    return cache_home() / "steaminfo" / "icons"
