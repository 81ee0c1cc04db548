"""
Configuration file parsing and management.

Reads optional YAML configuration files and merges them
(explicit path → user config → defaults). Command line flags are applied
on top by the entry script.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import yaml

from .common import config_home, env_flag
from .steam import SteamInfoError

logger = logging.getLogger(__name__)


def config_locations() -> list[Path]:
    """User configuration files, in priority order."""
    base = config_home() / "steaminfo"
    return [base / "config.yml", base / "config.yaml"]


class ConfigError(SteamInfoError, ValueError):
    """An explicitly requested configuration file could not be used."""


@dataclass(frozen=True)
class Preferences:
    """
    Display preferences.

    Attributes:
        full_paths: Show full paths instead of the compact view
        icons: Draw game icons when the terminal supports them
        color: Emit ANSI colors
        hyperlinks: Emit OSC 8 links for paths
        converter: ImageMagick binary to use (auto-detected if None)
        icon_cache_dir: Where encoded icons are kept (XDG cache if None)
        exclude_prefixes: Extra name prefixes of apps to leave out
    """
    full_paths: bool = False
    icons: bool = True
    color: bool = True
    hyperlinks: bool = True
    converter: str | None = None
    icon_cache_dir: str | None = None
    exclude_prefixes: tuple[str, ...] = ()

    def __post_init__(self):
        """Validate preferences after initialization."""
        for name in ("full_paths", "icons", "color", "hyperlinks"):
            if not isinstance(getattr(self, name), bool):
                raise ValueError(f"Invalid {name}: {getattr(self, name)!r}. Must be true or false")
        if any(not isinstance(p, str) or not p for p in self.exclude_prefixes):
            raise ValueError("Invalid exclude_prefixes: entries must be non-empty strings")

    @staticmethod
    def from_dict(data: dict[str, Any]) -> Preferences:
        """Create Preferences from dictionary."""
        prefixes = data.get("exclude_prefixes") or ()
        if isinstance(prefixes, str):
            prefixes = (prefixes,)
        return Preferences(
            full_paths=data.get("full_paths", False),
            icons=data.get("icons", True),
            color=data.get("color", True),
            hyperlinks=data.get("hyperlinks", True),
            converter=data.get("converter"),
            icon_cache_dir=data.get("icon_cache_dir"),
            exclude_prefixes=tuple(prefixes),
        )


@dataclass(frozen=True)
class Config:
    """
    Complete configuration for steaminfo.

    Attributes:
        version: Config schema version
        steam_roots: Steam roots to probe before the built-in locations
        preferences: Display preferences
        source: Path to the configuration file that was loaded
    """
    version: int = 1
    steam_roots: tuple[str, ...] = ()
    preferences: Preferences = field(default_factory=Preferences)
    source: str = ""

    def __post_init__(self):
        if self.version != 1:
            raise ValueError(f"Unsupported config version: {self.version}. Expected version 1")

    @staticmethod
    def from_dict(data: dict[str, Any], source: str = "") -> Config:
        """Create Config from dictionary."""
        roots = data.get("steam_roots") or ()
        if isinstance(roots, str):
            roots = (roots,)
        return Config(
            version=data.get("version", 1),
            steam_roots=tuple(str(r) for r in roots),
            preferences=Preferences.from_dict(data.get("preferences") or {}),
            source=source,
        )

    def merge_with(self, other: Config) -> Config:
        """
        Merge this config with another, preferring values from this config.

        Args:
            other: Other config to merge (lower priority)

        Returns:
            New merged Config object
        """
        mine, theirs = self.preferences, other.preferences
        default = Preferences()

        def pick(name: str) -> Any:
            value = getattr(mine, name)
            return value if value != getattr(default, name) else getattr(theirs, name)

        merged_preferences = Preferences(
            full_paths=pick("full_paths"),
            icons=pick("icons"),
            color=pick("color"),
            hyperlinks=pick("hyperlinks"),
            converter=pick("converter"),
            icon_cache_dir=pick("icon_cache_dir"),
            exclude_prefixes=tuple(dict.fromkeys(mine.exclude_prefixes + theirs.exclude_prefixes)),
        )
        return Config(
            version=self.version,
            steam_roots=tuple(dict.fromkeys(self.steam_roots + other.steam_roots)),
            preferences=merged_preferences,
            source=self.source or other.source,
        )

    def with_overrides(self, full_paths: bool = False, no_icons: bool = False) -> Config:
        """Apply command line flags and environment toggles."""
        prefs = self.preferences
        prefs = replace(
            prefs,
            full_paths=prefs.full_paths or full_paths,
            icons=prefs.icons and not no_icons,
            color=prefs.color and env_flag("STEAMINFO_COLOR") and "NO_COLOR" not in os.environ,
            hyperlinks=prefs.hyperlinks and env_flag("STEAMINFO_LINKS"),
        )
        return replace(self, preferences=prefs)


def _load_yaml(file_path: Path) -> dict[str, Any] | None:
    """
    Load YAML configuration file.

    Returns:
        Parsed configuration dictionary, or None if the file is unreadable or invalid
    """
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        logger.debug("Could not read config %s: %s", file_path, exc)
        return None
    return data if isinstance(data, dict) else {}


def load_config_file(file_path: str | Path) -> Config | None:
    """
    Load configuration from a single file.

    Returns:
        Config object, or None if the file is missing or invalid
    """
    path = Path(os.path.expanduser(str(file_path)))
    if not path.is_file():
        return None

    logger.debug("Loading config from: %s", path)
    data = _load_yaml(path)
    if data is None:
        return None

    try:
        return Config.from_dict(data, source=str(path))
    except (ValueError, TypeError) as exc:
        logger.debug("Config validation failed for %s: %s", path, exc)
        return None


def load_config(custom_path: str | Path | None = None) -> Config:
    """
    Load and merge configuration from all sources.

    Configuration precedence (highest to lowest):
    1. Custom path (if provided)
    2. User ~/.config/steaminfo/config.yml (or .yaml)
    3. Default configuration

    Raises:
        ConfigError: If custom_path is provided but cannot be loaded
    """
    configs: list[Config] = []

    if custom_path:
        config = load_config_file(custom_path)
        if config is None:
            raise ConfigError(f"Could not load config from specified path: {custom_path}")
        configs.append(config)

    for location in config_locations():
        config = load_config_file(location)
        if config is not None:
            configs.append(config)

    if not configs:
        logger.debug("No config files found, using defaults")
        return Config()

    merged = configs[0]
    for config in configs[1:]:
        merged = merged.merge_with(config)
    return merged
