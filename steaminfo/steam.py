"""
Steam installation and library discovery.

Locates the Steam client root and the library folders it knows about.
Both steps are structural: without a root or at least one library there
is nothing meaningful to report, so failures here raise.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, Sequence

from . import keyvalues

logger = logging.getLogger(__name__)

STEAMAPPS = "steamapps"

# Probe order: native, Flatpak, snap, legacy ~/.steam symlink
DEFAULT_ROOT_CANDIDATES = (
    ".local/share/Steam",
    ".var/app/com.valvesoftware.Steam/.local/share/Steam",
    "snap/steam/common/.local/share/Steam",
    ".steam/steam",
)

# config/ is authoritative; steamapps/ is rewritten by the client on startup
LIBRARY_FOLDERS_FILES = (
    ("config", "libraryfolders.vdf"),
    (STEAMAPPS, "libraryfolders.vdf"),
)


class SteamInfoError(Exception):
    """Base class for fatal steaminfo errors."""


class SteamNotFoundError(SteamInfoError):
    """No Steam installation root could be found."""

    def __init__(self, candidates: Sequence[Path] = ()):
        self.candidates = tuple(candidates)
        super().__init__("Could not find Steam installation")


class NoLibrariesError(SteamInfoError):
    """No usable Steam library folder could be found."""

    def __init__(self, message: str = "No Steam libraries found"):
        super().__init__(message)


def root_candidates(extra: Iterable[str | Path] = (), home: Path | None = None) -> list[Path]:
    """Build the ordered list of Steam root candidates.

    Args:
        extra: Additional roots probed before the built-in locations
        home: Home directory (defaults to the current user's)

    Returns:
        Candidate paths, explicit ones first, without duplicates
    """
    home = home or Path.home()
    candidates: list[Path] = []

    env_root = os.environ.get("STEAM_ROOT")
    explicit = [*extra, env_root] if env_root else list(extra)
    for raw in explicit:
        candidates.append(Path(os.path.expanduser(str(raw))))
    for relative in DEFAULT_ROOT_CANDIDATES:
        candidates.append(home / relative)

    unique: list[Path] = []
    for path in candidates:
        if path not in unique:
            unique.append(path)
    return unique


def find_steam_root(extra: Iterable[str | Path] = (), home: Path | None = None) -> Path:
    """Return the first candidate root that contains a ``steamapps`` directory.

    Raises:
        SteamNotFoundError: If no candidate matches
    """
    candidates = root_candidates(extra, home)
    for path in candidates:
        if (path / STEAMAPPS).is_dir():
            logger.debug("Found Steam root at %s", path)
            return path
        logger.debug("No Steam root at %s", path)
    raise SteamNotFoundError(candidates)


def find_library_folders_file(root: Path) -> Path | None:
    for parts in LIBRARY_FOLDERS_FILES:
        path = root.joinpath(*parts)
        if path.is_file():
            return path
    return None


def parse_library_paths(text: str) -> list[str]:
    """Extract every ``"path"`` value from libraryfolders.vdf content.

    Paths are collected at any nesting depth so both the current layout
    (``"libraryfolders" { "0" { "path" ... } }``) and older flat layouts
    work. A file vdf cannot parse is scanned line by line instead.
    """
    try:
        tree = keyvalues.loads(text)
    except SyntaxError as exc:
        logger.debug("libraryfolders.vdf is malformed (%s), scanning lines", exc)
        return [p for p in keyvalues.scan_lines(text, "path") if p]
    return [p for p in keyvalues.string_values(tree, "path") if p]


def find_steam_libraries(root: Path) -> list[Path]:
    """Return the ``steamapps`` directories of every verified library.

    Entries whose ``steamapps`` directory is missing (an unplugged drive,
    a removed library) are dropped silently.

    Raises:
        NoLibrariesError: If no library folders file exists or no entry
            in it points at an existing library
    """
    vdf_path = find_library_folders_file(root)
    if vdf_path is None:
        raise NoLibrariesError("Could not find libraryfolders.vdf")

    logger.debug("Reading library folders from %s", vdf_path)
    try:
        text = vdf_path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise NoLibrariesError(f"Could not read {vdf_path}: {exc}") from exc

    libraries: list[Path] = []
    for raw in parse_library_paths(text):
        steamapps = Path(raw) / STEAMAPPS
        if not steamapps.is_dir():
            logger.debug("Skipping stale library entry %s", raw)
            continue
        if steamapps not in libraries:
            libraries.append(steamapps)

    if not libraries:
        raise NoLibrariesError()

    logger.debug("Found %d Steam libraries", len(libraries))
    return libraries
