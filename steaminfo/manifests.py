"""
App manifest scanning and native/Proton classification.

Each Steam library holds one ``appmanifest_<appid>.acf`` per installed
app. Only three fields are read from it; whether a game runs through
Proton is decided by the filesystem, not by the manifest: a game is a
Proton game exactly when ``compatdata/<appid>/pfx`` exists in its library.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator

from . import keyvalues

logger = logging.getLogger(__name__)

MANIFEST_GLOB = "appmanifest_*.acf"

# Proton builds, Steam runtimes and redistributables are installed as apps
# but are not games
EXCLUDED_PREFIXES = ("Proton", "Steam Linux Runtime", "Steamworks")

UNKNOWN_VERSION = "?"


@dataclass(frozen=True)
class InstalledGame:
    """A game found in a library manifest.

    Attributes:
        app_id: Steam app id as written in the manifest
        install_dir: Directory name under ``<library>/common``
        name: Display name
        library: The library's ``steamapps`` directory
    """
    app_id: str
    install_dir: str
    name: str
    library: Path

    @property
    def install_path(self) -> Path:
        return self.library / "common" / self.install_dir

    @property
    def compat_root(self) -> Path:
        return self.library / "compatdata" / self.app_id

    @property
    def compat_path(self) -> Path:
        return self.compat_root / "pfx"


@dataclass(frozen=True)
class ProtonGame(InstalledGame):
    """A game with a Proton prefix in its library."""
    proton_version: str = UNKNOWN_VERSION


@dataclass(frozen=True)
class ScanResult:
    """Classified games in discovery order."""
    native: tuple[InstalledGame, ...] = ()
    proton: tuple[ProtonGame, ...] = ()

    @property
    def total(self) -> int:
        return len(self.native) + len(self.proton)


def iter_manifests(library: Path) -> Iterator[Path]:
    """Yield the manifest files of a library; nothing if it is unreadable."""
    try:
        manifests = sorted(library.glob(MANIFEST_GLOB))
    except OSError as exc:
        logger.debug("Cannot list %s: %s", library, exc)
        return
    for path in manifests:
        if path.is_file():
            yield path


def _scan_fields(text: str) -> tuple[str, str, str]:
    """Same projection as the parsed path, read line by line."""
    app_ids = keyvalues.scan_lines(text, "appid")
    install_dirs = keyvalues.scan_lines(text, "installdir")
    names = keyvalues.scan_lines(text, "name", depth=1)
    return (
        app_ids[0] if app_ids else "",
        install_dirs[-1] if install_dirs else "",
        names[-1] if names else "",
    )


def parse_manifest(path: Path, library: Path | None = None) -> InstalledGame | None:
    """Read the id, install directory and name from one manifest.

    The first ``appid`` in the file wins, since nested records may carry
    their own. ``name`` is only taken from the top-level ``AppState``
    record, and the last one there wins. A manifest the parser rejects is
    read line by line instead. Manifests that are unreadable or lack any
    of the three fields are skipped (``None``).
    """
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        logger.debug("Skipping unreadable manifest %s: %s", path, exc)
        return None

    try:
        tree = keyvalues.loads(text)
    except SyntaxError as exc:
        logger.debug("Malformed manifest %s, scanning lines: %s", path, exc)
        app_id, install_dir, name = _scan_fields(text)
    else:
        app_id = keyvalues.first_value(tree, "appid")
        install_dir = keyvalues.last_value(tree, "installdir")
        name = keyvalues.last_value(tree, "name", depth=1)

    if not app_id or not install_dir or not name:
        logger.debug("Skipping incomplete manifest %s", path)
        return None

    return InstalledGame(
        app_id=app_id,
        install_dir=install_dir,
        name=name,
        library=library if library is not None else path.parent,
    )


def is_excluded(name: str, prefixes: Iterable[str] = EXCLUDED_PREFIXES) -> bool:
    return any(name.startswith(prefix) for prefix in prefixes)


def read_proton_version(compat_root: Path) -> str:
    """First line of ``config_info``, or ``"?"`` when it cannot be read.

    An empty file gives an empty version.
    """
    try:
        with open(compat_root / "config_info", "r", encoding="utf-8", errors="replace") as f:
            return f.readline().rstrip("\r\n")
    except OSError:
        return UNKNOWN_VERSION


def classify(game: InstalledGame) -> InstalledGame:
    """Return a :class:`ProtonGame` if the game has a Proton prefix."""
    if not game.compat_path.is_dir():
        return game
    return ProtonGame(
        app_id=game.app_id,
        install_dir=game.install_dir,
        name=game.name,
        library=game.library,
        proton_version=read_proton_version(game.compat_root),
    )


def scan_libraries(
    libraries: Iterable[Path],
    excluded_prefixes: Iterable[str] = EXCLUDED_PREFIXES,
) -> ScanResult:
    """Scan every library and split the games into native and Proton.

    Args:
        libraries: ``steamapps`` directories, in the order to report them
        excluded_prefixes: Name prefixes of non-game apps to leave out

    Returns:
        ScanResult in discovery order (library order, then manifest order)
    """
    prefixes = tuple(excluded_prefixes)
    native: list[InstalledGame] = []
    proton: list[ProtonGame] = []

    for library in libraries:
        found = 0
        for manifest in iter_manifests(library):
            game = parse_manifest(manifest, library)
            if game is None or is_excluded(game.name, prefixes):
                continue
            game = classify(game)
            if isinstance(game, ProtonGame):
                proton.append(game)
            else:
                native.append(game)
            found += 1
        logger.debug("Library %s: %d games", library, found)

    return ScanResult(native=tuple(native), proton=tuple(proton))
