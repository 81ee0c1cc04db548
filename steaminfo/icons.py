"""
Game icon lookup, conversion and caching.

Steam keeps per-app artwork under ``appcache/librarycache/<appid>/``; the
small square icon is the one named by its SHA-1 (40 hex characters).
Icons are shrunk to 64x64 PNG with ImageMagick and kept base64 encoded in
the user cache so later runs skip the conversion.
"""

from __future__ import annotations

import base64
import logging
import re
import shutil
import subprocess
from pathlib import Path

from . import terminal
from .common import default_icon_cache_dir

logger = logging.getLogger(__name__)

THUMBNAIL_RE = re.compile(r"^[a-f0-9]{40}\.jpg$")
ICON_SIZE = 64
CONVERTER_NAMES = ("magick", "convert")
BLANK_CELL = terminal.BLANK_ICON_CELL


def find_thumbnail(steam_root: Path, app_id: str) -> Path | None:
    """Return the first hash-named ``.jpg`` in the app's library cache."""
    cache_dir = steam_root / "appcache" / "librarycache" / str(app_id)
    try:
        entries = sorted(cache_dir.iterdir())
    except OSError:
        return None
    for path in entries:
        if THUMBNAIL_RE.match(path.name) and path.is_file():
            return path
    return None


def find_converter(preferred: str | None = None) -> str | None:
    """Locate the ImageMagick binary on PATH.

    Args:
        preferred: Binary name or path to use instead of the defaults

    Returns:
        Absolute path to the converter, or None if none is installed
    """
    names = (preferred,) if preferred else CONVERTER_NAMES
    for name in names:
        path = shutil.which(name)
        if path:
            return path
    return None


def convert_thumbnail(converter: str, source: Path, size: int = ICON_SIZE) -> str:
    """Resize ``source`` to a ``size`` square PNG and return it base64 encoded.

    Returns an empty string if the conversion fails or produces nothing.
    """
    try:
        proc = subprocess.run(
            [converter, str(source), "-resize", f"{size}x{size}", "png:-"],
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            stdin=subprocess.DEVNULL,
            check=False,
        )
    except OSError as exc:
        logger.debug("Could not run %s: %s", converter, exc)
        return ""
    if proc.returncode != 0 or not proc.stdout:
        logger.debug("Conversion of %s failed (exit %d)", source, proc.returncode)
        return ""
    return base64.b64encode(proc.stdout).decode("ascii")


class IconCache:
    """Encoded icons on disk, one ``<appid>.b64`` file per app."""

    def __init__(self, directory: Path | None = None):
        self.directory = Path(directory) if directory else default_icon_cache_dir()

    def path_for(self, app_id: str) -> Path:
        return self.directory / f"{app_id}.b64"

    def load(self, app_id: str, source: Path) -> str:
        """Cached data for ``app_id`` unless ``source`` has changed since.

        An entry is stale once the thumbnail's mtime is later than the
        entry's own.
        """
        entry = self.path_for(app_id)
        try:
            if entry.stat().st_mtime < source.stat().st_mtime:
                return ""
            return entry.read_text(encoding="ascii").strip()
        except (OSError, UnicodeDecodeError):
            return ""

    def store(self, app_id: str, data: str) -> None:
        entry = self.path_for(app_id)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            entry.write_text(data, encoding="ascii")
        except OSError as exc:
            logger.debug("Could not write icon cache %s: %s", entry, exc)


class IconResolver:
    """Produces the icon cell printed in front of each table row."""

    def __init__(
        self,
        steam_root: Path,
        cache: IconCache | None = None,
        converter: str | None = None,
        enabled: bool = True,
    ):
        self.steam_root = steam_root
        self.cache = cache or IconCache()
        self.converter = converter
        self.enabled = enabled and converter is not None

    def icon_data(self, app_id: str) -> str:
        """Base64 PNG for the app, converting and caching as needed."""
        if not self.enabled:
            return ""
        source = find_thumbnail(self.steam_root, app_id)
        if source is None:
            return ""

        data = self.cache.load(app_id, source)
        if data:
            return data

        data = convert_thumbnail(self.converter, source)
        if data:
            self.cache.store(app_id, data)
        return data

    def icon_cell(self, app_id: str) -> str:
        """Kitty image plus cursor advance, or blank padding of equal width.

        The cursor is moved explicitly so the following text lines up even
        when the terminal drops the image.
        """
        data = self.icon_data(app_id)
        if not data:
            return BLANK_CELL
        return terminal.kitty_image(data) + terminal.cursor_forward(terminal.ICON_COLS) + " "


def detect_icon_support(enabled: bool, converter: str | None) -> bool:
    """Decide once per run whether icons will be drawn.

    Args:
        enabled: False when icons were turned off by flag or config
        converter: Result of :func:`find_converter`
    """
    if not enabled:
        return False
    if converter is None:
        logger.warning("'convert' (ImageMagick) not found, icons disabled")
        return False
    return terminal.detect_graphics_support()
