"""
Report rendering.

Two tables (native and Proton games) followed by a one-line summary.
Widths are computed on the plain text of each cell so color codes,
hyperlinks and icon escapes never disturb the alignment.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Sequence, TextIO

from wcwidth import wcswidth

from .manifests import InstalledGame, ProtonGame, ScanResult
from .terminal import BLANK_ICON_CELL, file_url, osc8

# ANSI color codes
RESET = "\033[0m"
BOLD = "\033[1m"
CYAN = "\033[36m"
YELLOW = "\033[33m"
GREEN = "\033[32m"

SEPARATOR = " │ "
NAME_HEADER = "Game Name"
INSTALL_HEADER = "Install"
PROTON_HEADER = "Proton"
PROTON_COL_WIDTH = 20

IconCell = Callable[[str], str]


@dataclass(frozen=True)
class RenderOptions:
    """
    Display switches for the report.

    Attributes:
        full_paths: Show absolute paths instead of directory names/app ids
        use_color: Emit ANSI colors and bold headers
        hyperlinks: Wrap paths in OSC 8 file links
    """
    full_paths: bool = False
    use_color: bool = True
    hyperlinks: bool = True


def blank_icon(app_id: str) -> str:
    return BLANK_ICON_CELL


def display_width(text: str) -> int:
    """Number of terminal columns ``text`` occupies."""
    width = wcswidth(text)
    return width if width >= 0 else len(text)


def pad(text: str, width: int) -> str:
    return text + " " * max(0, width - display_width(text))


def column_width(values: Iterable[str], floor: int = 0) -> int:
    return max([floor, *(display_width(v) for v in values)])


def colorize(text: str, color: str, options: RenderOptions) -> str:
    if not options.use_color or not text:
        return text
    return f"{color}{text}{RESET}"


def link(path: Path, text: str, options: RenderOptions) -> str:
    """Hyperlink showing ``text``; the target is always the absolute path."""
    if not options.hyperlinks:
        return text
    return osc8(file_url(path), text)


def compact_path(path: Path, full: bool) -> str:
    return str(path) if full else path.name


def sort_games(games: Iterable[InstalledGame]) -> list[InstalledGame]:
    """Order by name, case-sensitive; equal names keep discovery order."""
    return sorted(games, key=lambda game: game.name)


def render_native_table(
    games: Sequence[InstalledGame],
    options: RenderOptions,
    icon_cell: IconCell = blank_icon,
) -> list[str]:
    """Lines of the native games table; empty when there are no games."""
    if not games:
        return []

    name_w = column_width((g.name for g in games), floor=len(NAME_HEADER))

    lines = [
        colorize(f"Native Linux Games ({len(games)})", BOLD, options),
        "",
        BLANK_ICON_CELL
        + colorize(pad(NAME_HEADER, name_w), BOLD, options)
        + SEPARATOR
        + colorize(INSTALL_HEADER, BOLD, options),
    ]

    for game in sort_games(games):
        install_text = compact_path(game.install_path, options.full_paths)
        lines.append(
            icon_cell(game.app_id)
            + colorize(pad(game.name, name_w), CYAN, options)
            + SEPARATOR
            + colorize(link(game.install_path, install_text, options), YELLOW, options)
        )

    lines.append("")
    return lines


def render_proton_table(
    games: Sequence[ProtonGame],
    options: RenderOptions,
    icon_cell: IconCell = blank_icon,
) -> list[str]:
    """Lines of the Proton games table; empty when there are no games.

    Compact mode labels the compatdata link with the app id, full mode
    with the prefix path.
    """
    if not games:
        return []

    name_w = column_width((g.name for g in games), floor=len(NAME_HEADER))
    install_w = column_width(
        (compact_path(g.install_path, options.full_paths) for g in games),
        floor=len(INSTALL_HEADER),
    )
    compat_header = "Compatdata Path" if options.full_paths else "Compatdata"

    lines = [
        colorize(f"Proton Games ({len(games)})", BOLD, options),
        "",
        BLANK_ICON_CELL
        + colorize(pad(NAME_HEADER, name_w), BOLD, options)
        + SEPARATOR
        + colorize(pad(PROTON_HEADER, PROTON_COL_WIDTH), BOLD, options)
        + SEPARATOR
        + colorize(pad(INSTALL_HEADER, install_w), BOLD, options)
        + SEPARATOR
        + colorize(compat_header, BOLD, options),
    ]

    for game in sort_games(games):
        install_text = compact_path(game.install_path, options.full_paths)
        install_fill = " " * max(0, install_w - display_width(install_text))
        compat_text = str(game.compat_path) if options.full_paths else game.app_id
        lines.append(
            icon_cell(game.app_id)
            + colorize(pad(game.name, name_w), CYAN, options)
            + SEPARATOR
            + colorize(pad(game.proton_version, PROTON_COL_WIDTH), GREEN, options)
            + SEPARATOR
            + colorize(link(game.install_path, install_text, options) + install_fill, YELLOW, options)
            + SEPARATOR
            + colorize(link(game.compat_path, compat_text, options), GREEN, options)
        )

    lines.append("")
    return lines


def render_libraries(libraries: Sequence[Path], options: RenderOptions) -> list[str]:
    lines = [colorize("Libraries:", BOLD, options)]
    lines.extend(f"  {library}" for library in libraries)
    lines.append("")
    return lines


def render_summary(result: ScanResult) -> str:
    native = len(result.native)
    proton = len(result.proton)
    return f"Total: {native} native + {proton} proton = {native + proton} games"


def print_report(
    result: ScanResult,
    options: RenderOptions,
    icon_cell: IconCell = blank_icon,
    file: TextIO | None = None,
) -> None:
    """Print both tables and the summary line.

    Args:
        result: Classified games from the manifest scan
        options: Display switches
        icon_cell: Returns the icon cell for an app id
        file: Output stream (stdout if None)
    """
    out = file or sys.stdout
    lines = render_native_table(result.native, options, icon_cell)
    lines += render_proton_table(result.proton, options, icon_cell)
    lines.append(render_summary(result))
    for line in lines:
        print(line, file=out)
