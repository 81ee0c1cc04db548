#!/usr/bin/env python3
"""
steaminfo - Display installed Steam games with icons.

Lists native Linux and Proton games from all Steam libraries. Shows inline
game icons on terminals supporting the kitty graphics protocol and OSC 8
hyperlinks to the game directories.

Usage:
    steaminfo_report.py              # Compact view
    steaminfo_report.py --full       # Full install and compatdata paths
    steaminfo_report.py --no-icons   # Skip icon detection and rendering
"""

import argparse
import sys
from pathlib import Path

from steaminfo.config import Config, load_config
from steaminfo.icons import IconCache, IconResolver, detect_icon_support, find_converter
from steaminfo.logging_config import setup_logging
from steaminfo.manifests import EXCLUDED_PREFIXES, scan_libraries
from steaminfo.render import RenderOptions, blank_icon, print_report, render_libraries
from steaminfo.steam import SteamInfoError, find_steam_libraries, find_steam_root


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="steaminfo",
        description=(
            "List installed Steam games (native and Proton) with icons (kitty graphics\n"
            "protocol) and OSC 8 hyperlinks to game directories."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-f", "--full",
        action="store_true",
        help="Show full paths instead of compact view",
    )
    parser.add_argument(
        "-n", "--no-icons",
        action="store_true",
        help="Don't display game icons",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose diagnostics on stderr",
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        help="Configuration file to load before the user config",
    )
    parser.add_argument(
        "--log-file",
        metavar="PATH",
        help="Write a debug log to PATH",
    )
    return parser


def run(config: Config, out=None) -> int:
    """Discover, scan and print. Returns the process exit code."""
    out = out or sys.stdout
    prefs = config.preferences
    options = RenderOptions(
        full_paths=prefs.full_paths,
        use_color=prefs.color,
        hyperlinks=prefs.hyperlinks,
    )

    try:
        steam_root = find_steam_root(config.steam_roots)
        print("Scanning Steam libraries...", file=out)
        libraries = find_steam_libraries(steam_root)
    except SteamInfoError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for line in render_libraries(libraries, options):
        print(line, file=out)
    out.flush()

    icon_cell = blank_icon
    converter = find_converter(prefs.converter) if prefs.icons else None
    if detect_icon_support(prefs.icons, converter):
        cache_dir = Path(prefs.icon_cache_dir).expanduser() if prefs.icon_cache_dir else None
        resolver = IconResolver(steam_root, IconCache(cache_dir), converter)
        icon_cell = resolver.icon_cell

    result = scan_libraries(libraries, EXCLUDED_PREFIXES + prefs.exclude_prefixes)
    print_report(result, options, icon_cell, file=out)
    return 0


def main(argv=None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    setup_logging(verbose=args.verbose, log_file=args.log_file)

    try:
        config = load_config(args.config)
    except SteamInfoError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    config = config.with_overrides(full_paths=args.full, no_icons=args.no_icons)
    try:
        return run(config)
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
