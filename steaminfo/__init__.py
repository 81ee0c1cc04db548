"""
steaminfo - List installed Steam games with icons.

Core Modules:
- Discovery: Steam root and library folder lookup
- Manifests: appmanifest parsing and native/Proton classification
- Terminal: kitty graphics detection and escape sequences
- Icons: thumbnail lookup, conversion and caching
- Rendering: table and summary output
"""

__version__ = "1.0.0"

# Discovery
from .steam import (
    SteamInfoError,
    SteamNotFoundError,
    NoLibrariesError,
    find_steam_root,
    find_steam_libraries,
    parse_library_paths,
)

# Manifests
from .manifests import (
    InstalledGame,
    ProtonGame,
    ScanResult,
    EXCLUDED_PREFIXES,
    parse_manifest,
    scan_libraries,
)

# Terminal and icons
from .terminal import detect_graphics_support, osc8, raw_mode
from .icons import IconCache, IconResolver, detect_icon_support, find_converter

# Rendering
from .render import RenderOptions, print_report, render_native_table, render_proton_table

# Configuration and logging
from .config import Config, ConfigError, Preferences, load_config
from .logging_config import setup_logging, get_logger

__all__ = [
    "__version__",
    # Discovery
    "SteamInfoError",
    "SteamNotFoundError",
    "NoLibrariesError",
    "find_steam_root",
    "find_steam_libraries",
    "parse_library_paths",
    # Manifests
    "InstalledGame",
    "ProtonGame",
    "ScanResult",
    "EXCLUDED_PREFIXES",
    "parse_manifest",
    "scan_libraries",
    # Terminal and icons
    "detect_graphics_support",
    "osc8",
    "raw_mode",
    "IconCache",
    "IconResolver",
    "detect_icon_support",
    "find_converter",
    # Rendering
    "RenderOptions",
    "print_report",
    "render_native_table",
    "render_proton_table",
    # Configuration and logging
    "Config",
    "ConfigError",
    "Preferences",
    "load_config",
    "setup_logging",
    "get_logger",
]
