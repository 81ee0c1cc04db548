"""
Shared fixtures: a throwaway Steam installation on disk.
"""

from pathlib import Path

import pytest


MANIFEST_TEMPLATE = """"AppState"
{{
\t"appid"\t\t"{appid}"
\t"universe"\t\t"1"
\t"name"\t\t"{name}"
\t"StateFlags"\t\t"4"
\t"installdir"\t\t"{installdir}"
\t"InstalledDepots"
\t{{
\t\t"{depot}"
\t\t{{
\t\t\t"manifest"\t\t"7204412470233125411"
\t\t\t"size"\t\t"3219876"
\t\t}}
\t}}
\t"UserConfig"
\t{{
\t\t"language"\t\t"english"
\t}}
}}
"""

LIBRARY_FOLDERS_TEMPLATE = """"libraryfolders"
{{
{entries}}}
"""

LIBRARY_ENTRY_TEMPLATE = """\t"{index}"
\t{{
\t\t"path"\t\t"{path}"
\t\t"label"\t\t""
\t\t"apps"
\t\t{{
\t\t}}
\t}}
"""


def write_manifest(library: Path, appid: str, name: str, installdir: str) -> Path:
    """Write an appmanifest_<appid>.acf into a steamapps directory."""
    library.mkdir(parents=True, exist_ok=True)
    path = library / f"appmanifest_{appid}.acf"
    path.write_text(
        MANIFEST_TEMPLATE.format(appid=appid, name=name, installdir=installdir, depot=int(appid) + 1),
        encoding="utf-8",
    )
    return path


def make_proton_prefix(library: Path, appid: str, version: str | None = None) -> Path:
    """Create compatdata/<appid>/pfx, optionally with a config_info."""
    compat_root = library / "compatdata" / appid
    (compat_root / "pfx").mkdir(parents=True, exist_ok=True)
    if version is not None:
        (compat_root / "config_info").write_text(f"{version}\n/opt/proton/files/share/fonts/\n")
    return compat_root


def write_library_folders(path: Path, library_roots: list[Path]) -> Path:
    """Write a libraryfolders.vdf listing the given library roots."""
    entries = "".join(
        LIBRARY_ENTRY_TEMPLATE.format(index=i, path=root) for i, root in enumerate(library_roots)
    )
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(LIBRARY_FOLDERS_TEMPLATE.format(entries=entries), encoding="utf-8")
    return path


@pytest.fixture
def steam_root(tmp_path: Path) -> Path:
    """A Steam root with an empty main library registered in config/."""
    root = tmp_path / "Steam"
    (root / "steamapps").mkdir(parents=True)
    write_library_folders(root / "config" / "libraryfolders.vdf", [root])
    return root
