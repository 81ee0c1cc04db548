"""
Valve KeyValues text helpers.

Steam stores both ``libraryfolders.vdf`` and ``appmanifest_*.acf`` as
KeyValues text: quoted keys and values, arbitrarily nested with braces.
Parsing is delegated to :mod:`vdf`; this module only projects the handful
of fields steaminfo needs out of the resulting tree, so the ambiguity of
repeated keys and nested records is handled in one place.
"""

from __future__ import annotations

import re
from typing import Any, Iterator

import vdf

# "key" "value" on a single line; used when vdf rejects the whole file
PAIR_RE = re.compile(r'^(\s*)"([^"]*)"\s+"([^"]*)"')


def loads(text: str) -> Any:
    """Parse KeyValues text, keeping duplicate keys in document order.

    Raises:
        SyntaxError: If the text is not valid KeyValues
    """
    return vdf.loads(text, mapper=vdf.VDFDict)


def walk(node: Any, depth: int = 0) -> Iterator[tuple[int, str, Any]]:
    """Yield ``(depth, key, value)`` for every entry, depth-first.

    Depth 0 is the outermost level of the document, so the fields of a
    manifest's ``"AppState"`` record are reported at depth 1.
    """
    for key, value in node.items():
        yield depth, key, value
        if hasattr(value, "items"):
            yield from walk(value, depth + 1)


def string_values(node: Any, key: str, depth: int | None = None) -> list[str]:
    """All string values stored under ``key``, in document order.

    Args:
        node: Parsed tree from :func:`loads`
        key: Case-sensitive key to collect
        depth: Only collect entries at this depth (any depth if None)
    """
    return [
        value
        for entry_depth, entry_key, value in walk(node)
        if entry_key == key
        and isinstance(value, str)
        and (depth is None or entry_depth == depth)
    ]


def first_value(node: Any, key: str, depth: int | None = None) -> str:
    values = string_values(node, key, depth)
    return values[0] if values else ""


def last_value(node: Any, key: str, depth: int | None = None) -> str:
    values = string_values(node, key, depth)
    return values[-1] if values else ""


def scan_lines(text: str, key: str, depth: int | None = None) -> list[str]:
    """Line-oriented extraction of ``"key" "value"`` pairs.

    Braces and lines that do not look like a quoted pair are skipped, which
    lets a damaged file still give up whatever entries are readable.

    Args:
        text: KeyValues text, possibly damaged
        key: Case-sensitive key to collect
        depth: Only collect pairs indented by this many tabs (any if None)
    """
    found = []
    for line in text.splitlines():
        match = PAIR_RE.match(line)
        if not match or match.group(2) != key:
            continue
        if depth is not None and match.group(1).count("\t") != depth:
            continue
        found.append(match.group(3))
    return found
