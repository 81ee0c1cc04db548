"""
Terminal escape sequences and kitty graphics protocol detection.

Inline icons use the kitty graphics protocol. Whether the terminal speaks
it is found out by sending a tiny query image followed by a primary device
attributes request: every terminal answers the latter, and terminals with
graphics support answer the former first with an ``ESC _G...`` reply.
"""

from __future__ import annotations

import logging
import os
import termios
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

logger = logging.getLogger(__name__)

ESC = "\033"
ST = ESC + "\\"

# 1x1 RGB image query (a=q) plus DA1; the DA1 reply ends with "c"
GRAPHICS_QUERY = (ESC + "_Gi=31,s=1,v=1,a=q,t=d,f=24;AAAA" + ST + ESC + "[c").encode("ascii")
GRAPHICS_REPLY_MARKER = b"_G"
DA1_TERMINATOR = b"c"
MAX_RESPONSE_BYTES = 256

ICON_COLS = 2
ICON_ROWS = 1
# icon box plus one space
BLANK_ICON_CELL = " " * (ICON_COLS + 1)


@contextmanager
def raw_mode(fd: int, timeout_tenths: int = 1) -> Iterator[None]:
    """Put a terminal in non-canonical, no-echo mode with a read timeout.

    Reads return after ``timeout_tenths`` tenths of a second without input
    (``VMIN=0``). The previous attributes are restored on exit, however the
    block is left.
    """
    saved = termios.tcgetattr(fd)
    attrs = termios.tcgetattr(fd)
    attrs[3] &= ~(termios.ICANON | termios.ECHO)
    attrs[6][termios.VMIN] = 0
    attrs[6][termios.VTIME] = timeout_tenths
    termios.tcsetattr(fd, termios.TCSANOW, attrs)
    try:
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSANOW, saved)


def query_terminal(
    fd: int,
    payload: bytes,
    terminator: bytes = DA1_TERMINATOR,
    limit: int = MAX_RESPONSE_BYTES,
) -> bytes:
    """Write ``payload`` and collect the reply byte by byte.

    Stops at ``terminator``, at the first empty read (the read timed out),
    or after ``limit`` bytes.
    """
    os.write(fd, payload)
    response = bytearray()
    while len(response) < limit:
        char = os.read(fd, 1)
        if not char:
            break
        response += char
        if char == terminator:
            break
    return bytes(response)


def has_graphics_reply(response: bytes) -> bool:
    return GRAPHICS_REPLY_MARKER in response


def detect_graphics_support(tty_path: str | Path = "/dev/tty") -> bool:
    """Ask the controlling terminal whether it supports kitty graphics.

    Any failure (no controlling terminal, not a tty, I/O error) counts as
    no support.
    """
    try:
        fd = os.open(tty_path, os.O_RDWR | os.O_NOCTTY)
    except OSError as exc:
        logger.debug("Cannot open %s: %s", tty_path, exc)
        return False

    try:
        with raw_mode(fd):
            response = query_terminal(fd, GRAPHICS_QUERY)
    except (OSError, termios.error) as exc:
        logger.debug("Graphics query failed: %s", exc)
        return False
    finally:
        os.close(fd)

    supported = has_graphics_reply(response)
    logger.debug("Terminal response %r, graphics support: %s", response, supported)
    return supported


def osc8(url: str, text: str) -> str:
    """Wrap ``text`` in an OSC 8 hyperlink to ``url``."""
    if not url:
        return text
    return f"{ESC}]8;;{url}{ST}{text}{ESC}]8;;{ST}"


def file_url(path: str | Path) -> str:
    return "file://" + os.path.abspath(str(path))


def cursor_forward(columns: int) -> str:
    return f"{ESC}[{columns}C"


def kitty_image(data: str, columns: int = ICON_COLS, rows: int = ICON_ROWS) -> str:
    """Transmit-and-display a base64 PNG in a ``columns`` x ``rows`` cell box.

    ``C=1`` keeps the cursor where it is and ``q=2`` suppresses replies.
    """
    return f"{ESC}_Ga=T,f=100,c={columns},r={rows},C=1,q=2;{data}{ST}"
