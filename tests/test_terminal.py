"""
Tests for terminal negotiation and escape sequences (steaminfo/terminal.py).
"""

import termios
from unittest.mock import MagicMock, patch

import pytest

from steaminfo import terminal
from steaminfo.terminal import (
    GRAPHICS_QUERY,
    cursor_forward,
    detect_graphics_support,
    file_url,
    has_graphics_reply,
    kitty_image,
    osc8,
    query_terminal,
    raw_mode,
)

ORIGINAL_LFLAG = termios.ICANON | termios.ECHO | termios.ISIG


def make_attrs():
    """Fresh termios attribute list, as tcgetattr returns."""
    cc = [b"\x00"] * 32
    cc[termios.VMIN] = 1
    cc[termios.VTIME] = 0
    return [0, 0, 0, ORIGINAL_LFLAG, 38400, 38400, cc]


def reader(data: bytes):
    """os.read replacement returning one byte per call, then b''."""
    chunks = [data[i:i + 1] for i in range(len(data))]
    chunks.append(b"")
    return MagicMock(side_effect=chunks)


KITTY_REPLY = b"\x1b_Gi=31;OK\x1b\\\x1b[?62;c"
PLAIN_REPLY = b"\x1b[?62;22c"


class TestRawMode:
    """Tests for the raw_mode context manager."""

    def test_sets_noncanonical_noecho_with_timeout(self):
        with patch.object(terminal.termios, "tcgetattr", side_effect=lambda fd: make_attrs()), \
                patch.object(terminal.termios, "tcsetattr") as tcsetattr:
            with raw_mode(3, timeout_tenths=1):
                attrs = tcsetattr.call_args_list[0][0][2]
                assert not attrs[3] & termios.ICANON
                assert not attrs[3] & termios.ECHO
                assert attrs[6][termios.VMIN] == 0
                assert attrs[6][termios.VTIME] == 1

    def test_restores_on_exit(self):
        with patch.object(terminal.termios, "tcgetattr", side_effect=lambda fd: make_attrs()), \
                patch.object(terminal.termios, "tcsetattr") as tcsetattr:
            with raw_mode(3):
                pass
        assert tcsetattr.call_count == 2
        assert tcsetattr.call_args_list[-1][0][2] == make_attrs()

    def test_restores_on_error(self):
        """The saved mode comes back even if the body raises."""
        with patch.object(terminal.termios, "tcgetattr", side_effect=lambda fd: make_attrs()), \
                patch.object(terminal.termios, "tcsetattr") as tcsetattr:
            with pytest.raises(OSError):
                with raw_mode(3):
                    raise OSError("read failed")
        assert tcsetattr.call_count == 2
        assert tcsetattr.call_args_list[-1][0][2][3] == ORIGINAL_LFLAG


class TestQueryTerminal:
    """Tests for the bounded read loop."""

    def test_sends_payload(self):
        with patch.object(terminal.os, "write") as write, \
                patch.object(terminal.os, "read", reader(PLAIN_REPLY)):
            query_terminal(3, GRAPHICS_QUERY)
        write.assert_called_once_with(3, GRAPHICS_QUERY)

    def test_stops_at_terminator(self):
        with patch.object(terminal.os, "write"), \
                patch.object(terminal.os, "read", reader(PLAIN_REPLY + b"leftover")):
            assert query_terminal(3, b"q") == PLAIN_REPLY

    def test_stops_on_timeout(self):
        """An empty read ends the reply."""
        with patch.object(terminal.os, "write"), \
                patch.object(terminal.os, "read", reader(b"\x1b[?6")):
            assert query_terminal(3, b"q") == b"\x1b[?6"

    def test_bounded(self):
        with patch.object(terminal.os, "write"), \
                patch.object(terminal.os, "read", reader(b"x" * 100)):
            assert query_terminal(3, b"q", limit=10) == b"x" * 10

    def test_kitty_reply_read_through(self):
        """The graphics reply comes before the DA1 terminator."""
        with patch.object(terminal.os, "write"), \
                patch.object(terminal.os, "read", reader(KITTY_REPLY)):
            assert has_graphics_reply(query_terminal(3, GRAPHICS_QUERY))


class TestDetectGraphicsSupport:
    """Tests for detect_graphics_support."""

    def _detect(self, reply: bytes) -> bool:
        with patch.object(terminal.os, "open", return_value=7), \
                patch.object(terminal.os, "close") as close, \
                patch.object(terminal.os, "write"), \
                patch.object(terminal.os, "read", reader(reply)), \
                patch.object(terminal.termios, "tcgetattr", side_effect=lambda fd: make_attrs()), \
                patch.object(terminal.termios, "tcsetattr"):
            supported = detect_graphics_support()
        close.assert_called_once_with(7)
        return supported

    def test_supported(self):
        assert self._detect(KITTY_REPLY) is True

    def test_unsupported(self):
        assert self._detect(PLAIN_REPLY) is False

    def test_silent_terminal(self):
        assert self._detect(b"") is False

    def test_no_tty(self):
        with patch.object(terminal.os, "open", side_effect=OSError("No such device")):
            assert detect_graphics_support() is False

    def test_not_a_terminal(self):
        """termios errors on a non-terminal count as no support."""
        with patch.object(terminal.os, "open", return_value=7), \
                patch.object(terminal.os, "close") as close, \
                patch.object(terminal.termios, "tcgetattr", side_effect=termios.error(25, "Not a tty")):
            assert detect_graphics_support() is False
        close.assert_called_once_with(7)


class TestEscapes:
    """Tests for escape sequence helpers."""

    def test_query_bytes(self):
        assert GRAPHICS_QUERY == b"\x1b_Gi=31,s=1,v=1,a=q,t=d,f=24;AAAA\x1b\\\x1b[c"

    def test_osc8(self):
        assert osc8("file:///games", "games") == "\x1b]8;;file:///games\x1b\\games\x1b]8;;\x1b\\"

    def test_osc8_without_url(self):
        assert osc8("", "games") == "games"

    def test_file_url_absolute(self, tmp_path):
        assert file_url(tmp_path / "common" / "Portal 2") == f"file://{tmp_path}/common/Portal 2"

    def test_kitty_image(self):
        assert kitty_image("QUJD") == "\x1b_Ga=T,f=100,c=2,r=1,C=1,q=2;QUJD\x1b\\"

    def test_cursor_forward(self):
        assert cursor_forward(2) == "\x1b[2C"
