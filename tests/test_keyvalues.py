"""
Tests for KeyValues projection helpers (steaminfo/keyvalues.py).
"""

import pytest

from steaminfo import keyvalues

DOC = """"AppState"
{
\t"appid"\t\t"730"
\t"name"\t\t"Counter-Strike 2"
\t"installdir"\t\t"Counter-Strike Global Offensive"
\t"InstalledDepots"
\t{
\t\t"2347770"
\t\t{
\t\t\t"manifest"\t\t"1"
\t\t\t"appid"\t\t"228988"
\t\t}
\t}
\t"installdir"\t\t"csgo"
}
"""


class TestWalk:
    """Tests for depth-first traversal."""

    def test_depths(self):
        tree = keyvalues.loads(DOC)
        entries = [(depth, key) for depth, key, _ in keyvalues.walk(tree)]
        assert entries[0] == (0, "AppState")
        assert (1, "name") in entries
        assert (3, "manifest") in entries

    def test_document_order(self):
        tree = keyvalues.loads(DOC)
        assert keyvalues.string_values(tree, "appid") == ["730", "228988"]


class TestProjection:
    """Tests for first/last value selection."""

    def test_first(self):
        assert keyvalues.first_value(keyvalues.loads(DOC), "appid") == "730"

    def test_last_keeps_duplicates(self):
        """Repeated keys are all kept; the last one is picked."""
        assert keyvalues.last_value(keyvalues.loads(DOC), "installdir") == "csgo"

    def test_depth_filter(self):
        tree = keyvalues.loads(DOC)
        assert keyvalues.first_value(tree, "appid", depth=3) == "228988"
        assert keyvalues.first_value(tree, "name", depth=2) == ""

    def test_sections_are_not_values(self):
        assert keyvalues.string_values(keyvalues.loads(DOC), "InstalledDepots") == []

    def test_malformed_raises(self):
        with pytest.raises(SyntaxError):
            keyvalues.loads('"AppState"\n{\n\t"appid" "1"\n')


class TestScanLines:
    """Tests for the line-oriented fallback."""

    def test_pairs(self):
        text = '"path" "/a"\n{\n  "path"\t\t"/b"\n"label" "x"\nnot a pair\n"path"\n'
        assert keyvalues.scan_lines(text, "path") == ["/a", "/b"]

    def test_depth_filter(self):
        """Depth counts leading tabs, so nested pairs can be told apart."""
        text = '"AppState"\n{\n\t"name"\t\t"Top"\n\t"UserConfig"\n\t{\n\t\t"name"\t\t"Nested"\n'
        assert keyvalues.scan_lines(text, "name") == ["Top", "Nested"]
        assert keyvalues.scan_lines(text, "name", depth=1) == ["Top"]
