"""
Tests for bkmr/editing.py template handling and editor launch.
"""
from pathlib import Path
from unittest.mock import patch

import pytest

from bkmr.editing import (
    edit_in_editor,
    editor_command,
    parse_template,
    render_template,
    scratch_file,
)
from bkmr.errors import ExternalProcessError, TemplateParseError


class TestTemplate:
    """Test rendering and parsing the edit template."""

    def test_render_contains_fields(self, make_bookmark):
        text = render_template(make_bookmark(1, "Title", url="https://x.example",
                                             tags="b,a", description="desc"))
        lines = [line for line in text.splitlines() if not line.startswith("#")]
        assert lines == ["https://x.example", "Title", "a,b", "desc"]

    def test_render_parses_back(self, make_bookmark):
        bookmark = make_bookmark(1, "Title", tags="web", description="desc")
        fields = parse_template(render_template(bookmark))
        assert fields.url == bookmark.url
        assert fields.title == "Title"
        assert list(fields.tags) == ["web"]
        assert fields.description == "desc"

    def test_hash_values_round_trip(self, make_bookmark):
        bookmark = make_bookmark(1, "#100DaysOfCode", url="#anchor", tags="#tag,b",
                                 description="intro\n#more\n  # indented")
        fields = parse_template(render_template(bookmark))
        assert fields.url == "#anchor"
        assert fields.title == "#100DaysOfCode"
        assert list(fields.tags) == ["#tag", "b"]
        assert fields.description == "intro\n#more\n  # indented"

    def test_empty_title_and_tags(self):
        fields = parse_template("https://x.example\n\n\n\n")
        assert fields.title == ""
        assert not fields.tags
        assert fields.description == ""

    def test_multiline_description(self):
        fields = parse_template("u\nt\ntag\nline one\nline two\n")
        assert fields.description == "line one\nline two"

    def test_too_few_lines(self):
        with pytest.raises(TemplateParseError):
            parse_template("# comment\nhttps://x.example\ntitle\n")

    def test_empty_url(self):
        with pytest.raises(TemplateParseError):
            parse_template("   \ntitle\ntags\ndesc\n")


class TestScratchFile:
    """Test scratch_file()."""

    def test_written_and_removed(self):
        with scratch_file("hello") as path:
            assert path.read_text() == "hello"
        assert not path.exists()

    def test_removed_on_error(self):
        with pytest.raises(RuntimeError):
            with scratch_file("hello") as path:
                raise RuntimeError("boom")
        assert not path.exists()

    def test_unique_names(self):
        with scratch_file("a") as first, scratch_file("b") as second:
            assert first != second


class TestEditorCommand:
    """Test editor resolution."""

    def test_explicit(self):
        assert editor_command("code -w") == ["code", "-w"]

    def test_visual_before_editor(self, monkeypatch):
        monkeypatch.setenv("VISUAL", "nano")
        monkeypatch.setenv("EDITOR", "vim")
        assert editor_command() == ["nano"]

    def test_editor_env(self, monkeypatch):
        monkeypatch.setenv("EDITOR", "vim")
        assert editor_command() == ["vim"]

    def test_default(self):
        assert editor_command() in (["vi"], ["notepad"])


class TestEditInEditor:
    """Test edit_in_editor()."""

    def test_launch_failure(self, make_bookmark):
        with patch("bkmr.editing.subprocess.call", side_effect=FileNotFoundError("no editor")):
            with pytest.raises(ExternalProcessError):
                edit_in_editor(make_bookmark(1), "missing-editor")

    def test_unchanged_file(self, make_bookmark):
        bookmark = make_bookmark(1, "Title", tags="a")
        with patch("bkmr.editing.subprocess.call", return_value=0) as call:
            fields = edit_in_editor(bookmark, "vi")
        assert fields.title == "Title"
        cmd = call.call_args[0][0]
        assert cmd[0] == "vi"
        assert not Path(cmd[-1]).exists()
