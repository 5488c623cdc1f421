"""Tests for the best-effort file readers."""

from __future__ import annotations

from dirgo.utils.fs import (
    exists,
    read_json,
    read_lines,
    read_text,
    read_toml,
    strip_json_comments,
)


class TestReadText:
    def test_missing_file(self, tmp_path):
        assert read_text(tmp_path / "nope.txt") is None

    def test_empty_file_reads_as_none(self, tmp_path):
        (tmp_path / "empty").write_text("")
        assert read_text(tmp_path / "empty") is None

    def test_directory_reads_as_none(self, tmp_path):
        assert read_text(tmp_path) is None

    def test_read_lines_drops_blank(self, tmp_path):
        (tmp_path / "f").write_text("a\n\n  \nb\n")
        assert read_lines(tmp_path / "f") == ["a", "b"]

    def test_exists(self, tmp_path):
        (tmp_path / "f").write_text("x")
        assert exists(tmp_path / "f")
        assert not exists(tmp_path / "g")


class TestReadJson:
    def test_plain_object(self, tmp_path):
        (tmp_path / "a.json").write_text('{"name": "x"}')
        assert read_json(tmp_path / "a.json") == {"name": "x"}

    def test_malformed_is_none(self, tmp_path):
        (tmp_path / "a.json").write_text("{not json")
        assert read_json(tmp_path / "a.json") is None

    def test_non_object_is_none(self, tmp_path):
        (tmp_path / "a.json").write_text("[1, 2]")
        assert read_json(tmp_path / "a.json") is None

    def test_comments_and_trailing_commas(self, tmp_path):
        (tmp_path / "tsconfig.json").write_text(
            '{\n  // line comment\n  "compilerOptions": {\n'
            '    /* block */ "strict": true,\n  },\n}\n'
        )
        assert read_json(tmp_path / "tsconfig.json") == {"compilerOptions": {"strict": True}}


class TestStripJsonComments:
    def test_comment_markers_inside_strings_kept(self):
        text = '{"url": "http://example.com/*x*/", "a": 1}'
        assert strip_json_comments(text) == text

    def test_trailing_comma_before_comment(self):
        text = '[1, 2, // last\n]'
        assert strip_json_comments(text).replace("\n", "").replace(" ", "") == "[1,2]"

    def test_escaped_quote_in_string(self):
        text = '{"q": "say \\"hi\\" // not a comment"}'
        assert strip_json_comments(text) == text


class TestReadToml:
    def test_valid(self, tmp_path):
        (tmp_path / "Cargo.toml").write_text('[package]\nname = "x"\n')
        assert read_toml(tmp_path / "Cargo.toml") == {"package": {"name": "x"}}

    def test_empty_file_is_empty_document(self, tmp_path):
        (tmp_path / "Cargo.toml").write_text("")
        assert read_toml(tmp_path / "Cargo.toml") == {}

    def test_malformed_is_none(self, tmp_path):
        (tmp_path / "Cargo.toml").write_text('[package\nname = "x"\n')
        assert read_toml(tmp_path / "Cargo.toml") is None

    def test_missing_is_none(self, tmp_path):
        assert read_toml(tmp_path / "Cargo.toml") is None
