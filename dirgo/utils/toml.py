"""Minimal TOML reader for package manifests.

Covers the subset that Cargo.toml, pyproject.toml and Pipfile actually use:
``[tables]`` and ``[[arrays.of.tables]]``, bare / quoted / dotted keys,
basic, literal and multi-line strings, booleans, integers, arrays (also
spanning several lines) and inline tables.  Any other scalar (floats, dates)
is kept as its raw text.  This is deliberately not a full TOML grammar.
"""

from __future__ import annotations

import re
from typing import Any

from dirgo.exceptions import TomlStructureError, TomlSyntaxError

_BARE_KEY_CHARS = frozenset("ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789_-")
_INT_RE = re.compile(r"^[+-]?\d[\d_]*$")
_RAW_TERMINATORS = frozenset(",]}\n#")

_ESCAPES = {
    "b": "\b",
    "t": "\t",
    "n": "\n",
    "f": "\f",
    "r": "\r",
    '"': '"',
    "\\": "\\",
}


def parse_toml(text: str) -> dict[str, Any]:
    """Parse *text* into nested dicts.

    Raises :class:`TomlSyntaxError` on input outside the supported subset and
    :class:`TomlStructureError` when a table path runs into a non-table value.
    """
    return _Reader(text).parse()


def table_at(table: dict[str, Any], segments: list[str], walked: list[str] | None = None) -> dict[str, Any]:
    """Return the nested table at *segments* below *table*, creating it if needed.

    Walking through an array of tables descends into its last element.  A
    segment that already holds any other non-table value is an error.
    """
    if not segments:
        return table
    head, rest = segments[0], segments[1:]
    walked = [*(walked or []), head]
    node = table.get(head)
    if node is None:
        node = table[head] = {}
    elif isinstance(node, list) and node and isinstance(node[-1], dict):
        node = node[-1]
    elif not isinstance(node, dict):
        raise TomlStructureError(walked)
    return table_at(node, rest, walked)


def append_table(table: dict[str, Any], segments: list[str]) -> dict[str, Any]:
    """Append a fresh table to the array of tables at *segments*."""
    parent = table_at(table, segments[:-1])
    last = segments[-1]
    fresh: dict[str, Any] = {}
    existing = parent.get(last)
    if existing is None:
        parent[last] = [fresh]
    elif isinstance(existing, list):
        existing.append(fresh)
    else:
        raise TomlStructureError(segments)
    return fresh


class _Reader:
    """Cursor over the whole document; headers and keys are line-oriented."""

    def __init__(self, text: str) -> None:
        self.text = text.replace("\r\n", "\n")
        self.pos = 0

    # ── document level ───────────────────────────────────────────────────

    def parse(self) -> dict[str, Any]:
        root: dict[str, Any] = {}
        current = root
        while True:
            self._skip_blank_lines()
            if self._at_end():
                return root
            if self.text.startswith("[[", self.pos):
                self.pos += 2
                path = self._key_path("]]")
                current = append_table(root, path)
            elif self._peek() == "[":
                self.pos += 1
                path = self._key_path("]")
                current = table_at(root, path)
            else:
                path = self._key_path("=")
                value = self._value()
                target = table_at(current, path[:-1])
                target[path[-1]] = value
            self._end_of_line()

    # ── keys ─────────────────────────────────────────────────────────────

    def _key_path(self, closer: str) -> list[str]:
        """Read a dotted key terminated by *closer* (which is consumed)."""
        segments: list[str] = []
        while True:
            self._skip_spaces()
            segments.append(self._key_segment())
            self._skip_spaces()
            if self._peek() == ".":
                self.pos += 1
                continue
            if self.text.startswith(closer, self.pos):
                self.pos += len(closer)
                return segments
            self._fail(f"expected '{closer}' after key")

    def _key_segment(self) -> str:
        ch = self._peek()
        if ch == '"':
            return self._basic_string()
        if ch == "'":
            return self._literal_string()
        start = self.pos
        while not self._at_end() and self.text[self.pos] in _BARE_KEY_CHARS:
            self.pos += 1
        if start == self.pos:
            self._fail("expected a key")
        return self.text[start : self.pos]

    # ── values ───────────────────────────────────────────────────────────

    def _value(self) -> Any:
        self._skip_spaces()
        if self.text.startswith('"""', self.pos):
            return self._multiline_string('"""', escapes=True)
        if self.text.startswith("'''", self.pos):
            return self._multiline_string("'''", escapes=False)
        ch = self._peek()
        if ch == '"':
            return self._basic_string()
        if ch == "'":
            return self._literal_string()
        if ch == "[":
            return self._array()
        if ch == "{":
            return self._inline_table()
        return self._scalar()

    def _scalar(self) -> Any:
        start = self.pos
        while not self._at_end() and self.text[self.pos] not in _RAW_TERMINATORS:
            self.pos += 1
        raw = self.text[start : self.pos].strip()
        if not raw:
            self._fail("expected a value")
        if raw == "true":
            return True
        if raw == "false":
            return False
        if _INT_RE.match(raw):
            return int(raw.replace("_", ""))
        return raw

    def _array(self) -> list[Any]:
        self.pos += 1  # [
        items: list[Any] = []
        while True:
            self._skip_blank_lines()
            if self._peek() == "]":
                self.pos += 1
                return items
            items.append(self._value())
            self._skip_blank_lines()
            ch = self._peek()
            if ch == ",":
                self.pos += 1
            elif ch != "]":
                self._fail("expected ',' or ']' in array")

    def _inline_table(self) -> dict[str, Any]:
        self.pos += 1  # {
        table: dict[str, Any] = {}
        while True:
            self._skip_blank_lines()
            if self._peek() == "}":
                self.pos += 1
                return table
            path = self._key_path("=")
            target = table_at(table, path[:-1])
            target[path[-1]] = self._value()
            self._skip_blank_lines()
            ch = self._peek()
            if ch == ",":
                self.pos += 1
            elif ch != "}":
                self._fail("expected ',' or '}' in inline table")

    def _basic_string(self) -> str:
        self.pos += 1  # opening quote
        out: list[str] = []
        while True:
            if self._at_end() or self.text[self.pos] == "\n":
                self._fail("unterminated string")
            ch = self.text[self.pos]
            if ch == '"':
                self.pos += 1
                return "".join(out)
            if ch == "\\":
                out.append(self._escape())
                continue
            out.append(ch)
            self.pos += 1

    def _literal_string(self) -> str:
        end = self.text.find("'", self.pos + 1)
        newline = self.text.find("\n", self.pos + 1)
        if end == -1 or (newline != -1 and newline < end):
            self._fail("unterminated string")
        value = self.text[self.pos + 1 : end]
        self.pos = end + 1
        return value

    def _multiline_string(self, delimiter: str, escapes: bool) -> str:
        self.pos += 3
        if self._peek() == "\n":
            self.pos += 1
        out: list[str] = []
        while True:
            if self._at_end():
                self._fail("unterminated multi-line string")
            if self.text.startswith(delimiter, self.pos):
                self.pos += 3
                return "".join(out)
            ch = self.text[self.pos]
            if escapes and ch == "\\":
                if self.text[self.pos + 1 : self.pos + 2] in ("\n", " ", "\t"):
                    # line-ending backslash swallows the following whitespace
                    self.pos += 1
                    while not self._at_end() and self.text[self.pos] in " \t\n":
                        self.pos += 1
                    continue
                out.append(self._escape())
                continue
            out.append(ch)
            self.pos += 1

    def _escape(self) -> str:
        code = self.text[self.pos + 1 : self.pos + 2]
        if code in _ESCAPES:
            self.pos += 2
            return _ESCAPES[code]
        width = {"u": 4, "U": 8}.get(code)
        if width is None:
            self._fail("invalid escape sequence")
        digits = self.text[self.pos + 2 : self.pos + 2 + width]
        try:
            char = chr(int(digits, 16))
        except ValueError:
            self._fail("invalid unicode escape")
        self.pos += 2 + width
        return char

    # ── whitespace / comments ────────────────────────────────────────────

    def _skip_spaces(self) -> None:
        while not self._at_end() and self.text[self.pos] in " \t":
            self.pos += 1

    def _skip_comment(self) -> None:
        if self._peek() == "#":
            newline = self.text.find("\n", self.pos)
            self.pos = len(self.text) if newline == -1 else newline

    def _skip_blank_lines(self) -> None:
        while True:
            self._skip_spaces()
            self._skip_comment()
            if self._peek() == "\n":
                self.pos += 1
                continue
            return

    def _end_of_line(self) -> None:
        self._skip_spaces()
        self._skip_comment()
        if self._at_end():
            return
        if self._peek() != "\n":
            self._fail("unexpected trailing characters")
        self.pos += 1

    # ── helpers ──────────────────────────────────────────────────────────

    def _peek(self) -> str:
        return self.text[self.pos : self.pos + 1]

    def _at_end(self) -> bool:
        return self.pos >= len(self.text)

    def _fail(self, reason: str) -> None:
        line_no = self.text.count("\n", 0, self.pos) + 1
        lines = self.text.split("\n")
        line = lines[line_no - 1] if line_no - 1 < len(lines) else ""
        raise TomlSyntaxError(line_no, line, reason)
