"""Best-effort file helpers. A missing or malformed file reads as ``None``."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from dirgo.exceptions import TomlError
from dirgo.utils.toml import parse_toml

logger = logging.getLogger(__name__)


def exists(path: str | Path) -> bool:
    try:
        return Path(path).exists()
    except OSError:
        return False


def read_text(path: str | Path) -> str | None:
    """Return the file's text, or ``None`` if it is missing, unreadable or empty."""
    try:
        content = Path(path).read_text(encoding="utf-8", errors="replace")
    except OSError:
        return None
    return content or None


def read_lines(path: str | Path) -> list[str]:
    content = read_text(path)
    if not content:
        return []
    return [line for line in content.splitlines() if line.strip()]


def read_json(path: str | Path) -> dict[str, Any] | None:
    """Parse a JSON object file; comments and trailing commas are tolerated."""
    content = read_text(path)
    if content is None:
        return None
    try:
        data = json.loads(content)
    except json.JSONDecodeError:
        try:
            data = json.loads(strip_json_comments(content))
        except json.JSONDecodeError as exc:
            logger.debug("Ignoring malformed JSON in %s: %s", path, exc)
            return None
    if not isinstance(data, dict):
        logger.debug("Ignoring %s: top-level value is not an object", path)
        return None
    return data


def read_toml(path: str | Path) -> dict[str, Any] | None:
    """Parse a TOML file; an existing empty file is an empty document."""
    content = read_text(path)
    if content is None:
        return {} if _is_empty_file(path) else None
    try:
        return parse_toml(content)
    except TomlError as exc:
        logger.debug("Ignoring malformed TOML in %s: %s", path, exc)
        return None


def strip_json_comments(text: str) -> str:
    """Remove ``//`` and ``/* */`` comments and trailing commas outside strings."""
    return _drop_trailing_commas(_drop_comments(text))


def _string_end(text: str, start: int) -> int:
    """Index just past the JSON string literal opening at *start*."""
    i = start + 1
    while i < len(text):
        if text[i] == "\\":
            i += 2
            continue
        if text[i] == '"':
            return i + 1
        i += 1
    return len(text)


def _drop_comments(text: str) -> str:
    out: list[str] = []
    i = 0
    while i < len(text):
        if text[i] == '"':
            end = _string_end(text, i)
            out.append(text[i:end])
            i = end
        elif text.startswith("//", i):
            newline = text.find("\n", i)
            i = len(text) if newline == -1 else newline
        elif text.startswith("/*", i):
            close = text.find("*/", i + 2)
            i = len(text) if close == -1 else close + 2
        else:
            out.append(text[i])
            i += 1
    return "".join(out)


def _drop_trailing_commas(text: str) -> str:
    out: list[str] = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == '"':
            end = _string_end(text, i)
            out.append(text[i:end])
            i = end
            continue
        if ch == ",":
            j = i + 1
            while j < len(text) and text[j] in " \t\r\n":
                j += 1
            if j < len(text) and text[j] in "}]":
                i += 1
                continue
        out.append(ch)
        i += 1
    return "".join(out)


def _is_empty_file(path: str | Path) -> bool:
    try:
        return Path(path).is_file() and Path(path).stat().st_size == 0
    except OSError:
        return False
