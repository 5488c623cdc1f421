"""Indentation notation: two spaces per level, no connectors."""

from __future__ import annotations

from dirgo.models import Entry


def format_toon(entries: list[Entry]) -> str:
    lines = []
    for entry in entries:
        name = entry.name + "/" if entry.is_directory else entry.name
        lines.append("  " * entry.depth + name + "\n")
    return "".join(lines)
