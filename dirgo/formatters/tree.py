"""Connector tree renderer (``├──`` / ``└──``) with optional file glyphs."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from types import MappingProxyType

from dirgo.models import Entry

DIRECTORY_GLYPH = "📁"
DEFAULT_GLYPH = "📄"

EXTENSION_GLYPHS = MappingProxyType(
    {
        ".js": "📄",
        ".ts": "📄",
        ".jsx": "⚛️",
        ".tsx": "⚛️",
        ".vue": "🎨",
        ".svelte": "🎨",
        ".css": "🎨",
        ".scss": "🎨",
        ".sass": "🎨",
        ".less": "🎨",
        ".html": "🌐",
        ".md": "📚",
        ".mdx": "📚",
        ".txt": "📝",
        ".json": "⚙️",
        ".yaml": "⚙️",
        ".yml": "⚙️",
        ".toml": "⚙️",
        ".env": "🔒",
        ".png": "🖼️",
        ".jpg": "🖼️",
        ".jpeg": "🖼️",
        ".gif": "🖼️",
        ".svg": "🎨",
        ".webp": "🖼️",
        ".ico": "🖼️",
        ".sql": "🗄️",
        ".db": "🗄️",
        ".sqlite": "🗄️",
        ".csv": "📊",
        ".py": "🐍",
        ".go": "🐹",
        ".rs": "🦀",
        ".rb": "💎",
        ".php": "🐘",
        ".java": "☕",
        ".kt": "📱",
        ".swift": "🍎",
        ".c": "⚡",
        ".cpp": "⚡",
        ".h": "⚡",
        ".sh": "📜",
        ".bash": "📜",
        ".zsh": "📜",
        ".fish": "📜",
        ".ps1": "📜",
        ".bat": "📜",
        ".lock": "🔒",
    }
)

# Checked before the extension table
SPECIAL_FILE_GLYPHS = MappingProxyType(
    {
        "package.json": "📦",
        "Cargo.toml": "📦",
        "go.mod": "📦",
        "pyproject.toml": "📦",
        "requirements.txt": "📦",
        "Pipfile": "📦",
        "Dockerfile": "🐳",
        "docker-compose.yml": "🐳",
        "docker-compose.yaml": "🐳",
        ".dockerignore": "🐳",
        "Makefile": "🔧",
        "CMakeLists.txt": "🔧",
        "LICENSE": "📜",
        "README.md": "📚",
        "CHANGELOG.md": "📚",
        "tsconfig.json": "⚙️",
        "vite.config.ts": "⚡",
        "vite.config.js": "⚡",
        "next.config.js": "▲",
        "next.config.mjs": "▲",
        "nuxt.config.ts": "💚",
        "tailwind.config.js": "🎨",
        "tailwind.config.ts": "🎨",
        ".eslintrc": "📏",
        ".eslintrc.js": "📏",
        ".eslintrc.json": "📏",
        ".prettierrc": "💅",
        ".prettierrc.js": "💅",
        ".prettierrc.json": "💅",
        "jest.config.js": "🧪",
        "vitest.config.ts": "🧪",
        ".gitignore": "👁️",
        ".env": "🔒",
        ".env.local": "🔒",
        ".env.example": "🔒",
    }
)


def glyph_for(entry: Entry) -> str:
    if entry.is_directory:
        return DIRECTORY_GLYPH
    special = SPECIAL_FILE_GLYPHS.get(entry.name)
    if special is not None:
        return special
    _, ext = os.path.splitext(entry.name)
    return EXTENSION_GLYPHS.get(ext, DEFAULT_GLYPH)


@dataclass
class _Node:
    entry: Entry
    children: list[_Node] = field(default_factory=list)


def _build_tree(entries: list[Entry]) -> list[_Node]:
    """Link entries to their parents via relative paths; orphans are dropped."""
    roots: list[_Node] = []
    nodes: dict[str, _Node] = {}
    for entry in entries:
        node = _Node(entry)
        nodes[entry.relative_path] = node
        if entry.depth == 0:
            roots.append(node)
            continue
        parent = nodes.get(entry.relative_path.rsplit("/", 1)[0])
        if parent is not None:
            parent.children.append(node)
    return roots


def _render(node: _Node, prefix: str, is_last: bool, emoji: bool, out: list[str]) -> None:
    connector = "└── " if is_last else "├── "
    glyph = glyph_for(node.entry) + " " if emoji else ""
    name = node.entry.name + "/" if node.entry.is_directory else node.entry.name
    out.append(f"{prefix}{connector}{glyph}{name}\n")

    child_prefix = prefix + ("    " if is_last else "│   ")
    for i, child in enumerate(node.children):
        _render(child, child_prefix, i == len(node.children) - 1, emoji, out)


def format_tree(entries: list[Entry], emoji: bool = False) -> str:
    out: list[str] = []
    roots = _build_tree(entries)
    for i, node in enumerate(roots):
        _render(node, "", i == len(roots) - 1, emoji, out)
    return "".join(out)
