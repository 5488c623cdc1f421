"""Directory scanner: ignore-aware, depth- and focus-bounded walk."""

from __future__ import annotations

import os
from pathlib import Path

import pathspec
import structlog

# Ensure parsers are registered before any scan runs.
import dirgo.parsers  # noqa: F401
from dirgo.detector import detect_project_type
from dirgo.exceptions import ScanRootError
from dirgo.models import Entry, ScanOptions, ScanResult
from dirgo.monorepo import detect_monorepo
from dirgo.parsers.registry import parse_project
from dirgo.utils.fs import read_lines

log = structlog.get_logger("dirgo.scanner")

DEFAULT_EXCLUDES: tuple[str, ...] = (
    "node_modules",
    ".git",
    "dist",
    "build",
    ".next",
    ".nuxt",
    ".output",
    "coverage",
    "__pycache__",
    ".pytest_cache",
    ".venv",
    "venv",
    ".env",
    "target",
    ".cache",
    ".turbo",
    ".DS_Store",
    "*.pyc",
    "*.pyo",
)


def load_gitignore(root: str | Path) -> list[str]:
    """Patterns from ``<root>/.gitignore`` with comments and blank lines removed."""
    patterns = []
    for line in read_lines(Path(root) / ".gitignore"):
        stripped = line.strip()
        if not stripped.startswith("#"):
            patterns.append(stripped)
    return patterns


class IgnoreRules:
    """Combined default, .gitignore and caller-supplied exclusion patterns."""

    def __init__(self, patterns: list[str] | tuple[str, ...] = ()) -> None:
        self.patterns: list[str] = list(patterns)
        self._spec = pathspec.GitIgnoreSpec.from_lines(self.patterns)

    @classmethod
    def for_root(
        cls,
        root: str | Path,
        extra: list[str] | tuple[str, ...] = (),
        include_all: bool = False,
    ) -> IgnoreRules:
        patterns: list[str] = []
        if not include_all:
            patterns.extend(DEFAULT_EXCLUDES)
        patterns.extend(load_gitignore(root))
        patterns.extend(extra)
        return cls(patterns)

    def ignores(self, relative_path: str, is_directory: bool = False) -> bool:
        if is_directory:
            return self._spec.match_file(relative_path + "/")
        return self._spec.match_file(relative_path)


def normalize_focus(focus: str | None) -> str | None:
    if not focus:
        return None
    normalized = focus.replace("\\", "/").strip()
    while normalized.startswith("./"):
        normalized = normalized[2:]
    normalized = normalized.strip("/")
    if normalized in ("", "."):
        return None
    return normalized


def in_focus(relative_path: str, focus: str | None) -> bool:
    """True if *relative_path* is the focus path, one of its ancestors, or inside it.

    Comparison is by whole path segments, so ``src/api`` does not match
    ``src/apiv2``.
    """
    if focus is None:
        return True
    if relative_path == focus:
        return True
    return focus.startswith(relative_path + "/") or relative_path.startswith(focus + "/")


def _entry_size(path: str) -> int | None:
    try:
        return os.stat(path).st_size
    except OSError:
        return None


def _walk(
    directory: str,
    prefix: str,
    rules: IgnoreRules,
    depth: int,
    max_depth: int | None,
    focus: str | None,
    entries: list[Entry],
) -> None:
    if max_depth is not None and depth > max_depth:
        return

    with os.scandir(directory) as it:
        items = list(it)

    dirs: list[os.DirEntry[str]] = []
    files: list[os.DirEntry[str]] = []
    for item in items:
        relative_path = f"{prefix}{item.name}"
        try:
            is_dir = item.is_dir(follow_symlinks=False)
        except OSError:
            is_dir = False
        if rules.ignores(relative_path, is_directory=is_dir):
            continue
        if not in_focus(relative_path, focus):
            continue
        (dirs if is_dir else files).append(item)

    dirs.sort(key=lambda item: item.name)
    files.sort(key=lambda item: item.name)

    for item in dirs:
        relative_path = f"{prefix}{item.name}"
        entries.append(
            Entry(
                name=item.name,
                path=item.path,
                relative_path=relative_path,
                is_directory=True,
                depth=depth,
                size=_entry_size(item.path),
            )
        )
        try:
            _walk(item.path, relative_path + "/", rules, depth + 1, max_depth, focus, entries)
        except OSError as exc:
            log.warning("scanner.unreadable_dir", path=relative_path, error=str(exc))

    for item in files:
        entries.append(
            Entry(
                name=item.name,
                path=item.path,
                relative_path=f"{prefix}{item.name}",
                is_directory=False,
                depth=depth,
                size=_entry_size(item.path),
            )
        )


def scan_entries(
    root: str | Path,
    rules: IgnoreRules,
    max_depth: int | None = None,
    focus: str | None = None,
) -> list[Entry]:
    """Walk *root* depth-first and return its entries in display order.

    Within each directory, subdirectories come before files and both groups
    are sorted by name.  Raises :class:`ScanRootError` if *root* itself
    cannot be listed; failures below the root are logged and skipped.
    """
    entries: list[Entry] = []
    try:
        _walk(str(root), "", rules, 0, max_depth, normalize_focus(focus), entries)
    except OSError as exc:
        raise ScanRootError(str(root), exc.strerror or str(exc)) from exc
    return entries


def scan(options: ScanOptions) -> ScanResult:
    """Walk the directory, then detect project type, manifests and workspaces."""
    root = options.dir or "."
    rules = IgnoreRules.for_root(root, extra=options.ignore, include_all=options.include_all)
    entries = scan_entries(root, rules, max_depth=options.depth, focus=options.focus)

    project_type = detect_project_type(root)
    project_info = parse_project(root, project_type)
    monorepo = detect_monorepo(root)

    log.debug(
        "scanner.scan_complete",
        root=root,
        entries=len(entries),
        project_type=project_type,
        monorepo=monorepo.type if monorepo else None,
    )
    return ScanResult(root=root, entries=entries, project_info=project_info, monorepo=monorepo)
