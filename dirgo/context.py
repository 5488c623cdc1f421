"""Context assembly: tree-only, full-context and dependencies-only documents."""

from __future__ import annotations

from pathlib import Path

import structlog

# Ensure parsers are registered before any scan runs.
import dirgo.parsers  # noqa: F401
from dirgo.detector import detect_project_type
from dirgo.exceptions import ScanRootError, UnsupportedFormatError
from dirgo.formatters import format_json, format_toon, format_tree
from dirgo.models import (
    OUTPUT_FORMATS,
    ContextResult,
    Dependency,
    ScanOptions,
    ScanResult,
)
from dirgo.monorepo import detect_monorepo
from dirgo.parsers.registry import parse_project
from dirgo.scanner import scan
from dirgo.tokens import estimate_tokens

log = structlog.get_logger("dirgo.context")

_MAX_DIRECT_SHOWN = 20
_MAX_DEV_SHOWN = 10


def _check_format(fmt: str) -> None:
    if fmt not in OUTPUT_FORMATS:
        raise UnsupportedFormatError(fmt)


def _result(text: str) -> ContextResult:
    return ContextResult(text=text, bytes=len(text.encode("utf-8")), tokens=estimate_tokens(text))


def format_project_header(result: ScanResult) -> str:
    info = result.project_info
    header = f"Project: {info.type}"

    if info.node is not None:
        header += f" ({info.node.package_manager})"
        if info.node.tsconfig is not None:
            header += " [typescript]"
    if info.python is not None and info.python.build_system:
        header += f" ({info.python.build_system})"
    if info.go is not None and info.go.go_version:
        header += f" (go {info.go.go_version})"
    if info.rust is not None and info.rust.edition:
        header += f" (edition {info.rust.edition})"
    header += "\n"

    if result.monorepo is not None:
        header += f"Monorepo: {result.monorepo.type} ({len(result.monorepo.packages)} packages)\n"
    return header


def _dependency_block(title: str, deps: list[Dependency], limit: int) -> str:
    block = f"\n{title} ({len(deps)}):\n"
    for dep in deps[:limit]:
        block += f"  {dep.name}: {dep.version}\n"
    if len(deps) > limit:
        block += f"  ... and {len(deps) - limit} more\n"
    return block


def format_dependencies(deps: list[Dependency]) -> str:
    if not deps:
        return ""

    direct = [d for d in deps if not d.is_dev and not d.is_indirect]
    dev = [d for d in deps if d.is_dev]
    indirect = [d for d in deps if d.is_indirect]

    output = ""
    if direct:
        output += _dependency_block("Dependencies", direct, _MAX_DIRECT_SHOWN)
    if dev:
        output += _dependency_block("Dev Dependencies", dev, _MAX_DEV_SHOWN)
    if indirect:
        output += f"\nIndirect Dependencies: {len(indirect)}\n"
    return output


def format_tsconfig(result: ScanResult) -> str:
    node = result.project_info.node
    if node is None or node.tsconfig is None:
        return ""
    tsconfig = node.tsconfig

    output = "\ntsconfig.json:\n"
    if tsconfig.paths:
        output += "  paths:\n"
        for alias, targets in tsconfig.paths.items():
            first = targets[0] if isinstance(targets, list) and targets else ""
            output += f"    {alias}: {first}\n"
    if tsconfig.target:
        output += f"  target: {tsconfig.target}\n"
    if tsconfig.strict is not None:
        output += f"  strict: {str(tsconfig.strict).lower()}\n"
    if tsconfig.references:
        output += f"  references: {len(tsconfig.references)} projects\n"
    return output


def format_workspace_packages(result: ScanResult) -> str:
    if result.monorepo is None:
        return ""
    output = "\nWorkspace Packages:\n"
    for pkg in result.monorepo.packages:
        output += f"  {pkg.name} ({pkg.path})\n"
    return output


def _render_structure(result: ScanResult, fmt: str, emoji: bool) -> str:
    if fmt == "toon":
        return format_toon(result.entries)
    return format_tree(result.entries, emoji)


def build_tree(options: ScanOptions, fmt: str = "tree", emoji: bool = False) -> ContextResult:
    """Structure only; ``json`` yields the full structured record."""
    _check_format(fmt)
    result = scan(options)
    if fmt == "json":
        return format_json(result)
    return _result(_render_structure(result, fmt, emoji))


def build_context(options: ScanOptions, fmt: str = "tree", emoji: bool = False) -> ContextResult:
    """Header, structure, dependencies, tsconfig and workspace packages in one document."""
    _check_format(fmt)
    result = scan(options)
    if fmt == "json":
        return format_json(result)

    text = format_project_header(result)
    text += "\n"
    text += _render_structure(result, fmt, emoji)
    text += format_dependencies(result.project_info.dependencies)
    text += format_tsconfig(result)
    text += format_workspace_packages(result)

    log.debug("context.built", root=result.root, entries=len(result.entries), chars=len(text))
    return _result(text)


def build_deps(options: ScanOptions, fmt: str = "tree", emoji: bool = False) -> ContextResult:
    """Project header and dependency summary; the directory tree is not walked.

    *emoji* is accepted for signature parity with the other builders and has
    no effect here.
    """
    _check_format(fmt)
    root = options.dir or "."
    if not Path(root).is_dir():
        raise ScanRootError(root, "not a directory")

    project_info = parse_project(root, detect_project_type(root))
    result = ScanResult(
        root=root,
        entries=[],
        project_info=project_info,
        monorepo=detect_monorepo(root),
    )
    if fmt == "json":
        return format_json(result)

    text = format_project_header(result)
    text += format_dependencies(project_info.dependencies)
    return _result(text)
