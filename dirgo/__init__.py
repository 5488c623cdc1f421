"""dirgo — directory structure and project context for LLMs."""

from dirgo.context import build_context, build_deps, build_tree
from dirgo.detector import detect_project_type
from dirgo.exceptions import DirgoError, ScanRootError, UnsupportedFormatError
from dirgo.formatters import format_json, format_toon, format_tree
from dirgo.models import (
    ContextResult,
    Dependency,
    Entry,
    GoProjectInfo,
    MonorepoInfo,
    NodeProjectInfo,
    ProjectInfo,
    PythonProjectInfo,
    RustProjectInfo,
    ScanOptions,
    ScanResult,
    TSConfig,
    WorkspacePackage,
)
from dirgo.monorepo import detect_monorepo
from dirgo.parsers import parse_project
from dirgo.scanner import scan
from dirgo.tokens import estimate_tokens, format_tokens

__version__ = "2.0.0"

__all__ = [
    "ContextResult",
    "Dependency",
    "DirgoError",
    "Entry",
    "GoProjectInfo",
    "MonorepoInfo",
    "NodeProjectInfo",
    "ProjectInfo",
    "PythonProjectInfo",
    "RustProjectInfo",
    "ScanOptions",
    "ScanResult",
    "ScanRootError",
    "TSConfig",
    "UnsupportedFormatError",
    "WorkspacePackage",
    "build_context",
    "build_deps",
    "build_tree",
    "detect_monorepo",
    "detect_project_type",
    "estimate_tokens",
    "format_json",
    "format_tokens",
    "format_toon",
    "format_tree",
    "parse_project",
    "scan",
]
