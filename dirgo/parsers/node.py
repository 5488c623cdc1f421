"""Parser for Node.js projects: package.json, lockfiles and tsconfig.json."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from dirgo.models import Dependency, NodeProjectInfo, PackageManager, ProjectInfo, TSConfig
from dirgo.parsers.registry import register_parser
from dirgo.utils.fs import exists, read_json

logger = logging.getLogger(__name__)

# Lockfile -> package manager, ordered by priority
_LOCKFILES: list[tuple[str, PackageManager]] = [
    ("bun.lockb", "bun"),
    ("bun.lock", "bun"),
    ("pnpm-lock.yaml", "pnpm"),
    ("yarn.lock", "yarn"),
]

_DEP_SECTIONS = (("dependencies", False), ("devDependencies", True))


def detect_package_manager(root: Path) -> PackageManager:
    for lockfile, manager in _LOCKFILES:
        if exists(root / lockfile):
            return manager
    return "npm"


def parse_tsconfig(root: Path) -> TSConfig | None:
    """Extract the compiler options worth showing; ``None`` if there are none."""
    config = read_json(root / "tsconfig.json")
    if config is None:
        return None

    options = config.get("compilerOptions")
    if not isinstance(options, dict):
        options = {}

    result = TSConfig()
    if isinstance(options.get("paths"), dict) and options["paths"]:
        result.paths = options["paths"]
    if options.get("baseUrl"):
        result.base_url = options["baseUrl"]
    if options.get("target"):
        result.target = options["target"]
    if options.get("module"):
        result.module = options["module"]
    if isinstance(options.get("strict"), bool):
        result.strict = options["strict"]
    if options.get("jsx"):
        result.jsx = options["jsx"]
    if isinstance(config.get("references"), list):
        result.references = config["references"]

    if result == TSConfig():
        return None
    return result


def _dependencies(pkg: dict[str, Any]) -> list[Dependency]:
    deps: list[Dependency] = []
    for section, is_dev in _DEP_SECTIONS:
        table = pkg.get(section)
        if not isinstance(table, dict):
            continue
        for name, version in table.items():
            if not isinstance(version, str):
                logger.debug("Skipping %s entry %s with non-string version", section, name)
                continue
            deps.append(Dependency(name=name, version=version, is_dev=is_dev))
    return deps


class NodeParser:
    project_type = "node"

    def parse(self, root: Path) -> ProjectInfo:
        pkg = read_json(root / "package.json")
        if pkg is None:
            return ProjectInfo(type="node")

        name = pkg.get("name")
        version = pkg.get("version")
        return ProjectInfo(
            type="node",
            dependencies=_dependencies(pkg),
            node=NodeProjectInfo(
                package_manager=detect_package_manager(root),
                name=name if isinstance(name, str) else None,
                version=version if isinstance(version, str) else None,
                tsconfig=parse_tsconfig(root),
            ),
        )


register_parser(NodeParser())
