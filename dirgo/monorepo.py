"""Monorepo / workspace detection.

Each strategy inspects the root for one workspace convention and returns a
:class:`MonorepoInfo` or ``None``; the first strategy that matches wins.
"""

from __future__ import annotations

import os
import re
from collections.abc import Callable
from pathlib import Path

import structlog

from dirgo.detector import detect_project_type
from dirgo.models import MonorepoInfo, WorkspacePackage
from dirgo.utils.fs import exists, read_json, read_text, read_toml

log = structlog.get_logger("dirgo.monorepo")

_NX_PROJECT_DIRS = ("packages", "apps", "libs")
_DEFAULT_LERNA_PACKAGES = ["packages/*"]


def _subdirectories(path: Path) -> list[str]:
    """Names of the immediate subdirectories of *path*, sorted; ``[]`` if unlistable."""
    try:
        with os.scandir(path) as it:
            names = [item.name for item in it if item.is_dir(follow_symlinks=False)]
    except OSError as exc:
        log.debug("monorepo.unlistable_dir", path=str(path), error=str(exc))
        return []
    return sorted(names)


def _join(*parts: str) -> str:
    return "/".join(part.strip("/") for part in parts if part.strip("/"))


def _node_package(root: Path, rel_path: str, fallback: str) -> WorkspacePackage:
    pkg_dir = root / rel_path
    pkg_json = read_json(pkg_dir / "package.json") or {}
    name = pkg_json.get("name")
    project_type = detect_project_type(pkg_dir)
    return WorkspacePackage(
        name=name if isinstance(name, str) and name else fallback,
        path=rel_path,
        type=None if project_type == "unknown" else project_type,
    )


def find_packages_from_globs(root: Path, patterns: list[str]) -> list[WorkspacePackage]:
    """Resolve workspace globs to packages.

    A trailing ``/*`` or ``*`` is stripped to get a base directory whose
    immediate subdirectories each become one package; a pattern without
    ``*`` names a single package directory.
    """
    packages: list[WorkspacePackage] = []
    for pattern in patterns:
        pattern = pattern.strip()
        if not pattern or pattern.startswith("!"):
            continue
        if "*" not in pattern:
            rel_path = _join(pattern)
            if rel_path and (root / rel_path).is_dir():
                packages.append(_node_package(root, rel_path, Path(rel_path).name))
            continue

        base = re.sub(r"\*$", "", re.sub(r"/\*$", "", pattern))
        base_dir = root / base if base else root
        if not base_dir.is_dir():
            continue
        for name in _subdirectories(base_dir):
            packages.append(_node_package(root, _join(base, name), name))
    return packages


def _pnpm_patterns(content: str) -> list[str]:
    """Minimal reader for the ``packages:`` list of pnpm-workspace.yaml."""
    patterns: list[str] = []
    in_packages = False
    for line in content.splitlines():
        stripped = line.split("#", 1)[0].strip()
        if stripped == "packages:":
            in_packages = True
            continue
        if not in_packages or not stripped:
            continue
        if stripped.startswith("-"):
            patterns.append(re.sub(r"['\"`]", "", stripped[1:]).strip())
        else:
            in_packages = False
    return patterns


# ── strategies ───────────────────────────────────────────────────────────


def detect_npm_workspaces(root: Path) -> MonorepoInfo | None:
    pkg = read_json(root / "package.json")
    if pkg is None:
        return None
    workspaces = pkg.get("workspaces")
    if isinstance(workspaces, dict):
        workspaces = workspaces.get("packages")
    if not isinstance(workspaces, list):
        return None
    patterns = [p for p in workspaces if isinstance(p, str)]
    return MonorepoInfo(type="npm-workspaces", packages=find_packages_from_globs(root, patterns))


def detect_pnpm_workspace(root: Path) -> MonorepoInfo | None:
    content = read_text(root / "pnpm-workspace.yaml")
    if not content:
        return None
    return MonorepoInfo(
        type="pnpm", packages=find_packages_from_globs(root, _pnpm_patterns(content))
    )


def detect_turbo(root: Path) -> MonorepoInfo | None:
    if not exists(root / "turbo.json"):
        return None
    workspace = detect_npm_workspaces(root) or detect_pnpm_workspace(root)
    if workspace is None:
        return None
    return MonorepoInfo(type="turbo", packages=workspace.packages)


def detect_nx(root: Path) -> MonorepoInfo | None:
    if not exists(root / "nx.json"):
        return None
    packages: list[WorkspacePackage] = []
    for subdir in _NX_PROJECT_DIRS:
        if not (root / subdir).is_dir():
            continue
        for name in _subdirectories(root / subdir):
            packages.append(_node_package(root, _join(subdir, name), name))
    return MonorepoInfo(type="nx", packages=packages)


def detect_lerna(root: Path) -> MonorepoInfo | None:
    lerna = read_json(root / "lerna.json")
    if lerna is None:
        return None
    patterns = lerna.get("packages")
    if not isinstance(patterns, list):
        patterns = _DEFAULT_LERNA_PACKAGES
    patterns = [p for p in patterns if isinstance(p, str)]
    return MonorepoInfo(type="lerna", packages=find_packages_from_globs(root, patterns))


def detect_go_workspace(root: Path) -> MonorepoInfo | None:
    content = read_text(root / "go.work")
    if not content:
        return None

    paths: list[str] = []
    in_use = False
    for raw_line in content.splitlines():
        line = raw_line.split("//", 1)[0].strip()
        if not line:
            continue
        if line.startswith("use") and line.endswith("("):
            in_use = True
            continue
        if in_use and line == ")":
            in_use = False
            continue
        if in_use:
            paths.append(line)
        elif line.startswith("use "):
            paths.append(line[len("use ") :].strip())

    packages = [WorkspacePackage(name=path, path=path, type="go") for path in paths]
    return MonorepoInfo(type="go-workspace", packages=packages)


def _cargo_package_name(member_dir: Path, fallback: str) -> str:
    cargo = read_toml(member_dir / "Cargo.toml") or {}
    package = cargo.get("package")
    if isinstance(package, dict) and isinstance(package.get("name"), str):
        return package["name"]
    return fallback


def detect_cargo_workspace(root: Path) -> MonorepoInfo | None:
    cargo = read_toml(root / "Cargo.toml")
    if cargo is None:
        return None
    workspace = cargo.get("workspace")
    members = workspace.get("members") if isinstance(workspace, dict) else None
    if not isinstance(members, list):
        return None

    packages: list[WorkspacePackage] = []
    for member in members:
        if not isinstance(member, str):
            continue
        if member.endswith("/*"):
            base = member[: -len("/*")]
            for name in _subdirectories(root / base):
                packages.append(
                    WorkspacePackage(
                        name=_cargo_package_name(root / base / name, name),
                        path=_join(base, name),
                        type="rust",
                    )
                )
        else:
            packages.append(
                WorkspacePackage(
                    name=_cargo_package_name(root / member, member),
                    path=member,
                    type="rust",
                )
            )
    return MonorepoInfo(type="cargo-workspace", packages=packages)


# Strategies, ordered by priority
STRATEGIES: tuple[Callable[[Path], MonorepoInfo | None], ...] = (
    detect_turbo,
    detect_nx,
    detect_lerna,
    detect_pnpm_workspace,
    detect_npm_workspaces,
    detect_go_workspace,
    detect_cargo_workspace,
)


def detect_monorepo(root: str | Path) -> MonorepoInfo | None:
    """Run the strategies in order and return the first match, or ``None``."""
    base = Path(root)
    for strategy in STRATEGIES:
        info = strategy(base)
        if info is not None:
            log.debug("monorepo.detected", type=info.type, packages=len(info.packages))
            return info
    return None
