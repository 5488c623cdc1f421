"""Parser for Python projects: pyproject.toml, Pipfile, requirements.txt, setup.py.

The first manifest that parses wins, in that order; a ``.python-version``
file overrides whatever Python version the manifest declared.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from dirgo.models import Dependency, ProjectInfo, PythonProjectInfo
from dirgo.parsers.registry import register_parser
from dirgo.utils.fs import exists, read_text, read_toml

logger = logging.getLogger(__name__)

# name, optional [extras], then whatever constraint follows
_REQUIREMENT_RE = re.compile(r"^([A-Za-z0-9._-]+)(?:\[[^\]]*\])?(.*)$")

# First "<op><version>" in a constraint: ">=2.28,<3" -> "2.28"
_VERSION_RE = re.compile(r"[=<>~!]+\s*([0-9][^\s,;]*)")

_PYTHON_VERSION_RE = re.compile(r"[0-9.]+")
_POETRY_OPERATORS_RE = re.compile(r"[\^~><=]")

# build-backend substring -> build system, ordered by priority
_BUILD_BACKENDS: list[tuple[str, str]] = [
    ("poetry", "poetry"),
    ("hatch", "hatch"),
    ("flit", "flit"),
    ("pdm", "pdm"),
    ("maturin", "maturin"),
    ("setuptools", "setuptools"),
]


@dataclass
class _Manifest:
    dependencies: list[Dependency] = field(default_factory=list)
    python_version: str | None = None
    build_system: str | None = None


def parse_requirement(line: str, is_dev: bool = False) -> Dependency | None:
    """Parse one requirement string (requirements.txt line or PEP 508 string).

    Blank lines, comments and option lines (``-r``, ``-e``, ``--index-url``)
    yield ``None``.  The version is the first number following an operator,
    or ``"latest"`` when the line carries none.
    """
    line = line.strip()
    if not line or line.startswith(("#", "-")):
        return None
    line = re.split(r"\s#", line, maxsplit=1)[0]
    line = line.split(";", 1)[0].strip()

    m = _REQUIREMENT_RE.match(line)
    if not m:
        return None

    version = "latest"
    found = _VERSION_RE.search(m.group(2))
    if found:
        version = found.group(1)
    return Dependency(name=m.group(1), version=version, is_dev=is_dev)


def _requirements(lines: Any, is_dev: bool = False) -> list[Dependency]:
    deps: list[Dependency] = []
    if not isinstance(lines, list):
        return deps
    for line in lines:
        if not isinstance(line, str):
            continue
        dep = parse_requirement(line, is_dev=is_dev)
        if dep is not None:
            deps.append(dep)
    return deps


def _table(data: dict[str, Any], *keys: str) -> dict[str, Any]:
    """Walk nested tables, returning ``{}`` when any level is missing."""
    node: Any = data
    for key in keys:
        node = node.get(key) if isinstance(node, dict) else None
    return node if isinstance(node, dict) else {}


def _python_version(spec: Any) -> str | None:
    if not isinstance(spec, str):
        return None
    m = _PYTHON_VERSION_RE.search(spec)
    return m.group(0) if m else None


def _poetry_version(spec: Any) -> str:
    if isinstance(spec, dict):
        if "version" not in spec:
            return "specified"
        spec = spec["version"]
    if not isinstance(spec, str):
        return "specified"
    version = _POETRY_OPERATORS_RE.sub("", spec).strip()
    if not version or version == "*":
        return "latest"
    return version


def _pipfile_version(spec: Any) -> str:
    if isinstance(spec, dict):
        if "version" not in spec:
            return "specified"
        spec = spec["version"]
    if not isinstance(spec, str):
        return "specified"
    if spec.strip() in ("", "*"):
        return "latest"
    return spec


def _from_pyproject(root: Path) -> _Manifest | None:
    data = read_toml(root / "pyproject.toml")
    if data is None:
        return None

    manifest = _Manifest()

    backend = _table(data, "build-system").get("build-backend")
    if isinstance(backend, str):
        for needle, system in _BUILD_BACKENDS:
            if needle in backend:
                manifest.build_system = system
                break

    project = _table(data, "project")
    if project:
        manifest.python_version = _python_version(project.get("requires-python"))
        manifest.dependencies.extend(_requirements(project.get("dependencies")))
        manifest.dependencies.extend(
            _requirements(_table(project, "optional-dependencies").get("dev"), is_dev=True)
        )

    poetry = _table(data, "tool", "poetry")
    if poetry:
        manifest.build_system = "poetry"
        for name, spec in _table(poetry, "dependencies").items():
            if name == "python":
                manifest.python_version = _python_version(spec) or manifest.python_version
                continue
            manifest.dependencies.append(Dependency(name=name, version=_poetry_version(spec)))
        dev_tables = (
            _table(poetry, "group", "dev", "dependencies"),
            _table(poetry, "dev-dependencies"),
        )
        for dev_table in dev_tables:
            for name, spec in dev_table.items():
                manifest.dependencies.append(
                    Dependency(name=name, version=_poetry_version(spec), is_dev=True)
                )

    return manifest


def _from_pipfile(root: Path) -> _Manifest | None:
    data = read_toml(root / "Pipfile")
    if data is None:
        return None

    manifest = _Manifest(build_system="pipenv")
    for section, is_dev in (("packages", False), ("dev-packages", True)):
        for name, spec in _table(data, section).items():
            manifest.dependencies.append(
                Dependency(name=name, version=_pipfile_version(spec), is_dev=is_dev)
            )
    manifest.python_version = _python_version(_table(data, "requires").get("python_version"))
    return manifest


def _from_requirements(root: Path) -> _Manifest | None:
    content = read_text(root / "requirements.txt") or ""
    return _Manifest(dependencies=_requirements(content.splitlines()), build_system="pip")


def _from_setup_py(root: Path) -> _Manifest | None:
    return _Manifest(build_system="setuptools")


# Manifest probes, ordered by priority
_MANIFEST_PROBES: list[tuple[str, Callable[[Path], _Manifest | None]]] = [
    ("pyproject.toml", _from_pyproject),
    ("Pipfile", _from_pipfile),
    ("requirements.txt", _from_requirements),
    ("setup.py", _from_setup_py),
]


class PythonParser:
    project_type = "python"

    def parse(self, root: Path) -> ProjectInfo:
        manifest: _Manifest | None = None
        for filename, probe in _MANIFEST_PROBES:
            if not exists(root / filename):
                continue
            manifest = probe(root)
            if manifest is not None:
                break
            logger.debug("Skipping unreadable %s in %s", filename, root)

        pinned = (read_text(root / ".python-version") or "").strip()
        if manifest is None and not pinned:
            return ProjectInfo(type="python")

        manifest = manifest or _Manifest()
        return ProjectInfo(
            type="python",
            dependencies=manifest.dependencies,
            python=PythonProjectInfo(
                python_version=pinned or manifest.python_version,
                build_system=manifest.build_system,
            ),
        )


register_parser(PythonParser())
