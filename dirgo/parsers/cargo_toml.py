"""Parser for Rust Cargo.toml files."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from dirgo.models import Dependency, ProjectInfo, RustProjectInfo
from dirgo.parsers.registry import register_parser
from dirgo.utils.fs import read_toml

# (section, is_dev); build dependencies count as dev
_DEP_SECTIONS = (
    ("dependencies", False),
    ("dev-dependencies", True),
    ("build-dependencies", True),
)


def _parse_version(spec: Any) -> str:
    """Extract the version from a bare string or a table with a ``version`` key."""
    if isinstance(spec, str):
        return spec
    if isinstance(spec, dict):
        version = spec.get("version")
        return version if isinstance(version, str) else "specified"
    return "latest"


class CargoTomlParser:
    project_type = "rust"

    def parse(self, root: Path) -> ProjectInfo:
        data = read_toml(root / "Cargo.toml")
        if data is None:
            return ProjectInfo(type="rust")

        deps: list[Dependency] = []
        for section, is_dev in _DEP_SECTIONS:
            dep_table = data.get(section)
            if not isinstance(dep_table, dict):
                continue
            for name, spec in dep_table.items():
                deps.append(Dependency(name=name, version=_parse_version(spec), is_dev=is_dev))

        package = data.get("package")
        if not isinstance(package, dict):
            package = {}
        return ProjectInfo(
            type="rust",
            dependencies=deps,
            rust=RustProjectInfo(
                name=_string(package.get("name")),
                edition=_string(package.get("edition")),
                rust_version=_string(package.get("rust-version")),
            ),
        )


def _string(value: Any) -> str | None:
    return value if isinstance(value, str) else None


register_parser(CargoTomlParser())
