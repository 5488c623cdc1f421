"""Parser registry — map a detected project type to its manifest parser."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from dirgo.models import ProjectInfo


@runtime_checkable
class ProjectParser(Protocol):
    """Interface that every ecosystem parser must satisfy."""

    project_type: str

    def parse(self, root: Path) -> ProjectInfo: ...


PARSER_REGISTRY: dict[str, ProjectParser] = {}


def register_parser(parser: ProjectParser) -> None:
    """Register a parser instance by its project_type."""
    PARSER_REGISTRY[parser.project_type] = parser


def parse_project(root: str | Path, project_type: str) -> ProjectInfo:
    """Parse the manifests of *root* with the parser registered for *project_type*.

    Unknown (or unregistered) types yield an empty :class:`ProjectInfo`.
    """
    parser = PARSER_REGISTRY.get(project_type)
    if parser is None:
        return ProjectInfo(type="unknown")
    return parser.parse(Path(root))
