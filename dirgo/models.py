"""Data models for scan results, project info and workspace detection."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

ProjectType = Literal["node", "python", "go", "rust", "unknown"]
MonorepoType = Literal[
    "turbo",
    "nx",
    "lerna",
    "pnpm",
    "npm-workspaces",
    "go-workspace",
    "cargo-workspace",
]
OutputFormat = Literal["tree", "toon", "json"]
PackageManager = Literal["npm", "pnpm", "yarn", "bun"]

OUTPUT_FORMATS: tuple[str, ...] = ("tree", "toon", "json")


@dataclass(frozen=True)
class Entry:
    """A single file or directory discovered by the scanner."""

    name: str
    path: str  # absolute or root-joined filesystem path
    relative_path: str  # always "/"-separated, relative to the scan root
    is_directory: bool
    depth: int  # 0 for direct children of the scan root
    size: int | None = None


@dataclass
class Dependency:
    """A dependency declared in a manifest file."""

    name: str
    version: str  # literal manifest string, or "latest" / "specified"
    is_dev: bool = False
    is_indirect: bool = False


@dataclass
class TSConfig:
    paths: dict[str, list[str]] | None = None
    base_url: str | None = None
    target: str | None = None
    module: str | None = None
    strict: bool | None = None
    jsx: str | None = None
    references: list[dict] | None = None


@dataclass
class NodeProjectInfo:
    package_manager: PackageManager = "npm"
    name: str | None = None
    version: str | None = None
    tsconfig: TSConfig | None = None


@dataclass
class PythonProjectInfo:
    python_version: str | None = None
    build_system: str | None = None  # "poetry" | "hatch" | "pipenv" | "pip" | ...


@dataclass
class GoProjectInfo:
    module_name: str | None = None
    go_version: str | None = None


@dataclass
class RustProjectInfo:
    name: str | None = None
    edition: str | None = None
    rust_version: str | None = None


_SUB_RECORDS = ("node", "python", "go", "rust")


@dataclass
class ProjectInfo:
    """Detected project type plus the dependencies and metadata of its manifest.

    At most one ecosystem sub-record is populated and it always matches ``type``.
    """

    type: ProjectType
    dependencies: list[Dependency] = field(default_factory=list)
    node: NodeProjectInfo | None = None
    python: PythonProjectInfo | None = None
    go: GoProjectInfo | None = None
    rust: RustProjectInfo | None = None

    def __post_init__(self) -> None:
        populated = [name for name in _SUB_RECORDS if getattr(self, name) is not None]
        if populated and populated != [self.type]:
            raise ValueError(
                f"ProjectInfo of type '{self.type}' cannot carry sub-records {populated}"
            )

    @property
    def details(self) -> NodeProjectInfo | PythonProjectInfo | GoProjectInfo | RustProjectInfo | None:
        """The populated ecosystem sub-record, if any."""
        if self.type in _SUB_RECORDS:
            return getattr(self, self.type)
        return None


@dataclass
class WorkspacePackage:
    name: str
    path: str  # "/"-separated, relative to the workspace root
    type: ProjectType | None = None


@dataclass
class MonorepoInfo:
    type: MonorepoType
    packages: list[WorkspacePackage] = field(default_factory=list)


@dataclass
class ScanOptions:
    """Options shared by every scan entry point."""

    dir: str = "."
    ignore: tuple[str, ...] | list[str] = ()  # extra gitignore-style patterns
    include_all: bool = False  # drop the built-in default excludes
    depth: int | None = None
    focus: str | None = None


@dataclass
class ScanResult:
    """Everything one scan invocation learned about a directory."""

    root: str
    entries: list[Entry]
    project_info: ProjectInfo
    monorepo: MonorepoInfo | None = None


@dataclass
class ContextResult:
    text: str
    bytes: int
    tokens: int
