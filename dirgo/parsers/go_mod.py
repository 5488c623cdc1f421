"""Parser for Go go.mod files."""

from __future__ import annotations

import re
from pathlib import Path

from dirgo.models import Dependency, GoProjectInfo, ProjectInfo
from dirgo.parsers.registry import register_parser
from dirgo.utils.fs import read_text

# Single require: require github.com/foo/bar v1.2.3
_SINGLE_RE = re.compile(r"^require\s+(\S+)\s+(\S+)")

# Inside require block: github.com/foo/bar v1.2.3 [// indirect]
_BLOCK_RE = re.compile(r"^(\S+)\s+(\S+)")

_INDIRECT_MARKER = "// indirect"


def parse_go_mod(content: str) -> tuple[GoProjectInfo, list[Dependency]]:
    """Return the module metadata and the ``require`` dependencies of a go.mod."""
    info = GoProjectInfo()
    deps: list[Dependency] = []
    in_require_block = False

    for raw_line in content.splitlines():
        line = raw_line.strip()

        if not line or line.startswith("//"):
            continue

        if line.startswith("module "):
            info.module_name = line[len("module ") :].strip()
            continue
        if line.startswith("go "):
            info.go_version = line[len("go ") :].strip()
            continue

        # Detect require block boundaries
        if line.startswith("require") and line.endswith("("):
            in_require_block = True
            continue
        if in_require_block and line == ")":
            in_require_block = False
            continue

        if in_require_block:
            is_indirect = _INDIRECT_MARKER in line
            m = _BLOCK_RE.match(line.replace(_INDIRECT_MARKER, "").strip())
        else:
            is_indirect = False
            m = _SINGLE_RE.match(line)
        if m:
            deps.append(
                Dependency(name=m.group(1), version=m.group(2), is_indirect=is_indirect)
            )

    return info, deps


class GoModParser:
    project_type = "go"

    def parse(self, root: Path) -> ProjectInfo:
        content = read_text(root / "go.mod")
        if content is None:
            return ProjectInfo(type="go")
        info, deps = parse_go_mod(content)
        return ProjectInfo(type="go", dependencies=deps, go=info)


register_parser(GoModParser())
