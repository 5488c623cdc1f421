"""Tests for the ecosystem manifest parsers and the parser registry."""

from __future__ import annotations

import pytest

from dirgo.models import Dependency, NodeProjectInfo, ProjectInfo
from dirgo.parsers import PARSER_REGISTRY, parse_project
from dirgo.parsers.cargo_toml import CargoTomlParser
from dirgo.parsers.go_mod import GoModParser, parse_go_mod
from dirgo.parsers.node import NodeParser, detect_package_manager, parse_tsconfig
from dirgo.parsers.python import PythonParser, parse_requirement
from dirgo.parsers.registry import ProjectParser

# ── Registry ─────────────────────────────────────────────────────────────


class TestRegistry:
    def test_all_parsers_registered(self):
        assert {"node", "python", "go", "rust"} == set(PARSER_REGISTRY.keys())

    def test_parsers_satisfy_protocol(self):
        for parser in PARSER_REGISTRY.values():
            assert isinstance(parser, ProjectParser)

    def test_unknown_type(self, tmp_path):
        info = parse_project(tmp_path, "unknown")
        assert info == ProjectInfo(type="unknown")
        assert info.details is None


class TestProjectInfoInvariant:
    def test_mismatched_sub_record_rejected(self):
        with pytest.raises(ValueError):
            ProjectInfo(type="python", node=NodeProjectInfo())

    def test_details_returns_matching_record(self):
        node = NodeProjectInfo(name="x")
        assert ProjectInfo(type="node", node=node).details is node


# ── Node ─────────────────────────────────────────────────────────────────


class TestNodeParser:
    def test_single_dependency(self, make_tree):
        root = make_tree({"package.json": {"dependencies": {"react": "^18.0.0"}}})
        info = NodeParser().parse(root)
        assert info.type == "node"
        assert info.dependencies == [Dependency(name="react", version="^18.0.0")]

    def test_dev_dependencies_and_metadata(self, make_tree):
        root = make_tree(
            {
                "package.json": {
                    "name": "web",
                    "version": "1.2.0",
                    "dependencies": {"next": "14.0.0"},
                    "devDependencies": {"typescript": "^5.3.0"},
                }
            }
        )
        info = NodeParser().parse(root)
        assert info.node.name == "web"
        assert info.node.version == "1.2.0"
        assert info.node.package_manager == "npm"
        assert [(d.name, d.is_dev) for d in info.dependencies] == [
            ("next", False),
            ("typescript", True),
        ]

    def test_malformed_manifest(self, make_tree):
        root = make_tree({"package.json": "{broken"})
        info = NodeParser().parse(root)
        assert info == ProjectInfo(type="node")

    @pytest.mark.parametrize(
        "lockfile,manager",
        [
            ("bun.lockb", "bun"),
            ("bun.lock", "bun"),
            ("pnpm-lock.yaml", "pnpm"),
            ("yarn.lock", "yarn"),
        ],
    )
    def test_package_manager_from_lockfile(self, make_tree, lockfile, manager):
        root = make_tree({lockfile: "x"})
        assert detect_package_manager(root) == manager

    def test_lockfile_priority(self, make_tree):
        root = make_tree({"yarn.lock": "x", "pnpm-lock.yaml": "x"})
        assert detect_package_manager(root) == "pnpm"


class TestTsconfig:
    def test_compiler_options(self, make_tree):
        root = make_tree(
            {
                "tsconfig.json": (
                    "{\n  // editor settings\n"
                    '  "compilerOptions": {"target": "ES2022", "strict": true,\n'
                    '    "paths": {"@/*": ["./src/*"]}, "baseUrl": "."},\n'
                    '  "references": [{"path": "./packages/a"}],\n}\n'
                )
            }
        )
        ts = parse_tsconfig(root)
        assert ts.target == "ES2022"
        assert ts.strict is True
        assert ts.paths == {"@/*": ["./src/*"]}
        assert ts.base_url == "."
        assert ts.references == [{"path": "./packages/a"}]

    def test_empty_options_is_none(self, make_tree):
        root = make_tree({"tsconfig.json": {"compilerOptions": {}}})
        assert parse_tsconfig(root) is None

    def test_missing_is_none(self, tmp_path):
        assert parse_tsconfig(tmp_path) is None


# ── Python ───────────────────────────────────────────────────────────────


class TestParseRequirement:
    @pytest.mark.parametrize(
        "line,name,version",
        [
            ("requests==2.31.0", "requests", "2.31.0"),
            ("flask>=2.0,<3", "flask", "2.0"),
            ("numpy", "numpy", "latest"),
            ("uvicorn[standard]~=0.23", "uvicorn", "0.23"),
            ("pytest >= 7.4  # test runner", "pytest", "7.4"),
            ('tomli>=2.0; python_version < "3.11"', "tomli", "2.0"),
        ],
    )
    def test_parses(self, line, name, version):
        dep = parse_requirement(line)
        assert (dep.name, dep.version) == (name, version)

    @pytest.mark.parametrize("line", ["", "   ", "# comment", "-r base.txt", "-e .", "--index-url x"])
    def test_skipped(self, line):
        assert parse_requirement(line) is None


class TestPythonParser:
    def test_requirements_txt(self, make_tree):
        root = make_tree({"requirements.txt": "# deps\nrequests==2.31.0\n-r dev.txt\nclick\n"})
        info = PythonParser().parse(root)
        assert info.python.build_system == "pip"
        assert [(d.name, d.version) for d in info.dependencies] == [
            ("requests", "2.31.0"),
            ("click", "latest"),
        ]

    def test_pep621_pyproject(self, make_tree):
        root = make_tree(
            {
                "pyproject.toml": (
                    '[build-system]\nbuild-backend = "hatchling.build"\n\n'
                    '[project]\nname = "x"\nrequires-python = ">=3.10"\n'
                    'dependencies = [\n  "httpx>=0.27",\n  "structlog",\n]\n\n'
                    '[project.optional-dependencies]\ndev = ["pytest>=8.0"]\n'
                )
            }
        )
        info = PythonParser().parse(root)
        assert info.python.build_system == "hatch"
        assert info.python.python_version == "3.10"
        assert [(d.name, d.version, d.is_dev) for d in info.dependencies] == [
            ("httpx", "0.27", False),
            ("structlog", "latest", False),
            ("pytest", "8.0", True),
        ]

    def test_poetry_pyproject(self, make_tree):
        root = make_tree(
            {
                "pyproject.toml": (
                    "[tool.poetry.dependencies]\n"
                    'python = "^3.11"\n'
                    'requests = "^2.31"\n'
                    'mylib = { path = "../mylib" }\n'
                    'anything = "*"\n\n'
                    "[tool.poetry.group.dev.dependencies]\n"
                    'pytest = "^7.4"\n\n'
                    "[tool.poetry.dev-dependencies]\n"
                    'black = "23.1"\n'
                )
            }
        )
        info = PythonParser().parse(root)
        assert info.python.build_system == "poetry"
        assert info.python.python_version == "3.11"
        assert [(d.name, d.version, d.is_dev) for d in info.dependencies] == [
            ("requests", "2.31", False),
            ("mylib", "specified", False),
            ("anything", "latest", False),
            ("pytest", "7.4", True),
            ("black", "23.1", True),
        ]

    def test_pipfile(self, make_tree):
        root = make_tree(
            {
                "Pipfile": (
                    '[packages]\nrequests = "*"\ndjango = "==4.2"\n'
                    'local = { editable = true, path = "." }\n\n'
                    '[dev-packages]\npytest = ">=7"\n\n'
                    '[requires]\npython_version = "3.12"\n'
                )
            }
        )
        info = PythonParser().parse(root)
        assert info.python.build_system == "pipenv"
        assert info.python.python_version == "3.12"
        assert [(d.name, d.version, d.is_dev) for d in info.dependencies] == [
            ("requests", "latest", False),
            ("django", "==4.2", False),
            ("local", "specified", False),
            ("pytest", ">=7", True),
        ]

    def test_pyproject_wins_over_requirements(self, make_tree):
        root = make_tree(
            {
                "pyproject.toml": '[project]\ndependencies = ["a>=1"]\n',
                "requirements.txt": "b==2\n",
            }
        )
        info = PythonParser().parse(root)
        assert [d.name for d in info.dependencies] == ["a"]

    def test_malformed_pyproject_falls_through(self, make_tree):
        root = make_tree({"pyproject.toml": "[project\n", "requirements.txt": "b==2\n"})
        info = PythonParser().parse(root)
        assert info.python.build_system == "pip"
        assert [d.name for d in info.dependencies] == ["b"]

    def test_empty_requirements_txt(self, make_tree):
        root = make_tree({"requirements.txt": ""})
        info = PythonParser().parse(root)
        assert info.python.build_system == "pip"
        assert info.dependencies == []

    def test_empty_pyproject(self, make_tree):
        root = make_tree({"pyproject.toml": ""})
        info = PythonParser().parse(root)
        assert info.python is not None
        assert info.dependencies == []

    def test_setup_py_only(self, make_tree):
        root = make_tree({"setup.py": "from setuptools import setup\nsetup()\n"})
        info = PythonParser().parse(root)
        assert info.python.build_system == "setuptools"
        assert info.dependencies == []

    def test_python_version_file_overrides(self, make_tree):
        root = make_tree(
            {
                "pyproject.toml": '[project]\nrequires-python = ">=3.9"\n',
                ".python-version": "3.12.1\n",
            }
        )
        assert PythonParser().parse(root).python.python_version == "3.12.1"

    def test_no_manifest(self, tmp_path):
        assert PythonParser().parse(tmp_path) == ProjectInfo(type="python")


# ── Go ───────────────────────────────────────────────────────────────────


class TestGoModParser:
    def test_indirect_in_require_block(self):
        info, deps = parse_go_mod("module m\n\nrequire (\n\tgithub.com/x/y v1.2.3 // indirect\n)\n")
        assert info.module_name == "m"
        assert deps == [Dependency(name="github.com/x/y", version="v1.2.3", is_indirect=True)]

    def test_full_go_mod(self, make_tree):
        root = make_tree(
            {
                "go.mod": (
                    "module github.com/acme/svc\n\ngo 1.22\n\n"
                    "require github.com/spf13/cobra v1.8.0\n\n"
                    "require (\n"
                    "\t// pinned\n"
                    "\tgolang.org/x/sync v0.6.0\n"
                    "\tgithub.com/inconshreveable/mousetrap v1.1.0 // indirect\n"
                    ")\n"
                )
            }
        )
        info = GoModParser().parse(root)
        assert info.go.module_name == "github.com/acme/svc"
        assert info.go.go_version == "1.22"
        assert [(d.name, d.is_indirect) for d in info.dependencies] == [
            ("github.com/spf13/cobra", False),
            ("golang.org/x/sync", False),
            ("github.com/inconshreveable/mousetrap", True),
        ]

    def test_missing_go_mod(self, tmp_path):
        assert GoModParser().parse(tmp_path) == ProjectInfo(type="go")


# ── Rust ─────────────────────────────────────────────────────────────────


class TestCargoTomlParser:
    def test_dependencies_and_package(self, make_tree):
        root = make_tree(
            {
                "Cargo.toml": (
                    '[package]\nname = "cli"\nedition = "2021"\nrust-version = "1.74"\n\n'
                    '[dependencies]\nserde = { version = "1.0", features = ["derive"] }\n'
                    'anyhow = "1"\nlocal = { path = "../local" }\n\n'
                    '[dev-dependencies]\ninsta = "1.34"\n\n'
                    '[build-dependencies]\ncc = "1.0"\n'
                )
            }
        )
        info = CargoTomlParser().parse(root)
        assert info.rust.name == "cli"
        assert info.rust.edition == "2021"
        assert info.rust.rust_version == "1.74"
        assert [(d.name, d.version, d.is_dev) for d in info.dependencies] == [
            ("serde", "1.0", False),
            ("anyhow", "1", False),
            ("local", "specified", False),
            ("insta", "1.34", True),
            ("cc", "1.0", True),
        ]

    def test_malformed_cargo(self, make_tree):
        root = make_tree({"Cargo.toml": "[package\n"})
        assert CargoTomlParser().parse(root) == ProjectInfo(type="rust")
