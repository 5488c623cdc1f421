"""Shared pytest fixtures for dirgo tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture
def make_tree(tmp_path):
    """Create files from a ``{relative_path: content}`` mapping under tmp_path.

    A value of ``None`` creates an empty directory; dict values are written
    as JSON.
    """

    def _make(files: dict[str, str | dict | None]) -> Path:
        for rel, content in files.items():
            path = tmp_path / rel
            if content is None:
                path.mkdir(parents=True, exist_ok=True)
                continue
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, dict):
                content = json.dumps(content)
            path.write_text(content)
        return tmp_path

    return _make
