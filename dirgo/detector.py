"""Project type detection from manifest marker files."""

from __future__ import annotations

import logging
from pathlib import Path

from dirgo.models import ProjectType
from dirgo.utils.fs import exists

logger = logging.getLogger(__name__)

# Detection rules: (marker_file, project_type)
# Ordered by priority
DETECTION_RULES: tuple[tuple[str, ProjectType], ...] = (
    ("package.json", "node"),
    ("Cargo.toml", "rust"),
    ("go.mod", "go"),
    ("pyproject.toml", "python"),
    ("requirements.txt", "python"),
    ("Pipfile", "python"),
    ("setup.py", "python"),
)


def detect_project_type(root: str | Path) -> ProjectType:
    """Return the type of the first marker file found, or ``"unknown"``."""
    base = Path(root)
    for marker_file, project_type in DETECTION_RULES:
        if exists(base / marker_file):
            logger.debug("Detected %s project (found %s)", project_type, marker_file)
            return project_type
    return "unknown"
