"""Ecosystem parsers, auto-registered on import."""

from dirgo.parsers import (
    cargo_toml,  # noqa: F401
    go_mod,  # noqa: F401
    node,  # noqa: F401
    python,  # noqa: F401
)
from dirgo.parsers.registry import PARSER_REGISTRY, parse_project

__all__ = ["PARSER_REGISTRY", "parse_project"]
