"""Renderers for scan results: connector tree, indentation (toon) and JSON."""

from dirgo.formatters.json import format_json
from dirgo.formatters.toon import format_toon
from dirgo.formatters.tree import format_tree

__all__ = ["format_json", "format_toon", "format_tree"]
