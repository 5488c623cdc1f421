"""Structured JSON record of a scan result."""

from __future__ import annotations

import json
from dataclasses import asdict
from typing import Any

from dirgo.models import ContextResult, ScanResult
from dirgo.tokens import estimate_tokens

# Serialisation passes allowed for meta.bytes / meta.tokens to settle
_MAX_META_PASSES = 5

# TSConfig field -> tsconfig.json key
_TSCONFIG_KEYS = {
    "paths": "paths",
    "base_url": "baseUrl",
    "target": "target",
    "module": "module",
    "strict": "strict",
    "jsx": "jsx",
    "references": "references",
}


def _without_none(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _without_none(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [_without_none(v) for v in value]
    return value


def to_record(result: ScanResult) -> dict[str, Any]:
    """Build the JSON-ready dict; ``meta`` is left at zero."""
    info = result.project_info
    project: dict[str, Any] = {"type": info.type}
    if result.monorepo is not None:
        project["monorepo"] = {
            "type": result.monorepo.type,
            "packages": [{"name": p.name, "path": p.path} for p in result.monorepo.packages],
        }
    if info.details is not None:
        details = _without_none(asdict(info.details))
        details.pop("tsconfig", None)  # rendered under "config"
        project["details"] = details

    record: dict[str, Any] = {
        "project": project,
        "structure": [
            _without_none(
                {
                    "path": e.relative_path,
                    "type": "directory" if e.is_directory else "file",
                    "depth": e.depth,
                    "size": e.size,
                }
            )
            for e in result.entries
        ],
        "dependencies": [
            {"name": d.name, "version": d.version, "dev": d.is_dev, "indirect": d.is_indirect}
            for d in info.dependencies
        ],
    }
    if info.node is not None and info.node.tsconfig is not None:
        tsconfig = asdict(info.node.tsconfig)
        record["config"] = {
            "tsconfig": {
                _TSCONFIG_KEYS[key]: value for key, value in tsconfig.items() if value is not None
            }
        }
    record["meta"] = {"bytes": 0, "tokens": 0}
    return record


def _dump(record: dict[str, Any]) -> str:
    return json.dumps(record, indent=2, ensure_ascii=False)


def format_json(result: ScanResult) -> ContextResult:
    """Serialise *result*; ``meta`` describes the size of the final text itself."""
    record = to_record(result)
    text = _dump(record)
    for _ in range(_MAX_META_PASSES):
        size = len(text.encode("utf-8"))
        tokens = estimate_tokens(text)
        if record["meta"] == {"bytes": size, "tokens": tokens}:
            break
        record["meta"] = {"bytes": size, "tokens": tokens}
        text = _dump(record)
    return ContextResult(text=text, bytes=len(text.encode("utf-8")), tokens=estimate_tokens(text))
