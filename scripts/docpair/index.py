"""JSON documents handed to the renderer: per-file sections and the type registry."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from scripts.docpair.paths import PathResolver
from scripts.docpair.pipeline import ParsedFile, RunResult
from scripts.docpair.registry import TypeRegistry

SCHEMA_VERSION = "1.0"


def _file_entry(parsed: ParsedFile) -> dict[str, Any]:
    return {
        "size": parsed.size,
        "line_count": parsed.line_count,
        "output_path": PathResolver.output_path(parsed.rel_path),
        "sections": [s.to_dict() for s in parsed.sections],
    }


def build_sections_index(result: RunResult) -> dict[str, Any]:
    """Build the sections index structure for a run."""
    return {
        "schema_version": SCHEMA_VERSION,
        "generated": datetime.now(timezone.utc).isoformat(),
        "file_count": len(result.files),
        "files": {parsed.rel_path: _file_entry(parsed) for parsed in result.files},
        "failures": [failure.to_json() for failure in result.failures],
    }


def build_types_index(registry: TypeRegistry) -> dict[str, Any]:
    """Build the types index structure for a registry."""
    return {
        "schema_version": SCHEMA_VERSION,
        "generated": datetime.now(timezone.utc).isoformat(),
        "type_count": len(registry),
        "types": registry.to_list(),
    }


def save_index(data: dict[str, Any], path: Path) -> None:
    """Write an index document, creating parent directories.

    Args:
        data: Index structure
        path: Output path
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


def load_index(path: Path) -> Optional[dict[str, Any]]:
    """Load an index document.

    Returns:
        The index, or None if not found or unreadable
    """
    if not path.exists():
        return None

    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError:
        return None


def load_types_index(path: Path) -> Optional[TypeRegistry]:
    """Rebuild a TypeRegistry from a saved types index."""
    index = load_index(path)
    if index is None:
        return None
    return TypeRegistry.from_list(index.get("types", []))
