"""
Module 05 - Artifact Packaging & IO
File: io.py

Purpose: JSON document IO for manifests, sidecars, indexes and
submission bundles.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from picopak.schemas.errors import FormatError, NotFoundError


def dump_json(obj: Any) -> str:
    """Serialize to the pretty JSON written to disk (2-space indent, trailing newline)."""
    if hasattr(obj, "to_document"):
        data = obj.to_document()
    elif hasattr(obj, "model_dump"):
        data = obj.model_dump(mode="json", exclude_none=True)
    else:
        data = obj
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def write_json_file(path: str | Path, obj: Any) -> Path:
    """Write a JSON document, creating parent directories."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(dump_json(obj), encoding="utf-8")
    return out


def read_json_file(path: str | Path, *, what: str = "JSON") -> Any:
    """
    Read and parse a JSON document.

    Raises:
        NotFoundError: File does not exist
        FormatError: File is not valid JSON
    """
    src = Path(path)
    if not src.is_file():
        raise NotFoundError(f"{what} file not found: {src}", details={"path": str(src)})
    try:
        return json.loads(src.read_text(encoding="utf-8"))
    except ValueError as e:
        raise FormatError(f"Failed to parse {what}: {src}\n{e}", details={"path": str(src)}) from e
