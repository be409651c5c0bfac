"""JSON / JSONL / text file helpers with atomic replace-on-write."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from filing_rag.errors import StorageError

logger = logging.getLogger(__name__)


def read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise StorageError(f"Failed to read {path}: {exc}") from exc


def read_json(path: Path) -> Any | None:
    """Parse a JSON file, returning ``None`` when it does not exist."""
    if not path.is_file():
        return None
    raw = read_text(path)
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise StorageError(f"Corrupt JSON in {path}: {exc}") from exc


def write_json(path: Path, data: Any, indent: int | None = None) -> None:
    """Serialize ``data`` and atomically replace ``path``.

    ``indent=None`` writes compact JSON with no whitespace between tokens.
    """
    if indent is None:
        content = json.dumps(data, ensure_ascii=False, separators=(",", ":"))
    else:
        content = json.dumps(data, ensure_ascii=False, indent=indent)
    atomic_write(path, content)


def read_jsonl(path: Path) -> list[dict[str, Any]]:
    """Read one JSON object per non-blank line."""
    rows: list[dict[str, Any]] = []
    for line_no, line in enumerate(read_text(path).splitlines(), start=1):
        if not line.strip():
            continue
        try:
            rows.append(json.loads(line))
        except json.JSONDecodeError as exc:
            raise StorageError(f"Corrupt JSONL in {path} at line {line_no}: {exc}") from exc
    return rows


def write_jsonl(path: Path, rows: list[dict[str, Any]]) -> None:
    content = "\n".join(
        json.dumps(row, ensure_ascii=False, separators=(",", ":")) for row in rows
    )
    atomic_write(path, content)


def atomic_write(path: Path, content: str) -> None:
    """Write to a sibling temp file, then ``os.replace`` it over ``path``.

    Readers see either the old file or the new one, never a partial write.
    """
    tmp_name: str | None = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as tmp:
            tmp_name = tmp.name
            tmp.write(content)
    except OSError as exc:
        if tmp_name is not None:
            Path(tmp_name).unlink(missing_ok=True)
        raise StorageError(f"Failed to write {path}: {exc}") from exc

    try:
        os.replace(tmp_name, path)
    except OSError as exc:
        Path(tmp_name).unlink(missing_ok=True)
        raise StorageError(f"Failed to replace {path}: {exc}") from exc

    logger.debug("Wrote %s (%d chars)", path, len(content))
