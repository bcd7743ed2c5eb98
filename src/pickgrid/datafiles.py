"""Reading rows, items and column specs from JSON/CSV files (or stdin) for the CLI and viewer."""

from __future__ import annotations

import csv
import io
import json
import sys
from pathlib import Path
from typing import Any, TextIO

from pickgrid.engine.columns import Column, columns_from_rows, columns_from_spec
from pickgrid.engine.matching import Item


class DataFileError(ValueError):
    """Raised when an input file is missing or has an unexpected shape."""


def _read_text(path: Path | None, stdin: TextIO | None = None) -> str:
    if path is None or str(path) == "-":
        return (stdin or sys.stdin).read()
    if not path.is_file():
        raise DataFileError(f"File not found: {path}")
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise DataFileError(f"Cannot read {path}: {e}") from e


def _parse_json(text: str, source: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise DataFileError(f"Invalid JSON in {source}: {e}") from e


def load_rows(path: Path | None, stdin: TextIO | None = None) -> list[dict[str, Any]]:
    """
    Load table rows. Files ending in .csv are read with a header row; anything
    else must be a JSON array of objects.
    """
    text = _read_text(path, stdin)
    source = str(path) if path else "stdin"
    if path is not None and path.suffix.lower() == ".csv":
        return [dict(row) for row in csv.DictReader(io.StringIO(text))]
    data = _parse_json(text, source)
    if not isinstance(data, list) or not all(isinstance(r, dict) for r in data):
        raise DataFileError(f"{source} must contain a JSON array of objects")
    return data


def load_items(path: Path | None, stdin: TextIO | None = None) -> list[Item]:
    """
    Load selectable items: a JSON array of {"id", "name"} objects or of plain strings
    (the string is both id and name). A missing name falls back to the id.
    """
    source = str(path) if path else "stdin"
    data = _parse_json(_read_text(path, stdin), source)
    if not isinstance(data, list):
        raise DataFileError(f"{source} must contain a JSON array")
    items: list[Item] = []
    for i, entry in enumerate(data):
        if isinstance(entry, str):
            items.append(Item(id=entry, name=entry))
        elif isinstance(entry, dict) and entry.get("id") is not None:
            item_id = str(entry["id"])
            name = entry.get("name")
            items.append(Item(id=item_id, name=str(name) if name is not None else item_id))
        else:
            raise DataFileError(f"{source}: entry {i} must be a string or an object with an 'id'")
    return items


def load_columns(path: Path | None, rows: list[dict[str, Any]]) -> list[Column]:
    """Column tree from a JSON spec file, or one column per key of the first row when path is None."""
    if path is None:
        return columns_from_rows(rows)
    return columns_from_spec(_parse_json(_read_text(path), str(path)))
