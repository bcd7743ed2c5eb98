"""Column tree model: leaf/group columns, flattening, name index, and JSON column specs."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Sequence, Union

logger = logging.getLogger(__name__)

DEFAULT_COLUMN_SIZE = 256

# Returns the text used for filtering and sorting a row in this column
TextExtractor = Callable[[Any], Any]


class ColumnSpecError(ValueError):
    """Raised when a column spec (e.g. loaded from JSON) cannot be turned into columns."""


@dataclass
class LeafColumn:
    """An addressable column with no children. Columns without `text` display but never filter."""

    id: str
    name: str | None = None
    text: TextExtractor | None = None
    size: int | None = None
    min_size: int | None = None
    max_size: int | None = None
    enable_resizing: bool | None = None
    pin: bool = False
    key: str | None = None  # row key written by cell edits; defaults to the id
    kind: str = field(default="leaf", init=False)


@dataclass
class GroupColumn:
    """A header grouping other columns. Only its leaves are addressable."""

    id: str
    children: list[Column] = field(default_factory=list)
    name: str | None = None
    text: TextExtractor | None = None
    enable_resizing: bool | None = None
    pin: bool = False
    kind: str = field(default="group", init=False)


Column = Union[LeafColumn, GroupColumn]


@dataclass(frozen=True)
class FlatLeaf:
    """A leaf column with names and sizes resolved."""

    id: str
    name: str
    size: int
    min_size: int | None
    max_size: int | None
    enable_resizing: bool
    text: TextExtractor | None
    depth: int  # 0 for top-level leaves
    top_level_id: str  # id of the top-level column this leaf sits under
    key: str | None = None

    @property
    def filterable(self) -> bool:
        return self.text is not None


@dataclass
class FlatColumns:
    """Result of flattening a column tree."""

    leaves: list[FlatLeaf] = field(default_factory=list)
    name_index: dict[str, list[str]] = field(default_factory=dict)  # lower-cased name -> leaf ids
    pinned_top_level_ids: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        # Duplicate ids: the last leaf wins
        self._by_id = {leaf.id: leaf for leaf in self.leaves}

    def leaf(self, leaf_id: str) -> FlatLeaf | None:
        return self._by_id.get(leaf_id)

    def resolve(self, column_name: str) -> list[str]:
        """Leaf ids whose display name equals column_name (case-insensitive); [] if none."""
        return list(self.name_index.get(column_name.lower(), []))

    def filterable_ids(self) -> list[str]:
        return [leaf.id for leaf in self.leaves if leaf.filterable]


def flatten_columns(
    columns: Sequence[Column],
    default_size: int = DEFAULT_COLUMN_SIZE,
) -> FlatColumns:
    """
    Walk the column tree depth-first and collect leaves, the name index and pinned ids.

    Pin flags count on top-level columns only. Leaf ids are expected to be unique;
    duplicates are logged and the later leaf wins in FlatColumns.leaf().
    """
    leaves: list[FlatLeaf] = []
    pinned: list[str] = []
    for column in columns:
        if column.pin:
            pinned.append(column.id)
        _collect_leaves(column, column.id, 0, True, default_size, leaves)

    name_index: dict[str, list[str]] = {}
    seen: set[str] = set()
    for leaf in leaves:
        if leaf.id in seen:
            logger.warning("Duplicate column id %r; the last definition wins", leaf.id)
        seen.add(leaf.id)
        name_index.setdefault(leaf.name.lower(), []).append(leaf.id)

    return FlatColumns(leaves=leaves, name_index=name_index, pinned_top_level_ids=pinned)


def _collect_leaves(
    column: Column,
    top_level_id: str,
    depth: int,
    inherited_resizing: bool,
    default_size: int,
    out: list[FlatLeaf],
) -> None:
    resizing = inherited_resizing if column.enable_resizing is None else column.enable_resizing
    if isinstance(column, GroupColumn):
        for child in column.children:
            _collect_leaves(child, top_level_id, depth + 1, resizing, default_size, out)
        return
    out.append(
        FlatLeaf(
            id=column.id,
            name=column.name or column.id,
            size=column.size if column.size is not None else default_size,
            min_size=column.min_size,
            max_size=column.max_size,
            enable_resizing=resizing,
            text=column.text,
            depth=depth,
            top_level_id=top_level_id,
            key=column.key or column.id,
        )
    )


def header_rows(columns: Sequence[Column]) -> list[list[tuple[str, int]]]:
    """
    Header labels per depth as (name, span) pairs, top row first.

    Leaves shallower than the deepest level get an empty placeholder above them,
    so each row spans the same number of leaf columns.
    """
    depth = _max_depth(columns)
    rows: list[list[tuple[str, int]]] = [[] for _ in range(depth)]

    def walk(column: Column, level: int) -> int:
        if isinstance(column, GroupColumn):
            span = sum(walk(child, level + 1) for child in column.children)
            if span:
                rows[level].append((column.name or column.id, span))
            return span
        for placeholder in range(level, depth - 1):
            rows[placeholder].append(("", 1))
        rows[depth - 1].append((column.name or column.id, 1))
        return 1

    for column in columns:
        walk(column, 0)
    return rows


def _max_depth(columns: Sequence[Column]) -> int:
    best = 1
    for column in columns:
        if isinstance(column, GroupColumn) and column.children:
            best = max(best, 1 + _max_depth(column.children))
    return best


# --- JSON column specs ---

_SPEC_KEYS = {"id", "name", "field", "size", "min_size", "max_size", "enable_resizing", "pin", "children"}


def field_extractor(key: str) -> TextExtractor:
    """Text extractor reading row[key]; None becomes '' and lists are joined with ', '."""

    def extract(row: Any) -> str:
        value = row.get(key) if isinstance(row, dict) else getattr(row, key, None)
        if value is None:
            return ""
        if isinstance(value, (list, tuple)):
            return ", ".join("" if v is None else str(v) for v in value)
        return str(value)

    return extract


def columns_from_spec(spec: Any) -> list[Column]:
    """
    Build a column tree from JSON-like data.

    Each entry is a dict with an "id" and optional "name", "size", "min_size",
    "max_size", "enable_resizing", "pin". Entries with "children" become groups.
    Leaves read their text from row["field"] (default: the id); "field": null
    makes the column display-only. Raises ColumnSpecError on malformed input.
    """
    if not isinstance(spec, list):
        raise ColumnSpecError("Column spec must be a list of column objects")
    return [_column_from_entry(entry, f"[{i}]") for i, entry in enumerate(spec)]


def _column_from_entry(entry: Any, where: str) -> Column:
    if not isinstance(entry, dict):
        raise ColumnSpecError(f"Column {where} must be an object")
    column_id = entry.get("id")
    if not isinstance(column_id, str) or not column_id:
        raise ColumnSpecError(f"Column {where} needs a non-empty string 'id'")
    unknown = set(entry) - _SPEC_KEYS
    if unknown:
        logger.debug("Ignoring unknown keys %s in column %s", sorted(unknown), column_id)
    name = entry.get("name")
    if name is not None and not isinstance(name, str):
        raise ColumnSpecError(f"Column {column_id!r}: 'name' must be a string")
    pin = bool(entry.get("pin", False))
    resizing = entry.get("enable_resizing")
    if resizing is not None:
        resizing = bool(resizing)

    if "children" in entry:
        children = entry["children"]
        if not isinstance(children, list):
            raise ColumnSpecError(f"Column {column_id!r}: 'children' must be a list")
        field_key = entry.get("field")
        return GroupColumn(
            id=column_id,
            children=[_column_from_entry(c, f"{where}.children[{i}]") for i, c in enumerate(children)],
            name=name,
            text=field_extractor(field_key) if isinstance(field_key, str) else None,
            enable_resizing=resizing,
            pin=pin,
        )

    field_key = entry.get("field", column_id)
    if field_key is not None and not isinstance(field_key, str):
        raise ColumnSpecError(f"Column {column_id!r}: 'field' must be a string or null")
    return LeafColumn(
        id=column_id,
        name=name,
        text=field_extractor(field_key) if field_key is not None else None,
        size=_size(entry, "size", column_id),
        min_size=_size(entry, "min_size", column_id),
        max_size=_size(entry, "max_size", column_id),
        enable_resizing=resizing,
        pin=pin,
        key=field_key,
    )


def _size(entry: dict, key: str, column_id: str) -> int | None:
    value = entry.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ColumnSpecError(f"Column {column_id!r}: {key!r} must be a positive number")
    return int(value)


def columns_from_rows(rows: Sequence[dict]) -> list[Column]:
    """One filterable leaf per key of the first row, in key order."""
    if not rows or not isinstance(rows[0], dict):
        return []
    return [LeafColumn(id=str(key), text=field_extractor(key), key=key) for key in rows[0]]
