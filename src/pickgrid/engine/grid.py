"""
Grid row model: fuzzy cell matching, global/column filtering, sorting and pagination.

A row passes the filter when the global term matches at least one filterable
column and every column constraint matches at least one of the columns it
names. Pinned rows stay at the top through filtering and sorting.
"""

from __future__ import annotations

import copy
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Mapping, Sequence, TypeVar

from pickgrid.engine.columns import DEFAULT_COLUMN_SIZE, Column, FlatColumns, flatten_columns
from pickgrid.engine.filter_query import FilterState, parse_filter
from pickgrid.engine.layout import order_leaves, pin_rows, pinned_offsets
from pickgrid.engine.matching import MatchScore, score_match

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class CellMatch:
    """Outcome of matching one cell value against one term."""

    passed: bool
    rank: MatchScore


def match_cell(value: Any, term: str) -> CellMatch:
    """
    Match a cell value against term. Lists and tuples use their best-scoring element;
    None counts as an empty string and other values are stringified.
    """
    if isinstance(value, (list, tuple)):
        ranks = [score_match(_as_text(v), term) for v in value]
        rank = max(ranks, default=MatchScore.NO_MATCH)
    else:
        rank = score_match(_as_text(value), term)
    return CellMatch(passed=rank > MatchScore.NO_MATCH, rank=rank)


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


@dataclass
class GridView(Generic[T]):
    """What a presentation layer needs to draw one page of the grid."""

    rows: list[T]
    pinned_row_flags: list[bool]
    filtered_count: int
    page_index: int
    page_count: int
    column_ids: list[str]  # display order, pinned columns first
    sizes: dict[str, int]
    offsets: dict[str, int] = field(default_factory=dict)  # pinned columns only
    filter_state: FilterState = field(default_factory=FilterState)


class GridModel(Generic[T]):
    """Filter/sort/paginate rows against a column tree. Holds no state beyond its inputs."""

    def __init__(
        self,
        columns: Sequence[Column],
        rows: Sequence[T],
        pin_row: Callable[[T], bool] | None = None,
        page_size: int | None = None,
        default_size: int = DEFAULT_COLUMN_SIZE,
    ) -> None:
        self.columns = list(columns)
        self.flat: FlatColumns = flatten_columns(self.columns, default_size=default_size)
        self.pin_row = pin_row
        self.page_size = page_size if page_size and page_size > 0 else None
        self.default_size = default_size
        self.source_rows: list[T] = list(rows)  # caller order; edits address rows by position here
        self.rows: list[T] = pin_rows(self.source_rows, pin_row)

    def is_pinned(self, row: T) -> bool:
        return bool(self.pin_row and self.pin_row(row))

    def cell_text(self, row: T, leaf_id: str) -> Any:
        """Extractor output for row in leaf_id; None when the leaf is unknown or has no extractor."""
        leaf = self.flat.leaf(leaf_id)
        if leaf is None or leaf.text is None:
            return None
        return leaf.text(row)

    def _cell_matches(self, row: T, leaf_id: str, term: str) -> bool:
        value = self.cell_text(row, leaf_id)
        if value is None:
            return False
        return match_cell(value, term).passed

    def resolve_constraints(self, state: FilterState) -> list[tuple[str, list[str]]]:
        """
        (term, filterable leaf ids) per column constraint. Constraints naming no
        filterable column are dropped.
        """
        resolved: list[tuple[str, list[str]]] = []
        for constraint in state.column_constraints:
            ids = [i for i in self.flat.resolve(constraint.column) if self.flat.leaf(i).filterable]
            if not ids:
                logger.debug("Dropping filter on unknown column %r", constraint.column)
                continue
            resolved.append((constraint.term, ids))
        return resolved

    def row_passes(self, row: T, state: FilterState, constraints: list[tuple[str, list[str]]] | None = None) -> bool:
        if constraints is None:
            constraints = self.resolve_constraints(state)
        if state.global_term:
            if not any(
                self._cell_matches(row, leaf_id, state.global_term)
                for leaf_id in self.flat.filterable_ids()
            ):
                return False
        for term, ids in constraints:
            if not any(self._cell_matches(row, leaf_id, term) for leaf_id in ids):
                return False
        return True

    def filter_rows(self, raw_filter: str | FilterState | None = "") -> list[T]:
        """Rows passing the parsed filter, in current order (pinned rows first)."""
        state = raw_filter if isinstance(raw_filter, FilterState) else parse_filter(raw_filter)
        if state.is_empty():
            return list(self.rows)
        constraints = self.resolve_constraints(state)
        return [row for row in self.rows if self.row_passes(row, state, constraints)]

    def sort_rows(self, rows: Sequence[T], leaf_id: str | None, descending: bool = False) -> list[T]:
        """
        Stable sort by the leaf's extracted text (case-folded). Pinned rows stay first.
        Unknown leaves and leaves without an extractor keep the order unchanged.
        """
        leaf = self.flat.leaf(leaf_id) if leaf_id else None
        if leaf is None or leaf.text is None:
            return list(rows)

        def key(row: T) -> str:
            value = leaf.text(row)
            if isinstance(value, (list, tuple)):
                value = ", ".join(_as_text(v) for v in value)
            return _as_text(value).lower()

        ordered = sorted(rows, key=key, reverse=descending)
        return pin_rows(ordered, self.pin_row)

    def page_count(self, total: int) -> int:
        if self.page_size is None:
            return 1
        return max(1, math.ceil(total / self.page_size))

    def paginate(self, rows: Sequence[T], page_index: int = 0) -> tuple[list[T], int]:
        """Slice one page; page_index is clamped into range. Returns (page_rows, page_count)."""
        count = self.page_count(len(rows))
        if self.page_size is None:
            return list(rows), count
        index = min(max(page_index, 0), count - 1)
        start = index * self.page_size
        return list(rows[start:start + self.page_size]), count


    # --- cell edits ---

    def is_editable(self, leaf_id: str) -> bool:
        """Only leaves with a text extractor can be edited."""
        leaf = self.flat.leaf(leaf_id)
        return leaf is not None and leaf.filterable

    def row_position(self, row: T) -> int | None:
        """Position of row (by identity) in source_rows, e.g. for a row taken from a GridView."""
        for position, candidate in enumerate(self.source_rows):
            if candidate is row:
                return position
        return None

    def with_row(self, position: int, row: T) -> GridModel[T]:
        """New model with source_rows[position] replaced by row; pinning is re-applied."""
        rows = list(self.source_rows)
        rows[position] = row
        return GridModel(
            self.columns,
            rows,
            pin_row=self.pin_row,
            page_size=self.page_size,
            default_size=self.default_size,
        )

    def update_cell(self, position: int, leaf_id: str, value: Any) -> GridModel[T]:
        """
        New model where the row at position has value stored under the leaf's key.

        Dict rows are copied with the key replaced; other rows are shallow-copied
        and the attribute set. Unknown positions and non-editable leaves leave
        the model unchanged. The page a caller is showing does not depend on the
        model, so passing the same page_index to view() keeps it.
        """
        if not 0 <= position < len(self.source_rows):
            logger.debug("Ignoring edit of unknown row position %d", position)
            return self
        if not self.is_editable(leaf_id):
            logger.debug("Ignoring edit of non-editable column %r", leaf_id)
            return self
        key = self.flat.leaf(leaf_id).key or leaf_id
        old = self.source_rows[position]
        if isinstance(old, dict):
            new = {**old, key: value}
        else:
            new = copy.copy(old)
            setattr(new, key, value)
        return self.with_row(position, new)

    def view(
        self,
        raw_filter: str | None = "",
        sort_by: str | None = None,
        descending: bool = False,
        page_index: int = 0,
        sizes: Mapping[str, int] | None = None,
    ) -> GridView[T]:
        """Run the whole pipeline (filter, sort, paginate) and lay out the columns."""
        state = parse_filter(raw_filter)
        filtered = self.filter_rows(state)
        ordered = self.sort_rows(filtered, sort_by, descending)
        page_rows, count = self.paginate(ordered, page_index)
        leaves = order_leaves(self.flat)
        current_sizes = {leaf.id: (sizes or {}).get(leaf.id, leaf.size) for leaf in leaves}
        return GridView(
            rows=page_rows,
            pinned_row_flags=[self.is_pinned(row) for row in page_rows],
            filtered_count=len(filtered),
            page_index=min(max(page_index, 0), count - 1),
            page_count=count,
            column_ids=[leaf.id for leaf in leaves],
            sizes=current_sizes,
            offsets=pinned_offsets(leaves, self.flat.pinned_top_level_ids, current_sizes),
            filter_state=state,
        )
