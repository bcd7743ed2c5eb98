"""Filtering, ranking and layout engine shared by the selectors and the grid."""

from pickgrid.engine.columns import (
    DEFAULT_COLUMN_SIZE,
    Column,
    ColumnSpecError,
    FlatColumns,
    FlatLeaf,
    GroupColumn,
    LeafColumn,
    columns_from_rows,
    columns_from_spec,
    field_extractor,
    flatten_columns,
    header_rows,
)
from pickgrid.engine.filter_query import ColumnConstraint, FilterState, describe_filter, parse_filter
from pickgrid.engine.grid import CellMatch, GridModel, GridView, match_cell
from pickgrid.engine.layout import (
    clamp_size,
    column_offsets,
    order_leaves,
    pin_rows,
    pinned_offsets,
    resize_leaf,
)
from pickgrid.engine.matching import Item, MatchScore, escape_probe, rank_items, rank_scored, score_match
from pickgrid.engine.selection import (
    BadgeLayout,
    SelectionSummary,
    push,
    remove,
    replace,
    select_items,
    summarize_selection,
    toggle,
    unselected_items,
    visible_badges,
)

__all__ = [
    "BadgeLayout",
    "CellMatch",
    "Column",
    "ColumnConstraint",
    "ColumnSpecError",
    "DEFAULT_COLUMN_SIZE",
    "FilterState",
    "FlatColumns",
    "FlatLeaf",
    "GridModel",
    "GridView",
    "GroupColumn",
    "Item",
    "LeafColumn",
    "MatchScore",
    "SelectionSummary",
    "clamp_size",
    "column_offsets",
    "columns_from_rows",
    "columns_from_spec",
    "describe_filter",
    "escape_probe",
    "field_extractor",
    "flatten_columns",
    "header_rows",
    "match_cell",
    "order_leaves",
    "parse_filter",
    "pin_rows",
    "pinned_offsets",
    "push",
    "rank_items",
    "rank_scored",
    "remove",
    "replace",
    "resize_leaf",
    "score_match",
    "select_items",
    "summarize_selection",
    "toggle",
    "unselected_items",
    "visible_badges",
]
