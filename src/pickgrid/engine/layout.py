"""Row pinning, pinned-column ordering, sticky offsets and resize bounds."""

from __future__ import annotations

from typing import Callable, Iterable, Mapping, Sequence, TypeVar

from pickgrid.engine.columns import FlatColumns, FlatLeaf

T = TypeVar("T")


def pin_rows(rows: Iterable[T], predicate: Callable[[T], bool] | None) -> list[T]:
    """
    Stable two-way partition: rows where predicate is true first, then the rest.

    Both partitions keep their original relative order. With no predicate the
    rows are returned unchanged (as a new list).
    """
    if predicate is None:
        return list(rows)
    pinned: list[T] = []
    others: list[T] = []
    for row in rows:
        if predicate(row):
            pinned.append(row)
        else:
            others.append(row)
    return pinned + others


def order_leaves(flat: FlatColumns) -> list[FlatLeaf]:
    """Leaves under pinned top-level columns first (in pin order), then the rest in declaration order."""
    pinned = set(flat.pinned_top_level_ids)
    front: list[FlatLeaf] = []
    for top_id in flat.pinned_top_level_ids:
        front.extend(leaf for leaf in flat.leaves if leaf.top_level_id == top_id)
    back = [leaf for leaf in flat.leaves if leaf.top_level_id not in pinned]
    return front + back


def column_offsets(sizes: Sequence[int]) -> list[int]:
    """Cumulative left offsets: offsets[0] == 0 and offsets[i] == offsets[i-1] + sizes[i-1]."""
    offsets: list[int] = []
    left = 0
    for size in sizes:
        offsets.append(left)
        left += size
    return offsets


def pinned_offsets(
    leaves: Sequence[FlatLeaf],
    pinned_top_level_ids: Iterable[str],
    sizes: Mapping[str, int] | None = None,
) -> dict[str, int]:
    """
    Left offset of each leaf under a pinned top-level column.

    leaves must already be in display order (see order_leaves). sizes overrides
    a leaf's resolved size, e.g. after the user resized it. Unpinned leaves get no
    offset since they scroll with the table.
    """
    sizes = sizes or {}
    widths = [sizes.get(leaf.id, leaf.size) for leaf in leaves]
    pinned = set(pinned_top_level_ids)
    return {
        leaf.id: left
        for leaf, left in zip(leaves, column_offsets(widths))
        if leaf.top_level_id in pinned
    }


def clamp_size(size: int, min_size: int | None = None, max_size: int | None = None) -> int:
    """Clamp a requested column width into [min_size, max_size]; None is an open bound."""
    if max_size is not None and size > max_size:
        size = max_size
    # Minimum applied last so it wins when the bounds conflict
    if min_size is not None and size < min_size:
        size = min_size
    return size


def resize_leaf(leaf: FlatLeaf, requested: int) -> int:
    """New width for leaf after a resize request; unchanged when the leaf is not resizable."""
    if not leaf.enable_resizing:
        return leaf.size
    return clamp_size(requested, leaf.min_size, leaf.max_size)
