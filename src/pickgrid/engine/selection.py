"""Selection helpers shared by the checklist and tag-style selectors. Selections are id lists."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from pickgrid.engine.matching import Item

DEFAULT_PLACEHOLDER = "Select kinds"
TOOLTIP_SEPARATOR = ",\n"


def select_items(items: Sequence[Item], ids: Sequence[str]) -> list[Item]:
    """Items for ids, in selection order. Ids with no item are skipped."""
    by_id = {item.id: item for item in items}
    return [by_id[i] for i in ids if i in by_id]


def unselected_items(items: Sequence[Item], ids: Sequence[str]) -> list[Item]:
    selected = set(ids)
    return [item for item in items if item.id not in selected]


def toggle(selected: Sequence[str], item_id: str) -> list[str]:
    """Remove item_id if selected, otherwise append it."""
    if item_id in selected:
        return remove(selected, item_id)
    return push(selected, item_id)


def push(selected: Sequence[str], item_id: str) -> list[str]:
    return [*selected, item_id]


def remove(selected: Sequence[str], item_id: str) -> list[str]:
    return [i for i in selected if i != item_id]


def replace(selected: Sequence[str], item_id: str, with_id: str) -> list[str]:
    """Swap item_id for with_id in place, keeping its position."""
    return [with_id if i == item_id else i for i in selected]


@dataclass
class SelectionSummary:
    """Collapsed description of a selection for a compact button."""

    shown: list[str]  # names displayed inline
    hidden: int  # how many more are selected ("+N more")
    tooltip: str | None  # every selected name, None when nothing is selected
    label: str

    @property
    def more_label(self) -> str | None:
        return f"+{self.hidden} more" if self.hidden > 0 else None


def summarize_selection(
    items: Sequence[Item],
    ids: Sequence[str],
    max_displayed: int = 3,
    placeholder: str = DEFAULT_PLACEHOLDER,
    count_label: str | None = None,
) -> SelectionSummary:
    """
    With count_label (e.g. "kinds") a non-empty selection reads "5 kinds" and
    no names are shown inline; the tooltip still lists every name.
    """
    selected = select_items(items, ids)
    names = [item.name for item in selected]
    tooltip = TOOLTIP_SEPARATOR.join(names) if names else None
    if count_label and names:
        return SelectionSummary(shown=[], hidden=0, tooltip=tooltip, label=f"{len(names)} {count_label}")
    shown = names[:max(max_displayed, 0)]
    return SelectionSummary(
        shown=shown,
        hidden=len(names) - len(shown),
        tooltip=tooltip,
        label=", ".join(shown) if names else placeholder,
    )


@dataclass
class BadgeLayout:
    """Which selected items get a badge, and which overflow control to show."""

    badges: list[Item] = field(default_factory=list)
    overflow: list[Item] = field(default_factory=list)  # collapsed behind the "more" button
    show_more: bool = False
    show_less: bool = False
    can_add: bool = False  # some item is still unselected

    @property
    def overflow_tooltip(self) -> str:
        return TOOLTIP_SEPARATOR.join(item.name for item in self.overflow)


def visible_badges(
    items: Sequence[Item],
    ids: Sequence[str],
    max_visible: int = 3,
    show_all: bool = False,
) -> BadgeLayout:
    """
    Lay out the tag-style selector. Beyond max_visible badges the rest collapse behind
    a "more" button until show_all is set, which offers "show less" instead.
    """
    selected = select_items(items, ids)
    overflowing = len(selected) > max_visible
    if show_all or not overflowing:
        badges, overflow = selected, []
    else:
        badges, overflow = selected[:max_visible], selected[max_visible:]
    return BadgeLayout(
        badges=badges,
        overflow=overflow,
        show_more=overflowing and not show_all,
        show_less=overflowing and show_all,
        can_add=bool(unselected_items(items, ids)),
    )
