"""Unit tests for selection edits, the collapsed summary and badge layout."""

from __future__ import annotations

import pytest

from pickgrid.engine.matching import Item
from pickgrid.engine.selection import (
    push,
    remove,
    replace,
    select_items,
    summarize_selection,
    toggle,
    unselected_items,
    visible_badges,
)


@pytest.fixture
def kinds() -> list[Item]:
    return [Item("a", "Alpha"), Item("b", "Beta"), Item("c", "Gamma"), Item("d", "Delta"), Item("e", "Epsilon")]


def test_toggle_adds_then_removes() -> None:
    selected = toggle([], "a")
    assert selected == ["a"]
    selected = toggle(selected, "b")
    assert selected == ["a", "b"]
    assert toggle(selected, "a") == ["b"]


def test_edits_do_not_mutate_input() -> None:
    selected = ["a", "b"]
    push(selected, "c")
    remove(selected, "a")
    replace(selected, "a", "z")
    assert selected == ["a", "b"]


def test_replace_keeps_position() -> None:
    assert replace(["a", "b", "c"], "b", "z") == ["a", "z", "c"]


def test_select_items_follows_selection_order(kinds) -> None:
    assert [i.name for i in select_items(kinds, ["c", "a", "missing"])] == ["Gamma", "Alpha"]
    assert [i.id for i in unselected_items(kinds, ["a", "c"])] == ["b", "d", "e"]


def test_summary_empty_uses_placeholder(kinds) -> None:
    summary = summarize_selection(kinds, [])
    assert summary.label == "Select kinds"
    assert summary.tooltip is None
    assert summary.more_label is None


def test_summary_collapses_after_max_displayed(kinds) -> None:
    summary = summarize_selection(kinds, ["a", "b", "c", "d", "e"], max_displayed=3)
    assert summary.shown == ["Alpha", "Beta", "Gamma"]
    assert summary.hidden == 2
    assert summary.more_label == "+2 more"
    assert summary.label == "Alpha, Beta, Gamma"
    assert summary.tooltip == "Alpha,\nBeta,\nGamma,\nDelta,\nEpsilon"


def test_summary_custom_placeholder(kinds) -> None:
    assert summarize_selection(kinds, [], placeholder="Pick").label == "Pick"


def test_summary_count_label(kinds) -> None:
    summary = summarize_selection(kinds, ["a", "b", "c", "d", "e"], count_label="kinds")
    assert summary.label == "5 kinds"
    assert summary.shown == []
    assert summary.more_label is None
    assert summary.tooltip == "Alpha,\nBeta,\nGamma,\nDelta,\nEpsilon"
    assert summarize_selection(kinds, ["b", "missing"], count_label="kinds").label == "1 kinds"
    empty = summarize_selection(kinds, [], count_label="kinds")
    assert empty.label == "Select kinds"
    assert empty.tooltip is None


def test_badges_collapse_and_expand(kinds) -> None:
    ids = ["a", "b", "c", "d"]
    collapsed = visible_badges(kinds, ids, max_visible=3)
    assert [i.id for i in collapsed.badges] == ["a", "b", "c"]
    assert [i.id for i in collapsed.overflow] == ["d"]
    assert collapsed.show_more and not collapsed.show_less
    assert collapsed.overflow_tooltip == "Delta"
    assert collapsed.can_add

    expanded = visible_badges(kinds, ids, max_visible=3, show_all=True)
    assert [i.id for i in expanded.badges] == ids
    assert expanded.overflow == []
    assert expanded.show_less and not expanded.show_more


def test_badges_without_overflow(kinds) -> None:
    layout = visible_badges(kinds, ["a"], max_visible=3, show_all=True)
    assert not layout.show_more and not layout.show_less
    assert [i.id for i in layout.badges] == ["a"]


def test_badges_cannot_add_when_everything_selected(kinds) -> None:
    layout = visible_badges(kinds, [k.id for k in kinds], max_visible=10)
    assert layout.can_add is False
