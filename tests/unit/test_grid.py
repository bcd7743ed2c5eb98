"""Unit tests for grid filtering, sorting, pinning and pagination."""

from __future__ import annotations

from pickgrid.engine.columns import LeafColumn, columns_from_spec, field_extractor
from pickgrid.engine.filter_query import FilterState
from pickgrid.engine.grid import GridModel, match_cell
from pickgrid.engine.matching import MatchScore


def _ids(rows) -> list[str]:
    return [row["id"] for row in rows]


# --- match_cell ---


def test_match_cell_scalar_and_none() -> None:
    assert match_cell("jhon@gmail.com", "gmail").passed
    assert match_cell(None, "x").passed is False
    assert match_cell(42, "4").rank == MatchScore.PARTIAL_MATCH


def test_match_cell_list_uses_best_element() -> None:
    result = match_cell(["abc", "BC", "bc"], "bc")
    assert result.passed
    assert result.rank == MatchScore.EQUAL
    assert match_cell([], "x").passed is False


# --- filtering ---


def test_filter_by_column(people, person_columns) -> None:
    grid = GridModel(person_columns, people)
    assert _ids(grid.filter_rows("email:gmail")) == ["1", "3"]


def test_filter_global_term(people, person_columns) -> None:
    grid = GridModel(person_columns, people)
    assert _ids(grid.filter_rows("gmail")) == ["1", "3"]
    assert _ids(grid.filter_rows("jo")) == ["3"]


def test_filter_column_names_are_case_insensitive(people, person_columns) -> None:
    grid = GridModel(person_columns, people)
    assert _ids(grid.filter_rows("EMAIL:yahoo")) == ["2"]


def test_filter_constraints_and_together(people, person_columns) -> None:
    grid = GridModel(person_columns, people)
    assert _ids(grid.filter_rows("name:o;email:gmail")) == ["1", "3"]
    assert _ids(grid.filter_rows("gmail;name:foo")) == []


def test_filter_empty_returns_all(people, person_columns) -> None:
    grid = GridModel(person_columns, people)
    assert _ids(grid.filter_rows("")) == ["1", "2", "3"]
    assert _ids(grid.filter_rows(None)) == ["1", "2", "3"]
    assert _ids(grid.filter_rows(FilterState())) == ["1", "2", "3"]


def test_filter_unknown_column_is_dropped(people, person_columns) -> None:
    grid = GridModel(person_columns, people)
    assert _ids(grid.filter_rows("phone:123")) == ["1", "2", "3"]


def test_filter_on_group_name_is_dropped(people, person_columns) -> None:
    """Group columns are not addressable; only leaves are in the name index."""
    grid = GridModel(person_columns, people)
    assert _ids(grid.filter_rows("person:jhon")) == ["1", "2", "3"]


def test_filter_shared_name_matches_any_column(people) -> None:
    columns = [
        LeafColumn(id="name", name="contact", text=field_extractor("name")),
        LeafColumn(id="email", name="contact", text=field_extractor("email")),
    ]
    grid = GridModel(columns, people)
    assert _ids(grid.filter_rows("contact:yahoo")) == ["2"]
    assert _ids(grid.filter_rows("contact:jhon")) == ["1"]


def test_display_only_columns_never_match(people) -> None:
    columns = [LeafColumn(id="name")]
    grid = GridModel(columns, people)
    assert grid.filter_rows("jhon") == []
    # a constraint on a display-only column resolves to nothing and is dropped
    assert _ids(grid.filter_rows("name:zzz")) == ["1", "2", "3"]


def test_filter_keeps_pinned_rows_first(people, person_columns) -> None:
    grid = GridModel(person_columns, people, pin_row=lambda r: r["id"] == "3")
    assert _ids(grid.rows) == ["3", "1", "2"]
    assert _ids(grid.filter_rows("gmail")) == ["3", "1"]


# --- sorting ---


def test_sort_ascending_and_descending(people, person_columns) -> None:
    grid = GridModel(person_columns, people)
    assert _ids(grid.sort_rows(people, "name")) == ["3", "2", "1"]
    assert _ids(grid.sort_rows(people, "name", descending=True)) == ["1", "2", "3"]


def test_sort_keeps_pinned_rows_first(people, person_columns) -> None:
    grid = GridModel(person_columns, people, pin_row=lambda r: r["id"] == "3")
    rows = grid.filter_rows("")
    assert _ids(grid.sort_rows(rows, "name")) == ["3", "2", "1"]
    assert _ids(grid.sort_rows(rows, "name", descending=True)) == ["3", "1", "2"]


def test_sort_is_case_insensitive_and_stable() -> None:
    rows = [{"id": "1", "k": "b"}, {"id": "2", "k": "A"}, {"id": "3", "k": "a"}]
    grid = GridModel([LeafColumn(id="k", text=field_extractor("k"))], rows)
    assert _ids(grid.sort_rows(rows, "k")) == ["2", "3", "1"]


def test_sort_unknown_or_display_only_leaf_keeps_order(people) -> None:
    grid = GridModel([LeafColumn(id="name")], people)
    assert _ids(grid.sort_rows(people, "name")) == ["1", "2", "3"]
    assert _ids(grid.sort_rows(people, "missing")) == ["1", "2", "3"]
    assert _ids(grid.sort_rows(people, None)) == ["1", "2", "3"]


# --- pagination ---


def test_paginate_and_clamp(people, person_columns) -> None:
    grid = GridModel(person_columns, people, page_size=2)
    page, count = grid.paginate(people, 0)
    assert count == 2
    assert _ids(page) == ["1", "2"]
    assert _ids(grid.paginate(people, 5)[0]) == ["3"]
    assert _ids(grid.paginate(people, -1)[0]) == ["1", "2"]


def test_paginate_without_page_size(people, person_columns) -> None:
    grid = GridModel(person_columns, people, page_size=0)
    assert grid.page_size is None
    page, count = grid.paginate(people, 3)
    assert count == 1
    assert len(page) == 3


def test_page_count_for_empty_result(person_columns) -> None:
    grid = GridModel(person_columns, [], page_size=10)
    assert grid.page_count(0) == 1


# --- view ---


def test_view_lays_out_pinned_columns(people, person_spec) -> None:
    grid = GridModel(columns_from_spec(person_spec), people, page_size=2)
    view = grid.view("gmail", sort_by="name", descending=True, page_index=0)
    assert view.column_ids == ["name", "email", "notes"]
    assert view.sizes == {"name": 200, "email": 400, "notes": 100}
    assert view.offsets == {"name": 0, "email": 200}
    assert view.filtered_count == 2
    assert view.page_count == 1
    assert _ids(view.rows) == ["1", "3"]
    assert view.filter_state.global_term == "gmail"


def test_view_flags_pinned_rows_and_clamps_page(people, person_columns) -> None:
    grid = GridModel(person_columns, people, pin_row=lambda r: r["id"] == "2", page_size=2)
    view = grid.view(page_index=9)
    assert view.page_index == 1
    assert view.page_count == 2
    assert _ids(view.rows) == ["3"]
    assert view.pinned_row_flags == [False]
    first = grid.view()
    assert _ids(first.rows) == ["2", "1"]
    assert first.pinned_row_flags == [True, False]


def test_view_applies_size_overrides(people, person_spec) -> None:
    grid = GridModel(columns_from_spec(person_spec), people)
    view = grid.view(sizes={"name": 150})
    assert view.sizes["name"] == 150
    assert view.offsets == {"name": 0, "email": 150}


# --- cell edits ---


def test_update_cell_replaces_one_row(people, person_columns) -> None:
    grid = GridModel(person_columns, people)
    edited = grid.update_cell(1, "name", "Bar")
    assert edited is not grid
    assert [r["name"] for r in edited.source_rows] == ["Jhon", "Bar", "Dojo"]
    # the input rows and the old model are untouched
    assert people[1]["name"] == "Foo"
    assert grid.source_rows[1]["name"] == "Foo"
    assert _ids(edited.filter_rows("name:bar")) == ["2"]


def test_update_cell_writes_the_leaf_key(people) -> None:
    columns = columns_from_spec([{"id": "mail", "field": "email"}, {"id": "name"}])
    grid = GridModel(columns, people)
    edited = grid.update_cell(0, "mail", "jhon@yahoo.com")
    assert edited.source_rows[0]["email"] == "jhon@yahoo.com"
    assert "mail" not in edited.source_rows[0]


def test_update_cell_reapplies_row_pinning(people, person_columns) -> None:
    grid = GridModel(person_columns, people, pin_row=lambda r: r["name"].startswith("P"))
    assert _ids(grid.rows) == ["1", "2", "3"]
    edited = grid.update_cell(2, "name", "Pat")
    assert _ids(edited.rows) == ["3", "1", "2"]


def test_update_cell_keeps_settings_and_page(people, person_columns) -> None:
    grid = GridModel(person_columns, people, page_size=2, default_size=90)
    before = grid.view(page_index=1)
    edited = grid.update_cell(2, "email", "dojo@mail.com")
    after = edited.view(page_index=before.page_index)
    assert edited.page_size == 2
    assert edited.default_size == 90
    assert after.page_index == 1
    assert after.rows[0]["email"] == "dojo@mail.com"


def test_update_cell_ignores_display_only_and_unknown(people) -> None:
    grid = GridModel([LeafColumn(id="name"), LeafColumn(id="email", text=field_extractor("email"))], people)
    assert grid.is_editable("email")
    assert not grid.is_editable("name")
    assert not grid.is_editable("missing")
    assert grid.update_cell(0, "name", "x") is grid
    assert grid.update_cell(0, "missing", "x") is grid
    assert grid.update_cell(7, "email", "x") is grid
    assert grid.update_cell(-1, "email", "x") is grid


def test_update_cell_on_object_rows(person_columns) -> None:
    from types import SimpleNamespace

    rows = [SimpleNamespace(id="1", name="Jhon", email="a@b.c")]
    grid = GridModel(person_columns, rows)
    edited = grid.update_cell(0, "name", "John")
    assert edited.source_rows[0].name == "John"
    assert rows[0].name == "Jhon"


def test_row_position_uses_identity(people, person_columns) -> None:
    grid = GridModel(person_columns, people, pin_row=lambda r: r["id"] == "3")
    view = grid.view()
    assert [grid.row_position(r) for r in view.rows] == [2, 0, 1]
    assert grid.row_position(dict(people[0])) is None


def test_with_row(people, person_columns) -> None:
    grid = GridModel(person_columns, people)
    row = {"id": "9", "name": "Zed", "email": "zed@x.io"}
    assert _ids(grid.with_row(0, row).rows) == ["9", "2", "3"]
