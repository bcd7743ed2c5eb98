"""Shared fixtures: sample people rows, their column tree, and an isolated config location."""

from __future__ import annotations

from pathlib import Path

import pytest

from pickgrid.engine.columns import GroupColumn, LeafColumn, field_extractor


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the global config at an empty temp dir and run from a clean cwd."""
    home = tmp_path / "home" / ".pickgrid"
    monkeypatch.setattr("pickgrid.config._global_config_dir", lambda: home)
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    return home


@pytest.fixture
def people() -> list[dict]:
    return [
        {"id": "1", "name": "Jhon", "email": "jhon@gmail.com"},
        {"id": "2", "name": "Foo", "email": "foo@yahoo.com"},
        {"id": "3", "name": "Dojo", "email": "dojo@gmail.com"},
    ]


@pytest.fixture
def person_columns() -> list:
    """A 'person' group holding 'name' and 'email' leaves."""
    return [
        GroupColumn(
            id="person",
            name="person",
            children=[
                LeafColumn(id="name", name="name", text=field_extractor("name"), size=200),
                LeafColumn(id="email", name="email", text=field_extractor("email"), size=400),
            ],
        ),
    ]


@pytest.fixture
def person_spec() -> list[dict]:
    """JSON column spec equivalent to person_columns, with the group pinned and a display-only column."""
    return [
        {"id": "notes", "field": None, "size": 100},
        {
            "id": "person",
            "pin": True,
            "children": [
                {"id": "name", "size": 200},
                {"id": "email", "size": 400, "min_size": 100},
            ],
        },
    ]
