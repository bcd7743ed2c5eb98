"""Integration tests: pickgrid columns prints the flattened column model."""

from __future__ import annotations

import io
import json
from pathlib import Path
from unittest.mock import patch

import pytest

from pickgrid.commands.columns import run as columns_run


def test_columns_output(tmp_path: Path, person_spec) -> None:
    spec = tmp_path / "columns.json"
    spec.write_text(json.dumps(person_spec), encoding="utf-8")
    buf = io.StringIO()
    args = type("Args", (), {"spec": spec})()
    with patch("pickgrid.commands.columns.sys.stdout", buf):
        columns_run(args)
    data = json.loads(buf.getvalue())

    assert [leaf["id"] for leaf in data["leaves"]] == ["notes", "name", "email"]
    notes = data["leaves"][0]
    assert notes["filterable"] is False
    assert notes["depth"] == 0
    assert data["leaves"][2]["min_size"] == 100
    assert data["leaves"][2]["top_level_id"] == "person"
    assert data["name_index"] == {"notes": ["notes"], "name": ["name"], "email": ["email"]}
    assert data["pinned_top_level_ids"] == ["person"]
    assert data["display_order"] == ["name", "email", "notes"]
    assert data["pinned_offsets"] == {"name": 0, "email": 200}
    assert data["header_rows"] == [
        [{"name": "", "span": 1}, {"name": "person", "span": 2}],
        [{"name": "notes", "span": 1}, {"name": "name", "span": 1}, {"name": "email", "span": 1}],
    ]


def test_columns_missing_spec_exits(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    args = type("Args", (), {"spec": tmp_path / "missing.json"})()
    with pytest.raises(SystemExit) as exc:
        columns_run(args)
    assert exc.value.code == 1
    assert "File not found" in capsys.readouterr().err
