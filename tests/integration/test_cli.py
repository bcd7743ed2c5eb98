"""Integration tests: argument parsing and dispatch through pickgrid.cli.main."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from pickgrid import __version__
from pickgrid.cli import build_parser, main


@pytest.fixture(autouse=True)
def reset_pickgrid_logger():
    yield
    logger = logging.getLogger("pickgrid")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


def test_version(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc:
        main(["--version"])
    assert exc.value.code == 0
    assert __version__ in capsys.readouterr().out


def test_command_is_required(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc:
        main([])
    assert exc.value.code == 2


def test_grid_parser_defaults() -> None:
    args = build_parser().parse_args(["grid", "rows.json"])
    assert args.run == "grid"
    assert args.filter == ""
    assert args.page == 1
    assert args.page_size is None
    assert args.format == "json"


def test_main_rank(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    items = tmp_path / "items.json"
    items.write_text(json.dumps(["Kind", "Other", "kind"]), encoding="utf-8")
    main(["rank", "kind", "--items", str(items), "-q"])
    data = json.loads(capsys.readouterr().out)
    assert [d["id"] for d in data] == ["kind", "Kind"]


def test_main_grid(tmp_path: Path, people, capsys: pytest.CaptureFixture[str]) -> None:
    rows = tmp_path / "rows.json"
    rows.write_text(json.dumps(people), encoding="utf-8")
    main(["grid", str(rows), "--filter", "name:o;email:gmail", "--sort", "name", "-v"])
    data = json.loads(capsys.readouterr().out)
    assert [r["id"] for r in data] == ["3", "1"]


def test_verbose_sets_debug_level(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    items = tmp_path / "items.json"
    items.write_text("[]", encoding="utf-8")
    main(["rank", "x", "--items", str(items), "--verbose"])
    assert logging.getLogger("pickgrid").level == logging.DEBUG


def test_main_config_show(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    main(["config", str(tmp_path), "--show"])
    out = capsys.readouterr().out
    assert json.loads(out[out.find("{"):])["grid"]["page_size"] == 10
