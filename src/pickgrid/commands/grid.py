"""Filter, sort and page table rows; write the page as JSON or CSV."""

from __future__ import annotations

import csv
import json
import logging
import sys
from argparse import Namespace
from pathlib import Path
from typing import Any

from pickgrid.config import get_int_setting, load_config
from pickgrid.datafiles import DataFileError, load_columns, load_rows
from pickgrid.engine.columns import ColumnSpecError
from pickgrid.engine.grid import GridModel, GridView

logger = logging.getLogger(__name__)

_FALSE_STRINGS = {"", "0", "false", "no", "off"}


def _truthy(value: Any) -> bool:
    """Row flag test that also understands CSV strings like 'false' or '0'."""
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_STRINGS
    return bool(value)


def _display_value(model: GridModel, row: dict, leaf_id: str) -> Any:
    value = model.cell_text(row, leaf_id)
    if value is None and isinstance(row, dict):
        return row.get(leaf_id)
    return value


def _view_to_records(model: GridModel, view: GridView) -> list[dict[str, Any]]:
    return [
        {leaf_id: _display_value(model, row, leaf_id) for leaf_id in view.column_ids}
        for row in view.rows
    ]


def _export_json(records: list[dict[str, Any]], out: object) -> None:
    json.dump(records, out, indent=2)
    out.write("\n")


def _export_csv(records: list[dict[str, Any]], fieldnames: list[str], out: object) -> None:
    writer = csv.DictWriter(out, fieldnames=fieldnames, lineterminator="\n")
    writer.writeheader()
    for record in records:
        row = dict(record)
        # CSV: normalize None to empty string, bool to true/false
        for k, v in row.items():
            if v is None:
                row[k] = ""
            elif isinstance(v, bool):
                row[k] = "true" if v else "false"
        writer.writerow(row)


def run(args: Namespace) -> None:
    """Run the grid command."""
    data_path: Path = getattr(args, "data")
    columns_path: Path | None = getattr(args, "columns", None)
    try:
        rows = load_rows(data_path)
        columns = load_columns(columns_path, rows)
    except (DataFileError, ColumnSpecError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    config = load_config(Path.cwd())
    page_size = getattr(args, "page_size", None)
    if page_size is None:
        page_size = get_int_setting(config, "grid.page_size", 10)
    pin_field = getattr(args, "pin_field", None)
    pin_row = (lambda row: _truthy(row.get(pin_field))) if pin_field else None

    model = GridModel(
        columns,
        rows,
        pin_row=pin_row,
        page_size=page_size,
        default_size=get_int_setting(config, "grid.default_column_size", 256),
    )
    sort_by = getattr(args, "sort_by", None)
    if sort_by and model.flat.leaf(sort_by) is None:
        print(f"Error: unknown column id for --sort: {sort_by}", file=sys.stderr)
        sys.exit(1)

    view = model.view(
        raw_filter=getattr(args, "filter", "") or "",
        sort_by=sort_by,
        descending=getattr(args, "desc", False),
        page_index=max(getattr(args, "page", 1) - 1, 0),
    )
    logger.info(
        "%d of %d rows match; page %d of %d",
        view.filtered_count,
        len(rows),
        view.page_index + 1,
        view.page_count,
    )

    records = _view_to_records(model, view)
    if getattr(args, "format", "json") == "csv":
        _export_csv(records, view.column_ids, sys.stdout)
    else:
        _export_json(records, sys.stdout)
