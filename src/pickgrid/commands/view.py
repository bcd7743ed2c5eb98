"""Launch the grid and selector viewer."""

from __future__ import annotations

import sys
from argparse import Namespace

from pickgrid.datafiles import DataFileError, load_columns, load_rows
from pickgrid.engine.columns import ColumnSpecError


def run(args: Namespace) -> None:
    """Run the view command: launch the PyQt6 viewer on the given rows (or the sample data)."""
    data_path = getattr(args, "data", None)
    rows = None
    columns = None
    if data_path is not None:
        try:
            rows = load_rows(data_path)
            columns = load_columns(getattr(args, "columns", None), rows)
        except (DataFileError, ColumnSpecError) as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
    try:
        from pickgrid.viewer.app import run_viewer
    except ImportError as e:
        if "PyQt6" in str(e) or "pyqt6" in str(e).lower():
            print(
                "Viewer requires PyQt6. Install with: pip install pickgrid[viewer]",
                file=sys.stderr,
            )
        else:
            print(f"Viewer failed to load: {e}", file=sys.stderr)
        sys.exit(1)
    run_viewer(rows, columns)
