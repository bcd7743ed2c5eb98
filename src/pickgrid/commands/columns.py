"""Show how a column spec flattens: leaves, name index, pinned columns and offsets."""

from __future__ import annotations

import json
import sys
from argparse import Namespace
from pathlib import Path

from pickgrid.config import get_int_setting, load_config
from pickgrid.datafiles import DataFileError, load_columns
from pickgrid.engine.columns import ColumnSpecError, flatten_columns, header_rows
from pickgrid.engine.layout import order_leaves, pinned_offsets


def run(args: Namespace) -> None:
    """Run the columns command: print the flattened column model as JSON."""
    spec_path: Path = getattr(args, "spec")
    try:
        columns = load_columns(spec_path, [])
    except (DataFileError, ColumnSpecError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    config = load_config(Path.cwd())
    flat = flatten_columns(columns, default_size=get_int_setting(config, "grid.default_column_size", 256))
    ordered = order_leaves(flat)
    data = {
        "leaves": [
            {
                "id": leaf.id,
                "name": leaf.name,
                "size": leaf.size,
                "min_size": leaf.min_size,
                "max_size": leaf.max_size,
                "enable_resizing": leaf.enable_resizing,
                "filterable": leaf.filterable,
                "depth": leaf.depth,
                "top_level_id": leaf.top_level_id,
            }
            for leaf in flat.leaves
        ],
        "name_index": flat.name_index,
        "pinned_top_level_ids": flat.pinned_top_level_ids,
        "display_order": [leaf.id for leaf in ordered],
        "pinned_offsets": pinned_offsets(ordered, flat.pinned_top_level_ids),
        "header_rows": [[{"name": name, "span": span} for name, span in row] for row in header_rows(columns)],
    }
    json.dump(data, sys.stdout, indent=2)
    sys.stdout.write("\n")
