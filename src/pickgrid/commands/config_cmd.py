"""Show or edit configuration (CLI command)."""

from __future__ import annotations

import json
import sys
from argparse import Namespace
from pathlib import Path

from pickgrid.config import (
    ConfigValueError,
    global_config_path,
    load_config,
    parse_setting_value,
    project_config_path,
    read_config_file,
    save_config,
    set_setting,
)


def _write_setting(assignment: str, target: Path, label: str) -> None:
    key, sep, raw = assignment.partition("=")
    key = key.strip()
    if not sep:
        print("Error: --set requires KEY=VALUE (e.g. grid.page_size=25).", file=sys.stderr)
        sys.exit(1)
    if not key:
        print("Error: empty key in KEY=VALUE.", file=sys.stderr)
        sys.exit(1)
    value = parse_setting_value(raw)
    try:
        data = set_setting(read_config_file(target), key, value)
    except ConfigValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    save_config(target, data)
    print(f"Set {key} = {json.dumps(value)} in {label} config.")


def run(args: Namespace) -> None:
    """Run the config command: show merged settings or set a value (global or project-local)."""
    show = getattr(args, "show", False)
    set_key = getattr(args, "set_key", None)
    project_root = Path(getattr(args, "path", Path("."))).resolve()

    if not show and not set_key:
        print("Error: specify --show or --set KEY=VALUE.", file=sys.stderr)
        sys.exit(1)

    if set_key:
        if getattr(args, "global_", False):
            _write_setting(set_key, global_config_path(), "global")
        else:
            _write_setting(set_key, project_config_path(project_root), f"project ({project_root.as_posix()})")

    if show:
        print(f"# Config: defaults + global + project ({project_root.as_posix()})")
        print(json.dumps(load_config(project_root), indent=2))
