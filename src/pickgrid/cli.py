"""CLI entry point: argument parsing and subcommand dispatch."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pickgrid import __version__
from pickgrid.config import get_str_setting, load_config, resolve_path


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """
    Configure the pickgrid logger: level from --verbose/--quiet or config, console handler,
    optional file handler from config.
    """
    config = load_config(Path.cwd())
    log_cfg = config.get("logging") or {}
    if verbose:
        level_name = "DEBUG"
    elif quiet:
        level_name = "ERROR"
    else:
        level_name = get_str_setting(config, "logging.level", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    root = logging.getLogger("pickgrid")
    root.setLevel(level)
    if not root.handlers:
        fmt = logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(fmt)
        root.addHandler(console)
        log_file = log_cfg.get("file")
        if isinstance(log_file, str) and log_file:
            try:
                fh = logging.FileHandler(Path(log_file).expanduser(), encoding="utf-8")
                fh.setFormatter(fmt)
                root.addHandler(fh)
            except OSError:
                root.warning("Cannot open log file %s; logging to stderr only", log_file)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pickgrid",
        description="Rank, filter and lay out items and table rows with the pickgrid engine.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    log_group = parser.add_mutually_exclusive_group()
    log_group.add_argument("-v", "--verbose", action="store_true", help="Verbose (DEBUG) output.")
    log_group.add_argument("-q", "--quiet", action="store_true", help="Quiet (errors only).")

    # Same flags on subparsers so "pickgrid grid rows.json -v" works
    global_flags = argparse.ArgumentParser(add_help=False)
    log_grp = global_flags.add_mutually_exclusive_group()
    log_grp.add_argument("-v", "--verbose", action="store_true", help=argparse.SUPPRESS)
    log_grp.add_argument("-q", "--quiet", action="store_true", help=argparse.SUPPRESS)

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND", required=True)

    # rank
    p_rank = subparsers.add_parser("rank", help="Rank items by how well their names match a probe.", parents=[global_flags])
    p_rank.add_argument("probe", help="Search text (empty string keeps every item in order).")
    p_rank.add_argument("--items", "-i", type=Path, help="JSON file with items (default: stdin).")
    p_rank.add_argument("--scores", action="store_true", help="Include the match score of each item.")
    p_rank.set_defaults(run="rank")

    # grid
    p_grid = subparsers.add_parser("grid", help="Filter, sort and page table rows.", parents=[global_flags])
    p_grid.add_argument("data", type=Path, help="Rows as a JSON array of objects or a CSV file ('-' for stdin JSON).")
    p_grid.add_argument("--columns", "-c", type=Path, help="JSON column spec (default: one column per key).")
    p_grid.add_argument("--filter", "-f", default="", help="Filter, e.g. 'term;name:foo;email:gmail'.")
    p_grid.add_argument("--sort", dest="sort_by", metavar="COLUMN_ID", help="Sort by this leaf column id.")
    p_grid.add_argument("--desc", action="store_true", help="Sort descending.")
    p_grid.add_argument("--page", type=int, default=1, help="1-based page number (default: 1).")
    p_grid.add_argument("--page-size", type=int, help="Rows per page (default: from config; 0 = all).")
    p_grid.add_argument("--pin-field", metavar="KEY", help="Pin rows whose KEY value is truthy.")
    p_grid.add_argument("--format", choices=("json", "csv"), default="json", help="Output format.")
    p_grid.set_defaults(run="grid")

    # columns
    p_columns = subparsers.add_parser("columns", help="Show flattened leaf columns, name index and pinned ids.", parents=[global_flags])
    p_columns.add_argument("spec", type=Path, help="JSON column spec.")
    p_columns.set_defaults(run="columns")

    # config
    p_config = subparsers.add_parser("config", help="Show or edit configuration.", parents=[global_flags])
    p_config.add_argument("path", type=Path, nargs="?", default=Path("."), help="Project path for project-local config (default: .).")
    p_config.add_argument("--show", action="store_true", help="Display current settings.")
    p_config.add_argument("--set", dest="set_key", metavar="KEY=VALUE", help="Set a configuration value.")
    p_config.add_argument("--global", dest="global_", action="store_true", help="With --set: write to global config.")
    p_config.set_defaults(run="config")

    # view
    p_view = subparsers.add_parser("view", help="Launch the grid and selector viewer.", parents=[global_flags])
    p_view.add_argument("data", type=Path, nargs="?", help="Rows as JSON or CSV (default: built-in sample).")
    p_view.add_argument("--columns", "-c", type=Path, help="JSON column spec.")
    p_view.set_defaults(run="view")

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(
        verbose=getattr(args, "verbose", False),
        quiet=getattr(args, "quiet", False),
    )
    run = getattr(args, "run", None)
    if not run:
        parser.print_help()
        sys.exit(0)

    if getattr(args, "path", None) is not None:
        args.path = resolve_path(args.path)

    if run == "rank":
        from pickgrid.commands.rank import run as cmd_run
    elif run == "grid":
        from pickgrid.commands.grid import run as cmd_run
    elif run == "columns":
        from pickgrid.commands.columns import run as cmd_run
    elif run == "config":
        from pickgrid.commands.config_cmd import run as cmd_run
    elif run == "view":
        from pickgrid.commands.view import run as cmd_run
    else:
        parser.print_help()
        sys.exit(0)

    cmd_run(args)
