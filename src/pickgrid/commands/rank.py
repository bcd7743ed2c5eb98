"""Rank items against a probe, like the selector dropdowns do."""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace

from pickgrid.datafiles import DataFileError, load_items
from pickgrid.engine.matching import rank_scored

logger = logging.getLogger(__name__)


def run(args: Namespace) -> None:
    """Run the rank command: print matching items (best first) as a JSON array."""
    probe: str = getattr(args, "probe", "") or ""
    try:
        items = load_items(getattr(args, "items", None))
    except DataFileError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    ranked = rank_scored(items, probe)
    logger.debug("%d of %d items match %r", len(ranked), len(items), probe)
    if getattr(args, "scores", False):
        data = [{"id": item.id, "name": item.name, "score": score.name.lower()} for item, score in ranked]
    else:
        data = [{"id": item.id, "name": item.name} for item, _ in ranked]
    json.dump(data, sys.stdout, indent=2)
    sys.stdout.write("\n")
