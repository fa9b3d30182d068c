# aiaccess/cli.py
"""
@file cli.py
@brief Command-line interface for inspecting tracking snapshots.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Dict, List, Optional

from . import identifiers
from .actionlogger import configure_from_env as configure_action_logger
from .exceptions import AIAccessError
from .geometry import Rect
from .models import TrackedElement
from .persistence import load_snapshot
from .query import QueryEngine
from .timinglogger import configure_from_env as configure_timing_logger


def _element_row(el: TrackedElement) -> Dict[str, Any]:
    data = el.to_dict()
    data["center"] = el.center.to_dict()
    return data


def _print_elements(elements: List[TrackedElement], as_json: bool) -> None:
    elements = sorted(elements, key=lambda el: el.identifier)
    if as_json:
        print(json.dumps([_element_row(el) for el in elements], indent=2))
        return
    print(f"{'Identifier':<48} {'Center':<16} Frame")
    print("-" * 80)
    for el in elements:
        f = el.frame
        print(f"{el.identifier:<48} {str(el.center):<16} ({f.x:g}, {f.y:g}, {f.width:g}, {f.height:g})")
    print("-" * 80)
    print(f"Total: {len(elements)}")


def _cmd_inspect(args: argparse.Namespace) -> int:
    snapshot = load_snapshot(args.snapshot)
    engine = QueryEngine(snapshot)

    if args.id:
        el = engine.find(args.id)
        if el is None:
            print(f"Element not found: {args.id}", file=sys.stderr)
            return 1
        results = [el]
    else:
        results = list(snapshot)
        if args.match:
            matched = set(engine.matching_validated(args.match))
            results = [el for el in results if el.identifier in matched]
        if args.region:
            region = Rect(*args.region)
            results = [el for el in results if region.intersects(el.frame)]

    if not args.json:
        print(f"View: {snapshot.view_context.name or 'unknown'}")
    _print_elements(results, args.json)
    return 0


def _cmd_identifier(args: argparse.Namespace) -> int:
    builder = identifiers.BUILDERS[args.kind]
    parts: List[Any] = list(args.parts)
    if args.kind == "list_item" and args.index is not None:
        print(builder(*parts, index=args.index, context=args.context))
    else:
        print(builder(*parts, context=args.context))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    argv = argv if argv is not None else sys.argv[1:]
    configure_action_logger()
    configure_timing_logger()

    p = argparse.ArgumentParser(
        prog="aiaccess",
        description="aiaccess - UI element tracking for automation agents",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    # -------------------------
    # inspect
    # -------------------------
    insp = sub.add_parser("inspect", help="Query a snapshot written by dump_snapshot()")
    insp.add_argument("snapshot", help="Path to snapshot YAML")
    insp.add_argument("--id", default=None, help="Show a single element by identifier")
    insp.add_argument("--match", "-m", default=None, help="Case-insensitive regex over identifiers")
    insp.add_argument("--region", "-r", nargs=4, type=float, metavar=("X", "Y", "W", "H"),
                      default=None, help="Only elements overlapping this rectangle")
    insp.add_argument("--json", action="store_true", help="Emit JSON instead of a table")
    insp.set_defaults(func=_cmd_inspect)

    # -------------------------
    # identifier
    # -------------------------
    ident = sub.add_parser("identifier", help="Print a canonical element identifier")
    ident.add_argument("kind", choices=sorted(identifiers.BUILDERS))
    ident.add_argument("parts", nargs="+", help="Builder arguments, e.g. 'primary' 'Save Changes'")
    ident.add_argument("--context", "-c", default=None, help="Optional context prefix")
    ident.add_argument("--index", type=int, default=None, help="List item index")
    ident.set_defaults(func=_cmd_identifier)

    args = p.parse_args(argv)
    try:
        return args.func(args)
    except (AIAccessError, TypeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
