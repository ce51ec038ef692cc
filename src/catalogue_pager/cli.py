"""
Module: cli

Purpose:
    Command line entry point.

    catalogue-pager build FILE -o OUT.pdf    Build the catalogue PDF
    catalogue-pager preview FILE             Print the page sequence,
                                             optionally moving pages and
                                             saving the new order

Key Functions:
    - main(): Parse arguments and dispatch

Dependencies:
    - argparse: Argument parsing
    - controller: build_catalogue()
    - pagination.session: ReorderSession

Used By:
    - console script `catalogue-pager`, `python -m catalogue_pager`
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional, Tuple

from catalogue_pager import __version__
from catalogue_pager.config import load_catalogue, save_catalogue
from catalogue_pager.controller import BuildError, build_catalogue
from catalogue_pager.core.models.pages import describe_sequence
from catalogue_pager.core.schemas import ValidationError
from catalogue_pager.pagination import ReorderSession

logger = logging.getLogger(__name__)


def _parse_move(value: str) -> Tuple[int, int]:
    """Parse PAGE:up|down (1-indexed page) into (index, direction)."""
    page, _, direction = value.partition(":")
    directions = {"up": -1, "down": 1}
    if not page.isdigit() or int(page) < 1 or direction not in directions:
        raise argparse.ArgumentTypeError(f"expected PAGE:up or PAGE:down, got {value!r}")
    return int(page) - 1, directions[direction]


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="catalogue-pager",
        description="Paginate product catalogues into linked PDF documents",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    build = sub.add_parser("build", help="Build the catalogue PDF")
    build.add_argument("catalogue", type=Path, help="Catalogue JSON file")
    build.add_argument("-o", "--output", type=Path, required=True, help="PDF to write")
    build.add_argument("--workers", type=int, help="Pages captured concurrently")

    preview = sub.add_parser("preview", help="Print the page sequence")
    preview.add_argument("catalogue", type=Path, help="Catalogue JSON file")
    preview.add_argument(
        "--move",
        type=_parse_move,
        action="append",
        default=[],
        metavar="PAGE:up|down",
        help="Move a page (repeatable, applied in order)",
    )
    preview.add_argument(
        "--save",
        action="store_true",
        help="Commit the moves and write the new order back to the file",
    )
    return parser


def _cmd_build(args: argparse.Namespace) -> int:
    catalogue, config = load_catalogue(args.catalogue)
    if args.workers:
        config = replace(config, output=replace(config.output, max_workers=args.workers))
    result = build_catalogue(catalogue, config, args.output)
    print(f"Wrote {result.page_count} pages ({result.link_count} links) to {result.pdf_path}")
    for warning in result.warnings:
        print(f"  warning: {warning}")
    return 0


def _cmd_preview(args: argparse.Namespace) -> int:
    catalogue, config = load_catalogue(args.catalogue)
    session = ReorderSession(catalogue, config)
    for index, direction in args.move:
        if not session.move_page(index, direction):
            logger.warning(f"Ignored out-of-range move of page {index + 1}")

    for line in describe_sequence(session.snapshot()):
        print(line)

    if args.save:
        committed = session.commit()
        save_catalogue(args.catalogue, committed.catalogue, committed.config)
        print(f"Saved new order to {args.catalogue}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    commands = {"build": _cmd_build, "preview": _cmd_preview}
    try:
        return commands[args.command](args)
    except ValidationError as e:
        print(f"Error: invalid catalogue file: {e}", file=sys.stderr)
        for detail in e.errors:
            print(f"  {detail}", file=sys.stderr)
    except (OSError, json.JSONDecodeError) as e:
        print(f"Error: cannot read {args.catalogue}: {e}", file=sys.stderr)
    except (BuildError, ValueError) as e:
        # ValueError covers bad layouts, overrides and page sequences
        print(f"Error: {e}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
