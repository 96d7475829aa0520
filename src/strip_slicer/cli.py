"""
Module: cli

Purpose:
    Command-line front end. Decodes the given images, plans pages,
    prints the page size report and exports the slices to a directory
    or a ZIP archive.

Key Functions:
    - main(): Entry point, returns a process exit code
    - build_parser(): argparse parser

Exit codes:
    0 success, 1 load/config/render failure, 2 usage error
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional, Sequence

from strip_slicer import __version__
from strip_slicer.config import SlicerConfig, load_config
from strip_slicer.errors import SlicerError
from strip_slicer.output import DEFAULT_ARCHIVE_NAME, write_slices_dir, write_slices_zip
from strip_slicer.session import SlicerSession
from strip_slicer.utils import format_offset

logger = logging.getLogger("strip_slicer.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="strip-slicer",
        description="Cut a long vertical image strip into page-sized slices.",
    )
    parser.add_argument("images", nargs="+", type=Path, help="Images in strip order")

    target = parser.add_mutually_exclusive_group()
    target.add_argument("-o", "--output", type=Path, help="Directory to write slices to")
    target.add_argument(
        "--zip", type=Path, dest="zip_path",
        help=f"Write slices into a ZIP archive (e.g. {DEFAULT_ARCHIVE_NAME})",
    )

    parser.add_argument("--config", type=Path, help="JSON file with slicer settings")
    parser.add_argument("--page-size", type=int, help="Target page height in pixels")
    parser.add_argument("--warn-difference", type=int, help="Allowed page height deviation")
    parser.add_argument("--header-count", type=int, help="Leading images kept as their own pages")
    parser.add_argument("--footer-count", type=int, help="Trailing images kept as their own pages")
    parser.add_argument(
        "--no-smart-breaks", action="store_true",
        help="Cut at exact page sizes instead of snapping to flat regions",
    )
    parser.add_argument("--prefix", help="Output file name prefix (default: page_)")

    layout = parser.add_mutually_exclusive_group()
    layout.add_argument("--pins", help="Explicit comma-separated cut offsets")
    layout.add_argument("--boundaries", action="store_true", help="One page per source image")

    parser.add_argument("--dry-run", action="store_true", help="Only print the page report")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _parse_pins(text: str) -> List[int]:
    try:
        return [int(part) for part in text.split(",") if part.strip()]
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid pin list {text!r}") from e


def _resolve_config(args: argparse.Namespace) -> SlicerConfig:
    """Config file (or defaults) with command-line overrides applied."""
    config = load_config(args.config) if args.config else SlicerConfig()
    overrides = {
        "page_size": args.page_size,
        "warn_difference": args.warn_difference,
        "header_count": args.header_count,
        "footer_count": args.footer_count,
        "filename_prefix": args.prefix,
    }
    changes = {k: v for k, v in overrides.items() if v is not None}
    if args.no_smart_breaks:
        changes["smart_breaks"] = False
    return replace(config, **changes)


def _print_report(session: SlicerSession) -> None:
    print(f"Strip: {session.strip_width}x{format_offset(session.strip_height)}px, "
          f"{len(session.breaks)} break positions")
    print(f"Pins: {', '.join(format_offset(p) for p in session.pins) or '(none)'}")
    sizes = session.page_sizes()
    if not sizes:
        print("(no pages)")
        return
    for size in sizes:
        marker = "  !" if size.out_of_tolerance else ""
        print(f"  {size.page.index + 1:>3}. {size.width}x{format_offset(size.height)}{marker}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
    )

    try:
        pins = _parse_pins(args.pins) if args.pins else None
    except argparse.ArgumentTypeError as e:
        parser.error(str(e))

    try:
        config = _resolve_config(args)
    except (SlicerError, ValueError) as e:
        logger.error(f"Configuration error: {e}")
        return 1

    with SlicerSession(config, capture_log=False) as session:
        try:
            session.load_files(args.images)
        except SlicerError as e:
            logger.error(str(e))
            return 1

        if pins is not None:
            session.set_pins(pins)
        elif args.boundaries:
            session.reset_to_breaks()

        _print_report(session)

        if args.dry_run:
            return 0

        try:
            export = session.export()
            if args.zip_path:
                path = write_slices_zip(export, args.zip_path)
                print(f"Wrote {len(export)} slices to {path}")
            else:
                written = write_slices_dir(export, args.output or Path.cwd())
                print(f"Wrote {len(written)} slices to {args.output or Path.cwd()}")
        except (SlicerError, OSError) as e:
            logger.error(f"Export failed: {e}")
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
