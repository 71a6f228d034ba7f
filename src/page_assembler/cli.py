"""
Module: cli

Purpose:
    Command line front end. Each invocation ingests the given files into a
    fresh engine, applies the requested selection/rotation/order/split
    edits by 1-based page position, and exports.

Commands:
    merge   FILES...              Every page of every file, in order
    select  FILES... --pages ...  Selected pages, merged or --separate
    split   FILES... --after ...  Split after the given pages
            FILES... --ranges ... One file per range
    images  FILE                  Every page as PNG

Dependencies:
    - argparse (std)
    - page_assembler.controller: Workflows
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections import Counter
from pathlib import Path
from queue import Queue
from typing import List, Optional, Sequence

from page_assembler import __version__
from page_assembler.config import load_config
from page_assembler.controller import export_assembly, export_ranges, ingest_files
from page_assembler.core.errors import AssemblyError
from page_assembler.core.models import AssemblyMode
from page_assembler.engine.composition import CompositionEngine
from page_assembler.engine.page_ranges import parse_page_ranges
from page_assembler.export.exporter import ExportResult
from page_assembler.export.images import export_page_images
from page_assembler.export.sink import DirectorySink, OutputSink, ZipSink
from page_assembler.ingest.extractor import read_upload
from page_assembler.logging_utils import (
    StatusMessage,
    attach_status_handler,
    configure_logging,
    detach_status_handler,
    drain_status,
)

logger = logging.getLogger("page_assembler.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="page-assembler",
        description="Merge, select, rotate, reorder and split pages of PDFs, images and text files.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("files", nargs="+", type=Path, help="Input files (.pdf, .png, .jpg, .txt)")
    common.add_argument("-o", "--output-dir", type=Path, default=Path("."), help="Output directory")
    common.add_argument("--zip", type=Path, default=None, help="Write outputs into this ZIP archive instead")
    common.add_argument("--name", default=None, help="Base name for output files")
    common.add_argument("--config", type=Path, default=None, help="JSON config overrides")
    common.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    common.add_argument("--order", default=None, help="New page order as positions, e.g. '3,1,2'")
    common.add_argument(
        "--rotate",
        action="append",
        default=[],
        metavar="PAGES[:ccw]",
        help="Rotate pages 90 degrees clockwise (or ':ccw'); repeat to compose",
    )

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("merge", parents=[common], help="Merge every page of every file")

    select = sub.add_parser("select", parents=[common], help="Export selected pages")
    select.add_argument("--pages", required=True, help="Pages to keep, e.g. '1,3-5'")
    select.add_argument("--invert", action="store_true", help="Keep every page except --pages")
    select.add_argument("--separate", action="store_true", help="One file per selected page")

    split = sub.add_parser("split", parents=[common], help="Split into several files")
    group = split.add_mutually_exclusive_group(required=True)
    group.add_argument("--after", help="Split after these pages, e.g. '2,4'")
    group.add_argument("--ranges", help="One file per range, e.g. '1-3,4-'")
    split.add_argument("--pages", default=None, help="Only include these pages")

    images = sub.add_parser("images", parents=[common], help="Convert pages to PNG")
    images.add_argument("--scale", type=float, default=None, help="Render scale (1.0 = 72 DPI)")

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    config = load_config(args.config)

    status: Queue = Queue()
    handler = attach_status_handler(status, level=logging.WARNING)
    try:
        code = _assemble(CompositionEngine(config), args)
    finally:
        detach_status_handler(handler)
    _summarize(drain_status(status))
    return code


def _assemble(engine: CompositionEngine, args: argparse.Namespace) -> int:
    uploads = []
    for path in args.files:
        try:
            uploads.append(read_upload(path))
        except OSError as e:
            logger.error(f"Cannot read {path}: {e.strerror or e}")
    unreadable = len(args.files) - len(uploads)

    report = ingest_files(engine, uploads)
    if not report.committed:
        logger.error("No input could be read")
        return 1

    sink: OutputSink = ZipSink(args.zip) if args.zip else DirectorySink(args.output_dir)
    try:
        _apply_edits(engine, args)
        result = _run(engine, args, sink)
    except AssemblyError as e:
        logger.error(f"error: {e}")
        return 1
    finally:
        if isinstance(sink, ZipSink):
            sink.close()

    if isinstance(result, ExportResult) and not result.ok:
        return 1
    return 0 if report.ok and not unreadable else 1


def _summarize(messages: List[StatusMessage]) -> None:
    """Log a one-line tally of the warnings and errors seen during the run."""
    if not messages:
        return
    counts = Counter(m.severity for m in messages)
    components = sorted({m.component for m in messages if m.component})
    logger.info(
        f"Finished with {counts['error']} error(s) and {counts['warning']} warning(s)"
        + (f" from {', '.join(components)}" if components else "")
    )


def _positions_to_ids(engine: CompositionEngine, spec: str) -> List[int]:
    order = engine.order
    return [order[pos] for r in parse_page_ranges(spec, len(order)) for pos in r.positions]


def _apply_edits(engine: CompositionEngine, args: argparse.Namespace) -> None:
    if args.order:
        engine.reorder(_positions_to_ids(engine, args.order))

    for item in args.rotate:
        pages, _, direction = item.partition(":")
        engine.rotate_bulk(set(_positions_to_ids(engine, pages)), direction or "cw")

    pages = getattr(args, "pages", None)
    if pages:
        engine.clear_selection()
        for pid in dict.fromkeys(_positions_to_ids(engine, pages)):
            engine.toggle_selection(pid)
        if getattr(args, "invert", False):
            engine.invert_selection()

    after = getattr(args, "after", None)
    if after:
        for pid in dict.fromkeys(_positions_to_ids(engine, after)):
            engine.toggle_split(pid)


def _run(engine: CompositionEngine, args: argparse.Namespace, sink: OutputSink):
    if args.command == "merge":
        return export_assembly(engine, AssemblyMode.MERGE_ALL, sink, base_name=args.name)
    if args.command == "select":
        mode = AssemblyMode.SEPARATE if args.separate else AssemblyMode.MERGE_SELECTED
        return export_assembly(engine, mode, sink, base_name=args.name)
    if args.command == "split":
        if args.ranges:
            return export_ranges(engine, args.ranges, sink, base_name=args.name)
        return export_assembly(engine, AssemblyMode.SPLIT_SELECTED, sink, base_name=args.name)

    scale = args.scale or engine.config.image_export_scale
    delivered = []
    for source in engine.sources:
        delivered.extend(
            export_page_images(
                source,
                sink,
                scale=scale,
                pause_seconds=engine.config.export_pause_seconds,
            )
        )
    return tuple(delivered)


if __name__ == "__main__":
    sys.exit(main())
