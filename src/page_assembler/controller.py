"""
Module: controller

Purpose:
    Orchestrate the two asynchronous workflows around the engine.
    Ingest: Upload → Extract (thread pool) → Commit in submission order
    Export: Snapshot → Plan → Execute → Deliver (sequential)

Key Functions:
    - ingest_files(): Extract and commit a batch of uploads
    - export_assembly(): Plan and deliver outputs for one mode
    - export_ranges(): Plan and deliver one output per page range
    - page_thumbnail(): Preview image of one page as currently rotated

Dependencies:
    - engine: CompositionEngine, planning
    - ingest: IngestQueue
    - export: export_plans, naming, sinks
    - codec: PyMuPDFCodec (default), page rendering

Used By:
    - page_assembler.cli: Command line front end
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from PIL import Image

from page_assembler.codec.base import DocumentCodec, ThumbnailRenderer
from page_assembler.codec.pymupdf_codec import PyMuPDFCodec
from page_assembler.codec.renderer import render_source_page
from page_assembler.core.models import AssemblyMode, OutputDocumentPlan
from page_assembler.engine.composition import CompositionEngine
from page_assembler.export.exporter import ExportResult, export_plans
from page_assembler.export.naming import plans_base_name
from page_assembler.export.sink import OutputSink
from page_assembler.ingest.extractor import ExtractedSource, SourceUpload
from page_assembler.ingest.queue import IngestQueue, IngestReport

logger = logging.getLogger(__name__)


def ingest_files(
    engine: CompositionEngine,
    uploads: Iterable[SourceUpload],
    *,
    codec: Optional[DocumentCodec] = None,
) -> IngestReport:
    """
    Ingest a batch of files into the engine.

    Extraction runs concurrently; pages are appended in the order the
    uploads were given. A file that fails is reported and contributes no
    pages; the other files are unaffected.

    Example:
        >>> report = ingest_files(engine, [read_upload(Path("a.pdf")), read_upload(Path("b.png"))])
        >>> report.source_ids
        ('src-1', 'src-2')
    """
    codec = codec or PyMuPDFCodec()

    def commit(extracted: ExtractedSource) -> str:
        return engine.add_source(
            extracted.kind,
            extracted.page_count,
            name=extracted.name,
            payload=extracted.payload,
            media_type=extracted.media_type,
        )

    with IngestQueue(codec, engine.config) as queue:
        for upload in uploads:
            queue.submit(upload)
        report = queue.drain(commit)

    for warning in report.warnings:
        logger.warning(warning)
    return report


def export_assembly(
    engine: CompositionEngine,
    mode: "AssemblyMode | str",
    sink: OutputSink,
    *,
    codec: Optional[DocumentCodec] = None,
    base_name: Optional[str] = None,
) -> ExportResult:
    """
    Plan the current state for a mode and deliver every output.

    Raises:
        NoPagesSelected, NoSplitPoints: Nothing is exported
        ChunkExportFailure: Only when every output failed; partial
            failures are reported in the result instead
    """
    mode = AssemblyMode(mode)
    plans = engine.plan(mode)
    logger.info(f"Exporting {len(plans)} file(s) for {mode.value}")
    return _export(engine, plans, mode.tag, sink, codec, base_name)


def export_ranges(
    engine: CompositionEngine,
    spec: str,
    sink: OutputSink,
    *,
    codec: Optional[DocumentCodec] = None,
    base_name: Optional[str] = None,
) -> ExportResult:
    """One output per range in spec, e.g. "1-3, 5"."""
    plans = engine.plan_ranges(spec)
    logger.info(f"Exporting {len(plans)} range(s): {spec}")
    return _export(engine, plans, AssemblyMode.SPLIT_SELECTED.tag, sink, codec, base_name)


def page_thumbnail(
    engine: CompositionEngine,
    display_id: int,
    *,
    renderer: Optional[ThumbnailRenderer] = None,
) -> Image.Image:
    """
    Render a preview of one page at the configured thumbnail scale, turned
    clockwise by its pending rotation.

    Raises:
        UnknownPage: If display_id is not live
    """
    ref = engine.page(display_id)
    source = engine.registry.get(ref.source_id)
    image = render_source_page(source, ref.original_index, engine.config.thumbnail_scale, renderer)
    rotation = engine.rotation.get(display_id)
    if rotation:
        # PIL rotates counter-clockwise
        image = image.rotate(-rotation, expand=True)
    return image


def _export(
    engine: CompositionEngine,
    plans: Sequence[OutputDocumentPlan],
    tag: str,
    sink: OutputSink,
    codec: Optional[DocumentCodec],
    base_name: Optional[str],
) -> ExportResult:
    base = plans_base_name(plans, engine.sources, engine.config.merged_base_name, base_name)
    result = export_plans(
        plans,
        registry=engine.registry,
        codec=codec or PyMuPDFCodec(),
        sink=sink,
        base_name=base,
        tag=tag,
        pause_seconds=engine.config.export_pause_seconds,
    )
    if result.failures and not result.delivered:
        raise result.failures[0]
    return result
