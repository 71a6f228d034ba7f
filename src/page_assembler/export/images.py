"""
Module: export.images

Purpose:
    Convert a source to page images: every page of a PDF or text source is
    rendered to PNG; an image source is delivered unchanged.

Key Functions:
    - export_page_images(): Render and deliver one source's pages

Dependencies:
    - codec.renderer: Page rasterization
    - PIL: PNG encoding
"""

from __future__ import annotations

import logging
import time
from io import BytesIO
from pathlib import PurePath
from typing import Callable, List, Tuple

from page_assembler.core.models import SourceDocument
from page_assembler.codec.renderer import iter_source_images

from .naming import output_filename, sanitize_base_name
from .sink import PNG_MIME, OutputSink

logger = logging.getLogger(__name__)


def export_page_images(
    source: SourceDocument,
    sink: OutputSink,
    *,
    scale: float = 2.0,
    pause_seconds: float = 0.0,
    sleep: Callable[[float], None] = time.sleep,
) -> Tuple[str, ...]:
    """
    Deliver one PNG per page as <base>_page_<n>.png (n is 1-based).

    Args:
        source: Source to convert
        sink: Delivery target
        scale: Render scale (1.0 = 72 DPI)
        pause_seconds: Pause between deliveries

    Returns:
        Locations reported by the sink, in page order
    """
    if not source.kind.is_paged:
        filename = PurePath(source.name).name or f"{source.source_id}.{source.image_format}"
        return (sink.deliver(filename, source.payload, source.media_type),)

    base = sanitize_base_name(source.name or source.source_id)
    delivered: List[str] = []
    for page_index, image in iter_source_images(source, scale):
        if delivered and pause_seconds > 0:
            sleep(pause_seconds)
        buffer = BytesIO()
        image.save(buffer, format="PNG")
        filename = output_filename(base, "page", page_index + 1, extension="png")
        delivered.append(sink.deliver(filename, buffer.getvalue(), PNG_MIME))

    logger.info(f"Converted {base} to {len(delivered)} image(s)")
    return tuple(delivered)
