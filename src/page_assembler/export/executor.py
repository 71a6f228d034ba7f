"""
Module: export.executor

Purpose:
    Execute one OutputDocumentPlan against a DocumentCodec. Entries are
    dispatched on their kind tag: image entries are embedded on their own
    page, everything else is copied from the decoded source PDF.

Key Functions:
    - render_plan(): Plan -> PDF bytes

Dependencies:
    - codec.base: DocumentCodec contract
    - engine.registry: Source payload lookup
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from page_assembler.codec.base import DocumentCodec
from page_assembler.core.models import OutputDocumentPlan
from page_assembler.engine.registry import SourceRegistry

logger = logging.getLogger(__name__)


def render_plan(
    plan: OutputDocumentPlan,
    registry: SourceRegistry,
    codec: DocumentCodec,
) -> bytes:
    """
    Produce the bytes of one output document.

    Each source is decoded at most once per plan, and every handle is
    closed before returning.

    Raises:
        UnknownSource: If a plan entry refers to a removed source
        CorruptSource: If a source payload cannot be decoded
    """
    decoded: Dict[str, Any] = {}
    output = codec.create_document()
    try:
        for entry in plan.entries:
            source = registry.get(entry.source_id)
            if not entry.kind.is_paged:
                image = codec.embed_image(output, source.payload, source.image_format)
                codec.add_image_page(output, image, entry.rotation)
                continue

            if entry.source_id not in decoded:
                decoded[entry.source_id] = codec.decode(source.payload, name=source.name)
            (page,) = codec.copy_pages(decoded[entry.source_id], [entry.original_index])
            codec.add_page(output, page, entry.rotation)

        data = codec.encode(output)
    finally:
        for document in decoded.values():
            codec.close(document)
        codec.close(output)

    logger.debug(f"Rendered {plan.page_count} page(s) from {len(plan.source_ids)} source(s)")
    return data
