"""
Module: ingest.extractor

Purpose:
    Turn one uploaded file into an ExtractedSource: resolve its kind,
    validate it with the codec and count its pages. Extraction is
    all-or-nothing per file.

Key Classes:
    - SourceUpload: Raw file as submitted
    - ExtractedSource: Validated result, ready to commit to the engine

Key Functions:
    - extract_source(): Upload -> ExtractedSource
    - read_upload(): Build a SourceUpload from a path

Dependencies:
    - codec: Page counting, image validation, text typesetting
"""

from __future__ import annotations

import logging
import mimetypes
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from page_assembler.codec.base import DocumentCodec
from page_assembler.codec.text_pages import missing_glyphs, register_text_font, render_text_document
from page_assembler.config import AssemblyConfig
from page_assembler.core.errors import CorruptSource, UnsupportedSourceKind
from page_assembler.core.models import SourceKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceUpload:
    """
    A file as submitted by the user.

    Attributes:
        name: Original filename
        data: File bytes
        declared_type: MIME type if known; the filename extension is used
            otherwise
    """

    name: str
    data: bytes = field(repr=False)
    declared_type: Optional[str] = None

    @property
    def declared(self) -> str:
        return self.declared_type or self.name


@dataclass(frozen=True)
class ExtractedSource:
    """A validated source, not yet committed to the engine."""

    name: str
    kind: SourceKind
    page_count: int
    payload: bytes = field(repr=False)
    media_type: str


def read_upload(path: Path, declared_type: Optional[str] = None) -> SourceUpload:
    """Read a file from disk, guessing its MIME type from the name."""
    if declared_type is None:
        declared_type, _ = mimetypes.guess_type(path.name)
    return SourceUpload(name=path.name, data=path.read_bytes(), declared_type=declared_type)


def extract_source(
    upload: SourceUpload,
    codec: DocumentCodec,
    config: Optional[AssemblyConfig] = None,
) -> ExtractedSource:
    """
    Validate an upload and count its pages.

    - PDF: decoded once to count pages
    - Image: verified with Pillow, one page
    - Text: decoded as UTF-8 and typeset to PDF with ReportLab; text the
      configured font has no glyphs for is rejected rather than garbled

    Raises:
        UnsupportedSourceKind: If the type is not pdf/image/text
        CorruptSource: If the content cannot be read
    """
    config = config or AssemblyConfig()
    kind = SourceKind.from_declared(upload.declared)

    if kind is SourceKind.PDF:
        page_count = codec.page_count(upload.data, name=upload.name)
        extracted = ExtractedSource(upload.name, kind, page_count, upload.data, "application/pdf")

    elif kind is SourceKind.IMAGE:
        handle = codec.inspect_image(upload.data, _image_format(upload), name=upload.name)
        if handle.format not in ("png", "jpeg"):
            raise UnsupportedSourceKind(f"image/{handle.format}")
        media_type = f"image/{handle.format}"
        extracted = ExtractedSource(upload.name, kind, 1, upload.data, media_type)

    else:
        try:
            text = upload.data.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise CorruptSource(upload.name, f"not UTF-8 text ({e.reason})") from e
        font_name = config.text_font_name
        if config.text_font_path:
            font_name = register_text_font(config.text_font_path)
        missing = missing_glyphs(text, font_name)
        if missing:
            raise CorruptSource(upload.name, f"font {font_name} cannot typeset {missing[:10]!r}")
        payload = render_text_document(
            text,
            page_size=config.text_page_size_pt,
            font_name=font_name,
            font_size=config.text_font_size,
            margin_pt=config.text_margin_pt,
            title=upload.name,
        )
        page_count = codec.page_count(payload, name=upload.name)
        extracted = ExtractedSource(upload.name, kind, page_count, payload, "application/pdf")

    logger.debug(f"Extracted {upload.name}: {extracted.kind.value}, {extracted.page_count} page(s)")
    return extracted


def _image_format(upload: SourceUpload) -> str:
    declared = upload.declared.lower()
    return "png" if declared.endswith("png") else "jpeg"
