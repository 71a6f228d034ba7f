"""
Module: codec.renderer

Purpose:
    Rasterize source pages to PIL images for previews and for PDF-to-PNG
    conversion. Display only: nothing here feeds the planner.

Key Classes:
    - PyMuPDFRenderer: ThumbnailRenderer on PyMuPDF

Key Functions:
    - render_source_page(): Dispatch on SourceKind
    - iter_source_images(): Every page of a source as an image

Dependencies:
    - fitz (PyMuPDF): Page rasterization
    - PIL.Image: Image objects
"""

from __future__ import annotations

import io
import logging
from typing import Iterator, Optional, Tuple

import fitz
from PIL import Image

from page_assembler.core.errors import CorruptSource
from page_assembler.core.models import SourceDocument

from .base import ThumbnailRenderer

logger = logging.getLogger(__name__)


class PyMuPDFRenderer(ThumbnailRenderer):
    """
    Renders PDF pages with PyMuPDF.

    Example:
        >>> image = PyMuPDFRenderer().render(pdf_bytes, 0, scale=0.8)
        >>> image.mode
        'RGB'
    """

    def render(self, source_bytes: bytes, page_index: int, scale: float) -> Image.Image:
        try:
            document = fitz.open(stream=source_bytes, filetype="pdf")
        except (RuntimeError, ValueError) as e:
            raise CorruptSource("document", str(e)) from e
        try:
            return _render_page(document, page_index, scale)
        finally:
            document.close()


def _render_page(document: fitz.Document, page_index: int, scale: float) -> Image.Image:
    if not 0 <= page_index < document.page_count:
        raise IndexError(f"Page index {page_index} out of range 0..{document.page_count - 1}")
    page = document[page_index]
    pix = page.get_pixmap(matrix=fitz.Matrix(scale, scale), alpha=False)
    return Image.frombytes("RGB", (pix.width, pix.height), pix.samples)


def _scaled_image(data: bytes, scale: float) -> Image.Image:
    with Image.open(io.BytesIO(data)) as image:
        image = image.convert("RGB")
    if scale != 1.0:
        size = (max(1, round(image.width * scale)), max(1, round(image.height * scale)))
        image = image.resize(size, Image.Resampling.LANCZOS)
    return image


def render_source_page(
    source: SourceDocument,
    page_index: int,
    scale: float,
    renderer: Optional[ThumbnailRenderer] = None,
) -> Image.Image:
    """
    Render one page of any source kind.

    Image sources have a single page and are scaled with Pillow; PDF and
    text sources go through the renderer.
    """
    if not source.kind.is_paged:
        if page_index != 0:
            raise IndexError(f"Image sources have one page, got index {page_index}")
        return _scaled_image(source.payload, scale)
    renderer = renderer or PyMuPDFRenderer()
    return renderer.render(source.payload, page_index, scale)


def iter_source_images(source: SourceDocument, scale: float) -> Iterator[Tuple[int, Image.Image]]:
    """Yield (page_index, image) for every page, opening the PDF once."""
    if not source.kind.is_paged:
        yield 0, _scaled_image(source.payload, scale)
        return

    document = fitz.open(stream=source.payload, filetype="pdf")
    try:
        for i in range(document.page_count):
            logger.debug(f"Rendering {source.source_id} page {i + 1}/{document.page_count}")
            yield i, _render_page(document, i, scale)
    finally:
        document.close()
