"""
Module: codec.pymupdf_codec

Purpose:
    DocumentCodec implementation on PyMuPDF. Pages are copied losslessly
    with insert_pdf; images are placed on pages sized to the image.

Key Classes:
    - PyMuPDFCodec: The default codec

Dependencies:
    - fitz (PyMuPDF): PDF decode, page copy and save
    - PIL.Image: Image validation and sizing

Used By:
    - ingest.extractor: Page counting during ingestion
    - export.executor: Plan execution
"""

from __future__ import annotations

import io
import logging
from typing import List, Sequence

import fitz
from PIL import Image, UnidentifiedImageError

from page_assembler.core.errors import CorruptSource

from .base import DocumentCodec, ImageHandle, PageHandle

logger = logging.getLogger(__name__)


class PyMuPDFCodec(DocumentCodec):
    """
    PyMuPDF-backed codec.

    Example:
        >>> codec = PyMuPDFCodec()
        >>> src = codec.decode(pdf_bytes)
        >>> out = codec.create_document()
        >>> for page in codec.copy_pages(src, [2, 0]):
        ...     codec.add_page(out, page, rotation=90)
        >>> data = codec.encode(out)
    """

    def __init__(self, *, producer: str = "page-assembler") -> None:
        self._producer = producer

    def decode(self, data: bytes, *, name: str = "document") -> fitz.Document:
        if not data:
            raise CorruptSource(name, "file is empty")
        try:
            document = fitz.open(stream=data, filetype="pdf")
        except (RuntimeError, ValueError) as e:
            raise CorruptSource(name, str(e)) from e

        if document.needs_pass and not document.authenticate(""):
            document.close()
            raise CorruptSource(name, "document is password protected")
        if document.page_count == 0:
            document.close()
            raise CorruptSource(name, "document has no pages")
        return document

    def page_count(self, data: bytes, *, name: str = "document") -> int:
        document = self.decode(data, name=name)
        try:
            return document.page_count
        finally:
            document.close()

    def copy_pages(self, document: fitz.Document, indices: Sequence[int]) -> List[PageHandle]:
        count = document.page_count
        for i in indices:
            if not 0 <= i < count:
                raise IndexError(f"Page index {i} out of range 0..{count - 1}")
        return [PageHandle(document=document, index=i) for i in indices]

    def create_document(self) -> fitz.Document:
        document = fitz.open()
        now = fitz.get_pdf_now()
        document.set_metadata(
            {
                "producer": self._producer,
                "creator": self._producer,
                "creationDate": now,
                "modDate": now,
            }
        )
        return document

    def add_page(self, document: fitz.Document, page: PageHandle, rotation: int) -> None:
        document.insert_pdf(page.document, from_page=page.index, to_page=page.index)
        if rotation % 360:
            inserted = document[-1]
            inserted.set_rotation((inserted.rotation + rotation) % 360)

    def embed_image(self, document: fitz.Document, data: bytes, format: str) -> ImageHandle:
        return self.inspect_image(data, format)

    def inspect_image(self, data: bytes, format: str, *, name: str = "image") -> ImageHandle:
        try:
            with Image.open(io.BytesIO(data)) as probe:
                probe.verify()
            with Image.open(io.BytesIO(data)) as image:
                width, height = image.size
                detected = (image.format or format).lower()
        except (UnidentifiedImageError, OSError, SyntaxError) as e:
            raise CorruptSource(name, str(e)) from e
        return ImageHandle(data=data, format=detected, width=width, height=height)

    def add_image_page(self, document: fitz.Document, image: ImageHandle, rotation: int) -> None:
        page = document.new_page(width=image.width, height=image.height)
        page.insert_image(page.rect, stream=image.data)
        if rotation % 360:
            page.set_rotation(rotation % 360)

    def encode(self, document: fitz.Document) -> bytes:
        return document.tobytes(garbage=3, deflate=True)

    def close(self, document: fitz.Document) -> None:
        document.close()
