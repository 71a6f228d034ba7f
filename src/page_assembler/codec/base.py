"""
Module: codec.base

Purpose:
    Abstract collaborator interfaces. The engine never touches document
    binary structure; it hands plans to a DocumentCodec and previews to a
    ThumbnailRenderer.

Key Classes:
    - DocumentCodec: decode / copy / compose / encode
    - ThumbnailRenderer: Rasterize one page for display
    - PageHandle, ImageHandle: Opaque references produced by a codec

Used By:
    - codec.pymupdf_codec: PyMuPDF implementation
    - codec.renderer: PyMuPDF/Pillow renderer
    - export.executor: Plan execution
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, List, Sequence

from PIL import Image


@dataclass(frozen=True)
class PageHandle:
    """A page of a decoded document, ready to be added to another one."""

    document: Any = field(repr=False)
    index: int


@dataclass(frozen=True)
class ImageHandle:
    """An image embedded for placement on its own page."""

    data: bytes = field(repr=False)
    format: str
    width: int
    height: int


class DocumentCodec(ABC):
    """
    Document codec contract.

    Handles returned by decode() and create_document() must be released
    with close().
    """

    @abstractmethod
    def decode(self, data: bytes, *, name: str = "document") -> Any:
        """
        Open a PDF from bytes.

        Raises:
            CorruptSource: If the data is not a readable PDF
        """

    @abstractmethod
    def page_count(self, data: bytes, *, name: str = "document") -> int:
        """Number of pages in a PDF payload."""

    @abstractmethod
    def copy_pages(self, document: Any, indices: Sequence[int]) -> List[PageHandle]:
        """Handles for the given 0-based pages, in the order given."""

    @abstractmethod
    def create_document(self) -> Any:
        """New empty document."""

    @abstractmethod
    def add_page(self, document: Any, page: PageHandle, rotation: int) -> None:
        """Append a copied page, adding rotation to its own rotation."""

    @abstractmethod
    def embed_image(self, document: Any, data: bytes, format: str) -> ImageHandle:
        """
        Prepare image bytes for placement.

        Raises:
            CorruptSource: If the image cannot be read
        """

    @abstractmethod
    def inspect_image(self, data: bytes, format: str, *, name: str = "image") -> ImageHandle:
        """
        Validate image bytes without a target document.

        Raises:
            CorruptSource: If the image cannot be read
        """

    @abstractmethod
    def add_image_page(self, document: Any, image: ImageHandle, rotation: int) -> None:
        """Append a page sized to the image, showing the image."""

    @abstractmethod
    def encode(self, document: Any) -> bytes:
        """Serialize a document."""

    @abstractmethod
    def close(self, document: Any) -> None:
        """Release a document handle."""


class ThumbnailRenderer(ABC):
    """Rasterizes pages for display only; never consulted by the planner."""

    @abstractmethod
    def render(self, source_bytes: bytes, page_index: int, scale: float) -> Image.Image:
        """
        Render one page of a PDF payload.

        Args:
            source_bytes: PDF bytes
            page_index: 0-based page
            scale: 1.0 renders at 72 DPI
        """
