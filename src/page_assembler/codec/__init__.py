"""
Module: codec

Purpose:
    Document codec and renderer collaborators. The engine depends only on
    the abstract interfaces in codec.base; PyMuPDF is the default backend.
"""

from .base import DocumentCodec, ImageHandle, PageHandle, ThumbnailRenderer
from .pymupdf_codec import PyMuPDFCodec
from .renderer import PyMuPDFRenderer, iter_source_images, render_source_page
from .text_pages import render_text_document, wrap_text

__all__ = [
    "DocumentCodec",
    "ThumbnailRenderer",
    "PageHandle",
    "ImageHandle",
    "PyMuPDFCodec",
    "PyMuPDFRenderer",
    "render_source_page",
    "iter_source_images",
    "render_text_document",
    "wrap_text",
]
