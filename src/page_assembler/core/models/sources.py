"""
Module: core.models.sources

Purpose:
    Identity of ingested documents and of the pages drawn from them.

Key Classes:
    - SourceKind: Tag for pdf / image / text sources
    - SourceDocument: One ingested file
    - PageRef: One page of one source, with a stable display id
    - PageState: Lifecycle of a display id

Dependencies:
    - dataclasses (std)
    - enum (std)

Used By:
    - engine.registry: Creates SourceDocuments
    - engine.page_index: Creates PageRefs
    - codec / export: Dispatch on SourceKind
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePath
from typing import Dict

from ..errors import UnsupportedSourceKind


_MEDIA_TYPES: Dict[str, str] = {
    "application/pdf": "pdf",
    "image/png": "image",
    "image/jpeg": "image",
    "image/jpg": "image",
    "text/plain": "text",
}

_EXTENSIONS: Dict[str, str] = {
    ".pdf": "pdf",
    ".png": "image",
    ".jpg": "image",
    ".jpeg": "image",
    ".txt": "text",
}


class SourceKind(Enum):
    """
    Kind of an ingested source.

    TEXT sources are converted to PDF pages at ingestion and are then
    composed exactly like PDF sources.

    Example:
        >>> SourceKind.from_declared("image/png")
        <SourceKind.IMAGE: 'image'>
        >>> SourceKind.from_declared("notes.txt")
        <SourceKind.TEXT: 'text'>
    """

    PDF = "pdf"
    IMAGE = "image"
    TEXT = "text"

    @classmethod
    def from_declared(cls, declared: "str | SourceKind") -> SourceKind:
        """
        Resolve a kind from a kind name, MIME type or filename.

        Raises:
            UnsupportedSourceKind: If nothing matches
        """
        if isinstance(declared, SourceKind):
            return declared
        key = (declared or "").strip().lower()
        if key in {"pdf", "image", "text", "textpage"}:
            return cls.TEXT if key == "textpage" else cls(key)
        if key in _MEDIA_TYPES:
            return cls(_MEDIA_TYPES[key])
        suffix = PurePath(key).suffix
        if suffix in _EXTENSIONS:
            return cls(_EXTENSIONS[suffix])
        raise UnsupportedSourceKind(declared)

    @property
    def is_paged(self) -> bool:
        """True when pages are copied out of a PDF payload."""
        return self is not SourceKind.IMAGE


@dataclass(frozen=True)
class SourceDocument:
    """
    One ingested file (immutable).

    Attributes:
        source_id: Registry key, e.g. "src-1"
        kind: Source kind
        page_count: Number of pages extracted (always >= 1)
        name: Original filename, used for output naming
        payload: Bytes the codec reads at export time. For TEXT sources
            this is the PDF the text was typeset into.
        media_type: MIME type of the payload
    """

    source_id: str
    kind: SourceKind
    page_count: int
    name: str = ""
    payload: bytes = field(default=b"", repr=False, compare=False)
    media_type: str = "application/pdf"

    def __post_init__(self) -> None:
        if self.page_count < 1:
            raise ValueError(f"page_count must be positive: {self.page_count}")

    @property
    def base_name(self) -> str:
        """Filename without directory or extension."""
        stem = PurePath(self.name).stem if self.name else ""
        return stem or self.source_id

    @property
    def image_format(self) -> str:
        """Image format name for the codec ("png" or "jpeg")."""
        return "png" if self.media_type.endswith("png") else "jpeg"


@dataclass(frozen=True)
class PageRef:
    """
    Reference to one page of one source.

    Created once per extracted page and never mutated. display_id is
    unique for the lifetime of the engine and never reused.

    Example:
        >>> ref = PageRef(display_id=3, source_id="src-1", original_index=2)
        >>> ref.original_index
        2
    """

    display_id: int
    source_id: str
    original_index: int

    def __post_init__(self) -> None:
        if self.original_index < 0:
            raise ValueError(f"original_index must be non-negative: {self.original_index}")


class PageState(Enum):
    """absent → live → removed; no other transitions exist."""

    ABSENT = "absent"
    LIVE = "live"
    REMOVED = "removed"
