"""
Module: engine.registry

Purpose:
    Track ingested source documents and their page counts.

Key Classes:
    - SourceRegistry: source_id -> SourceDocument, in ingestion order

Used By:
    - engine.composition: Owns one registry per session
    - export.executor: Looks up payloads when executing plans
"""

from __future__ import annotations

import itertools
import logging
from typing import Dict, Iterator, Optional

from page_assembler.core.errors import CorruptSource, UnknownSource
from page_assembler.core.models import SourceDocument, SourceKind

logger = logging.getLogger(__name__)


class SourceRegistry:
    """
    Registry of ingested sources.

    Source ids are issued as "src-1", "src-2", ... and never reused, so a
    plan that outlives a removed source can never silently resolve to a
    different file.

    Removing a source here does not touch pages; the engine controller
    cascades removal through the page index and the stores.
    """

    def __init__(self) -> None:
        self._sources: Dict[str, SourceDocument] = {}
        self._ids = itertools.count(1)

    def ingest(
        self,
        kind: "str | SourceKind",
        page_count: int,
        *,
        name: str = "",
        payload: bytes = b"",
        media_type: Optional[str] = None,
    ) -> str:
        """
        Register a successfully extracted source.

        Args:
            kind: Source kind, kind name, MIME type or filename
            page_count: Number of extracted pages
            name: Original filename
            payload: Bytes for the codec
            media_type: MIME type of payload (defaults per kind)

        Returns:
            New source id

        Raises:
            UnsupportedSourceKind: If kind cannot be resolved
            CorruptSource: If page_count is not positive
        """
        source_kind = SourceKind.from_declared(kind)
        if page_count < 1:
            raise CorruptSource(name or "source", f"no pages extracted ({page_count})")

        if media_type is None:
            media_type = "image/png" if source_kind is SourceKind.IMAGE else "application/pdf"

        source_id = f"src-{next(self._ids)}"
        self._sources[source_id] = SourceDocument(
            source_id=source_id,
            kind=source_kind,
            page_count=page_count,
            name=name,
            payload=payload,
            media_type=media_type,
        )
        logger.debug(f"Registered {source_id} ({source_kind.value}, {page_count} pages) from {name!r}")
        return source_id

    def remove(self, source_id: str) -> SourceDocument:
        """Unregister a source and return it."""
        try:
            source = self._sources.pop(source_id)
        except KeyError:
            raise UnknownSource(source_id) from None
        logger.debug(f"Removed {source_id}")
        return source

    def get(self, source_id: str) -> SourceDocument:
        try:
            return self._sources[source_id]
        except KeyError:
            raise UnknownSource(source_id) from None

    def clear(self) -> None:
        self._sources.clear()

    @property
    def total_pages(self) -> int:
        return sum(s.page_count for s in self._sources.values())

    def __contains__(self, source_id: object) -> bool:
        return source_id in self._sources

    def __iter__(self) -> Iterator[SourceDocument]:
        return iter(list(self._sources.values()))

    def __len__(self) -> int:
        return len(self._sources)
