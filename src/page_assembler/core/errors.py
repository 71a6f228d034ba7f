"""
Module: core.errors

Purpose:
    Exception hierarchy for the composition engine and its collaborators.
    Every failure the engine reports is an AssemblyError; none of them
    leaves the engine in an unusable state.

Key Classes:
    - AssemblyError: Base class
    - UnsupportedSourceKind, CorruptSource: Ingestion failures
    - UnknownSource, UnknownPage: References to ids that are not live
    - InvalidPermutation: Rejected reorder
    - NoPagesSelected, NoSplitPoints, InvalidPageRange: Planning failures
    - ChunkExportFailure: One output document could not be produced

Used By:
    - page_assembler.engine: State transitions and planning
    - page_assembler.ingest: Extraction
    - page_assembler.export: Plan execution
"""

from __future__ import annotations

from typing import Iterable, Optional


class AssemblyError(Exception):
    """Base class for all page assembly errors."""
    pass


class UnsupportedSourceKind(AssemblyError):
    """Declared file type is not a PDF, an image or plain text."""

    def __init__(self, declared: str) -> None:
        super().__init__(f"Unsupported source type: {declared!r}")
        self.declared = declared


class CorruptSource(AssemblyError):
    """A source could not be decoded; it contributes no pages."""

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"Could not read {name}: {reason}")
        self.name = name
        self.reason = reason


class UnknownSource(AssemblyError, KeyError):
    """Source id is not registered."""

    def __init__(self, source_id: str) -> None:
        super().__init__(f"Unknown source: {source_id}")
        self.source_id = source_id

    def __str__(self) -> str:
        return self.args[0]


class UnknownPage(AssemblyError, KeyError):
    """Display id does not refer to a live page."""

    def __init__(self, display_id: int) -> None:
        super().__init__(f"Unknown page: {display_id}")
        self.display_id = display_id

    def __str__(self) -> str:
        return self.args[0]


class InvalidPermutation(AssemblyError):
    """
    Proposed order is not a permutation of the current order.

    Attributes:
        missing: Live ids absent from the proposal
        unexpected: Ids in the proposal that are not live
        duplicates: Ids listed more than once
    """

    def __init__(
        self,
        *,
        missing: Iterable[int] = (),
        unexpected: Iterable[int] = (),
        duplicates: Iterable[int] = (),
    ) -> None:
        self.missing = tuple(sorted(missing))
        self.unexpected = tuple(sorted(unexpected))
        self.duplicates = tuple(sorted(duplicates))
        details = []
        if self.missing:
            details.append(f"missing {list(self.missing)}")
        if self.unexpected:
            details.append(f"unexpected {list(self.unexpected)}")
        if self.duplicates:
            details.append(f"duplicated {list(self.duplicates)}")
        super().__init__("Invalid page order: " + (", ".join(details) or "size mismatch"))


class NoPagesSelected(AssemblyError):
    """Nothing would be written to the output."""

    def __init__(self, message: str = "No pages selected") -> None:
        super().__init__(message)


class NoSplitPoints(AssemblyError):
    """Split requested but no boundary falls inside the selected pages."""

    def __init__(self, message: str = "No split points among the selected pages") -> None:
        super().__init__(message)


class InvalidPageRange(AssemblyError):
    """A page range token could not be parsed or is out of bounds."""

    def __init__(self, token: str, reason: str) -> None:
        super().__init__(f"Invalid page range {token!r}: {reason}")
        self.token = token
        self.reason = reason


class ChunkExportFailure(AssemblyError):
    """
    One output document failed to export.

    Attributes:
        chunk_index: 1-based position of the plan in the export batch
        filename: Name the output would have been delivered under
    """

    def __init__(
        self,
        chunk_index: int,
        filename: str,
        cause: Optional[BaseException] = None,
    ) -> None:
        reason = f": {cause}" if cause is not None else ""
        super().__init__(f"Failed to export chunk {chunk_index} ({filename}){reason}")
        self.chunk_index = chunk_index
        self.filename = filename
        self.cause = cause
