"""
Module: core.models.plans

Purpose:
    The engine's output artifact. An OutputDocumentPlan is the exact page
    sequence of one output file; executing it is the codec's job.

Key Classes:
    - AssemblyMode: How the planner partitions pages into outputs
    - PlanEntry: One (source, original index, rotation) triple
    - OutputDocumentPlan: Ordered entries for one output file

Used By:
    - engine.planner: Produces plans
    - export.executor: Executes plans against a DocumentCodec
    - export.exporter: Names and delivers results
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .sources import SourceKind


class AssemblyMode(Enum):
    """
    Planner modes.

    Attributes:
        MERGE_SELECTED: One output with the selected pages, in order
        SPLIT_SELECTED: Selected pages cut into chunks at split boundaries
        SEPARATE: One single-page output per selected page
        MERGE_ALL: One output with every page, selection ignored
    """

    MERGE_SELECTED = "merge-selected"
    SPLIT_SELECTED = "split-selected"
    SEPARATE = "separate"
    MERGE_ALL = "merge-all"

    @property
    def tag(self) -> str:
        """Operation tag used in output filenames."""
        return _MODE_TAGS[self]


_MODE_TAGS = {
    AssemblyMode.MERGE_SELECTED: "selected",
    AssemblyMode.SPLIT_SELECTED: "split",
    AssemblyMode.SEPARATE: "page",
    AssemblyMode.MERGE_ALL: "merged",
}


@dataclass(frozen=True)
class PlanEntry:
    """
    One page of an output document.

    Attributes:
        source_id: Source the page is copied from
        original_index: 0-based page index within that source
        rotation: Rotation delta in degrees, one of 0/90/180/270
        kind: Source kind, used by the codec adapter to pick a copy path
    """

    source_id: str
    original_index: int
    rotation: int = 0
    kind: SourceKind = SourceKind.PDF

    def as_tuple(self) -> Tuple[str, int, int]:
        """(source_id, original_index, rotation)."""
        return (self.source_id, self.original_index, self.rotation)


@dataclass(frozen=True)
class OutputDocumentPlan:
    """
    Ordered page sequence for one output file (immutable).

    Attributes:
        entries: Pages in output order
        index: 1-based position in a multi-output batch, None for a
            single output
        label: Overrides index in the filename (used for range splits)

    Example:
        >>> plan = OutputDocumentPlan((PlanEntry("src-1", 0), PlanEntry("src-1", 2)))
        >>> plan.page_count
        2
    """

    entries: Tuple[PlanEntry, ...]
    index: Optional[int] = None
    label: Optional[str] = None

    @property
    def page_count(self) -> int:
        return len(self.entries)

    @property
    def source_ids(self) -> Tuple[str, ...]:
        """Distinct source ids in first-use order."""
        return tuple(dict.fromkeys(e.source_id for e in self.entries))

    @property
    def suffix(self) -> Optional[str]:
        """Filename suffix: label if set, else the 1-based index."""
        if self.label is not None:
            return self.label
        if self.index is not None:
            return str(self.index)
        return None

    def as_tuples(self) -> Tuple[Tuple[str, int, int], ...]:
        return tuple(e.as_tuple() for e in self.entries)
