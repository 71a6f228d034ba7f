"""
Module: engine.planner

Purpose:
    Combine order, selection, rotation and split boundaries into the exact
    page sequence(s) to write. Planning is a pure function of a snapshot.

Key Functions:
    - plan_assembly(): Plans for one of the four assembly modes
    - plan_page_ranges(): One plan per range of a "1-3, 5" style string
    - chunk_by_boundaries(): The split walk, exposed for reuse

Dependencies:
    - core.models: CompositionSnapshot, OutputDocumentPlan

Used By:
    - engine.composition: CompositionEngine.plan / plan_ranges
    - page_assembler.controller: export_assembly

Split policy:
    Boundaries are evaluated against the selection-filtered order. A
    boundary on an unselected page never appears in the walked sequence and
    so has no effect.
"""

from __future__ import annotations

import logging
from typing import AbstractSet, List, Sequence, Tuple

from page_assembler.core.errors import NoPagesSelected, NoSplitPoints
from page_assembler.core.models import (
    AssemblyMode,
    CompositionSnapshot,
    OutputDocumentPlan,
    PlanEntry,
    SourceKind,
)

from .page_ranges import parse_page_ranges

logger = logging.getLogger(__name__)


def plan_assembly(
    snapshot: CompositionSnapshot,
    mode: "AssemblyMode | str",
) -> Tuple[OutputDocumentPlan, ...]:
    """
    Build output plans for a snapshot.

    Modes:
    - MERGE_SELECTED: one plan of the selected pages in order
    - SPLIT_SELECTED: selected pages cut after each boundary page
    - SEPARATE: one single-page plan per selected page
    - MERGE_ALL: one plan of every page; selection and boundaries ignored

    Args:
        snapshot: Engine state
        mode: Assembly mode or its string value

    Returns:
        Tuple of plans. Multi-plan modes number their plans from 1.

    Raises:
        NoPagesSelected: If the sequence to output is empty
        NoSplitPoints: SPLIT_SELECTED with no boundary among selected pages

    Example:
        >>> plans = plan_assembly(snapshot, AssemblyMode.SPLIT_SELECTED)
        >>> [p.page_count for p in plans]
        [2, 2, 1]
    """
    mode = AssemblyMode(mode)

    if mode is AssemblyMode.MERGE_ALL:
        if not snapshot.order:
            raise NoPagesSelected("No pages to merge")
        plans = (_build_plan(snapshot, snapshot.order),)
    else:
        filtered = snapshot.selected_order()
        if not filtered:
            raise NoPagesSelected()

        if mode is AssemblyMode.MERGE_SELECTED:
            plans = (_build_plan(snapshot, filtered),)
        elif mode is AssemblyMode.SEPARATE:
            plans = tuple(
                _build_plan(snapshot, (pid,), index=i)
                for i, pid in enumerate(filtered, start=1)
            )
        else:
            if snapshot.boundaries.isdisjoint(filtered):
                raise NoSplitPoints()
            chunks = chunk_by_boundaries(filtered, snapshot.boundaries)
            plans = tuple(
                _build_plan(snapshot, chunk, index=i)
                for i, chunk in enumerate(chunks, start=1)
            )

    logger.debug(
        f"Planned {len(plans)} output(s) for {mode.value}: "
        f"{sum(p.page_count for p in plans)} pages"
    )
    return plans


def chunk_by_boundaries(
    sequence: Sequence[int],
    boundaries: AbstractSet[int],
) -> List[Tuple[int, ...]]:
    """
    Walk sequence left to right, closing a chunk after each boundary id.

    Empty chunks are never produced, and concatenating the chunks gives
    back sequence exactly.

    Example:
        >>> chunk_by_boundaries([1, 2, 3, 4, 5], {2, 4})
        [(1, 2), (3, 4), (5,)]
    """
    chunks: List[Tuple[int, ...]] = []
    current: List[int] = []
    for pid in sequence:
        current.append(pid)
        if pid in boundaries:
            chunks.append(tuple(current))
            current = []
    if current:
        chunks.append(tuple(current))
    return chunks


def plan_page_ranges(snapshot: CompositionSnapshot, spec: str) -> Tuple[OutputDocumentPlan, ...]:
    """
    One plan per range, over 1-based positions in the current order.

    Selection and boundaries are ignored; rotations are applied.

    Raises:
        NoPagesSelected: If there are no pages
        InvalidPageRange: If spec cannot be parsed
    """
    if not snapshot.order:
        raise NoPagesSelected("No pages to split")
    ranges = parse_page_ranges(spec, len(snapshot.order))
    return tuple(
        _build_plan(
            snapshot,
            [snapshot.order[pos] for pos in page_range.positions],
            index=i,
            label=page_range.label,
        )
        for i, page_range in enumerate(ranges, start=1)
    )


def _build_plan(
    snapshot: CompositionSnapshot,
    display_ids: Sequence[int],
    *,
    index: "int | None" = None,
    label: "str | None" = None,
) -> OutputDocumentPlan:
    entries = []
    for pid in display_ids:
        ref = snapshot.pages[pid]
        entries.append(
            PlanEntry(
                source_id=ref.source_id,
                original_index=ref.original_index,
                rotation=snapshot.rotation_of(pid),
                kind=snapshot.source_kinds.get(ref.source_id, SourceKind.PDF),
            )
        )
    return OutputDocumentPlan(entries=tuple(entries), index=index, label=label)
