"""
Module: engine.composition

Purpose:
    The single owner of composition state. Every mutating method is an
    atomic transition: it either fully applies and returns the new
    snapshot, or raises and leaves the state untouched.

Key Classes:
    - CompositionEngine: Registry, page index and the three stores

Dependencies:
    - engine.registry, engine.page_index, engine.selection,
      engine.rotation, engine.boundaries: State components
    - engine.planner: Plan construction

Used By:
    - page_assembler.controller: Ingest and export workflows
    - page_assembler.cli: Command line front end
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Optional, Sequence, Set, Tuple

from page_assembler.config import AssemblyConfig
from page_assembler.core.models import (
    AssemblyMode,
    CompositionSnapshot,
    OutputDocumentPlan,
    PageRef,
    PageState,
    SourceDocument,
    SourceKind,
)

from .boundaries import SplitBoundarySet
from .page_index import PageIndex
from .planner import plan_assembly, plan_page_ranges
from .registry import SourceRegistry
from .reorder import ReorderOperation
from .rotation import RotationDirection, RotationMap
from .selection import SelectionSet

logger = logging.getLogger(__name__)


class CompositionEngine:
    """
    Page composition engine.

    Example:
        >>> engine = CompositionEngine()
        >>> source_id = engine.add_source("pdf", 3, name="report.pdf")
        >>> first, second, third = engine.order
        >>> snapshot = engine.toggle_selection(second)
        >>> [p.as_tuples() for p in engine.plan("merge-selected")]
        [(('src-1', 0, 0), ('src-1', 2, 0))]
    """

    def __init__(self, config: Optional[AssemblyConfig] = None) -> None:
        self.config = config or AssemblyConfig()
        self.registry = SourceRegistry()
        self.index = PageIndex()
        self.selection = SelectionSet(self.index)
        self.rotation = RotationMap(self.index)
        self.boundaries = SplitBoundarySet(self.index)
        self._removed: Set[int] = set()

    # ─────────────────────────────────────────────────────────────────────
    # Queries
    # ─────────────────────────────────────────────────────────────────────

    @property
    def order(self) -> Tuple[int, ...]:
        return self.index.order

    @property
    def sources(self) -> Tuple[SourceDocument, ...]:
        return tuple(self.registry)

    def page(self, display_id: int) -> PageRef:
        return self.index.page(display_id)

    def page_state(self, display_id: int) -> PageState:
        if display_id in self.index:
            return PageState.LIVE
        if display_id in self._removed:
            return PageState.REMOVED
        return PageState.ABSENT

    def snapshot(self) -> CompositionSnapshot:
        return CompositionSnapshot(
            pages=self.index.pages,
            order=self.index.order,
            selection=self.selection.ids,
            rotation=self.rotation.as_dict(),
            boundaries=self.boundaries.ids,
            source_kinds={s.source_id: s.kind for s in self.registry},
        )

    # ─────────────────────────────────────────────────────────────────────
    # Sources
    # ─────────────────────────────────────────────────────────────────────

    def add_source(
        self,
        kind: "str | SourceKind",
        page_count: int,
        *,
        name: str = "",
        payload: bytes = b"",
        media_type: Optional[str] = None,
    ) -> str:
        """
        Register a source and append its pages to the order.

        Raises:
            UnsupportedSourceKind, CorruptSource: Nothing is added
        """
        source_id = self.registry.ingest(
            kind, page_count, name=name, payload=payload, media_type=media_type
        )
        refs = self.index.append_source(source_id, page_count)
        if self.config.select_on_ingest:
            self.selection.select(ref.display_id for ref in refs)
        logger.info(f"Added {name or source_id}: {page_count} page(s)")
        return source_id

    def remove_source(self, source_id: str) -> CompositionSnapshot:
        """Remove a source and every trace of its pages."""
        source = self.registry.remove(source_id)
        removed = self.index.remove_source(source_id)
        self._forget(removed)
        logger.info(f"Removed {source.name or source_id}: {len(removed)} page(s)")
        return self.snapshot()

    def clear(self) -> CompositionSnapshot:
        """Remove every source."""
        self.registry.clear()
        self._forget(self.index.clear())
        return self.snapshot()

    def _forget(self, display_ids: Iterable[int]) -> None:
        ids = frozenset(display_ids)
        self.selection.discard(ids)
        self.rotation.discard(ids)
        self.boundaries.discard(ids)
        self._removed |= ids

    # ─────────────────────────────────────────────────────────────────────
    # Order
    # ─────────────────────────────────────────────────────────────────────

    def reorder(self, new_order: Sequence[int]) -> CompositionSnapshot:
        """Raises InvalidPermutation and keeps the old order on bad input."""
        self.index.reorder(new_order)
        return self.snapshot()

    def move_page(self, display_id: int, position: int) -> CompositionSnapshot:
        self.index.apply(ReorderOperation.move(self.index.order, display_id, position))
        return self.snapshot()

    # ─────────────────────────────────────────────────────────────────────
    # Selection
    # ─────────────────────────────────────────────────────────────────────

    def toggle_selection(self, display_id: int) -> CompositionSnapshot:
        self.selection.toggle(display_id)
        return self.snapshot()

    def invert_selection(self) -> CompositionSnapshot:
        self.selection.invert()
        return self.snapshot()

    def select_all(self) -> CompositionSnapshot:
        self.selection.select_all()
        return self.snapshot()

    def clear_selection(self) -> CompositionSnapshot:
        self.selection.clear()
        return self.snapshot()

    # ─────────────────────────────────────────────────────────────────────
    # Rotation
    # ─────────────────────────────────────────────────────────────────────

    def rotate(
        self,
        display_id: int,
        direction: "str | RotationDirection" = RotationDirection.CW,
    ) -> CompositionSnapshot:
        self.rotation.rotate(display_id, direction)
        return self.snapshot()

    def rotate_bulk(
        self,
        display_ids: Iterable[int],
        direction: "str | RotationDirection" = RotationDirection.CW,
    ) -> CompositionSnapshot:
        self.rotation.rotate_bulk(display_ids, direction)
        return self.snapshot()

    def rotate_selected(self) -> CompositionSnapshot:
        """One clockwise step for every selected page."""
        return self.rotate_bulk(self.selection.ids, RotationDirection.CW)

    # ─────────────────────────────────────────────────────────────────────
    # Split boundaries
    # ─────────────────────────────────────────────────────────────────────

    def toggle_split(self, display_id: int) -> CompositionSnapshot:
        self.boundaries.toggle(display_id)
        return self.snapshot()

    # ─────────────────────────────────────────────────────────────────────
    # Planning
    # ─────────────────────────────────────────────────────────────────────

    def plan(self, mode: "AssemblyMode | str") -> Tuple[OutputDocumentPlan, ...]:
        return plan_assembly(self.snapshot(), mode)

    def plan_ranges(self, spec: str) -> Tuple[OutputDocumentPlan, ...]:
        return plan_page_ranges(self.snapshot(), spec)

    def page_labels(self) -> Dict[int, str]:
        """display_id -> "<source name> p<n>" for previews and logs."""
        labels = {}
        for pid in self.index.order:
            ref = self.index.page(pid)
            source = self.registry.get(ref.source_id)
            labels[pid] = f"{source.base_name} p{ref.original_index + 1}"
        return labels
