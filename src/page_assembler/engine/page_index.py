"""
Module: engine.page_index

Purpose:
    The ordered working set of page references spanning all ingested
    sources. Issues display ids and maintains the Order invariant: the
    order is always a permutation of the live pages.

Key Classes:
    - PageIndex: display_id -> PageRef plus the current order

Used By:
    - engine.composition: Owns one index per session
    - engine.selection / rotation / boundaries: Membership checks
"""

from __future__ import annotations

import itertools
import logging
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple

from page_assembler.core.errors import UnknownPage
from page_assembler.core.models import PageRef

from .reorder import ReorderOperation

logger = logging.getLogger(__name__)


class PageIndex:
    """
    Ordered set of live pages.

    Example:
        >>> index = PageIndex()
        >>> refs = index.append_source("src-1", 3)
        >>> index.order
        (1, 2, 3)
        >>> index.reorder((3, 1, 2))
        >>> index.page(3).original_index
        2
    """

    def __init__(self) -> None:
        self._pages: Dict[int, PageRef] = {}
        self._order: List[int] = []
        self._ids = itertools.count(1)

    # ─────────────────────────────────────────────────────────────────────
    # Queries
    # ─────────────────────────────────────────────────────────────────────

    @property
    def order(self) -> Tuple[int, ...]:
        return tuple(self._order)

    @property
    def live_ids(self) -> FrozenSet[int]:
        return frozenset(self._pages)

    @property
    def pages(self) -> Dict[int, PageRef]:
        """Copy of the display_id -> PageRef mapping."""
        return dict(self._pages)

    @property
    def last_id(self) -> Optional[int]:
        return self._order[-1] if self._order else None

    def page(self, display_id: int) -> PageRef:
        try:
            return self._pages[display_id]
        except KeyError:
            raise UnknownPage(display_id) from None

    def require(self, display_ids: Iterable[int]) -> FrozenSet[int]:
        """Return ids as a frozenset, raising UnknownPage for any non-live id."""
        ids = frozenset(display_ids)
        for pid in ids:
            if pid not in self._pages:
                raise UnknownPage(pid)
        return ids

    def pages_of(self, source_id: str) -> Tuple[int, ...]:
        """Display ids of one source, in current order."""
        return tuple(pid for pid in self._order if self._pages[pid].source_id == source_id)

    def __contains__(self, display_id: object) -> bool:
        return display_id in self._pages

    def __len__(self) -> int:
        return len(self._order)

    # ─────────────────────────────────────────────────────────────────────
    # Transitions
    # ─────────────────────────────────────────────────────────────────────

    def append_source(self, source_id: str, page_count: int) -> Tuple[PageRef, ...]:
        """Create one PageRef per page and append them in extraction order."""
        refs = tuple(
            PageRef(display_id=next(self._ids), source_id=source_id, original_index=i)
            for i in range(page_count)
        )
        for ref in refs:
            self._pages[ref.display_id] = ref
            self._order.append(ref.display_id)
        return refs

    def remove_source(self, source_id: str) -> FrozenSet[int]:
        """Drop every page of a source; returns the removed display ids."""
        removed = frozenset(pid for pid, ref in self._pages.items() if ref.source_id == source_id)
        if removed:
            self._order = [pid for pid in self._order if pid not in removed]
            for pid in removed:
                del self._pages[pid]
        return removed

    def reorder(self, new_order: Iterable[int]) -> None:
        """
        Replace the order with a permutation of itself.

        Raises:
            InvalidPermutation: If new_order is not a permutation of the
                current order. The current order is left unchanged.
        """
        self.apply(ReorderOperation(tuple(new_order)))

    def apply(self, operation: ReorderOperation) -> None:
        operation.validate(self._order)
        if operation.is_noop(self._order):
            return
        self._order = list(operation.new_order)
        logger.debug(f"Reordered {len(self._order)} pages")

    def clear(self) -> FrozenSet[int]:
        removed = frozenset(self._pages)
        self._pages.clear()
        self._order.clear()
        return removed
