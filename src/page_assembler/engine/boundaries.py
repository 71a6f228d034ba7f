"""
Module: engine.boundaries

Purpose:
    Split boundaries: display ids after which an output chunk ends.
"""

from __future__ import annotations

import logging
from typing import FrozenSet, Iterable, Sequence, Set

from page_assembler.core.errors import UnknownPage

from .page_index import PageIndex

logger = logging.getLogger(__name__)


class SplitBoundarySet:
    """
    Recorded split boundaries.

    A boundary on the last page of the order is kept (it becomes meaningful
    again if the page is moved) but never breaks a chunk, since nothing
    follows it.
    """

    def __init__(self, index: PageIndex) -> None:
        self._index = index
        self._ids: Set[int] = set()

    @property
    def ids(self) -> FrozenSet[int]:
        return frozenset(self._ids)

    def toggle(self, display_id: int) -> bool:
        """Flip membership; returns True if a boundary is now recorded."""
        if display_id not in self._index:
            raise UnknownPage(display_id)
        if display_id in self._ids:
            self._ids.discard(display_id)
            return False
        self._ids.add(display_id)
        if display_id == self._index.last_id:
            logger.debug(f"Boundary on last page {display_id} has no effect")
        return True

    def effective(self, order: Sequence[int]) -> FrozenSet[int]:
        """Boundaries that actually split the given order."""
        return frozenset(pid for pid in order[:-1] if pid in self._ids)

    def discard(self, display_ids: Iterable[int]) -> None:
        self._ids.difference_update(display_ids)

    def clear(self) -> None:
        self._ids.clear()

    def __contains__(self, display_id: object) -> bool:
        return display_id in self._ids
