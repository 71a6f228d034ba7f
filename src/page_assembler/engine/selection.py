"""
Module: engine.selection

Purpose:
    Which pages are currently included in output. Pure set operations over
    the id set of the page index.
"""

from __future__ import annotations

from typing import FrozenSet, Iterable, Set

from page_assembler.core.errors import UnknownPage

from .page_index import PageIndex


class SelectionSet:
    """
    Selected display ids; always a subset of the index's live ids.

    Example:
        >>> selection = SelectionSet(index)
        >>> selection.toggle(1)
        True
        >>> selection.invert().ids == index.live_ids - {1}
        True
    """

    def __init__(self, index: PageIndex) -> None:
        self._index = index
        self._selected: Set[int] = set()

    @property
    def ids(self) -> FrozenSet[int]:
        return frozenset(self._selected)

    def toggle(self, display_id: int) -> bool:
        """Flip membership; returns True if the page is now selected."""
        if display_id not in self._index:
            raise UnknownPage(display_id)
        if display_id in self._selected:
            self._selected.discard(display_id)
            return False
        self._selected.add(display_id)
        return True

    def invert(self) -> SelectionSet:
        self._selected = set(self._index.live_ids - self._selected)
        return self

    def select(self, display_ids: Iterable[int]) -> None:
        self._selected |= self._index.require(display_ids)

    def select_all(self) -> None:
        self._selected = set(self._index.live_ids)

    def clear(self) -> None:
        self._selected.clear()

    def discard(self, display_ids: Iterable[int]) -> None:
        self._selected.difference_update(display_ids)

    def __contains__(self, display_id: object) -> bool:
        return display_id in self._selected

    def __len__(self) -> int:
        return len(self._selected)
