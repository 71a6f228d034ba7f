"""
Module: engine.reorder

Purpose:
    Validate and describe a new page order. A reorder is a single command
    carrying the complete proposed order; it is accepted only when it is an
    exact permutation of the current order.

Key Classes:
    - ReorderOperation: A proposed order, validated against a current order

Key Functions:
    - validate_permutation(): Raise InvalidPermutation on any mismatch
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Sequence, Tuple

from page_assembler.core.errors import InvalidPermutation, UnknownPage


def validate_permutation(current: Sequence[int], proposed: Sequence[int]) -> None:
    """
    Check that proposed is a permutation of current.

    Raises:
        InvalidPermutation: With the missing, unexpected and duplicated ids
    """
    want = Counter(current)
    got = Counter(proposed)
    if want == got:
        return
    missing = set(want) - set(got)
    unexpected = set(got) - set(want)
    duplicates = {pid for pid, n in got.items() if n > 1}
    raise InvalidPermutation(missing=missing, unexpected=unexpected, duplicates=duplicates)


@dataclass(frozen=True)
class ReorderOperation:
    """
    A complete proposed order.

    Example:
        >>> op = ReorderOperation.move((1, 2, 3, 4), display_id=4, position=0)
        >>> op.new_order
        (4, 1, 2, 3)
    """

    new_order: Tuple[int, ...]

    def validate(self, current: Sequence[int]) -> None:
        validate_permutation(current, self.new_order)

    def is_noop(self, current: Sequence[int]) -> bool:
        return tuple(current) == self.new_order

    @classmethod
    def move(cls, current: Sequence[int], display_id: int, position: int) -> ReorderOperation:
        """
        Build the order produced by dragging one page to a new position.

        position is the index the page occupies afterwards; it is clamped to
        the bounds of the order.

        Raises:
            UnknownPage: If display_id is not in current
        """
        order = list(current)
        try:
            order.remove(display_id)
        except ValueError:
            raise UnknownPage(display_id) from None
        position = max(0, min(position, len(order)))
        order.insert(position, display_id)
        return cls(tuple(order))
