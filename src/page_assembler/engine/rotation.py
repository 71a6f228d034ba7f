"""
Module: engine.rotation

Purpose:
    Per-page cumulative rotation delta. Rotations compose by modular
    addition and are always normalized into {0, 90, 180, 270}.

Key Classes:
    - RotationDirection: cw / ccw step
    - RotationMap: display_id -> rotation delta
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Iterable

from page_assembler.core.errors import UnknownPage

from .page_index import PageIndex

STEP_DEGREES = 90


class RotationDirection(Enum):
    CW = "cw"
    CCW = "ccw"

    @property
    def step(self) -> int:
        return STEP_DEGREES if self is RotationDirection.CW else -STEP_DEGREES

    @classmethod
    def coerce(cls, value: "str | RotationDirection") -> RotationDirection:
        if isinstance(value, RotationDirection):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"Rotation direction must be 'cw' or 'ccw': {value!r}") from None


def normalize_rotation(degrees: int) -> int:
    """
    Normalize any multiple of 90 into [0, 360).

    Example:
        >>> normalize_rotation(-90)
        270
    """
    if degrees % STEP_DEGREES:
        raise ValueError(f"Rotation must be a multiple of {STEP_DEGREES}: {degrees}")
    return (degrees % 360 + 360) % 360


class RotationMap:
    """
    Rotation deltas for live pages. Pages never rotated, or rotated back
    to 0, have no entry.
    """

    def __init__(self, index: PageIndex) -> None:
        self._index = index
        self._deltas: Dict[int, int] = {}

    def get(self, display_id: int) -> int:
        return self._deltas.get(display_id, 0)

    def as_dict(self) -> Dict[int, int]:
        return dict(self._deltas)

    def rotate(self, display_id: int, direction: "str | RotationDirection" = RotationDirection.CW) -> int:
        """Apply one 90° step; returns the new delta."""
        if display_id not in self._index:
            raise UnknownPage(display_id)
        step = RotationDirection.coerce(direction).step
        return self._set(display_id, normalize_rotation(self.get(display_id) + step))

    def rotate_bulk(
        self,
        display_ids: Iterable[int],
        direction: "str | RotationDirection" = RotationDirection.CW,
    ) -> None:
        """Apply one step to every id. All ids are checked before any change."""
        ids = self._index.require(display_ids)
        step = RotationDirection.coerce(direction).step
        for pid in ids:
            self._set(pid, normalize_rotation(self.get(pid) + step))

    def discard(self, display_ids: Iterable[int]) -> None:
        for pid in display_ids:
            self._deltas.pop(pid, None)

    def clear(self) -> None:
        self._deltas.clear()

    def _set(self, display_id: int, degrees: int) -> int:
        if degrees:
            self._deltas[display_id] = degrees
        else:
            self._deltas.pop(display_id, None)
        return degrees
