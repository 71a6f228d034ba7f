"""
Module: core.models.snapshot

Purpose:
    Immutable view of the engine state at one instant. Returned by every
    engine transition and consumed by the planner, so planning never sees
    a half-applied mutation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import FrozenSet, Mapping, Tuple

from .sources import PageRef, SourceKind


def _frozen_mapping(data: Mapping) -> Mapping:
    return MappingProxyType(dict(data))


@dataclass(frozen=True, eq=False)
class CompositionSnapshot:
    """
    Engine state snapshot.

    Attributes:
        pages: display_id -> PageRef for every live page
        order: Current page order (a permutation of pages' keys)
        selection: Selected display ids
        rotation: display_id -> rotation delta (absent means 0)
        boundaries: display ids that end a chunk
        source_kinds: source_id -> SourceKind for every live source

    Invariants:
        - set(order) == set(pages)
        - selection, boundaries and rotation keys are subsets of order
    """

    pages: Mapping[int, PageRef] = field(default_factory=dict)
    order: Tuple[int, ...] = ()
    selection: FrozenSet[int] = frozenset()
    rotation: Mapping[int, int] = field(default_factory=dict)
    boundaries: FrozenSet[int] = frozenset()
    source_kinds: Mapping[str, SourceKind] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "pages", _frozen_mapping(self.pages))
        object.__setattr__(self, "rotation", _frozen_mapping(self.rotation))
        object.__setattr__(self, "order", tuple(self.order))
        object.__setattr__(self, "selection", frozenset(self.selection))
        object.__setattr__(self, "boundaries", frozenset(self.boundaries))
        object.__setattr__(self, "source_kinds", _frozen_mapping(self.source_kinds))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CompositionSnapshot):
            return NotImplemented
        return (
            dict(self.pages) == dict(other.pages)
            and self.order == other.order
            and self.selection == other.selection
            and dict(self.rotation) == dict(other.rotation)
            and self.boundaries == other.boundaries
            and dict(self.source_kinds) == dict(other.source_kinds)
        )

    __hash__ = None  # type: ignore[assignment]

    @property
    def page_count(self) -> int:
        return len(self.order)

    def rotation_of(self, display_id: int) -> int:
        return self.rotation.get(display_id, 0)

    def selected_order(self) -> Tuple[int, ...]:
        """Order filtered to the selection, relative order preserved."""
        return tuple(pid for pid in self.order if pid in self.selection)
