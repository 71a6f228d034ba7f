"""
Module: engine

Purpose:
    Page composition state and the assembly planner. Everything in this
    package is synchronous and in-memory; codec work happens elsewhere.

Key Classes:
    - CompositionEngine: Owner of all composition state
    - SourceRegistry, PageIndex: Sources and the page order
    - SelectionSet, RotationMap, SplitBoundarySet: Per-page stores
    - ReorderOperation: A validated new order

Key Functions:
    - plan_assembly(): Snapshot + mode -> output plans
    - plan_page_ranges(): Snapshot + "1-3, 5" -> output plans
"""

from .boundaries import SplitBoundarySet
from .composition import CompositionEngine
from .page_index import PageIndex
from .page_ranges import PageRange, parse_page_ranges
from .planner import chunk_by_boundaries, plan_assembly, plan_page_ranges
from .registry import SourceRegistry
from .reorder import ReorderOperation, validate_permutation
from .rotation import RotationDirection, RotationMap, normalize_rotation
from .selection import SelectionSet

__all__ = [
    "CompositionEngine",
    "SourceRegistry",
    "PageIndex",
    "SelectionSet",
    "RotationMap",
    "RotationDirection",
    "normalize_rotation",
    "SplitBoundarySet",
    "ReorderOperation",
    "validate_permutation",
    "PageRange",
    "parse_page_ranges",
    "plan_assembly",
    "plan_page_ranges",
    "chunk_by_boundaries",
]
