"""
Core Models Package

Immutable, validated data models shared by the engine, the codec adapter
and the exporter. All models are frozen dataclasses so a snapshot handed
to the planner or to a worker thread can never change underneath it.
"""

from .sources import PageRef, PageState, SourceDocument, SourceKind
from .plans import AssemblyMode, OutputDocumentPlan, PlanEntry
from .snapshot import CompositionSnapshot

__all__ = [
    "SourceKind",
    "SourceDocument",
    "PageRef",
    "PageState",
    "AssemblyMode",
    "PlanEntry",
    "OutputDocumentPlan",
    "CompositionSnapshot",
]
