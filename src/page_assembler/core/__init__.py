"""Core models and errors for the page assembler."""

from .errors import (
    AssemblyError,
    ChunkExportFailure,
    CorruptSource,
    InvalidPageRange,
    InvalidPermutation,
    NoPagesSelected,
    NoSplitPoints,
    UnknownPage,
    UnknownSource,
    UnsupportedSourceKind,
)

__all__ = [
    "AssemblyError",
    "ChunkExportFailure",
    "CorruptSource",
    "InvalidPageRange",
    "InvalidPermutation",
    "NoPagesSelected",
    "NoSplitPoints",
    "UnknownPage",
    "UnknownSource",
    "UnsupportedSourceKind",
]
