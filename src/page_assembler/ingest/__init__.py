"""
Module: ingest

Purpose:
    Source extraction and the ordered ingest queue.
"""

from .extractor import ExtractedSource, SourceUpload, extract_source, read_upload
from .queue import IngestFailure, IngestQueue, IngestReport

__all__ = [
    "SourceUpload",
    "ExtractedSource",
    "extract_source",
    "read_upload",
    "IngestQueue",
    "IngestReport",
    "IngestFailure",
]
