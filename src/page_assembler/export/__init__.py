"""
Module: export

Purpose:
    Plan execution, output naming and delivery.
"""

from .executor import render_plan
from .exporter import ExportResult, export_plans
from .images import export_page_images
from .naming import output_filename, plans_base_name, resolve_base_name, sanitize_base_name
from .sink import DirectorySink, MemorySink, OutputSink, ZipSink

__all__ = [
    "render_plan",
    "export_plans",
    "ExportResult",
    "export_page_images",
    "output_filename",
    "plans_base_name",
    "resolve_base_name",
    "sanitize_base_name",
    "OutputSink",
    "DirectorySink",
    "ZipSink",
    "MemorySink",
]
