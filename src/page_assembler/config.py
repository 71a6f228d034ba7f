"""
Module: config

Purpose:
    Configuration for ingestion, export and text conversion. Immutable
    configuration with validation on construction, plus a JSON loader that
    falls back to defaults instead of failing.

Key Classes:
    - AssemblyConfig: Main configuration

Key Functions:
    - load_config(): Read overrides from a JSON file

Dependencies:
    - dataclasses (std)
    - json (std)
    - reportlab: Named page sizes

Used By:
    - page_assembler.controller: Ingest and export workflows
    - page_assembler.engine.composition: select_on_ingest
    - page_assembler.ingest.extractor: Text conversion settings
    - page_assembler.cli: --config option
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from reportlab.lib.pagesizes import A4, LETTER

logger = logging.getLogger(__name__)

PAGE_SIZES: Dict[str, Tuple[float, float]] = {
    "A4": A4,
    "LETTER": LETTER,
}


@dataclass(frozen=True)
class AssemblyConfig:
    """
    Configuration for the page assembler (immutable).

    Attributes:
        max_ingest_workers: Threads used to extract sources concurrently
        select_on_ingest: Whether newly ingested pages start selected
        export_pause_seconds: Pause between consecutive deliveries
        thumbnail_scale: Render scale for previews
        image_export_scale: Render scale for PDF-to-PNG conversion
        merged_base_name: Filename base when output mixes several sources
        text_page_size: Page size name for converted text ("A4"/"LETTER")
        text_font_name: ReportLab font for converted text
        text_font_path: TrueType file used instead of text_font_name, for
            scripts the standard fonts cannot typeset
        text_font_size: Font size in points
        text_margin_pt: Page margin in points

    Example:
        >>> config = AssemblyConfig(export_pause_seconds=0)
        >>> config.text_page_size_pt
        (595.2755905511812, 841.8897637795277)
    """

    # Ingestion
    max_ingest_workers: int = 4
    select_on_ingest: bool = True

    # Export
    export_pause_seconds: float = 0.2
    thumbnail_scale: float = 0.8
    image_export_scale: float = 2.0
    merged_base_name: str = "merged"

    # Text conversion
    text_page_size: str = "A4"
    text_font_name: str = "Helvetica"
    text_font_path: Optional[str] = None
    text_font_size: float = 11.0
    text_margin_pt: float = 54.0

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.max_ingest_workers < 1:
            raise ValueError(f"max_ingest_workers must be positive: {self.max_ingest_workers}")
        if self.export_pause_seconds < 0:
            raise ValueError(f"export_pause_seconds must be non-negative: {self.export_pause_seconds}")
        if self.thumbnail_scale <= 0 or self.image_export_scale <= 0:
            raise ValueError("render scales must be positive")
        if not self.merged_base_name.strip():
            raise ValueError("merged_base_name must not be empty")
        if self.text_page_size.upper() not in PAGE_SIZES:
            raise ValueError(f"Unknown page size: {self.text_page_size!r}")
        if self.text_font_size <= 0:
            raise ValueError(f"text_font_size must be positive: {self.text_font_size}")
        if self.text_font_path is not None and not Path(self.text_font_path).is_file():
            raise ValueError(f"text_font_path not found: {self.text_font_path}")
        width, height = PAGE_SIZES[self.text_page_size.upper()]
        if self.text_margin_pt < 0 or 2 * self.text_margin_pt >= min(width, height):
            raise ValueError(f"text_margin_pt out of range: {self.text_margin_pt}")

    @property
    def text_page_size_pt(self) -> Tuple[float, float]:
        return PAGE_SIZES[self.text_page_size.upper()]


def load_config(path: Optional[Path]) -> AssemblyConfig:
    """
    Load configuration overrides from a JSON object file.

    Unknown keys are ignored. A missing, unreadable or invalid file logs a
    warning and yields the defaults; a bad config never stops the tool.

    Args:
        path: JSON file, or None for defaults

    Returns:
        AssemblyConfig
    """
    if path is None or not path.exists():
        return AssemblyConfig()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        logger.warning(f"Config file {path} is corrupted, using defaults: {e}")
        return AssemblyConfig()
    except OSError as e:
        logger.warning(f"Failed to read config {path}, using defaults: {e}")
        return AssemblyConfig()

    if not isinstance(data, dict):
        logger.warning(f"Config file {path} must contain a JSON object, using defaults")
        return AssemblyConfig()

    known = {f.name for f in fields(AssemblyConfig)}
    overrides: Dict[str, Any] = {k: v for k, v in data.items() if k in known}
    ignored = sorted(set(data) - known)
    if ignored:
        logger.debug(f"Ignoring unknown config keys: {ignored}")

    try:
        return AssemblyConfig(**overrides)
    except (TypeError, ValueError) as e:
        logger.warning(f"Invalid config in {path}, using defaults: {e}")
        return AssemblyConfig()
