"""
Module: export.naming

Purpose:
    Output filename convention: <base>_<tag>[_<suffix>].pdf, where suffix is
    the 1-based chunk/page index or a range label.
"""

from __future__ import annotations

import re
from pathlib import PurePath
from typing import Iterable, Optional

from page_assembler.core.models import OutputDocumentPlan, SourceDocument

_UNSAFE = re.compile(r'[\\/:*?"<>|\x00-\x1f]+')


def sanitize_base_name(name: str) -> str:
    """
    Strip directory and extension and replace characters that are not
    safe in filenames.

    Example:
        >>> sanitize_base_name("reports/Q3: summary.pdf")
        'Q3_ summary'
    """
    stem = PurePath(name.replace("\\", "/")).stem
    cleaned = _UNSAFE.sub("_", stem).strip(" .")
    return cleaned or "document"


def output_filename(
    base: str,
    tag: str,
    suffix: "str | int | None" = None,
    *,
    extension: str = "pdf",
) -> str:
    """
    Example:
        >>> output_filename("report", "split", 2)
        'report_split_2.pdf'
        >>> output_filename("report", "selected")
        'report_selected.pdf'
    """
    parts = [base, tag]
    if suffix is not None:
        parts.append(str(suffix))
    return "_".join(parts) + f".{extension}"


def plan_filename(base: str, tag: str, plan: OutputDocumentPlan) -> str:
    return output_filename(base, tag, plan.suffix)


def resolve_base_name(sources: Iterable[SourceDocument], fallback: str) -> str:
    """
    Base name for a batch: the source's name when exactly one source is
    involved, otherwise fallback.
    """
    names = {s.source_id: s.name or s.source_id for s in sources}
    if len(names) == 1:
        return sanitize_base_name(next(iter(names.values())))
    return sanitize_base_name(fallback)


def plans_base_name(
    plans: Iterable[OutputDocumentPlan],
    sources: Iterable[SourceDocument],
    fallback: str,
    explicit: Optional[str] = None,
) -> str:
    """Base name for the sources actually used by plans."""
    if explicit:
        return sanitize_base_name(explicit)
    used = {sid for plan in plans for sid in plan.source_ids}
    return resolve_base_name((s for s in sources if s.source_id in used), fallback)
