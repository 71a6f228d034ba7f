"""
Unit tests for output naming.
"""

import pytest

from page_assembler.core.models import OutputDocumentPlan, PlanEntry, SourceDocument, SourceKind
from page_assembler.export.naming import (
    output_filename,
    plan_filename,
    plans_base_name,
    resolve_base_name,
    sanitize_base_name,
)


def source(source_id, name):
    return SourceDocument(source_id, SourceKind.PDF, 1, name=name)


class TestNaming:

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("report.pdf", "report"),
            ("reports/Q3: summary.pdf", "Q3_ summary"),
            ("C:\\scans\\page?.png", "page_"),
            ("", "document"),
            ("...", "document"),
        ],
    )
    def test_sanitize_when_name_then_safe_stem(self, name, expected):
        assert sanitize_base_name(name) == expected

    def test_output_filename_when_suffix_then_appended(self):
        assert output_filename("report", "split", 2) == "report_split_2.pdf"
        assert output_filename("report", "selected") == "report_selected.pdf"
        assert output_filename("scan", "page", 3, extension="png") == "scan_page_3.png"

    def test_plan_filename_when_range_label_then_label_used(self):
        plan = OutputDocumentPlan((PlanEntry("src-1", 0),), index=1, label="1-3")
        assert plan_filename("report", "split", plan) == "report_split_1-3.pdf"

    def test_resolve_base_name_when_single_source_then_its_name(self):
        assert resolve_base_name([source("src-1", "report.pdf")], "merged") == "report"

    def test_resolve_base_name_when_several_sources_then_fallback(self):
        sources = [source("src-1", "a.pdf"), source("src-2", "b.pdf")]
        assert resolve_base_name(sources, "merged") == "merged"

    def test_plans_base_name_when_plans_use_one_source_then_its_name(self):
        sources = [source("src-1", "a.pdf"), source("src-2", "b.pdf")]
        plans = [OutputDocumentPlan((PlanEntry("src-2", 0),))]
        assert plans_base_name(plans, sources, "merged") == "b"

    def test_plans_base_name_when_explicit_then_explicit_wins(self):
        plans = [OutputDocumentPlan((PlanEntry("src-1", 0),))]
        assert plans_base_name(plans, [source("src-1", "a.pdf")], "merged", "bundle") == "bundle"
