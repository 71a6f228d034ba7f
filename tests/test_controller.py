"""
Integration tests for the ingest and export workflows.
"""

from unittest.mock import patch

import pytest
from PIL import Image

from conftest import build_image, build_pdf, page_rotations, page_texts
from page_assembler.controller import export_assembly, export_ranges, ingest_files, page_thumbnail
from page_assembler.core.errors import ChunkExportFailure, CorruptSource, NoPagesSelected, UnknownPage
from page_assembler.config import AssemblyConfig
from page_assembler.core.models import AssemblyMode, SourceKind
from page_assembler.engine.composition import CompositionEngine
from page_assembler.export.sink import MemorySink
from page_assembler.ingest.extractor import SourceUpload


class TestIngestFiles:

    def test_ingest_when_mixed_batch_then_pages_in_submission_order(self, engine):
        uploads = [
            SourceUpload("a.pdf", build_pdf(2, label="A")),
            SourceUpload("scan.png", build_image(), "image/png"),
            SourceUpload("notes.txt", b"hello"),
        ]
        report = ingest_files(engine, uploads)
        assert report.ok
        assert [s.name for s in engine.sources] == ["a.pdf", "scan.png", "notes.txt"]
        assert [s.kind for s in engine.sources] == [SourceKind.PDF, SourceKind.IMAGE, SourceKind.TEXT]
        assert len(engine.order) == 4

    def test_ingest_when_one_corrupt_then_others_added(self, engine):
        uploads = [
            SourceUpload("a.pdf", build_pdf(1)),
            SourceUpload("broken.pdf", b""),
            SourceUpload("b.pdf", build_pdf(2)),
        ]
        report = ingest_files(engine, uploads)
        assert [name for name, _ in report.committed] == ["a.pdf", "b.pdf"]
        assert isinstance(report.failures[0].error, CorruptSource)
        assert len(engine.order) == 3


class TestExportAssembly:

    def test_export_when_merge_selected_then_skips_deselected_and_rotates(self, engine):
        ingest_files(engine, [SourceUpload("report.pdf", build_pdf(3))])
        p1, p2, p3 = engine.order
        engine.toggle_selection(p2)
        engine.rotate(p3)
        sink = MemorySink()

        result = export_assembly(engine, AssemblyMode.MERGE_SELECTED, sink)

        assert result.filenames == ("report_selected.pdf",)
        data = sink.as_dict()["report_selected.pdf"]
        assert page_texts(data) == ["Page 1", "Page 3"]
        assert page_rotations(data) == [0, 90]

    def test_export_when_split_across_sources_then_merged_base(self, engine):
        ingest_files(engine, [
            SourceUpload("a.pdf", build_pdf(2, label="A")),
            SourceUpload("b.pdf", build_pdf(2, label="B")),
        ])
        a1, a2, b1, b2 = engine.order
        engine.reorder((b1, a1, a2, b2))
        engine.toggle_split(a1)
        sink = MemorySink()

        export_assembly(engine, "split-selected", sink)

        assert sink.filenames == ["merged_split_1.pdf", "merged_split_2.pdf"]
        assert page_texts(sink.as_dict()["merged_split_1.pdf"]) == ["B 1", "A 1"]
        assert page_texts(sink.as_dict()["merged_split_2.pdf"]) == ["A 2", "B 2"]

    def test_export_when_separate_then_one_file_per_page(self, engine):
        ingest_files(engine, [SourceUpload("r.pdf", build_pdf(2))])
        sink = MemorySink()
        export_assembly(engine, AssemblyMode.SEPARATE, sink, base_name="out")
        assert sink.filenames == ["out_page_1.pdf", "out_page_2.pdf"]

    def test_export_when_image_and_text_sources_then_merged(self, engine):
        ingest_files(engine, [
            SourceUpload("scan.png", build_image()),
            SourceUpload("notes.txt", b"typed notes"),
        ])
        sink = MemorySink()
        export_assembly(engine, AssemblyMode.MERGE_ALL, sink)
        assert page_texts(sink.as_dict()["merged_merged.pdf"]) == ["", "typed notes"]

    def test_export_when_nothing_selected_then_raises_and_delivers_nothing(self, engine):
        ingest_files(engine, [SourceUpload("r.pdf", build_pdf(2))])
        engine.clear_selection()
        sink = MemorySink()
        with pytest.raises(NoPagesSelected):
            export_assembly(engine, AssemblyMode.MERGE_SELECTED, sink)
        assert sink.deliveries == []

    def test_export_when_every_chunk_fails_then_raises_first_failure(self, engine):
        ingest_files(engine, [SourceUpload("r.pdf", build_pdf(2))])
        with patch("page_assembler.export.exporter.render_plan", side_effect=RuntimeError("codec down")):
            with pytest.raises(ChunkExportFailure) as exc:
                export_assembly(engine, AssemblyMode.SEPARATE, MemorySink())
        assert exc.value.chunk_index == 1

    def test_export_ranges_when_spec_then_labelled_files(self, engine):
        ingest_files(engine, [SourceUpload("r.pdf", build_pdf(5))])
        sink = MemorySink()
        export_ranges(engine, "1-2, 4-", sink)
        assert sink.filenames == ["r_split_1-2.pdf", "r_split_4-5.pdf"]
        assert page_texts(sink.as_dict()["r_split_4-5.pdf"]) == ["Page 4", "Page 5"]


class TestPageThumbnail:

    def test_thumbnail_when_pdf_page_then_configured_scale(self, engine):
        ingest_files(engine, [SourceUpload("r.pdf", build_pdf(2))])
        assert page_thumbnail(engine, engine.order[1]).size == (160, 240)

    def test_thumbnail_when_rotated_then_turned(self, engine):
        ingest_files(engine, [SourceUpload("r.pdf", build_pdf(1))])
        engine.rotate(engine.order[0])
        assert page_thumbnail(engine, engine.order[0]).size == (240, 160)

    def test_thumbnail_when_scale_configured_then_used(self):
        engine = CompositionEngine(AssemblyConfig(thumbnail_scale=0.5))
        ingest_files(engine, [SourceUpload("scan.png", build_image(size=(120, 80)))])
        assert page_thumbnail(engine, engine.order[0]).size == (60, 40)

    def test_thumbnail_when_renderer_injected_then_used_with_scale(self, engine):
        ingest_files(engine, [SourceUpload("r.pdf", build_pdf(2))])

        class RecordingRenderer:
            def __init__(self):
                self.calls = []

            def render(self, source_bytes, page_index, scale):
                self.calls.append((page_index, scale))
                return Image.new("RGB", (10, 20))

        renderer = RecordingRenderer()
        page_thumbnail(engine, engine.order[1], renderer=renderer)
        assert renderer.calls == [(1, 0.8)]

    def test_thumbnail_when_unknown_page_then_raises(self, engine):
        ingest_files(engine, [SourceUpload("r.pdf", build_pdf(1))])
        with pytest.raises(UnknownPage):
            page_thumbnail(engine, 99)
