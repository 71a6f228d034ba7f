"""
Unit Tests for IngestQueue ordered commit.

A fake extractor controls completion order with events, so results can be
made to complete in reverse submission order.
"""

import threading

import pytest

from page_assembler.core.errors import CorruptSource
from page_assembler.core.models import SourceKind
from page_assembler.ingest.extractor import ExtractedSource, SourceUpload
from page_assembler.ingest.queue import IngestQueue


class GatedExtractor:
    """Extractor whose per-file completion is released by the test."""

    def __init__(self, names):
        self.gates = {name: threading.Event() for name in names}
        self.finished = []
        self.lock = threading.Lock()

    def __call__(self, upload, codec, config):
        assert self.gates[upload.name].wait(timeout=5)
        with self.lock:
            self.finished.append(upload.name)
        if upload.data == b"bad":
            raise CorruptSource(upload.name, "bad bytes")
        if upload.data == b"boom":
            raise RuntimeError("decoder exploded")
        return ExtractedSource(upload.name, SourceKind.PDF, len(upload.data), upload.data, "application/pdf")


def release_in_reverse(extractor, names):
    def run():
        for name in reversed(names):
            extractor.gates[name].set()
            # Give the worker time to finish before the next release
            threading.Event().wait(0.05)
    thread = threading.Thread(target=run)
    thread.start()
    return thread


class TestIngestQueue:

    def test_drain_when_completed_out_of_order_then_committed_in_submission_order(self):
        names = ["a.pdf", "b.pdf", "c.pdf"]
        extractor = GatedExtractor(names)
        commits = []

        with IngestQueue(codec=None, max_workers=3, extractor=extractor) as queue:
            for name in names:
                queue.submit(SourceUpload(name, b"xx"))
            releaser = release_in_reverse(extractor, names)
            report = queue.drain(lambda e: commits.append(e.name) or f"id-{e.name}")
            releaser.join()

        assert extractor.finished == ["c.pdf", "b.pdf", "a.pdf"]
        assert commits == names
        assert report.source_ids == ("id-a.pdf", "id-b.pdf", "id-c.pdf")
        assert report.ok

    def test_drain_when_one_fails_then_others_committed(self):
        names = ["a.pdf", "bad.pdf", "c.pdf"]
        extractor = GatedExtractor(names)
        for gate in extractor.gates.values():
            gate.set()
        commits = []

        with IngestQueue(codec=None, max_workers=2, extractor=extractor) as queue:
            queue.submit(SourceUpload("a.pdf", b"x"))
            queue.submit(SourceUpload("bad.pdf", b"bad"))
            queue.submit(SourceUpload("c.pdf", b"xyz"))
            report = queue.drain(lambda e: commits.append(e.name) or e.name)

        assert commits == ["a.pdf", "c.pdf"]
        assert not report.ok
        assert [f.name for f in report.failures] == ["bad.pdf"]
        assert report.warnings == ("Could not read bad.pdf: bad bytes",)

    def test_drain_when_unexpected_error_then_reported_as_corrupt(self):
        extractor = GatedExtractor(["x.pdf"])
        extractor.gates["x.pdf"].set()

        with IngestQueue(codec=None, max_workers=1, extractor=extractor) as queue:
            queue.submit(SourceUpload("x.pdf", b"boom"))
            report = queue.drain(lambda e: e.name)

        assert report.committed == ()
        assert isinstance(report.failures[0].error, CorruptSource)
        assert "decoder exploded" in str(report.failures[0].error)

    def test_drain_when_commit_rejects_then_failure_recorded(self):
        extractor = GatedExtractor(["a.pdf", "b.pdf"])
        for gate in extractor.gates.values():
            gate.set()

        def commit(extracted):
            if extracted.name == "a.pdf":
                raise CorruptSource(extracted.name, "rejected")
            return "src-1"

        with IngestQueue(codec=None, max_workers=2, extractor=extractor) as queue:
            queue.submit(SourceUpload("a.pdf", b"x"))
            queue.submit(SourceUpload("b.pdf", b"x"))
            report = queue.drain(commit)

        assert report.committed == (("b.pdf", "src-1"),)
        assert report.failures[0].name == "a.pdf"

    def test_drain_when_empty_then_empty_report(self):
        with IngestQueue(codec=None, max_workers=1) as queue:
            report = queue.drain(lambda e: pytest.fail("nothing to commit"))
        assert report.committed == ()
        assert report.ok
