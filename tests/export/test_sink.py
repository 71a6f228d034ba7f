"""
Unit Tests for output sinks.
"""

import zipfile
from pathlib import Path
from unittest.mock import patch

import pytest

from page_assembler.export.sink import DirectorySink, MemorySink, PNG_MIME, ZipSink


class TestDirectorySink:

    def test_deliver_when_called_then_file_written(self, tmp_path: Path):
        sink = DirectorySink(tmp_path / "out")
        location = sink.deliver("a_selected.pdf", b"data")
        assert Path(location) == tmp_path / "out" / "a_selected.pdf"
        assert Path(location).read_bytes() == b"data"
        assert sink.delivered == [Path(location)]

    def test_deliver_when_name_exists_then_numbered(self, tmp_path: Path):
        (tmp_path / "a.pdf").write_bytes(b"old")
        sink = DirectorySink(tmp_path)
        location = sink.deliver("a.pdf", b"new")
        assert Path(location).name == "a_1.pdf"
        assert (tmp_path / "a.pdf").read_bytes() == b"old"

    def test_deliver_when_overwrite_then_replaced(self, tmp_path: Path):
        (tmp_path / "a.pdf").write_bytes(b"old")
        DirectorySink(tmp_path, overwrite=True).deliver("a.pdf", b"new")
        assert (tmp_path / "a.pdf").read_bytes() == b"new"

    def test_deliver_when_filename_has_directory_then_stripped(self, tmp_path: Path):
        location = DirectorySink(tmp_path).deliver("../escape.pdf", b"x")
        assert Path(location).parent == tmp_path

    def test_deliver_when_replace_fails_then_no_partial_file(self, tmp_path: Path):
        sink = DirectorySink(tmp_path)
        with patch.object(Path, "replace", side_effect=OSError("disk full")):
            with pytest.raises(OSError):
                sink.deliver("a.pdf", b"x")
        assert list(tmp_path.iterdir()) == []
        assert sink.delivered == []


class TestZipSink:

    def test_deliver_when_closed_then_archive_has_entries(self, tmp_path: Path):
        with ZipSink(tmp_path / "bundle") as sink:
            sink.deliver("a_page_1.pdf", b"one")
            sink.deliver("a_page_2.png", b"two", PNG_MIME)
        assert sink.output_path.suffix == ".zip"
        with zipfile.ZipFile(sink.output_path) as zf:
            assert zf.namelist() == ["a_page_1.pdf", "a_page_2.png"]
            assert zf.read("a_page_2.png") == b"two"

    def test_deliver_when_already_closed_then_raises(self, tmp_path: Path):
        sink = ZipSink(tmp_path / "b.zip")
        sink.close()
        with pytest.raises(OSError):
            sink.deliver("x.pdf", b"x")


class TestMemorySink:

    def test_deliver_when_called_then_kept_in_order(self):
        sink = MemorySink()
        sink.deliver("b.pdf", b"2")
        sink.deliver("a.pdf", b"1")
        assert sink.filenames == ["b.pdf", "a.pdf"]
        assert sink.as_dict() == {"b.pdf": b"2", "a.pdf": b"1"}
