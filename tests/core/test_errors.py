"""
Unit tests for the error hierarchy.
"""

import pytest

from page_assembler.core.errors import (
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


class TestErrors:

    @pytest.mark.parametrize(
        "error",
        [
            UnsupportedSourceKind("x"),
            CorruptSource("a.pdf", "bad"),
            UnknownSource("src-1"),
            UnknownPage(3),
            InvalidPermutation(missing=[1]),
            NoPagesSelected(),
            NoSplitPoints(),
            InvalidPageRange("9", "out of bounds"),
            ChunkExportFailure(2, "a_split_2.pdf"),
        ],
    )
    def test_all_errors_when_raised_then_are_assembly_errors(self, error):
        assert isinstance(error, AssemblyError)

    def test_unknown_page_when_str_then_plain_message(self):
        error = UnknownPage(42)
        assert str(error) == "Unknown page: 42"
        assert isinstance(error, KeyError)
        assert error.display_id == 42

    def test_unknown_source_when_str_then_plain_message(self):
        assert str(UnknownSource("src-9")) == "Unknown source: src-9"

    def test_invalid_permutation_when_details_then_sorted_and_listed(self):
        error = InvalidPermutation(missing={3, 1}, unexpected=[9], duplicates=[2])
        assert error.missing == (1, 3)
        assert error.unexpected == (9,)
        assert error.duplicates == (2,)
        assert "missing [1, 3]" in str(error)
        assert "unexpected [9]" in str(error)
        assert "duplicated [2]" in str(error)

    def test_invalid_permutation_when_no_details_then_size_mismatch(self):
        assert "size mismatch" in str(InvalidPermutation())

    def test_chunk_export_failure_when_cause_then_included(self):
        error = ChunkExportFailure(3, "r_split_3.pdf", OSError("disk full"))
        assert error.chunk_index == 3
        assert error.filename == "r_split_3.pdf"
        assert "disk full" in str(error)

    def test_corrupt_source_when_created_then_names_file(self):
        error = CorruptSource("scan.pdf", "document has no pages")
        assert str(error) == "Could not read scan.pdf: document has no pages"
