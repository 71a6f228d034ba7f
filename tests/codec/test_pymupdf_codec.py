"""
Unit Tests for PyMuPDFCodec.
"""

import fitz
import pytest

from conftest import build_image, build_pdf, page_rotations, page_texts
from page_assembler.codec.pymupdf_codec import PyMuPDFCodec
from page_assembler.core.errors import CorruptSource


@pytest.fixture
def codec():
    return PyMuPDFCodec()


class TestDecode:

    def test_decode_when_valid_then_opens(self, codec, sample_pdf_bytes):
        doc = codec.decode(sample_pdf_bytes)
        try:
            assert doc.page_count == 3
        finally:
            codec.close(doc)

    def test_decode_when_empty_then_corrupt(self, codec):
        with pytest.raises(CorruptSource, match="file is empty"):
            codec.decode(b"", name="empty.pdf")

    def test_decode_when_garbage_then_corrupt(self, codec):
        with pytest.raises(CorruptSource, match="junk.pdf"):
            codec.decode(b"this is not a pdf at all", name="junk.pdf")

    def test_decode_when_encrypted_then_corrupt(self, codec):
        doc = fitz.open(stream=build_pdf(1), filetype="pdf")
        data = doc.tobytes(encryption=fitz.PDF_ENCRYPT_AES_256, user_pw="secret", owner_pw="owner")
        doc.close()
        with pytest.raises(CorruptSource, match="password"):
            codec.decode(data, name="locked.pdf")

    def test_page_count_when_valid_then_counts(self, codec):
        assert codec.page_count(build_pdf(4)) == 4


class TestCompose:

    def test_copy_pages_when_out_of_range_then_index_error(self, codec, sample_pdf_bytes):
        doc = codec.decode(sample_pdf_bytes)
        try:
            with pytest.raises(IndexError):
                codec.copy_pages(doc, [0, 3])
        finally:
            codec.close(doc)

    def test_add_page_when_reordered_then_output_follows_order(self, codec, sample_pdf_bytes):
        src = codec.decode(sample_pdf_bytes)
        out = codec.create_document()
        try:
            for page in codec.copy_pages(src, [2, 0]):
                codec.add_page(out, page, 0)
            data = codec.encode(out)
        finally:
            codec.close(src)
            codec.close(out)
        assert page_texts(data) == ["Page 3", "Page 1"]

    def test_add_page_when_rotated_then_added_to_intrinsic_rotation(self, codec):
        src = codec.decode(build_pdf(2, rotation=90))
        out = codec.create_document()
        try:
            first, second = codec.copy_pages(src, [0, 1])
            codec.add_page(out, first, 90)
            codec.add_page(out, second, 270)
            data = codec.encode(out)
        finally:
            codec.close(src)
            codec.close(out)
        assert page_rotations(data) == [180, 0]

    def test_create_document_when_encoded_then_producer_set(self, codec):
        out = codec.create_document()
        try:
            out.new_page()
            data = codec.encode(out)
        finally:
            codec.close(out)
        doc = fitz.open(stream=data, filetype="pdf")
        assert doc.metadata["producer"] == "page-assembler"
        doc.close()


class TestImages:

    def test_inspect_image_when_png_then_size_and_format(self, codec):
        handle = codec.inspect_image(build_image("PNG", size=(120, 80)), "png")
        assert (handle.width, handle.height, handle.format) == (120, 80, "png")

    def test_inspect_image_when_declared_wrong_then_detected_format_wins(self, codec):
        handle = codec.inspect_image(build_image("JPEG"), "png")
        assert handle.format == "jpeg"

    def test_inspect_image_when_corrupt_then_raises(self, codec):
        with pytest.raises(CorruptSource, match="bad.png"):
            codec.inspect_image(b"\x89PNG not really", "png", name="bad.png")

    def test_add_image_page_when_rotated_then_page_sized_and_rotated(self, codec, sample_png_bytes):
        out = codec.create_document()
        try:
            image = codec.embed_image(out, sample_png_bytes, "png")
            codec.add_image_page(out, image, 90)
            data = codec.encode(out)
        finally:
            codec.close(out)
        doc = fitz.open(stream=data, filetype="pdf")
        page = doc[0]
        assert (page.mediabox.width, page.mediabox.height) == (120, 80)
        assert page.rotation == 90
        assert page.get_images()
        doc.close()
