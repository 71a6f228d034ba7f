import pytest
import sys
from io import BytesIO
from pathlib import Path

import fitz
from PIL import Image

# Add src to sys.path so we can import page_assembler
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from page_assembler.config import AssemblyConfig  # noqa: E402
from page_assembler.engine.composition import CompositionEngine  # noqa: E402


def build_pdf(page_count: int, *, label: str = "Page", rotation: int = 0,
              size=(200, 300)) -> bytes:
    """PDF whose page n carries the text '<label> n'."""
    doc = fitz.open()
    for n in range(1, page_count + 1):
        page = doc.new_page(width=size[0], height=size[1])
        page.insert_text((20, 40), f"{label} {n}", fontsize=12)
        if rotation:
            page.set_rotation(rotation)
    data = doc.tobytes()
    doc.close()
    return data


def build_image(fmt: str = "PNG", size=(120, 80), color="red") -> bytes:
    buffer = BytesIO()
    Image.new("RGB", size, color=color).save(buffer, format=fmt)
    return buffer.getvalue()


def page_texts(data: bytes) -> list:
    """Stripped text of every page of a PDF."""
    doc = fitz.open(stream=data, filetype="pdf")
    try:
        return [page.get_text().strip() for page in doc]
    finally:
        doc.close()


def page_rotations(data: bytes) -> list:
    doc = fitz.open(stream=data, filetype="pdf")
    try:
        return [page.rotation for page in doc]
    finally:
        doc.close()


# Common test fixtures
@pytest.fixture
def config():
    """Config without export pauses."""
    return AssemblyConfig(export_pause_seconds=0, max_ingest_workers=2)


@pytest.fixture
def engine(config):
    return CompositionEngine(config)


@pytest.fixture
def five_page_engine(engine):
    """Engine holding one 5-page PDF source, nothing selected."""
    engine.add_source("pdf", 5, name="report.pdf", payload=build_pdf(5))
    engine.clear_selection()
    return engine


@pytest.fixture
def sample_pdf_bytes():
    return build_pdf(3)


@pytest.fixture
def sample_png_bytes():
    return build_image("PNG")


@pytest.fixture
def sample_jpeg_bytes():
    return build_image("JPEG", color="blue")
