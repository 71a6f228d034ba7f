"""
Module: codec.text_pages

Purpose:
    Typeset plain text into PDF pages with ReportLab, so text sources can be
    composed like any other PDF source.

Key Functions:
    - wrap_text(): Split text into lines that fit a width
    - register_text_font(): Make a TrueType file available by name
    - missing_glyphs(): Characters a font cannot typeset
    - render_text_document(): Text -> PDF bytes

Dependencies:
    - reportlab: PDF generation, font registration and metrics

Used By:
    - ingest.extractor: Conversion of text sources at ingestion
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import List, Tuple

from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont
from reportlab.pdfgen import canvas

logger = logging.getLogger(__name__)

LINE_SPACING = 1.25  # Leading as a multiple of font size

# Python codecs for the encodings ReportLab uses with its standard fonts
_ENCODING_CODECS = {
    "WinAnsiEncoding": "cp1252",
    "MacRomanEncoding": "mac_roman",
}


def wrap_text(text: str, font_name: str, font_size: float, width_pt: float) -> List[str]:
    """
    Wrap text to a width, keeping blank lines as paragraph breaks.

    Tabs are expanded to four spaces. Leading indentation is kept on every
    wrapped line of its paragraph; a single word wider than the line is left
    on its own line.
    """
    lines: List[str] = []
    for paragraph in text.expandtabs(4).splitlines():
        if not paragraph.strip():
            lines.append("")
            continue
        body = paragraph.lstrip()
        indent = paragraph[:len(paragraph) - len(body)]
        indent_pt = pdfmetrics.stringWidth(indent, font_name, font_size)
        # Deep indents still leave room for one glyph per line
        available = max(width_pt - indent_pt, font_size)
        wrapped = simpleSplit(body, font_name, font_size, available) or [""]
        lines.extend(indent + line for line in wrapped)
    return lines


def register_text_font(font_path: str) -> str:
    """
    Register a TrueType font with ReportLab and return its name.

    The font is registered under the file's stem; registering the same file
    again is a no-op.

    Raises:
        ValueError: If the file is not a usable TrueType font
    """
    name = Path(font_path).stem
    if name in pdfmetrics.getRegisteredFontNames():
        return name
    try:
        pdfmetrics.registerFont(TTFont(name, font_path))
    except (TTFError, OSError) as e:
        raise ValueError(f"Cannot load font {font_path}: {e}") from e
    logger.info(f"Registered font {name} from {font_path}")
    return name


def missing_glyphs(text: str, font_name: str) -> str:
    """
    Return the characters of text that font_name cannot typeset, in order
    of first appearance. Whitespace is ignored.
    """
    font = pdfmetrics.getFont(font_name)
    if isinstance(font, TTFont):
        covered = font.face.charToGlyph

        def supported(ch: str) -> bool:
            return ord(ch) in covered
    else:
        codec = _ENCODING_CODECS.get(font.encName, "cp1252")

        def supported(ch: str) -> bool:
            try:
                ch.encode(codec)
            except UnicodeEncodeError:
                return False
            return True

    missing: List[str] = []
    for ch in text:
        if not ch.isspace() and ch not in missing and not supported(ch):
            missing.append(ch)
    return "".join(missing)


def render_text_document(
    text: str,
    *,
    page_size: Tuple[float, float] = A4,
    font_name: str = "Helvetica",
    font_size: float = 11.0,
    margin_pt: float = 54.0,
    title: str = "",
) -> bytes:
    """
    Render text to a PDF, paginating as needed.

    Empty text still yields one blank page, so a text source always
    contributes at least one page.

    Args:
        text: Plain text
        page_size: (width, height) in points
        font_name: Standard or registered ReportLab font name
        font_size: Font size in points
        margin_pt: Margin on every side in points
        title: PDF title metadata

    Returns:
        PDF bytes
    """
    width_pt, height_pt = page_size
    leading = font_size * LINE_SPACING
    lines = wrap_text(text, font_name, font_size, width_pt - 2 * margin_pt)
    lines_per_page = max(1, int((height_pt - 2 * margin_pt) // leading))

    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=page_size)
    if title:
        c.setTitle(title)

    pages = [lines[i:i + lines_per_page] for i in range(0, len(lines), lines_per_page)] or [[]]
    for page_lines in pages:
        text_obj = c.beginText()
        text_obj.setTextOrigin(margin_pt, height_pt - margin_pt - font_size)
        text_obj.setFont(font_name, font_size, leading=leading)
        text_obj.setFillColorRGB(0, 0, 0)
        for line in page_lines:
            text_obj.textLine(line)
        c.drawText(text_obj)
        c.showPage()
    c.save()

    logger.debug(f"Typeset {len(lines)} lines onto {len(pages)} page(s)")
    return buffer.getvalue()
