from __future__ import annotations

from io import BytesIO
from pathlib import Path
import sys

import pytest
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.t2CharStringPen import T2CharStringPen
from fontTools.pens.ttGlyphPen import TTGlyphPen
from pypdf import PdfWriter
from pypdf.generic import ContentStream, DecodedStreamObject

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

FONT_FAMILY = "PdfBuildXTest"
FONT_STYLE = "Regular"


def _box_glyph():
    pen = TTGlyphPen(None)
    pen.moveTo((50, 0))
    pen.lineTo((50, 700))
    pen.lineTo((450, 700))
    pen.lineTo((450, 0))
    pen.closePath()
    return pen.glyph()


def _build_font() -> bytes:
    builder = FontBuilder(1000, isTTF=True)
    glyph_order = [".notdef", "space", "A", "a"]
    builder.setupGlyphOrder(glyph_order)
    builder.setupCharacterMap({32: "space", 65: "A", 97: "a"})
    builder.setupGlyf({name: _box_glyph() for name in glyph_order})
    advance_widths = {".notdef": 500, "space": 250, "A": 600, "a": 500}
    glyf = builder.font["glyf"]
    builder.setupHorizontalMetrics(
        {name: (width, glyf[name].xMin) for name, width in advance_widths.items()}
    )
    builder.setupHorizontalHeader(ascent=800, descent=-200)
    builder.setupNameTable(
        {
            "familyName": FONT_FAMILY,
            "styleName": FONT_STYLE,
            "psName": f"{FONT_FAMILY}-{FONT_STYLE}",
        }
    )
    builder.setupOS2(sTypoAscender=800, sTypoDescender=-200, usWinAscent=800, usWinDescent=200)
    builder.setupPost()
    buffer = BytesIO()
    builder.save(buffer)
    return buffer.getvalue()


def _build_cff_font() -> bytes:
    glyph_order = [".notdef", "space", "A"]
    advance_widths = {".notdef": 500, "space": 250, "A": 600}
    char_strings = {}
    for name in glyph_order:
        pen = T2CharStringPen(advance_widths[name], None)
        pen.moveTo((50, 0))
        pen.lineTo((50, 700))
        pen.lineTo((450, 700))
        pen.lineTo((450, 0))
        pen.closePath()
        char_strings[name] = pen.getCharString()
    ps_name = f"{FONT_FAMILY}CFF-{FONT_STYLE}"
    builder = FontBuilder(1000, isTTF=False)
    builder.setupGlyphOrder(glyph_order)
    builder.setupCharacterMap({32: "space", 65: "A"})
    builder.setupCFF(ps_name, {"FullName": ps_name}, char_strings, {})
    builder.setupHorizontalMetrics({name: (width, 50) for name, width in advance_widths.items()})
    builder.setupHorizontalHeader(ascent=800, descent=-200)
    builder.setupNameTable(
        {"familyName": f"{FONT_FAMILY}CFF", "styleName": FONT_STYLE, "psName": ps_name}
    )
    builder.setupOS2(sTypoAscender=800, sTypoDescender=-200, usWinAscent=800, usWinDescent=200)
    builder.setupPost()
    buffer = BytesIO()
    builder.save(buffer)
    return buffer.getvalue()


@pytest.fixture(scope="session")
def font_bytes() -> bytes:
    return _build_font()


@pytest.fixture(scope="session")
def cff_font_bytes() -> bytes:
    return _build_cff_font()


@pytest.fixture()
def font_path(tmp_path: Path, font_bytes: bytes) -> Path:
    path = tmp_path / "test-font.ttf"
    path.write_bytes(font_bytes)
    return path


@pytest.fixture()
def vector_pdf_bytes() -> bytes:
    writer = PdfWriter()
    page = writer.add_blank_page(width=100, height=50)
    drawing = DecodedStreamObject()
    drawing.set_data(b"0 0 1 rg 10 10 80 30 re f")
    page.replace_contents(ContentStream(drawing, writer))
    buffer = BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


@pytest.fixture()
def blank_pdf_bytes() -> bytes:
    writer = PdfWriter()
    writer.add_blank_page(width=72, height=72)
    buffer = BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


@pytest.fixture()
def icc_bytes() -> bytes:
    return b"pdfbuildx-test-icc-profile" * 8


@pytest.fixture()
def icc_path(tmp_path: Path, icc_bytes: bytes) -> Path:
    path = tmp_path / "profile.icc"
    path.write_bytes(icc_bytes)
    return path
