from __future__ import annotations

from pdfbuildx.graphics import (
    Cmyk,
    Fill,
    Greyscale,
    Line,
    Outline,
    Point,
    Rgb,
    TextOperation,
    VectorGraphicPlacement,
    format_number,
)
from pdfbuildx.indices import FontIndex, PdfContentIndex, VectorGraphicIndex
from pdfbuildx.marker import PdfMarker


class _Names:
    def font_name(self, font: FontIndex) -> str:
        return f"F{font.content.index}"

    def xobject_name(self, graphic: VectorGraphicIndex) -> str:
        return f"X{graphic.content.index}"


def test_format_number() -> None:
    assert format_number(10) == "10"
    assert format_number(10.0) == "10"
    assert format_number(0.5) == "0.5"
    assert format_number(1 / 3) == "0.3333"


def test_colour_operators() -> None:
    assert Rgb(1, 0, 0).stroke() == "1 0 0 RG"
    assert Rgb(1, 0, 0).fill() == "1 0 0 rg"
    assert Cmyk(0, 0, 0, 1).stroke() == "0 0 0 1 K"
    assert Greyscale(0.5).fill() == "0.5 g"


def test_stroked_polyline() -> None:
    line = Line(
        ((Point(0, 0), False), (Point(10, 0), False), (Point(10, 10), False)),
        outline=Outline(Cmyk(0, 0, 0, 1), thickness_pt=2),
    )
    assert line.render(_Names()) == [
        "q",
        "0 0 0 1 K",
        "2 w",
        "0 0 m",
        "10 0 l",
        "10 10 l",
        "S",
        "Q",
    ]


def test_closed_filled_shape() -> None:
    line = Line(
        ((Point(0, 0), False), (Point(10, 0), False), (Point(0, 10), False)),
        closed=True,
        fill=Fill(Greyscale(0)),
    )
    ops = line.render(_Names())
    assert ops[-3:] == ["h", "f", "Q"]


def test_closed_stroked_and_filled_shape_uses_b() -> None:
    line = Line(
        ((Point(0, 0), False), (Point(10, 0), False)),
        closed=True,
        outline=Outline(Rgb(0, 0, 0)),
        fill=Fill(Rgb(1, 1, 1)),
    )
    assert line.render(_Names())[-2:] == ["b", "Q"]


def test_bezier_segment() -> None:
    line = Line(
        (
            (Point(0, 0), True),
            (Point(0, 10), False),
            (Point(10, 10), False),
            (Point(10, 0), False),
        ),
        outline=Outline(Greyscale(0)),
    )
    ops = line.render(_Names())
    assert "0 10 10 10 10 0 c" in ops
    assert not any(op.endswith(" l") for op in ops)


def test_empty_line_renders_nothing() -> None:
    assert Line(()).render(_Names()) == []


def test_text_operation_is_hex_encoded() -> None:
    op = TextOperation("Aé", FontIndex(PdfContentIndex(2)), 12, PdfMarker(72, 144))
    assert op.render(_Names()) == [
        "BT",
        "/F2 12 Tf",
        "72 144 Td",
        "<41E9> Tj",
        "ET",
    ]


def test_vector_graphic_placement() -> None:
    op = VectorGraphicPlacement(VectorGraphicIndex(PdfContentIndex(0)), 0.5, 2, PdfMarker(10, 20))
    assert op.render(_Names()) == ["q", "0.5 0 0 2 10 20 cm", "/X0 Do", "Q"]
