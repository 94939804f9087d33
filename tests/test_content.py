from __future__ import annotations

from io import BytesIO

import pytest
from pypdf.generic import DecodedStreamObject, DictionaryObject, NameObject, NumberObject

from pdfbuildx.content import (
    Font,
    IccProfile,
    IccProfileType,
    RawObject,
    VectorGraphic,
    compile_content,
)
from pdfbuildx.exceptions import (
    ContentIndexError,
    FontParseError,
    IccProfileError,
    VectorGraphicParseError,
)
from pdfbuildx.indices import FontIndex, PdfContentIndex, VectorGraphicIndex
from pdfbuildx.objects import ObjectGraph
from pdfbuildx.registry import ContentRegistry


def test_font_from_stream(font_bytes: bytes) -> None:
    font = Font.from_stream(BytesIO(font_bytes))

    assert font.postscript_name == "PdfBuildXTest-Regular"
    assert font.truetype_outlines is True
    assert len(font.widths) == 224
    assert font.widths[ord("A") - 32] == 600
    assert font.widths[ord(" ") - 32] == 250
    assert font.widths[ord("Z") - 32] == 0
    assert font.ascent == 800
    assert font.descent == -200
    assert font.flags == 32


def test_cff_font_from_stream(cff_font_bytes: bytes) -> None:
    font = Font.from_stream(cff_font_bytes)

    assert font.postscript_name == "PdfBuildXTestCFF-Regular"
    assert font.truetype_outlines is False
    assert font.minimum_pdf_version == "1.6"
    assert font.widths[ord("A") - 32] == 600


def test_font_from_garbage() -> None:
    with pytest.raises(FontParseError):
        Font.from_stream(b"\x00\x01\x00\x00garbage")


def test_compiled_font_embeds_program(font_bytes: bytes) -> None:
    graph = ObjectGraph()
    reference = compile_content(Font.from_stream(font_bytes), graph)

    font_dict = graph.get_object(reference)
    assert font_dict["/Subtype"] == "/TrueType"
    assert font_dict["/BaseFont"] == "/PdfBuildXTest-Regular"
    assert font_dict["/Encoding"] == "/WinAnsiEncoding"
    assert len(font_dict["/Widths"]) == 224
    descriptor = font_dict["/FontDescriptor"].get_object()
    assert descriptor["/Type"] == "/FontDescriptor"
    program = descriptor["/FontFile2"].get_object()
    assert program["/Length1"] == len(font_bytes)
    assert program.get_data() == font_bytes


def test_vector_graphic_from_pdf(vector_pdf_bytes: bytes) -> None:
    graphic = VectorGraphic.from_stream(vector_pdf_bytes)

    assert graphic.width_pt == pytest.approx(100)
    assert graphic.height_pt == pytest.approx(50)
    assert b"re" in graphic.content


def test_vector_graphic_rejects_blank_page(blank_pdf_bytes: bytes) -> None:
    with pytest.raises(VectorGraphicParseError):
        VectorGraphic.from_stream(blank_pdf_bytes)


def test_vector_graphic_rejects_garbage() -> None:
    with pytest.raises(VectorGraphicParseError):
        VectorGraphic.from_stream(b"this is not a pdf")


def test_compiled_vector_graphic_is_form_xobject(vector_pdf_bytes: bytes) -> None:
    graph = ObjectGraph()
    reference = compile_content(VectorGraphic.from_stream(vector_pdf_bytes), graph)

    form = graph.get_object(reference)
    assert form["/Type"] == "/XObject"
    assert form["/Subtype"] == "/Form"
    assert [float(value) for value in form["/BBox"]] == [0, 0, 100, 50]
    assert b"re" in form.get_data()


@pytest.mark.parametrize(
    ("kind", "components", "alternate"),
    [
        (IccProfileType.CMYK, 4, "/DeviceCMYK"),
        (IccProfileType.RGB, 3, "/DeviceRGB"),
        (IccProfileType.GREYSCALE, 1, "/DeviceGray"),
    ],
)
def test_icc_profile_stream(icc_bytes: bytes, kind: IccProfileType, components: int, alternate: str) -> None:
    stream = IccProfile(icc_bytes, kind).to_stream()
    assert stream["/N"] == components
    assert stream["/Alternate"] == alternate
    assert stream.get_data() == icc_bytes


def test_empty_icc_profile_is_rejected() -> None:
    with pytest.raises(IccProfileError):
        IccProfile(b"")
    with pytest.raises(IccProfileError):
        IccProfile.from_stream(BytesIO(b""), IccProfileType.RGB)


def test_raw_object_is_added_as_is() -> None:
    graph = ObjectGraph()
    raw = DictionaryObject({NameObject("/Answer"): NumberObject(42)})
    reference = compile_content(RawObject(raw), graph)
    assert graph.get_object(reference)["/Answer"] == 42


def test_registry_hands_out_sequential_handles(font_bytes: bytes, vector_pdf_bytes: bytes) -> None:
    registry = ContentRegistry(ObjectGraph())

    first = registry.add(Font.from_stream(font_bytes))
    second = registry.add(VectorGraphic.from_stream(vector_pdf_bytes))

    assert first == PdfContentIndex(0)
    assert second == PdfContentIndex(1)
    assert len(registry) == 2
    assert registry.font(FontIndex(first)).postscript_name == "PdfBuildXTest-Regular"
    assert registry.vector_graphic(VectorGraphicIndex(second)).width_pt == pytest.approx(100)


def test_registry_rejects_unknown_and_mistyped_handles(font_bytes: bytes) -> None:
    registry = ContentRegistry(ObjectGraph())
    index = registry.add(Font.from_stream(font_bytes))

    with pytest.raises(ContentIndexError):
        registry.get_reference(PdfContentIndex(5))
    with pytest.raises(ContentIndexError):
        registry.vector_graphic(VectorGraphicIndex(index))


def test_object_graph_deletes_zero_length_streams() -> None:
    graph = ObjectGraph()
    empty = graph.add_object(DecodedStreamObject())
    holder = graph.add_object(DictionaryObject({NameObject("/Stream"): empty}))

    assert graph.delete_zero_length_streams() == [empty.idnum]
    assert "/Stream" not in graph.get_object(holder)


def test_object_graph_prunes_orphan_chains() -> None:
    graph = ObjectGraph()
    leaf = graph.add_object(DictionaryObject())
    graph.add_object(DictionaryObject({NameObject("/Leaf"): leaf}))

    assert graph.prune_objects() == 2
    assert graph.prune_objects() == 0
