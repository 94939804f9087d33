"""Shared content objects and their compilation into PDF objects.

The set of content kinds is closed: fonts, embedded vector graphics,
ICC profiles and pre-built raw objects. Pages and layers never own
content; they only hold handles returned by the content registry.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from io import BytesIO
from typing import IO, Union

from fontTools.ttLib import TTFont
from pypdf import PdfReader
from pypdf.generic import (
    ArrayObject,
    DecodedStreamObject,
    DictionaryObject,
    FloatObject,
    IndirectObject,
    NameObject,
    NumberObject,
    PdfObject,
    StreamObject,
)

from .exceptions import FontParseError, IccProfileError, VectorGraphicParseError
from .objects import ObjectGraph
from .utils import read_stream

LOGGER = logging.getLogger("pdfbuildx.content")

FIRST_CHAR = 32
LAST_CHAR = 255

# Font descriptor flags (PDF 32000-1, table 123)
FLAG_FIXED_PITCH = 1 << 0
FLAG_NONSYMBOLIC = 1 << 5
FLAG_ITALIC = 1 << 6

_PS_NAME_INVALID = re.compile(r"[^A-Za-z0-9_.+-]")


def _scale(value: float, units_per_em: int) -> int:
    return round(value * 1000 / units_per_em)


# -- Fonts ---------------------------------------------------------------------


@dataclass(slots=True)
class Font:
    """An embeddable TrueType or OpenType (CFF) font program."""

    data: bytes
    postscript_name: str
    bbox: tuple[int, int, int, int]
    ascent: int
    descent: int
    cap_height: int
    italic_angle: float
    fixed_pitch: bool
    truetype_outlines: bool
    widths: tuple[int, ...]

    @classmethod
    def from_stream(cls, font_stream: IO[bytes] | bytes) -> "Font":
        """Read a font program with fontTools.

        Raises:
            FontParseError: If the bytes are not a TrueType/OpenType font.
        """

        data = read_stream(font_stream)
        try:
            font = TTFont(BytesIO(data))
            head = font["head"]
            units_per_em = head.unitsPerEm
            hhea = font["hhea"]
            post = font["post"]
            hmtx = font["hmtx"]
            cmap = font.getBestCmap() or {}
            raw_name = font["name"].getDebugName(6) or font["name"].getBestFullName() or "Untitled"
            cap_height = hhea.ascent
            if "OS/2" in font and getattr(font["OS/2"], "version", 0) >= 2:
                cap_height = font["OS/2"].sCapHeight
            widths = []
            for code in range(FIRST_CHAR, LAST_CHAR + 1):
                try:
                    char = bytes([code]).decode("cp1252")
                except UnicodeDecodeError:
                    widths.append(0)
                    continue
                glyph = cmap.get(ord(char))
                widths.append(_scale(hmtx[glyph][0], units_per_em) if glyph else 0)
            parsed = cls(
                data=data,
                postscript_name=_PS_NAME_INVALID.sub("", raw_name) or "Untitled",
                bbox=(
                    _scale(head.xMin, units_per_em),
                    _scale(head.yMin, units_per_em),
                    _scale(head.xMax, units_per_em),
                    _scale(head.yMax, units_per_em),
                ),
                ascent=_scale(hhea.ascent, units_per_em),
                descent=_scale(hhea.descent, units_per_em),
                cap_height=_scale(cap_height, units_per_em),
                italic_angle=float(post.italicAngle),
                fixed_pitch=bool(post.isFixedPitch),
                truetype_outlines="glyf" in font,
                widths=tuple(widths),
            )
        except Exception as exc:
            raise FontParseError(f"Unable to read font: {exc}") from exc
        LOGGER.debug("Parsed font %s (%d bytes)", parsed.postscript_name, len(data))
        return parsed

    @property
    def minimum_pdf_version(self) -> str:
        # /FontFile3 /OpenType arrived with PDF 1.6
        return "1.3" if self.truetype_outlines else "1.6"

    @property
    def flags(self) -> int:
        flags = FLAG_NONSYMBOLIC
        if self.fixed_pitch:
            flags |= FLAG_FIXED_PITCH
        if self.italic_angle:
            flags |= FLAG_ITALIC
        return flags


def _compile_font(font: Font, graph: ObjectGraph) -> IndirectObject:
    program = DecodedStreamObject()
    program.set_data(font.data)
    if font.truetype_outlines:
        program[NameObject("/Length1")] = NumberObject(len(font.data))
        file_key = "/FontFile2"
    else:
        program[NameObject("/Subtype")] = NameObject("/OpenType")
        file_key = "/FontFile3"
    program_ref = graph.add_object(program.flate_encode())

    base_font = NameObject(f"/{font.postscript_name}")
    descriptor = DictionaryObject(
        {
            NameObject("/Type"): NameObject("/FontDescriptor"),
            NameObject("/FontName"): base_font,
            NameObject("/Flags"): NumberObject(font.flags),
            NameObject("/FontBBox"): ArrayObject(NumberObject(v) for v in font.bbox),
            NameObject("/ItalicAngle"): FloatObject(font.italic_angle),
            NameObject("/Ascent"): NumberObject(font.ascent),
            NameObject("/Descent"): NumberObject(font.descent),
            NameObject("/CapHeight"): NumberObject(font.cap_height),
            NameObject("/StemV"): NumberObject(80),
            NameObject(file_key): program_ref,
        }
    )
    descriptor_ref = graph.add_object(descriptor)

    font_dict = DictionaryObject(
        {
            NameObject("/Type"): NameObject("/Font"),
            NameObject("/Subtype"): NameObject("/TrueType" if font.truetype_outlines else "/Type1"),
            NameObject("/BaseFont"): base_font,
            NameObject("/FirstChar"): NumberObject(FIRST_CHAR),
            NameObject("/LastChar"): NumberObject(LAST_CHAR),
            NameObject("/Widths"): ArrayObject(NumberObject(w) for w in font.widths),
            NameObject("/Encoding"): NameObject("/WinAnsiEncoding"),
            NameObject("/FontDescriptor"): descriptor_ref,
        }
    )
    return graph.add_object(font_dict)


# -- Vector graphics -----------------------------------------------------------


@dataclass(slots=True)
class VectorGraphic:
    """First page of a PDF, embedded as a reusable Form XObject."""

    content: bytes
    bbox: tuple[float, float, float, float]
    resources: DictionaryObject | None
    reader: PdfReader | None = None

    @property
    def width_pt(self) -> float:
        return self.bbox[2] - self.bbox[0]

    @property
    def height_pt(self) -> float:
        return self.bbox[3] - self.bbox[1]

    @classmethod
    def from_stream(cls, graphic_stream: IO[bytes] | bytes) -> "VectorGraphic":
        """Read the first page of a PDF with pypdf.

        Raises:
            VectorGraphicParseError: If the stream is not a PDF, has no pages,
                or the first page draws nothing.
        """

        data = read_stream(graphic_stream)
        try:
            reader = PdfReader(BytesIO(data))
            if not reader.pages:
                raise VectorGraphicParseError("Vector graphic PDF has no pages")
            page = reader.pages[0]
            contents = page.get_contents()
            content = contents.get_data() if contents is not None else b""
            box = page.mediabox
            bbox = (float(box.left), float(box.bottom), float(box.right), float(box.top))
            resources = page.get("/Resources")
            if resources is not None:
                resources = resources.get_object()
        except VectorGraphicParseError:
            raise
        except Exception as exc:
            raise VectorGraphicParseError(f"Unable to read vector graphic: {exc}") from exc
        if not content.strip():
            raise VectorGraphicParseError("Vector graphic page has no drawing operations")
        if bbox[2] <= bbox[0] or bbox[3] <= bbox[1]:
            raise VectorGraphicParseError(f"Vector graphic has an empty bounding box: {bbox}")
        return cls(content=content, bbox=bbox, resources=resources, reader=reader)


def _compile_vector_graphic(graphic: VectorGraphic, graph: ObjectGraph) -> IndirectObject:
    form = DecodedStreamObject()
    form.set_data(graphic.content)
    left, bottom, _, _ = graphic.bbox
    form.update(
        {
            NameObject("/Type"): NameObject("/XObject"),
            NameObject("/Subtype"): NameObject("/Form"),
            NameObject("/FormType"): NumberObject(1),
            NameObject("/BBox"): ArrayObject(FloatObject(v) for v in graphic.bbox),
            NameObject("/Matrix"): ArrayObject(
                [NumberObject(1), NumberObject(0), NumberObject(0), NumberObject(1), FloatObject(-left), FloatObject(-bottom)]
            ),
        }
    )
    if graphic.resources is not None:
        resources = graphic.resources.clone(graph.writer)
        form[NameObject("/Resources")] = getattr(resources, "indirect_reference", None) or resources
    return graph.add_object(form.flate_encode())


# -- ICC profiles --------------------------------------------------------------


class IccProfileType(str, Enum):
    """Colour space described by an ICC profile."""

    CMYK = "cmyk"
    RGB = "rgb"
    GREYSCALE = "greyscale"

    @property
    def components(self) -> int:
        return {"cmyk": 4, "rgb": 3, "greyscale": 1}[self.value]

    @property
    def alternate(self) -> str:
        return {"cmyk": "/DeviceCMYK", "rgb": "/DeviceRGB", "greyscale": "/DeviceGray"}[self.value]


@dataclass(slots=True)
class IccProfile:
    """Output intent profile; the bytes are embedded untouched.

    Raises:
        IccProfileError: If the profile is empty.
    """

    data: bytes
    kind: IccProfileType = IccProfileType.CMYK

    def __post_init__(self) -> None:
        if not self.data:
            raise IccProfileError("ICC profile is empty")

    @classmethod
    def from_stream(
        cls, profile_stream: IO[bytes] | bytes, kind: IccProfileType = IccProfileType.CMYK
    ) -> "IccProfile":
        return cls(read_stream(profile_stream), kind)

    def to_stream(self) -> StreamObject:
        stream = DecodedStreamObject()
        stream.set_data(self.data)
        stream[NameObject("/N")] = NumberObject(self.kind.components)
        stream[NameObject("/Alternate")] = NameObject(self.kind.alternate)
        return stream.flate_encode()


# -- Raw objects ---------------------------------------------------------------


@dataclass(slots=True)
class RawObject:
    """Any pre-built pypdf object stored as-is."""

    obj: PdfObject


PdfContent = Union[Font, VectorGraphic, IccProfile, RawObject]


def compile_content(content: PdfContent, graph: ObjectGraph) -> IndirectObject:
    """Add *content* to *graph* and return the reference pages will use."""

    if isinstance(content, Font):
        return _compile_font(content, graph)
    if isinstance(content, VectorGraphic):
        return _compile_vector_graphic(content, graph)
    if isinstance(content, IccProfile):
        return graph.add_object(content.to_stream())
    if isinstance(content, RawObject):
        return graph.add_object(content.obj)
    raise TypeError(f"Unsupported content type: {type(content).__name__}")


__all__ = [
    "Font",
    "VectorGraphic",
    "IccProfile",
    "IccProfileType",
    "RawObject",
    "PdfContent",
    "compile_content",
]
