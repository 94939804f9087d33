"""Drawable content nodes recorded on layers and their content-stream operators."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Union

from .indices import FontIndex, VectorGraphicIndex
from .marker import PdfMarker
from .units import mm_to_pt


def format_number(value: float) -> str:
    """Render *value* the compact way content streams expect it."""

    if float(value).is_integer():
        return str(int(value))
    return f"{value:.4f}".rstrip("0").rstrip(".")


def _operands(*values: float) -> str:
    return " ".join(format_number(value) for value in values)


# -- Colours -------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Rgb:
    r: float
    g: float
    b: float

    def stroke(self) -> str:
        return f"{_operands(self.r, self.g, self.b)} RG"

    def fill(self) -> str:
        return f"{_operands(self.r, self.g, self.b)} rg"


@dataclass(frozen=True, slots=True)
class Cmyk:
    c: float
    m: float
    y: float
    k: float

    def stroke(self) -> str:
        return f"{_operands(self.c, self.m, self.y, self.k)} K"

    def fill(self) -> str:
        return f"{_operands(self.c, self.m, self.y, self.k)} k"


@dataclass(frozen=True, slots=True)
class Greyscale:
    level: float

    def stroke(self) -> str:
        return f"{format_number(self.level)} G"

    def fill(self) -> str:
        return f"{format_number(self.level)} g"


Color = Union[Rgb, Cmyk, Greyscale]


# -- Geometry ------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Point:
    x_pt: float
    y_pt: float

    @classmethod
    def from_mm(cls, x_mm: float, y_mm: float) -> "Point":
        return cls(mm_to_pt(x_mm), mm_to_pt(y_mm))


@dataclass(frozen=True, slots=True)
class Outline:
    color: Color
    thickness_pt: float = 1.0


@dataclass(frozen=True, slots=True)
class Fill:
    color: Color


class ResourceNamer(Protocol):
    """Maps content handles to the resource names used on one page."""

    def font_name(self, font: FontIndex) -> str: ...

    def xobject_name(self, graphic: VectorGraphicIndex) -> str: ...


# -- Operations ----------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Line:
    """A polyline, optionally closed, filled and/or stroked.

    Each point carries a flag; a set flag marks the point as the start of a
    cubic bezier segment, so it and the two following points become the
    ``c`` operator operands.
    """

    points: tuple[tuple[Point, bool], ...]
    closed: bool = False
    outline: Outline | None = None
    fill: Fill | None = None

    def _paint_operator(self) -> str:
        stroke = self.outline is not None
        fill = self.fill is not None
        if stroke and fill:
            return "b" if self.closed else "B"
        if fill:
            return "f"
        if stroke:
            return "s" if self.closed else "S"
        return "n"

    def render(self, names: ResourceNamer) -> list[str]:
        if not self.points:
            return []
        ops = ["q"]
        if self.outline is not None:
            ops.append(self.outline.color.stroke())
            ops.append(f"{format_number(self.outline.thickness_pt)} w")
        if self.fill is not None:
            ops.append(self.fill.color.fill())

        first, _ = self.points[0]
        ops.append(f"{_operands(first.x_pt, first.y_pt)} m")
        count = len(self.points)
        index = 1
        while index < count:
            _, starts_curve = self.points[index - 1]
            if starts_curve and index + 2 < count:
                c1, _ = self.points[index]
                c2, _ = self.points[index + 1]
                end, _ = self.points[index + 2]
                ops.append(f"{_operands(c1.x_pt, c1.y_pt, c2.x_pt, c2.y_pt, end.x_pt, end.y_pt)} c")
                index += 3
                continue
            point, _ = self.points[index]
            ops.append(f"{_operands(point.x_pt, point.y_pt)} l")
            index += 1
        if self.closed and self._paint_operator() in {"f", "n"}:
            ops.append("h")
        ops.append(self._paint_operator())
        ops.append("Q")
        return ops


@dataclass(frozen=True, slots=True)
class TextOperation:
    text: str
    font: FontIndex
    font_size: float
    position: PdfMarker

    def encoded(self) -> bytes:
        return self.text.encode("cp1252", errors="replace")

    def render(self, names: ResourceNamer) -> list[str]:
        return [
            "BT",
            f"/{names.font_name(self.font)} {format_number(self.font_size)} Tf",
            f"{_operands(self.position.x_pt, self.position.y_pt)} Td",
            f"<{self.encoded().hex().upper()}> Tj",
            "ET",
        ]


@dataclass(frozen=True, slots=True)
class VectorGraphicPlacement:
    graphic: VectorGraphicIndex
    scale_x: float
    scale_y: float
    position: PdfMarker

    def render(self, names: ResourceNamer) -> list[str]:
        return [
            "q",
            f"{_operands(self.scale_x, 0, 0, self.scale_y, self.position.x_pt, self.position.y_pt)} cm",
            f"/{names.xobject_name(self.graphic)} Do",
            "Q",
        ]


LayerOperation = Union[Line, TextOperation, VectorGraphicPlacement]


__all__ = [
    "Rgb",
    "Cmyk",
    "Greyscale",
    "Color",
    "Point",
    "Outline",
    "Fill",
    "Line",
    "TextOperation",
    "VectorGraphicPlacement",
    "LayerOperation",
    "ResourceNamer",
    "format_number",
]
