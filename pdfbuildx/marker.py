"""A marker is a fixed position on a layer, stored in points."""

from __future__ import annotations

from dataclasses import dataclass

from .units import mm_to_pt


@dataclass(frozen=True, slots=True)
class PdfMarker:
    """Position measured from the lower left corner of the page."""

    x_pt: float
    y_pt: float

    @classmethod
    def from_mm(cls, x_mm: float, y_mm: float) -> "PdfMarker":
        return cls(mm_to_pt(x_mm), mm_to_pt(y_mm))


__all__ = ["PdfMarker"]
