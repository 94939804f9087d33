"""Opaque handles into the page → layer → marker hierarchy.

Handles are plain arena indices. A layer handle only means something
together with the page it was issued for, a marker handle only together
with its page and layer, which is why the composite handles carry the
whole path. Handles are never reused: nothing in a document is ever
removed.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class PdfPageIndex:
    index: int


@dataclass(frozen=True, slots=True)
class PdfLayerIndex:
    page: PdfPageIndex
    index: int


@dataclass(frozen=True, slots=True)
class PdfMarkerIndex:
    page: PdfPageIndex
    layer: int
    index: int

    @property
    def layer_index(self) -> PdfLayerIndex:
        return PdfLayerIndex(self.page, self.layer)


@dataclass(frozen=True, slots=True)
class PdfContentIndex:
    index: int


@dataclass(frozen=True, slots=True)
class FontIndex:
    """Content handle known to point at a compiled font."""

    content: PdfContentIndex


@dataclass(frozen=True, slots=True)
class VectorGraphicIndex:
    """Content handle known to point at a compiled Form XObject."""

    content: PdfContentIndex


__all__ = [
    "PdfPageIndex",
    "PdfLayerIndex",
    "PdfMarkerIndex",
    "PdfContentIndex",
    "FontIndex",
    "VectorGraphicIndex",
]
