"""Pages: ordered layers plus a weak link back to their document."""

from __future__ import annotations

import weakref
from typing import IO, TYPE_CHECKING

from .exceptions import DocumentReleasedError, LayerIndexError
from .indices import FontIndex, PdfContentIndex
from .layer import PdfLayer
from .units import mm_to_pt

if TYPE_CHECKING:  # pragma: no cover
    from .content import PdfContent
    from .document import PdfDocument


class PdfPage:
    """One page of a document, sized in points.

    The page never owns its document. The weak reference is only used to
    register shared resources such as fonts while a page is being built.
    """

    def __init__(
        self,
        document: "PdfDocument",
        width_mm: float,
        height_mm: float,
        initial_layer_name: str,
    ) -> None:
        self.width_pt = mm_to_pt(width_mm)
        self.height_pt = mm_to_pt(height_mm)
        self._layers: list[PdfLayer] = [PdfLayer(initial_layer_name)]
        self._document = weakref.ref(document)

    def __repr__(self) -> str:
        return f"PdfPage(width_pt={self.width_pt:.2f}, height_pt={self.height_pt:.2f}, layers={len(self._layers)})"

    @property
    def layers(self) -> tuple[PdfLayer, ...]:
        return tuple(self._layers)

    @property
    def document(self) -> "PdfDocument":
        document = self._document()
        if document is None:
            raise DocumentReleasedError("The document owning this page no longer exists")
        return document

    def add_layer(self, name: str) -> int:
        self._layers.append(PdfLayer(name))
        return len(self._layers) - 1

    def get_layer(self, index: int) -> PdfLayer:
        if not 0 <= index < len(self._layers):
            raise LayerIndexError(index)
        return self._layers[index]

    # -- Shared resources registered through the owning document ------------

    def add_font(self, font_stream: IO[bytes] | bytes) -> FontIndex:
        return self.document.add_font(font_stream)

    def add_content(self, content: "PdfContent") -> PdfContentIndex:
        return self.document.add_content(content)


__all__ = ["PdfPage"]
