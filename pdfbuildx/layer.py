"""Layers: ordered markers and drawable operations of one page."""

from __future__ import annotations

from .exceptions import MarkerIndexError
from .graphics import LayerOperation
from .marker import PdfMarker


class PdfLayer:
    """Named, append-only collection of markers and content operations."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._markers: list[PdfMarker] = []
        self._operations: list[LayerOperation] = []

    def __repr__(self) -> str:
        return f"PdfLayer(name={self.name!r}, markers={len(self._markers)}, operations={len(self._operations)})"

    @property
    def markers(self) -> tuple[PdfMarker, ...]:
        return tuple(self._markers)

    @property
    def operations(self) -> tuple[LayerOperation, ...]:
        return tuple(self._operations)

    def add_marker(self, x_mm: float, y_mm: float) -> int:
        """Append a marker given in millimetres and return its index."""

        self._markers.append(PdfMarker.from_mm(x_mm, y_mm))
        return len(self._markers) - 1

    def get_marker(self, index: int) -> PdfMarker:
        if not 0 <= index < len(self._markers):
            raise MarkerIndexError(index)
        return self._markers[index]

    def add_operation(self, operation: LayerOperation) -> None:
        self._operations.append(operation)


__all__ = ["PdfLayer"]
