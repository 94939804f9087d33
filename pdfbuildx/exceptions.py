"""Custom exception types for :mod:`pdfbuildx`."""

from __future__ import annotations

from enum import Enum
from typing import Sequence


class PdfBuildXError(Exception):
    """Base exception for all pdfbuildx related errors."""


class IndexErrorKind(str, Enum):
    """Level of the page → layer → marker path that failed to resolve."""

    PAGE = "page"
    LAYER = "layer"
    MARKER = "marker"
    CONTENT = "content"


class PdfIndexError(PdfBuildXError, IndexError):
    """Raised when a handle does not resolve at its level of the hierarchy."""

    kind: IndexErrorKind

    def __init__(self, index: object, message: str | None = None) -> None:
        self.index = index
        super().__init__(message or f"Invalid {self.kind.value} index: {index!r}")


class PageIndexError(PdfIndexError):
    kind = IndexErrorKind.PAGE


class LayerIndexError(PdfIndexError):
    kind = IndexErrorKind.LAYER


class MarkerIndexError(PdfIndexError):
    kind = IndexErrorKind.MARKER


class ContentIndexError(PdfIndexError):
    kind = IndexErrorKind.CONTENT


class FontParseError(PdfBuildXError):
    """Raised when a stream is not a recognised TrueType/OpenType font."""


class VectorGraphicParseError(PdfBuildXError):
    """Raised when a vector graphic stream cannot be read."""


class IccProfileError(PdfBuildXError):
    """Raised when an ICC profile carries no data."""


class PdfIoError(PdfBuildXError, OSError):
    """Raised when writing the serialized document to the output fails."""


class ConformanceError(PdfBuildXError):
    """Raised by validation when the document violates its conformance level."""

    def __init__(self, violations: Sequence[str]) -> None:
        self.violations = list(violations)
        super().__init__("; ".join(self.violations) or "Document is not conformant")


class DocumentConsumedError(PdfBuildXError):
    """Raised when a document is used after it has been saved."""


class DocumentReleasedError(PdfBuildXError):
    """Raised when a page outlives the document it belongs to."""


__all__ = [
    "PdfBuildXError",
    "IndexErrorKind",
    "PdfIndexError",
    "PageIndexError",
    "LayerIndexError",
    "MarkerIndexError",
    "ContentIndexError",
    "FontParseError",
    "VectorGraphicParseError",
    "IccProfileError",
    "PdfIoError",
    "ConformanceError",
    "DocumentConsumedError",
    "DocumentReleasedError",
]
