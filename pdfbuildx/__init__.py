"""Build layered, print-ready PDF documents from pages, layers and markers."""

from __future__ import annotations

__version__ = "0.1.0"

from .compiler import DocumentCompiler, SaveOptions
from .conformance import PdfConformance
from .content import Font, IccProfile, IccProfileType, PdfContent, RawObject, VectorGraphic
from .document import PdfDocument
from .exceptions import (
    ConformanceError,
    ContentIndexError,
    DocumentConsumedError,
    DocumentReleasedError,
    FontParseError,
    IccProfileError,
    IndexErrorKind,
    LayerIndexError,
    MarkerIndexError,
    PageIndexError,
    PdfBuildXError,
    PdfIndexError,
    PdfIoError,
    VectorGraphicParseError,
)
from .graphics import Cmyk, Fill, Greyscale, Line, Outline, Point, Rgb
from .indices import (
    FontIndex,
    PdfContentIndex,
    PdfLayerIndex,
    PdfMarkerIndex,
    PdfPageIndex,
    VectorGraphicIndex,
)
from .layer import PdfLayer
from .marker import PdfMarker
from .metadata import PdfMetadata, compile_metadata
from .page import PdfPage
from .units import mm_to_pt, pt_to_mm, to_native_units

__all__ = [
    "__version__",
    "PdfDocument",
    "PdfPage",
    "PdfLayer",
    "PdfMarker",
    "PdfMetadata",
    "PdfConformance",
    "SaveOptions",
    "DocumentCompiler",
    "compile_metadata",
    "Font",
    "VectorGraphic",
    "IccProfile",
    "IccProfileType",
    "RawObject",
    "PdfContent",
    "Point",
    "Line",
    "Outline",
    "Fill",
    "Rgb",
    "Cmyk",
    "Greyscale",
    "PdfPageIndex",
    "PdfLayerIndex",
    "PdfMarkerIndex",
    "PdfContentIndex",
    "FontIndex",
    "VectorGraphicIndex",
    "mm_to_pt",
    "pt_to_mm",
    "to_native_units",
    "PdfBuildXError",
    "PdfIndexError",
    "IndexErrorKind",
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
