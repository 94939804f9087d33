"""Public construction API: the document root of the page hierarchy."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import IO, Sequence

from .compiler import DocumentCompiler, SaveOptions
from .conformance import PdfConformance
from .content import Font, IccProfile, PdfContent, VectorGraphic
from .exceptions import DocumentConsumedError, PageIndexError, PdfIoError
from .graphics import Fill, Line, Outline, Point, TextOperation, VectorGraphicPlacement
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
from .metadata import PdfMetadata
from .objects import ObjectGraph
from .page import PdfPage
from .registry import ContentRegistry
from .units import mm_to_pt
from .utils import PathLike, ensure_output_directory, resolve_path
from .validators import check_for_errors

LOGGER = logging.getLogger("pdfbuildx.document")


class PdfDocument:
    """A PDF under construction.

    Every document starts with one page holding one layer. Pages, layers
    and markers are only ever appended and are addressed by the handles
    the ``add_*`` methods return. Shared resources (fonts, vector
    graphics, raw objects) live in the content registry and are compiled
    as soon as they are added.

    :meth:`save` consumes the document; any later call raises
    :class:`~pdfbuildx.exceptions.DocumentConsumedError`.
    """

    def __init__(
        self,
        document_title: str,
        initial_page_width_mm: float,
        initial_page_height_mm: float,
        initial_layer_name: str,
    ) -> None:
        self._graph = ObjectGraph()
        self._registry = ContentRegistry(self._graph)
        self._pages: list[PdfPage] = []
        self._current_marker: PdfMarkerIndex | None = None
        self._consumed = False
        self.metadata = PdfMetadata(document_title)
        self._pages.append(
            PdfPage(self, initial_page_width_mm, initial_page_height_mm, initial_layer_name)
        )
        LOGGER.debug("Created document %s (%r)", self.metadata.document_id, document_title)

    @classmethod
    def new(
        cls,
        document_title: str,
        initial_page_width_mm: float,
        initial_page_height_mm: float,
        initial_layer_name: str,
    ) -> tuple["PdfDocument", PdfPageIndex, PdfLayerIndex]:
        """Create a document and return it with the handles of its first page and layer."""

        document = cls(document_title, initial_page_width_mm, initial_page_height_mm, initial_layer_name)
        page = PdfPageIndex(0)
        return document, page, PdfLayerIndex(page, 0)

    def __repr__(self) -> str:
        state = "saved" if self._consumed else f"pages={len(self._pages)}"
        return f"PdfDocument(title={self.metadata.document_title!r}, {state})"

    def _ensure_open(self) -> None:
        if self._consumed:
            raise DocumentConsumedError("The document has already been saved")

    # -- Metadata --------------------------------------------------------------

    @property
    def document_id(self) -> str:
        return self.metadata.document_id

    @property
    def pages(self) -> tuple[PdfPage, ...]:
        self._ensure_open()
        return tuple(self._pages)

    @property
    def contents(self) -> ContentRegistry:
        self._ensure_open()
        return self._registry

    def _update_metadata(self, **changes: object) -> "PdfDocument":
        self._ensure_open()
        self.metadata = replace(self.metadata, **changes)
        return self

    def with_document_id(self, document_id: str) -> "PdfDocument":
        return self._update_metadata(document_id=document_id)

    def with_conformance(self, conformance: PdfConformance) -> "PdfDocument":
        return self._update_metadata(conformance=conformance)

    def with_trapping(self, trapping: bool) -> "PdfDocument":
        return self._update_metadata(trapping=trapping)

    def with_document_version(self, version: int) -> "PdfDocument":
        return self._update_metadata(document_version=version)

    def with_modification_date(self, modification_date: datetime) -> "PdfDocument":
        return self._update_metadata(modification_date=modification_date)

    def with_icc_profile(self, profile: IccProfile) -> "PdfDocument":
        return self._update_metadata(icc_profile=profile)

    def with_author(self, author: str) -> "PdfDocument":
        return self._update_metadata(author=author)

    def with_subject(self, subject: str) -> "PdfDocument":
        return self._update_metadata(subject=subject)

    def with_keywords(self, keywords: Sequence[str]) -> "PdfDocument":
        return self._update_metadata(keywords=tuple(keywords))

    def set_title(self, title: str) -> None:
        self._update_metadata(document_title=title)

    # -- Structure -------------------------------------------------------------

    def add_page(
        self, width_mm: float, height_mm: float, initial_layer_name: str
    ) -> tuple[PdfPageIndex, PdfLayerIndex]:
        self._ensure_open()
        self._pages.append(PdfPage(self, width_mm, height_mm, initial_layer_name))
        page = PdfPageIndex(len(self._pages) - 1)
        return page, PdfLayerIndex(page, 0)

    def add_layer(self, page: PdfPageIndex, name: str) -> PdfLayerIndex:
        return PdfLayerIndex(page, self.get_page(page).add_layer(name))

    def add_marker(self, layer: PdfLayerIndex, x_mm: float, y_mm: float) -> PdfMarkerIndex:
        index = self.get_layer(layer).add_marker(x_mm, y_mm)
        return PdfMarkerIndex(layer.page, layer.index, index)

    def get_page(self, page: PdfPageIndex) -> PdfPage:
        self._ensure_open()
        if not 0 <= page.index < len(self._pages):
            raise PageIndexError(page.index)
        return self._pages[page.index]

    def get_layer(self, layer: PdfLayerIndex) -> PdfLayer:
        return self.get_page(layer.page).get_layer(layer.index)

    def get_marker(self, marker: PdfMarkerIndex) -> PdfMarker:
        return self.get_layer(marker.layer_index).get_marker(marker.index)

    def set_current_marker(self, marker: PdfMarkerIndex) -> None:
        """Remember *marker* as the cursor; it must resolve."""

        self.get_marker(marker)
        self._current_marker = marker

    @property
    def current_marker(self) -> PdfMarkerIndex | None:
        return self._current_marker

    # -- Content ---------------------------------------------------------------

    def add_content(self, content: PdfContent) -> PdfContentIndex:
        self._ensure_open()
        return self._registry.add(content)

    def get_content(self, index: PdfContentIndex) -> PdfContent:
        self._ensure_open()
        return self._registry.get(index).content

    def add_font(self, font_stream: IO[bytes] | bytes) -> FontIndex:
        """Parse and register a TrueType/OpenType font.

        Raises:
            FontParseError: If *font_stream* is not a font.
        """

        self._ensure_open()
        return FontIndex(self._registry.add(Font.from_stream(font_stream)))

    def add_vector_graphic(self, graphic_stream: IO[bytes] | bytes) -> VectorGraphicIndex:
        self._ensure_open()
        return VectorGraphicIndex(self._registry.add(VectorGraphic.from_stream(graphic_stream)))

    def add_text(
        self, text: str, font: FontIndex, font_size: float, marker: PdfMarkerIndex
    ) -> None:
        """Write *text* with its baseline starting at *marker*."""

        position = self.get_marker(marker)
        self._registry.font(font)
        self.get_layer(marker.layer_index).add_operation(
            TextOperation(text, font, font_size, position)
        )

    def add_line(
        self,
        points: Sequence[tuple[Point, bool]],
        layer: PdfLayerIndex,
        outline: Outline | None = None,
        fill: Fill | None = None,
        closed: bool = False,
    ) -> None:
        self.get_layer(layer).add_operation(
            Line(tuple(points), closed=closed, outline=outline, fill=fill)
        )

    def add_vector_graphic_at(
        self,
        graphic: VectorGraphicIndex,
        width_mm: float,
        height_mm: float,
        marker: PdfMarkerIndex,
    ) -> None:
        """Place *graphic* scaled to the given size with its lower left corner at *marker*."""

        position = self.get_marker(marker)
        source = self._registry.vector_graphic(graphic)
        placement = VectorGraphicPlacement(
            graphic,
            scale_x=mm_to_pt(width_mm) / source.width_pt,
            scale_y=mm_to_pt(height_mm) / source.height_pt,
            position=position,
        )
        self.get_layer(marker.layer_index).add_operation(placement)

    # -- Validation and output -------------------------------------------------

    def check_for_errors(self) -> None:
        """Raise :class:`~pdfbuildx.exceptions.ConformanceError` if the document
        does not meet its declared conformance level."""

        self._ensure_open()
        check_for_errors(self.metadata, self._pages, (entry.content for entry in self._registry))

    def save(self, target: IO[bytes], options: SaveOptions | None = None) -> None:
        """Compile the document and write it to *target*.

        The document is consumed before compilation starts, so a failed
        save cannot be retried with the same instance.

        Raises:
            PdfIoError: If writing to *target* fails.
        """

        self._ensure_open()
        self._consumed = True
        compiler = DocumentCompiler(self._graph, self._registry, self.metadata, self._pages, options)
        compiler.compile(target)

    def save_to_path(self, path: PathLike, options: SaveOptions | None = None) -> Path:
        self._ensure_open()
        output_path = resolve_path(path)
        try:
            ensure_output_directory(output_path)
            handle = output_path.open("wb")
        except OSError as exc:
            raise PdfIoError(f"Cannot open {output_path} for writing: {exc}") from exc
        with handle:
            self.save(handle, options)
        LOGGER.info("Wrote %s", output_path)
        return output_path


__all__ = ["PdfDocument"]
