"""Registry mapping content handles to compiled object references."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator

from pypdf.generic import IndirectObject

from .content import Font, PdfContent, VectorGraphic, compile_content
from .exceptions import ContentIndexError
from .indices import FontIndex, PdfContentIndex, VectorGraphicIndex
from .objects import ObjectGraph

LOGGER = logging.getLogger("pdfbuildx.registry")


@dataclass(slots=True)
class RegisteredContent:
    content: PdfContent
    reference: IndirectObject


class ContentRegistry:
    """Owns every shared content object of a document.

    Content is compiled into the object graph as soon as it is added, so a
    handle always resolves to a reference that pages can point at.
    """

    def __init__(self, graph: ObjectGraph) -> None:
        self._graph = graph
        self._entries: list[RegisteredContent] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[RegisteredContent]:
        return iter(self._entries)

    def add(self, content: PdfContent) -> PdfContentIndex:
        reference = compile_content(content, self._graph)
        self._entries.append(RegisteredContent(content, reference))
        LOGGER.debug(
            "Registered %s as object %d", type(content).__name__, reference.idnum
        )
        return PdfContentIndex(len(self._entries) - 1)

    def get(self, index: PdfContentIndex) -> RegisteredContent:
        if not 0 <= index.index < len(self._entries):
            raise ContentIndexError(index.index)
        return self._entries[index.index]

    def get_reference(self, index: PdfContentIndex) -> IndirectObject:
        return self.get(index).reference

    def font(self, index: FontIndex) -> Font:
        content = self.get(index.content).content
        if not isinstance(content, Font):
            raise ContentIndexError(index.content.index, f"Content {index.content.index} is not a font")
        return content

    def vector_graphic(self, index: VectorGraphicIndex) -> VectorGraphic:
        content = self.get(index.content).content
        if not isinstance(content, VectorGraphic):
            raise ContentIndexError(
                index.content.index, f"Content {index.content.index} is not a vector graphic"
            )
        return content


__all__ = ["ContentRegistry", "RegisteredContent"]
