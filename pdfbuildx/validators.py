"""Conformance checks run explicitly before a document is saved."""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from .conformance import version_key
from .content import Font, IccProfileType, PdfContent
from .exceptions import ConformanceError
from .graphics import Line, Rgb
from .metadata import PdfMetadata
from .page import PdfPage

LOGGER = logging.getLogger("pdfbuildx.validators")


def _uses_rgb(line: Line) -> bool:
    colors = []
    if line.outline is not None:
        colors.append(line.outline.color)
    if line.fill is not None:
        colors.append(line.fill.color)
    return any(isinstance(color, Rgb) for color in colors)


def find_violations(
    metadata: PdfMetadata, pages: Sequence[PdfPage], contents: Iterable[PdfContent] = ()
) -> list[str]:
    """Return a description of every way the document breaks its conformance level.

    An empty list means the document can be saved as declared. The
    compiler never calls this; it writes whatever it is given.
    """

    conformance = metadata.conformance
    level = conformance.value
    violations: list[str] = []

    if conformance.requires_icc_profile and metadata.icc_profile is None:
        violations.append(f"{level} requires an output intent ICC profile")
    if conformance.requires_cmyk and metadata.icc_profile is not None:
        if metadata.icc_profile.kind is not IccProfileType.CMYK:
            violations.append(f"{level} requires a CMYK output intent profile")
    if conformance.requires_title and not metadata.document_title.strip():
        violations.append(f"{level} requires a document title")

    for number, page in enumerate(pages):
        if not conformance.allows_layers and len(page.layers) > 1:
            violations.append(
                f"{level} does not allow layers (page {number} has {len(page.layers)})"
            )
        if conformance.requires_cmyk:
            lines: Iterable[Line] = (
                op for layer in page.layers for op in layer.operations if isinstance(op, Line)
            )
            if any(_uses_rgb(line) for line in lines):
                violations.append(f"{level} does not allow RGB colours (page {number})")

    for content in contents:
        if isinstance(content, Font) and version_key(content.minimum_pdf_version) > version_key(
            conformance.pdf_version
        ):
            violations.append(
                f"{level} is limited to PDF {conformance.pdf_version}; "
                f"OpenType font {content.postscript_name} needs PDF {content.minimum_pdf_version}"
            )

    return violations


def check_for_errors(
    metadata: PdfMetadata, pages: Sequence[PdfPage], contents: Iterable[PdfContent] = ()
) -> None:
    """Raise :class:`ConformanceError` if :func:`find_violations` reports anything."""

    violations = find_violations(metadata, pages, contents)
    if violations:
        for violation in violations:
            LOGGER.warning("Conformance violation: %s", violation)
        raise ConformanceError(violations)
    LOGGER.debug("Document conforms to %s", metadata.conformance.value)


__all__ = ["check_for_errors", "find_violations"]
