"""Conformance levels a document can declare and their requirements."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True, slots=True)
class _Requirements:
    pdf_version: str
    pdfx_version: str | None = None
    pdfa_part: int | None = None
    pdfa_conformance: str | None = None
    requires_icc_profile: bool = False
    requires_cmyk: bool = False
    allows_layers: bool = False


class PdfConformance(str, Enum):
    """Named profiles of structural and metadata requirements."""

    X1A_2001_PDF_1_3 = "PDF/X-1a:2001"
    X3_2002_PDF_1_3 = "PDF/X-3:2002"
    X1A_2003_PDF_1_4 = "PDF/X-1a:2003"
    X3_2003_PDF_1_4 = "PDF/X-3:2003"
    X4_2010_PDF_1_6 = "PDF/X-4"
    A1B_2005_PDF_1_4 = "PDF/A-1b"
    A2B_2011_PDF_1_7 = "PDF/A-2b"
    CUSTOM = "custom"

    @property
    def _requirements(self) -> _Requirements:
        return _REQUIREMENTS[self]

    @property
    def pdf_version(self) -> str:
        return self._requirements.pdf_version

    @property
    def pdfx_version(self) -> str | None:
        """Value written to ``GTS_PDFXVersion``, ``None`` outside PDF/X."""
        return self._requirements.pdfx_version

    @property
    def pdfa_part(self) -> int | None:
        return self._requirements.pdfa_part

    @property
    def pdfa_conformance(self) -> str | None:
        return self._requirements.pdfa_conformance

    @property
    def is_pdfx(self) -> bool:
        return self.pdfx_version is not None

    @property
    def is_pdfa(self) -> bool:
        return self.pdfa_part is not None

    @property
    def requires_icc_profile(self) -> bool:
        return self._requirements.requires_icc_profile

    @property
    def requires_title(self) -> bool:
        return self.is_pdfx or self.is_pdfa

    @property
    def requires_cmyk(self) -> bool:
        return self._requirements.requires_cmyk

    @property
    def allows_layers(self) -> bool:
        """Whether layers may be written as optional content groups."""
        return self._requirements.allows_layers

    @property
    def output_intent_subtype(self) -> str:
        return "/GTS_PDFA1" if self.is_pdfa else "/GTS_PDFX"

    @classmethod
    def from_name(cls, name: str) -> "PdfConformance":
        """Look up a level by member name or by its display value."""

        for member in cls:
            if name in (member.name, member.value) or name.upper() == member.name:
                return member
        raise ValueError(f"Unknown conformance level: {name}")


_REQUIREMENTS: dict[PdfConformance, _Requirements] = {
    PdfConformance.X1A_2001_PDF_1_3: _Requirements(
        "1.3", pdfx_version="PDF/X-1:2001", requires_icc_profile=True, requires_cmyk=True
    ),
    PdfConformance.X3_2002_PDF_1_3: _Requirements(
        "1.3", pdfx_version="PDF/X-3:2002", requires_icc_profile=True
    ),
    PdfConformance.X1A_2003_PDF_1_4: _Requirements(
        "1.4", pdfx_version="PDF/X-1a:2003", requires_icc_profile=True, requires_cmyk=True
    ),
    PdfConformance.X3_2003_PDF_1_4: _Requirements(
        "1.4", pdfx_version="PDF/X-3:2003", requires_icc_profile=True
    ),
    PdfConformance.X4_2010_PDF_1_6: _Requirements(
        "1.6", pdfx_version="PDF/X-4", requires_icc_profile=True, allows_layers=True
    ),
    PdfConformance.A1B_2005_PDF_1_4: _Requirements(
        "1.4", pdfa_part=1, pdfa_conformance="B", requires_icc_profile=True
    ),
    PdfConformance.A2B_2011_PDF_1_7: _Requirements(
        "1.7", pdfa_part=2, pdfa_conformance="B", requires_icc_profile=True, allows_layers=True
    ),
    PdfConformance.CUSTOM: _Requirements("1.7", allows_layers=True),
}

DEFAULT_CONFORMANCE = PdfConformance.X3_2003_PDF_1_4


def version_key(version: str) -> tuple[int, ...]:
    """Sortable form of a PDF version string such as ``"1.6"``."""
    return tuple(int(part) for part in version.split("."))


__all__ = ["PdfConformance", "DEFAULT_CONFORMANCE", "version_key"]
