"""Document metadata and its translation into PDF objects.

:func:`compile_metadata` is deliberately non-validating: an empty title or
a missing ICC profile compiles fine. Use
:func:`pdfbuildx.validators.check_for_errors` to reject such documents.
"""

from __future__ import annotations

import re
import secrets
import string
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from xml.etree.ElementTree import Element, SubElement, register_namespace, tostring

from pypdf.generic import (
    ArrayObject,
    DecodedStreamObject,
    DictionaryObject,
    IndirectObject,
    NameObject,
    StreamObject,
    TextStringObject,
    create_string_object,
)

from .conformance import DEFAULT_CONFORMANCE, PdfConformance
from .content import IccProfile

DOCUMENT_ID_LENGTH = 32
DEFAULT_CREATOR = "pdfbuildx"
DEFAULT_PRODUCER = "pdfbuildx"

XMP_NS = {
    "x": "adobe:ns:meta/",
    "rdf": "http://www.w3.org/1999/02/22-rdf-syntax-ns#",
    "dc": "http://purl.org/dc/elements/1.1/",
    "xmp": "http://ns.adobe.com/xap/1.0/",
    "xmpMM": "http://ns.adobe.com/xap/1.0/mm/",
    "pdf": "http://ns.adobe.com/pdf/1.3/",
    "pdfx": "http://ns.adobe.com/pdfx/1.3/",
    "pdfxid": "http://www.npes.org/pdfx/ns/id/",
    "pdfaid": "http://www.aiim.org/pdfa/ns/id/",
}

for prefix, uri in XMP_NS.items():
    register_namespace(prefix, uri)

XML_LANG = "{http://www.w3.org/XML/1998/namespace}lang"
XPACKET_ID = "W5M0MpCehiHzreSzNTczkc9d"

# Characterized printing condition of the output intent.
OUTPUT_CONDITION = (
    "Commercial and special offset print acccording to ISO 12647-2:2004 / Amd 1, "
    "paper type 1 or 2 (matte or gloss-coated offset paper, 115 g/m2), "
    "screen ruling 60/cm"
)
OUTPUT_CONDITION_IDENTIFIER = "FOGRA39"
OUTPUT_INTENT_REGISTRY = "http://www.color.org"
OUTPUT_INTENT_INFO = "Coated FOGRA39 (ISO 12647-2:2004)"


def generate_document_id() -> str:
    """Return a random identifier of 32 ASCII letters and digits."""

    alphabet = string.ascii_letters + string.digits
    return "".join(secrets.choice(alphabet) for _ in range(DOCUMENT_ID_LENGTH))


def _now() -> datetime:
    return datetime.now(timezone.utc).astimezone()


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.astimezone()


def format_pdf_date(value: datetime) -> str:
    """Encode *value* as a PDF date string, e.g. ``D:20240131120000+01'00'``."""

    value = _aware(value)
    offset = value.utcoffset() or timedelta(0)
    sign = "-" if offset < timedelta(0) else "+"
    minutes = abs(int(offset.total_seconds())) // 60
    return f"D:{value:%Y%m%d%H%M%S}{sign}{minutes // 60:02d}'{minutes % 60:02d}'"


def format_xmp_date(value: datetime) -> str:
    return _aware(value).isoformat(timespec="seconds")


_PDF_DATE = re.compile(
    r"^(?:D:)?(?P<stamp>\d{4}(?:\d{2}){0,5})"
    r"(?:(?P<utc>Z)|(?P<sign>[+-])(?P<hours>\d{2})(?:'(?P<minutes>\d{2})'?)?)?"
)


def parse_pdf_date(raw: str | None) -> datetime | None:
    """Inverse of :func:`format_pdf_date`; also accepts truncated dates.

    Missing fields fall back to their earliest value and a missing offset
    means UTC. Returns ``None`` for anything else.
    """
    match = _PDF_DATE.match(raw.strip()) if raw else None
    if match is None:
        return None
    stamp = match["stamp"]
    padded = stamp + "0101000000"[len(stamp) - 4 :]
    try:
        value = datetime.strptime(padded, "%Y%m%d%H%M%S")
    except ValueError:
        return None
    offset = timedelta(0)
    if match["sign"]:
        offset = timedelta(hours=int(match["hours"]), minutes=int(match["minutes"] or 0))
        if match["sign"] == "-":
            offset = -offset
    return value.replace(tzinfo=timezone(offset))


@dataclass(frozen=True, slots=True)
class PdfMetadata:
    """Immutable document metadata, replaced wholesale by the document setters."""

    document_title: str
    creator: str = DEFAULT_CREATOR
    producer: str = DEFAULT_PRODUCER
    author: str | None = None
    subject: str | None = None
    keywords: tuple[str, ...] = ()
    document_id: str = field(default_factory=generate_document_id)
    document_version: int = 1
    trapping: bool = False
    conformance: PdfConformance = DEFAULT_CONFORMANCE
    creation_date: datetime = field(default_factory=_now)
    modification_date: datetime = field(default_factory=_now)
    icc_profile: IccProfile | None = None


@dataclass(slots=True)
class CompiledMetadata:
    xmp: StreamObject
    info: DictionaryObject
    icc_profile: StreamObject | None
    instance_id: str


def _text(parent: Element, tag: str, value: str) -> Element:
    prefix, _, local = tag.partition(":")
    element = SubElement(parent, f"{{{XMP_NS[prefix]}}}{local}")
    element.text = value
    return element


def build_xmp(metadata: PdfMetadata, instance_id: str) -> bytes:
    """Serialize the XMP packet describing *metadata*."""

    x_ns = f"{{{XMP_NS['x']}}}"
    rdf_ns = f"{{{XMP_NS['rdf']}}}"
    root = Element(f"{x_ns}xmpmeta", {f"{x_ns}xmptk": metadata.producer})
    rdf = SubElement(root, f"{rdf_ns}RDF")
    description = SubElement(rdf, f"{rdf_ns}Description", {f"{rdf_ns}about": ""})

    conformance = metadata.conformance
    _text(description, "pdf:Producer", metadata.producer)
    _text(description, "pdf:Trapped", "True" if metadata.trapping else "False")
    if metadata.keywords:
        _text(description, "pdf:Keywords", ", ".join(metadata.keywords))
    _text(description, "xmp:CreatorTool", metadata.creator)
    _text(description, "xmp:CreateDate", format_xmp_date(metadata.creation_date))
    _text(description, "xmp:ModifyDate", format_xmp_date(metadata.modification_date))
    _text(description, "xmp:MetadataDate", format_xmp_date(metadata.modification_date))
    _text(description, "dc:format", "application/pdf")

    title = SubElement(description, f"{{{XMP_NS['dc']}}}title")
    alt = SubElement(title, f"{rdf_ns}Alt")
    SubElement(alt, f"{rdf_ns}li", {XML_LANG: "x-default"}).text = metadata.document_title
    if metadata.author:
        creator = SubElement(description, f"{{{XMP_NS['dc']}}}creator")
        seq = SubElement(creator, f"{rdf_ns}Seq")
        SubElement(seq, f"{rdf_ns}li").text = metadata.author
    if metadata.subject:
        subject = SubElement(description, f"{{{XMP_NS['dc']}}}description")
        alt = SubElement(subject, f"{rdf_ns}Alt")
        SubElement(alt, f"{rdf_ns}li", {XML_LANG: "x-default"}).text = metadata.subject

    _text(description, "xmpMM:DocumentID", f"uuid:{metadata.document_id}")
    _text(description, "xmpMM:InstanceID", f"uuid:{instance_id}")
    _text(description, "xmpMM:RenditionClass", "default")
    _text(description, "xmpMM:VersionID", str(metadata.document_version))

    if conformance.is_pdfx:
        _text(description, "pdfx:GTS_PDFXVersion", conformance.pdfx_version)
        _text(description, "pdfxid:GTS_PDFXVersion", conformance.pdfx_version)
    if conformance.is_pdfa:
        _text(description, "pdfaid:part", str(conformance.pdfa_part))
        _text(description, "pdfaid:conformance", conformance.pdfa_conformance)

    body = tostring(root, encoding="unicode")
    packet = f'<?xpacket begin="{chr(0xFEFF)}" id="{XPACKET_ID}"?>\n{body}\n<?xpacket end="w"?>'
    return packet.encode("utf-8")


def build_info(metadata: PdfMetadata) -> DictionaryObject:
    """Build the document information dictionary (``/Info``)."""

    info = DictionaryObject(
        {
            NameObject("/Title"): create_string_object(metadata.document_title),
            NameObject("/Creator"): create_string_object(metadata.creator),
            NameObject("/Producer"): create_string_object(metadata.producer),
            NameObject("/CreationDate"): TextStringObject(format_pdf_date(metadata.creation_date)),
            NameObject("/ModDate"): TextStringObject(format_pdf_date(metadata.modification_date)),
            NameObject("/Trapped"): NameObject("/True" if metadata.trapping else "/False"),
        }
    )
    if metadata.author:
        info[NameObject("/Author")] = create_string_object(metadata.author)
    if metadata.subject:
        info[NameObject("/Subject")] = create_string_object(metadata.subject)
    if metadata.keywords:
        info[NameObject("/Keywords")] = create_string_object(", ".join(metadata.keywords))
    conformance = metadata.conformance
    if conformance.is_pdfx:
        info[NameObject("/GTS_PDFXVersion")] = TextStringObject(conformance.pdfx_version)
        if conformance is PdfConformance.X1A_2001_PDF_1_3:
            info[NameObject("/GTS_PDFXConformance")] = TextStringObject(conformance.value)
    return info


def compile_metadata(metadata: PdfMetadata) -> CompiledMetadata:
    """Translate *metadata* into the XMP stream, info dictionary and ICC stream.

    Every call generates a fresh instance id.
    """

    instance_id = generate_document_id()
    xmp = DecodedStreamObject()
    xmp.set_data(build_xmp(metadata, instance_id))
    xmp[NameObject("/Type")] = NameObject("/Metadata")
    xmp[NameObject("/Subtype")] = NameObject("/XML")
    icc_profile = metadata.icc_profile.to_stream() if metadata.icc_profile is not None else None
    return CompiledMetadata(
        xmp=xmp,
        info=build_info(metadata),
        icc_profile=icc_profile,
        instance_id=instance_id,
    )


def build_output_intent(
    conformance: PdfConformance, profile: IndirectObject
) -> DictionaryObject:
    """Build the ``/OutputIntent`` dictionary pointing at the embedded ICC profile."""

    return DictionaryObject(
        {
            NameObject("/Type"): NameObject("/OutputIntent"),
            NameObject("/S"): NameObject(conformance.output_intent_subtype),
            NameObject("/OutputCondition"): TextStringObject(OUTPUT_CONDITION),
            NameObject("/OutputConditionIdentifier"): TextStringObject(OUTPUT_CONDITION_IDENTIFIER),
            NameObject("/RegistryName"): TextStringObject(OUTPUT_INTENT_REGISTRY),
            NameObject("/Info"): TextStringObject(OUTPUT_INTENT_INFO),
            NameObject("/DestOutputProfile"): profile,
        }
    )


def build_output_intents(conformance: PdfConformance, profile: IndirectObject) -> ArrayObject:
    return ArrayObject([build_output_intent(conformance, profile)])


__all__ = [
    "PdfMetadata",
    "CompiledMetadata",
    "compile_metadata",
    "build_xmp",
    "build_info",
    "build_output_intent",
    "build_output_intents",
    "format_pdf_date",
    "format_xmp_date",
    "parse_pdf_date",
    "generate_document_id",
]
