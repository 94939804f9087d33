"""Save pipeline turning a document tree into a serialized PDF.

Compilation runs in three phases:

1. *Allocation*: reserve the page tree id so pages can name their parent
   before it exists, and add the compiled metadata objects.
2. *Construction*: one page dictionary per page, in insertion order, with
   its layers rendered into content streams and its resources collected.
   The page tree is then stored at the id reserved in phase one.
3. *Finalization*: catalog, trailer entries, structural cleanup and the
   actual write.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import IO, Sequence

from pypdf.generic import (
    ArrayObject,
    DecodedStreamObject,
    DictionaryObject,
    FloatObject,
    IndirectObject,
    NameObject,
    NumberObject,
    create_string_object,
)

from .conformance import version_key
from .indices import FontIndex, PdfContentIndex, VectorGraphicIndex
from .layer import PdfLayer
from .metadata import PdfMetadata, build_output_intents, compile_metadata
from .objects import ObjectGraph
from .page import PdfPage
from .registry import ContentRegistry

LOGGER = logging.getLogger("pdfbuildx.compiler")


@dataclass(slots=True)
class SaveOptions:
    """Options controlling how a document is written."""

    compress_streams: bool = True
    prune: bool = True
    page_layout: str = "/OneColumn"
    page_mode: str = "/UseNone"


class _PageResources:
    """Resource names handed out while rendering the layers of one page."""

    def __init__(self, registry: ContentRegistry) -> None:
        self._registry = registry
        self.fonts: dict[int, str] = {}
        self.xobjects: dict[int, str] = {}
        self.properties: dict[str, IndirectObject] = {}

    def font_name(self, font: FontIndex) -> str:
        self._registry.font(font)
        return self.fonts.setdefault(font.content.index, f"F{len(self.fonts)}")

    def xobject_name(self, graphic: VectorGraphicIndex) -> str:
        self._registry.vector_graphic(graphic)
        return self.xobjects.setdefault(graphic.content.index, f"X{len(self.xobjects)}")

    def property_name(self, group: IndirectObject) -> str:
        name = f"MC{len(self.properties)}"
        self.properties[name] = group
        return name

    def _references(self, names: dict[int, str]) -> DictionaryObject:
        return DictionaryObject(
            {
                NameObject(f"/{name}"): self._registry.get_reference(PdfContentIndex(index))
                for index, name in names.items()
            }
        )

    def to_dictionary(self) -> DictionaryObject:
        resources = DictionaryObject()
        if self.fonts:
            resources[NameObject("/Font")] = self._references(self.fonts)
        if self.xobjects:
            resources[NameObject("/XObject")] = self._references(self.xobjects)
        if self.properties:
            resources[NameObject("/Properties")] = DictionaryObject(
                {NameObject(f"/{name}"): group for name, group in self.properties.items()}
            )
        return resources


def _box(width: float, height: float) -> ArrayObject:
    return ArrayObject([NumberObject(0), NumberObject(0), FloatObject(width), FloatObject(height)])


class DocumentCompiler:
    """Walks pages, layers and content once and writes the resulting PDF."""

    def __init__(
        self,
        graph: ObjectGraph,
        registry: ContentRegistry,
        metadata: PdfMetadata,
        pages: Sequence[PdfPage],
        options: SaveOptions | None = None,
    ) -> None:
        self.graph = graph
        self.registry = registry
        self.metadata = metadata
        self.pages = list(pages)
        self.options = options or SaveOptions()
        self._layering = metadata.conformance.allows_layers
        self._groups: list[IndirectObject] = []

    def compile(self, target: IO[bytes]) -> None:
        graph = self.graph
        graph.version = self._pdf_version()

        # Allocation
        pages_ref = graph.new_object_id()
        compiled = compile_metadata(self.metadata)
        xmp_ref = graph.add_object(compiled.xmp)
        graph.set_info(compiled.info)
        icc_ref = None
        if compiled.icc_profile is not None:
            icc_ref = graph.add_object(compiled.icc_profile)
        LOGGER.debug("Reserved page tree %d, metadata %d", pages_ref.idnum, xmp_ref.idnum)

        # Construction
        kids = ArrayObject(self._compile_page(page, pages_ref) for page in self.pages)
        graph.set_object(
            pages_ref,
            DictionaryObject(
                {
                    NameObject("/Type"): NameObject("/Pages"),
                    NameObject("/Count"): NumberObject(len(kids)),
                    NameObject("/Kids"): kids,
                }
            ),
        )

        # Finalization
        catalog = DictionaryObject(
            {
                NameObject("/Type"): NameObject("/Catalog"),
                NameObject("/PageLayout"): NameObject(self.options.page_layout),
                NameObject("/PageMode"): NameObject(self.options.page_mode),
                NameObject("/Pages"): pages_ref,
                NameObject("/Metadata"): xmp_ref,
            }
        )
        if icc_ref is not None:
            catalog[NameObject("/OutputIntents")] = build_output_intents(self.metadata.conformance, icc_ref)
        if self._groups:
            catalog[NameObject("/OCProperties")] = self._optional_content_properties()
        graph.set_root(catalog)
        graph.set_file_identifier(
            self.metadata.document_id.encode("utf-8"), compiled.instance_id.encode("utf-8")
        )

        if self.options.prune:
            dropped = graph.delete_zero_length_streams()
            removed = graph.prune_objects()
            if dropped or removed:
                LOGGER.debug("Cleanup dropped %d empty streams and %d unreachable objects", len(dropped), removed)
        graph.save_to(target)
        LOGGER.info(
            "Saved %d page(s) as %s (%d objects)",
            len(self.pages),
            self.metadata.conformance.value,
            graph.object_count,
        )

    def _pdf_version(self) -> str:
        """Header version of the conformance level, raised when content needs more."""

        version = self.metadata.conformance.pdf_version
        for entry in self.registry:
            required = getattr(entry.content, "minimum_pdf_version", version)
            if version_key(required) > version_key(version):
                LOGGER.debug("Raising PDF version to %s for %s", required, type(entry.content).__name__)
                version = required
        return version

    def _compile_page(self, page: PdfPage, parent: IndirectObject) -> IndirectObject:
        resources = _PageResources(self.registry)
        contents = ArrayObject()
        for layer in page.layers:
            stream = self._compile_layer(layer, resources)
            if stream is not None:
                contents.append(stream)

        page_dict = DictionaryObject(
            {
                NameObject("/Type"): NameObject("/Page"),
                NameObject("/Rotate"): NumberObject(0),
                NameObject("/MediaBox"): _box(page.width_pt, page.height_pt),
                NameObject("/TrimBox"): _box(page.width_pt, page.height_pt),
                NameObject("/CropBox"): _box(page.width_pt, page.height_pt),
                NameObject("/Parent"): parent,
                NameObject("/Resources"): resources.to_dictionary(),
            }
        )
        if contents:
            page_dict[NameObject("/Contents")] = contents if len(contents) > 1 else contents[0]
        reference = self.graph.add_object(page_dict)
        LOGGER.debug("Compiled page as object %d with %d content stream(s)", reference.idnum, len(contents))
        return reference

    def _compile_layer(self, layer: PdfLayer, resources: _PageResources) -> IndirectObject | None:
        ops: list[str] = []
        for operation in layer.operations:
            ops.extend(operation.render(resources))
        if self._layering:
            group = self.graph.add_object(
                DictionaryObject(
                    {
                        NameObject("/Type"): NameObject("/OCG"),
                        NameObject("/Name"): create_string_object(layer.name),
                    }
                )
            )
            self._groups.append(group)
            ops = [f"/OC /{resources.property_name(group)} BDC", *ops, "EMC"]
        if not ops:
            return None

        stream = DecodedStreamObject()
        stream.set_data(("\n".join(ops) + "\n").encode("latin-1"))
        if self.options.compress_streams:
            return self.graph.add_object(stream.flate_encode())
        return self.graph.add_object(stream)

    def _optional_content_properties(self) -> DictionaryObject:
        groups = ArrayObject(self._groups)
        return DictionaryObject(
            {
                NameObject("/OCGs"): groups,
                NameObject("/D"): DictionaryObject(
                    {
                        NameObject("/Order"): ArrayObject(self._groups),
                        NameObject("/ON"): ArrayObject(self._groups),
                        NameObject("/BaseState"): NameObject("/ON"),
                    }
                ),
            }
        )


__all__ = ["DocumentCompiler", "SaveOptions"]
