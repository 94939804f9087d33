"""Low-level object graph backed by :class:`pypdf.PdfWriter`.

The document compiler only talks to :class:`ObjectGraph`. Object
numbering, cross-reference tables and byte encoding stay inside pypdf;
this module merely exposes the handful of primitives the compiler needs
(reserve an id, add or replace an object, set the trailer entries, clean
up and write).
"""

from __future__ import annotations

import logging
from typing import IO, Iterable

from pypdf import PdfWriter
from pypdf.generic import (
    ArrayObject,
    ByteStringObject,
    DictionaryObject,
    IndirectObject,
    NameObject,
    NullObject,
    PdfObject,
    StreamObject,
)

from .exceptions import PdfIoError

LOGGER = logging.getLogger("pdfbuildx.objects")


def _strip_references(obj: PdfObject, dead: set[int]) -> None:
    if isinstance(obj, DictionaryObject):
        for key in [
            key for key, value in obj.items() if isinstance(value, IndirectObject) and value.idnum in dead
        ]:
            del obj[key]
        for value in obj.values():
            _strip_references(value, dead)
    elif isinstance(obj, ArrayObject):
        obj[:] = [item for item in obj if not (isinstance(item, IndirectObject) and item.idnum in dead)]
        for item in obj:
            _strip_references(item, dead)


class ObjectGraph:
    """Collection of indirect PDF objects that is serialized in one go."""

    def __init__(self, *, version: str = "1.3") -> None:
        self._writer = PdfWriter()
        self.version = version

    @property
    def writer(self) -> PdfWriter:
        return self._writer

    @property
    def version(self) -> str:
        return self._writer.pdf_header.removeprefix("%PDF-")

    @version.setter
    def version(self, value: str) -> None:
        self._writer.pdf_header = f"%PDF-{value}"

    @property
    def object_count(self) -> int:
        return sum(1 for obj in self._writer._objects if obj is not None)

    def objects(self) -> Iterable[tuple[int, PdfObject]]:
        for idnum, obj in enumerate(self._writer._objects, start=1):
            if obj is not None:
                yield idnum, obj

    # -- Allocation ----------------------------------------------------------

    def new_object_id(self) -> IndirectObject:
        """Reserve an object number that is filled in later via :meth:`set_object`."""

        return self._writer._add_object(NullObject())

    def add_object(self, obj: PdfObject) -> IndirectObject:
        return self._writer._add_object(obj)

    def set_object(self, reference: IndirectObject, obj: PdfObject) -> IndirectObject:
        self._writer._replace_object(reference, obj)
        return reference

    def get_object(self, reference: IndirectObject | int) -> PdfObject:
        return self._writer.get_object(reference)

    # -- Trailer -------------------------------------------------------------

    def set_root(self, catalog: DictionaryObject) -> IndirectObject:
        """Install *catalog* as the document catalog referenced by ``/Root``."""

        root = self._writer.root_object
        root.clear()
        root.update(catalog)
        return root.indirect_reference

    def set_info(self, info: DictionaryObject) -> None:
        """Install *info* as the document information dictionary (``/Info``).

        Text entries go through :attr:`PdfWriter.metadata`. That setter turns
        every value into a string, so name entries such as ``/Trapped`` are
        copied onto the written dictionary afterwards.
        """

        names = {key: value for key, value in info.items() if isinstance(value, NameObject)}
        self._writer.metadata = {key: value for key, value in info.items() if key not in names}
        if names:
            self._writer._info.update(names)

    def set_file_identifier(self, permanent: bytes, changing: bytes) -> None:
        self._writer._ID = ArrayObject([ByteStringObject(permanent), ByteStringObject(changing)])

    # -- Structural cleanup --------------------------------------------------

    def delete_zero_length_streams(self) -> list[int]:
        """Drop empty streams together with every reference pointing at them."""

        dead = [
            idnum
            for idnum, obj in self.objects()
            if isinstance(obj, StreamObject) and not obj.get_data()
        ]
        if not dead:
            return dead
        for idnum in dead:
            self._writer._objects[idnum - 1] = None
        dead_set = set(dead)
        for _, obj in self.objects():
            _strip_references(obj, dead_set)
        LOGGER.debug("Deleted zero-length streams %s", dead)
        return dead

    def prune_objects(self) -> int:
        """Remove objects no longer reachable from the catalog or the info dictionary."""

        removed = 0
        while True:
            before = self.object_count
            self._writer.compress_identical_objects(remove_duplicates=False, remove_unreferenced=True)
            after = self.object_count
            if after == before:
                return removed
            removed += before - after

    # -- Output --------------------------------------------------------------

    def save_to(self, target: IO[bytes]) -> None:
        try:
            self._writer.write(target)
        except (OSError, ValueError) as exc:
            LOGGER.error("Failed to write PDF: %s", exc)
            raise PdfIoError(f"Failed to write PDF: {exc}") from exc


__all__ = ["ObjectGraph"]
