from __future__ import annotations

import io
from pathlib import Path
from typing import BinaryIO

from pypdf import PageObject, PdfReader, PdfWriter
from pypdf.generic import FloatObject, NameObject, NumberObject, RectangleObject

_PAGE_BOXES = ("/CropBox", "/BleedBox", "/TrimBox", "/ArtBox")


class PdfPageStore:
    """Page store over a pypdf document.

    Pages are held as ``PageObject`` references in their current output
    order. Nothing is written back until :meth:`write` is called.
    """

    def __init__(self, reader: PdfReader) -> None:
        if reader.is_encrypted:
            raise ValueError("encrypted PDFs are not supported; remove encryption and retry")
        self._pages: list[PageObject] = list(reader.pages)

    @classmethod
    def from_path(cls, path: str | Path) -> PdfPageStore:
        return cls(PdfReader(str(path)))

    @classmethod
    def from_bytes(cls, payload: bytes) -> PdfPageStore:
        return cls(PdfReader(io.BytesIO(payload)))

    def get_page_count(self) -> int:
        return len(self._pages)

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._pages):
            raise IndexError(f"page index {index} out of range for {len(self._pages)} pages")

    def get_page_content(self, index: int) -> PageObject:
        self._check_index(index)
        return self._pages[index]

    def set_page_content(self, index: int, content: PageObject) -> None:
        self._check_index(index)
        self._pages[index] = content

    def _blank_page(self) -> PageObject:
        if not self._pages:
            raise ValueError("document does not have any pages")

        template = self._pages[0]
        blank = PageObject.create_blank_page(
            width=template.mediabox.width,
            height=template.mediabox.height,
        )
        # Fresh objects so the blank never aliases the template's boxes.
        blank[NameObject("/MediaBox")] = RectangleObject(list(template.mediabox))
        for key in _PAGE_BOXES:
            if key in template:
                blank[NameObject(key)] = RectangleObject(list(template[key]))
        if template.rotation:
            blank[NameObject("/Rotate")] = NumberObject(template.rotation)
        user_unit = template.get("/UserUnit")
        if user_unit is not None:
            blank[NameObject("/UserUnit")] = FloatObject(float(user_unit))
        return blank

    def append_blank_page(self, at_start: bool) -> None:
        blank = self._blank_page()
        if at_start:
            self._pages.insert(0, blank)
        else:
            self._pages.append(blank)

    def write(self, target: str | Path | BinaryIO) -> int:
        writer = PdfWriter()
        for page in self._pages:
            writer.add_page(page)

        if isinstance(target, (str, Path)):
            output_path = Path(target)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            with output_path.open("wb") as handle:
                writer.write(handle)
        else:
            writer.write(target)
        return len(writer.pages)
