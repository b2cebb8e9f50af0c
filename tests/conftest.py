from __future__ import annotations

import io
import sys
from pathlib import Path
from typing import Callable

import pytest
from pypdf import PageObject, PdfWriter
from pypdf.generic import DecodedStreamObject

# Resolve the package from this checkout rather than a stale editable install.
ROOT = Path(__file__).resolve().parents[1]
ROOT_STR = str(ROOT)
if ROOT_STR not in sys.path:
    sys.path.insert(0, ROOT_STR)

PAGE_MARKER = b"% handbind-test-page "


def build_numbered_pdf(page_count: int, *, encrypted: bool = False, first_rotation: int = 0) -> bytes:
    writer = PdfWriter()
    for index in range(page_count):
        page = writer.add_blank_page(width=300 + index, height=500 + index)
        stream = DecodedStreamObject()
        stream.set_data(PAGE_MARKER + str(index).encode("ascii") + b"\n")
        page.replace_contents(stream)
        if index == 0 and first_rotation:
            page.rotate(first_rotation)
    if encrypted:
        writer.encrypt("secret")

    payload = io.BytesIO()
    writer.write(payload)
    return payload.getvalue()


def page_label(page: PageObject) -> int | None:
    """Source index written into a test page, or None for a blank filler."""
    contents = page._get_contents_as_bytes()
    if not contents:
        return None
    marker_start = contents.index(PAGE_MARKER) + len(PAGE_MARKER)
    return int(contents[marker_start:].split(b"\n", 1)[0])


@pytest.fixture
def numbered_pdf() -> Callable[..., bytes]:
    return build_numbered_pdf


@pytest.fixture
def label_of() -> Callable[[PageObject], int | None]:
    return page_label
