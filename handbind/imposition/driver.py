from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path

from handbind.events import log_event
from handbind.imposition.core import (
    Signature,
    SignatureParams,
    arrange_pages,
    padding_needed,
)
from handbind.imposition.page_store import PageStore
from handbind.imposition.pdf_store import PdfPageStore

_LOGGER = logging.getLogger("handbind.imposition")


@dataclass(frozen=True)
class ArrangementSummary:
    source_pages: int
    blank_pages: int
    page_count: int
    signatures: tuple[Signature, ...]
    placements: int

    @property
    def sheet_counts(self) -> list[int]:
        return [signature.sheets for signature in self.signatures]


@dataclass(frozen=True)
class ImposedArtifact:
    path: Path
    source_pages: int
    page_count: int
    signatures: tuple[Signature, ...]


def add_blank_pages(store: PageStore, count: int, *, at_start: bool) -> None:
    if count < 0:
        raise ValueError("count must be >= 0")
    for _ in range(count):
        store.append_blank_page(at_start)


def rearrange_document(
    store: PageStore,
    params: SignatureParams,
    *,
    end_pages: bool = False,
) -> ArrangementSummary:
    """Pad ``store`` and reorder its pages in place for signature binding."""
    source_pages = store.get_page_count()

    if end_pages:
        add_blank_pages(store, 1, at_start=True)
        add_blank_pages(store, 1, at_start=False)
    add_blank_pages(store, padding_needed(store.get_page_count()), at_start=False)

    page_count = store.get_page_count()
    snapshot = [store.get_page_content(index) for index in range(page_count)]
    placements = 0

    def place(source: int, destination: int) -> None:
        nonlocal placements
        store.set_page_content(destination, snapshot[source])
        placements += 1

    signatures = arrange_pages(page_count, params, place)
    for signature in signatures:
        log_event(
            _LOGGER,
            logging.DEBUG,
            "signature.imposed",
            index=signature.index,
            first_page=signature.first_page,
            last_page=signature.last_page,
            sheets=signature.sheets,
        )

    return ArrangementSummary(
        source_pages=source_pages,
        blank_pages=page_count - source_pages,
        page_count=page_count,
        signatures=tuple(signatures),
        placements=placements,
    )


def deterministic_output_filename(source_name: str) -> str:
    stem = Path(source_name).stem.strip()
    slug = re.sub(r"[^A-Za-z0-9]+", "_", stem).strip("_").lower()
    slug = slug or "output"
    return f"{slug}_signatures.pdf"


def impose_pdf(
    input_path: str | Path,
    output_path: str | Path,
    params: SignatureParams,
    *,
    end_pages: bool = False,
) -> ImposedArtifact:
    store = PdfPageStore.from_path(input_path)
    summary = rearrange_document(store, params, end_pages=end_pages)
    target = Path(output_path)
    written = store.write(target)

    log_event(
        _LOGGER,
        logging.INFO,
        "document.imposed",
        input_path=str(input_path),
        output_path=str(target),
        source_pages=summary.source_pages,
        blank_pages=summary.blank_pages,
        output_pages=written,
        signatures=summary.sheet_counts,
    )
    return ImposedArtifact(
        path=target,
        source_pages=summary.source_pages,
        page_count=written,
        signatures=summary.signatures,
    )
