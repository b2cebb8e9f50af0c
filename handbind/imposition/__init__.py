from handbind.imposition.core import (
    Placement,
    PlacementSink,
    Signature,
    SignatureParams,
    arrange_pages,
    collect_placements,
    impose_signature,
    output_order,
    padding_needed,
    pages_per_signature,
    partition_signatures,
    plan_signatures,
    require_page_multiple,
)
from handbind.imposition.driver import (
    ArrangementSummary,
    ImposedArtifact,
    deterministic_output_filename,
    impose_pdf,
    rearrange_document,
)
from handbind.imposition.page_store import BLANK_PAGE, InMemoryPageStore, PageStore
from handbind.imposition.pdf_store import PdfPageStore

__all__ = [
    "BLANK_PAGE",
    "ArrangementSummary",
    "ImposedArtifact",
    "InMemoryPageStore",
    "PageStore",
    "PdfPageStore",
    "Placement",
    "PlacementSink",
    "Signature",
    "SignatureParams",
    "arrange_pages",
    "collect_placements",
    "deterministic_output_filename",
    "impose_pdf",
    "impose_signature",
    "output_order",
    "padding_needed",
    "pages_per_signature",
    "partition_signatures",
    "plan_signatures",
    "rearrange_document",
    "require_page_multiple",
]
