from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, TypeAlias

from handbind.constants import (
    DEFAULT_MINIMUM_REMAINDER_SIZE,
    DEFAULT_SIGNATURE_SIZE,
    PAGES_PER_SHEET,
)

PlacementSink: TypeAlias = Callable[[int, int], None]


@dataclass(frozen=True)
class SignatureParams:
    signature_size: int = DEFAULT_SIGNATURE_SIZE
    minimum_remainder_size: int = DEFAULT_MINIMUM_REMAINDER_SIZE

    def __post_init__(self) -> None:
        if self.signature_size <= 0:
            raise ValueError("signature_size must be > 0")
        if self.minimum_remainder_size < 0:
            raise ValueError("minimum_remainder_size must be >= 0")

    @property
    def pages_per_signature(self) -> int:
        return pages_per_signature(self.signature_size)


@dataclass(frozen=True)
class Signature:
    index: int
    start: int
    sheets: int

    @property
    def page_count(self) -> int:
        return self.sheets * PAGES_PER_SHEET

    @property
    def end(self) -> int:
        return self.start + self.page_count

    @property
    def first_page(self) -> int:
        return self.start + 1

    @property
    def last_page(self) -> int:
        return self.end


@dataclass(frozen=True)
class Placement:
    source: int
    destination: int


def pages_per_signature(signature_size: int) -> int:
    if signature_size <= 0:
        raise ValueError("signature_size must be > 0")
    return signature_size * PAGES_PER_SHEET


def padding_needed(num_pages: int) -> int:
    if num_pages < 0:
        raise ValueError("num_pages must be >= 0")
    return -num_pages % PAGES_PER_SHEET


def require_page_multiple(num_pages: int) -> None:
    if num_pages < 0:
        raise ValueError("num_pages must be >= 0")
    if num_pages % PAGES_PER_SHEET != 0:
        raise ValueError(
            f"page count must be padded to a multiple of {PAGES_PER_SHEET}, got {num_pages}"
        )


def partition_signatures(num_pages: int, params: SignatureParams) -> list[int]:
    """Return the sheet count of every signature, in page order.

    Full signatures come first. The last entry is the remainder, which is
    folded into the preceding signature when it would be shorter than
    ``params.minimum_remainder_size`` sheets. The last entry is 0 when the
    pages divide evenly into full signatures.
    """
    require_page_multiple(num_pages)

    per_signature = params.pages_per_signature
    full_signatures = num_pages // per_signature
    remainder = num_pages - full_signatures * per_signature

    # Thin trailing signature: make the last full one overlong instead.
    if (
        remainder > 0
        and remainder <= params.minimum_remainder_size * PAGES_PER_SHEET
        and full_signatures >= 1
    ):
        full_signatures -= 1
        remainder += per_signature

    final_sheets = -(-remainder // PAGES_PER_SHEET)
    return [params.signature_size] * full_signatures + [final_sheets]


def plan_signatures(num_pages: int, params: SignatureParams) -> list[Signature]:
    signatures: list[Signature] = []
    start = 0
    for sheets in partition_signatures(num_pages, params):
        if sheets == 0:
            continue
        signatures.append(Signature(index=len(signatures), start=start, sheets=sheets))
        start += sheets * PAGES_PER_SHEET
    return signatures


def impose_signature(start: int, sheets: int, emit: PlacementSink) -> None:
    """Emit the placements for one signature, outermost sheet first.

    Each sheet takes two pages from the low end of the signature and two from
    the high end, emitted as ``emit(source, destination)`` in the order
    outer back, inner front, next inner front, next outer back.
    """
    if start < 0:
        raise ValueError("start must be >= 0")
    if sheets < 0:
        raise ValueError("sheets must be >= 0")

    end = start + sheets * PAGES_PER_SHEET
    for sheet_index in range(sheets):
        offset = sheet_index * 2
        dest = start + sheet_index * PAGES_PER_SHEET
        emit(end - (offset + 1), dest)
        emit(start + offset, dest + 1)
        emit(start + offset + 1, dest + 2)
        emit(end - (offset + 2), dest + 3)


def arrange_pages(num_pages: int, params: SignatureParams, emit: PlacementSink) -> list[Signature]:
    signatures = plan_signatures(num_pages, params)
    for signature in signatures:
        impose_signature(signature.start, signature.sheets, emit)
    return signatures


def collect_placements(num_pages: int, params: SignatureParams) -> list[Placement]:
    placements: list[Placement] = []

    def emit(source: int, destination: int) -> None:
        placements.append(Placement(source=source, destination=destination))

    arrange_pages(num_pages, params, emit)
    return placements


def output_order(num_pages: int, params: SignatureParams) -> list[int]:
    order = [0] * num_pages

    def emit(source: int, destination: int) -> None:
        order[destination] = source

    arrange_pages(num_pages, params, emit)
    return order
