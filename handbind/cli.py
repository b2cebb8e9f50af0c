from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Sequence

from pypdf.errors import PdfReadError

from handbind.constants import DEFAULT_MINIMUM_REMAINDER_SIZE, DEFAULT_SIGNATURE_SIZE
from handbind.events import log_event
from handbind.imposition.core import Signature, SignatureParams
from handbind.imposition.driver import impose_pdf, rearrange_document
from handbind.imposition.page_store import BLANK_PAGE, InMemoryPageStore

_LOGGER = logging.getLogger("handbind.cli")


def _positive_int(value: str) -> int:
    number = _non_negative_int(value)
    if number == 0:
        raise argparse.ArgumentTypeError("must be > 0")
    return number


def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}") from exc
    if number < 0:
        raise argparse.ArgumentTypeError("must be >= 0")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="handbind",
        description="Reorder the pages of a PDF into signatures for hand bookbinding.",
    )
    parser.add_argument("input", nargs="?", help="Path to the input PDF")
    parser.add_argument("output", nargs="?", help="Path to the output PDF")
    parser.add_argument(
        "-s",
        "--signature-size",
        type=_positive_int,
        default=DEFAULT_SIGNATURE_SIZE,
        help="Preferred number of sheets per signature (default: %(default)s)",
    )
    parser.add_argument(
        "-m",
        "--minimum-remainder-size",
        type=_non_negative_int,
        default=DEFAULT_MINIMUM_REMAINDER_SIZE,
        help=(
            "Minimum number of sheets in the last signature. A shorter remainder is "
            "merged into an extra-long final signature (default: %(default)s)"
        ),
    )
    parser.add_argument(
        "--end-pages",
        action="store_true",
        help="Add a blank page at the start and end of the document",
    )
    parser.add_argument(
        "--dry-run",
        type=_non_negative_int,
        metavar="PAGES",
        help="Print the plan for a document of PAGES pages without reading or writing files",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug logging")
    return parser


def format_signature(signature: Signature) -> str:
    sheet_label = "sheet" if signature.sheets == 1 else "sheets"
    return (
        f"signature {signature.index + 1}: pages {signature.first_page}-{signature.last_page} "
        f"({signature.sheets} {sheet_label})"
    )


def _format_page(content: Any) -> str:
    if content == BLANK_PAGE:
        return "blank"
    return str(content + 1)


def _dry_run(page_count: int, params: SignatureParams, end_pages: bool) -> None:
    store = InMemoryPageStore.numbered(page_count)
    summary = rearrange_document(store, params, end_pages=end_pages)
    for signature in summary.signatures:
        print(format_signature(signature))
    print("order: " + ",".join(_format_page(page) for page in store.pages))


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.dry_run is None and (args.input is None or args.output is None):
        parser.error("input and output paths are required unless --dry-run is given")

    try:
        params = SignatureParams(
            signature_size=args.signature_size,
            minimum_remainder_size=args.minimum_remainder_size,
        )
        if args.dry_run is not None:
            _dry_run(args.dry_run, params, args.end_pages)
            return 0

        artifact = impose_pdf(args.input, args.output, params, end_pages=args.end_pages)
    except (ValueError, PdfReadError, OSError) as exc:
        log_event(_LOGGER, logging.DEBUG, "cli.failed", error=str(exc))
        print(f"error: {exc}", file=sys.stderr)
        return 2

    for signature in artifact.signatures:
        print(format_signature(signature))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
