from __future__ import annotations

from pathlib import Path

import pytest

from handbind.cli import build_parser, format_signature, main
from handbind.imposition.core import Signature

pytestmark = pytest.mark.unit


def test_parser_defaults_match_signature_params() -> None:
    args = build_parser().parse_args(["in.pdf", "out.pdf"])

    assert args.signature_size == 6
    assert args.minimum_remainder_size == 4
    assert args.end_pages is False
    assert args.dry_run is None


def test_parser_accepts_short_flags() -> None:
    args = build_parser().parse_args(["in.pdf", "out.pdf", "-s", "3", "-m", "0", "--end-pages"])

    assert args.signature_size == 3
    assert args.minimum_remainder_size == 0
    assert args.end_pages is True


@pytest.mark.parametrize(
    "argv",
    [
        ["in.pdf", "out.pdf", "--signature-size", "0"],
        ["in.pdf", "out.pdf", "--signature-size", "six"],
        ["in.pdf", "out.pdf", "--minimum-remainder-size", "-1"],
        ["in.pdf"],
        [],
    ],
)
def test_main_rejects_invalid_arguments(argv: list[str]) -> None:
    with pytest.raises(SystemExit) as exc_info:
        main(argv)

    assert exc_info.value.code == 2


def test_format_signature() -> None:
    assert format_signature(Signature(index=1, start=24, sheets=10)) == "signature 2: pages 25-64 (10 sheets)"
    assert format_signature(Signature(index=0, start=0, sheets=1)) == "signature 1: pages 1-4 (1 sheet)"


def test_dry_run_prints_plan_and_order(capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main(["--dry-run", "6"])

    captured = capsys.readouterr()
    assert exit_code == 0
    assert captured.out.splitlines() == [
        "signature 1: pages 1-8 (2 sheets)",
        "order: blank,1,2,blank,6,3,4,5",
    ]


def test_dry_run_with_end_pages(capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main(["--dry-run", "6", "--end-pages"])

    captured = capsys.readouterr()
    assert exit_code == 0
    assert captured.out.splitlines()[-1] == "order: blank,blank,1,6,5,2,3,4"


def test_missing_input_reports_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main([str(tmp_path / "missing.pdf"), str(tmp_path / "out.pdf")])

    captured = capsys.readouterr()
    assert exit_code == 2
    assert captured.err.startswith("error: ")
    assert not (tmp_path / "out.pdf").exists()
