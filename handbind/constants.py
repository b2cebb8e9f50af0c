from __future__ import annotations

from typing import Final

PAGES_PER_SHEET: Final[int] = 4

DEFAULT_SIGNATURE_SIZE: Final[int] = 6
DEFAULT_MINIMUM_REMAINDER_SIZE: Final[int] = 4

DEFAULT_ARTIFACT_DIR: Final[str] = "generated"
DEFAULT_ARTIFACT_RETENTION_SECONDS: Final[int] = 24 * 60 * 60
