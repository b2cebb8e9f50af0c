from __future__ import annotations

import logging
from typing import Any


def log_event(logger: logging.Logger, level: int, event_name: str, **event_fields: Any) -> None:
    logger.log(
        level,
        event_name,
        extra={"event_name": event_name, "event_fields": event_fields},
    )
