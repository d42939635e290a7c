"""
Event helper functions for structured JSON logging.

Consistent event emission and stage timing for the extraction pipeline.
"""

import logging
import time
from typing import Optional

logger = logging.getLogger("subtitle_events")


def evt(event: str, **fields) -> None:
    """
    Emit a structured event with consistent field naming.

    Example:
        evt("subtitle_fetch_start", text_only=True)
        evt("stage_result", stage="navigate", outcome="success", dur_ms=1250)
    """
    event_data = {"event": event}
    event_data.update(fields)
    logger.info("", extra=event_data)


class StageTimer:
    """
    Context manager for automatic stage timing with structured logging.

    Emits stage_start on entry and stage_result on exit, with the duration
    in milliseconds and an outcome of "success" or "error". Exceptions are
    never suppressed.

    Example:
        with StageTimer("navigate", url=tool_url):
            page.goto(tool_url)
    """

    def __init__(self, stage: str, **context_fields):
        self.stage = stage
        self.context_fields = context_fields
        self.start_time: Optional[float] = None

    def __enter__(self):
        self.start_time = time.monotonic()
        evt("stage_start", stage=self.stage, **self.context_fields)
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        if self.start_time is None:
            duration_ms = 0
        else:
            duration_ms = int((time.monotonic() - self.start_time) * 1000)

        event_fields = {
            "stage": self.stage,
            "outcome": "success" if exc_type is None else "error",
            "dur_ms": duration_ms,
            **self.context_fields
        }
        if exc_type is not None:
            event_fields["detail"] = f"{exc_type.__name__}: {exc_value}"

        evt("stage_result", **event_fields)
        return False


def time_stage(stage: str, **context_fields) -> StageTimer:
    """Shorthand for ``StageTimer(stage, **context_fields)``."""
    return StageTimer(stage, **context_fields)
