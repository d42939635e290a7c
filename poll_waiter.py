"""Bounded wait for the intercepted API response."""

import time
from typing import Any, Callable, Optional

DEFAULT_TIMEOUT_S = 30
DEFAULT_POLL_INTERVAL_MS = 500


def _sleep_ms(ms: float) -> None:
    time.sleep(ms / 1000.0)


def wait_for_capture(interceptor,
                     timeout_s: float = DEFAULT_TIMEOUT_S,
                     poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
                     sleep: Optional[Callable[[float], Any]] = None,
                     clock: Callable[[], float] = time.monotonic) -> bool:
    """
    Poll ``interceptor`` until it holds a value or ``timeout_s`` elapses.

    ``sleep`` receives milliseconds. Pass ``page.wait_for_timeout`` when
    driving the sync Playwright API: it keeps the event loop pumping so
    response handlers actually fire while we wait. A plain ``time.sleep``
    would block them.

    Returns True once a value is captured (read it from
    ``interceptor.captured``; it may itself be None), False on timeout.
    Never raises for a missing value.
    """
    if sleep is None:
        sleep = _sleep_ms

    deadline = clock() + timeout_s
    while not interceptor.has_capture:
        remaining_ms = (deadline - clock()) * 1000
        if remaining_ms <= 0:
            return False
        sleep(min(poll_interval_ms, remaining_ms))

    return True
