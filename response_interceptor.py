"""
First-match capture of the tool's API response.

The handler runs on Playwright's event dispatch while the extraction flow
polls ``captured``; the slot accepts exactly one successful write.
"""

import json
import threading
from typing import Any, Optional

from playwright.sync_api import Error as PlaywrightError

from log_events import evt
from logging_setup import get_logger

logger = get_logger(__name__)


class ResponseInterceptor:
    """
    Watches page responses and keeps the parsed JSON body of the first one
    whose URL contains ``marker``.

    Must be attached before navigation. Bodies that fail to parse are
    ignored and do not occupy the slot.
    """

    def __init__(self, marker: str):
        self.marker = marker
        self._lock = threading.Lock()
        self._captured: Optional[Any] = None
        self._has_capture = False
        self.matched_count = 0

    def attach(self, page) -> 'ResponseInterceptor':
        page.on("response", self.handle_response)
        return self

    @property
    def has_capture(self) -> bool:
        return self._has_capture

    @property
    def captured(self) -> Optional[Any]:
        return self._captured

    def offer(self, value: Any) -> bool:
        """Store ``value`` if nothing is stored yet. Returns True if it won."""
        with self._lock:
            if self._has_capture:
                return False
            self._captured = value
            self._has_capture = True
            return True

    def handle_response(self, response) -> None:
        url = response.url
        if self.marker not in url:
            return

        with self._lock:
            self.matched_count += 1
            if self._has_capture:
                return

        try:
            body = json.loads(response.text())
        except (ValueError, PlaywrightError) as e:
            evt("subtitle_response_ignored",
                url_preview=url[:140],
                error_type=type(e).__name__)
            return

        if self.offer(body):
            evt("subtitle_response_captured",
                url_preview=url[:140],
                status=getattr(response, "status", None))
