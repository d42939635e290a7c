"""
Headless browser automation against the web subtitle-extraction tool.

Opens a scoped Chromium session, loads the tool page, pastes the video URL
into its input and presses the extract button. The tool then issues the
API call that ``ResponseInterceptor`` picks up.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

from playwright.sync_api import sync_playwright, Page
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from error_handler import TransportError
from extraction_config import (
    ExtractionConfig,
    INPUT_SELECTOR,
    SUBMIT_BUTTON_SELECTOR,
    get_extraction_config,
)
from log_events import evt, time_stage
from logging_setup import get_logger

logger = get_logger(__name__)

BROWSER_ARGS = ["--no-sandbox", "--disable-dev-shm-usage"]


def _close_quietly(resource, name: str) -> None:
    if resource is None:
        return
    try:
        resource.close()
    except Exception as e:
        logger.debug(f"Ignoring error while closing {name}: {e}")


def _transport_error(step: str, error: Exception) -> TransportError:
    message = str(error).strip() or type(error).__name__
    evt("browser_transport_error", step=step, error_type=type(error).__name__)
    return TransportError(message)


@contextmanager
def browser_session(headless: bool = True, playwright_factory=sync_playwright) -> Iterator[Page]:
    """
    Launch Chromium and yield a fresh page.

    Page, context and browser are closed on every exit path, including
    exceptions raised by the caller. Launch failures other than timeouts
    surface as ``TransportError`` with the original message.
    """
    with playwright_factory() as p:
        browser = None
        context = None
        page = None
        try:
            try:
                browser = p.chromium.launch(headless=headless, args=BROWSER_ARGS)
                context = browser.new_context()
                page = context.new_page()
            except PlaywrightTimeoutError:
                raise
            except Exception as e:
                raise _transport_error("launch", e) from e
            evt("browser_session_opened", headless=headless)
            yield page
        finally:
            _close_quietly(page, "page")
            _close_quietly(context, "context")
            _close_quietly(browser, "browser")
            evt("browser_session_closed")


class SubtitleToolDriver:
    """Drives the tool's UI on an already opened page."""

    def __init__(self, page: Page, config: Optional[ExtractionConfig] = None):
        self.page = page
        self.config = config or get_extraction_config()

    def open_tool(self) -> None:
        """Navigate to the tool and wait for its URL input to render."""
        with time_stage("navigate", url=self.config.tool_url):
            try:
                self.page.goto(
                    self.config.tool_url,
                    wait_until="networkidle",
                    timeout=self.config.navigation_timeout_ms,
                )
            except PlaywrightTimeoutError:
                raise
            except PlaywrightError as e:
                raise _transport_error("navigate", e) from e

        with time_stage("wait_input"):
            self.page.wait_for_selector(
                INPUT_SELECTOR,
                timeout=self.config.input_wait_timeout_ms,
            )

    def submit(self, video_url: str) -> None:
        """Paste ``video_url`` into the input and trigger extraction."""
        with time_stage("submit"):
            self.page.fill(INPUT_SELECTOR, video_url)
            self.page.click(SUBMIT_BUTTON_SELECTOR)

    def run(self, video_url: str) -> None:
        self.open_tool()
        self.submit(video_url)
