"""
Error taxonomy for subtitle extraction and the mapping from exceptions to
the single error string handed back to callers.
"""

from typing import Optional

from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from logging_setup import get_logger

logger = get_logger(__name__)

OPERATION_TIMEOUT_MESSAGE = "operation timed out"
WAIT_TIMEOUT_MESSAGE = "wait timed out, no API response received"
UNKNOWN_ERROR_MESSAGE = "unknown error"


class SubtitleExtractionError(Exception):
    """Base class for extraction failures."""


class ExtractionTimeoutError(SubtitleExtractionError):
    """A UI step or the response wait exceeded its budget."""

    def __init__(self, message: str = OPERATION_TIMEOUT_MESSAGE):
        super().__init__(message)


class ResponseWaitTimeout(ExtractionTimeoutError):
    """No matching API response was captured in time."""

    def __init__(self, message: str = WAIT_TIMEOUT_MESSAGE):
        super().__init__(message)


class SubtitleApiError(SubtitleExtractionError):
    """The tool's API answered with a non-200 code."""

    def __init__(self, code: Optional[int], message: Optional[str] = None):
        self.code = code
        self.api_message = message
        super().__init__(UNKNOWN_ERROR_MESSAGE if message is None else message)


class TransportError(SubtitleExtractionError):
    """Browser launch, navigation or interception failed unexpectedly."""


def error_message_for(error: BaseException) -> str:
    """
    Map an exception raised during extraction to the user-visible message.

    Playwright timeouts collapse to the fixed operation-timeout message;
    our own errors carry their message; anything else uses its text.
    """
    if isinstance(error, ResponseWaitTimeout):
        return WAIT_TIMEOUT_MESSAGE
    if isinstance(error, (PlaywrightTimeoutError, ExtractionTimeoutError)):
        return OPERATION_TIMEOUT_MESSAGE
    if isinstance(error, SubtitleApiError):
        return UNKNOWN_ERROR_MESSAGE if error.api_message is None else error.api_message

    message = str(error).strip()
    if not message:
        message = type(error).__name__
    return message


def error_kind(error: BaseException) -> str:
    """Short category name used in log events."""
    if isinstance(error, (PlaywrightTimeoutError, ExtractionTimeoutError)):
        return "timeout"
    if isinstance(error, SubtitleApiError):
        return "api"
    return "transport"
