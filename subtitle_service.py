"""
Subtitle extraction pipeline.

fetch_subtitle() normalizes the video reference, opens a browser session,
attaches the response interceptor, drives the tool UI, waits for the API
response, validates it and optionally rewrites subtitle items to plain
text. Every failure is folded into a ``SubtitleResult``.
"""

import copy
from typing import Any, Dict, Optional

from automation_driver import SubtitleToolDriver, browser_session
from error_handler import (
    ResponseWaitTimeout,
    SubtitleApiError,
    error_kind,
    error_message_for,
)
from extraction_config import ExtractionConfig, get_extraction_config
from log_events import evt, time_stage
from logging_setup import get_logger, set_extraction_ctx, clear_extraction_ctx
from poll_waiter import wait_for_capture
from response_interceptor import ResponseInterceptor
from srt_converter import parse_srt_to_text
from subtitle_models import SubtitleResult
from url_utils import normalize_video_url

logger = get_logger(__name__)

SUCCESS_CODE = 200


def _as_int(value: Any) -> Optional[int]:
    """Lenient integer read: numbers and numeric strings, else None."""
    if isinstance(value, str):
        value = value.strip()
    elif not isinstance(value, (int, float)):
        return None
    try:
        return int(value)
    except (ValueError, OverflowError):
        return None


def validate_api_response(response: Any) -> Dict[str, Any]:
    """
    Raise ``SubtitleApiError`` unless the body reports code 200.

    ``code`` may arrive as a number or a numeric string. Any non-null
    ``message`` is passed through as text, empty or not.
    """
    if not isinstance(response, dict):
        raise SubtitleApiError(None)

    code = _as_int(response.get("code"))
    if code != SUCCESS_CODE:
        message = response.get("message")
        raise SubtitleApiError(code, None if message is None else str(message))
    return response


def to_text_only(response: Dict[str, Any]) -> Dict[str, Any]:
    """
    Return a copy of ``response`` with every subtitle item's ``content``
    converted to plain text and the original kept in
    ``content_with_timestamp``. Items without ``content`` are copied as-is.
    The input is never modified.
    """
    result = copy.deepcopy(response)

    data = result.get("data")
    if not isinstance(data, dict):
        return result

    items = data.get("subtitleItemVoList")
    if not isinstance(items, list):
        return result

    for item in items:
        if not isinstance(item, dict) or "content" not in item:
            continue
        original = item["content"]
        if original is None:
            original = ""
        elif not isinstance(original, str):
            original = str(original)
        item["content_with_timestamp"] = original
        item["content"] = parse_srt_to_text(original)

    return result


def _subtitle_count(response: Dict[str, Any]) -> int:
    data = response.get("data")
    if not isinstance(data, dict):
        return 0
    items = data.get("subtitleItemVoList")
    return len(items) if isinstance(items, list) else 0


def _extract(video_url: str, config: ExtractionConfig, session_factory) -> Dict[str, Any]:
    interceptor = ResponseInterceptor(config.response_marker)

    with session_factory(headless=config.headless) as page:
        interceptor.attach(page)

        SubtitleToolDriver(page, config).run(video_url)

        with time_stage("await_response", timeout_s=config.response_wait_timeout):
            got_response = wait_for_capture(
                interceptor,
                timeout_s=config.response_wait_timeout,
                poll_interval_ms=config.poll_interval_ms,
                sleep=page.wait_for_timeout,
            )

        if not got_response:
            evt("subtitle_wait_timeout",
                timeout_s=config.response_wait_timeout,
                matched_count=interceptor.matched_count)
            raise ResponseWaitTimeout()

    return interceptor.captured


def fetch_subtitle(video_ref: Optional[str],
                   text_only: bool = True,
                   config: Optional[ExtractionConfig] = None,
                   session_factory=browser_session) -> SubtitleResult:
    """
    Fetch subtitles for a BV id or video URL.

    Args:
        video_ref: BV identifier or full video URL
        text_only: Replace each item's ``content`` with plain text and keep
            the timestamped original in ``content_with_timestamp``
        config: Extraction settings (defaults to the environment config)
        session_factory: Context manager factory yielding a Playwright page

    Returns:
        SubtitleResult with the API response body on success, or the
        error message on failure. Never raises.
    """
    config = config or get_extraction_config()
    video_url = normalize_video_url(video_ref)

    set_extraction_ctx(video_ref=video_ref or "", canonical_url=video_url)
    evt("subtitle_fetch_start", text_only=text_only)

    try:
        response = validate_api_response(_extract(video_url, config, session_factory))

        if text_only:
            response = to_text_only(response)

        evt("subtitle_fetch_success",
            text_only=text_only,
            items=_subtitle_count(response))
        return SubtitleResult.ok(response)

    except Exception as e:
        message = error_message_for(e)
        if isinstance(e, SubtitleApiError):
            evt("subtitle_api_error", code=e.code, detail=message)
        evt("subtitle_fetch_failed",
            error_kind=error_kind(e),
            error_type=type(e).__name__,
            detail=message[:200])
        logger.warning(f"subtitle_fetch_failed: {type(e).__name__}")
        return SubtitleResult.fail(message)

    finally:
        clear_extraction_ctx()
