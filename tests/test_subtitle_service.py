"""
Integration tests for subtitle_service.py using a scripted fake page.

The fake page replays canned network responses to registered handlers when
the extract button is clicked, the way the tool's front end would.
"""

import copy
import json
import time
import unittest
from contextlib import contextmanager
from unittest.mock import Mock, patch

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from extraction_config import ExtractionConfig, INPUT_SELECTOR
from subtitle_service import fetch_subtitle, to_text_only, validate_api_response
from error_handler import SubtitleApiError

SRT = "1\n00:00:01,000 --> 00:00:02,000\nHello world"
API_URL = "https://api.feiyudo.com/api/subtitleExtract"


def make_response(url, body):
    response = Mock()
    response.url = url
    response.status = 200
    response.text = Mock(return_value=body if isinstance(body, str) else json.dumps(body))
    return response


class FakePage:

    def __init__(self, responses=(), fail_on=None, error=None):
        self.responses = list(responses)
        self.fail_on = fail_on
        self.error = error
        self.handlers = []
        self.calls = []

    def _step(self, name, *args):
        self.calls.append((name,) + args)
        if name == self.fail_on:
            raise self.error

    def on(self, event, handler):
        self.calls.append(("on", event))
        self.handlers.append(handler)

    def goto(self, url, wait_until=None, timeout=None):
        self._step("goto", url)

    def wait_for_selector(self, selector, timeout=None):
        self._step("wait_for_selector", selector)

    def fill(self, selector, value):
        self._step("fill", selector, value)

    def click(self, selector):
        self._step("click", selector)
        for response in self.responses:
            for handler in self.handlers:
                handler(response)

    def wait_for_timeout(self, ms):
        time.sleep(ms / 1000.0)


class FakeSession:
    """Stands in for automation_driver.browser_session."""

    def __init__(self, page):
        self.page = page
        self.opened = 0
        self.closed = 0

    @contextmanager
    def __call__(self, headless=True):
        self.opened += 1
        try:
            yield self.page
        finally:
            self.closed += 1


class TestFetchSubtitle(unittest.TestCase):

    def setUp(self):
        self.config = ExtractionConfig(response_wait_timeout=1, poll_interval_ms=20)
        patcher = patch('subtitle_service.evt')
        patcher.start()
        self.addCleanup(patcher.stop)

    def run_fetch(self, page, video_ref="BV1xx411c7mD", text_only=True, config=None):
        session = FakeSession(page)
        result = fetch_subtitle(video_ref, text_only=text_only,
                                config=config or self.config, session_factory=session)
        return result, session

    def test_text_only_success(self):
        body = {"code": 200, "data": {"subtitleItemVoList": [{"content": SRT}]}}
        page = FakePage([make_response(API_URL, body)])

        result, session = self.run_fetch(page)

        self.assertTrue(result.success)
        item = result.data["data"]["subtitleItemVoList"][0]
        self.assertEqual(item["content"], "Hello world")
        self.assertEqual(item["content_with_timestamp"], SRT)
        self.assertEqual(session.closed, 1)

    def test_timestamped_payload_untouched(self):
        body = {"code": 200, "data": {"subtitleItemVoList": [{"content": SRT}]}}
        page = FakePage([make_response(API_URL, body)])

        result, _ = self.run_fetch(page, text_only=False)

        self.assertTrue(result.success)
        self.assertEqual(result.data, body)

    def test_api_error_message(self):
        page = FakePage([make_response(API_URL, {"code": 500, "message": "rate limited"})])

        result, session = self.run_fetch(page)

        self.assertFalse(result.success)
        self.assertEqual(result.error, "rate limited")
        self.assertIsNone(result.data)
        self.assertEqual(session.closed, 1)

    def test_api_error_without_message(self):
        page = FakePage([make_response(API_URL, {"code": 403})])

        result, _ = self.run_fetch(page)

        self.assertEqual(result.error, "unknown error")

    def test_no_response_times_out(self):
        page = FakePage([make_response("https://www.feiyudo.com/other", {"code": 200})])

        started = time.monotonic()
        result, session = self.run_fetch(page)
        elapsed = time.monotonic() - started

        self.assertFalse(result.success)
        self.assertEqual(result.error, "wait timed out, no API response received")
        self.assertGreaterEqual(elapsed, 1.0)
        self.assertEqual(session.closed, 1)

    def test_malformed_body_looks_like_timeout(self):
        page = FakePage([make_response(API_URL, "<html>502 Bad Gateway</html>")])

        result, _ = self.run_fetch(page)

        self.assertEqual(result.error, "wait timed out, no API response received")

    def test_null_body_is_validated_not_timed_out(self):
        page = FakePage([make_response(API_URL, "null"), make_response(API_URL, {"code": 200, "data": {}})])

        started = time.monotonic()
        result, session = self.run_fetch(page)
        elapsed = time.monotonic() - started

        self.assertFalse(result.success)
        self.assertEqual(result.error, "unknown error")
        self.assertLess(elapsed, 1.0)
        self.assertEqual(session.closed, 1)

    def test_string_code_accepted(self):
        page = FakePage([make_response(API_URL, {"code": "200", "data": {"subtitleItemVoList": [{"content": SRT}]}})])

        result, _ = self.run_fetch(page)

        self.assertTrue(result.success)
        self.assertEqual(result.data["data"]["subtitleItemVoList"][0]["content"], "Hello world")

    def test_first_matching_response_wins(self):
        first = {"code": 200, "data": {"subtitleItemVoList": [], "n": 1}}
        second = {"code": 500, "message": "late"}
        page = FakePage([make_response(API_URL, first), make_response(API_URL, second)])

        result, _ = self.run_fetch(page, text_only=False)

        self.assertTrue(result.success)
        self.assertEqual(result.data["data"]["n"], 1)

    def test_full_url_submitted_verbatim(self):
        url = "https://www.bilibili.com/video/BV1xx411c7mD?p=3"
        page = FakePage([make_response(API_URL, {"code": 200, "data": {}})])

        self.run_fetch(page, video_ref=url)

        self.assertIn(("fill", INPUT_SELECTOR, url), page.calls)

    def test_bv_id_expanded_before_submit(self):
        page = FakePage([make_response(API_URL, {"code": 200, "data": {}})])

        self.run_fetch(page, video_ref=" BV1xx411c7mD ")

        self.assertIn(("fill", INPUT_SELECTOR, "https://www.bilibili.com/video/BV1xx411c7mD"), page.calls)

    def test_empty_reference_still_submitted(self):
        page = FakePage([make_response(API_URL, {"code": 400, "message": "invalid url"})])

        result, _ = self.run_fetch(page, video_ref=None)

        self.assertIn(("fill", INPUT_SELECTOR, ""), page.calls)
        self.assertEqual(result.error, "invalid url")

    def test_interceptor_registered_before_navigation(self):
        page = FakePage([make_response(API_URL, {"code": 200, "data": {}})])

        self.run_fetch(page)

        names = [c[0] for c in page.calls]
        self.assertLess(names.index("on"), names.index("goto"))

    def test_ui_timeout_maps_to_operation_timeout(self):
        page = FakePage(fail_on="wait_for_selector",
                        error=PlaywrightTimeoutError("Timeout 10000ms exceeded."))

        result, session = self.run_fetch(page)

        self.assertFalse(result.success)
        self.assertEqual(result.error, "operation timed out")
        self.assertEqual(session.closed, 1)

    def test_navigation_error_text_surfaces(self):
        page = FakePage(fail_on="goto", error=PlaywrightError("net::ERR_NAME_NOT_RESOLVED"))

        result, session = self.run_fetch(page)

        self.assertFalse(result.success)
        self.assertIn("ERR_NAME_NOT_RESOLVED", result.error)
        self.assertEqual(session.closed, 1)

    def test_session_launch_failure(self):
        @contextmanager
        def broken_session(headless=True):
            raise RuntimeError("browser launch failed")
            yield

        result = fetch_subtitle("BV1xx411c7mD", config=self.config, session_factory=broken_session)

        self.assertFalse(result.success)
        self.assertEqual(result.error, "browser launch failed")


class TestToTextOnly(unittest.TestCase):

    def test_rewrites_only_items_with_content(self):
        body = {"code": 200, "data": {"subtitleItemVoList": [
            {"content": SRT, "lan": "zh"},
            {"lan": "en"},
        ]}}
        original = copy.deepcopy(body)

        result = to_text_only(body)

        items = result["data"]["subtitleItemVoList"]
        self.assertEqual(items[0], {"content": "Hello world", "content_with_timestamp": SRT, "lan": "zh"})
        self.assertEqual(items[1], {"lan": "en"})
        self.assertEqual(body, original)

    def test_missing_list_is_noop(self):
        self.assertEqual(to_text_only({"code": 200}), {"code": 200})
        self.assertEqual(to_text_only({"code": 200, "data": None}), {"code": 200, "data": None})
        self.assertEqual(
            to_text_only({"code": 200, "data": {"subtitleItemVoList": None}}),
            {"code": 200, "data": {"subtitleItemVoList": None}}
        )

    def test_null_content(self):
        result = to_text_only({"data": {"subtitleItemVoList": [{"content": None}]}})
        self.assertEqual(result["data"]["subtitleItemVoList"][0],
                         {"content": "", "content_with_timestamp": ""})


class TestValidateApiResponse(unittest.TestCase):

    def test_success_passthrough(self):
        body = {"code": 200}
        self.assertIs(validate_api_response(body), body)

    def test_non_200(self):
        with self.assertRaises(SubtitleApiError) as ctx:
            validate_api_response({"code": 429, "message": "slow down"})
        self.assertEqual(ctx.exception.code, 429)
        self.assertEqual(str(ctx.exception), "slow down")

    def test_missing_code(self):
        with self.assertRaises(SubtitleApiError):
            validate_api_response({"data": {}})

    def test_non_object_body(self):
        with self.assertRaises(SubtitleApiError):
            validate_api_response(["not", "an", "object"])

    def test_null_body(self):
        with self.assertRaises(SubtitleApiError) as ctx:
            validate_api_response(None)
        self.assertEqual(str(ctx.exception), "unknown error")

    def test_numeric_string_code(self):
        body = {"code": " 200 ", "data": {}}
        self.assertIs(validate_api_response(body), body)
        float_body = {"code": 200.0}
        self.assertIs(validate_api_response(float_body), float_body)

    def test_non_numeric_code_rejected(self):
        with self.assertRaises(SubtitleApiError) as ctx:
            validate_api_response({"code": "ok", "message": "nope"})
        self.assertIsNone(ctx.exception.code)
        self.assertEqual(str(ctx.exception), "nope")

        with self.assertRaises(SubtitleApiError) as ctx:
            validate_api_response({"code": float("inf")})
        self.assertIsNone(ctx.exception.code)

    def test_message_passed_through_as_text(self):
        with self.assertRaises(SubtitleApiError) as ctx:
            validate_api_response({"code": 500, "message": ""})
        self.assertEqual(ctx.exception.api_message, "")

        with self.assertRaises(SubtitleApiError) as ctx:
            validate_api_response({"code": 500, "message": 42})
        self.assertEqual(ctx.exception.api_message, "42")

    def test_null_message_is_unknown(self):
        with self.assertRaises(SubtitleApiError) as ctx:
            validate_api_response({"code": 500, "message": None})
        self.assertIsNone(ctx.exception.api_message)
        self.assertEqual(str(ctx.exception), "unknown error")


if __name__ == '__main__':
    unittest.main()
