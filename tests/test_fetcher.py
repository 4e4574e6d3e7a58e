"""Tests for the Melon fetcher and error page detection."""

import itertools
import unittest
from unittest import mock

import requests
from urllib3.exceptions import ReadTimeoutError

from melon_catalog.document import Document
from melon_catalog.errors import (
    FetchTimeoutError,
    HttpStatusError,
    TransportError,
    UpstreamError,
    message_for_target,
)
from melon_catalog.fetcher import DEFAULT_HEADERS, Fetcher, detect_error_page

from sample_pages import CHART_HTML, error_page


def make_response(status_code=200, text=""):
    response = mock.Mock()
    response.status_code = status_code
    response.headers = {'Content-Type': 'text/html; charset=UTF-8'}
    response.encoding = 'UTF-8'
    response.iter_content.return_value = [text.encode('utf-8')]
    return response


class TestFetcher(unittest.TestCase):
    """Test cases for Fetcher."""

    def setUp(self):
        """Set up test fixtures."""
        self.session = mock.Mock(spec=requests.Session)
        self.session.headers = {}
        self.fetcher = Fetcher(base_url="https://www.melon.com/", timeout_sec=5, session=self.session)

    def test_headers_and_url(self):
        """Test that fixed headers are applied and the URL is built from the base."""
        self.session.get.return_value = make_response(text="<html></html>")
        self.fetcher.fetch_html("/chart/")

        self.session.get.assert_called_once_with("https://www.melon.com/chart/", timeout=5, stream=True)
        self.assertEqual(self.session.headers['Referer'], DEFAULT_HEADERS['Referer'])
        self.assertIn('User-Agent', self.session.headers)
        self.assertIn('Accept-Language', self.session.headers)

    def test_extra_headers(self):
        """Test that extra headers are merged over the defaults."""
        session = mock.Mock(spec=requests.Session)
        session.headers = {}
        Fetcher(session=session, headers={'Accept-Language': 'ko-KR'})
        self.assertEqual(session.headers['Accept-Language'], 'ko-KR')

    def test_timeout(self):
        """Test that requests timeouts become FetchTimeoutError."""
        self.session.get.side_effect = requests.Timeout("read timed out")
        with self.assertRaises(FetchTimeoutError):
            self.fetcher.fetch_document("/chart/")

    def test_connection_error(self):
        """Test that network failures become TransportError."""
        self.session.get.side_effect = requests.ConnectionError("connection refused")
        with self.assertRaises(TransportError) as ctx:
            self.fetcher.fetch_document("/chart/")
        self.assertNotIsInstance(ctx.exception, HttpStatusError)
        self.assertIn("connection refused", ctx.exception.message)

    def test_read_timeout_before_body(self):
        """Test that a wrapped urllib3 read timeout becomes FetchTimeoutError."""
        cause = ReadTimeoutError(None, "https://www.melon.com/chart/", "Read timed out.")
        self.session.get.side_effect = requests.ConnectionError(cause)
        with self.assertRaises(FetchTimeoutError):
            self.fetcher.fetch_html("/chart/")

    def test_read_timeout_while_streaming_body(self):
        """Test that a server stalling after the headers yields FetchTimeoutError."""
        response = make_response()
        cause = ReadTimeoutError(None, "https://www.melon.com/chart/", "Read timed out.")
        response.iter_content.side_effect = requests.ConnectionError(cause)
        self.session.get.return_value = response

        with self.assertRaises(FetchTimeoutError):
            self.fetcher.fetch_html("/chart/")
        response.close.assert_called_once()

    def test_slow_body_exceeds_overall_deadline(self):
        """Test that a body trickling in byte by byte is cut off at the deadline."""
        fetcher = Fetcher(timeout_sec=1, session=self.session)
        response = make_response()
        response.iter_content.return_value = [b"<", b"h", b"t", b"m", b"l", b">", b"x", b"y"]
        self.session.get.return_value = response

        with mock.patch('melon_catalog.fetcher.time.monotonic', side_effect=itertools.count(0.0, 0.6)):
            with self.assertRaises(FetchTimeoutError):
                fetcher.fetch_html("/chart/")
        response.close.assert_called_once()

    def test_body_decoding_without_charset(self):
        """Test that a body without a declared charset is decoded as UTF-8."""
        response = make_response(text="<p>멜론</p>")
        response.headers = {'Content-Type': 'text/html'}
        response.encoding = 'ISO-8859-1'
        self.session.get.return_value = response

        self.assertEqual(self.fetcher.fetch_html("/chart/"), "<p>멜론</p>")

    def test_http_status(self):
        """Test that non-2xx responses become HttpStatusError without parsing."""
        self.session.get.return_value = make_response(status_code=503, text=error_page("album"))
        with self.assertRaises(HttpStatusError) as ctx:
            self.fetcher.fetch_document("/album/detail.htm?albumId=1")
        self.assertEqual(ctx.exception.status_code, 503)
        self.assertEqual(ctx.exception.kind, "transport")

    def test_error_page(self):
        """Test that a recognized error page becomes UpstreamError."""
        self.session.get.return_value = make_response(text=error_page("album"))
        with self.assertRaises(UpstreamError) as ctx:
            self.fetcher.fetch_document("/album/detail.htm?albumId=1")
        self.assertTrue(ctx.exception.message.startswith("Album not found:"))
        self.assertEqual(ctx.exception.target_id, "album")
        self.assertTrue(ctx.exception.is_client_error)

    def test_success(self):
        """Test that a normal page is returned as a Document."""
        self.session.get.return_value = make_response(text=CHART_HTML)
        document = self.fetcher.fetch_document("/chart/")
        self.assertIsInstance(document, Document)
        self.assertEqual(len(document.find_all('tbody > tr')), 3)

    def test_close(self):
        """Test that closing the fetcher closes the session."""
        with self.fetcher:
            pass
        self.session.close.assert_called_once()


class TestErrorPageDetection(unittest.TestCase):
    """Test cases for error page classification."""

    def test_known_targets(self):
        """Test table lookups for known target ids."""
        error = detect_error_page(Document.from_html(error_page("private")))
        self.assertEqual(error.message, "Fan-only content: This content is only available to fans")
        error = detect_error_page(Document.from_html(error_page("tsSong")))
        self.assertTrue(error.message.startswith("Temporarily unavailable"))

    def test_unknown_target(self):
        """Test that unknown target ids map to the generic message."""
        error = detect_error_page(Document.from_html(error_page("mystery")))
        self.assertTrue(error.message.startswith("Invalid request"))
        self.assertEqual(message_for_target("mystery"), error.message)

    def test_regular_page(self):
        """Test that content pages are not classified as errors."""
        self.assertIsNone(detect_error_page(Document.from_html(CHART_HTML)))
        self.assertIsNone(detect_error_page(Document.from_html('<div id="conts"></div>')))


if __name__ == '__main__':
    unittest.main()
