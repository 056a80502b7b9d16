# SPDX-License-Identifier: AGPL-3.0-or-later
# pylint: disable=missing-module-docstring,disable=missing-class-docstring,invalid-name

from unittest.mock import MagicMock, patch

import httpx
from parameterized import parameterized

from jivesearch import network
from jivesearch.exceptions import JiveFetcherException, JiveTimeoutException
from tests import JiveTestCase


def response(status_code: int) -> httpx.Response:
    return httpx.Response(status_code, request=httpx.Request("GET", "https://example.org/"))


class TestNetworkContext(JiveTestCase):

    def setUp(self):
        super().setUp()
        self.client = MagicMock()
        self.client.request.return_value = response(200)
        patcher = patch("jivesearch.network.get_client", return_value=self.client)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_no_context(self):
        self.assertIsNone(network.get_context())
        with self.assertRaises(network.NetworkContextNotFound):
            network.get("https://example.org/")

    def test_context_manager(self):
        with network.networkcontext_manager(timeout=2.0) as ctx:
            self.assertIs(network.get_context(), ctx)
            with network.networkcontext_manager(timeout=1.0) as inner:
                self.assertIs(network.get_context(), inner)
            self.assertIs(network.get_context(), ctx)
        self.assertIsNone(network.get_context())

    def test_request_timeout(self):
        with network.networkcontext_manager(timeout=10.0):
            network.get("https://example.org/", params={"a": "b"})
        kwargs = self.client.request.call_args.kwargs
        # outgoing.request_timeout of the default settings
        self.assertEqual(kwargs["timeout"], 3.0)
        self.assertEqual(kwargs["params"], {"a": "b"})
        self.assertTrue(kwargs["follow_redirects"])

    def test_deadline_lowers_timeout(self):
        with network.networkcontext_manager(timeout=0.5):
            network.get("https://example.org/", timeout=3.0)
        self.assertLessEqual(self.client.request.call_args.kwargs["timeout"], 0.5)

    def test_deadline_expired(self):
        with network.networkcontext_manager(timeout=1.0, start_time=0.0) as ctx:
            self.assertLess(ctx.get_remaining_time(), 0)
            with self.assertRaises(JiveTimeoutException):
                network.get("https://example.org/")
        self.client.request.assert_not_called()

    @parameterized.expand(
        [
            (httpx.ReadTimeout("read timeout"), JiveTimeoutException),
            (httpx.ConnectTimeout("connect timeout"), JiveTimeoutException),
            (httpx.ConnectError("refused"), JiveFetcherException),
            (httpx.TooManyRedirects("redirects"), JiveFetcherException),
        ]
    )
    def test_httpx_errors(self, exc, expected):
        self.client.request.side_effect = exc
        with network.networkcontext_manager(timeout=5.0):
            with self.assertRaises(expected):
                network.get("https://example.org/")

    def test_raise_for_httperror(self):
        self.client.request.return_value = response(503)
        with network.networkcontext_manager(timeout=5.0):
            resp = network.get("https://example.org/")
            self.assertEqual(resp.status_code, 503)
            with self.assertRaises(JiveFetcherException):
                network.get("https://example.org/", raise_for_httperror=True)

    def test_http_runtime(self):
        with network.networkcontext_manager(timeout=5.0) as ctx:
            self.assertEqual(ctx.get_http_runtime(), 0.0)
            network.get("https://example.org/")
            self.assertGreaterEqual(ctx.get_http_runtime(), 0.0)
            self.assertIn("timeout=5.0", repr(ctx))


class TestRaiseForHttpError(JiveTestCase):

    def test_ok(self):
        network.raise_for_httperror(response(200))
        network.raise_for_httperror(response(302))

    @parameterized.expand([(400,), (404,), (429,), (500,)])
    def test_error(self, status_code):
        with self.assertRaises(JiveFetcherException):
            network.raise_for_httperror(response(status_code))
