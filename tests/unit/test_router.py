# SPDX-License-Identifier: AGPL-3.0-or-later
# pylint: disable=missing-module-docstring,disable=missing-class-docstring,invalid-name

from unittest.mock import MagicMock

from jivesearch import answerers, bangs, network
from jivesearch.extended_types import jive_request
from jivesearch.router import Router
from tests import JiveTestCase
from tests.unit.test_answerers import FixtureFetcher


class TestRouter(JiveTestCase):

    def setUp(self):
        super().setUp()
        self.router = Router(bangs.new(), answerers.new(fetcher=FixtureFetcher()), query_var="q", timeout=2.0)

    def route(self, q, region="", language="en", query_var="q", **kwargs):
        with self.app.test_request_context("/search", query_string={query_var: q}, **kwargs):
            return self.router.route(jive_request, region, language)

    def test_bang(self):
        route = self.route("!g hello world")
        self.assertEqual(route.kind, "bang")
        self.assertEqual(route.query, "!g hello world")
        self.assertEqual(route.url, "https://encrypted.google.com/search?hl=en&q=hello world")
        self.assertIsNone(route.answer)

    def test_bang_region(self):
        route = self.route("!a beach chair", region="FR", language="fr")
        self.assertEqual(
            route.url, "https://www.amazon.fr/s/ref=nb_sb_noss?url=search-alias%3Daps&field-keywords=beach chair"
        )

    def test_answer(self):
        route = self.route("AAPL quote")
        self.assertEqual(route.kind, "answer")
        self.assertEqual(route.answer.type, "stock quote")
        self.assertEqual(route.answer.remainder, "AAPL")
        self.assertTrue(route.answer.cache)

    def test_bang_before_answer(self):
        route = self.route("!so quote")
        self.assertEqual(route.kind, "bang")

    def test_search(self):
        route = self.route("how to bake bread")
        self.assertEqual(route.kind, "search")
        self.assertEqual(route.query, "how to bake bread")
        self.assertIsNone(route.answer)

    def test_empty_query(self):
        route = self.route("   ")
        self.assertEqual(route.kind, "search")
        self.assertEqual(route.query, "")

    def test_query_var(self):
        router = Router(bangs.new(), answerers.new(fetcher=FixtureFetcher()), query_var="query")
        with self.app.test_request_context("/search", query_string={"query": "!b hi", "q": "AAPL"}):
            route = router.route(jive_request, "", "en")
        self.assertEqual(route.kind, "bang")
        self.assertEqual(route.url, "https://www.bing.com/search?q=hi")

    def test_network_context(self):
        seen = {}

        def fetch(ticker):
            ctx = network.get_context()
            seen["timeout"] = ctx.timeout
            return FixtureFetcher().fetch(ticker)

        fetcher = MagicMock()
        fetcher.fetch.side_effect = fetch
        router = Router(bangs.new(), answerers.new(fetcher=fetcher), timeout=2.0)
        with self.app.test_request_context("/search", query_string={"q": "quote aapl"}):
            route = router.route(jive_request, "", "en")

        self.assertEqual(route.kind, "answer")
        self.assertEqual(seen["timeout"], 2.0)
        self.assertIsNone(network.get_context())
