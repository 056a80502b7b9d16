# SPDX-License-Identifier: AGPL-3.0-or-later
# pylint: disable=missing-module-docstring,disable=missing-class-docstring,invalid-name

import json

from parameterized import parameterized

import jivesearch.webapp
from jivesearch import answerers, bangs
from jivesearch.router import Router
from tests import JiveTestCase
from tests.unit.test_answerers import FixtureFetcher


class ViewsTestCase(JiveTestCase):

    def setUp(self):
        super().setUp()

        # no external HTTP request: the quotes are taken from the fixtures
        registry = bangs.new(suggester=bangs.MemorySuggester())
        registry.setup_suggester()
        router = Router(registry, answerers.new(fetcher=FixtureFetcher()), query_var="q", timeout=2.0)
        self.setattr4test(jivesearch.webapp, 'ROUTER', router)

    def test_healthz(self):
        result = self.client.get('/healthz')
        self.assertEqual(result.status_code, 200)
        self.assertEqual(result.data, b'OK')

    def test_search_bang(self):
        result = self.client.get('/search', query_string={'q': '!g hello'})
        self.assertEqual(result.status_code, 302)
        self.assertEqual(result.location, 'https://encrypted.google.com/search?hl=en&q=hello')

    def test_search_bang_region_language(self):
        result = self.client.get('/search', query_string={'q': '!g bonjour', 'region': 'FR', 'l': 'fr'})
        self.assertEqual(result.status_code, 302)
        self.assertEqual(result.location, 'https://www.google.fr/search?hl=fr&q=bonjour')

    def test_search_accept_language(self):
        result = self.client.get('/search', query_string={'q': '!g hallo'}, headers={'Accept-Language': 'de-DE'})
        self.assertEqual(result.location, 'https://encrypted.google.com/search?hl=de-DE&q=hallo')

    def test_search_post(self):
        result = self.client.post('/search', data={'q': '!b hello'})
        self.assertEqual(result.status_code, 302)
        self.assertEqual(result.location, 'https://www.bing.com/search?q=hello')

    def test_search_fall_through(self):
        result = self.client.get('/search', query_string={'q': 'how to bake bread'})
        self.assertEqual(result.status_code, 200)
        self.assertEqual(result.mimetype, 'application/json')
        self.assertEqual(json.loads(result.data), {'kind': 'search', 'query': 'how to bake bread', 'answer': None})

    def test_search_user_agent(self):
        result = self.client.get('/search', query_string={'q': 'what is my user agent'}, headers={'User-Agent': 'ua/1'})
        data = json.loads(result.data)
        self.assertEqual(data['kind'], 'answer')
        self.assertEqual(data['answer']['type'], 'user agent')
        self.assertEqual(data['answer']['solution'], 'ua/1')
        self.assertIsNone(data['answer']['err'])
        self.assertEqual(result.headers['Cache-Control'], 'no-store')

    def test_search_stock(self):
        result = self.client.get('/search', query_string={'q': 'BRK.A quote'})
        data = json.loads(result.data)
        self.assertEqual(data['kind'], 'answer')
        answer = data['answer']
        self.assertTrue(answer['cache'])
        self.assertEqual(answer['remainder'], 'BRK.A')
        self.assertEqual(answer['solution']['ticker'], 'BRK.A')
        self.assertEqual(answer['solution']['exchange'], 'NYSE')
        self.assertEqual(answer['solution']['last']['price'], 171.42)
        self.assertEqual([e['date'][:10] for e in answer['solution']['history']], ['2013-03-26', '2013-03-27'])
        self.assertEqual(result.headers['Cache-Control'], 'public, max-age=300')

    def test_autocomplete_bangs(self):
        result = self.client.get('/autocomplete/bangs', query_string={'q': 'am'})
        self.assertEqual(result.status_code, 200)
        self.assertEqual(json.loads(result.data), {'suggestions': [{'trigger': 'amazon', 'name': 'Amazon'}]})

    @parameterized.expand([('!g',), ('G',), ('g',)])
    def test_autocomplete_bangs_size(self, q):
        # bangs.suggest_size is 5 in the test settings
        result = self.client.get('/autocomplete/bangs', query_string={'q': q, 'size': 100})
        suggestions = json.loads(result.data)['suggestions']
        self.assertEqual(len(suggestions), 5)
        self.assertEqual(suggestions[0], {'trigger': 'g', 'name': 'Google'})

    def test_autocomplete_bangs_empty(self):
        result = self.client.get('/autocomplete/bangs', query_string={'q': ''})
        self.assertEqual(json.loads(result.data), {'suggestions': []})

    def test_autocomplete_bangs_invalid_size(self):
        result = self.client.get('/autocomplete/bangs', query_string={'q': 'am', 'size': 'ten'})
        self.assertEqual(result.status_code, 400)

    def test_404(self):
        result = self.client.get('/invalid-page')
        self.assertEqual(result.status_code, 404)
        self.assertEqual(json.loads(result.data), {'error': 'not found'})


class InitTestCase(JiveTestCase):

    def test_init(self):
        self.setattr4test(jivesearch.webapp, 'ROUTER', None)
        jivesearch.webapp.init()
        self.assertIsInstance(jivesearch.webapp.ROUTER, Router)
        self.assertIsInstance(jivesearch.webapp.ROUTER.bangs.suggester, bangs.MemorySuggester)
        self.assertTrue(jivesearch.webapp.ROUTER.bangs.suggester.index_exists())
        self.assertEqual(jivesearch.webapp.ROUTER.timeout, 2.0)

    def test_no_router(self):
        self.setattr4test(jivesearch.webapp, 'ROUTER', None)
        result = self.client.get('/search', query_string={'q': 'hello'})
        self.assertEqual(result.status_code, 503)
