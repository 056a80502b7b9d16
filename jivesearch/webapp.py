#!/usr/bin/env python
# SPDX-License-Identifier: AGPL-3.0-or-later
"""WebApp of the query router: bangs are redirected, instant answers are
returned as JSON.

The development server is started by::

    python -m jivesearch.webapp

"""
# pylint: disable=use-dict-literal
from __future__ import annotations

import sys
import urllib.parse
from timeit import default_timer

import flask
import msgspec
from flask import Flask
from flask.wrappers import Response

import jivesearch
from jivesearch import answerers, bangs, get_setting, logger
from jivesearch.exceptions import JiveSuggesterException
from jivesearch.extended_types import jive_request
from jivesearch.router import Router
from jivesearch.settings_loader import DEFAULT_SETTINGS_FILE

logger = logger.getChild('webapp')

app = Flask(__name__, static_folder=None, template_folder=None)
app.secret_key = get_setting('server.secret_key')

ROUTER: Router | None = None


def json_response(data, status: int = 200, cache: bool = False) -> Response:
    """JSON response encoded by msgspec (structs of the answers and datetimes
    are supported)."""
    resp = Response(msgspec.json.encode(data), status=status, mimetype='application/json')
    resp.headers['Cache-Control'] = 'public, max-age=300' if cache else 'no-store'
    return resp


def get_language() -> str:
    """Language of the request: argument ``l``, the ``Accept-Language``
    header or ``search.default_lang``."""
    lang = jive_request.values.get('l', '').strip()
    if not lang:
        lang = jive_request.accept_languages.best or get_setting('search.default_lang')
    return lang


@app.before_request
def pre_request():
    jive_request.start_time = default_timer()


@app.route('/healthz', methods=['GET'])
def health():
    return Response('OK', mimetype='text/plain')


@app.route('/search', methods=['GET', 'POST'])
def search():
    """Route the query: redirect a bang, answer or fall through to the generic
    search."""
    if ROUTER is None:
        flask.abort(503)

    region = jive_request.values.get('region', '')
    route = ROUTER.route(jive_request, region=region, language=get_language())

    if route.kind == 'bang':
        return flask.redirect(route.url, 302)

    answer = None
    cache = False
    if route.answer is not None:
        answer = route.answer.to_dict()
        cache = route.answer.cache
    return json_response({'kind': route.kind, 'query': route.query, 'answer': answer}, cache=cache)


@app.route('/autocomplete/bangs', methods=['GET'])
def autocomplete_bangs():
    """Autocomplete of the bang triggers (:py:obj:`jivesearch.bangs.Results`)."""
    if ROUTER is None:
        flask.abort(503)

    term = jive_request.args.get('q', '').strip().lstrip('!').lower()
    max_size: int = get_setting('bangs.suggest_size')
    try:
        size = min(int(jive_request.args.get('size', max_size)), max_size)
    except ValueError:
        flask.abort(400)

    if not term or size < 1:
        return json_response(bangs.Results(suggestions=[]))

    try:
        results = ROUTER.bangs.suggest(term, size)
    except JiveSuggesterException as e:
        logger.error("bang suggester: %s", e)
        return json_response({'error': str(e)}, status=503)
    return json_response(results)


@app.errorhandler(404)
def page_not_found(_e):
    return json_response({'error': 'not found'}, status=404)


def get_suggester() -> bangs.Suggester:
    """Suggester backend of the bangs, selected by ``bangs.suggester``.  If
    the backend is not available (e.g. valkey DB can't be reached) the process
    exits."""
    try:
        return bangs.get_suggester(get_setting('bangs.suggester'), index=get_setting('bangs.index'))
    except JiveSuggesterException as e:
        logger.error("bang suggester: %s", e)
        sys.exit(1)


def init():

    if jivesearch.jive_debug or app.debug:
        app.debug = True
        jivesearch.jive_debug = True

    # check secret_key in production

    if not app.debug and get_setting("server.secret_key") == 'ultrasecretkey':
        logger.error("server.secret_key is not changed. Please use something else instead of ultrasecretkey.")
        sys.exit(1)

    global ROUTER  # pylint: disable=global-statement

    encode = urllib.parse.quote_plus if get_setting('bangs.encode_term') else None
    registry = bangs.new(suggester=get_suggester(), encode=encode)
    try:
        registry.setup_suggester(recreate=get_setting('bangs.recreate_index'))
    except JiveSuggesterException:
        logger.exception("can't setup the index of the bang suggester")
        sys.exit(1)

    ROUTER = Router(
        registry,
        answerers.new(),
        query_var=get_setting('search.query_var'),
        timeout=get_setting('search.timeout'),
    )


def run():
    """Runs the application on a local development server.

    Do not use :ref:`run() <flask.Flask.run>` in a production setting.  It is
    not intended to meet security and performance requirements for a production
    server.
    """

    host: str = get_setting("server.bind_address")
    port: int = get_setting("server.port")

    if jivesearch.jive_debug:
        logger.debug("run local development server (DEBUG) on %s:%s", host, port)
        app.run(
            debug=True,
            port=port,
            host=host,
            threaded=True,
            extra_files=[DEFAULT_SETTINGS_FILE],
        )
    else:
        logger.debug("run local development server on %s:%s", host, port)
        app.run(port=port, host=host, threaded=True)


application = app

init()

if __name__ == "__main__":
    run()
