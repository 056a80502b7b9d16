# SPDX-License-Identifier: AGPL-3.0-or-later
"""The router decides what to do with the query of a request:

1. a bang redirects to another search engine (:py:obj:`Route.kind` ``bang``)
2. an instant answer is returned (``answer``)
3. the query falls through to the generic search (``search``)

.. code:: python

   from jivesearch import answerers, bangs
   from jivesearch.router import Router

   router = Router(bangs.new(), answerers.new(), query_var="q", timeout=5.0)
   route = router.route(request, region="US", language="en")
   if route.kind == "bang":
       return flask.redirect(route.url, 302)

"""
# pylint: disable=too-few-public-methods

from __future__ import annotations

__all__ = ["Route", "Router"]

import typing as t
from dataclasses import dataclass

import babel

from jivesearch import logger, network
from jivesearch.answerers import Answer, AnswererStorage
from jivesearch.bangs import Bangs

if t.TYPE_CHECKING:
    from jivesearch.extended_types import JiveRequest

log = logger.getChild('router')

RouteKind = t.Literal["bang", "answer", "search"]


@dataclass
class Route:
    kind: RouteKind
    query: str
    url: str = ""
    """Target of the redirect (``bang``)."""

    answer: Answer | None = None
    """The instant answer (``answer``), may carry an error."""


class Router:
    """Dispatches the query of a request to the bangs and the answerers, both
    registries are shared by all requests (read-only)."""

    def __init__(
        self,
        bangs: Bangs,
        answerers: AnswererStorage,
        query_var: str = "q",
        timeout: float | None = None,
    ):
        self.bangs = bangs
        self.answerers = answerers
        self.query_var = query_var
        self.timeout = timeout

    def route(self, request: JiveRequest, region: str | None, language: str | babel.Locale) -> Route:
        query = request.values.get(self.query_var, "").strip()
        if not query:
            return Route(kind="search", query=query)

        url, ok = self.bangs.detect(query, region, language)
        if ok:
            return Route(kind="bang", query=query, url=url)

        start_time = getattr(request, "start_time", None)
        with network.networkcontext_manager(timeout=self.timeout, start_time=start_time) as ctx:
            answer = self.answerers.detect(request, self.query_var, language)
            log.debug("answerers of %r: %.3fs HTTP", query, ctx.get_http_runtime())

        if answer is not None:
            return Route(kind="answer", query=query, url="", answer=answer)
        return Route(kind="search", query=query)
