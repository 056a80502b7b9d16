# SPDX-License-Identifier: AGPL-3.0-or-later
"""The *answerers* give instant answers related to the search query, they
usually provide answers of type :py:obj:`Answer`.

An answerer is asked with its regexes whether it is responsible for a query,
the first answerer (in order of the :py:obj:`AnswererStorage`) that triggers
answers the query:

.. code:: python

   from jivesearch import answerers

   storage = answerers.new()
   answer = storage.detect(request, query_var="q", language="en")
   if answer is not None and answer.err is None:
       print(answer.type, answer.solution)

Implementations of the :py:obj:`Answerer` ABC:

- :py:obj:`UserAgentAnswerer <jivesearch.answerers.user_agent.UserAgentAnswerer>`
- :py:obj:`StockQuoteAnswerer <jivesearch.answerers.stock.StockQuoteAnswerer>`

----

.. autoclass:: Answer
   :members:

.. autoclass:: Answerer
   :members:

.. autoclass:: AnswererStorage
   :members:
"""

from __future__ import annotations

__all__ = [
    "Answer",
    "AnswererTest",
    "Answerer",
    "AnswererStorage",
    "StockQuoteAnswerer",
    "UserAgentAnswerer",
    "new",
]

from jivesearch import get_setting
from jivesearch.stock import IEX, Fetcher

from ._core import Answer, Answerer, AnswererStorage, AnswererTest
from .stock import StockQuoteAnswerer
from .user_agent import UserAgentAnswerer


def new(fetcher: Fetcher | None = None) -> AnswererStorage:
    """Creates the storage of the answerers, the stock quotes are fetched by
    ``fetcher`` (default: :py:obj:`jivesearch.stock.IEX` configured by the
    ``instant.stock`` settings).

    The user agent answerer is asked first.
    """
    if fetcher is None:
        cfg = get_setting("instant.stock")
        fetcher = IEX(url=cfg.url, token=cfg.token, history_range=cfg.history_range)
    return AnswererStorage([UserAgentAnswerer(), StockQuoteAnswerer(fetcher)])
