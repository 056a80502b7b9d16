# SPDX-License-Identifier: AGPL-3.0-or-later
"""Instant answer with the stock quote of a ticker symbol::

   AAPL quote
   stock quote brk.a
   $msft

The quote is fetched by a :py:obj:`jivesearch.stock.Fetcher`, the history of
the quote is sorted by date.
"""
# pylint: disable=too-few-public-methods

from __future__ import annotations

import datetime
import re
import typing as t

from typing_extensions import override

from jivesearch import stock
from jivesearch.answerers._core import Answer, Answerer, AnswererTest

if t.TYPE_CHECKING:
    from jivesearch.extended_types import JiveRequest

TRIGGERS = ("quote", "stock", "stock quote")

TICKER = r"[$]?[A-Za-z]{1,5}[.]?[A-Za-z]?"
"""1-5 letters, an optional share class (``BRK.A``) and an optional ``$``."""


def _compile_regex() -> list[re.Pattern[str]]:
    trigger = "|".join(f"{name}[s]?" for name in TRIGGERS)
    return [
        re.compile(rf"^(?P<trigger>{trigger})?\s?(?P<remainder>{TICKER})$", re.IGNORECASE),
        re.compile(rf"^(?P<remainder>{TICKER})\s(?P<trigger>{trigger})?$", re.IGNORECASE),
    ]


def normalize_ticker(value: str) -> str:
    return value.strip().lstrip("$").upper()


class StockQuoteAnswerer(Answerer):
    """The answer of a ticker is a :py:obj:`jivesearch.stock.Quote`, it is
    cacheable."""

    type = "stock quote"
    regex = _compile_regex()

    def __init__(self, fetcher: stock.Fetcher):
        self.fetcher = fetcher

    @override
    def solve(self, answer: Answer, request: JiveRequest) -> None:
        ticker = normalize_ticker(answer.remainder)
        answer.remainder = ticker
        quote = self.fetcher.fetch(ticker)
        answer.solution = quote.sort_historical()

    @override
    def set_cache(self, answer: Answer) -> None:
        answer.cache = True

    @override
    def tests(self) -> list[AnswererTest]:
        last_time = datetime.datetime.fromtimestamp(1522090355062 / 1000, tz=stock.NEW_YORK)
        history = [
            stock.EOD(
                date=datetime.datetime(2013, 3, 26, tzinfo=datetime.timezone.utc),
                open=60.5276,
                close=59.9679,
                high=60.5797,
                low=59.8889,
                volume=73428208,
            ),
            stock.EOD(
                date=datetime.datetime(2013, 3, 27, tzinfo=datetime.timezone.utc),
                open=59.3903,
                close=58.7922,
                high=59.3903,
                low=58.5279,
                volume=82852761,
            ),
        ]

        def quote(ticker: str, name: str, exchange: str) -> stock.Quote:
            return stock.Quote(
                ticker=ticker,
                name=name,
                exchange=exchange,
                last=stock.Last(price=171.42, time=last_time, change=6.48, change_percent=0.03929),
                history=list(history),
                provider=stock.IEX_PROVIDER,
            )

        aapl = Answer(
            type=self.type,
            triggered=True,
            remainder="AAPL",
            solution=quote("AAPL", "Apple Inc.", stock.NASDAQ),
            cache=True,
        )
        brka = Answer(
            type=self.type,
            triggered=True,
            remainder="BRK.A",
            solution=quote("BRK.A", "Berkshire Hathaway", stock.NYSE),
            cache=True,
        )
        return [
            AnswererTest(query="AAPL quote", expected=aapl),
            AnswererTest(query="quote aapl", expected=aapl),
            AnswererTest(query="stock quote $aapl", expected=aapl),
            AnswererTest(query="brk.a", expected=brka),
            AnswererTest(query="BRK.A stocks", expected=brka),
        ]
