# SPDX-License-Identifier: AGPL-3.0-or-later
"""Stock quotes for the instant answer :py:obj:`StockQuoteAnswerer
<jivesearch.answerers.stock.StockQuoteAnswerer>`.

The answerer depends only on the :py:obj:`Fetcher` capability, the
:py:obj:`IEX` fetcher is the implementation used by the frontend.

----

.. autoclass:: Quote
   :members:

.. autoclass:: Fetcher
   :members:

.. autoclass:: IEX
"""
# pylint: disable=too-few-public-methods

from __future__ import annotations

__all__ = ["Quote", "Last", "EOD", "Provider", "Fetcher", "IEX", "IEX_PROVIDER"]

import abc
import datetime
import typing as t
from zoneinfo import ZoneInfo

import msgspec
import msgspec.structs

from jivesearch import logger, network
from jivesearch.exceptions import JiveFetcherException

log = logger.getChild('stock')

# exchanges
AMEX = "AMEX"
NASDAQ = "NASDAQ"
NYSE = "NYSE"
OTC = "OTC"

EXCHANGES = {
    "nasdaq global select": NASDAQ,
    "nasdaq global market": NASDAQ,
    "nasdaq capital market": NASDAQ,
    "nasdaq": NASDAQ,
    "new york stock exchange": NYSE,
    "nyse": NYSE,
    "nyse american": AMEX,
    "nyse arca": AMEX,
    "otc": OTC,
}

NEW_YORK = ZoneInfo("America/New_York")


class Provider(msgspec.Struct, frozen=True):
    """The data provider of a quote."""

    name: str
    url: str


IEX_PROVIDER = Provider(name="IEX", url="https://iextrading.com/developer/")


class Last(msgspec.Struct, kw_only=True):
    """Latest trade."""

    price: float
    time: datetime.datetime
    change: float
    change_percent: float


class EOD(msgspec.Struct, kw_only=True):
    """End of day values of a trading day."""

    date: datetime.datetime
    open: float
    close: float
    high: float
    low: float
    volume: int


class Quote(msgspec.Struct, kw_only=True):
    """A stock quote with its historical (end of day) series."""

    ticker: str
    name: str
    exchange: str
    last: Last
    history: list[EOD] = msgspec.field(default_factory=list)
    provider: Provider = IEX_PROVIDER

    def sort_historical(self) -> Quote:
        """Returns a copy of the quote, the history is sorted ascending by
        date (days with the same date keep their order)."""
        return msgspec.structs.replace(self, history=sorted(self.history, key=lambda eod: eod.date))


class Fetcher(abc.ABC):
    """Capability to fetch a quote for a ticker."""

    @abc.abstractmethod
    def fetch(self, ticker: str) -> Quote:
        """Returns the quote of ``ticker`` (uppercase, e.g. ``BRK.A``) or
        raises a :py:obj:`JiveFetcherException`."""


class IEX(Fetcher):
    """Quotes from the batch API of IEX (``/stock/{ticker}/batch``): one
    request for the ``quote`` and the ``chart`` (history) of a ticker.  The
    request is bound to the deadline of the current
    :py:obj:`NetworkContext <jivesearch.network.NetworkContext>`."""

    def __init__(self, url: str = "https://api.iextrading.com/1.0", token: str = "", history_range: str = "5y"):
        self.url = url.rstrip("/")
        self.token = token
        self.history_range = history_range

    def fetch(self, ticker: str) -> Quote:
        params = {"types": "quote,chart", "range": self.history_range}
        if self.token:
            params["token"] = self.token

        resp = network.get(f"{self.url}/stock/{ticker.lower()}/batch", params=params, raise_for_httperror=True)
        try:
            data = resp.json()
        except ValueError as e:
            raise JiveFetcherException(f"IEX: invalid JSON for {ticker}") from e
        return self.parse(ticker, data)

    def parse(self, ticker: str, data: dict[str, t.Any]) -> Quote:
        try:
            q = data["quote"]
            last = Last(
                price=float(q["latestPrice"]),
                time=datetime.datetime.fromtimestamp(q["latestUpdate"] / 1000, tz=NEW_YORK),
                change=float(q["change"]),
                change_percent=float(q["changePercent"]),
            )
            history = [
                EOD(
                    date=datetime.datetime.strptime(day["date"], "%Y-%m-%d").replace(tzinfo=datetime.timezone.utc),
                    open=float(day["open"]),
                    close=float(day["close"]),
                    high=float(day["high"]),
                    low=float(day["low"]),
                    volume=int(day["volume"]),
                )
                for day in data.get("chart") or []
            ]
            exchange = q.get("primaryExchange") or ""
            return Quote(
                ticker=q.get("symbol") or ticker,
                name=q.get("companyName") or "",
                exchange=EXCHANGES.get(exchange.lower(), exchange),
                last=last,
                history=history,
                provider=IEX_PROVIDER,
            )
        except (KeyError, TypeError, ValueError, OverflowError, OSError) as e:
            log.debug("IEX: unexpected payload for %s: %s", ticker, e)
            raise JiveFetcherException(f"IEX: unexpected payload for {ticker}: {e!r}") from e
