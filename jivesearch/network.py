# SPDX-License-Identifier: AGPL-3.0-or-later
# pylint: disable=redefined-outer-name
# ^^ because there is the raise_for_httperror function and the raise_for_httperror parameter.
"""HTTP for the fetchers of the instant answers.

All fetchers share one :py:obj:`httpx.Client` (a pool of HTTP connections)
configured by the ``outgoing`` section of the settings.

A request to the frontend has a deadline: the fetchers of an instant answer
must not exceed the time left of the request.  The router sets a
:py:obj:`NetworkContext` for the current thread, the functions
:py:obj:`get` and :py:obj:`request` use the lower timeout of the HTTP request
and the remaining time of the context:

.. code:: python

    from jivesearch import network

    with network.networkcontext_manager(timeout=5.0) as ctx:
        resp = network.get("https://api.iextrading.com/1.0/stock/aapl/quote")
        print("HTTP runtime:", ctx.get_http_runtime())

When the deadline has expired (or httpx runs into a timeout) a
:py:obj:`JiveTimeoutException <jivesearch.exceptions.JiveTimeoutException>`
is raised, any other transport error is raised as a
:py:obj:`JiveFetcherException <jivesearch.exceptions.JiveFetcherException>`.
"""
from __future__ import annotations

import threading
import typing as t
from contextlib import contextmanager
from timeit import default_timer

import httpx

from jivesearch import get_setting, logger
from jivesearch.exceptions import JiveFetcherException, JiveTimeoutException

__all__ = [
    "NetworkContext",
    "NetworkContextNotFound",
    "networkcontext_manager",
    "get_context",
    "raise_for_httperror",
    "request",
    "get",
]

logger = logger.getChild('network')

_THREADLOCAL = threading.local()
"""Thread-local that contains only one field: network_context."""

_NETWORK_CONTEXT_KEY = 'network_context'

DEFAULT_TIMEOUT = 120.0

_CLIENT: httpx.Client | None = None
_CLIENT_LOCK = threading.Lock()


class NetworkContextNotFound(Exception):
    """A NetworkContext is expected to exist for the current thread.

    Use :py:obj:`networkcontext_manager` to set a NetworkContext.
    """


def get_client() -> httpx.Client:
    """Returns the shared HTTP client, it is created on first use."""
    global _CLIENT  # pylint: disable=global-statement

    with _CLIENT_LOCK:
        if _CLIENT is None:
            limits = httpx.Limits(
                max_connections=get_setting('outgoing.pool_connections'),
                max_keepalive_connections=get_setting('outgoing.pool_maxsize'),
                keepalive_expiry=get_setting('outgoing.keepalive_expiry'),
            )
            _CLIENT = httpx.Client(
                limits=limits,
                verify=get_setting('outgoing.verify'),
                max_redirects=get_setting('outgoing.max_redirects'),
                headers={'User-Agent': get_setting('outgoing.useragent')},
            )
            logger.debug("HTTP client created: %r", limits)
        return _CLIENT


def raise_for_httperror(resp: httpx.Response) -> None:
    """Raise a :py:obj:`JiveFetcherException` if the HTTP status code of the
    response is an error (4xx, 5xx)."""
    if resp.is_error:
        raise JiveFetcherException(f"HTTP error {resp.status_code} from {resp.url.host}")


_check_http_status = raise_for_httperror


class NetworkContext:
    """Runtime context of one request to the frontend.

    The timeout is counted from ``start_time`` (default: now), ``None`` means
    :py:obj:`DEFAULT_TIMEOUT`.
    """

    __slots__ = ('_start_time', '_timeout', '_http_time')

    def __init__(self, timeout: float | None = None, start_time: float | None = None):
        self._start_time: float = default_timer() if start_time is None else start_time
        self._timeout: float | None = timeout
        self._http_time: float = 0.0

    @property
    def timeout(self) -> float | None:
        return self._timeout

    def get_remaining_time(self) -> float:
        """Return the remaining time for the context (negative when the
        deadline has expired)."""
        timeout = self._timeout or DEFAULT_TIMEOUT
        return timeout - (default_timer() - self._start_time)

    def get_http_runtime(self) -> float:
        """Return the amount of time spent on HTTP requests"""
        return self._http_time

    def check_deadline(self) -> float:
        """Raise :py:obj:`JiveTimeoutException` if the deadline has expired,
        otherwise return the remaining time."""
        remaining = self.get_remaining_time()
        if remaining <= 0:
            raise JiveTimeoutException("Deadline expired", timeout=self._timeout)
        return remaining

    @contextmanager
    def _record_http_time(self):
        time_before_request = default_timer()
        try:
            yield
        finally:
            self._http_time += default_timer() - time_before_request

    def request(
        self,
        method: str,
        url: str,
        timeout: float | None = None,
        raise_for_httperror: bool = False,
        **kwargs: t.Any,
    ) -> httpx.Response:
        remaining = self.check_deadline()
        req_timeout = min(timeout or get_setting('outgoing.request_timeout'), remaining)

        try:
            with self._record_http_time():
                resp = get_client().request(method, url, timeout=req_timeout, **kwargs)
        except httpx.TimeoutException as e:
            raise JiveTimeoutException(f"Timeout requesting {url}", timeout=req_timeout) from e
        except httpx.HTTPError as e:
            raise JiveFetcherException(f"{e.__class__.__name__}: {e}") from e

        if raise_for_httperror:
            _check_http_status(resp)
        return resp

    def __repr__(self):
        return f"<{self.__class__.__name__} timeout={self._timeout!r} remaining={self.get_remaining_time():.3f}>"


def get_context() -> NetworkContext | None:
    """Returns the NetworkContext of the current thread (or ``None``)."""
    return getattr(_THREADLOCAL, _NETWORK_CONTEXT_KEY, None)


@contextmanager
def networkcontext_manager(timeout: float | None = None, start_time: float | None = None):
    """Context manager to set a :py:obj:`NetworkContext` for the current
    thread.  A context that was already set is restored on exit."""
    previous = get_context()
    network_context = NetworkContext(timeout=timeout, start_time=start_time)
    setattr(_THREADLOCAL, _NETWORK_CONTEXT_KEY, network_context)
    try:
        yield network_context
    finally:
        if previous is None:
            delattr(_THREADLOCAL, _NETWORK_CONTEXT_KEY)
        else:
            setattr(_THREADLOCAL, _NETWORK_CONTEXT_KEY, previous)


def request(method: str, url: str, **kwargs: t.Any) -> httpx.Response:
    """Similar to :py:obj:`httpx.request`, but bound to the deadline of the
    :py:obj:`NetworkContext` of the current thread."""
    network_context = get_context()
    if network_context is None:
        raise NetworkContextNotFound()
    return network_context.request(method, url, **kwargs)


def get(
    url: str,
    params: dict[str, t.Any] | None = None,
    headers: dict[str, str] | None = None,
    timeout: float | None = None,
    allow_redirects: bool = True,
    raise_for_httperror: bool = False,
) -> httpx.Response:
    """Similar to httpx.get, see :py:obj:`request`.

    allow_redirects is by default True (httpx default value is False).
    """
    return request(
        "GET",
        url,
        params=params,
        headers=headers,
        timeout=timeout,
        follow_redirects=allow_redirects,
        raise_for_httperror=raise_for_httperror,
    )
