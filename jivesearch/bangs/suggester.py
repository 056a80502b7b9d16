# SPDX-License-Identifier: AGPL-3.0-or-later
"""Backends of the bang autocomplete.

A suggester indexes the triggers of the bang registry and returns the
triggers that start with a given prefix.  The registry fills in the names of
the bangs (:py:obj:`Bangs.suggest <jivesearch.bangs.Bangs.suggest>`), a
suggester only knows the triggers.

- :py:obj:`MemorySuggester`: trie in the memory of the process
- :py:obj:`ValkeySuggester`: sorted set in a valkey DB, shared by all
  processes of the frontend

----

.. autoclass:: Suggester
   :members:

.. autoclass:: MemorySuggester

.. autoclass:: ValkeySuggester
"""

from __future__ import annotations

__all__ = ["Suggester", "MemorySuggester", "ValkeySuggester", "connect_valkey", "get_suggester"]

import abc
import threading
import typing as t
from collections.abc import Iterable

import valkey

from jivesearch import get_setting, logger
from jivesearch.exceptions import JiveSuggesterException

from .models import Bang, Results, Suggestion

log = logger.getChild('bangs.suggester')

LEAF_KEY = chr(16)


class Suggester(abc.ABC):
    """Abstract base class of the bang suggesters."""

    @abc.abstractmethod
    def index_exists(self) -> bool:
        """``True`` if the index has been set up."""

    @abc.abstractmethod
    def delete_index(self) -> None:
        """Drop the index (no error if there is no index)."""

    @abc.abstractmethod
    def setup(self, bangs: Iterable[Bang]) -> None:
        """Load the triggers of ``bangs`` into the index."""

    @abc.abstractmethod
    def suggest(self, term: str, size: int) -> Results:
        """Returns at most ``size`` suggestions whose trigger has ``term`` as
        a (case-insensitive) prefix."""


class MemorySuggester(Suggester):
    """Suggester with a trie of the triggers.  Each node is a dict, the
    :py:obj:`LEAF_KEY` marks the end of a trigger::

        {'a': {LEAF_KEY: 'a', 'm': {'a': {'z': {'o': {'n': {LEAF_KEY: 'amazon'}}}}}}}

    The suggestions are in lexicographic order of the triggers.
    """

    def __init__(self):
        self._trie: dict[str, t.Any] | None = None
        self._lock = threading.Lock()

    def index_exists(self) -> bool:
        return self._trie is not None

    def delete_index(self) -> None:
        with self._lock:
            self._trie = None

    def setup(self, bangs: Iterable[Bang]) -> None:
        trie: dict[str, t.Any] = {}
        for bang in bangs:
            for trigger in bang.triggers:
                node = trie
                for letter in trigger:
                    node = node.setdefault(letter, {})
                node[LEAF_KEY] = trigger
        with self._lock:
            self._trie = trie

    def suggest(self, term: str, size: int) -> Results:
        res = Results()
        node = self._trie
        if node is None:
            raise JiveSuggesterException("bang index does not exist")

        for letter in term.strip().lower():
            node = node.get(letter)
            if node is None:
                return res

        for trigger in self._walk(node):
            if len(res.suggestions) >= size:
                break
            res.suggestions.append(Suggestion(trigger=trigger))
        return res

    def _walk(self, node: dict[str, t.Any]):
        if LEAF_KEY in node:
            yield node[LEAF_KEY]
        for letter in sorted(k for k in node if k != LEAF_KEY):
            yield from self._walk(node[letter])


class ValkeySuggester(Suggester):
    """Suggester with the triggers in a sorted set of a valkey DB (key
    ``index``).  All members have the same score, a prefix lookup is a
    ZRANGEBYLEX_ on the set.

    .. _ZRANGEBYLEX: https://valkey.io/commands/zrangebylex/
    """

    def __init__(self, client: valkey.Valkey, index: str = "jivesearch_bangs"):
        self.client = client
        self.index = index

    def index_exists(self) -> bool:
        try:
            return bool(self.client.exists(self.index))
        except valkey.exceptions.ValkeyError as e:
            raise JiveSuggesterException(f"valkey: {e}") from e

    def delete_index(self) -> None:
        try:
            self.client.delete(self.index)
        except valkey.exceptions.ValkeyError as e:
            raise JiveSuggesterException(f"valkey: {e}") from e

    def setup(self, bangs: Iterable[Bang]) -> None:
        members = {trigger: 0 for bang in bangs for trigger in bang.triggers}
        if not members:
            return
        try:
            self.client.zadd(self.index, members)
        except valkey.exceptions.ValkeyError as e:
            raise JiveSuggesterException(f"valkey: {e}") from e
        log.debug("%i triggers added to valkey key %s", len(members), self.index)

    def suggest(self, term: str, size: int) -> Results:
        term = term.strip().lower()
        try:
            members = self.client.zrangebylex(self.index, f"[{term}", f"[{term}\xff", start=0, num=size)
        except valkey.exceptions.ValkeyError as e:
            raise JiveSuggesterException(f"valkey: {e}") from e

        return Results(
            suggestions=[Suggestion(trigger=m.decode() if isinstance(m, bytes) else m) for m in members]
        )


def connect_valkey(url: str) -> valkey.Valkey:
    """Returns a client of the valkey DB at ``url`` once it answers a PING."""
    try:
        client = valkey.Valkey.from_url(url)
        kwargs = {k: v for k, v in client.get_connection_kwargs().items() if k != 'password'}
        log.info("connecting to valkey %s", ' '.join(f'{k}={v!r}' for k, v in kwargs.items()))
        client.ping()
    except (valkey.exceptions.ValkeyError, ValueError) as e:
        raise JiveSuggesterException(f"can't connect valkey DB: {e}") from e
    return client


def get_suggester(name: str, index: str = "jivesearch_bangs", url: str | bool | None = None) -> Suggester:
    """Returns the suggester backend ``name`` (``memory`` or ``valkey``), the
    ``valkey`` backend connects to ``url`` (default: setting ``valkey.url``)."""
    if name == "memory":
        return MemorySuggester()
    if name == "valkey":
        if url is None:
            url = get_setting('valkey.url')
        if not url:
            raise JiveSuggesterException("bang suggester 'valkey' needs valkey.url")
        return ValkeySuggester(connect_valkey(str(url)), index=index)
    raise JiveSuggesterException(f"unknown bang suggester {name!r}")
