# SPDX-License-Identifier: AGPL-3.0-or-later
# pylint: disable=missing-module-docstring

from __future__ import annotations

import typing as t
from collections.abc import Callable, Iterable, Iterator

import babel

from jivesearch import logger
from jivesearch.exceptions import JiveConfigurationException, JiveSuggesterException
from jivesearch.locales import language_tag, region_code

from .models import Bang, Results, substitute

if t.TYPE_CHECKING:
    from .suggester import Suggester

log = logger.getChild('bangs')


class Bangs:
    """The registry of the bangs.

    The registry is built once when the process starts, every bang is
    validated (:py:obj:`Bang.validate`) and the registry is read-only
    afterwards.  The order of the bangs matters: if more than one bang defines
    the same trigger, the first one wins (see :py:obj:`Bangs.collisions`).
    """

    def __init__(
        self,
        bangs: Iterable[Bang],
        suggester: Suggester | None = None,
        encode: Callable[[str], str] | None = None,
    ):
        self._bangs: tuple[Bang, ...] = tuple(bangs)
        self._owner: dict[str, Bang] = {}
        self.suggester = suggester
        self.encode = encode

        for bang in self._bangs:
            bang.validate()
            for trigger in bang.triggers:
                self._owner.setdefault(trigger, bang)

        if not self._bangs:
            raise JiveConfigurationException("bangs", "empty registry")

        for trigger, names in self.collisions().items():
            log.warning("trigger !%s is shadowed: %s wins over %s", trigger, names[0], ", ".join(names[1:]))

    def __iter__(self) -> Iterator[Bang]:
        return iter(self._bangs)

    def __len__(self) -> int:
        return len(self._bangs)

    @property
    def bangs(self) -> tuple[Bang, ...]:
        return self._bangs

    def owner(self, trigger: str) -> Bang | None:
        """Returns the bang (first in registry order) that owns ``trigger``."""
        return self._owner.get(trigger)

    def collisions(self) -> dict[str, list[str]]:
        """Triggers defined by more than one bang, mapped to the names of
        these bangs in registry order.  The first bang shadows the others."""
        defined: dict[str, list[str]] = {}
        for bang in self._bangs:
            for trigger in bang.triggers:
                defined.setdefault(trigger, []).append(bang.name)
        return {trigger: names for trigger, names in defined.items() if len(names) > 1}

    def detect(self, q: str, region: str | None = "", language: str | babel.Locale = "en") -> tuple[str, bool]:
        """Lets us know if we have a bang match.

        The query is split on whitespace, the first token that starts or ends
        with a ``!`` and whose stripped & lowercased value is a trigger fires.
        The remaining tokens (joined by single spaces) are passed through the
        transformations of the bang and substituted into the URL template of
        the region (fallback ``default``).

        Returns the URL and ``True`` or ``("", False)`` if there is no bang.

        .. code:: python

           >>> bangs.detect("!a beach chair", "FR", "fr")
           ('https://www.amazon.fr/s/ref=nb_sb_noss?url=search-alias%3Daps&field-keywords=beach chair', True)

        """
        fields = q.split()

        for i, field in enumerate(fields):
            if field == "!" or not (field.startswith("!") or field.endswith("!")):
                continue

            bang = self.owner(field.strip("!").lower())
            if bang is None:
                continue

            remainder = " ".join(fields[:i] + fields[i + 1 :])
            for fn in bang.transformations:
                remainder = fn(remainder)
            if self.encode is not None:
                remainder = self.encode(remainder)

            url = substitute(bang.template(region_code(region)), remainder, language_tag(language))
            log.debug("!%s (%s) -> %s", bang.triggers[0], bang.name, url)
            return url, True

        return "", False

    def suggest(self, term: str, size: int) -> Results:
        """Autocomplete for bangs, the suggestions are filled with the name of
        the bang that owns the trigger."""
        if self.suggester is None:
            raise JiveSuggesterException("no bang suggester configured")

        res = self.suggester.suggest(term, size)
        for suggestion in res.suggestions:
            bang = self.owner(suggestion.trigger)
            if bang is not None:
                suggestion.name = bang.name
        return res

    def setup_suggester(self, recreate: bool = True) -> None:
        """Load the registry into the index of the suggester.  With
        ``recreate`` an existing index is deleted first, to pick up any
        changes/new bangs."""
        if self.suggester is None:
            raise JiveSuggesterException("no bang suggester configured")

        exists = self.suggester.index_exists()
        if exists and not recreate:
            log.info("bang index exists, skip setup")
            return
        if exists:
            self.suggester.delete_index()
        self.suggester.setup(self._bangs)
        log.info("bang index ready: %i bangs", len(self._bangs))
