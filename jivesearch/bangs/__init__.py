# SPDX-License-Identifier: AGPL-3.0-or-later
"""Bangs are shortcuts to search other websites: the query ``!a beach
chair`` redirects to the search of Amazon.

A bang is triggered by a token that starts (or ends) with a ``!``, the rest of
the query is substituted into a URL template chosen by the region of the
request:

.. code:: python

   from jivesearch import bangs

   registry = bangs.new(suggester=bangs.MemorySuggester())
   registry.detect("!g hello world", region="", language="en")
   # ('https://encrypted.google.com/search?hl=en&q=hello world', True)

   registry.setup_suggester()
   registry.suggest("am", 10)
   # Results(suggestions=[Suggestion(trigger='amazon', name='Amazon')])

----

.. autoclass:: Bangs
   :members:

.. autoclass:: Bang
   :members:

.. autoclass:: Results
   :members:

.. autoclass:: Suggestion
   :members:
"""

from __future__ import annotations

__all__ = [
    "Bang",
    "Bangs",
    "Results",
    "Suggestion",
    "Suggester",
    "MemorySuggester",
    "ValkeySuggester",
    "get_suggester",
    "DEFAULT_BANGS",
    "wikipedia_canonical",
    "new",
]

import typing as t
from collections.abc import Callable

from ._core import Bangs
from .default import DEFAULT_BANGS, wikipedia_canonical
from .models import Bang, Results, Suggestion
from .suggester import MemorySuggester, Suggester, ValkeySuggester, get_suggester

if t.TYPE_CHECKING:
    from collections.abc import Iterable


def new(
    bangs: Iterable[Bang] | None = None,
    suggester: Suggester | None = None,
    encode: Callable[[str], str] | None = None,
) -> Bangs:
    """Creates a registry with the :py:obj:`DEFAULT_BANGS` (or ``bangs``)."""
    return Bangs(DEFAULT_BANGS if bangs is None else bangs, suggester=suggester, encode=encode)
