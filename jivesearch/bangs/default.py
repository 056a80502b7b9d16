# SPDX-License-Identifier: AGPL-3.0-or-later
"""The default bangs.

The URL of the ``default`` region is used unless the region of the request
has its own template::

    Region: US, Language: French  !a  --->  Amazon.com
    Region: France, Language: English  !a  --->  Amazon.fr

Some sites don't respect the language passed in or may not support it (e.g.
they support ``pt`` but not ``pt-BR``).
"""

import re

from .models import Bang, DEFAULT_REGION

_WORD_START = re.compile(r"(^|\s)(\S)")


def wikipedia_canonical(q: str) -> str:
    """Returns the canonical version of a Wikipedia title: ``"bob maRLey"`` ->
    ``"Bob_Marley"``.

    The capitalization is the English one, titles of other languages might be
    wrong: https://es.wikipedia.org/wiki/De_la_Tierra_a_la_Luna
    """
    title = _WORD_START.sub(lambda m: m.group(1) + m.group(2).upper(), q.lower())
    return title.replace(" ", "_")


_AMAZON = "https://www.amazon.{tld}/s/ref=nb_sb_noss?url=search-alias%3Daps&field-keywords={{{{{{term}}}}}}"

DEFAULT_BANGS: tuple[Bang, ...] = (
    Bang(
        "Amazon",
        ("a", "amazon"),
        {
            DEFAULT_REGION: _AMAZON.format(tld="com"),
            "ca": _AMAZON.format(tld="ca"),
            "fr": _AMAZON.format(tld="fr"),
            "uk": _AMAZON.format(tld="co.uk"),
        },
    ),
    Bang(
        "Bing",
        ("b", "bing"),
        {DEFAULT_REGION: "https://www.bing.com/search?q={{{term}}}"},
    ),
    Bang(
        "GitHub",
        ("gh", "git", "github"),
        {
            DEFAULT_REGION: (
                "https://github.com/search?q={{{term}}}&type=Everything&repo=&langOverride=&start_value=1"
            ),
        },
    ),
    Bang(
        "Google",
        ("g", "google"),
        {
            DEFAULT_REGION: "https://encrypted.google.com/search?hl={{{lang}}}&q={{{term}}}",
            "ca": "https://www.google.ca/search?q={{{term}}}",
            "fr": "https://www.google.fr/search?hl={{{lang}}}&q={{{term}}}",
            "ru": "https://www.google.ru/search?hl={{{lang}}}&q={{{term}}}",
        },
    ),
    Bang(
        "Google France",
        ("gfr", "googlefr"),
        {DEFAULT_REGION: "https://www.google.fr/search?hl={{{lang}}}&q={{{term}}}"},
    ),
    Bang(
        "Google Images",
        ("gi",),
        {DEFAULT_REGION: "https://www.google.com/search?q={{{term}}}&source=lnms&tbm=isch"},
    ),
    Bang(
        "Google Russia",
        ("gru", "googleru"),
        {DEFAULT_REGION: "https://www.google.ru/search?hl={{{lang}}}&q={{{term}}}"},
    ),
    Bang(
        "Reddit",
        ("reddit",),
        {DEFAULT_REGION: "https://www.reddit.com/search?q={{{term}}}&restrict_sr=&sort=relevance&t=all"},
    ),
    Bang(
        "Stack Overflow",
        ("so", "stackoverflow"),
        {DEFAULT_REGION: "https://stackoverflow.com/search?q={{{term}}}"},
    ),
    Bang(
        # FIXME: Wikipedia is keyed by language, not by region.  The region
        # keys below only happen to be language codes.
        "Wikipedia",
        ("w", "wikipedia"),
        {
            DEFAULT_REGION: "https://en.wikipedia.org/wiki/{{{term}}}",
            "es": "https://es.wikipedia.org/wiki/{{{term}}}",
            "de": "https://de.wikipedia.org/wiki/{{{term}}}",
            "fr": "https://fr.wikipedia.org/wiki/{{{term}}}",
        },
        (wikipedia_canonical,),
    ),
)
