# SPDX-License-Identifier: AGPL-3.0-or-later
"""Language tags and region codes as they are used by the router.

- The *language* is a BCP-47 tag, templates get its canonical string form
  (``en``, ``pt-BR``, ``zh-Hant-TW``), see :py:obj:`language_tag`.
- The *region* is an ISO-3166-1 alpha-2 code or empty, registries are keyed by
  the lowercase code, see :py:obj:`region_code`.
"""

from __future__ import annotations

import babel
import babel.core

from jivesearch import logger

logger = logger.getChild('locales')


def get_locale(locale_tag: str) -> babel.Locale | None:
    """Returns a :py:obj:`babel.Locale` object parsed from argument
    ``locale_tag`` or ``None`` if babel does not know the tag."""
    try:
        return babel.Locale.parse(locale_tag.replace('_', '-'), sep='-')
    except (babel.core.UnknownLocaleError, ValueError):
        return None


def language_tag(value: str | babel.Locale) -> str:
    """Returns the canonical string form of a BCP-47 language tag.

    .. code:: python

       >>> language_tag('pt-br')
       'pt-BR'
       >>> language_tag(babel.Locale('zh', 'TW', script='Hant'))
       'zh-Hant-TW'

    A tag unknown to babel is returned unchanged (stripped).
    """
    if isinstance(value, babel.Locale):
        locale = value
    else:
        value = value.strip()
        if not value:
            return value
        locale = get_locale(value)
        if locale is None:
            logger.debug("unknown language tag %r", value)
            return value

    return '-'.join(part for part in (locale.language, locale.script, locale.territory) if part)


def region_code(value: str | None) -> str:
    """Returns the lowercase region code (``CA`` -> ``ca``), an empty string
    when there is no region."""
    if not value:
        return ''
    return value.strip().lower()
