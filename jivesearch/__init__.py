# SPDX-License-Identifier: AGPL-3.0-or-later
"""Query router of the Jive Search front end.

Importing the package loads the settings (see :py:obj:`init_settings`), all
modules read them by :py:obj:`get_setting`:

.. code:: python

   from jivesearch import get_setting

   get_setting("search.timeout")       # 5.0
   get_setting("bangs.suggest_size")   # msgspec struct section -> 10
"""
# pylint: disable=cyclic-import
from __future__ import annotations

import logging
import os
import sys
import typing as t

import msgspec

LOG_FORMAT_DEBUG: str = '%(levelname)-7s %(name)-30.30s: %(message)s'
LOG_FORMAT_PROD: str = '%(asctime)-15s %(levelname)s:%(name)s: %(message)s'

settings: dict[str, t.Any] = {}
"""The validated settings, sections of the ``SCHEMA`` typed by a
:py:obj:`msgspec.Struct` hold a struct instead of a dict."""

jive_debug: bool = False
logger = logging.getLogger('jivesearch')

_unset = object()


def init_settings():
    """(Re-)load the settings from ``JIVESEARCH_SETTINGS_PATH`` (or the
    defaults) and configure the logging by ``general.debug``.  An invalid
    setting is logged and raises a :py:obj:`ValueError`."""

    # pylint: disable=import-outside-toplevel
    from jivesearch.settings_loader import load_settings
    from jivesearch.settings_defaults import SCHEMA, apply_schema

    global jive_debug  # pylint: disable=global-statement

    cfg, msg = load_settings(load_user_settings=True)
    apply_schema(cfg, SCHEMA, [])
    settings.clear()
    settings.update(cfg)

    jive_debug = settings['general']['debug']
    _configure_logging(jive_debug)
    logger.debug(msg)

    if settings['server']['secret_key'] == 'ultrasecretkey':
        logger.warning("server.secret_key is the default, set JIVESEARCH_SECRET in production")


def get_setting(name: str, default: t.Any = _unset) -> t.Any:
    """Returns the value of the dotted ``name`` (``"bangs.index"``).  Without
    a ``default`` a missing name raises a :py:obj:`KeyError`."""
    value: t.Any = settings
    for key in name.split('.'):
        if isinstance(value, msgspec.Struct):
            value = getattr(value, key, _unset)
        elif isinstance(value, dict):
            value = value.get(key, _unset)
        else:
            value = _unset
        if value is _unset:
            if default is _unset:
                raise KeyError(name)
            return default
    return value


def _configure_logging(debug: bool):
    if not debug:
        logging.basicConfig(level=logging.WARNING, format=LOG_FORMAT_PROD)
        logging.getLogger('werkzeug').setLevel(logging.WARNING)
        return

    level = os.environ.get('JIVESEARCH_DEBUG_LOG_LEVEL', 'DEBUG')
    try:
        import coloredlogs  # pylint: disable=import-outside-toplevel
    except ImportError:
        coloredlogs = None

    if coloredlogs and sys.stdout.isatty() and os.getenv('TERM') not in ('dumb', 'unknown'):
        coloredlogs.install(level=level, fmt=LOG_FORMAT_DEBUG)  # type: ignore
    else:
        logging.basicConfig(level=getattr(logging, level, logging.DEBUG), format=LOG_FORMAT_DEBUG)


init_settings()
