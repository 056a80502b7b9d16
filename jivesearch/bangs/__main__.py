# SPDX-License-Identifier: AGPL-3.0-or-later
"""Implementation of a command line for the bang registry, see
:py:obj:`jivesearch.bangs.cli`."""

from .cli import app

app()
