# SPDX-License-Identifier: AGPL-3.0-or-later
"""Command line for the maintenance of the bang registry::

   $ python -m jivesearch.bangs --help
   $ python -m jivesearch.bangs collisions
   $ python -m jivesearch.bangs suggest go --size 5

"""

import typer

from . import MemorySuggester, new

app = typer.Typer()


@app.command()
def collisions():
    """Report triggers that are defined by more than one bang."""

    registry = new()
    shadowed = registry.collisions()
    if not shadowed:
        print(f"{len(registry)} bangs, no trigger collisions")
        return

    for trigger, names in shadowed.items():
        print(f"!{trigger}: {names[0]} shadows {', '.join(names[1:])}")
    raise typer.Exit(code=1)


@app.command()
def suggest(term: str, size: int = 10):
    """Show the autocomplete of the bangs for TERM."""

    registry = new(suggester=MemorySuggester())
    registry.setup_suggester()
    for suggestion in registry.suggest(term, size).suggestions:
        print(f"!{suggestion.trigger:<16} {suggestion.name}")
