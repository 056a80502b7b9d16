# SPDX-License-Identifier: AGPL-3.0-or-later
"""Types of the bang registry and the bang autocomplete."""
# pylint: disable=too-few-public-methods

from __future__ import annotations

__all__ = ["Bang", "Suggestion", "Results", "Transformation", "DEFAULT_REGION"]

import re
import typing as t
from collections.abc import Callable
from dataclasses import dataclass, field

import msgspec

from jivesearch.exceptions import JiveConfigurationException

Transformation: t.TypeAlias = Callable[[str], str]
"""A pure function applied to the remainder of the query before it is
substituted into the URL template."""

DEFAULT_REGION = "default"

PLACEHOLDERS = {"term": "{{{term}}}", "lang": "{{{lang}}}"}
PLACEHOLDER_REGEX = re.compile(r"\{\{\{(.*?)\}\}\}")


@dataclass(frozen=True)
class Bang:
    """A single bang, e.g. ``!g`` for Google.

    The URL templates in :py:obj:`Bang.regions` may contain the placeholders
    ``{{{term}}}`` and ``{{{lang}}}``.  The region ``default`` is used when
    there is no template for the region of the request.
    """

    name: str
    """Human readable name (``Google``)."""

    triggers: tuple[str, ...]
    """Lowercase tokens that invoke the bang (``g``, ``google``)."""

    regions: dict[str, str]
    """Lowercase region code -> URL template, must contain ``default``."""

    transformations: tuple[Transformation, ...] = field(default=(), compare=False)
    """Applied left-to-right to the remainder before substitution."""

    def validate(self) -> None:
        """Raise :py:obj:`JiveConfigurationException` if the definition of this
        bang is invalid."""
        name = self.name or "<unnamed bang>"
        if not self.name:
            raise JiveConfigurationException(name, "bang without a name")
        if not self.triggers:
            raise JiveConfigurationException(name, "bang without triggers")
        for trigger in self.triggers:
            if not trigger or trigger != trigger.lower() or "!" in trigger or len(trigger.split()) != 1:
                raise JiveConfigurationException(name, f"invalid trigger {trigger!r}")
        if DEFAULT_REGION not in self.regions:
            raise JiveConfigurationException(name, f"missing region {DEFAULT_REGION!r}")
        for region, template in self.regions.items():
            if region != region.lower():
                raise JiveConfigurationException(name, f"region {region!r} is not lowercase")
            check_template(name, template)

    def template(self, region: str) -> str:
        """URL template of the (lowercase) ``region``, falls back to the
        ``default`` region."""
        return self.regions.get(region) or self.regions[DEFAULT_REGION]


def check_template(name: str, template: str) -> None:
    if not template:
        raise JiveConfigurationException(name, "empty URL template")
    for placeholder in PLACEHOLDER_REGEX.findall(template):
        if placeholder not in PLACEHOLDERS:
            raise JiveConfigurationException(name, f"unknown placeholder {{{{{{{placeholder}}}}}}} in {template}")
    rest = PLACEHOLDER_REGEX.sub("", template)
    if "{{{" in rest or "}}}" in rest:
        raise JiveConfigurationException(name, f"malformed placeholder in {template}")


def substitute(template: str, term: str, lang: str) -> str:
    """Replace all occurrences of ``{{{term}}}`` and ``{{{lang}}}`` in
    ``template``.  The values are inserted literally, placeholder sequences in
    the values are dropped, the returned URL is always fully substituted."""
    values = {
        "term": PLACEHOLDER_REGEX.sub(_drop_known, term),
        "lang": PLACEHOLDER_REGEX.sub(_drop_known, lang),
    }
    return PLACEHOLDER_REGEX.sub(lambda m: values.get(m.group(1), m.group(0)), template)


def _drop_known(match: re.Match[str]) -> str:
    return "" if match.group(1) in PLACEHOLDERS else match.group(0)


class Suggestion(msgspec.Struct, kw_only=True):
    """An individual bang autocomplete suggestion."""

    trigger: str
    name: str = ""


class Results(msgspec.Struct, kw_only=True):
    """The results of an autocomplete query.  On the wire the suggestions are
    wrapped in an object (``{"suggestions": [...]}``), never a bare array."""

    suggestions: list[Suggestion] = msgspec.field(default_factory=list)

    def __len__(self):
        return len(self.suggestions)
