# SPDX-License-Identifier: AGPL-3.0-or-later
"""Instant answer with the ``User-Agent`` header of the request."""

from __future__ import annotations

import re
import typing as t

from typing_extensions import override

from jivesearch.answerers._core import Answer, Answerer, AnswererTest

if t.TYPE_CHECKING:
    from jivesearch.extended_types import JiveRequest


class UserAgentAnswerer(Answerer):

    type = "user agent"
    regex = [
        re.compile(
            r"^(?P<remainder>)(?P<trigger>(?:what(?:'s| is) )?(?:my )?user[ -]?agent)\??$",
            re.IGNORECASE,
        ),
    ]

    @override
    def set_user_agent(self, answer: Answer, request: JiveRequest) -> None:
        answer.user_agent = request.headers.get("User-Agent", "")

    @override
    def solve(self, answer: Answer, request: JiveRequest) -> None:
        answer.solution = answer.user_agent

    @override
    def tests(self) -> list[AnswererTest]:
        ua = "Mozilla/5.0 (X11; Linux x86_64; rv:128.0) Gecko/20100101 Firefox/128.0"
        expected = Answer(type=self.type, triggered=True, remainder="", solution=ua, cache=False)
        return [
            AnswererTest(query=query, expected=expected, user_agent=ua)
            for query in ("user agent", "useragent", "my user agent", "what is my user agent", "What's my user agent?")
        ]
