# SPDX-License-Identifier: AGPL-3.0-or-later
# pylint: disable=too-few-public-methods, missing-module-docstring

from __future__ import annotations

import abc
import re
import typing as t
from collections.abc import Iterable
from dataclasses import dataclass, field

import babel

from jivesearch import logger, network
from jivesearch.exceptions import JiveConfigurationException, JiveFetcherException
from jivesearch.locales import language_tag

if t.TYPE_CHECKING:
    from jivesearch.extended_types import JiveRequest


log = logger.getChild("answerers")


@dataclass
class Answer:
    """The scaffold of an instant answer.  It is created per query by
    :py:obj:`Answerer.configure`, filled by the answerer that owns it and
    discarded once it is serialized (:py:obj:`Answer.to_dict`)."""

    query: str = ""
    user_agent: str = ""
    language: str = "en"
    """BCP-47 tag, parameterizes the fetches of the answerer."""

    type: str = ""
    """Short tag of the answer type, e.g. ``stock quote``."""

    triggered: bool = False
    """``False`` means the answerer abstained."""

    trigger: str = ""
    remainder: str = ""
    """Captured by the named group ``remainder`` of the regex that matched."""

    solution: t.Any = None
    """Typed payload, specific to the answerer."""

    cache: bool = False
    """The answer is safe to cache."""

    err: Exception | None = None
    """Failure of the fetcher (carried out-of-band, the answer is still
    returned)."""

    regex: list[re.Pattern[str]] = field(default_factory=list, repr=False, compare=False)

    def to_dict(self) -> dict[str, t.Any]:
        return {
            "type": self.type,
            "language": self.language,
            "triggered": self.triggered,
            "remainder": self.remainder,
            "solution": self.solution,
            "cache": self.cache,
            "err": None if self.err is None else str(self.err),
        }


@dataclass
class AnswererTest:
    """A fixture of an answerer: ``query`` is expected to produce an answer
    equal to ``expected`` (fields ``type``, ``triggered``, ``remainder``,
    ``solution`` and ``cache``)."""

    query: str
    expected: Answer
    user_agent: str = ""


class Answerer(abc.ABC):
    """Abstract base class of the instant answerers.

    An answerer recognizes a class of queries by its regular expressions
    (:py:obj:`Answerer.regex`), each of them defines the named groups
    ``trigger`` and ``remainder``.  The instances are shared by all requests:
    per-query state lives in the :py:obj:`Answer` that is passed to the
    methods, the regexes are compiled once.
    """

    type: str = ""
    """Type of the answers (:py:obj:`Answer.type`)."""

    regex: list[re.Pattern[str]] = []
    """The compiled trigger regexes, tried in order."""

    def set_query(self, answer: Answer, request: JiveRequest, query_var: str) -> None:
        answer.query = request.values.get(query_var, "").strip()

    def set_user_agent(self, answer: Answer, request: JiveRequest) -> None:
        """Most answerers don't need the user agent."""

    def set_language(self, answer: Answer, tag: str | babel.Locale) -> None:
        answer.language = language_tag(tag)

    def set_type(self, answer: Answer) -> None:
        answer.type = self.type

    def set_regex(self, answer: Answer) -> None:
        answer.regex = self.regex

    @abc.abstractmethod
    def solve(self, answer: Answer, request: JiveRequest) -> None:
        """Fill :py:obj:`Answer.solution` or :py:obj:`Answer.err`."""

    def set_cache(self, answer: Answer) -> None:
        answer.cache = False

    def tests(self) -> list[AnswererTest]:
        """Fixtures of this answerer, see :py:obj:`AnswererTest`."""
        return []

    def configure(self, request: JiveRequest, query_var: str, language: str | babel.Locale) -> Answer:
        """Returns a new answer scaffold configured by this answerer."""
        answer = Answer()
        self.set_query(answer, request, query_var)
        self.set_user_agent(answer, request)
        self.set_language(answer, language)
        self.set_type(answer)
        self.set_regex(answer)
        self.set_cache(answer)
        return answer

    def trigger(self, answer: Answer) -> bool:
        """Try the regexes in order, the first match triggers the answerer:
        :py:obj:`Answer.triggered`, ``trigger`` and ``remainder`` are set."""
        for regex in answer.regex:
            m = regex.match(answer.query)
            if m is None:
                continue
            trigger, remainder = m.group("trigger"), m.group("remainder")
            if trigger is None and remainder is None:
                continue
            answer.triggered = True
            answer.trigger = trigger or ""
            answer.remainder = remainder or ""
            return True
        return False


class AnswererStorage:
    """The ordered registry of the answerers.  It is built once when the
    process starts and is read-only afterwards.  With
    :py:obj:`AnswererStorage.detect` the answerers are asked in registry order,
    the first that triggers answers the query."""

    answerer_list: tuple[Answerer, ...]

    def __init__(self, answerers: Iterable[Answerer]):
        self.answerer_list = tuple(answerers)
        for answerer in self.answerer_list:
            self.validate(answerer)

    def __iter__(self):
        return iter(self.answerer_list)

    def __len__(self):
        return len(self.answerer_list)

    @staticmethod
    def validate(answerer: Answerer) -> None:
        name = answerer.__class__.__name__
        if not answerer.type:
            raise JiveConfigurationException(name, "answerer without a type")
        if not answerer.regex:
            raise JiveConfigurationException(name, "answerer without a regex")
        for regex in answerer.regex:
            if not {"trigger", "remainder"} <= set(regex.groupindex):
                raise JiveConfigurationException(
                    name, f"regex {regex.pattern!r} needs the named groups 'trigger' and 'remainder'"
                )

    def detect(self, request: JiveRequest, query_var: str, language: str | babel.Locale) -> Answer | None:
        """Returns the answer of the first answerer that triggers or ``None``
        (there is no instant answer for the query).

        A failing fetcher does not raise: the error is stored in
        :py:obj:`Answer.err` and the (triggered) answer is returned uncached.
        """
        for answerer in self.answerer_list:
            answer = answerer.configure(request, query_var, language)
            if not answer.query:
                return None
            if not answerer.trigger(answer):
                continue

            log.debug("%s triggered by %r (remainder %r)", answer.type, answer.query, answer.remainder)
            try:
                ctx = network.get_context()
                if ctx is not None:
                    ctx.check_deadline()
                answerer.solve(answer, request)
            except JiveFetcherException as e:
                answer.err = e
            except Exception as e:  # pylint: disable=broad-exception-caught
                log.exception("%s: unexpected error of the answerer", answer.type)
                answer.err = JiveFetcherException(f"{e.__class__.__name__}: {e}")
                answer.err.__cause__ = e

            if answer.err is not None:
                log.warning("%s %r: %s", answer.type, answer.remainder, answer.err)
                answer.cache = False
            return answer

        return None
