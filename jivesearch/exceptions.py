# SPDX-License-Identifier: AGPL-3.0-or-later
"""Exception types raised by jivesearch modules."""

import typing as t


class JiveException(Exception):
    """Base jivesearch exception."""


@t.final
class JiveSettingsException(JiveException):
    """Error while loading the settings"""

    def __init__(self, message: str | Exception, filename: str | None):
        super().__init__(message)
        self.message = message
        self.filename = filename


class JiveConfigurationException(JiveException):
    """A registry (bangs, answerers) was built from an invalid definition.  It
    is raised while the registry is constructed, never at query time."""

    def __init__(self, name: str, message: str):
        super().__init__(f"{name}: {message}")
        self.message: str = message
        self.name: str = name


class JiveSuggesterException(JiveException):
    """The backend of the bang suggester failed (index setup or lookup)."""


class JiveFetcherException(JiveException):
    """Error inside the backend (fetcher) of an answerer: network, upstream
    API or parsing."""


class JiveTimeoutException(JiveFetcherException):
    """The deadline of the request expired before the fetcher returned."""

    def __init__(self, message: str = 'Timeout', timeout: float | None = None):
        if timeout is not None:
            message = f"{message} (timeout={timeout:.3f}s)"
        super().__init__(message)
        self.message: str = message
        self.timeout: float | None = timeout
