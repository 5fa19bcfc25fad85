"""Errors raised while building, fetching and parsing calendar feeds."""
from typing import List


class CalendarError(Exception):
    """Base class for calendar feed errors."""


class ConfigError(CalendarError):
    """Query or selector is not usable."""


class FetchError(CalendarError):
    """Calendar feed could not be retrieved."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Unable to fetch calendar feed {url}: {reason}")


class ParseError(CalendarError):
    """Calendar feed is not a well-formed document."""

    def __init__(self, diagnostics: List[str]):
        self.diagnostics = list(diagnostics)
        details = '; '.join(self.diagnostics) or 'unknown error'
        super().__init__(f"Unable to parse calendar feed: {details}")


class CacheReadError(CalendarError):
    """Cached feed disappeared or could not be read."""

    def __init__(self, path: str, reason: str = ''):
        self.path = path
        message = f"Unable to read cached calendar feed {path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
