"""Errors raised by the EVE API client."""

from typing import Iterable


class EveApiError(Exception):
    """Base error for this package."""


class TransportError(EveApiError):
    """Raised when the HTTP request fails after all retries."""


class ParseError(EveApiError):
    """Raised when a response body is not well-formed XML."""


class SchemaError(EveApiError):
    """Raised when a document does not have the layout this client understands."""


class MissingIdentifier(EveApiError):
    """Raised when a required identifier is neither passed nor configured."""

    def __init__(self, name: str, feed: str):
        super().__init__(f"No {name} specified for {feed}")
        self.name = name
        self.feed = feed


class MissingCredentials(EveApiError):
    """Raised when an authenticated feed is called without a key ID and vCode."""


class UnknownParameter(EveApiError, ValueError):
    """Raised when a feed is called with a parameter it does not take."""

    def __init__(self, feed: str, names: Iterable[str]):
        self.feed = feed
        self.names = sorted(names)
        super().__init__(f"{feed} does not take {', '.join(self.names)}")
