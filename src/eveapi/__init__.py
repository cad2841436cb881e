"""Client for the EVE Online XML API (version 2)."""

from .client import EveApi
from .config import DEFAULT_API_URL, ApiConfig, Credentials
from .errors import (
    EveApiError,
    MissingCredentials,
    MissingIdentifier,
    ParseError,
    SchemaError,
    TransportError,
    UnknownParameter,
)
from .results import FeedResult, UpstreamError

__version__ = "0.1.0"

__all__ = [
    "ApiConfig",
    "Credentials",
    "DEFAULT_API_URL",
    "EveApi",
    "EveApiError",
    "FeedResult",
    "MissingCredentials",
    "MissingIdentifier",
    "ParseError",
    "SchemaError",
    "TransportError",
    "UnknownParameter",
    "UpstreamError",
]
