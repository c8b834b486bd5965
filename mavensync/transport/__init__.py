from .client import DEFAULT_USER_AGENT, MavenHttpClient
from .exceptions import (
    ConflictError,
    MissingContentError,
    MissingContentTypeError,
    TransportError,
    UnsupportedContentTypeError,
)

__all__ = [
    "DEFAULT_USER_AGENT",
    "MavenHttpClient",
    "ConflictError",
    "MissingContentError",
    "MissingContentTypeError",
    "TransportError",
    "UnsupportedContentTypeError",
]
