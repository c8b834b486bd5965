"""Typed HTTP failures the sync engine branches on."""

from __future__ import annotations

from typing import Optional

from mavensync.exceptions import MavenSyncError


class TransportError(MavenSyncError):
    """A request failed or returned a non-2xx status."""

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        method: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.method = method
        self.status_code = status_code


class MissingContentError(TransportError):
    """HTTP 404: the resource is absent."""


class ConflictError(TransportError):
    """HTTP 409: the target refused to overwrite an existing resource."""


class MissingContentTypeError(TransportError):
    """The response carried no Content-Type header."""


class UnsupportedContentTypeError(TransportError):
    """No document parser is registered for the response Content-Type."""
