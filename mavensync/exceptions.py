"""Error types shared across the sync engine."""

from __future__ import annotations

from typing import Optional, Sequence


class MavenSyncError(Exception):
    """Base class for all mavensync failures."""


class ListingParseError(MavenSyncError):
    """Raised when a directory listing does not match a recognised layout."""

    def __init__(self, message: str, base_url: Optional[str] = None, causes: Sequence[Exception] = ()) -> None:
        super().__init__(message)
        self.base_url = base_url
        self.causes = list(causes)

    def __str__(self) -> str:
        text = super().__str__()
        if not self.causes:
            return text
        details = "; ".join(f"{type(exc).__name__}: {exc}" for exc in self.causes)
        return f"{text} ({details})"


class InvalidDescriptorError(MavenSyncError):
    """Raised when a maven-metadata.xml document lacks groupId or artifactId."""


class InvalidVersionError(MavenSyncError, ValueError):
    """Raised when a version string cannot be split into comparable items."""
