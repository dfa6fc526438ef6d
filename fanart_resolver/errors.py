"""Exception types raised by the resolver."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class ArtworkError(Exception):
    """Base class for every resolver error."""


class ConfigurationError(ArtworkError):
    """Required configuration (usually the API key) is missing."""


class FetchError(ArtworkError):
    """The remote catalog could not be retrieved."""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class FetchCancelled(ArtworkError):
    """The caller cancelled an in-flight fetch."""


class NotFoundError(ArtworkError):
    """No cached catalog exists for the identifier."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"No cached catalog at {path}")
        self.path = path


class CorruptDataError(ArtworkError):
    """A cached catalog exists but does not deserialize."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Cached catalog {path} is corrupt: {reason}")
        self.path = path
        self.reason = reason
