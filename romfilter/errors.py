"""Errors raised while listing an index or fetching files."""

from __future__ import annotations


class FetchError(RuntimeError):
    """Raised when an index page or file cannot be fetched."""

    def __init__(self, url: str, message: str, status: int | None = None) -> None:
        self.url = url
        self.status = status
        detail = f"HTTP {status}: {message}" if status is not None else message
        super().__init__(f"Failed to fetch {url} ({detail})")


class ParseError(ValueError):
    """Raised when a fetched body does not look like a file index."""
