"""Exception taxonomy shared by the store, the report and the fetcher."""
from __future__ import annotations


class ParseError(ValueError):
    """Raised when persisted JSON or a remote payload is malformed (maps to PARSE_ERROR)."""


class NetworkError(Exception):
    """Raised when the joke API cannot be reached (connection refused, DNS, timeout)."""

    def __init__(self, message: str, *, timeout: bool = False):
        self.timeout = timeout
        super().__init__(message)


class RemoteError(Exception):
    """Raised when the joke API answers with a non-2xx status."""

    def __init__(self, status_code: int, message: str = "", *, body: str | None = None):
        self.status_code = status_code
        self.body = body
        super().__init__(message or f"HTTP {status_code}")


class JokeNotFoundError(Exception):
    """Raised when the joke API reports that no joke matches the query."""
