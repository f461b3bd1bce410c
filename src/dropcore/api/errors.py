"""Exception types raised by the Dropbox API client."""

from __future__ import annotations


class DropboxError(Exception):
    """Base class for every error raised by dropcore."""


class SigningError(DropboxError):
    """Raised when a request cannot be signed (malformed URL or credentials)."""


class TransportError(DropboxError):
    """Raised on a network failure or when the API returns a non-200 response.

    Attributes:
        endpoint: URL of the request that failed (without the signed query).
        status_code: HTTP status code, or None when no response was received.
        body: Response body text, verbatim. On network failures, the failure
            reason text.
    """

    def __init__(self, endpoint: str, status_code: int | None, body: str) -> None:
        if status_code is None:
            message = f"request for {endpoint} failed: {body}"
        else:
            message = f"request for {endpoint} returned {status_code}, {body}"
        super().__init__(message)
        self.endpoint = endpoint
        self.status_code = status_code
        self.body = body


class DecodeError(DropboxError):
    """Raised when a 200 response body cannot be decoded into the expected shape."""

    def __init__(self, message: str, endpoint: str | None = None) -> None:
        super().__init__(f"{message} (endpoint: {endpoint})" if endpoint else message)
        self.endpoint = endpoint
        self.message = message
