"""
Errors raised while materializing an artifact.

Every failure the fetcher can produce is a FetchError; callers that only
care about success or failure can catch the base class. Nothing here is
retried locally; retry policy belongs to whoever invokes the fetcher.
"""
from typing import Optional


class FetchError(Exception):
    """Base class for all artifact fetch failures."""

    def __init__(self, message: str, ref: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.ref = ref


class NotFoundError(FetchError):
    """The store has no artifact for the given repo, commit and name."""

    def __init__(self, message: str, ref: Optional[str] = None, url: Optional[str] = None):
        super().__init__(message, ref=ref)
        self.url = url


class NetworkError(FetchError):
    """Transport failure or unexpected response from the store."""

    def __init__(
        self,
        message: str,
        ref: Optional[str] = None,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message, ref=ref)
        self.url = url
        self.status_code = status_code


class ArtifactIOError(FetchError):
    """Local filesystem failure: create, write, read or chmod."""

    def __init__(self, message: str, ref: Optional[str] = None, path=None):
        super().__init__(message, ref=ref)
        self.path = path


class ChecksumMismatchError(FetchError):
    """Downloaded bytes do not hash to the expected SHA-256."""

    def __init__(self, message: str, ref: Optional[str] = None, expected: str = "", actual: str = ""):
        super().__init__(message, ref=ref)
        self.expected = expected
        self.actual = actual


class InvalidPinError(ValueError):
    """A commit that is not a pinned revision hash; no store can hold it."""
