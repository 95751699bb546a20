"""
custom_fetch/utils/errors.py

WHAT THIS FILE IS FOR
---------------------
Exception types raised by custom_fetch itself.

Transport and parsing failures are NOT wrapped: httpx.RequestError,
json.JSONDecodeError etc. reach the caller unchanged. Only failures that
custom_fetch originates (request aborted by its own timeout) get a type here.
"""

from __future__ import annotations

from typing import Optional


class CustomFetchError(Exception):
    """Base class for errors originating in custom_fetch."""


class RequestAbortedError(CustomFetchError):
    """The in-flight request was aborted through its CancellationController."""

    def __init__(self, message: str = "Request aborted", url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class RequestTimeoutError(RequestAbortedError, TimeoutError):
    """
    Request aborted because its timeout expired.

    Subclasses builtin TimeoutError so `except TimeoutError` also catches it.
    """

    def __init__(self, timeout_ms: int, url: Optional[str] = None):
        super().__init__(f"Request timeout after {timeout_ms}ms", url=url)
        self.timeout_ms = timeout_ms
