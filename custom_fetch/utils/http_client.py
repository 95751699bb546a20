"""
custom_fetch/utils/http_client.py

WHAT THIS FILE IS FOR
---------------------
This module is the transport seam of custom_fetch: the one place that
knows how an `httpx.AsyncClient` is obtained for a request.

It exists to:
- Let callers inject a long-lived client (shared connection pool, or an
  `httpx.MockTransport` in tests)
- Otherwise open a short-lived client per request and close it afterwards
- Keep httpx client construction settings (timeout, redirects) in one place

This client is intentionally kept *very thin*.

WHAT THIS FILE IS NOT FOR
-------------------------
This module is NOT responsible for:
- Retry logic
- Logging
- URL building, headers, or body serialization
- Timeout-based cancellation (see executor/cancellation.py)
- Response parsing

TIMEOUT SEMANTICS
-----------------
`timeout_seconds` is httpx's own connect/read/write/pool timeout. It is
None by default so that the per-call millisecond timeout enforced by the
executor is the only deadline. Set it when a hard transport-level cap is
wanted as well.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional, Tuple, Union

import httpx

# Timeout can be:
# - None -> disabled
# - single float -> applied to connect, read, write and pool
# - (connect_timeout, read_timeout)
TimeoutType = Union[None, float, Tuple[float, float]]


def _to_httpx_timeout(timeout_seconds: TimeoutType) -> httpx.Timeout:
    if isinstance(timeout_seconds, tuple):
        connect, read = timeout_seconds
        return httpx.Timeout(read, connect=connect)
    return httpx.Timeout(timeout_seconds)


class HttpClient:
    """
    Provides the `httpx.AsyncClient` used for a single request.

    An injected client is reused and never closed here; its owner closes it.
    Without one, `session()` opens a fresh client and closes it on exit.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout_seconds: TimeoutType = None,
        follow_redirects: bool = True,
    ):
        self._client = client
        self.timeout_seconds = timeout_seconds
        self.follow_redirects = follow_redirects

    @property
    def is_shared(self) -> bool:
        return self._client is not None

    @asynccontextmanager
    async def session(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._client is not None:
            yield self._client
            return

        async with httpx.AsyncClient(
            timeout=_to_httpx_timeout(self.timeout_seconds),
            follow_redirects=self.follow_redirects,
        ) as client:
            yield client
