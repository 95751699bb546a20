"""
custom_fetch/executor/cancellation.py

WHAT THIS FILE IS FOR
---------------------
Cancellation of a single in-flight request, driven by a timeout timer.

- CancellationController.run(awaitable) runs the request as its own task.
- CancellationController.abort(reason) cancels that task; the coroutine
  awaiting run() then receives `reason` instead of CancelledError.
- schedule_timeout() arms abort() on the event loop after N milliseconds;
  cleanup_timeout() disarms it.

Each request owns its own controller and timer. Aborting one request
never touches another.

CANCELLATION OF THE CALLER
--------------------------
If the task awaiting run() is itself cancelled (e.g. asyncio.wait_for
around execute()), the request task is cancelled with it and
CancelledError propagates unchanged: that is not an abort.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Optional

from custom_fetch.utils.errors import RequestAbortedError, RequestTimeoutError


class CancellationController:
    def __init__(self) -> None:
        self._task: Optional[asyncio.Future[Any]] = None
        self.reason: Optional[BaseException] = None

    @property
    def aborted(self) -> bool:
        return self.reason is not None

    def abort(self, reason: Optional[BaseException] = None) -> None:
        """Abort the request. Only the first call has an effect."""
        if self.aborted:
            return
        self.reason = reason if reason is not None else RequestAbortedError()
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def run(self, awaitable: Awaitable[Any]) -> Any:
        if self.aborted:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            raise self.reason  # type: ignore[misc]

        self._task = asyncio.ensure_future(awaitable)
        try:
            return await self._task
        except asyncio.CancelledError:
            if self.aborted and self._task.cancelled():
                raise self.reason from None  # type: ignore[misc]
            raise


def schedule_timeout(
    controller: CancellationController,
    timeout_ms: int,
    url: Optional[str] = None,
) -> Optional[asyncio.TimerHandle]:
    """Arm a timeout abort. Returns None (no timer at all) when timeout_ms is 0."""
    if not timeout_ms:
        return None

    loop = asyncio.get_running_loop()
    return loop.call_later(
        timeout_ms / 1000,
        controller.abort,
        RequestTimeoutError(timeout_ms, url=url),
    )


def cleanup_timeout(handle: Optional[asyncio.TimerHandle]) -> None:
    if handle is not None:
        handle.cancel()
