# tests/test_cancellation.py
from __future__ import annotations

import asyncio

import pytest

from custom_fetch.executor.cancellation import CancellationController, cleanup_timeout, schedule_timeout
from custom_fetch.utils.errors import RequestAbortedError, RequestTimeoutError


@pytest.fixture
def anyio_backend():
    return "asyncio"


async def _slow(result: str = "done", delay: float = 10) -> str:
    await asyncio.sleep(delay)
    return result


@pytest.mark.anyio
async def test_run_returns_result_when_not_aborted() -> None:
    ctrl = CancellationController()
    assert await ctrl.run(_slow("ok", 0)) == "ok"
    assert ctrl.aborted is False


@pytest.mark.anyio
async def test_abort_raises_reason_in_awaiting_coroutine() -> None:
    ctrl = CancellationController()
    reason = RequestAbortedError("stop")

    asyncio.get_running_loop().call_later(0.01, ctrl.abort, reason)
    with pytest.raises(RequestAbortedError) as excinfo:
        await ctrl.run(_slow())

    assert excinfo.value is reason
    assert ctrl.aborted is True


@pytest.mark.anyio
async def test_abort_before_run_fails_fast() -> None:
    ctrl = CancellationController()
    ctrl.abort()

    with pytest.raises(RequestAbortedError):
        await ctrl.run(_slow())


@pytest.mark.anyio
async def test_only_first_abort_reason_is_kept() -> None:
    ctrl = CancellationController()
    first = RequestAbortedError("first")
    ctrl.abort(first)
    ctrl.abort(RequestAbortedError("second"))
    assert ctrl.reason is first


@pytest.mark.anyio
async def test_schedule_timeout_zero_returns_none() -> None:
    assert schedule_timeout(CancellationController(), 0) is None


@pytest.mark.anyio
async def test_scheduled_timeout_aborts_with_timeout_error() -> None:
    ctrl = CancellationController()
    handle = schedule_timeout(ctrl, 10, url="http://x/y")
    assert handle is not None

    with pytest.raises(RequestTimeoutError) as excinfo:
        await ctrl.run(_slow())

    assert excinfo.value.timeout_ms == 10
    assert excinfo.value.url == "http://x/y"
    assert "10ms" in str(excinfo.value)


@pytest.mark.anyio
async def test_cleanup_timeout_prevents_abort() -> None:
    ctrl = CancellationController()
    handle = schedule_timeout(ctrl, 10)
    cleanup_timeout(handle)

    assert await ctrl.run(_slow("late", 0.05)) == "late"
    assert ctrl.aborted is False
    assert handle is not None and handle.cancelled()


def test_cleanup_timeout_accepts_none() -> None:
    cleanup_timeout(None)
