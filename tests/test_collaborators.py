# tests/test_collaborators.py
from __future__ import annotations

from typing import List

import httpx
import pytest
from structlog.testing import capture_logs

from custom_fetch.executor.alerts import CallbackAlertNotifier, LogAlertNotifier
from custom_fetch.executor.token_provider import EnvironmentTokenProvider, StaticTokenProvider
from custom_fetch.utils.http_client import HttpClient


@pytest.fixture
def anyio_backend():
    return "asyncio"


def test_static_token_provider() -> None:
    assert StaticTokenProvider("abc")() == "abc"
    assert StaticTokenProvider()() == ""


def test_environment_token_provider_reads_at_call_time(monkeypatch: pytest.MonkeyPatch) -> None:
    provider = EnvironmentTokenProvider("MY_TOKEN")
    monkeypatch.delenv("MY_TOKEN", raising=False)
    assert provider() == ""

    monkeypatch.setenv("MY_TOKEN", "t1")
    assert provider() == "t1"

    monkeypatch.setenv("MY_TOKEN", "t2")
    assert provider() == "t2"


def test_log_alert_notifier_emits_user_alert() -> None:
    with capture_logs() as logs:
        LogAlertNotifier()(RuntimeError("server unreachable"))

    assert logs == [
        {
            "event": "user_alert",
            "message": "server unreachable",
            "error_type": "RuntimeError",
            "log_level": "warning",
        }
    ]


def test_callback_alert_notifier_forwards_message() -> None:
    shown: List[str] = []
    CallbackAlertNotifier(shown.append)(ValueError("bad"))
    assert shown == ["bad"]


@pytest.mark.anyio
async def test_http_client_reuses_injected_client_without_closing_it() -> None:
    injected = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(204)))
    http = HttpClient(client=injected)

    async with http.session() as client:
        assert client is injected

    assert http.is_shared is True
    assert injected.is_closed is False
    await injected.aclose()


@pytest.mark.anyio
async def test_http_client_opens_and_closes_its_own_client() -> None:
    http = HttpClient(timeout_seconds=(2.0, 30.0), follow_redirects=False)

    async with http.session() as client:
        opened = client
        assert client.timeout.connect == 2.0
        assert client.timeout.read == 30.0
        assert client.follow_redirects is False

    assert http.is_shared is False
    assert opened.is_closed is True


@pytest.mark.anyio
async def test_http_client_default_has_no_transport_timeout() -> None:
    async with HttpClient().session() as client:
        assert client.timeout.read is None
        assert client.timeout.connect is None
