"""
custom_fetch/executor/request_executor.py

WHAT THIS FILE IS FOR
---------------------
This module provides RequestExecutor, a convenience wrapper around an
httpx.AsyncClient for one request/response cycle, and the module-level
`execute()` entry point built on a settings-driven default executor.

For each call it:
- Builds the full URL (base_url + url + query string from params)
- Serializes `data` to a JSON body
- Attaches Content-Type: application/json and Authorization: Bearer <token>
- Enforces the optional millisecond timeout by aborting the request
- Decodes the body per response_type ("json" | "text" | "blob")
- Dispatches to success_callback / error_callback

CALL FLOW
---------
execute(url, options)
  -> RequestOptions (validated; executor defaults applied)
  -> build_full_url()
  -> schedule_timeout()                 (only when timeout > 0)
  -> HttpClient.session()
      -> client.build_request() / client.send()   under CancellationController
      -> non-2xx: error_callback(response), return None
      -> 2xx:     parse_response(), success_callback(value), return value
  -> cleanup_timeout()                  (always)

ERROR HANDLING RULES
--------------------
- Non-2xx status is NOT an exception: error_callback receives the raw
  httpx.Response (if given) and execute() returns None. Callers that want
  an exception must check for None or raise from error_callback.
- Everything else (httpx.RequestError, RequestTimeoutError, JSON decode
  errors, exceptions raised by callbacks) is logged, passed to the
  notifier (if any) and re-raised unchanged.
- Cancellation of the calling task is not a failure; it propagates
  without logging or alerting.
- No retries are performed.

WHAT THIS FILE IS NOT FOR
-------------------------
This module MUST NOT:
- Retry or back off
- Acquire or refresh tokens
- Pool or queue requests beyond what the injected client does
- Stream response bodies
"""

from __future__ import annotations

import inspect
import json
from functools import lru_cache
from typing import Any, Dict, Mapping, Optional, Union

import httpx
import structlog

from custom_fetch.executor.alerts import FailureNotifier, LogAlertNotifier
from custom_fetch.executor.cancellation import CancellationController, cleanup_timeout, schedule_timeout
from custom_fetch.executor.response_parsers import parse_response
from custom_fetch.executor.token_provider import StaticTokenProvider, TokenProvider
from custom_fetch.executor.url_builder import build_full_url
from custom_fetch.schemas.request_options import Callback, RequestOptions
from custom_fetch.utils.errors import RequestTimeoutError
from custom_fetch.utils.http_client import HttpClient
from custom_fetch.utils.logging_config import configure_logging
from custom_fetch.utils.settings import Settings, get_settings

logger = structlog.get_logger(__name__)

OptionsInput = Union[RequestOptions, Mapping[str, Any], None]


def _serialize_body(data: Any) -> Optional[bytes]:
    if data is None:
        return None
    if isinstance(data, (bytes, bytearray)):
        return bytes(data)
    # compact separators: same bytes a browser JSON.stringify would send
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


async def _invoke_callback(callback: Optional[Callback], value: Any) -> None:
    if callback is None:
        return
    result = callback(value)
    if inspect.isawaitable(result):
        await result


class RequestExecutor:
    """
    Executes single HTTP requests with timeout, auth header and callbacks.

    Collaborators are injected:
    - client: shared httpx.AsyncClient (optional; one per call otherwise)
    - token_provider: zero-arg callable returning the bearer token
    - notifier: called with the exception of every failed request

    base_url / timeout_ms are defaults for calls that do not set
    base_url / timeout themselves. An explicit timeout=0 on a call still
    disables the timeout.

    Instances hold no per-request state and may be shared across
    concurrent calls.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        token_provider: Optional[TokenProvider] = None,
        notifier: Optional[FailureNotifier] = None,
        base_url: str = "",
        timeout_ms: int = 0,
        http: Optional[HttpClient] = None,
    ):
        if timeout_ms < 0:
            raise ValueError("timeout_ms must be >= 0")

        self.http = http or HttpClient(client=client)
        self.token_provider: TokenProvider = token_provider or StaticTokenProvider()
        self.notifier = notifier
        self.base_url = base_url
        self.timeout_ms = timeout_ms

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        client: Optional[httpx.AsyncClient] = None,
        token_provider: Optional[TokenProvider] = None,
        notifier: Optional[FailureNotifier] = None,
    ) -> "RequestExecutor":
        if notifier is None and settings.alert_on_failure:
            notifier = LogAlertNotifier()

        return cls(
            token_provider=token_provider or StaticTokenProvider(settings.api_token),
            notifier=notifier,
            base_url=settings.default_base_url,
            timeout_ms=settings.default_timeout_ms,
            http=HttpClient(
                client=client,
                timeout_seconds=settings.transport_timeout_seconds,
                follow_redirects=settings.follow_redirects,
            ),
        )

    async def execute(self, url: str, options: OptionsInput = None) -> Any:
        """
        Perform one request and return the decoded body.

        Returns:
            The parsed body for a 2xx response, None for any other status.

        Raises:
            pydantic.ValidationError: invalid options (before any I/O).
            RequestTimeoutError: the timeout expired first.
            httpx.RequestError: network-level failure.
            Any parse or callback error, unchanged.
        """
        opts = self._resolve_options(options)
        full_url = build_full_url(url, opts.base_url, opts.params)
        log = logger.bind(method=opts.method, url=full_url)

        controller = CancellationController()
        timer = schedule_timeout(controller, opts.timeout, url=full_url)

        try:
            async with self.http.session() as client:
                request = self._build_request(client, opts, full_url)
                log.info("request_started", timeout_ms=opts.timeout, response_type=opts.response_type)

                response = await controller.run(client.send(request))
                return await self._handle_response(response, opts, controller, log)
        except Exception as exc:
            self._handle_error(exc, log)
            raise
        finally:
            cleanup_timeout(timer)

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #
    def _resolve_options(self, options: OptionsInput) -> RequestOptions:
        if options is None:
            opts = RequestOptions()
        elif isinstance(options, RequestOptions):
            opts = options
        else:
            opts = RequestOptions.model_validate(dict(options))

        updates: Dict[str, Any] = {}
        if self.base_url and "base_url" not in opts.model_fields_set:
            updates["base_url"] = self.base_url
        if self.timeout_ms and "timeout" not in opts.model_fields_set:
            updates["timeout"] = self.timeout_ms

        return opts.model_copy(update=updates) if updates else opts

    def _build_request(
        self,
        client: httpx.AsyncClient,
        opts: RequestOptions,
        full_url: str,
    ) -> httpx.Request:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.token_provider()}",
        }
        return client.build_request(
            opts.method,
            full_url,
            content=_serialize_body(opts.data),
            headers=headers,
        )

    async def _handle_response(
        self,
        response: httpx.Response,
        opts: RequestOptions,
        controller: CancellationController,
        log: Any,
    ) -> Any:
        if not response.is_success:
            log.warning(
                "request_http_error",
                status_code=response.status_code,
                has_error_callback=opts.error_callback is not None,
            )
            await _invoke_callback(opts.error_callback, response)
            return None

        # body decoding is still subject to the timeout
        data = await controller.run(parse_response(response, opts.response_type))
        log.info("request_succeeded", status_code=response.status_code)

        await _invoke_callback(opts.success_callback, data)
        return data

    def _handle_error(self, exc: Exception, log: Any) -> None:
        log.error("request_failed", error=str(exc), error_type=type(exc).__name__)

        if isinstance(exc, RequestTimeoutError):
            log.error("request_timeout", timeout_ms=exc.timeout_ms)

        if self.notifier is None:
            return
        try:
            self.notifier(exc)
        except Exception as notify_exc:  # noqa: BLE001
            # the request error is what the caller must see
            log.warning("failure_notifier_error", error=str(notify_exc))


@lru_cache(maxsize=1)
def get_default_executor() -> RequestExecutor:
    """Process-wide executor built from get_settings(); configures logging once."""
    settings = get_settings()
    configure_logging(settings.log_level)
    return RequestExecutor.from_settings(settings)


async def execute(url: str, options: OptionsInput = None) -> Any:
    """
    Perform one request with the default executor.

    Example:
        user = await execute("/api/users", {"method": "GET", "params": {"id": 1}})
    """
    return await get_default_executor().execute(url, options)
