"""
custom_fetch/executor/alerts.py

User-facing failure notification.

RequestExecutor calls its notifier (if any) with the exception of every
failed request, after logging and before re-raising. Any callable that
accepts the exception works; the two implementations below cover the
common cases.
"""

from __future__ import annotations

from typing import Callable, Protocol

import structlog

logger = structlog.get_logger(__name__)


class FailureNotifier(Protocol):
    def __call__(self, exc: BaseException) -> None: ...


class LogAlertNotifier:
    """Emits a `user_alert` event, for log-driven alerting."""

    def __call__(self, exc: BaseException) -> None:
        logger.warning("user_alert", message=str(exc), error_type=type(exc).__name__)


class CallbackAlertNotifier:
    """Forwards the error message to an arbitrary sink (UI toast, chat webhook, ...)."""

    def __init__(self, sink: Callable[[str], None]):
        self._sink = sink

    def __call__(self, exc: BaseException) -> None:
        self._sink(str(exc))
