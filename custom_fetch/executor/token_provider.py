"""
custom_fetch/executor/token_provider.py

Bearer-token sources for RequestExecutor.

A token provider is any zero-argument callable returning the current
token as a str. It is called once per request, at request time, so a
provider backed by mutable state (env var, credential cache) always
yields the latest value. Acquisition and refresh are the provider
owner's job, not custom_fetch's.
"""

from __future__ import annotations

import os
from typing import Callable

TokenProvider = Callable[[], str]


class StaticTokenProvider:
    """Always returns the same token."""

    def __init__(self, token: str = ""):
        self._token = token

    def __call__(self) -> str:
        return self._token


class EnvironmentTokenProvider:
    """Reads the token from an environment variable on every call; unset -> ""."""

    def __init__(self, variable: str = "CUSTOM_FETCH_API_TOKEN"):
        self.variable = variable

    def __call__(self) -> str:
        return os.environ.get(self.variable, "")
