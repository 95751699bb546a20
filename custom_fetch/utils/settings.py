"""
custom_fetch/utils/settings.py

WHAT THIS FILE IS FOR
---------------------
This module defines the *single source of truth* for runtime configuration
of custom_fetch.

It is responsible for:
- Defining all supported configuration fields (via Pydantic BaseSettings)
- Loading default values from parameters/parameters.yaml
- Overriding defaults with environment variables (CUSTOM_FETCH_*)
- Exposing a cached, fully-validated Settings object to the application

LOAD & PRECEDENCE MODEL
-----------------------
Configuration is loaded in the following order (last wins):

1) YAML defaults from:
       parameters/parameters.yaml
2) Environment variables:
       CUSTOM_FETCH_*

Nothing here is required: an empty environment and a missing YAML file
still produce a usable Settings object (no base URL, no timeout, empty token).

WHAT THIS FILE IS NOT FOR
-------------------------
This module is NOT responsible for:
- HTTP calls
- Token acquisition or refresh (api_token is a static fallback only)
- Per-request options (see schemas/request_options.py)
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

import structlog
import yaml
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = structlog.get_logger(__name__)

PARAMETERS_PATH = Path(__file__).resolve().parents[2] / "parameters" / "parameters.yaml"


class Settings(BaseSettings):
    """
    Runtime settings for custom_fetch.

    Load order / precedence:
        1) YAML defaults (parameters/parameters.yaml)
        2) Environment variables (CUSTOM_FETCH_*), overriding YAML
    """

    model_config = SettingsConfigDict(
        env_prefix="CUSTOM_FETCH_",
        extra="ignore",
    )

    # Service metadata
    service_name: str = "custom_fetch"
    environment: str = "local"
    log_level: str = "INFO"

    # Request defaults, used when a call does not set them explicitly
    default_base_url: str = ""
    default_timeout_ms: int = Field(default=0, ge=0)

    # Static bearer token for the default token provider
    api_token: str = ""

    # httpx client settings
    # - transport_timeout_seconds: None disables httpx's own timeout so the
    #   per-call millisecond timeout is the only deadline
    transport_timeout_seconds: Optional[float] = None
    follow_redirects: bool = True

    alert_on_failure: bool = Field(
        default=False,
        description="If true, the default executor emits a user_alert event on every failed request.",
    )


@lru_cache(maxsize=1)
def _load_yaml_parameters() -> Dict[str, Any]:
    """
    Load base configuration from parameters/parameters.yaml.

    Cached so the file is read at most once per process.
    """
    if not PARAMETERS_PATH.exists():
        logger.warning("parameters_yaml_missing", expected=str(PARAMETERS_PATH))
        return {}

    try:
        with PARAMETERS_PATH.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            logger.warning(
                "parameters_yaml_not_dict",
                path=str(PARAMETERS_PATH),
                type=type(data).__name__,
            )
            return {}
        logger.info("parameters_yaml_loaded", path=str(PARAMETERS_PATH))
        return data
    except (OSError, yaml.YAMLError) as exc:
        logger.error("parameters_yaml_load_error", path=str(PARAMETERS_PATH), error=str(exc))
        return {}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Construct and return the final validated Settings object.

    Cached (singleton per process). Call get_settings.cache_clear() after
    changing the environment, e.g. in tests.
    """
    # 1) YAML defaults
    yaml_data = _load_yaml_parameters()

    # 2) env overrides (partial)
    try:
        env_settings = Settings()
        env_data = env_settings.model_dump(exclude_unset=True)
        logger.info("settings_loaded_env_only_partial", fields=list(env_data.keys()))
    except ValidationError as exc:
        logger.warning("settings_env_validation_error", errors=exc.errors())
        env_data = {}

    # 3) merge + final validation
    merged: Dict[str, Any] = {**yaml_data, **env_data}
    settings = Settings.model_validate(merged)

    logger.info(
        "settings_loaded",
        environment=settings.environment,
        service_name=settings.service_name,
        default_base_url=settings.default_base_url,
        default_timeout_ms=settings.default_timeout_ms,
        has_api_token=bool(settings.api_token),
        transport_timeout_seconds=settings.transport_timeout_seconds,
        follow_redirects=settings.follow_redirects,
        alert_on_failure=settings.alert_on_failure,
    )

    return settings
