# -------------------------------------------------------------------
# custom_fetch/schemas/request_options.py
#
# WHAT THIS FILE IS FOR
# --------------------
# This module defines the per-call options accepted by
# RequestExecutor.execute().
#
# KEY DESIGN DECISION
# -------------------
# Options accept **both snake_case and the camelCase keys** used by
# the browser-side fetch wrapper this library mirrors.
#
# Example (both valid):
#   - snake_case: base_url, response_type, success_callback
#   - camelCase:  baseURL,  responseType,  successCallback
#
# This is implemented via:
#   - alias=<camelCase> on each field
#   - populate_by_name=True in model_config
#
# Unknown keys are rejected so a typo (e.g. "timout") fails loudly
# instead of silently disabling the timeout.
#
# WHAT THIS FILE IS NOT FOR
# ------------------------
# This module does NOT:
# - Build URLs or request bodies
# - Apply executor-level defaults (base URL / timeout from settings)
# - Call callbacks
# -------------------------------------------------------------------

from __future__ import annotations

from typing import Any, Callable, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

ResponseType = Literal["json", "text", "blob"]

# Callbacks may be plain functions or coroutine functions.
Callback = Callable[[Any], Any]


class RequestOptions(BaseModel):
    """
    Options for a single request.

    Supports both snake_case and camelCase field names.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        extra="forbid",
        frozen=True,
        json_schema_extra={
            "example": {
                "method": "POST",
                "baseURL": "https://api.example.com",
                "responseType": "json",
                "params": {"page": 1},
                "data": {"name": "John"},
                "timeout": 5000,
            }
        },
    )

    method: str = Field(
        "POST",
        description="HTTP method",
    )

    base_url: str = Field(
        "",
        alias="baseURL",
        description="Prefix concatenated in front of the request URL",
    )

    response_type: ResponseType = Field(
        "json",
        alias="responseType",
        description="How a successful response body is decoded",
    )

    params: Optional[Dict[str, Any]] = Field(
        None,
        description="Query parameters, encoded in mapping order",
    )

    data: Optional[Union[Dict[str, Any], List[Any], bytes]] = Field(
        None,
        description="Request body. Mappings/lists are JSON-serialized; bytes are sent as-is.",
    )

    timeout: int = Field(
        0,
        ge=0,
        description="Milliseconds before the request is aborted. 0 = no timeout.",
    )

    success_callback: Optional[Callback] = Field(
        None,
        alias="successCallback",
        description="Called once with the parsed body on a 2xx response",
    )

    error_callback: Optional[Callback] = Field(
        None,
        alias="errorCallback",
        description="Called once with the raw httpx.Response on a non-2xx response",
    )

    @field_validator("method")
    @classmethod
    def _normalize_method(cls, v: str) -> str:
        v = v.strip().upper()
        if not v:
            raise ValueError("method must not be empty")
        return v
