"""
custom_fetch/executor/response_parsers.py

WHAT THIS FILE IS FOR
---------------------
This module defines the *single mapping* from a declared response type
("json" | "text" | "blob") to the function that decodes a successful
httpx.Response body.

- "json" -> decoded JSON value (dict, list, str, number, bool or None)
- "text" -> str, decoded with the response charset
- "blob" -> Blob(content=bytes, content_type=<Content-Type header>)

Decoding errors (malformed JSON, undecodable text) are NOT caught here;
they propagate to the executor's failure path.

WHAT THIS FILE IS NOT FOR
-------------------------
This module MUST NOT:
- Inspect status codes (only called for 2xx responses)
- Invoke callbacks
- Log
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict

import httpx


@dataclass(frozen=True)
class Blob:
    """Raw response body plus its declared media type."""

    content: bytes
    content_type: str = ""

    @property
    def size(self) -> int:
        return len(self.content)


def _parse_json(response: httpx.Response) -> Any:
    return response.json()


def _parse_text(response: httpx.Response) -> str:
    return response.text


def _parse_blob(response: httpx.Response) -> Blob:
    return Blob(content=response.content, content_type=response.headers.get("content-type", ""))


PARSERS: Dict[str, Callable[[httpx.Response], Any]] = {
    "json": _parse_json,
    "text": _parse_text,
    "blob": _parse_blob,
}


async def parse_response(response: httpx.Response, response_type: str) -> Any:
    """
    Read the body (if not read yet) and decode it per `response_type`.

    Raises:
        ValueError: unknown response_type.
    """
    try:
        parser = PARSERS[response_type]
    except KeyError:
        raise ValueError(
            f"Unsupported response_type {response_type!r}; expected one of {sorted(PARSERS)}"
        ) from None

    await response.aread()
    return parser(response)
