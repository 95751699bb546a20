# tests/test_response_parsers.py
from __future__ import annotations

import json

import httpx
import pytest

from custom_fetch.executor.response_parsers import PARSERS, Blob, parse_response


@pytest.fixture
def anyio_backend():
    return "asyncio"


def test_parser_table_covers_all_response_types() -> None:
    assert set(PARSERS) == {"json", "text", "blob"}


@pytest.mark.anyio
async def test_json_parser_returns_decoded_value() -> None:
    resp = httpx.Response(200, json={"items": [1, 2], "next": None})
    assert await parse_response(resp, "json") == {"items": [1, 2], "next": None}


@pytest.mark.anyio
async def test_text_parser_uses_response_charset() -> None:
    resp = httpx.Response(
        200,
        content="héllo".encode("latin-1"),
        headers={"Content-Type": "text/plain; charset=latin-1"},
    )
    assert await parse_response(resp, "text") == "héllo"


@pytest.mark.anyio
async def test_blob_parser_keeps_bytes_and_media_type() -> None:
    resp = httpx.Response(200, content=b"%PDF-1.7", headers={"Content-Type": "application/pdf"})
    blob = await parse_response(resp, "blob")
    assert blob == Blob(content=b"%PDF-1.7", content_type="application/pdf")
    assert blob.size == 8


@pytest.mark.anyio
async def test_blob_without_content_type_header() -> None:
    blob = await parse_response(httpx.Response(200, content=b"abc"), "blob")
    assert blob.content_type == ""


@pytest.mark.anyio
async def test_malformed_json_raises_decode_error() -> None:
    with pytest.raises(json.JSONDecodeError):
        await parse_response(httpx.Response(200, content=b"{broken"), "json")


@pytest.mark.anyio
async def test_unknown_response_type_raises_value_error() -> None:
    with pytest.raises(ValueError, match="arraybuffer"):
        await parse_response(httpx.Response(200, content=b""), "arraybuffer")
