"""
custom_fetch/executor/url_builder.py

Full-URL construction: base_url + url + "?" + query.

Values are form-encoded (space -> "+") in mapping order. Scalars are
rendered the way a browser URLSearchParams would render them:
True/False -> "true"/"false", None -> "null". Lists and tuples repeat the key.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional, Tuple
from urllib.parse import urlencode


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


def build_query_string(params: Optional[Mapping[str, Any]]) -> str:
    """Return "?k=v&..." for a non-empty mapping, "" otherwise."""
    if not params:
        return ""

    pairs: List[Tuple[str, str]] = []
    for key, value in params.items():
        if isinstance(value, (list, tuple)):
            pairs.extend((str(key), _stringify(item)) for item in value)
        else:
            pairs.append((str(key), _stringify(value)))

    return "?" + urlencode(pairs)


def build_full_url(url: str, base_url: str = "", params: Optional[Mapping[str, Any]] = None) -> str:
    return f"{base_url}{url}{build_query_string(params)}"
