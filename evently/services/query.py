"""Helpers for building search, filter and pagination URLs."""

from __future__ import annotations

from typing import Any, Iterable
from urllib.parse import parse_qsl, urlencode


def _parse(params: str) -> dict[str, Any]:
    parsed: dict[str, Any] = {}
    for key, value in parse_qsl(params.lstrip("?"), keep_blank_values=True):
        if key in parsed:
            existing = parsed[key]
            parsed[key] = [*existing, value] if isinstance(existing, list) else [existing, value]
        else:
            parsed[key] = value
    return parsed


def _stringify(path: str, query: dict[str, Any]) -> str:
    """Render ``path?query`` with sorted keys, skipping ``None`` values."""
    pairs = []
    for key in sorted(query):
        value = query[key]
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            pairs.extend((key, str(v)) for v in value if v is not None)
        else:
            pairs.append((key, str(value)))
    encoded = urlencode(pairs)
    return f"{path}?{encoded}" if encoded else path


def merge_query_param(params: str, key: str, value: Any, path: str = "") -> str:
    """Return *path* with *params* plus ``key=value`` (replacing any old value).

    A ``None`` value drops the key from the output.
    """
    query = _parse(params)
    query[key] = value
    return _stringify(path, query)


def remove_query_params(params: str, keys_to_remove: Iterable[str], path: str = "") -> str:
    """Return *path* with *params* minus every key in *keys_to_remove*."""
    query = _parse(params)
    for key in keys_to_remove:
        query.pop(key, None)
    return _stringify(path, query)
