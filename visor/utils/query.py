"""Query-string editing helpers using the nested-bracket convention.

``a[b]=1`` parses to ``{"a": {"b": "1"}}`` and ``a[0]=x&a[1]=y`` (or ``a[]``)
to ``{"a": ["x", "y"]}``. Serialisation writes nested records as
``key[sub]=value`` and sequences with explicit indices so the output parses
back to the same structure.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping
from urllib.parse import quote, unquote_plus

QueryParams = Mapping[str, Any]


def parse_query(text: str) -> dict[str, Any]:
    """Parse a query string into nested dicts and lists."""

    root: dict[str, Any] = {}
    query = text[1:] if text.startswith("?") else text
    for chunk in query.split("&"):
        if not chunk:
            continue
        raw_key, _, raw_value = chunk.partition("=")
        key = unquote_plus(raw_key)
        if not key:
            continue
        _assign(root, _split_key(key), unquote_plus(raw_value))
    return {key: _collapse(value) if isinstance(value, dict) else value for key, value in root.items()}


def stringify_query(params: QueryParams) -> str:
    """Serialise params, skipping ``None`` values."""

    pairs: list[str] = []
    for key, value in params.items():
        for name, leaf in _flatten(str(key), value):
            pairs.append(f"{quote(name, safe='[]')}={quote(leaf, safe='')}")
    return "&".join(pairs)


def form_url_query(
    params: str | QueryParams,
    key: str,
    value: Any,
    *,
    path: str | None = None,
) -> str:
    """Return the query with ``key`` set to ``value``."""

    current = _coerce(params)
    current[key] = value
    return _with_path(path, stringify_query(current))


def remove_keys_from_query(
    params: str | QueryParams,
    keys_to_remove: Iterable[str],
    *,
    path: str | None = None,
) -> str:
    """Return the query without ``keys_to_remove`` or null-valued keys."""

    current = _coerce(params)
    for key in keys_to_remove:
        current.pop(key, None)
    remaining = {key: value for key, value in current.items() if value is not None}
    return _with_path(path, stringify_query(remaining))


def _coerce(params: str | QueryParams) -> dict[str, Any]:
    if isinstance(params, str):
        return parse_query(params)
    return dict(params)


def _with_path(path: str | None, query: str) -> str:
    if path is None:
        return query
    return f"{path}?{query}" if query else path


def _split_key(key: str) -> list[str]:
    head, bracket, rest = key.partition("[")
    if not bracket or not head:
        return [key]
    segments = [head]
    remainder = "[" + rest
    while remainder.startswith("["):
        end = remainder.find("]")
        if end == -1:
            # Unbalanced brackets: keep the tail as a literal segment.
            segments.append(remainder)
            return segments
        segments.append(remainder[1:end])
        remainder = remainder[end + 1 :]
    if remainder:
        segments[-1] += remainder
    return segments


def _assign(node: dict[str, Any], segments: list[str], value: str) -> None:
    for segment in segments[:-1]:
        if segment == "":
            segment = str(len(node))
        child = node.get(segment)
        if not isinstance(child, dict):
            child = {}
            node[segment] = child
        node = child
    last = segments[-1]
    if last == "":
        last = str(len(node))
    existing = node.get(last)
    if existing is None:
        node[last] = value
    elif isinstance(existing, list):
        existing.append(value)
    elif isinstance(existing, dict):
        existing[str(len(existing))] = value
    else:
        node[last] = [existing, value]


def _collapse(node: dict[str, Any]) -> Any:
    collapsed = {key: _collapse(value) if isinstance(value, dict) else value for key, value in node.items()}
    if collapsed and all(key.isdigit() for key in collapsed):
        return [collapsed[key] for key in sorted(collapsed, key=int)]
    return collapsed


def _flatten(prefix: str, value: Any) -> Iterable[tuple[str, str]]:
    if value is None:
        return
    if isinstance(value, Mapping):
        for key, child in value.items():
            yield from _flatten(f"{prefix}[{key}]", child)
    elif isinstance(value, (list, tuple)):
        for index, child in enumerate(value):
            yield from _flatten(f"{prefix}[{index}]", child)
    elif isinstance(value, bool):
        yield prefix, "true" if value else "false"
    else:
        yield prefix, str(value)


__all__ = [
    "QueryParams",
    "form_url_query",
    "parse_query",
    "remove_keys_from_query",
    "stringify_query",
]
