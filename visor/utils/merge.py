"""Structural merge for nested string-keyed records."""

from __future__ import annotations

from typing import Any, Mapping


def is_record(value: object) -> bool:
    """Return True for nested records; everything else merges as a scalar."""

    return isinstance(value, Mapping)


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any] | None = None) -> Mapping[str, Any]:
    """Return a new record combining ``override`` with ``base``.

    Values from ``base`` win for shared keys unless both sides hold nested
    records, which are merged the same way. Neither input is modified. Nesting
    is walked with an explicit stack so deep inputs do not hit the recursion
    limit.
    """

    if override is None:
        return base

    result: dict[str, Any] = dict(override)
    stack: list[tuple[dict[str, Any], Mapping[str, Any]]] = [(result, base)]
    while stack:
        target, source = stack.pop()
        for key, value in source.items():
            current = target.get(key)
            if is_record(value) and is_record(current):
                merged = dict(current)
                target[key] = merged
                stack.append((merged, value))
            else:
                target[key] = value
    return result


__all__ = ["deep_merge", "is_record"]
