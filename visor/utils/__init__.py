"""Generic helpers shared by the Visor services."""

from __future__ import annotations

from .debounce import DebounceGate, debounce
from .merge import deep_merge, is_record
from .query import form_url_query, parse_query, remove_keys_from_query, stringify_query

__all__ = [
    "DebounceGate",
    "debounce",
    "deep_merge",
    "form_url_query",
    "is_record",
    "parse_query",
    "remove_keys_from_query",
    "stringify_query",
]
