"""Tests for the error helpers."""

from __future__ import annotations

import re

import pytest

from visor.errors import ConfigurationError, VisorError, handle_error


def test_handle_error_wraps_exceptions() -> None:
    original = ValueError("bad input")

    with pytest.raises(VisorError, match="^Error: bad input$") as info:
        handle_error(original)

    assert info.value.__cause__ is original


def test_handle_error_wraps_strings() -> None:
    with pytest.raises(VisorError, match="^Error: upload failed$"):
        handle_error("upload failed")


def test_handle_error_serialises_unknown_values() -> None:
    with pytest.raises(VisorError, match=re.escape('Unknown error: {"code": 42}')):
        handle_error({"code": 42})


def test_handle_error_passes_visor_errors_through() -> None:
    error = ConfigurationError("Missing database URL")

    with pytest.raises(ConfigurationError) as info:
        handle_error(error)

    assert info.value is error
