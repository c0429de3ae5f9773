"""Error taxonomy shared by the Visor core modules."""

from __future__ import annotations

import json
from typing import NoReturn


class VisorError(RuntimeError):
    """Base class for errors raised by the Visor core."""


class ConfigurationError(VisorError):
    """Raised when the connection target is missing or invalid."""


class DatabaseConnectionError(VisorError):
    """Raised when the database connector fails or times out."""


class UnknownTransformationError(VisorError):
    """Raised when a transformation type is not in the catalogue."""


def handle_error(error: object) -> NoReturn:
    """Re-raise any thrown value as a :class:`VisorError`.

    Exceptions keep their message and are chained; strings become the message;
    anything else is JSON-encoded into an "Unknown error" message.
    """

    if isinstance(error, VisorError):
        raise error
    if isinstance(error, BaseException):
        raise VisorError(f"Error: {error}") from error
    if isinstance(error, str):
        raise VisorError(f"Error: {error}")
    raise VisorError(f"Unknown error: {json.dumps(error, default=repr)}")


__all__ = [
    "ConfigurationError",
    "DatabaseConnectionError",
    "UnknownTransformationError",
    "VisorError",
    "handle_error",
]
