"""Core services for the Visor image-transformation backend."""

from __future__ import annotations

from .config import AppSettings, DatabaseSettings, load_settings
from .context import AppContext, create_context
from .database import ConnectionCache, ConnectionState
from .errors import ConfigurationError, DatabaseConnectionError, VisorError

__version__ = "0.1.0"

__all__ = [
    "AppContext",
    "AppSettings",
    "ConfigurationError",
    "ConnectionCache",
    "ConnectionState",
    "DatabaseConnectionError",
    "DatabaseSettings",
    "VisorError",
    "__version__",
    "create_context",
    "load_settings",
]
