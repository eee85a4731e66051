"""Application configuration helpers."""

from __future__ import annotations

from .errors import ConfigurationError
from .logging import configure_logging
from .processing import (
    DEFAULT_CHUNK_SIZE,
    ClientConfig,
    ProcessingConfig,
    get_client_config,
    get_processing_config,
)
from .storage import (
    DatabaseConfig,
    StorageConfig,
    get_database_config,
    get_database_uri,
    get_storage_config,
)

__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "ClientConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "ProcessingConfig",
    "StorageConfig",
    "configure_logging",
    "get_client_config",
    "get_database_config",
    "get_database_uri",
    "get_processing_config",
    "get_storage_config",
]
