"""
Configuration management for MDB_FACADE.

Explicit arguments win over environment variables, which win over the
defaults in mdb_facade.constants.

Example:
    # Using environment variables
    config = FacadeConfig()
    connection = Connection(config)

    # Or using direct parameters
    config = FacadeConfig(mongo_uri="mongodb://localhost:27017", db_name="my_db")
"""

import os

from .constants import (DEFAULT_MAX_POOL_SIZE, DEFAULT_MIN_POOL_SIZE,
                        DEFAULT_MONGO_URI,
                        DEFAULT_SERVER_SELECTION_TIMEOUT_MS)
from .exceptions import ConfigurationError


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(
            f"{name} must be an integer, got {raw!r}", config_key=name, config_value=raw
        ) from e


class FacadeConfig:
    """
    Connection settings for the facade.

    Attributes:
        mongo_uri: MongoDB connection URI (MONGO_URI)
        db_name: Default database name (DB_NAME), may be empty
        max_pool_size: Maximum connection pool size (MONGO_MAX_POOL_SIZE)
        min_pool_size: Minimum connection pool size (MONGO_MIN_POOL_SIZE)
        server_selection_timeout_ms: Server selection timeout
            (MONGO_SERVER_SELECTION_TIMEOUT_MS)
    """

    def __init__(
        self,
        mongo_uri: str | None = None,
        db_name: str | None = None,
        max_pool_size: int | None = None,
        min_pool_size: int | None = None,
        server_selection_timeout_ms: int | None = None,
    ):
        self.mongo_uri = mongo_uri or os.getenv("MONGO_URI") or DEFAULT_MONGO_URI
        self.db_name = db_name or os.getenv("DB_NAME", "")
        self.max_pool_size = (
            max_pool_size
            if max_pool_size is not None
            else _int_from_env("MONGO_MAX_POOL_SIZE", DEFAULT_MAX_POOL_SIZE)
        )
        self.min_pool_size = (
            min_pool_size
            if min_pool_size is not None
            else _int_from_env("MONGO_MIN_POOL_SIZE", DEFAULT_MIN_POOL_SIZE)
        )
        self.server_selection_timeout_ms = (
            server_selection_timeout_ms
            if server_selection_timeout_ms is not None
            else _int_from_env(
                "MONGO_SERVER_SELECTION_TIMEOUT_MS", DEFAULT_SERVER_SELECTION_TIMEOUT_MS
            )
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ConfigurationError: If a value is missing or out of range
        """
        if not self.mongo_uri.startswith(("mongodb://", "mongodb+srv://")):
            raise ConfigurationError(
                "mongo_uri must start with mongodb:// or mongodb+srv://",
                config_key="mongo_uri",
                config_value=self.mongo_uri,
            )

        if self.max_pool_size < 1:
            raise ConfigurationError(
                f"max_pool_size must be >= 1, got {self.max_pool_size}",
                config_key="max_pool_size",
                config_value=self.max_pool_size,
            )

        if self.min_pool_size < 0:
            raise ConfigurationError(
                f"min_pool_size must be >= 0, got {self.min_pool_size}",
                config_key="min_pool_size",
                config_value=self.min_pool_size,
            )

        if self.min_pool_size > self.max_pool_size:
            raise ConfigurationError(
                f"min_pool_size ({self.min_pool_size}) cannot be greater than "
                f"max_pool_size ({self.max_pool_size})",
                config_key="min_pool_size",
                config_value=self.min_pool_size,
            )

        if self.server_selection_timeout_ms < 1:
            raise ConfigurationError(
                f"server_selection_timeout_ms must be >= 1, got "
                f"{self.server_selection_timeout_ms}",
                config_key="server_selection_timeout_ms",
                config_value=self.server_selection_timeout_ms,
            )

    def client_options(self) -> dict:
        """Keyword arguments for pymongo.MongoClient."""
        return {
            "maxPoolSize": self.max_pool_size,
            "minPoolSize": self.min_pool_size,
            "serverSelectionTimeoutMS": self.server_selection_timeout_ms,
        }
