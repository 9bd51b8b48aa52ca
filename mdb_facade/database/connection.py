"""
Connection facade.

Entry point of the package: owns the native client, the document codec and
the primary-key factory shared by every database and collection it hands
out. The underlying MongoClient is thread-safe; the facade adds no locking
of its own.

Usage:
    from mdb_facade import Connection

    with Connection.from_uri("mongodb://localhost:27017") as conn:
        users = conn["app"]["users"]
        users.insert({"name": "Ada"})
"""

import logging
from typing import Any, List, Optional

from ..config import FacadeConfig
from ..core.codec import DocumentCodec
from ..core.pk_factory import ObjectIdFactory, PrimaryKeyFactory
from ..driver.base import NativeClient
from ..driver.pymongo_driver import PyMongoClient
from ..exceptions import ConfigurationError
from .database import Database

logger = logging.getLogger(__name__)


class Connection:
    """
    A connection to a MongoDB deployment.

    Args:
        config: Connection settings (read from the environment when None)
        client: Native client to use instead of building one from config
        pk_factory: Identifier factory injected into every collection
            (an ObjectIdFactory when None)
    """

    def __init__(
        self,
        config: Optional[FacadeConfig] = None,
        client: Optional[NativeClient] = None,
        pk_factory: Optional[PrimaryKeyFactory] = None,
    ):
        self.config = config or FacadeConfig()
        if client is None:
            self.config.validate()
            client = PyMongoClient.from_config(self.config)
        self._client = client
        self._codec = DocumentCodec(client.document_model)
        self._pk_factory = pk_factory or ObjectIdFactory()

    @classmethod
    def from_uri(
        cls, uri: str, pk_factory: Optional[PrimaryKeyFactory] = None, **options: Any
    ) -> "Connection":
        """
        Connect with a MongoDB URI.

        Args:
            uri: mongodb:// or mongodb+srv:// URI
            pk_factory: Identifier factory for inserts
            **options: Extra keyword arguments for pymongo.MongoClient
        """
        config = FacadeConfig(mongo_uri=uri)
        config.validate()
        return cls(config, PyMongoClient.from_config(config, **options), pk_factory)

    @property
    def native(self) -> NativeClient:
        return self._client

    @property
    def codec(self) -> DocumentCodec:
        return self._codec

    @property
    def pk_factory(self) -> PrimaryKeyFactory:
        return self._pk_factory

    def database(self, name: Optional[str] = None) -> Database:
        """
        Get a database, defaulting to the configured DB_NAME.

        Raises:
            ConfigurationError: If no name is given and none is configured
        """
        name = name or self.config.db_name
        if not name:
            raise ConfigurationError(
                "database name is required (pass it or set DB_NAME)", config_key="db_name"
            )
        return Database(name, self)

    __getitem__ = database

    def database_names(self) -> List[str]:
        return self._client.database_names()

    def drop_database(self, name: str) -> None:
        logger.warning(f"Dropping database '{name}'")
        self._client.drop_database(name)

    def server_version(self) -> str:
        return self._client.server_version()

    def close(self) -> None:
        logger.info("Closing MongoDB connection")
        self._client.close()

    def __enter__(self) -> "Connection":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
