"""
Pytest configuration and shared fixtures for MDB_FACADE tests.

This module provides:
- A fake native cursor
- Mock native client / database / collection fixtures
- Connection, Database and Collection fixtures wired to the mocks
"""

from typing import Any, Dict, List
from unittest.mock import MagicMock

import pytest
from bson.son import SON

from mdb_facade.config import FacadeConfig
from mdb_facade.core.codec import DocumentCodec
from mdb_facade.database import Connection
from mdb_facade.driver.base import (NativeClient, NativeCollection,
                                    NativeDatabase, NativeWriteResult)
from mdb_facade.driver.pymongo_driver import PyMongoDocumentModel


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests that need no MongoDB server")


# ============================================================================
# NATIVE DRIVER FAKES
# ============================================================================


class FakeNativeCursor:
    """Native cursor over a fixed list of documents that records close()."""

    def __init__(self, documents: List[Any]):
        self._documents = iter(documents)
        self.close_calls = 0

    def __iter__(self):
        return self

    def __next__(self):
        return next(self._documents)

    def close(self) -> None:
        self.close_calls += 1


def make_native_collection(name: str) -> MagicMock:
    collection = MagicMock(spec=NativeCollection)
    collection.name = name
    collection.find.return_value = FakeNativeCursor([])
    collection.find_one.return_value = None
    collection.insert.return_value = NativeWriteResult(n=1)
    collection.save.return_value = NativeWriteResult(n=1)
    collection.update.return_value = NativeWriteResult(n=1)
    collection.remove.return_value = NativeWriteResult(n=1)
    collection.index_information.return_value = SON(
        [("_id_", SON([("key", [("_id", 1)])]))]
    )
    collection.options.return_value = SON()
    return collection


def make_native_database(name: str) -> MagicMock:
    database = MagicMock(spec=NativeDatabase)
    database.name = name
    collections: Dict[str, MagicMock] = {}

    def get_collection(collection_name: str) -> MagicMock:
        if collection_name not in collections:
            collections[collection_name] = make_native_collection(collection_name)
        return collections[collection_name]

    database.get_collection.side_effect = get_collection
    database.command.return_value = SON([("ok", 1.0)])
    database.collection_exists.return_value = False
    database.namespace_catalog.return_value = []
    database.last_error.return_value = SON([("err", None), ("n", 0), ("ok", 1.0)])
    return database


# ============================================================================
# MOCK CLIENT FIXTURES
# ============================================================================


@pytest.fixture
def document_model() -> PyMongoDocumentModel:
    return PyMongoDocumentModel()


@pytest.fixture
def codec(document_model) -> DocumentCodec:
    return DocumentCodec(document_model)


@pytest.fixture
def mock_native_client(document_model) -> MagicMock:
    """Native client whose databases and collections are cached MagicMocks."""
    client = MagicMock(spec=NativeClient)
    client.document_model = document_model
    databases: Dict[str, MagicMock] = {}

    def get_database(name: str) -> MagicMock:
        if name not in databases:
            databases[name] = make_native_database(name)
        return databases[name]

    client.get_database.side_effect = get_database
    client.database_names.return_value = ["admin", "test_db"]
    client.server_version.return_value = "7.0.2"
    return client


@pytest.fixture
def native_cursor_factory():
    """Build a FakeNativeCursor over the given native documents."""
    return FakeNativeCursor


# ============================================================================
# FACADE FIXTURES
# ============================================================================


@pytest.fixture
def facade_config() -> FacadeConfig:
    return FacadeConfig(mongo_uri="mongodb://localhost:27017", db_name="test_db")


@pytest.fixture
def connection(facade_config, mock_native_client) -> Connection:
    return Connection(facade_config, client=mock_native_client)


@pytest.fixture
def database(connection):
    return connection.database("test_db")


@pytest.fixture
def native_database(mock_native_client) -> MagicMock:
    return mock_native_client.get_database("test_db")


@pytest.fixture
def collection(database):
    return database["users"]


@pytest.fixture
def native_collection(native_database) -> MagicMock:
    return native_database.get_collection("users")
