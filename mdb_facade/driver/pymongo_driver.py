"""
PyMongo implementation of the native driver capability interface.

Native maps are `bson.son.SON` instances and native lists are plain lists;
the client is created with `document_class=SON` so results come back in the
same shape the codec produces.

This module is part of MDB_FACADE - MongoDB facade.
"""

import logging
from collections.abc import Mapping
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from bson.son import SON
from pymongo import MongoClient
from pymongo.collection import Collection as PyMongoCollectionType
from pymongo.cursor import Cursor as PyMongoCursor
from pymongo.database import Database as PyMongoDatabaseType
from pymongo.write_concern import WriteConcern as PyMongoWriteConcern

from ..config import FacadeConfig
from ..constants import ASCENDING, DEFAULT_APP_NAME, ID_FIELD
from .base import NativeKind, NativeWriteResult, native_options

logger = logging.getLogger(__name__)


def to_pymongo_write_concern(concern) -> PyMongoWriteConcern:
    """
    Map a canonical write concern onto PyMongo's.

    PyMongo has no "no response" level, so w=-1 and w=0 both become w=0.
    wtimeout is only sent when positive.
    """
    if not concern.acknowledged:
        return PyMongoWriteConcern(w=0)
    kwargs: dict[str, Any] = {"w": concern.w}
    if concern.wtimeout > 0:
        kwargs["wtimeout"] = concern.wtimeout
    if concern.fsync:
        kwargs["fsync"] = True
    return PyMongoWriteConcern(**kwargs)


def _is_operator_document(document: Mapping) -> bool:
    return any(str(key).startswith("$") for key in document.keys())


def _update_result(result) -> NativeWriteResult:
    if not result.acknowledged:
        return NativeWriteResult(n=0, acknowledged=False)
    upserted = 1 if result.upserted_id is not None else 0
    return NativeWriteResult(n=result.matched_count + upserted)


class PyMongoDocumentModel:
    """SON/list document graph used by PyMongo."""

    def new_map(self) -> SON:
        return SON()

    def put(self, native_map: SON, key: str, value: Any) -> None:
        native_map[key] = value

    def new_list(self, size: int) -> list:
        return [None] * size

    def set_item(self, native_list: list, index: int, value: Any) -> None:
        native_list[index] = value

    def kind(self, value: Any) -> NativeKind:
        if isinstance(value, Mapping):
            return NativeKind.MAP
        if isinstance(value, list):
            return NativeKind.LIST
        return NativeKind.SCALAR

    def map_items(self, native_map: Mapping) -> Iterable[Tuple[str, Any]]:
        return native_map.items()

    def list_items(self, native_list: list) -> Iterable[Any]:
        return iter(native_list)


class PyMongoCollection:
    """Wraps a `pymongo.collection.Collection`."""

    __slots__ = ("_collection",)

    def __init__(self, collection: PyMongoCollectionType):
        self._collection = collection

    @property
    def name(self) -> str:
        return self._collection.name

    def _with_concern(self, write_concern) -> PyMongoCollectionType:
        return self._collection.with_options(
            write_concern=to_pymongo_write_concern(write_concern)
        )

    def find(
        self,
        selector: Any,
        projection: Any,
        skip: int,
        limit: int,
        sort: Optional[Sequence[Tuple[str, Any]]],
        hint: Any,
        snapshot: bool,
        batch_size: Optional[int],
        timeout_enabled: bool,
    ) -> PyMongoCursor:
        kwargs: dict[str, Any] = {
            "filter": selector,
            "projection": projection,
            "skip": skip,
            "limit": limit,
            "no_cursor_timeout": not timeout_enabled,
        }
        if sort:
            kwargs["sort"] = list(sort)
        if hint:
            kwargs["hint"] = list(hint.items())
        elif snapshot:
            # Snapshot mode was removed from the server; walking the _id index
            # gives the same no-duplicates guarantee.
            logger.debug(f"Emulating snapshot on '{self.name}' with an _id hint")
            kwargs["hint"] = [(ID_FIELD, ASCENDING)]
        if batch_size:
            kwargs["batch_size"] = batch_size
        return self._collection.find(**kwargs)

    def find_one(self, selector: Any, projection: Any) -> Any:
        return self._collection.find_one(selector, projection)

    def insert(self, documents: List[Any], write_concern) -> NativeWriteResult:
        collection = self._with_concern(write_concern)
        if len(documents) == 1:
            result = collection.insert_one(documents[0])
        else:
            result = collection.insert_many(documents)
        if not result.acknowledged:
            return NativeWriteResult(n=0, acknowledged=False)
        return NativeWriteResult(n=len(documents))

    def save(self, document: Any, write_concern) -> NativeWriteResult:
        collection = self._with_concern(write_concern)
        result = collection.replace_one({ID_FIELD: document[ID_FIELD]}, document, upsert=True)
        return _update_result(result)

    def update(
        self, selector: Any, document: Any, upsert: bool, multi: bool, write_concern
    ) -> NativeWriteResult:
        collection = self._with_concern(write_concern)
        if multi:
            result = collection.update_many(selector, document, upsert=upsert)
        elif _is_operator_document(document):
            result = collection.update_one(selector, document, upsert=upsert)
        else:
            result = collection.replace_one(selector, document, upsert=upsert)
        return _update_result(result)

    def remove(self, selector: Any, write_concern) -> NativeWriteResult:
        # remove reports whether anything was deleted; w=0 is raised to w=1.
        if write_concern.acknowledged:
            collection = self._with_concern(write_concern)
        else:
            logger.debug(f"Acknowledging remove on '{self.name}' to read the removed count")
            collection = self._collection.with_options(write_concern=PyMongoWriteConcern(w=1))
        result = collection.delete_many(selector)
        if result.acknowledged:
            return NativeWriteResult(n=result.deleted_count)
        return NativeWriteResult(n=(result.raw_result or {}).get("n", 0), acknowledged=False)

    def create_index(self, keys: Sequence[Tuple[str, Any]], name: str, options: Any) -> str:
        return self._collection.create_index(list(keys), name=name, **native_options(options))

    def drop_index(self, name: str) -> None:
        self._collection.drop_index(name)

    def drop_indexes(self) -> None:
        self._collection.drop_indexes()

    def drop(self) -> None:
        self._collection.drop()

    def rename(self, new_name: str) -> None:
        self._collection.rename(new_name)

    def index_information(self) -> Any:
        return self._collection.index_information()

    def options(self) -> Any:
        return self._collection.options()


class PyMongoDatabase:
    """Wraps a `pymongo.database.Database`."""

    __slots__ = ("_database",)

    def __init__(self, database: PyMongoDatabaseType):
        self._database = database

    @property
    def name(self) -> str:
        return self._database.name

    def get_collection(self, name: str) -> PyMongoCollection:
        return PyMongoCollection(self._database.get_collection(name))

    def command(self, command: Any) -> Any:
        # Not-ok responses are judged by the facade, not turned into
        # OperationFailure here.
        return self._database.command(command, check=False)

    def collection_exists(self, name: str) -> bool:
        return name in self._database.list_collection_names(filter={"name": name})

    def create_collection(self, name: str, options: Any) -> PyMongoCollection:
        return PyMongoCollection(
            self._database.create_collection(name, **native_options(options))
        )

    def drop_collection(self, name: str) -> None:
        self._database.drop_collection(name)

    def namespace_catalog(self, name: Optional[str] = None) -> List[SON]:
        """Collection entries named by full namespace (`<db>.<collection>`)."""
        filter_ = {"name": name} if name is not None else None
        catalog = []
        for info in self._database.list_collections(filter=filter_):
            entry = SON()
            entry["name"] = f"{self.name}.{info['name']}"
            entry["options"] = info.get("options", SON())
            catalog.append(entry)
        return catalog

    def last_error(self) -> Any:
        return self._database.command("getLastError", check=False)


class PyMongoClient:
    """Wraps a `pymongo.MongoClient`."""

    def __init__(self, client: MongoClient):
        self._client = client
        self.document_model = PyMongoDocumentModel()

    @classmethod
    def from_config(cls, config: FacadeConfig, **options: Any) -> "PyMongoClient":
        client_options = config.client_options()
        client_options.update(options)
        client_options.setdefault("appname", DEFAULT_APP_NAME)
        logger.info(
            f"Creating MongoDB client (max_pool_size={config.max_pool_size}, "
            f"min_pool_size={config.min_pool_size})"
        )
        return cls(MongoClient(config.mongo_uri, document_class=SON, **client_options))

    def get_database(self, name: str) -> PyMongoDatabase:
        return PyMongoDatabase(self._client[name])

    def database_names(self) -> List[str]:
        return self._client.list_database_names()

    def drop_database(self, name: str) -> None:
        self._client.drop_database(name)

    def server_version(self) -> str:
        return self._client.server_info()["version"]

    def close(self) -> None:
        self._client.close()
