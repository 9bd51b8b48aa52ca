"""
Collection facade.

Exposes document CRUD, indexing and command-backed aggregation helpers on
top of the native driver. Arguments are validated and normalized here,
documents pass through the codec on the way in and out, and everything
else is delegated to the driver.

This module is part of MDB_FACADE - MongoDB facade.

Usage:
    users = db.collection("users")
    user_id = users.insert({"name": "Ada"})
    users.update({"_id": user_id}, {"$set": {"lang": "en"}})

    # Scoped consumption: the cursor is closed when the block exits
    with users.find_scoped({"lang": "en"}, timeout=False) as cursor:
        for user in cursor:
            ...
"""

import logging
from collections.abc import Mapping, MutableMapping
from contextlib import contextmanager
from typing import (TYPE_CHECKING, Any, Callable, Dict, Iterator, List,
                    Optional, Tuple, Union)

from bson import Code, ObjectId

from ..constants import ASCENDING, ID_FIELD, INDEX_DIRECTIONS
from ..core.codec import is_symbol, symbol_to_str
from ..core.namespace import collection_name_str, validate_collection_name
from ..core.pk_factory import PrimaryKeyFactory
from ..core.query_options import (NormalizedQuery, normalize_fields,
                                  normalize_hint, normalize_query,
                                  normalize_sort)
from ..core.write_concern import resolve_write_concern
from ..exceptions import InvalidArgumentError
from .cursor import Cursor

if TYPE_CHECKING:
    from .database import Database

logger = logging.getLogger(__name__)

IndexKeys = List[Tuple[str, Any]]


def _code(value: Any) -> Code:
    return value if isinstance(value, Code) else Code(value)


def _require_mapping(value: Any, argument: str) -> Mapping:
    if not isinstance(value, Mapping):
        raise InvalidArgumentError(
            f"{argument} must be a mapping, got {type(value).__name__}",
            context={"argument": argument},
        )
    return value


def _key_name(value: Any, argument: str) -> str:
    if is_symbol(value):
        return symbol_to_str(value)
    if isinstance(value, str):
        return value
    raise InvalidArgumentError(
        f"{argument} must name fields with strings, got {type(value).__name__}",
        context={"argument": argument},
    )


def _index_direction(value: Any) -> Any:
    if is_symbol(value):
        value = symbol_to_str(value)
    if isinstance(value, bool) or value not in INDEX_DIRECTIONS:
        raise InvalidArgumentError(
            f"Invalid index direction {value!r}", context={"argument": "spec"}
        )
    return value


def index_keys(spec: Any) -> IndexKeys:
    """
    Normalize an index specification to ordered (field, direction) pairs.

    Accepts a bare field name, a mapping of field -> direction, or a list
    whose items are field names or (field, direction) pairs.
    """
    if isinstance(spec, str) or is_symbol(spec):
        return [(_key_name(spec, "spec"), ASCENDING)]
    if isinstance(spec, Mapping):
        items = list(spec.items())
    elif isinstance(spec, (list, tuple)):
        items = [item if isinstance(item, (list, tuple)) else (item, ASCENDING) for item in spec]
    else:
        raise InvalidArgumentError(
            f"Index spec must be a field name, list or mapping, got {type(spec).__name__}",
            context={"argument": "spec"},
        )
    if not items:
        raise InvalidArgumentError("Index spec must name at least one field")

    keys: IndexKeys = []
    for item in items:
        if len(item) != 2:
            raise InvalidArgumentError(
                f"Index spec items must be (field, direction) pairs, got {item!r}",
                context={"argument": "spec"},
            )
        field, direction = item
        keys.append((_key_name(field, "spec"), _index_direction(direction)))
    return keys


def generate_index_name(keys: IndexKeys) -> str:
    """Derive the default index name, e.g. [("a", 1), ("b", -1)] -> "a_1_b_-1"."""
    return "_".join(f"{field}_{direction}" for field, direction in keys)


class Collection:
    """
    A named collection of documents.

    Args:
        db: Owning Database
        name: Collection name (validated, never changes afterwards)
        pk_factory: Identifier factory used by insert/save (defaults to the
            database's factory)
    """

    def __init__(
        self,
        db: "Database",
        name: Any,
        pk_factory: Optional[PrimaryKeyFactory] = None,
    ):
        self._name = validate_collection_name(name)
        self._db = db
        self._codec = db.codec
        self._pk_factory = pk_factory or db.pk_factory
        self._hint: Optional[Dict[str, Any]] = None
        self._native = db.native.get_collection(self._name)

    @property
    def name(self) -> str:
        return self._name

    @property
    def db(self) -> "Database":
        return self._db

    @property
    def full_name(self) -> str:
        return self._db.full_collection_name(self._name)

    @property
    def pk_factory(self) -> PrimaryKeyFactory:
        return self._pk_factory

    @property
    def hint(self) -> Optional[Dict[str, Any]]:
        """Default hint applied to finds that do not pass one."""
        return self._hint

    @hint.setter
    def hint(self, hint: Any) -> None:
        self._hint = normalize_hint(hint)

    def __getitem__(self, name: Any) -> "Collection":
        """Sub-collection: db["users"]["comments"] is "users.comments"."""
        return self._db.collection(f"{self._name}.{collection_name_str(name)}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Collection):
            return NotImplemented
        return self.full_name == other.full_name

    def __hash__(self) -> int:
        return hash(self.full_name)

    def __repr__(self) -> str:
        return f"Collection({self.full_name!r})"

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _open_cursor(self, query: NormalizedQuery) -> Cursor:
        encode = self._codec.encode
        native_cursor = self._native.find(
            encode(query.selector),
            encode(query.fields),
            query.skip,
            query.limit,
            query.sort,
            encode(query.hint),
            query.snapshot,
            query.batch_size,
            query.timeout,
        )
        return Cursor(native_cursor, self._codec, query, self._name)

    def find(
        self,
        selector: Optional[Mapping[str, Any]] = None,
        consumer: Optional[Callable[[Cursor], Any]] = None,
        **options: Any,
    ) -> Union[Cursor, Any]:
        """
        Query the collection.

        Without a consumer the open Cursor is returned and closing it is the
        caller's job. With a consumer, the cursor is passed to it and closed
        when it returns or raises; find then returns the consumer's result.

        Args:
            selector: Query document ({} matches everything)
            consumer: Callable receiving the cursor
            **options: fields, skip, limit, sort, hint, snapshot, batch_size,
                timeout (timeout=False requires a consumer)

        Raises:
            QueryOptionsError: On unknown or invalid options
        """
        query = normalize_query(
            selector, options, has_consumer=consumer is not None, default_hint=self._hint
        )
        cursor = self._open_cursor(query)
        if consumer is None:
            return cursor
        with cursor:
            return consumer(cursor)

    @contextmanager
    def find_scoped(
        self, selector: Optional[Mapping[str, Any]] = None, **options: Any
    ) -> Iterator[Cursor]:
        """Context-manager form of find(consumer=...); the cursor is closed on exit."""
        query = normalize_query(selector, options, has_consumer=True, default_hint=self._hint)
        cursor = self._open_cursor(query)
        try:
            yield cursor
        finally:
            cursor.close()

    def find_one(self, spec_or_id: Any = None, fields: Any = None) -> Optional[Dict[str, Any]]:
        """
        Return a single document, or None if nothing matches.

        Args:
            spec_or_id: None (match anything), an ObjectId (matched against
                `_id`) or a query document
            fields: Projection, as for find

        Raises:
            InvalidArgumentError: If spec_or_id has another type
        """
        if spec_or_id is None:
            spec: Mapping = {}
        elif isinstance(spec_or_id, ObjectId):
            spec = {ID_FIELD: spec_or_id}
        elif isinstance(spec_or_id, Mapping):
            spec = spec_or_id
        else:
            raise InvalidArgumentError(
                "spec_or_id must be an ObjectId, a mapping or None, "
                f"got {type(spec_or_id).__name__}",
                context={"argument": "spec_or_id"},
            )
        native = self._native.find_one(
            self._codec.encode(spec), self._codec.encode(normalize_fields(fields))
        )
        return self._codec.decode(native)

    def count(self, selector: Optional[Mapping[str, Any]] = None) -> int:
        """Number of documents matching `selector` (all documents by default)."""
        command: Dict[str, Any] = {"count": self._name}
        if selector:
            command["query"] = _require_mapping(selector, "selector")
        response = self._db.command(command, check_response=True)
        return int(response.get("n", 0))

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def insert(self, doc_or_docs: Any, safe: Any = False) -> Any:
        """
        Insert one document or a list of documents.

        Documents without `_id` get one from the primary-key factory; the
        caller's documents are updated in place.

        Args:
            doc_or_docs: A document or a list of documents
            safe: Write concern specification (see resolve_write_concern)

        Returns:
            The `_id` of the document, or the list of `_id`s in input order
        """
        batch = isinstance(doc_or_docs, (list, tuple))
        docs = list(doc_or_docs) if batch else [doc_or_docs]
        for doc in docs:
            if not isinstance(doc, MutableMapping):
                raise InvalidArgumentError(
                    f"documents must be mutable mappings, got {type(doc).__name__}",
                    context={"argument": "doc_or_docs"},
                )
        if not docs:
            return []

        concern = resolve_write_concern(safe)
        for doc in docs:
            self._pk_factory.create_pk(doc)
        self._native.insert([self._codec.encode(doc) for doc in docs], concern)

        ids = [doc[ID_FIELD] for doc in docs]
        return ids if batch else ids[0]

    def save(self, doc: MutableMapping[str, Any], safe: Any = False) -> Any:
        """
        Insert or replace a document keyed on its `_id`.

        A document without `_id` gets a new one injected before writing.

        Returns:
            The document's `_id`
        """
        if not isinstance(doc, MutableMapping):
            raise InvalidArgumentError(
                f"document must be a mutable mapping, got {type(doc).__name__}",
                context={"argument": "doc"},
            )
        concern = resolve_write_concern(safe)
        self._pk_factory.create_pk(doc)
        self._native.save(self._codec.encode(doc), concern)
        return doc[ID_FIELD]

    def update(
        self,
        selector: Mapping[str, Any],
        document: Mapping[str, Any],
        upsert: Any = False,
        multi: Any = False,
        safe: Any = False,
    ) -> int:
        """
        Update the first matching document, or all of them when `multi` is set.

        Returns:
            Number of documents matched or upserted (0 for unacknowledged writes)
        """
        _require_mapping(selector, "selector")
        _require_mapping(document, "document")
        concern = resolve_write_concern(safe)
        result = self._native.update(
            self._codec.encode(selector),
            self._codec.encode(document),
            bool(upsert),
            bool(multi),
            concern,
        )
        return result.n

    def remove(self, selector: Optional[Mapping[str, Any]] = None, safe: Any = False) -> bool:
        """
        Remove matching documents (all documents when selector is None or {}).

        Returns:
            True only if the driver reported no error and at least one
            document was removed
        """
        selector = _require_mapping({} if selector is None else selector, "selector")
        concern = resolve_write_concern(safe)
        result = self._native.remove(self._codec.encode(selector), concern)
        return result.error is None and result.n > 0

    def find_and_modify(
        self,
        query: Optional[Mapping[str, Any]] = None,
        fields: Any = None,
        sort: Any = None,
        update: Optional[Mapping[str, Any]] = None,
        remove: bool = False,
        new: bool = False,
        upsert: bool = False,
    ) -> Optional[Dict[str, Any]]:
        """
        Atomically update (or remove) and return one document.

        Args:
            query: Selector for the document to modify
            fields: Projection of the returned document
            sort: Picks the document when several match
            update: Update document (ignored when remove is set)
            remove: Remove the matched document instead of updating it
            new: Return the document after modification
            upsert: Insert when nothing matches

        Returns:
            The matched document, or None
        """
        command: Dict[str, Any] = {"findAndModify": self._name, "query": query or {}}
        sort_spec = normalize_sort(sort)
        if sort_spec:
            command["sort"] = dict(sort_spec)
        projection = normalize_fields(fields)
        if projection:
            command["fields"] = (
                projection if isinstance(projection, dict) else {f: 1 for f in projection}
            )
        if remove:
            command["remove"] = True
        else:
            command["update"] = update or {}
        if new:
            command["new"] = True
        if upsert:
            command["upsert"] = True

        response = self._db.command(command, check_response=True)
        return response.get("value")

    # ------------------------------------------------------------------
    # Indexes
    # ------------------------------------------------------------------

    def create_index(self, spec: Any, **options: Any) -> str:
        """
        Create an index.

        Args:
            spec: A field name (ascending index), a list of field names and/or
                (field, direction) pairs, or a field -> direction mapping.
                Directions: ASCENDING, DESCENDING, GEO2D, GEO2DSPHERE, TEXT,
                HASHED.
            **options: unique, background, sparse, min, max,
                expireAfterSeconds, name, ...

        Returns:
            The index name
        """
        keys = index_keys(spec)
        name = options.pop("name", None) or generate_index_name(keys)
        logger.debug(f"Creating index '{name}' on '{self.full_name}'")
        self._native.create_index(keys, name, options)
        return name

    ensure_index = create_index

    def drop_index(self, name_or_spec: Any) -> None:
        """Drop an index by name or by the specification it was created from."""
        if isinstance(name_or_spec, str):
            name = name_or_spec
        else:
            name = generate_index_name(index_keys(name_or_spec))
        self._native.drop_index(name)

    def drop_indexes(self) -> None:
        """Drop every index except the one on `_id`."""
        self._native.drop_indexes()

    def index_information(self) -> Dict[str, Any]:
        """Index name -> index description."""
        return self._codec.decode(self._native.index_information())

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def map_reduce(self, map: Any, reduce: Any, **options: Any) -> Any:
        """
        Run a map/reduce job over this collection.

        Args:
            map: JavaScript map function (str or bson.Code)
            reduce: JavaScript reduce function (str or bson.Code)
            **options: query, sort, limit, finalize, out, keeptemp, verbose, ...

        Returns:
            The output Collection, or the list of results for inline output

        Raises:
            OperationFailureError: If the server reports failure
        """
        command: Dict[str, Any] = {
            "mapreduce": self._name,
            "map": _code(map),
            "reduce": _code(reduce),
        }
        if options.get("finalize") is not None:
            options["finalize"] = _code(options["finalize"])
        command.update(options)

        response = self._db.command(command, check_response=True)
        if "results" in response:
            return response["results"]
        result = response.get("result")
        if isinstance(result, Mapping):
            db_name = result.get("db", self._db.name)
            return self._db.connection.database(db_name).collection(result["collection"])
        return self._db.collection(result)

    mapreduce = map_reduce

    def group(
        self,
        key: Any,
        condition: Optional[Mapping[str, Any]],
        initial: Mapping[str, Any],
        reduce: Any,
        finalize: Any = None,
    ) -> List[Dict[str, Any]]:
        """
        Group documents and aggregate them with a JavaScript reducer.

        Args:
            key: List of fields to group by, a JavaScript key function, or None
            condition: Selector limiting the grouped documents
            initial: Initial value of the aggregation object
            reduce: JavaScript reduce function
            finalize: Optional JavaScript function applied to each group

        Returns:
            The grouped items

        Raises:
            OperationFailureError: If the server reports failure
        """
        group: Dict[str, Any] = {
            "ns": self._name,
            "$reduce": _code(reduce),
            "cond": condition,
            "initial": initial,
        }
        if key is not None:
            if isinstance(key, (list, tuple)):
                group["key"] = {_key_name(field, "key"): 1 for field in key}
            else:
                group["$keyf"] = _code(key)
        if finalize is not None:
            group["finalize"] = _code(finalize)

        response = self._db.command({"group": group}, check_response=True)
        return response["retval"]

    def distinct(self, key: Any, query: Optional[Mapping[str, Any]] = None) -> List[Any]:
        """
        Distinct values of `key` (dot notation allowed) across matching documents.

        Raises:
            InvalidArgumentError: If key is not a string or symbol
            OperationFailureError: If the server reports failure
        """
        if not (isinstance(key, str) or is_symbol(key)):
            raise InvalidArgumentError(
                f"key must be a string or symbol, got {type(key).__name__}",
                context={"argument": "key"},
            )
        command: Dict[str, Any] = {"distinct": self._name, "key": _key_name(key, "key")}
        if query is not None:
            command["query"] = _require_mapping(query, "query")
        response = self._db.command(command, check_response=True)
        return response["values"]

    def stats(self) -> Dict[str, Any]:
        """Collection statistics (collstats command)."""
        return self._db.command({"collstats": self._name})

    def options(self) -> Dict[str, Any]:
        """Options this collection was created with."""
        return self._codec.decode(self._native.options())

    # ------------------------------------------------------------------
    # Administration
    # ------------------------------------------------------------------

    def rename(self, new_name: Any) -> "Collection":
        """
        Rename this collection.

        This object keeps its old name; use the returned Collection.

        Raises:
            InvalidNamespaceError: If new_name is not a valid collection name
        """
        return self._db.rename_collection(self._name, new_name)

    def drop(self) -> None:
        """Drop the entire collection."""
        logger.info(f"Dropping collection '{self.full_name}'")
        self._native.drop()
