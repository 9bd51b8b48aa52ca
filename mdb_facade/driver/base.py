"""
Native driver capability interface.

The facade never talks to PyMongo directly: collections, databases and the
codec consume these protocols, and mdb_facade.driver.pymongo_driver provides
the implementation. Tests substitute MagicMock objects built against the
same surface.
"""

import enum
from dataclasses import dataclass
from typing import (Any, Iterable, Iterator, List, Mapping, Optional,
                    Protocol, Sequence, Tuple)


class NativeKind(enum.Enum):
    """Structural tag of a native value, used by the codec to dispatch decoding."""

    MAP = "map"
    LIST = "list"
    SCALAR = "scalar"


@dataclass(frozen=True)
class NativeWriteResult:
    """
    Outcome of a native write.

    Attributes:
        n: Number of documents affected (0 when an unacknowledged write
            carries no count)
        error: Error message for drivers that report write failures in the
            result instead of raising. The PyMongo adapter raises and never
            sets it.
        acknowledged: Whether the server acknowledged the write
    """

    n: int = 0
    error: Optional[str] = None
    acknowledged: bool = True


class NativeDocumentModel(Protocol):
    """Constructors and accessors for the driver's document object graph."""

    def new_map(self) -> Any: ...

    def put(self, native_map: Any, key: str, value: Any) -> None: ...

    def new_list(self, size: int) -> Any: ...

    def set_item(self, native_list: Any, index: int, value: Any) -> None: ...

    def kind(self, value: Any) -> NativeKind: ...

    def map_items(self, native_map: Any) -> Iterable[Tuple[str, Any]]: ...

    def list_items(self, native_list: Any) -> Iterable[Any]: ...


class NativeCursor(Protocol):
    def __iter__(self) -> Iterator[Any]: ...

    def __next__(self) -> Any: ...

    def close(self) -> None: ...


class NativeCollection(Protocol):
    """Collection-level capabilities. Every document argument is already encoded."""

    name: str

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
    ) -> NativeCursor: ...

    def find_one(self, selector: Any, projection: Any) -> Any: ...

    def insert(self, documents: List[Any], write_concern: Any) -> NativeWriteResult: ...

    def save(self, document: Any, write_concern: Any) -> NativeWriteResult: ...

    def update(
        self, selector: Any, document: Any, upsert: bool, multi: bool, write_concern: Any
    ) -> NativeWriteResult: ...

    def remove(self, selector: Any, write_concern: Any) -> NativeWriteResult: ...

    def create_index(self, keys: Sequence[Tuple[str, Any]], name: str, options: Any) -> str: ...

    def drop_index(self, name: str) -> None: ...

    def drop_indexes(self) -> None: ...

    def drop(self) -> None: ...

    def rename(self, new_name: str) -> None: ...

    def index_information(self) -> Any: ...

    def options(self) -> Any: ...


class NativeDatabase(Protocol):
    name: str

    def get_collection(self, name: str) -> NativeCollection: ...

    def command(self, command: Any) -> Any: ...

    def collection_exists(self, name: str) -> bool: ...

    def create_collection(self, name: str, options: Any) -> NativeCollection: ...

    def drop_collection(self, name: str) -> None: ...

    def namespace_catalog(self, name: Optional[str] = None) -> List[Any]: ...

    def last_error(self) -> Any: ...


class NativeClient(Protocol):
    document_model: NativeDocumentModel

    def get_database(self, name: str) -> NativeDatabase: ...

    def database_names(self) -> List[str]: ...

    def drop_database(self, name: str) -> None: ...

    def server_version(self) -> str: ...

    def close(self) -> None: ...


def native_options(options: Optional[Mapping[str, Any]]) -> dict:
    """Copy of an options mapping with None-valued entries removed."""
    return {k: v for k, v in (options or {}).items() if v is not None}
