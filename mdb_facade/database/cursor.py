"""
Cursor over decoded query results.

Wraps the native cursor returned by the driver, decoding each document as it
is fetched. A cursor is released with close(); scoped finds close it for the
caller, unscoped ones leave that to the caller.
"""

import logging
from typing import Any, Dict, Iterator, List, Optional

from ..core.codec import DocumentCodec
from ..core.query_options import NormalizedQuery
from ..driver.base import NativeCursor

logger = logging.getLogger(__name__)


class Cursor:
    """
    Iterator of documents matching a NormalizedQuery.

    Example:
        cursor = collection.find({"status": "active"}, limit=10)
        try:
            for doc in cursor:
                ...
        finally:
            cursor.close()

        # or
        with collection.find({"status": "active"}) as cursor:
            docs = cursor.to_list()
    """

    __slots__ = ("_native", "_codec", "_query", "_collection_name", "_closed")

    def __init__(
        self,
        native_cursor: NativeCursor,
        codec: DocumentCodec,
        query: NormalizedQuery,
        collection_name: str = "",
    ):
        self._native = native_cursor
        self._codec = codec
        self._query = query
        self._collection_name = collection_name
        self._closed = False

    @property
    def query(self) -> NormalizedQuery:
        """The normalized query this cursor was opened with."""
        return self._query

    @property
    def closed(self) -> bool:
        return self._closed

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        return self

    def __next__(self) -> Dict[str, Any]:
        if self._closed:
            raise StopIteration
        return self._codec.decode(next(self._native))

    def next_document(self) -> Optional[Dict[str, Any]]:
        """Return the next document, or None once the cursor is exhausted."""
        return next(self, None)

    def to_list(self, length: Optional[int] = None) -> List[Dict[str, Any]]:
        """Fetch up to `length` remaining documents (all of them when None)."""
        docs: List[Dict[str, Any]] = []
        for doc in self:
            docs.append(doc)
            if length is not None and len(docs) >= length:
                break
        return docs

    def close(self) -> None:
        """Release the server-side cursor. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        logger.debug(f"Closing cursor on '{self._collection_name}'")
        self._native.close()

    def __enter__(self) -> "Cursor":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<Cursor {self._collection_name!r} {state}>"
