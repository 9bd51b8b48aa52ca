"""
Document codec.

Converts plain Python documents (dicts, lists, scalars) into the native
driver's document graph and back. Encoding builds fresh native objects and
never mutates its input; decoding dispatches on the NativeKind tag reported
by the native document model.

Usage:
    codec = DocumentCodec(client.document_model)
    native = codec.encode({"name": "Ada", "tags": ["math"]})
    assert codec.decode(native) == {"name": "Ada", "tags": ["math"]}
"""

import datetime
import enum
import re
import uuid
from collections.abc import Mapping
from typing import Any

from bson import (Binary, Code, DBRef, Decimal128, Int64, MaxKey, MinKey,
                  ObjectId, Regex, Timestamp)

from ..driver.base import NativeDocumentModel, NativeKind
from ..exceptions import DocumentEncodingError

# Values the native layer accepts as-is. bool is covered by int.
SCALAR_TYPES: tuple = (
    str,
    int,
    float,
    bytes,
    type(None),
    datetime.datetime,
    ObjectId,
    Binary,
    Code,
    DBRef,
    Decimal128,
    Int64,
    MaxKey,
    MinKey,
    Regex,
    Timestamp,
    uuid.UUID,
    re.Pattern,
)


def symbol_to_str(value: enum.Enum) -> str:
    """String form of a symbolic value: its value when that is a string, else its name."""
    if isinstance(value.value, str):
        return value.value
    return value.name


def is_symbol(value: Any) -> bool:
    return isinstance(value, enum.Enum)


def _join(path: str, key: Any) -> str:
    return f"{path}.{key}" if path else str(key)


class DocumentCodec:
    """
    Bidirectional converter between Python documents and native documents.

    The codec holds no state besides the native document model, so one
    instance can be shared by every collection of a connection.
    """

    __slots__ = ("_model",)

    def __init__(self, document_model: NativeDocumentModel):
        self._model = document_model

    def encode(self, value: Any, _path: str = "") -> Any:
        """
        Encode a Python value into its native representation.

        Raises:
            DocumentEncodingError: If a key or value has no native representation
        """
        if isinstance(value, Mapping):
            return self._encode_map(value, _path)
        if isinstance(value, (list, tuple)):
            return self._encode_list(value, _path)
        if is_symbol(value):
            return symbol_to_str(value)
        if isinstance(value, SCALAR_TYPES):
            return value
        raise DocumentEncodingError(
            f"Cannot encode value of type {type(value).__name__}",
            value_type=type(value).__name__,
            path=_path or None,
        )

    def _encode_map(self, document: Mapping, path: str) -> Any:
        native = self._model.new_map()
        for key, value in document.items():
            if is_symbol(key):
                key = symbol_to_str(key)
            elif not isinstance(key, str):
                raise DocumentEncodingError(
                    f"Document keys must be strings, got {type(key).__name__}",
                    value_type=type(key).__name__,
                    path=path or None,
                )
            self._model.put(native, key, self.encode(value, _join(path, key)))
        return native

    def _encode_list(self, values, path: str) -> Any:
        native = self._model.new_list(len(values))
        for index, value in enumerate(values):
            self._model.set_item(native, index, self.encode(value, _join(path, index)))
        return native

    def decode(self, native: Any) -> Any:
        """Decode a native value into plain dicts, lists and scalars."""
        kind = self._model.kind(native)
        if kind is NativeKind.MAP:
            return {key: self.decode(value) for key, value in self._model.map_items(native)}
        if kind is NativeKind.LIST:
            return [self.decode(value) for value in self._model.list_items(native)]
        return native

