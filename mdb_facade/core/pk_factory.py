"""
Primary-key factories.

A factory is handed to each Collection at construction and assigns an `_id`
to documents that arrive without one. The default generates ObjectIds.
"""

from typing import Any, Callable, MutableMapping, Protocol

from bson import ObjectId

from ..constants import ID_FIELD


class PrimaryKeyFactory(Protocol):
    def create_pk(self, document: MutableMapping[str, Any]) -> MutableMapping[str, Any]: ...


class ObjectIdFactory:
    """
    Assigns a fresh identifier to documents lacking `_id`.

    Args:
        generator: Zero-argument callable producing identifiers (default ObjectId)
    """

    def __init__(self, generator: Callable[[], Any] = ObjectId):
        self._generator = generator

    def new_id(self) -> Any:
        return self._generator()

    def create_pk(self, document: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
        """Set `_id` on `document` in place unless present, and return it."""
        if document.get(ID_FIELD) is None:
            document[ID_FIELD] = self.new_id()
        return document
