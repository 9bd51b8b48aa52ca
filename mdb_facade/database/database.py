"""
Database facade.

Hands out Collection objects, enumerates collections, and runs database
commands. Commands are the path for anything not modelled as a method:
build the command document, encode it, dispatch it, decode the response.

This module is part of MDB_FACADE - MongoDB facade.
"""

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from ..constants import SYSTEM_NAMESPACE_PREFIX
from ..core.codec import DocumentCodec, is_symbol, symbol_to_str
from ..core.namespace import collection_name_str, validate_collection_name
from ..core.pk_factory import PrimaryKeyFactory
from ..driver.base import NativeDatabase
from ..exceptions import (InvalidArgumentError, NotImplementedCapabilityError,
                          OperationFailureError)
from .collection import Collection

if TYPE_CHECKING:
    from .connection import Connection

logger = logging.getLogger(__name__)


class Database:
    """
    A named database on a Connection.

    Example:
        db = connection.database("blog")
        posts = db["posts"]
        db.command("dbstats")
    """

    def __init__(self, name: str, connection: "Connection"):
        if not isinstance(name, str) or not name:
            raise InvalidArgumentError(
                f"database name must be a non-empty string, got {name!r}",
                context={"argument": "name"},
            )
        self._name = name
        self._connection = connection
        self._native: NativeDatabase = connection.native.get_database(name)

    @property
    def name(self) -> str:
        return self._name

    @property
    def connection(self) -> "Connection":
        return self._connection

    @property
    def native(self) -> NativeDatabase:
        return self._native

    @property
    def codec(self) -> DocumentCodec:
        return self._connection.codec

    @property
    def pk_factory(self) -> PrimaryKeyFactory:
        return self._connection.pk_factory

    def __repr__(self) -> str:
        return f"Database({self._name!r})"

    # ------------------------------------------------------------------
    # Collections
    # ------------------------------------------------------------------

    def collection(self, name: Any) -> Collection:
        """
        Get a collection by name.

        Raises:
            InvalidNamespaceError: If the name is invalid
        """
        return Collection(self, name)

    __getitem__ = collection

    def full_collection_name(self, collection_name: str) -> str:
        return f"{self._name}.{collection_name}"

    def collections_info(self, collection_name: Optional[Any] = None) -> List[Dict[str, Any]]:
        """
        Namespace catalog entries, each with the full `name` and its `options`.

        Args:
            collection_name: Restrict the catalog to this collection
        """
        if collection_name is not None:
            collection_name = collection_name_str(collection_name)
        return self.codec.decode(self._native.namespace_catalog(collection_name))

    def collection_names(self) -> List[str]:
        """Names of the user collections in this database, without the database prefix."""
        prefix = f"{self._name}."
        names = []
        for info in self.collections_info():
            full_name = info.get("name") or ""
            if not full_name.startswith(prefix) or "$" in full_name:
                continue
            name = full_name[len(prefix):]
            if name.startswith(SYSTEM_NAMESPACE_PREFIX):
                continue
            names.append(name)
        return names

    def collections(self) -> List[Collection]:
        return [Collection(self, name) for name in self.collection_names()]

    def has_collection(self, name: Any) -> bool:
        return self._native.collection_exists(collection_name_str(name))

    def create_collection(self, name: Any, **options: Any) -> Collection:
        """
        Explicitly create a collection.

        Args:
            name: Collection name
            **options: capped, size, max, validator, ...

        Returns:
            The new Collection
        """
        name = validate_collection_name(name)
        logger.info(f"Creating collection '{self.full_collection_name(name)}'")
        self._native.create_collection(name, self.codec.encode(options))
        return Collection(self, name)

    def drop_collection(self, name: Any) -> bool:
        name = collection_name_str(name)
        logger.info(f"Dropping collection '{self.full_collection_name(name)}'")
        self._native.drop_collection(name)
        return True

    def rename_collection(self, from_name: Any, to_name: Any) -> Collection:
        """
        Rename a collection.

        Raises:
            InvalidNamespaceError: If to_name is not a valid collection name
        """
        from_name = collection_name_str(from_name)
        to_name = validate_collection_name(to_name, allow_internal=False)
        logger.info(
            f"Renaming collection '{self.full_collection_name(from_name)}' to '{to_name}'"
        )
        self._native.get_collection(from_name).rename(to_name)
        return Collection(self, to_name)

    # ------------------------------------------------------------------
    # Indexes
    # ------------------------------------------------------------------

    def create_index(self, collection_name: Any, field_or_spec: Any, unique: bool = False) -> str:
        return self.collection(collection_name).create_index(field_or_spec, unique=unique)

    def drop_index(self, collection_name: Any, index_name: Any) -> None:
        self.collection(collection_name).drop_index(index_name)

    def index_information(self, collection_name: Any) -> Dict[str, Any]:
        return self.collection(collection_name).index_information()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @staticmethod
    def ok(response: Optional[Mapping[str, Any]]) -> bool:
        """True when a command response reports success."""
        return bool(response) and response.get("ok") == 1

    def command(self, selector: Any, check_response: bool = False) -> Dict[str, Any]:
        """
        Run a database command.

        Args:
            selector: Command name (sent as {name: True}) or a full command
                document whose first key is the command name
            check_response: Raise OperationFailureError on a not-ok response

        Returns:
            The decoded server response
        """
        if isinstance(selector, str) or is_symbol(selector):
            name = selector if isinstance(selector, str) else symbol_to_str(selector)
            command: Mapping[str, Any] = {name: True}
        elif isinstance(selector, Mapping) and selector:
            command = selector
        else:
            raise InvalidArgumentError(
                "command must be a name or a non-empty mapping, "
                f"got {type(selector).__name__}",
                context={"argument": "selector"},
            )

        command_name = str(next(iter(command)))
        logger.debug(f"Running command '{command_name}' on database '{self._name}'")
        response = self.codec.decode(self._native.command(self.codec.encode(command)))

        if check_response and not self.ok(response):
            errmsg = response.get("errmsg", "") if isinstance(response, Mapping) else ""
            logger.error(f"Command '{command_name}' failed on '{self._name}': {errmsg}")
            raise OperationFailureError(
                f"{command_name} command failed: {errmsg}",
                command=command_name,
                errmsg=errmsg,
                response=response,
            )
        return response

    def stats(self) -> Dict[str, Any]:
        """Database statistics (dbstats command)."""
        return self.command("dbstats")

    def last_status(self) -> Dict[str, Any]:
        """Status of the last operation on this connection (getLastError)."""
        return self.codec.decode(self._native.last_error())

    # ------------------------------------------------------------------
    # Unmodelled administration
    # ------------------------------------------------------------------

    def authenticate(self, username: str, password: str, save_auth: bool = True) -> None:
        raise NotImplementedCapabilityError("authenticate")

    def add_user(self, username: str, password: str) -> None:
        raise NotImplementedCapabilityError("add_user")

    def remove_user(self, username: str) -> None:
        raise NotImplementedCapabilityError("remove_user")

    def logout(self) -> None:
        raise NotImplementedCapabilityError("logout")

    def error(self) -> None:
        raise NotImplementedCapabilityError("error")

    def previous_error(self) -> None:
        raise NotImplementedCapabilityError("previous_error")

    def reset_error_history(self) -> None:
        raise NotImplementedCapabilityError("reset_error_history")

    def eval(self, code: Any, *args: Any) -> None:
        raise NotImplementedCapabilityError("eval")

    def dereference(self, dbref: Any) -> None:
        raise NotImplementedCapabilityError("dereference")

    def profiling_level(self) -> None:
        raise NotImplementedCapabilityError("profiling_level")

    def set_profiling_level(self, level: Any) -> None:
        raise NotImplementedCapabilityError("set_profiling_level")

    def profiling_info(self) -> None:
        raise NotImplementedCapabilityError("profiling_info")

    def validate_collection(self, name: Any) -> None:
        raise NotImplementedCapabilityError("validate_collection")
