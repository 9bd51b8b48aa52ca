"""
Collection namespace validation.

The server encodes hierarchy ("users.comments") and command dispatch
("$cmd") in the namespace string itself, so a malformed collection name can
silently address a different target. Names are checked once, when a
Collection is created or renamed.
"""

from typing import Any

from ..constants import INTERNAL_NAMESPACE_PATTERN
from ..exceptions import InvalidArgumentError, InvalidNamespaceError
from .codec import is_symbol, symbol_to_str


def collection_name_str(name: Any) -> str:
    """
    Coerce a collection name argument to a string.

    Raises:
        InvalidArgumentError: If the name is neither a string nor a symbol
    """
    if is_symbol(name):
        return symbol_to_str(name)
    if isinstance(name, str):
        return name
    raise InvalidArgumentError(
        f"collection name must be a string or symbol, got {type(name).__name__}",
        context={"argument": "name"},
    )


def validate_collection_name(name: Any, allow_internal: bool = True) -> str:
    """
    Validate a collection name and return it as a string.

    Args:
        name: Collection name (string or Enum member)
        allow_internal: Accept the command namespace ("$cmd...") and the main
            oplog ("...oplog.$main"), the only names allowed to contain '$'

    Returns:
        The validated name

    Raises:
        InvalidArgumentError: If the name is not a string or symbol
        InvalidNamespaceError: If the name breaks a naming rule
    """
    name = collection_name_str(name)

    if not name or ".." in name:
        raise InvalidNamespaceError(
            "collection names cannot be empty or contain '..'", namespace=name
        )

    if "$" in name and not (allow_internal and INTERNAL_NAMESPACE_PATTERN.search(name)):
        raise InvalidNamespaceError("collection names must not contain '$'", namespace=name)

    if name.startswith(".") or name.endswith("."):
        raise InvalidNamespaceError(
            "collection names must not start or end with '.'", namespace=name
        )

    return name
