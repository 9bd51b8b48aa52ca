"""
Database facade layer.

Connection -> Database -> Collection -> Cursor, following the familiar
MongoDB API.
"""

from .collection import Collection, generate_index_name, index_keys
from .connection import Connection
from .cursor import Cursor
from .database import Database

__all__ = [
    "Connection",
    "Database",
    "Collection",
    "Cursor",
    "generate_index_name",
    "index_keys",
]
