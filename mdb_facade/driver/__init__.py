"""
Native driver layer.

Defines the capability interface the facade consumes and its PyMongo
implementation.
"""

from .base import (NativeClient, NativeCollection, NativeCursor,
                   NativeDatabase, NativeDocumentModel, NativeKind,
                   NativeWriteResult)
from .pymongo_driver import (PyMongoClient, PyMongoCollection,
                             PyMongoDatabase, PyMongoDocumentModel,
                             to_pymongo_write_concern)

__all__ = [
    # Capability interface
    "NativeClient",
    "NativeDatabase",
    "NativeCollection",
    "NativeCursor",
    "NativeDocumentModel",
    "NativeKind",
    "NativeWriteResult",
    # PyMongo implementation
    "PyMongoClient",
    "PyMongoDatabase",
    "PyMongoCollection",
    "PyMongoDocumentModel",
    "to_pymongo_write_concern",
]
