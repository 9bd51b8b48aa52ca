"""
MDB_FACADE - MongoDB facade

A synchronous, dynamically-typed document database API over PyMongo:
connections, databases, collections, cursors, indexes and write concerns,
with plain Python dicts and lists on the caller's side.
"""

# Configuration
from .config import FacadeConfig
from .constants import (ASCENDING, DESCENDING, GEO2D, GEO2DSPHERE, HASHED,
                        TEXT)
# Document model and option normalization
from .core import (DocumentCodec, NormalizedQuery, ObjectIdFactory,
                   WriteConcern, normalize_query, resolve_write_concern,
                   validate_collection_name)
# Facade
from .database import Collection, Connection, Cursor, Database
# Errors
from .exceptions import (ConfigurationError, DocumentEncodingError,
                         InvalidArgumentError, InvalidNamespaceError,
                         MongoFacadeError, NotImplementedCapabilityError,
                         OperationFailureError, QueryOptionsError)

__version__ = "0.1.0"

__all__ = [
    # Facade
    "Connection",
    "Database",
    "Collection",
    "Cursor",
    "FacadeConfig",
    # Core
    "DocumentCodec",
    "WriteConcern",
    "resolve_write_concern",
    "NormalizedQuery",
    "normalize_query",
    "validate_collection_name",
    "ObjectIdFactory",
    # Directions
    "ASCENDING",
    "DESCENDING",
    "GEO2D",
    "GEO2DSPHERE",
    "TEXT",
    "HASHED",
    # Errors
    "MongoFacadeError",
    "InvalidNamespaceError",
    "InvalidArgumentError",
    "DocumentEncodingError",
    "QueryOptionsError",
    "OperationFailureError",
    "NotImplementedCapabilityError",
    "ConfigurationError",
]
