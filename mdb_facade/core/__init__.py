"""
Document model translation and option normalization.
"""

from .codec import DocumentCodec
from .namespace import validate_collection_name
from .pk_factory import ObjectIdFactory, PrimaryKeyFactory
from .query_options import NormalizedQuery, QueryOptions, normalize_query
from .write_concern import (ACKNOWLEDGED, NO_RESPONSE, UNACKNOWLEDGED,
                            WriteConcern, resolve_write_concern)

__all__ = [
    "DocumentCodec",
    "WriteConcern",
    "resolve_write_concern",
    "NO_RESPONSE",
    "UNACKNOWLEDGED",
    "ACKNOWLEDGED",
    "QueryOptions",
    "NormalizedQuery",
    "normalize_query",
    "validate_collection_name",
    "ObjectIdFactory",
    "PrimaryKeyFactory",
]
