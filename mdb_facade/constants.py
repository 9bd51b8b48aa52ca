"""
Constants for MDB_FACADE.

This module contains all shared constants used across the codebase to avoid
magic numbers and improve maintainability.
"""

import re
from typing import Final

# ============================================================================
# DOCUMENT CONSTANTS
# ============================================================================

ID_FIELD: Final[str] = "_id"
"""Primary-key field of every document."""

# ============================================================================
# INDEX / SORT DIRECTION CONSTANTS
# ============================================================================

ASCENDING: Final[int] = 1
DESCENDING: Final[int] = -1
GEO2D: Final[str] = "2d"
GEO2DSPHERE: Final[str] = "2dsphere"
TEXT: Final[str] = "text"
HASHED: Final[str] = "hashed"

INDEX_DIRECTIONS: Final[tuple] = (ASCENDING, DESCENDING, GEO2D, GEO2DSPHERE, TEXT, HASHED)
"""Directions accepted in an index specification."""

SORT_DIRECTION_ALIASES: Final[dict] = {
    1: ASCENDING,
    -1: DESCENDING,
    "asc": ASCENDING,
    "ascending": ASCENDING,
    "desc": DESCENDING,
    "descending": DESCENDING,
}
"""Sort direction spellings and the canonical direction they map to."""

# ============================================================================
# WRITE CONCERN CONSTANTS
# ============================================================================

W_NO_RESPONSE: Final[int] = -1
"""Fire-and-forget: not even the error channel is consulted."""

W_UNACKNOWLEDGED: Final[int] = 0
"""Write is sent without waiting for an acknowledgement."""

W_ACKNOWLEDGED: Final[int] = 1
"""Write is acknowledged by the primary."""

SAFETY_OPTION_KEYS: Final[tuple[str, ...]] = ("w", "wtimeout", "fsync")
"""Keys recognized in a structured safety specification."""

# ============================================================================
# NAMESPACE CONSTANTS
# ============================================================================

SYSTEM_NAMESPACE_PREFIX: Final[str] = "system."
"""Prefix of server-internal collections hidden from collection listings."""

INTERNAL_NAMESPACE_PATTERN: Final[re.Pattern] = re.compile(r"(^\$cmd)|(oplog\.\$main)")
"""Namespaces allowed to contain '$' (command namespace and the main oplog)."""

# ============================================================================
# CONNECTION DEFAULTS
# ============================================================================

DEFAULT_MONGO_URI: Final[str] = "mongodb://localhost:27017"
"""URI used when neither an argument nor MONGO_URI is given."""

DEFAULT_MAX_POOL_SIZE: Final[int] = 50
"""Default maximum MongoDB connection pool size."""

DEFAULT_MIN_POOL_SIZE: Final[int] = 10
"""Default minimum MongoDB connection pool size."""

DEFAULT_SERVER_SELECTION_TIMEOUT_MS: Final[int] = 5000
"""Default server selection timeout in milliseconds."""

DEFAULT_APP_NAME: Final[str] = "MDB_FACADE"
"""Application name reported to the server."""
