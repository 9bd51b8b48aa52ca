"""
Write-concern resolution.

Writes accept a loosely-typed `safe` argument. `resolve_write_concern` maps
every shape of it onto one canonical, immutable WriteConcern:

    None            -> w=-1  no response requested, error channel never consulted
    False           -> w=0   unacknowledged
    True            -> w=1   acknowledged
    {"w": 2, ...}   -> w/wtimeout/fsync from the mapping, w defaulting to 1
    anything else   -> w=0   unacknowledged

Resolution never fails; malformed input degrades to unacknowledged.
"""

import logging
from collections.abc import Mapping
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt
from pydantic import ValidationError as PydanticValidationError

from ..constants import (SAFETY_OPTION_KEYS, W_ACKNOWLEDGED, W_NO_RESPONSE,
                         W_UNACKNOWLEDGED)
from .codec import is_symbol, symbol_to_str

logger = logging.getLogger(__name__)


class WriteConcern(BaseModel):
    """Canonical acknowledgement policy for a write."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    w: Union[StrictInt, str] = W_ACKNOWLEDGED
    wtimeout: StrictInt = Field(0, ge=0)
    fsync: StrictBool = False

    @property
    def acknowledged(self) -> bool:
        """True when the server acknowledges the write."""
        return isinstance(self.w, str) or self.w >= W_ACKNOWLEDGED

    @property
    def expects_response(self) -> bool:
        """False only for the fire-and-forget level."""
        return self.w != W_NO_RESPONSE


NO_RESPONSE = WriteConcern(w=W_NO_RESPONSE)
UNACKNOWLEDGED = WriteConcern(w=W_UNACKNOWLEDGED)
ACKNOWLEDGED = WriteConcern(w=W_ACKNOWLEDGED)


def _from_options(options: Mapping) -> WriteConcern:
    normalized = {
        (symbol_to_str(key) if is_symbol(key) else key): value for key, value in options.items()
    }
    unknown = [key for key in normalized if key not in SAFETY_OPTION_KEYS]
    if unknown:
        logger.warning(f"Ignoring unknown write concern options: {unknown}")

    w = normalized.get("w")
    wtimeout = normalized.get("wtimeout")
    try:
        return WriteConcern(
            w=W_ACKNOWLEDGED if w is None or isinstance(w, bool) else w,
            wtimeout=0 if wtimeout is None else wtimeout,
            fsync=bool(normalized.get("fsync")),
        )
    except PydanticValidationError as e:
        logger.warning(f"Malformed write concern options {dict(options)!r}, using w=0: {e}")
        return UNACKNOWLEDGED


def resolve_write_concern(safety: Any = None) -> WriteConcern:
    """
    Map a safety specification onto a WriteConcern.

    Args:
        safety: None, a bool, or a mapping with any of `w`, `wtimeout`, `fsync`

    Returns:
        The canonical WriteConcern
    """
    if safety is None:
        return NO_RESPONSE
    if safety is False:
        return UNACKNOWLEDGED
    if safety is True:
        return ACKNOWLEDGED
    if isinstance(safety, WriteConcern):
        return safety
    if isinstance(safety, Mapping):
        return _from_options(safety)
    return UNACKNOWLEDGED
