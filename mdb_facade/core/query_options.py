"""
Find option normalization.

`normalize_query` turns the selector and keyword options given to
Collection.find into a fully-defaulted NormalizedQuery, or raises
QueryOptionsError before anything reaches the driver.

Recognized options:
- fields: list of field names or a field -> 0/1 mapping; [] means ["_id"]
- skip: number of documents to skip (>= 0, default 0)
- limit: maximum number of documents, 0 means unbounded (default 0)
- sort: field name, (field, direction) pairs or a mapping
- hint: field name, list of field names or a field -> direction mapping
- snapshot: walk the _id index so no document is returned twice
- batch_size: documents per batch, 0 lets the server decide
- timeout: False keeps the cursor alive indefinitely; only allowed when
  the results are consumed inside a scoped find
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import (BaseModel, ConfigDict, Field, StrictBool, StrictInt,
                      field_validator)
from pydantic import ValidationError as PydanticValidationError

from ..constants import ASCENDING, ID_FIELD, SORT_DIRECTION_ALIASES
from ..exceptions import InvalidArgumentError, QueryOptionsError
from .codec import is_symbol, symbol_to_str

Projection = Union[List[str], Dict[str, Any]]
SortSpec = List[Tuple[str, int]]


class QueryOptions(BaseModel):
    """Raw find options; unknown keys are rejected."""

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    fields: Any = None
    skip: StrictInt = Field(0, ge=0)
    limit: StrictInt = 0
    sort: Any = None
    hint: Any = None
    snapshot: StrictBool = False
    batch_size: Optional[StrictInt] = Field(None, ge=0)
    timeout: StrictBool = True

    @field_validator("skip", "limit", mode="before")
    @classmethod
    def _none_is_zero(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("snapshot", mode="before")
    @classmethod
    def _none_is_false(cls, value: Any) -> Any:
        return False if value is None else value

    @field_validator("timeout", mode="before")
    @classmethod
    def _none_is_true(cls, value: Any) -> Any:
        return True if value is None else value


@dataclass(frozen=True)
class NormalizedQuery:
    """Validated, fully-defaulted find request."""

    selector: Dict[str, Any]
    fields: Optional[Projection] = None
    skip: int = 0
    limit: int = 0
    sort: Optional[SortSpec] = None
    hint: Optional[Dict[str, Any]] = None
    snapshot: bool = False
    batch_size: Optional[int] = None
    timeout: bool = True


def field_name(value: Any, option: str) -> str:
    if is_symbol(value):
        return symbol_to_str(value)
    if isinstance(value, str):
        return value
    raise QueryOptionsError(
        f"'{option}' expects field names, got {type(value).__name__}", options=[option]
    )


def normalize_fields(fields: Any) -> Optional[Projection]:
    if fields is None:
        return None
    if isinstance(fields, Mapping):
        return {field_name(key, "fields"): value for key, value in fields.items()}
    if isinstance(fields, (list, tuple)):
        if not fields:
            # An empty projection would mean "no fields"; return just the id.
            return [ID_FIELD]
        return [field_name(field, "fields") for field in fields]
    raise QueryOptionsError(
        f"'fields' must be a list or a mapping, got {type(fields).__name__}",
        options=["fields"],
    )


def normalize_hint(hint: Any) -> Optional[Dict[str, Any]]:
    """
    Normalize a hint to a field -> direction mapping.

    A single field name becomes {field: 1}, a list of names maps each to 1 and
    a mapping is kept as given.
    """
    if hint is None:
        return None
    if isinstance(hint, str) or is_symbol(hint):
        return {field_name(hint, "hint"): ASCENDING}
    if isinstance(hint, Mapping):
        return {field_name(key, "hint"): value for key, value in hint.items()}
    if isinstance(hint, (list, tuple)):
        return {field_name(field, "hint"): ASCENDING for field in hint}
    raise QueryOptionsError(
        f"'hint' must be a field name, a list or a mapping, got {type(hint).__name__}",
        options=["hint"],
    )


def _sort_direction(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if is_symbol(value):
        value = symbol_to_str(value)
    if isinstance(value, str):
        value = value.lower()
    try:
        return SORT_DIRECTION_ALIASES.get(value)
    except TypeError:
        # unhashable
        return None


def _sort_pair(pair: Any) -> Tuple[str, int]:
    if isinstance(pair, (list, tuple)) and len(pair) == 2:
        field, raw_direction = pair
    else:
        field, raw_direction = pair, ASCENDING
    direction = _sort_direction(raw_direction)
    if direction is None:
        raise QueryOptionsError(
            f"Invalid sort direction {raw_direction!r} for field {field!r}", options=["sort"]
        )
    return field_name(field, "sort"), direction


def normalize_sort(sort: Any) -> Optional[SortSpec]:
    """
    Normalize a sort specification to a list of (field, 1 | -1) pairs.

    Accepts a field name, a single (field, direction) pair, a list of field
    names and/or pairs, or a mapping of field -> direction.
    """
    if sort is None:
        return None
    if isinstance(sort, str) or is_symbol(sort):
        return [(field_name(sort, "sort"), ASCENDING)]
    if isinstance(sort, Mapping):
        return [_sort_pair(item) for item in sort.items()]
    if isinstance(sort, (list, tuple)):
        if (
            len(sort) == 2
            and not isinstance(sort[0], (list, tuple))
            and not isinstance(sort[1], (list, tuple))
            and _sort_direction(sort[1]) is not None
        ):
            return [_sort_pair(sort)]
        return [_sort_pair(item) for item in sort]
    raise QueryOptionsError(
        f"'sort' must be a field name, a list or a mapping, got {type(sort).__name__}",
        options=["sort"],
    )


def _parse_options(raw_options: Optional[Mapping[str, Any]]) -> QueryOptions:
    raw: Dict[str, Any] = {}
    for key, value in (raw_options or {}).items():
        if is_symbol(key):
            key = symbol_to_str(key)
        if not isinstance(key, str):
            raise QueryOptionsError(f"Unknown options [{key!r}]", options=[repr(key)])
        raw[key] = value

    try:
        return QueryOptions.model_validate(raw)
    except PydanticValidationError as e:
        errors = e.errors()
        unknown = [str(err["loc"][0]) for err in errors if err["type"] == "extra_forbidden"]
        if unknown:
            raise QueryOptionsError(f"Unknown options {unknown}", options=unknown) from e
        invalid = [str(err["loc"][0]) for err in errors if err["loc"]]
        details = "; ".join(f"{err['loc'][0]}: {err['msg']}" for err in errors if err["loc"])
        raise QueryOptionsError(f"Invalid find options: {details}", options=invalid) from e


def normalize_query(
    selector: Optional[Mapping[str, Any]],
    raw_options: Optional[Mapping[str, Any]] = None,
    has_consumer: bool = False,
    default_hint: Optional[Dict[str, Any]] = None,
) -> NormalizedQuery:
    """
    Validate and default the arguments of a find.

    Args:
        selector: Query document, None meaning "match everything"
        raw_options: Find options (see module docstring)
        has_consumer: Whether results are consumed inside a scoped find
        default_hint: Collection-level hint, already normalized

    Returns:
        NormalizedQuery

    Raises:
        QueryOptionsError: On unknown or invalid options
        InvalidArgumentError: If the selector is not a mapping
    """
    if selector is None:
        selector = {}
    if not isinstance(selector, Mapping):
        raise InvalidArgumentError(
            f"selector must be a mapping, got {type(selector).__name__}",
            context={"argument": "selector"},
        )

    options = _parse_options(raw_options)

    if options.timeout is False and not has_consumer:
        raise QueryOptionsError(
            "timeout can be disabled only when find is given a consumer "
            "(use find(consumer=...) or find_scoped())",
            options=["timeout"],
        )

    hint = normalize_hint(options.hint)
    if hint is None:
        hint = default_hint

    return NormalizedQuery(
        selector=dict(selector),
        fields=normalize_fields(options.fields),
        skip=options.skip,
        limit=options.limit,
        sort=normalize_sort(options.sort),
        hint=hint,
        snapshot=options.snapshot,
        batch_size=options.batch_size,
        timeout=options.timeout,
    )
