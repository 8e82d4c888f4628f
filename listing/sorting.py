# listing/sorting.py
import logging
from dataclasses import dataclass
from typing import Any, Optional

logger = logging.getLogger(__name__)

SORT_FIELDS = ("location", "magnitude", "date", "createdAt")
SORT_DIRECTIONS = ("asc", "desc")

DEFAULT_SORT_FIELD = "date"
DEFAULT_SORT_DIRECTION = "desc"


@dataclass(frozen=True)
class SortSpec:
    field: Any = None
    direction: Any = None


@dataclass(frozen=True)
class SortOrder:
    field: str
    direction: str

    @property
    def descending(self) -> bool:
        return self.direction == "desc"


def resolve_sort(spec: Optional[SortSpec] = None) -> SortOrder:
    """Normalize a requested ordering into a whitelisted (field, direction) pair.

    Unknown fields and directions fall back to the defaults instead of
    failing, so stale client state still gets a listing back.
    """
    if spec is None:
        return SortOrder(DEFAULT_SORT_FIELD, DEFAULT_SORT_DIRECTION)

    field = spec.field.strip() if isinstance(spec.field, str) else spec.field
    if field not in SORT_FIELDS:
        if field is not None:
            logger.debug("unknown sort field %r, using %s", spec.field, DEFAULT_SORT_FIELD)
        field = DEFAULT_SORT_FIELD

    direction = spec.direction.strip().lower() if isinstance(spec.direction, str) else spec.direction
    if direction not in SORT_DIRECTIONS:
        if direction is not None:
            logger.debug("unknown sort direction %r, using %s", spec.direction, DEFAULT_SORT_DIRECTION)
        direction = DEFAULT_SORT_DIRECTION

    return SortOrder(field, direction)
