# listing/engine.py
import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from starlette.concurrency import run_in_threadpool

from listing.assembler import assemble
from listing.errors import ValidationError
from listing.executor import run_query
from listing.filters import FilterSpec, compile_filter
from listing.pagination import PaginationSpec, clamp_window
from listing.sorting import SortSpec, resolve_sort
from listing.store import RecordStore
from schemas.models import Connection, DateBounds, EarthquakeOut, FilterOptionsOut, MagnitudeBounds

logger = logging.getLogger(__name__)

# Reported when the store is empty.
DEFAULT_MAGNITUDE_RANGE = (0.1, 10.0)


@dataclass(frozen=True)
class ListingRequest:
    filter: FilterSpec = field(default_factory=FilterSpec)
    pagination: PaginationSpec = field(default_factory=PaginationSpec)
    sort: SortSpec = field(default_factory=SortSpec)

    @classmethod
    def from_dict(cls, payload: Optional[Mapping[str, Any]]) -> "ListingRequest":
        """Build a request from ``{"filter": ..., "pagination": ..., "sort" | "orderBy": ...}``."""
        if payload is None:
            return cls()
        if not isinstance(payload, Mapping):
            raise ValidationError("request", "expected an object")
        pagination = _mapping(payload, "pagination")
        sort = _mapping(payload, "sort") if payload.get("sort") is not None else _mapping(payload, "orderBy")
        return cls(
            filter=FilterSpec.from_dict(payload.get("filter")),
            pagination=PaginationSpec(pagination.get("skip"), pagination.get("take")),
            sort=SortSpec(sort.get("field"), sort.get("direction")),
        )


def _mapping(payload: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = payload.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ValidationError(key, "expected an object")
    return value


class ListingEngine:
    """Runs filtered, paginated, sorted listings against an injected store.

    Holds nothing but the store handle, so one instance can serve any number
    of concurrent requests.
    """

    def __init__(self, store: RecordStore):
        self._store = store

    async def list(self, request: Optional[ListingRequest] = None) -> Connection:
        request = request or ListingRequest()
        # All three normalize before the store sees anything.
        order = resolve_sort(request.sort)
        predicate = compile_filter(request.filter)
        window = clamp_window(request.pagination)
        logger.debug(
            "listing clauses=%d skip=%d take=%d order=%s %s",
            len(predicate.clauses), window.skip, window.take, order.field, order.direction,
        )
        total_count, records = await run_query(self._store, predicate, window, order)
        return assemble(records, total_count, window)

    async def get(self, record_id: str) -> Optional[EarthquakeOut]:
        return await run_in_threadpool(self._store.get, record_id)

    async def filter_options(self) -> FilterOptionsOut:
        locations, (low, high), (earliest, latest) = await asyncio.gather(
            run_in_threadpool(self._store.distinct_locations),
            run_in_threadpool(self._store.magnitude_bounds),
            run_in_threadpool(self._store.date_bounds),
        )
        return FilterOptionsOut(
            locations=[loc for loc in locations if loc],
            magnitude_range=MagnitudeBounds(
                min=low if low is not None else DEFAULT_MAGNITUDE_RANGE[0],
                max=high if high is not None else DEFAULT_MAGNITUDE_RANGE[1],
            ),
            date_range=DateBounds(
                earliest=earliest or datetime.fromtimestamp(0, tz=timezone.utc),
                latest=latest or datetime.now(timezone.utc),
            ),
        )
