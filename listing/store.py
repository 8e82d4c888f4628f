# listing/store.py
"""
What the listing engine needs from a persistent store, plus an in-memory
implementation that evaluates predicates in Python.
"""
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional, Protocol, Tuple

from listing.filters import Clause, DateRange, LocationContains, MagnitudeRange, Predicate
from listing.sorting import SortOrder
from schemas.models import EarthquakeOut


class RecordStore(Protocol):
    def count(self, predicate: Predicate) -> int: ...

    def find(self, predicate: Predicate, order: SortOrder, offset: int, limit: int) -> List[EarthquakeOut]: ...

    def get(self, record_id: str) -> Optional[EarthquakeOut]: ...

    def distinct_locations(self) -> List[str]: ...

    def magnitude_bounds(self) -> Tuple[Optional[float], Optional[float]]: ...

    def date_bounds(self) -> Tuple[Optional[datetime], Optional[datetime]]: ...


# Record attribute behind each public sort field.
SORT_ATTRIBUTES = {
    "location": "location",
    "magnitude": "magnitude",
    "date": "date",
    "createdAt": "created_at",
}


def _location_contains(clause: LocationContains, record: EarthquakeOut) -> bool:
    return clause.text.lower() in record.location.lower()


def _magnitude_in_range(clause: MagnitudeRange, record: EarthquakeOut) -> bool:
    if clause.min is not None and record.magnitude < clause.min:
        return False
    if clause.max is not None and record.magnitude > clause.max:
        return False
    return True


def _date_in_range(clause: DateRange, record: EarthquakeOut) -> bool:
    if clause.start is not None and record.date < clause.start:
        return False
    if clause.end is not None and record.date > clause.end:
        return False
    return True


_MATCHERS: Dict[type, Callable[..., bool]] = {
    LocationContains: _location_contains,
    MagnitudeRange: _magnitude_in_range,
    DateRange: _date_in_range,
}


def matches(predicate: Predicate, record: EarthquakeOut) -> bool:
    return all(_match_clause(clause, record) for clause in predicate.clauses)


def _match_clause(clause: Clause, record: EarthquakeOut) -> bool:
    matcher = _MATCHERS.get(type(clause))
    if matcher is None:
        raise TypeError(f"Unsupported predicate clause: {clause!r}")
    return matcher(clause, record)


class MemoryStore:
    """Holds records in a list. Reads only; the list is never mutated after construction."""

    def __init__(self, records: Iterable[EarthquakeOut] = ()):
        self._records = tuple(
            r if isinstance(r, EarthquakeOut) else EarthquakeOut.model_validate(r) for r in records
        )

    def count(self, predicate: Predicate) -> int:
        return sum(1 for r in self._records if matches(predicate, r))

    def find(self, predicate: Predicate, order: SortOrder, offset: int, limit: int) -> List[EarthquakeOut]:
        attribute = SORT_ATTRIBUTES[order.field]
        rows = sorted((r for r in self._records if matches(predicate, r)), key=lambda r: r.id)
        # stable sort keeps id ascending as the tiebreaker in both directions
        rows.sort(key=lambda r: getattr(r, attribute), reverse=order.descending)
        return rows[offset : offset + limit]

    def get(self, record_id: str) -> Optional[EarthquakeOut]:
        return next((r for r in self._records if r.id == record_id), None)

    def distinct_locations(self) -> List[str]:
        return sorted({r.location for r in self._records if r.location})

    def magnitude_bounds(self) -> Tuple[Optional[float], Optional[float]]:
        if not self._records:
            return None, None
        values = [r.magnitude for r in self._records]
        return min(values), max(values)

    def date_bounds(self) -> Tuple[Optional[datetime], Optional[datetime]]:
        if not self._records:
            return None, None
        values = [r.date for r in self._records]
        return min(values), max(values)
