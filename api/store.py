# api/store.py
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import sessionmaker

from api.db import Earthquake
from listing.filters import DateRange, LocationContains, MagnitudeRange, Predicate
from listing.sorting import SortOrder
from schemas.models import EarthquakeOut

SORT_COLUMNS = {
    "location": Earthquake.location,
    "magnitude": Earthquake.magnitude,
    "date": Earthquake.date,
    "createdAt": Earthquake.created_at,
}


# ---------- Predicate -> SQL ----------
def _location_contains(clause: LocationContains):
    return [Earthquake.location.icontains(clause.text, autoescape=True)]


def _magnitude_range(clause: MagnitudeRange):
    conditions = []
    if clause.min is not None:
        conditions.append(Earthquake.magnitude >= clause.min)
    if clause.max is not None:
        conditions.append(Earthquake.magnitude <= clause.max)
    return conditions


def _date_range(clause: DateRange):
    conditions = []
    if clause.start is not None:
        conditions.append(Earthquake.date >= clause.start)
    if clause.end is not None:
        conditions.append(Earthquake.date <= clause.end)
    return conditions


_TRANSLATORS = {
    LocationContains: _location_contains,
    MagnitudeRange: _magnitude_range,
    DateRange: _date_range,
}


def where_conditions(predicate: Predicate) -> list:
    conditions = []
    for clause in predicate.clauses:
        translate = _TRANSLATORS.get(type(clause))
        if translate is None:
            raise TypeError(f"Unsupported predicate clause: {clause!r}")
        conditions.extend(translate(clause))
    return conditions


def _filtered(stmt, predicate: Predicate):
    conditions = where_conditions(predicate)
    if conditions:
        stmt = stmt.where(*conditions)
    return stmt


class SqlStore:
    """Record store over the ``earthquakes`` table.

    Every call opens its own session from the factory, so concurrent calls
    only share the engine's connection pool.
    """

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def count(self, predicate: Predicate) -> int:
        stmt = _filtered(select(func.count()).select_from(Earthquake), predicate)
        with self._session_factory() as s:
            return s.execute(stmt).scalar_one()

    def find(self, predicate: Predicate, order: SortOrder, offset: int, limit: int) -> List[EarthquakeOut]:
        column = SORT_COLUMNS[order.field]
        stmt = (
            _filtered(select(Earthquake), predicate)
            .order_by(column.desc() if order.descending else column.asc(), Earthquake.id.asc())
            .offset(offset)
            .limit(limit)
        )
        with self._session_factory() as s:
            return [EarthquakeOut.model_validate(row) for row in s.scalars(stmt).all()]

    def get(self, record_id: str) -> Optional[EarthquakeOut]:
        with self._session_factory() as s:
            row = s.get(Earthquake, record_id)
            return EarthquakeOut.model_validate(row) if row is not None else None

    def distinct_locations(self) -> List[str]:
        stmt = select(Earthquake.location).distinct().order_by(Earthquake.location.asc())
        with self._session_factory() as s:
            return list(s.scalars(stmt).all())

    def magnitude_bounds(self) -> Tuple[Optional[float], Optional[float]]:
        stmt = select(func.min(Earthquake.magnitude), func.max(Earthquake.magnitude))
        with self._session_factory() as s:
            low, high = s.execute(stmt).one()
            return low, high

    def date_bounds(self) -> Tuple[Optional[datetime], Optional[datetime]]:
        stmt = select(func.min(Earthquake.date), func.max(Earthquake.date))
        with self._session_factory() as s:
            earliest, latest = s.execute(stmt).one()
            return earliest, latest
