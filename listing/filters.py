# listing/filters.py
"""
Filter specs and their compiled, backend-neutral predicate.

A ``FilterSpec`` is what the caller asked for, with raw values straight off
the wire. ``compile_filter`` coerces those values and produces a ``Predicate``:
an AND of tagged clauses that each store adapter knows how to translate.
Fields absent from the spec never show up in the predicate.
"""
import math
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from typing import Any, Mapping, Optional, Tuple, Union

from listing.errors import ValidationError


@dataclass(frozen=True)
class MagnitudeFilter:
    min: Any = None
    max: Any = None


@dataclass(frozen=True)
class DateFilter:
    start: Any = None
    end: Any = None


@dataclass(frozen=True)
class FilterSpec:
    location: Any = None
    magnitude: Optional[MagnitudeFilter] = None
    date: Optional[DateFilter] = None

    @classmethod
    def from_dict(cls, payload: Optional[Mapping[str, Any]]) -> "FilterSpec":
        if payload is None:
            return cls()
        if not isinstance(payload, Mapping):
            raise ValidationError("filter", "expected an object")
        magnitude = _section(payload, "magnitude")
        when = _section(payload, "date")
        return cls(
            location=payload.get("location"),
            magnitude=MagnitudeFilter(magnitude.get("min"), magnitude.get("max")) if magnitude is not None else None,
            date=DateFilter(when.get("start"), when.get("end")) if when is not None else None,
        )


def _section(payload: Mapping[str, Any], key: str) -> Optional[Mapping[str, Any]]:
    value = payload.get(key)
    if value is None or isinstance(value, Mapping):
        return value
    raise ValidationError(key, "expected an object")


# ---------- Predicate ----------
@dataclass(frozen=True)
class LocationContains:
    text: str


@dataclass(frozen=True)
class MagnitudeRange:
    min: Optional[float] = None
    max: Optional[float] = None


@dataclass(frozen=True)
class DateRange:
    start: Optional[datetime] = None
    end: Optional[datetime] = None


Clause = Union[LocationContains, MagnitudeRange, DateRange]


@dataclass(frozen=True)
class Predicate:
    clauses: Tuple[Clause, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.clauses


# ---------- Coercion ----------
def _coerce_magnitude(field: str, value) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValidationError(field, "expected a number")
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValidationError(field, "expected a number")
        try:
            number = float(text.replace(",", "."))
        except ValueError:
            raise ValidationError(field, f"{value!r} is not a number") from None
    else:
        raise ValidationError(field, "expected a number")
    if not math.isfinite(number):
        raise ValidationError(field, "must be a finite number")
    return number


def _coerce_timestamp(field: str, value, end_of_day: bool = False) -> Optional[datetime]:
    if value is None:
        return None
    day_time = time.max if end_of_day else time.min
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, day_time)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValidationError(field, "expected an ISO-8601 timestamp")
        try:
            if len(text) == 10 and "T" not in text and " " not in text:
                # Date-only bound covers the whole day.
                parsed = datetime.combine(date.fromisoformat(text), day_time)
            else:
                if text[-1] in "Zz":
                    text = text[:-1] + "+00:00"
                parsed = datetime.fromisoformat(text)
        except ValueError:
            raise ValidationError(field, f"{value!r} is not an ISO-8601 timestamp") from None
    else:
        raise ValidationError(field, "expected an ISO-8601 timestamp")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


# ---------- Compiler ----------
def compile_filter(spec: Optional[FilterSpec]) -> Predicate:
    if spec is None:
        return Predicate()
    clauses = []

    if spec.location is not None:
        if not isinstance(spec.location, str):
            raise ValidationError("location", "expected a string")
        text = spec.location.strip()
        if text:
            clauses.append(LocationContains(text))

    if spec.magnitude is not None:
        low = _coerce_magnitude("magnitude.min", spec.magnitude.min)
        high = _coerce_magnitude("magnitude.max", spec.magnitude.max)
        if low is not None or high is not None:
            clauses.append(MagnitudeRange(low, high))

    if spec.date is not None:
        start = _coerce_timestamp("date.start", spec.date.start)
        end = _coerce_timestamp("date.end", spec.date.end, end_of_day=True)
        if start is not None or end is not None:
            clauses.append(DateRange(start, end))

    return Predicate(tuple(clauses))
