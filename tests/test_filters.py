from datetime import date, datetime, timedelta, timezone

import pytest

from listing.errors import ValidationError
from listing.filters import (
    DateFilter,
    DateRange,
    FilterSpec,
    LocationContains,
    MagnitudeFilter,
    MagnitudeRange,
    Predicate,
    compile_filter,
)


def test_empty_spec_compiles_to_empty_predicate():
    assert compile_filter(None).is_empty
    assert compile_filter(FilterSpec()) == Predicate()


def test_location_compiles_to_contains_clause():
    predicate = compile_filter(FilterSpec(location=" tokyo "))
    assert predicate.clauses == (LocationContains("tokyo"),)


@pytest.mark.parametrize("location", ["", "   "])
def test_blank_location_is_no_filter(location):
    assert compile_filter(FilterSpec(location=location)).is_empty


def test_non_string_location_is_rejected():
    with pytest.raises(ValidationError) as exc:
        compile_filter(FilterSpec(location=12))
    assert exc.value.field == "location"


def test_magnitude_min_only():
    predicate = compile_filter(FilterSpec(magnitude=MagnitudeFilter(min=5)))
    assert predicate.clauses == (MagnitudeRange(min=5.0, max=None),)


def test_magnitude_closed_interval_from_strings():
    predicate = compile_filter(FilterSpec(magnitude=MagnitudeFilter(min="5", max="7,5")))
    assert predicate.clauses == (MagnitudeRange(min=5.0, max=7.5),)


def test_magnitude_without_bounds_is_no_filter():
    assert compile_filter(FilterSpec(magnitude=MagnitudeFilter())).is_empty


@pytest.mark.parametrize("value", ["big", "", True, float("nan"), float("inf"), [5]])
def test_bad_magnitude_is_rejected(value):
    with pytest.raises(ValidationError) as exc:
        compile_filter(FilterSpec(magnitude=MagnitudeFilter(min=value)))
    assert exc.value.field == "magnitude.min"


def test_date_bounds_are_parsed_as_utc():
    predicate = compile_filter(
        FilterSpec(date=DateFilter(start="2025-02-01T10:00:00Z", end="2025-02-03T12:30:00+03:00"))
    )
    (clause,) = predicate.clauses
    assert clause == DateRange(
        start=datetime(2025, 2, 1, 10, 0, tzinfo=timezone.utc),
        end=datetime(2025, 2, 3, 9, 30, tzinfo=timezone.utc),
    )


def test_fractional_seconds_and_lowercase_zulu():
    predicate = compile_filter(
        FilterSpec(date=DateFilter(start="2025-02-01T10:00:00.5Z", end="2025-02-03t12:30:00z"))
    )
    (clause,) = predicate.clauses
    assert clause.start == datetime(2025, 2, 1, 10, 0, 0, 500000, tzinfo=timezone.utc)
    assert clause.end == datetime(2025, 2, 3, 12, 30, tzinfo=timezone.utc)


def test_naive_timestamp_is_taken_as_utc():
    (clause,) = compile_filter(FilterSpec(date=DateFilter(start="2025-02-01T10:00:00"))).clauses
    assert clause.start == datetime(2025, 2, 1, 10, 0, tzinfo=timezone.utc)
    assert clause.end is None


def test_date_only_bounds_cover_whole_days():
    (clause,) = compile_filter(FilterSpec(date=DateFilter(start="2025-02-01", end="2025-02-03"))).clauses
    assert clause.start == datetime(2025, 2, 1, tzinfo=timezone.utc)
    assert clause.end == datetime(2025, 2, 4, tzinfo=timezone.utc) - timedelta(microseconds=1)


def test_date_objects_are_accepted():
    (clause,) = compile_filter(FilterSpec(date=DateFilter(start=date(2025, 2, 1)))).clauses
    assert clause.start == datetime(2025, 2, 1, tzinfo=timezone.utc)


@pytest.mark.parametrize("field, spec", [
    ("date.start", DateFilter(start="yesterday")),
    ("date.end", DateFilter(end="2025-13-40")),
    ("date.start", DateFilter(start="")),
    ("date.end", DateFilter(end=1700000000)),
])
def test_malformed_dates_fail_fast(field, spec):
    with pytest.raises(ValidationError) as exc:
        compile_filter(FilterSpec(date=spec))
    assert exc.value.field == field


def test_all_clauses_combine():
    predicate = compile_filter(
        FilterSpec(
            location="japan",
            magnitude=MagnitudeFilter(max=6),
            date=DateFilter(start="2025-01-01"),
        )
    )
    assert [type(c) for c in predicate.clauses] == [LocationContains, MagnitudeRange, DateRange]


def test_from_dict_builds_nested_spec():
    spec = FilterSpec.from_dict({"location": "tokyo", "magnitude": {"min": 5}, "date": {"end": "2025-01-31"}})
    assert spec == FilterSpec(
        location="tokyo",
        magnitude=MagnitudeFilter(min=5),
        date=DateFilter(end="2025-01-31"),
    )


def test_from_dict_rejects_non_object_sections():
    with pytest.raises(ValidationError) as exc:
        FilterSpec.from_dict({"magnitude": 5})
    assert exc.value.field == "magnitude"
