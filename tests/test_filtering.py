import datetime
from types import SimpleNamespace

import pytest

from transitnet.filtering import (
    AggregateRange,
    Equals,
    FilterCriteria,
    Range,
    Search,
    parse_bool,
    parse_datetime,
    parse_duration,
    parse_float,
    parse_int,
    sum_of,
)

leg_cost = sum_of("legs", "cost")


def enrollment(*costs) -> SimpleNamespace:
    return SimpleNamespace(legs=[SimpleNamespace(cost=cost) for cost in costs])


COST_RANGE = AggregateRange("fromCost", "toCost", leg_cost)


def test_parse_bool() -> None:
    assert parse_bool("TRUE") is True
    assert parse_bool(" yes") is True
    assert parse_bool("0") is False
    with pytest.raises(ValueError):
        parse_bool("maybe")


def test_parse_datetime() -> None:
    assert parse_datetime("2026-01-02T08:00:00Z") == datetime.datetime(2026, 1, 2, 8, 0)
    assert parse_datetime("2026-01-02T10:00:00+02:00") == datetime.datetime(2026, 1, 2, 8, 0)
    assert parse_datetime("2026-01-02") == datetime.datetime(2026, 1, 2)


def test_parse_duration() -> None:
    assert parse_duration("03:45") == datetime.timedelta(hours=3, minutes=45)
    assert parse_duration("1.02:00:30.5") == datetime.timedelta(days=1, hours=2, seconds=30, microseconds=500000)
    assert parse_duration("-00:30:00") == -datetime.timedelta(minutes=30)
    assert parse_duration("90") == datetime.timedelta(seconds=90)
    with pytest.raises(ValueError):
        parse_duration("soon")


def test_sum_of() -> None:
    assert leg_cost(enrollment(20.0, 25.0)) == 45.0
    assert leg_cost(enrollment(10.0, None)) == 10.0
    assert leg_cost(enrollment()) == 0
    assert leg_cost(SimpleNamespace(legs=None)) == 0
    assert leg_cost(SimpleNamespace()) == 0
    assert leg_cost.relationship == "legs"


def test_sum_of_durations() -> None:
    total = sum_of("legs", "wait", "drive", start=datetime.timedelta(0))
    legs = [SimpleNamespace(wait=datetime.timedelta(minutes=10), drive=datetime.timedelta(hours=1)), SimpleNamespace(wait=None, drive=datetime.timedelta(hours=2))]
    assert total(SimpleNamespace(legs=legs)) == datetime.timedelta(hours=3, minutes=10)


def test_aggregate_range() -> None:
    criteria = FilterCriteria.parse([COST_RANGE], {"fromCost": "10", "toCost": "50"})
    included, excluded, no_legs = enrollment(20.0, 25.0), enrollment(30.0, 30.0), enrollment()
    assert criteria.narrow([included, excluded, no_legs]) == [included]


def test_aggregate_range_bounds_are_inclusive() -> None:
    criteria = FilterCriteria.parse([COST_RANGE], {"fromcost": "45", "tocost": "45"})
    assert len(criteria.narrow([enrollment(45.0)])) == 1


def test_aggregate_range_default_bounds() -> None:
    # missing lower bound is zero, missing upper bound is unbounded
    only_upper = FilterCriteria.parse([COST_RANGE], {"toCost": "50"})
    assert len(only_upper.narrow([enrollment(), enrollment(20.0)])) == 2
    only_lower = FilterCriteria.parse([COST_RANGE], {"fromCost": "50"})
    assert len(only_lower.narrow([enrollment(1000.0), enrollment(20.0)])) == 1


def test_inactive_clauses() -> None:
    clauses = [Equals("vehicleId", "vehicle_id", parse_int), Search("search", "name"), COST_RANGE]
    criteria = FilterCriteria.parse(clauses, {"sort": "id"})
    assert not criteria
    instances = [enrollment(1000.0)]
    assert criteria.narrow(instances) == instances


def test_invalid_values_are_ignored() -> None:
    clauses = [Equals("vehicleId", "vehicle_id", parse_int), Range("fromCapacity", "toCapacity", "capacity", parse_int)]
    criteria = FilterCriteria.parse(clauses, {"vehicleId": "abc", "fromCapacity": "x", "toCapacity": "20"})
    assert criteria.to_dict() == {"toCapacity": 20}
    assert len(criteria.simple) == 1
    assert criteria.aggregates == []

    # non-finite numbers are invalid too
    criteria = FilterCriteria.parse([COST_RANGE], {"toCost": "nan", "fromCost": "-inf"})
    assert not criteria
    instances = [enrollment(20.0), enrollment()]
    assert criteria.narrow(instances) == instances


def test_argument_names_are_case_insensitive() -> None:
    criteria = FilterCriteria.parse([Search("search", "name")], {"SEARCH": "lviv"})
    assert criteria.to_dict() == {"search": "lviv"}


def test_parse_float() -> None:
    assert parse_float(" 12.5") == 12.5
    for value in ("nan", "inf", "-Infinity", "abc"):
        with pytest.raises(ValueError):
            parse_float(value)
