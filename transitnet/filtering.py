#
# Filter composition
#
# Every exposed class declares its filter clauses in `_s_filters`, e.g.
#
#   _s_filters = (
#       Search("search", "cancellation_comment"),
#       Equals("vehicleId", "vehicle_id", parse_int),
#       Range("fromDepartureDateTime", "toDepartureDateTime", "departure_date_time_utc", parse_datetime),
#       AggregateRange("fromCost", "toCost", sum_of("route_address_details", "cost_to_next_city")),
#   )
#
# The clauses form a conjunction. A clause is only active when (one of) its query arguments
# is present: an absent argument never filters. Unparseable values are ignored (and logged).
#
# Simple clauses are translated to sqlalchemy expressions and executed by the database.
# Aggregate clauses reduce a nested collection to a scalar (e.g. the sum of the leg costs of an
# enrollment), they can only be evaluated after the instances have been loaded. They run as the
# last filtering pass, over the candidates that remain after the simple clauses: O(n * nested size).
#
import datetime
import math
import re
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple
from sqlalchemy import or_
from sqlalchemy.orm import Query, selectinload
import transitnet

TRUE_VALUES = ("true", "1", "yes", "on")
FALSE_VALUES = ("false", "0", "no", "off")

_DURATION_RE = re.compile(r"^(-)?(?:(\d+)\.)?(\d+):(\d{1,2})(?::(\d{1,2})(?:\.(\d{1,7}))?)?$")


#
# Query argument value parsers, these raise ValueError for invalid input
#
def parse_str(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("empty value")
    return value


def parse_int(value: str) -> int:
    return int(value.strip())


def parse_float(value: str) -> float:
    result = float(value.strip())
    if not math.isfinite(result):
        raise ValueError(f"Invalid number {value}")
    return result


def parse_bool(value: str) -> bool:
    value = value.strip().lower()
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean {value}")


def parse_datetime(value: str) -> datetime.datetime:
    """
    :param value: ISO 8601 date(time), "Z" is accepted as the UTC designator
    :return: naive UTC datetime (that's how the db stores them)
    """
    value = value.strip()
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    result = datetime.datetime.fromisoformat(value)
    if result.tzinfo is not None:
        result = result.astimezone(datetime.timezone.utc).replace(tzinfo=None)
    return result


def parse_duration(value: str) -> datetime.timedelta:
    """
    :param value: "[-][d.]hh:mm[:ss[.fffffff]]" or a number of seconds
    :return: timedelta
    """
    value = value.strip()
    match = _DURATION_RE.match(value)
    if not match:
        return datetime.timedelta(seconds=float(value))
    sign, days, hours, minutes, seconds, fraction = match.groups()
    result = datetime.timedelta(
        days=int(days or 0),
        hours=int(hours),
        minutes=int(minutes),
        seconds=int(seconds or 0),
        microseconds=int((fraction or "").ljust(6, "0")[:6]),
    )
    return -result if sign else result


def sum_of(relationship: str, *attr_names: str, start: Any = 0) -> Callable[[Any], Any]:
    """
    Create a reducer that sums attributes over a nested collection

    :param relationship: name of the collection relationship, e.g. "route_address_details"
    :param attr_names: attributes of the related items that will be added
    :param start: the value of an empty sum
    :return: reducer function: instance -> total

    A missing collection or a None attribute value contributes nothing to the total
    """

    def reducer(instance: Any) -> Any:
        total = start
        for item in getattr(instance, relationship, None) or ():
            for attr_name in attr_names:
                value = getattr(item, attr_name, None)
                if value is not None:
                    total += value
        return total

    reducer.relationship = relationship
    return reducer


class FilterClause:
    """
    Base class for the filter clauses

    Attributes:
        params: names of the query arguments used by the clause (case-insensitive)
        parser: function that converts the query argument string to a python value
    """

    aggregate = False

    def __init__(self, params: Sequence[str], parser: Callable[[str], Any] = parse_str) -> None:
        self.params = tuple(params)
        self.parser = parser

    def parse_arg(self, args: Mapping[str, str], param: str) -> Any:
        """
        :param args: query arguments with lowercase keys
        :param param: argument name
        :return: parsed value, None if the argument is absent or invalid
        """
        raw_value = args.get(param.lower())
        if raw_value is None:
            return None
        try:
            return self.parser(raw_value)
        except (ValueError, OverflowError) as exc:
            transitnet.log.warning(f'Ignoring invalid filter value {param}="{raw_value}": {exc}')
            return None

    def bind(self, args: Mapping[str, str]) -> Optional[Tuple[Any, ...]]:
        """
        :param args: query arguments with lowercase keys
        :return: the parsed argument values or None if the clause is inactive
        """
        values = tuple(self.parse_arg(args, param) for param in self.params)
        if all(value is None for value in values):
            return None
        return values

    def expression(self, model: Any, values: Tuple[Any, ...]) -> Any:  # pragma: no cover
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({', '.join(self.params)})"


class Equals(FilterClause):
    """
    attribute == value
    """

    def __init__(self, param: str, attr_name: str, parser: Callable[[str], Any] = parse_str) -> None:
        super().__init__((param,), parser)
        self.attr_name = attr_name

    def expression(self, model, values):
        return getattr(model, self.attr_name) == values[0]


class Range(FilterClause):
    """
    from <= attribute <= to, both bounds are inclusive and optional
    """

    def __init__(self, from_param: str, to_param: str, attr_name: str, parser: Callable[[str], Any] = parse_float) -> None:
        super().__init__((from_param, to_param), parser)
        self.attr_name = attr_name

    def expression(self, model, values):
        lower, upper = values
        attr = getattr(model, self.attr_name)
        if lower is None:
            return attr <= upper
        if upper is None:
            return attr >= lower
        return attr.between(lower, upper)


class Search(FilterClause):
    """
    Case-insensitive substring search in any of the attributes
    """

    def __init__(self, param: str, *attr_names: str) -> None:
        super().__init__((param,), parse_str)
        self.attr_names = attr_names

    def expression(self, model, values):
        term = values[0]
        return or_(*[getattr(model, attr_name).icontains(term, autoescape=True) for attr_name in self.attr_names])


class Flag(FilterClause):
    """
    Boolean filter:
    - on a boolean column: attribute == value
    - with `present=True`: value indicates whether the (nullable) attribute is set,
      e.g. isCancelled <=> cancellation_comment is not null
    """

    def __init__(self, param: str, attr_name: str, present: bool = False) -> None:
        super().__init__((param,), parse_bool)
        self.attr_name = attr_name
        self.present = present

    def expression(self, model, values):
        attr = getattr(model, self.attr_name)
        if not self.present:
            return attr == values[0]
        return attr.isnot(None) if values[0] else attr.is_(None)


class AggregateRange(FilterClause):
    """
    Post-materialization range filter on a value computed from a nested collection

    The lower bound defaults to `zero`, the upper bound to unbounded.
    An instance without nested items has an aggregate value of `zero`.
    """

    aggregate = True

    def __init__(
        self,
        from_param: str,
        to_param: str,
        reducer: Callable[[Any], Any],
        parser: Callable[[str], Any] = parse_float,
        zero: Any = 0,
        relationship: Optional[str] = None,
    ) -> None:
        super().__init__((from_param, to_param), parser)
        self.reducer = reducer
        self.zero = zero
        self.relationship = relationship or getattr(reducer, "relationship", None)

    def load_option(self, model: Any) -> Any:
        """
        :return: loader option that fetches the nested collection together with the instances
        """
        if self.relationship is None:
            return None
        return selectinload(getattr(model, self.relationship))

    def matches(self, instance: Any, values: Tuple[Any, ...]) -> bool:
        lower, upper = values
        if lower is None:
            lower = self.zero
        value = self.reducer(instance)
        if value is None:
            value = self.zero
        if value < lower:
            return False
        return upper is None or value <= upper


class FilterCriteria:
    """
    The active filter clauses of a request, bound to their parsed query argument values
    """

    def __init__(self, bound_clauses: Iterable[Tuple[FilterClause, Tuple[Any, ...]]] = ()) -> None:
        self.bound_clauses = list(bound_clauses)

    @classmethod
    def parse(cls, clauses: Iterable[FilterClause], args: Mapping[str, str]) -> "FilterCriteria":
        """
        :param clauses: the filter clauses declared by a resource
        :param args: request query arguments
        :return: FilterCriteria with the active clauses
        """
        args = {str(key).lower(): value for key, value in args.items()}
        bound_clauses = []
        for clause in clauses:
            values = clause.bind(args)
            if values is not None:
                bound_clauses.append((clause, values))
        return cls(bound_clauses)

    @property
    def simple(self) -> List[Tuple[FilterClause, Tuple[Any, ...]]]:
        return [(clause, values) for clause, values in self.bound_clauses if not clause.aggregate]

    @property
    def aggregates(self) -> List[Tuple[FilterClause, Tuple[Any, ...]]]:
        return [(clause, values) for clause, values in self.bound_clauses if clause.aggregate]

    def apply(self, query: Query, model: Any) -> Query:
        """
        Add the simple clauses as WHERE conditions and eager load the collections
        the aggregate clauses need

        :param query: sqla query
        :param model: queried class
        :return: sqla query
        """
        expressions = [clause.expression(model, values) for clause, values in self.simple]
        if expressions:
            query = query.filter(*expressions)
        for clause, _ in self.aggregates:
            option = clause.load_option(model)
            if option is not None:
                query = query.options(option)
        return query

    def narrow(self, instances: Iterable[Any]) -> List[Any]:
        """
        Apply the aggregate clauses to the materialized instances
        :param instances: instances returned by the query
        :return: instances that match all aggregate clauses, in their original order
        """
        aggregates = self.aggregates
        return [instance for instance in instances if all(clause.matches(instance, values) for clause, values in aggregates)]

    def to_dict(self) -> Dict[str, Any]:
        """
        :return: the active query arguments, used for logging
        """
        result = {}
        for clause, values in self.bound_clauses:
            for param, value in zip(clause.params, values):
                if value is not None:
                    result[param] = value
        return result

    def __bool__(self) -> bool:
        return bool(self.bound_clauses)
