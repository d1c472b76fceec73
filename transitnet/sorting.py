#
# Sorting of shaped records
#
# sort by csv sort= values, e.g. sort=-departureDateTimeUtc,cost
# The sort order for each sort field is ascending unless it is prefixed with a minus
# (or followed by " desc"), in which case it is descending.
#
# Sorting is strict: a sort field that isn't part of the output fields raises InvalidSortExpression
# (field selection on the other hand ignores unknown fields)
#
import datetime
from numbers import Number
from typing import Any, Iterable, List, Mapping, NamedTuple, Optional, Tuple
from .errors import InvalidSortExpression
from .shaping import split_csv

DESC_PREFIX = "-"
DIRECTION_SUFFIXES = {"asc": False, "desc": True}


class SortKey(NamedTuple):
    field: str
    descending: bool = False

    def __str__(self) -> str:
        return f"{DESC_PREFIX if self.descending else ''}{self.field}"


SortSpec = Tuple[SortKey, ...]


def _parse_token(token: str) -> Tuple[str, bool]:
    """
    :param token: e.g. "-cost", "cost", "cost desc"
    :return: field name, descending
    """
    descending = False
    if token.startswith(DESC_PREFIX):
        descending = True
        token = token[len(DESC_PREFIX) :].strip()
    else:
        parts = token.split()
        if len(parts) == 2 and parts[1].lower() in DIRECTION_SUFFIXES:
            token, descending = parts[0], DIRECTION_SUFFIXES[parts[1].lower()]
    return token, descending


def parse_sort(sort_string: Optional[str], known_fields: Iterable[str], default: str = "id") -> SortSpec:
    """
    Parse a sort expression

    :param sort_string: csv sort expression, the default is used if it is blank
    :param known_fields: the fields the records will contain (i.e. the selected output fields)
    :param default: default sort expression
    :return: non-empty SortSpec with canonical field names
    :raises InvalidSortExpression: when a token doesn't name a known field
    """
    lookup = {name.lower(): name for name in known_fields}
    tokens = split_csv(sort_string) or split_csv(default)

    spec = []
    for token in tokens:
        field_name, descending = _parse_token(token)
        canonical = lookup.get(field_name.lower())
        if canonical is None:
            valid_fields = ", ".join(sorted(lookup.values()))
            raise InvalidSortExpression(f'Invalid sort field "{field_name}", sortable fields are: {valid_fields}', sort_string)
        spec.append(SortKey(canonical, descending))

    if not spec:
        raise InvalidSortExpression("Empty sort expression", sort_string)
    return tuple(spec)


# Values of different kinds are ranked so comparing them never raises
_KIND_NUMBER, _KIND_STRING, _KIND_DATETIME, _KIND_DATE, _KIND_DURATION, _KIND_OTHER = range(6)


def _sort_value(value: Any) -> Tuple[int, Any]:
    if isinstance(value, Number):
        return _KIND_NUMBER, value
    if isinstance(value, str):
        return _KIND_STRING, value.casefold()
    if isinstance(value, datetime.datetime):
        if value.tzinfo is not None:
            value = value.astimezone(datetime.timezone.utc).replace(tzinfo=None)
        return _KIND_DATETIME, value
    if isinstance(value, datetime.date):
        return _KIND_DATE, value
    if isinstance(value, datetime.timedelta):
        return _KIND_DURATION, value
    return _KIND_OTHER, str(value)


def _key_func(field_name: str):
    def key(record: Mapping[str, Any]) -> Tuple[bool, Tuple[int, Any]]:
        value = record.get(field_name)
        # None sorts first: (False, ...) < (True, ...)
        if value is None:
            return False, (_KIND_NUMBER, 0)
        return True, _sort_value(value)

    return key


def apply_sort(records: Iterable[Mapping[str, Any]], spec: SortSpec) -> List[Mapping[str, Any]]:
    """
    Stable multi-key sort

    The keys are applied from the least significant to the primary one, python's sort is stable
    (also with reverse=True), so records that are equal on every key keep their input order.
    Nulls come first in ascending order and last in descending order.

    :param records: shaped records
    :param spec: parsed sort expression
    :return: new sorted list
    """
    result = list(records)
    for sort_key in reversed(spec):
        result.sort(key=_key_func(sort_key.field), reverse=sort_key.descending)
    return result
