#
# Data shaping (https://jsonapi.org/format/#fetching-sparse-fieldsets style, but with a flat `fields=` csv)
#
# A FieldMap is built once per exposed class: it maps the public (camelCase) field names
# to getter functions, so the same shaping, sorting and paging code works for every resource.
# Field names are matched case-insensitively, unknown names requested by the client are ignored.
#
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional
import transitnet

Record = Dict[str, Any]


def split_csv(value: Optional[str]) -> List[str]:
    """
    :param value: comma separated string (e.g. the `fields` or `sort` query argument)
    :return: list of the stripped, non-empty items
    """
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def camelize(attr_name: str) -> str:
    """
    :param attr_name: python attribute name, e.g. departure_date_time_utc
    :return: public field name, e.g. departureDateTimeUtc
    """
    head, *tail = attr_name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in tail)


class FieldMap(Mapping):
    """
    Ordered mapping of public field names to getters

    e.g.
        FieldMap({"id": attrgetter("id"), "countryId": attrgetter("country_id")})
    """

    def __init__(self, getters: Mapping[str, Callable[[Any], Any]], id_field: str = "id") -> None:
        if id_field not in getters:
            raise ValueError(f"Identifier field {id_field} is not in {list(getters)}")
        self._getters = dict(getters)
        self._lookup = {name.lower(): name for name in self._getters}
        self.id_field = id_field

    def __getitem__(self, name: str) -> Callable[[Any], Any]:
        return self._getters[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._getters)

    def __len__(self) -> int:
        return len(self._getters)

    def resolve(self, name: str) -> Optional[str]:
        """
        :param name: field name as requested by the client (any case)
        :return: canonical field name or None if the field doesn't exist
        """
        return self._lookup.get(name.strip().lower())

    def project(self, instance: Any) -> Record:
        """
        :param instance: object to be projected
        :return: the complete public record of `instance`
        """
        return {name: getter(instance) for name, getter in self._getters.items()}


def select_fields(field_names: Iterable[str], fields: Optional[str], default_fields: Optional[str], id_field: str = "id") -> List[str]:
    """
    Compute the output fields for a request

    :param field_names: the fields a record can contain
    :param fields: requested fields csv, if blank the default_fields are used
    :param default_fields: resource default fields csv
    :param id_field: identifier, always selected
    :return: canonical field names, identifier first, without duplicates
    """
    lookup = {name.lower(): name for name in field_names}
    requested = split_csv(fields) or split_csv(default_fields)

    selected = [id_field]
    for name in requested:
        canonical = lookup.get(name.lower())
        if canonical is None:
            transitnet.log.debug(f'Ignoring unknown field "{name}"')
            continue
        if canonical not in selected:
            selected.append(canonical)
    return selected


def shape(record: Mapping[str, Any], fields: Optional[str], default_fields: Optional[str] = None, id_field: str = "id") -> Record:
    """
    Reduce a record to the requested fields

    :param record: complete record (any mapping)
    :param fields: requested fields csv
    :param default_fields: fields csv used when `fields` is blank
    :param id_field: identifier, always included
    :return: partial record
    """
    return shape_selected(record, select_fields(record.keys(), fields, default_fields, id_field))


def shape_selected(record: Mapping[str, Any], selected: Iterable[str]) -> Record:
    """
    :param record: complete record
    :param selected: canonical field names, as returned by `select_fields`
    :return: partial record
    """
    return {name: record[name] for name in selected if name in record}


def shape_all(records: Iterable[Mapping[str, Any]], selected: List[str]) -> List[Record]:
    return [shape_selected(record, selected) for record in records]
