# base.py: implements the ResourceBase SQLAlchemy db Mixin
#
# pylint: disable=no-member,protected-access
#
"""
ResourceBase class customizable attributes, override these in the exposed classes

_s_collection_name:
Type: str
Description: Name of the collection, used to construct the endpoint url (e.g. "vehicleEnrollments").


_s_default_fields:
Type: str
Description: csv of the fields returned when the client doesn't specify `fields=`.


_s_default_sort:
Type: str
Description: sort expression used when the client doesn't specify `sort=`.


_s_filters:
Type: tuple of `filtering.FilterClause`
Description: The query argument filters supported by the collection.


_s_exclude_attrs:
Type: tuple of str
Description: Attribute names that should not be exposed.


_s_id_field:
Type: str
Description: Name of the identifier field, it is always included in the records.
"""
from functools import lru_cache
from operator import attrgetter
from typing import Any, Dict, Type
from sqlalchemy import inspect as sqla_inspect
from sqlalchemy.orm import Query
import transitnet
from .api_attr import is_api_attr
from .errors import NotFoundError
from .filtering import FilterCriteria
from .shaping import FieldMap, camelize


class ResourceBase:
    """This SQLAlchemy mixin exposes a model as a shaped, sortable, pageable resource collection

    The records are built by the FieldMap of the class: all column attributes and `api_attr`
    decorated attributes, with camelCase names
    """

    _s_collection_name = None
    _s_default_fields = "id"
    _s_default_sort = "id"
    _s_filters = ()
    _s_exclude_attrs = ()
    _s_id_field = "id"

    @classmethod
    def _s_field_map(cls) -> FieldMap:
        """
        :return: the (cached) FieldMap of the class
        """
        return get_field_map(cls)

    @classmethod
    def _s_query(cls) -> Query:
        """
        :return: sqla query object, in primary key order so the input of the sort stage is deterministic
        """
        mapper = sqla_inspect(cls)
        return transitnet.DB.session.query(cls).order_by(*mapper.primary_key)

    @classmethod
    def _s_criteria(cls, args) -> FilterCriteria:
        """
        :param args: request query arguments
        :return: the active filters of the class
        """
        return FilterCriteria.parse(cls._s_filters, args)

    @classmethod
    def _s_get_instance(cls, item_id: Any) -> "ResourceBase":
        """
        :param item_id: primary key value
        :return: instance
        :raises NotFoundError: if there is no such instance
        """
        instance = transitnet.DB.session.get(cls, item_id)
        if instance is None:
            raise NotFoundError(f"Invalid {cls.__name__} id {item_id}")
        return instance

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {getattr(self, 'id', None)}>"


def _api_attr_names(cls: Type) -> Dict[str, Any]:
    result = {}
    for klass in reversed(cls.__mro__):
        for attr_name, attr in vars(klass).items():
            if is_api_attr(attr):
                result[attr_name] = attr
    return result


@lru_cache(maxsize=128)
def get_field_map(cls: Type) -> FieldMap:
    """
    Build the FieldMap of an exposed class: column attributes first (in declaration order),
    followed by the api_attr decorated attributes

    :param cls: ResourceBase subclass
    :return: FieldMap
    """
    mapper = sqla_inspect(cls)
    getters = {}
    for column_attr in mapper.column_attrs:
        if column_attr.key in cls._s_exclude_attrs:
            continue
        getters[camelize(column_attr.key)] = attrgetter(column_attr.key)

    for attr_name in _api_attr_names(cls):
        if attr_name in cls._s_exclude_attrs:
            continue
        getters[camelize(attr_name)] = attrgetter(attr_name)

    transitnet.log.debug(f"{cls.__name__} fields: {list(getters)}")
    return FieldMap(getters, id_field=cls._s_id_field)
