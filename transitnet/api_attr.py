"""
    api_attr: computed attributes that are exposed as resource fields
"""

from sqlalchemy.ext.hybrid import hybrid_property
from typing import Any

API_ATTR_TAG = "_s_is_api_attr"


class api_attr(hybrid_property):
    """
    Decorate a method of an exposed class to make its return value available as a record field,
    e.g.

        @api_attr
        def cost(self):
            return sum(detail.cost_to_next_city for detail in self.route_address_details)

    the field name is the camelCased method name
    """

    def __init__(self, *args, **kwargs):
        setattr(self, API_ATTR_TAG, True)  # checked by is_api_attr()
        super().__init__(*args, **kwargs)


def is_api_attr(attr: Any) -> bool:
    """
    :param attr: exposed class attribute
    :return: boolean
    """
    return getattr(attr, API_ATTR_TAG, False) is True
