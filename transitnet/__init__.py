# flake8: noqa: F401
#
# transitnet: REST collections for a transportation network
# The listing endpoints filter, shape, sort and paginate any exposed model
#
# Configuration parameters:
# - MAX_PAGE_SIZE
# - DEFAULT_PAGE_SIZE
# - PAGING_HEADER
# - URL_PREFIX
#
from .__about__ import __version__, __description__
from .transitnet_init import TransitNet, DB, log
from .errors import ApiError, ValidationError, InvalidSortExpression, NotFoundError
from .shaping import FieldMap, select_fields, shape
from .sorting import SortKey, parse_sort, apply_sort
from .pagination import PagingMetadata, paginate
from .filtering import FilterCriteria, Equals, Range, Search, Flag, AggregateRange, sum_of
from .pipeline import ListingPipeline, ListingRequest
from .api_attr import api_attr
from .base import ResourceBase
from .api import TransitAPI
from .config import get_config

__all__ = (
    "__version__",
    "__description__",
    #
    "TransitNet",
    "TransitAPI",
    "ResourceBase",
    "api_attr",
    "DB",
    "log",
    "get_config",
    # pipeline
    "FieldMap",
    "select_fields",
    "shape",
    "SortKey",
    "parse_sort",
    "apply_sort",
    "PagingMetadata",
    "paginate",
    "FilterCriteria",
    "Equals",
    "Range",
    "Search",
    "Flag",
    "AggregateRange",
    "sum_of",
    "ListingPipeline",
    "ListingRequest",
    # Errors
    "ApiError",
    "ValidationError",
    "InvalidSortExpression",
    "NotFoundError",
)
