#
# The listing pipeline: filter -> project -> sort -> shape -> paginate
#
# - the sort expression is parsed first: an invalid expression fails the request before
#   the database is queried
# - filtering happens on the model instances, the filters may use attributes that aren't
#   part of the output
# - a client sort expression may only reference selected output fields, so sorting the
#   complete projections gives the same order as sorting the shaped records. The resource
#   default sort may use fields the client didn't select.
# - pagination comes last so the metadata describes the filtered and sorted collection
#
from typing import Any, List, Mapping, Optional, Tuple
import transitnet
from .config import get_config
from .pagination import PagingMetadata, paginate
from .shaping import Record, select_fields, shape_all, split_csv
from .sorting import SortSpec, apply_sort, parse_sort


class ListingRequest:
    """
    The pipeline arguments of a listing request

    Attributes:
        fields: requested fields csv
        sort: sort expression
        page_number: requested page number (None if absent or invalid)
        page_size: requested page size (None if absent or invalid)
        args: all query arguments, the filter clauses pick theirs
    """

    def __init__(
        self,
        fields: Optional[str] = None,
        sort: Optional[str] = None,
        page_number: Optional[int] = None,
        page_size: Optional[int] = None,
        args: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.fields = fields
        self.sort = sort
        self.page_number = page_number
        self.page_size = page_size
        self.args = dict(args or {})

    @classmethod
    def from_args(cls, args: Mapping[str, str]) -> "ListingRequest":
        """
        :param args: query arguments, keys are matched case-insensitively
        :return: ListingRequest
        """
        lower_args = {str(key).lower(): value for key, value in args.items()}
        return cls(
            fields=lower_args.get("fields"),
            sort=lower_args.get("sort"),
            page_number=to_int(lower_args.get("pagenumber")),
            page_size=to_int(lower_args.get("pagesize")),
            args=lower_args,
        )


def to_int(value: Optional[str]) -> Optional[int]:
    """
    :return: int value or None when the value is absent or not an integer,
             pagination arguments are normalized, not rejected
    """
    if value is None:
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        transitnet.log.debug(f'Ignoring invalid pagination value "{value}"')
        return None


class ListingPipeline:
    """
    Runs a listing request for an exposed class (ResourceBase subclass)
    """

    def __init__(self, resource_class: Any) -> None:
        self.resource_class = resource_class
        self.field_map = resource_class._s_field_map()

    def select(self, request: ListingRequest) -> List[str]:
        return select_fields(self.field_map, request.fields, self.resource_class._s_default_fields, self.field_map.id_field)

    def parse_sort(self, request: ListingRequest, selected: List[str]) -> SortSpec:
        """
        The client sort expression may only use the selected fields,
        the default sort of the resource may use any field
        """
        if split_csv(request.sort):
            return parse_sort(request.sort, selected)
        return parse_sort(None, self.field_map, self.resource_class._s_default_sort)

    def filter(self, request: ListingRequest) -> List[Any]:
        """
        Simple filters are executed by the db, the aggregate filters narrow the materialized result
        """
        criteria = self.resource_class._s_criteria(request.args)
        if criteria:
            transitnet.log.debug(f"Filtering {self.resource_class.__name__}: {criteria.to_dict()}")
        query = criteria.apply(self.resource_class._s_query(), self.resource_class)
        instances = query.all()
        return criteria.narrow(instances)

    def project(self, instances: List[Any]) -> List[Record]:
        return [self.field_map.project(instance) for instance in instances]

    def run(self, request: ListingRequest) -> Tuple[List[Record], PagingMetadata]:
        """
        :param request: listing arguments
        :return: page of shaped records, paging metadata
        :raises InvalidSortExpression: if the sort expression references an unknown or unselected field
        """
        selected = self.select(request)
        sort_spec = self.parse_sort(request, selected)

        instances = self.filter(request)
        records = apply_sort(self.project(instances), sort_spec)
        records = shape_all(records, selected)

        return paginate(
            records,
            request.page_number,
            request.page_size,
            max_page_size=get_config("MAX_PAGE_SIZE"),
            default_page_size=get_config("DEFAULT_PAGE_SIZE"),
        )
