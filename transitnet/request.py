"""
Request parsing

Query argument names are case-insensitive: fields=, Fields= and FIELDS= are equivalent.
The listing arguments (fields, sort, pageNumber, pageSize and the filters) are parsed
once, when the request is created.
"""
from flask import Request
from .pipeline import ListingRequest


# pylint: disable=too-many-ancestors
class TransitRequest(Request):
    """
    Parse the listing-related request arguments:
    - fields: csv of the fields to return
    - sort: csv sort expression, "-" prefix for descending
    - pageNumber, pageSize
    - resource specific filters
    """

    query_args = {}

    def __init__(self, *args, **kwargs):
        """
        constructor
        """
        super().__init__(*args, **kwargs)
        self.parse_query_args()

    def parse_query_args(self):
        """
        lowercase the query argument names, the first value wins when a name occurs more than once
        """
        self.query_args = {}
        for arg, val in self.args.items(multi=True):
            self.query_args.setdefault(arg.lower(), val)

    @property
    def fields(self):
        return self.query_args.get("fields")

    @property
    def listing(self) -> ListingRequest:
        """
        :return: the pipeline arguments of this request
        """
        return ListingRequest.from_args(self.query_args)
