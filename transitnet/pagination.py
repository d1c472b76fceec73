#
# Pagination: the last stage of the listing pipeline
#
# The metadata is computed over the full filtered-and-sorted sequence, the page is sliced
# afterwards. A page number past the last page yields an empty page, clients should use the
# metadata (not the page emptiness) to detect the end of the collection
#
from math import ceil
from typing import Any, Dict, List, Optional, Sequence, Tuple


class PagingMetadata:
    """
    Paging information sent to the client alongside a page of records

    Attributes:
        total_count: number of records in the complete (filtered) collection
        page_size: effective page size, after clamping
        current_page: requested page number, not clamped to total_pages
        total_pages: ceil(total_count / page_size)
    """

    def __init__(self, total_count: int, page_size: int, current_page: int) -> None:
        self.total_count = total_count
        self.page_size = page_size
        self.current_page = current_page
        self.total_pages = ceil(total_count / page_size) if page_size > 0 else 0

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages

    def to_dict(self) -> Dict[str, Any]:
        """
        :return: json serializable dict, this is what ends up in the paging header
        """
        return {
            "totalCount": self.total_count,
            "pageSize": self.page_size,
            "currentPage": self.current_page,
            "totalPages": self.total_pages,
            "hasPrevious": self.has_previous,
            "hasNext": self.has_next,
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PagingMetadata):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return (
            f"PagingMetadata(total_count={self.total_count}, page_size={self.page_size}, "
            f"current_page={self.current_page}, total_pages={self.total_pages})"
        )


def clamp_page_size(page_size: Optional[int], max_page_size: int, default: int) -> int:
    """
    :param page_size: requested page size, None if the client didn't specify it
    :param max_page_size: upper bound
    :param default: page size used when none was requested
    :return: page size within [1, max_page_size], at least 1 even if max_page_size is lower
    """
    if page_size is None:
        page_size = default
    return max(1, min(page_size, max_page_size))


def paginate(
    records: Sequence[Any], page_number: Optional[int], page_size: Optional[int], max_page_size: int, default_page_size: int = 10
) -> Tuple[List[Any], PagingMetadata]:
    """
    Slice one page from the records

    :param records: filtered and sorted records
    :param page_number: 1-indexed page number, values < 1 are treated as 1
    :param page_size: requested page size, clamped to [1, max_page_size]
    :param max_page_size: configured page size ceiling
    :param default_page_size: page size used when page_size is None
    :return: page, metadata
    """
    page_size = clamp_page_size(page_size, max_page_size, default_page_size)
    if page_number is None or page_number < 1:
        page_number = 1

    metadata = PagingMetadata(len(records), page_size, page_number)
    offset = (page_number - 1) * page_size
    page = list(records[offset : offset + page_size])
    return page, metadata
