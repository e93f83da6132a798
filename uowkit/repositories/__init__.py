from .queryable import Queryable, SelectQueryable, SequenceQueryable
from .paginated import (
    PageWindow,
    compute_page_window,
    count_pages,
    to_paged_array,
    to_paged_array_async,
    to_paged_dictionary,
    to_paged_dictionary_async,
    to_paged_list,
    to_paged_list_async,
    validate_page_parameters,
)
from .base_repository import ReadOnlyRepository, Repository
__all__ = [
    "Queryable",
    "SelectQueryable",
    "SequenceQueryable",
    "PageWindow",
    "compute_page_window",
    "count_pages",
    "to_paged_array",
    "to_paged_array_async",
    "to_paged_dictionary",
    "to_paged_dictionary_async",
    "to_paged_list",
    "to_paged_list_async",
    "validate_page_parameters",
    "ReadOnlyRepository",
    "Repository",
]
