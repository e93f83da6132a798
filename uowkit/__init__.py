from uowkit.core.exceptions import (
    DuplicateKeyError,
    InvalidPageArgumentError,
    PageNotFoundError,
    UowKitError,
)
from uowkit.entities import PagedArray, PagedCollection, PagedDictionary, PagedList, ReadOnlyList, as_read_only
from uowkit.repositories import (
    Queryable,
    ReadOnlyRepository,
    Repository,
    SelectQueryable,
    SequenceQueryable,
    to_paged_array,
    to_paged_array_async,
    to_paged_dictionary,
    to_paged_dictionary_async,
    to_paged_list,
    to_paged_list_async,
)
from uowkit.unit_of_work import UnitOfWork

__version__ = "1.0.0"

__all__ = [
    "DuplicateKeyError",
    "InvalidPageArgumentError",
    "PageNotFoundError",
    "UowKitError",
    "PagedArray",
    "PagedCollection",
    "PagedDictionary",
    "PagedList",
    "ReadOnlyList",
    "as_read_only",
    "Queryable",
    "ReadOnlyRepository",
    "Repository",
    "SelectQueryable",
    "SequenceQueryable",
    "to_paged_array",
    "to_paged_array_async",
    "to_paged_dictionary",
    "to_paged_dictionary_async",
    "to_paged_list",
    "to_paged_list_async",
    "UnitOfWork",
]
