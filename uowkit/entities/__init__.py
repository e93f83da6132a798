from .page import (
    PagedArray,
    PagedCollection,
    PagedDictionary,
    PagedList,
    ReadOnlyList,
    as_read_only,
)

__all__ = [
    "PagedArray",
    "PagedCollection",
    "PagedDictionary",
    "PagedList",
    "ReadOnlyList",
    "as_read_only",
]
