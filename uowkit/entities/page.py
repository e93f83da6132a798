from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from itertools import islice
from typing import Any, Generic, Tuple, TypeVar, Union, overload

T = TypeVar("T")
K = TypeVar("K")
V = TypeVar("V")


class ReadOnlyList(Sequence[T]):
    """Read-only view over a list; no copy is made."""

    __slots__ = ("_source",)

    def __init__(self, source: Sequence[T]) -> None:
        self._source = source

    @overload
    def __getitem__(self, index: int) -> T: ...
    @overload
    def __getitem__(self, index: slice) -> "ReadOnlyList[T]": ...

    def __getitem__(self, index):
        if isinstance(index, slice):
            return ReadOnlyList(self._source[index])
        return self._source[index]

    def __len__(self) -> int:
        return len(self._source)

    def __iter__(self) -> Iterator[T]:
        return iter(self._source)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (ReadOnlyList, list, tuple)):
            return list(self) == list(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"ReadOnlyList({list(self._source)!r})"


def as_read_only(collection: Iterable[T]) -> Sequence[T]:
    """Return ``collection`` as a read-only sequence, wrapping it only when needed."""
    if collection is None:
        raise TypeError("collection must not be None")
    if isinstance(collection, (tuple, ReadOnlyList)):
        return collection
    if not isinstance(collection, Sequence):
        collection = list(collection)
    return ReadOnlyList(collection)


@dataclass(frozen=True, slots=True)
class PagedCollection(Generic[T]):
    """
    One page of a larger result set.

    Built by the pagination helpers in ``uowkit.repositories.paginated`` once
    the page parameters and the page window have been validated; the class
    itself trusts its arguments. Page numbers start at zero.
    """
    page_number: int
    page_size: int
    total_count: int
    total_pages: int
    items: Union[Sequence[Any], Mapping[Any, Any]]

    @property
    def has_previous_page(self) -> bool:
        return self.page_number > 0

    @property
    def has_next_page(self) -> bool:
        return self.page_number < self.total_pages - 1

    def element_at(self, index: int) -> T:
        """Item at ``index`` in page order."""
        return self.items[index]

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.items)


@dataclass(frozen=True, slots=True)
class PagedArray(PagedCollection[T]):
    """Page whose items are a tuple."""
    items: Tuple[T, ...]

    def __getitem__(self, index: int) -> T:
        return self.items[index]


@dataclass(frozen=True, slots=True)
class PagedList(PagedCollection[T]):
    """Page whose items are a read-only list view."""
    items: Sequence[T]

    def __getitem__(self, index: int) -> T:
        return self.items[index]


@dataclass(frozen=True, slots=True)
class PagedDictionary(PagedCollection[Tuple[K, V]], Generic[K, V]):
    """Page whose items are keyed by the caller's key selector, in page order."""
    items: Mapping[K, V]

    def __getitem__(self, key: K) -> V:
        return self.items[key]

    def element_at(self, index: int) -> Tuple[K, V]:
        """``(key, value)`` pair at ``index`` in page order."""
        size = len(self.items)
        if index < 0:
            index += size
        if not 0 <= index < size:
            raise IndexError("page index out of range")
        key = next(islice(self.items, index, None))
        return key, self.items[key]

    def __contains__(self, key: object) -> bool:
        return key in self.items

    def keys(self):
        return self.items.keys()

    def values(self):
        return self.items.values()

    def pairs(self):
        return self.items.items()

