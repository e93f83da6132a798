from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Generator, Hashable, List, Mapping, Sequence, Type, TypeVar

from uowkit.core.exceptions import DuplicateKeyError, InvalidPageArgumentError, PageNotFoundError
from uowkit.core.logger import logger
from uowkit.entities.page import (
    PagedArray,
    PagedCollection,
    PagedDictionary,
    PagedList,
    as_read_only,
)
from .queryable import Queryable

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)


@dataclass(frozen=True, slots=True)
class PageWindow:
    """Result of the page computation: totals plus the rows to fetch."""
    total_count: int
    total_pages: int
    skip: int
    take: int


def validate_page_parameters(page_number: int, page_size: int) -> None:
    if page_number < 0:
        raise InvalidPageArgumentError(
            "page_number", "The page number must be greater than or equal to zero"
        )
    if page_size <= 0:
        raise InvalidPageArgumentError("page_size", "The page size must be greater than zero")


def count_pages(count: int, page_size: int) -> int:
    """``ceil(count / page_size)``, never less than one page."""
    total_pages = (count + page_size - 1) // page_size
    return total_pages or 1


def compute_page_window(count: int, page_size: int, page_number: int) -> PageWindow:
    total_pages = count_pages(count, page_size)
    if page_number >= total_pages:
        raise PageNotFoundError(page_number, total_pages)
    return PageWindow(
        total_count=count,
        total_pages=total_pages,
        skip=page_number * page_size,
        take=page_size,
    )


# -------- materialization strategies --------
@dataclass(frozen=True, slots=True)
class _PageShape:
    page_cls: Type[PagedCollection]
    build_items: Callable[[List[Any]], Any]


def _array_items(rows: List[T]) -> Sequence[T]:
    return tuple(rows)


def _list_items(rows: List[T]) -> Sequence[T]:
    return as_read_only(rows)


def _dictionary_items(key_selector: Callable[[T], K]) -> Callable[[List[T]], Mapping[K, T]]:
    def build(rows: List[T]) -> Mapping[K, T]:
        data: dict = {}
        for row in rows:
            key = key_selector(row)
            if key in data:
                raise DuplicateKeyError(key)
            data[key] = row
        return MappingProxyType(data)
    return build


ARRAY = _PageShape(PagedArray, _array_items)
LIST = _PageShape(PagedList, _list_items)


def _dictionary_shape(key_selector: Callable[[Any], Any]) -> _PageShape:
    return _PageShape(PagedDictionary, _dictionary_items(key_selector))


# -------- shared pagination steps --------
# The generator yields the queryable to count, receives the count, yields the
# queryable to fetch, receives the rows and returns the built page. The sync
# and async drivers only differ in how they run those two operations.
PaginationSteps = Generator[Queryable, Any, PagedCollection]


def _pagination_steps(
    source: Queryable,
    page_size: int,
    page_number: int,
    shape: _PageShape,
) -> PaginationSteps:
    validate_page_parameters(page_number, page_size)
    count = yield source
    window = compute_page_window(count, page_size, page_number)
    rows = yield source.skip(window.skip).take(window.take)
    logger.debug(
        "[Pagination] %s page=%s size=%s total=%s pages=%s rows=%s",
        shape.page_cls.__name__, page_number, page_size, window.total_count, window.total_pages, len(rows),
    )
    return shape.page_cls(
        page_number,
        page_size,
        window.total_count,
        window.total_pages,
        shape.build_items(rows),
    )


def _run_blocking(steps: PaginationSteps) -> PagedCollection:
    to_count = next(steps)
    to_fetch = steps.send(to_count.count())
    try:
        steps.send(to_fetch.to_list())
    except StopIteration as done:
        return done.value
    raise RuntimeError("pagination steps did not finish")


async def _run_async(steps: PaginationSteps) -> PagedCollection:
    to_count = next(steps)
    to_fetch = steps.send(await to_count.count_async())
    rows = await to_fetch.to_list_async()
    try:
        steps.send(rows)
    except StopIteration as done:
        return done.value
    raise RuntimeError("pagination steps did not finish")


# -------- public API --------
def to_paged_array(source: Queryable[T], page_size: int, page_number: int = 0) -> PagedArray[T]:
    """
    Build one page of ``source`` backed by a tuple.

    Raises:
        InvalidPageArgumentError: page_size <= 0 or page_number < 0.
        PageNotFoundError: page_number is past the last page.
    """
    return _run_blocking(_pagination_steps(source, page_size, page_number, ARRAY))


async def to_paged_array_async(source: Queryable[T], page_size: int, page_number: int = 0) -> PagedArray[T]:
    return await _run_async(_pagination_steps(source, page_size, page_number, ARRAY))


def to_paged_list(source: Queryable[T], page_size: int, page_number: int = 0) -> PagedList[T]:
    """
    Build one page of ``source`` backed by a read-only list view.

    Raises:
        InvalidPageArgumentError: page_size <= 0 or page_number < 0.
        PageNotFoundError: page_number is past the last page.
    """
    return _run_blocking(_pagination_steps(source, page_size, page_number, LIST))


async def to_paged_list_async(source: Queryable[T], page_size: int, page_number: int = 0) -> PagedList[T]:
    return await _run_async(_pagination_steps(source, page_size, page_number, LIST))


def to_paged_dictionary(
    source: Queryable[T],
    key_selector: Callable[[T], K],
    page_size: int,
    page_number: int = 0,
) -> PagedDictionary[K, T]:
    """
    Build one page of ``source`` keyed by ``key_selector``.

    Keys must be unique within the page.

    Raises:
        InvalidPageArgumentError: page_size <= 0 or page_number < 0.
        PageNotFoundError: page_number is past the last page.
        DuplicateKeyError: two rows of the page share a key.
    """
    return _run_blocking(
        _pagination_steps(source, page_size, page_number, _dictionary_shape(key_selector))
    )


async def to_paged_dictionary_async(
    source: Queryable[T],
    key_selector: Callable[[T], K],
    page_size: int,
    page_number: int = 0,
) -> PagedDictionary[K, T]:
    return await _run_async(
        _pagination_steps(source, page_size, page_number, _dictionary_shape(key_selector))
    )
