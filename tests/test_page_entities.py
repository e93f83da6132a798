"""Tests for the paged collection types."""
import dataclasses
from types import MappingProxyType

import pytest

from uowkit.entities import (
    PagedArray,
    PagedCollection,
    PagedDictionary,
    PagedList,
    ReadOnlyList,
    as_read_only,
)


class TestReadOnlyList:
    """Read-only list view."""

    def test_reads_through_to_source(self):
        view = ReadOnlyList([1, 2, 3])
        assert len(view) == 3
        assert view[0] == 1
        assert view[-1] == 3
        assert list(view) == [1, 2, 3]
        assert 2 in view

    def test_has_no_mutators(self):
        view = ReadOnlyList([1, 2, 3])
        assert not hasattr(view, "append")
        with pytest.raises(TypeError):
            view[0] = 10  # type: ignore[index]

    def test_slice_is_read_only(self):
        view = ReadOnlyList([1, 2, 3, 4])
        part = view[1:3]
        assert isinstance(part, ReadOnlyList)
        assert part == [2, 3]

    def test_index_out_of_range(self):
        with pytest.raises(IndexError):
            ReadOnlyList([1])[1]

    def test_equality(self):
        assert ReadOnlyList([1, 2]) == ReadOnlyList([1, 2])
        assert ReadOnlyList([1, 2]) == (1, 2)
        assert ReadOnlyList([1, 2]) != [2, 1]


class TestAsReadOnly:
    """Wrapping collections as read-only sequences."""

    def test_wraps_list(self):
        source = [1, 2]
        view = as_read_only(source)
        assert isinstance(view, ReadOnlyList)
        assert view == [1, 2]

    def test_returns_read_only_input_unchanged(self):
        t = (1, 2)
        assert as_read_only(t) is t
        view = ReadOnlyList([1])
        assert as_read_only(view) is view

    def test_materializes_iterables(self):
        assert as_read_only(x for x in range(3)) == [0, 1, 2]

    def test_none_rejected(self):
        with pytest.raises(TypeError):
            as_read_only(None)  # type: ignore[arg-type]


class TestPagedCollection:
    """Metadata and navigation flags."""

    @pytest.mark.parametrize(
        "page_number,total_pages,has_prev,has_next",
        [(0, 1, False, False), (0, 10, False, True), (9, 10, True, False), (4, 10, True, True)],
    )
    def test_navigation_flags(self, page_number, total_pages, has_prev, has_next):
        page = PagedArray(page_number, 10, total_pages * 10, total_pages, tuple(range(10)))
        assert page.has_previous_page is has_prev
        assert page.has_next_page is has_next

    def test_is_immutable(self):
        page = PagedArray(0, 2, 2, 1, (1, 2))
        with pytest.raises(dataclasses.FrozenInstanceError):
            page.page_number = 1  # type: ignore[misc]
        with pytest.raises(dataclasses.FrozenInstanceError):
            page.items = ()  # type: ignore[misc]

    def test_len_and_iteration(self):
        page = PagedList(0, 5, 3, 1, ReadOnlyList(["a", "b", "c"]))
        assert len(page) == 3
        assert list(page) == ["a", "b", "c"]

    def test_variants_share_base(self):
        for cls in (PagedArray, PagedList, PagedDictionary):
            assert issubclass(cls, PagedCollection)


class TestPagedArrayAndList:
    """Positional indexing."""

    def test_array_indexing(self):
        page = PagedArray(1, 3, 7, 3, ("d", "e", "f"))
        assert page[0] == "d"
        assert page[2] == "f"
        with pytest.raises(IndexError):
            page[3]

    def test_list_indexing(self):
        page = PagedList(0, 3, 2, 1, ReadOnlyList(["x", "y"]))
        assert page[1] == "y"
        with pytest.raises(IndexError):
            page[2]

    def test_element_at_matches_index(self):
        page = PagedArray(0, 3, 3, 1, ("a", "b", "c"))
        assert [page.element_at(i) for i in range(3)] == ["a", "b", "c"]


class TestPagedDictionary:
    """Key indexing."""

    @pytest.fixture
    def page(self):
        items = MappingProxyType({"a": 1, "b": 2})
        return PagedDictionary(0, 5, 2, 1, items)

    def test_key_lookup(self, page):
        assert page["a"] == 1
        assert page["b"] == 2
        assert "a" in page
        assert "z" not in page

    def test_missing_key(self, page):
        with pytest.raises(KeyError):
            page["z"]

    def test_views(self, page):
        assert list(page.keys()) == ["a", "b"]
        assert list(page.values()) == [1, 2]
        assert list(page.pairs()) == [("a", 1), ("b", 2)]

    def test_element_at_returns_pair(self, page):
        assert page.element_at(1) == ("b", 2)

    def test_element_at_negative_and_out_of_range(self, page):
        assert page.element_at(-1) == ("b", 2)
        with pytest.raises(IndexError):
            page.element_at(2)
        with pytest.raises(IndexError):
            page.element_at(-3)

    def test_iteration_yields_keys(self, page):
        assert list(page) == ["a", "b"]

    def test_items_are_read_only(self, page):
        with pytest.raises(TypeError):
            page.items["c"] = 3  # type: ignore[index]
