from unittest.mock import Mock

import pytest

from playlist_janitor.views.table import Column, SortOrder, SortState, Table, TableHead, sort_rows

COLUMNS = [
    Column("Image", "image"),
    Column("Title", "title", sortable=True),
    Column("Artist", "artist", sortable=True),
]


@pytest.fixture
def handle_sort():
    return Mock()


@pytest.fixture
def head(handle_sort):
    return TableHead(COLUMNS, handle_sort)


def test_starts_unsorted(head):
    assert head.sort_field is None
    assert head.state is SortState.UNSORTED
    assert head.order is None
    assert [head.indicator(c.accessor) for c in COLUMNS] == [None, None, None]


def test_sortable_header_click_sorts_ascending(head, handle_sort):
    head.click("title")

    handle_sort.assert_called_once_with("title", "asc")
    assert head.indicator("title") == "up"


def test_second_click_flips_order(head, handle_sort):
    head.click("title")
    head.click("title")

    assert handle_sort.call_args_list[0].args == ("title", "asc")
    assert handle_sort.call_args_list[-1].args == ("title", "desc")
    assert head.indicator("title") == "down"


def test_third_click_goes_back_to_ascending(head, handle_sort):
    for _ in range(3):
        head.click("title")

    assert [c.args[1] for c in handle_sort.call_args_list] == [SortOrder.ASC, SortOrder.DESC, SortOrder.ASC]


def test_non_sortable_header_click_is_ignored(head, handle_sort):
    assert head.click("image") is False

    handle_sort.assert_not_called()
    assert head.sort_field is None


def test_unknown_column_is_ignored(head, handle_sort):
    assert head.click("nope") is False
    handle_sort.assert_not_called()


def test_other_column_resets_to_ascending(head, handle_sort):
    head.click("title")
    head.click("title")
    head.click("artist")

    handle_sort.assert_called_with("artist", "asc")
    assert head.indicator("artist") == "up"
    assert head.indicator("title") is None


def test_non_sortable_click_keeps_current_sort(head, handle_sort):
    head.click("title")
    head.click("image")

    assert head.sort_field == "title"
    assert head.order == SortOrder.ASC
    assert handle_sort.call_count == 1


@pytest.mark.parametrize(
    "state, expected",
    [
        (SortState.UNSORTED, SortState.ASCENDING),
        (SortState.ASCENDING, SortState.DESCENDING),
        (SortState.DESCENDING, SortState.ASCENDING),
    ],
)
def test_state_transitions(state, expected):
    assert state.next() is expected


def test_sort_rows_puts_none_last_both_ways():
    rows = [{"n": "b"}, {"n": None}, {"n": "A"}, {"n": "c"}]

    assert [r["n"] for r in sort_rows(rows, "n", SortOrder.ASC)] == ["A", "b", "c", None]
    assert [r["n"] for r in sort_rows(rows, "n", SortOrder.DESC)] == ["c", "b", "A", None]


def test_sort_rows_is_stable():
    rows = [{"k": 1, "i": 0}, {"k": 0, "i": 1}, {"k": 1, "i": 2}]

    assert [r["i"] for r in sort_rows(rows, "k", SortOrder.ASC)] == [1, 0, 2]


def test_table_sorts_its_rows_through_the_header():
    table = Table(COLUMNS, [{"title": "b"}, {"title": "a"}, {"title": "c"}])

    table.head.click("title")
    assert [r["title"] for r in table.data] == ["a", "b", "c"]

    table.head.click("title")
    assert [r["title"] for r in table.data] == ["c", "b", "a"]


def test_table_sort_by_descending_and_labels():
    table = Table(COLUMNS, [{"title": "b", "artist": "x"}, {"title": "a", "artist": "y"}])

    table.sort_by("title", descending=True)

    assert table.rows() == [[None, "b", "x"], [None, "a", "y"]]
    assert table.header_labels() == ["Image", "Title ↓", "Artist"]


def test_table_sort_by_non_sortable():
    table = Table(COLUMNS, [])

    with pytest.raises(ValueError):
        table.sort_by("image")
