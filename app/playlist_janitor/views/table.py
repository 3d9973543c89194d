"""
Sortable tables.

TableHead tracks which column is sorted and in which direction, and reports
every change through a callback. It never touches the rows; Table is the
consumer that sorts its data when the header says so.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class SortState(str, Enum):
    """Sort state of the active column"""
    UNSORTED = "unsorted"
    ASCENDING = "ascending"
    DESCENDING = "descending"

    @property
    def order(self) -> Optional[SortOrder]:
        return _STATE_ORDER[self]

    def next(self) -> "SortState":
        return _TRANSITIONS[self]


_TRANSITIONS = {
    SortState.UNSORTED: SortState.ASCENDING,
    SortState.ASCENDING: SortState.DESCENDING,
    SortState.DESCENDING: SortState.ASCENDING,
}

_STATE_ORDER = {
    SortState.UNSORTED: None,
    SortState.ASCENDING: SortOrder.ASC,
    SortState.DESCENDING: SortOrder.DESC,
}


@dataclass(frozen=True)
class Column:
    label: str
    accessor: str
    sortable: bool = False


SortHandler = Callable[[str, SortOrder], None]


class TableHead:
    def __init__(self, columns: Sequence[Column], handle_sorting: SortHandler):
        self.columns = list(columns)
        self.handle_sorting = handle_sorting
        self.sort_field: Optional[str] = None
        self.state = SortState.UNSORTED

    @property
    def order(self) -> Optional[SortOrder]:
        return self.state.order

    def _column(self, accessor: str) -> Optional[Column]:
        for col in self.columns:
            if col.accessor == accessor:
                return col
        return None

    def click(self, accessor: str) -> bool:
        """
        Handle a click on a column header.

        Returns:
            True if the sort changed and the handler was called
        """
        col = self._column(accessor)
        if col is None or not col.sortable:
            return False

        if accessor != self.sort_field:
            self.sort_field = accessor
            self.state = SortState.UNSORTED
        self.state = self.state.next()

        self.handle_sorting(accessor, self.state.order)
        return True

    def indicator(self, accessor: str) -> Optional[str]:
        """'up' or 'down' next to the active column, None elsewhere."""
        if accessor != self.sort_field:
            return None
        if self.state is SortState.ASCENDING:
            return "up"
        if self.state is SortState.DESCENDING:
            return "down"
        return None


def _sort_key(value: Any):
    # None sorts after everything else, strings ignore case
    if value is None:
        return (1, "")
    if isinstance(value, str):
        return (0, value.casefold())
    return (0, value)


def sort_rows(rows: List[Dict[str, Any]], accessor: str, order: SortOrder) -> List[Dict[str, Any]]:
    """Stable sort of dict rows on one key. None values stay last in both directions."""
    present = [r for r in rows if r.get(accessor) is not None]
    missing = [r for r in rows if r.get(accessor) is None]
    present = sorted(present, key=lambda r: _sort_key(r.get(accessor)), reverse=order == SortOrder.DESC)
    return present + missing


class Table:
    def __init__(self, columns: Sequence[Column], data: List[Dict[str, Any]]):
        self.columns = list(columns)
        self.data = list(data)
        self.head = TableHead(self.columns, self.handle_sorting)

    def handle_sorting(self, accessor: str, order: SortOrder) -> None:
        self.data = sort_rows(self.data, accessor, order)

    def sort_by(self, accessor: str, descending: bool = False) -> None:
        """Click the header until it shows the wanted order."""
        if not self.head.click(accessor):
            raise ValueError(f"Column '{accessor}' is not sortable")
        wanted = SortOrder.DESC if descending else SortOrder.ASC
        if self.head.order != wanted:
            self.head.click(accessor)

    def header_labels(self) -> List[str]:
        labels = []
        for col in self.columns:
            ind = self.head.indicator(col.accessor)
            arrow = {"up": " ↑", "down": " ↓"}.get(ind, "")
            labels.append(f"{col.label}{arrow}")
        return labels

    def rows(self) -> List[List[Any]]:
        return [[row.get(col.accessor) for col in self.columns] for row in self.data]
