import locale
import unicodedata
from dataclasses import dataclass
from enum import Enum
from functools import cmp_to_key
from typing import Mapping, NamedTuple, Optional, Sequence

from cell_classifier import display_text, is_number


class SortDirection(Enum):
    ASCENDING = "asc"
    DESCENDING = "desc"


@dataclass(frozen=True)
class SortState:
    column: Optional[int] = None
    direction: Optional[SortDirection] = None

    @property
    def active(self) -> bool:
        return self.column is not None

    def next_for(self, column: int) -> "SortState":
        if self.column != column:
            return SortState(column, SortDirection.ASCENDING)
        if self.direction is SortDirection.ASCENDING:
            return SortState(column, SortDirection.DESCENDING)
        return SortState()


class ViewTriad(NamedTuple):
    processed: list
    displayed: list
    filtered: list


def _strip_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def collate(a: str, b: str) -> int:
    """Compare text by letters, then accents, then case (lowercase first)."""
    for key in (lambda s: _strip_accents(s).casefold(), str.casefold, str.swapcase):
        result = locale.strcoll(key(a), key(b))
        if result:
            return result
    return 0


def _compare_cells(a, b) -> int:
    if is_number(a) and is_number(b):
        a, b = float(a), float(b)
        return (a > b) - (a < b)
    return collate(display_text(a), display_text(b))


def _normalize_predicates(predicates) -> dict[int, str]:
    if predicates is None:
        return {}
    if isinstance(predicates, Mapping):
        items = predicates.items()
    else:
        items = enumerate(predicates)
    needles = {}
    for col, text in items:
        needle = "" if text is None else str(text).strip().lower()
        if needle:
            needles[int(col)] = needle
    return needles


class ViewState:
    """Processed, displayed and filtered rows of one table plus its sort state."""

    def __init__(self, processed=None):
        self.sort_state = SortState()
        self.processed: list = []
        self.displayed: list = []
        self.filtered: list = []
        self._positions: dict[int, int] = {}
        self.width = 0
        self.initialize(processed or [])

    def initialize(self, processed):
        self.processed = list(processed)
        self.displayed = list(self.processed)
        self.filtered = list(self.processed)
        self.sort_state = SortState()
        self._positions = {id(row): idx for idx, row in enumerate(self.processed)}
        self.width = len(self.processed[0]) if self.processed else 0

    @property
    def triad(self) -> ViewTriad:
        return ViewTriad(self.processed, self.displayed, self.filtered)

    # ---------- sorting ----------
    def sort(self, column: int) -> SortState:
        if self.width and not 0 <= column < self.width:
            raise IndexError(f"Sort column {column} out of range (0..{self.width - 1})")

        self.sort_state = self.sort_state.next_for(column)
        direction = self.sort_state.direction

        if direction is None:
            self.displayed = list(self.processed)
        else:
            sign = 1 if direction is SortDirection.ASCENDING else -1
            self.displayed.sort(
                key=cmp_to_key(lambda a, b: sign * _compare_cells(a[column], b[column]))
            )

        self.filtered = list(self.displayed)
        return self.sort_state

    # ---------- filtering ----------
    def filter(self, predicates) -> list:
        needles = _normalize_predicates(predicates)
        if not needles:
            self.filtered = list(self.displayed)
            return self.filtered

        def _matches(row: Sequence) -> bool:
            for col, needle in needles.items():
                if col < 0 or col >= len(row):
                    continue
                if needle not in display_text(row[col]).lower():
                    return False
            return True

        self.filtered = [row for row in self.displayed if _matches(row)]
        return self.filtered

    # ---------- lookups ----------
    def processed_index(self, row) -> Optional[int]:
        idx = self._positions.get(id(row))
        if idx is None or self.processed[idx] is not row:
            return None
        return idx
