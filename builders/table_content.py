"""Table content store.

Holds the header cells and data rows of one table.  Rows are built
incrementally (open a row, add cells, close it) and are read-only while
widths are allocated and markup is rendered.
"""

import logging
from dataclasses import dataclass
from typing import Iterator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Cell:
    """One table cell: its (possibly marked-up) content and a style class."""

    content: str
    style_class: str = ""


class TableContent:
    """Append-only store for a table header and its body rows."""

    def __init__(self) -> None:
        self._header: list[Cell] = []
        self._rows: list[tuple[Cell, ...]] = []
        self._current_row: list[Cell] = []

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    def add_header_cell(self, content: str, style_class: str = "") -> None:
        self._header.append(Cell(str(content), style_class or ""))

    def start_data_row(self) -> None:
        self._current_row = []

    def add_data_row_cell(self, content: str, style_class: str = "") -> None:
        self._current_row.append(Cell(str(content), style_class or ""))

    def end_data_row(self) -> None:
        self._rows.append(tuple(self._current_row))
        self._current_row = []

    def add_row(self, cells: list) -> None:
        """Append a complete body row.

        Each entry is either a string or a ``(content, style_class)`` pair.
        """
        self.start_data_row()
        for cell in cells:
            if isinstance(cell, (tuple, list)):
                self.add_data_row_cell(*cell)
            else:
                self.add_data_row_cell(cell)
        self.end_data_row()

    def reset_data(self) -> None:
        """Clear header, body rows and any open row."""
        self._header = []
        self._rows = []
        self._current_row = []

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    @property
    def header(self) -> tuple[Cell, ...]:
        return tuple(self._header)

    @property
    def rows(self) -> tuple[tuple[Cell, ...], ...]:
        return tuple(self._rows)

    @property
    def column_count(self) -> int:
        return len(self._header)

    def iter_rows(self, include_header: bool = True) -> Iterator[tuple[Cell, ...]]:
        """Yield the header (as row 0) followed by every body row."""
        if include_header:
            yield tuple(self._header)
        yield from self._rows

    def __len__(self) -> int:
        return len(self._rows)
