import logging
from typing import Dict, Optional, Tuple

from sheet_author import __name__ as sheet_author_name
from sheet_author.cell import Cell

logger = logging.getLogger(sheet_author_name)
debug = logger.debug


class CellStore:
    """Cells of one worksheet, created on first reference.

    The store owns every :py:class:`~sheet_author.cell.Cell` it creates and
    never removes them. It also records the highest row and column written so
    that autosizing only visits the part of the sheet in use.
    """

    __slots__ = (
        "_worksheet",
        "_registry",
        "_cells",
        "highest_modified_row",
        "highest_modified_col",
    )

    def __init__(self, worksheet: object, registry: object) -> None:
        self._worksheet = worksheet
        self._registry = registry
        self._cells: Dict[Tuple[int, int], Cell] = {}
        self.highest_modified_row: Optional[int] = None
        self.highest_modified_col: Optional[int] = None

    def __len__(self) -> int:
        return len(self._cells)

    def __contains__(self, key: Tuple[int, int]) -> bool:
        return key in self._cells

    def cell(self, row: int, col: int) -> Cell:
        """Return the cell at ``(row, col)``, creating it in the worksheet if needed."""
        key = (row, col)
        if key not in self._cells:
            # openpyxl creates the row and cell storage on demand
            native = self._worksheet.cell(row=row + 1, column=col + 1)
            self._cells[key] = Cell(row, col, native, self._registry)
        return self._cells[key]

    def set_value(self, row: int, col: int, value) -> Cell:
        cell = self.cell(row, col)
        cell.value = value
        self.record_modified(row, col)
        return cell

    def record_modified(self, row: int, col: int) -> None:
        if self.highest_modified_row is None or row > self.highest_modified_row:
            self.highest_modified_row = row
        if self.highest_modified_col is None or col > self.highest_modified_col:
            self.highest_modified_col = col

    def rescan(self) -> None:
        """Raise the high-water marks to cover every cell in the worksheet.

        Used when cells were written without going through the store, such as
        a document loaded from a file. An empty worksheet leaves the marks unchanged.
        """
        # openpyxl reports a 1x1 extent for a worksheet with no cells
        if not self._worksheet._cells:
            return
        self.record_modified(self._worksheet.max_row - 1, self._worksheet.max_column - 1)
        debug(
            "%s: rescanned to row %d, column %d",
            self._worksheet.title,
            self.highest_modified_row,
            self.highest_modified_col,
        )

    def refresh(self, row: int, col: int) -> None:
        """Rebind a cached cell to the worksheet's current cell object.

        Merging replaces the worksheet's cells inside a region with placeholders,
        leaving cached cells pointing at objects the worksheet no longer holds.
        """
        key = (row, col)
        if key in self._cells:
            native = self._worksheet.cell(row=row + 1, column=col + 1)
            self._cells[key]._rebind(native)

    def row_range(self) -> range:
        """Rows from the first row to the highest row written."""
        return range(0 if self.highest_modified_row is None else self.highest_modified_row + 1)

    def col_range(self) -> range:
        """Columns from the first column to the highest column written."""
        return range(0 if self.highest_modified_col is None else self.highest_modified_col + 1)
