import logging
from io import BytesIO
from typing import BinaryIO, List, Mapping, Optional, Tuple
from zipfile import BadZipFile

from openpyxl import Workbook, load_workbook
from openpyxl.drawing.image import Image
from openpyxl.utils.exceptions import InvalidFileException

from sheet_author import __name__ as sheet_author_name
from sheet_author.cell import (
    Cell,
    Font,
    Style,
    range_parts,
    xl_cell_to_rowcol,
    xl_col_to_name,
    xl_range_to_rowcols,
)
from sheet_author.cell_storage import CellStore
from sheet_author.constants import (
    COLUMN_WIDTH_UNITS,
    DEFAULT_COLUMN_WIDTH,
    DEFAULT_ROW_HEIGHT,
    DEFAULT_SHEET_PREFIX,
    MAX_COL_COUNT,
    MAX_COLUMN_WIDTH,
    MAX_ROW_COUNT,
    MAX_ROW_HEIGHT,
    ROW_HEIGHT_RESET_MARGIN,
    SPACER_COLUMN_WIDTH,
    TWIPS_PER_POINT,
)
from sheet_author.containers import ItemsList
from sheet_author.exceptions import (
    FileError,
    FileFormatError,
    InvalidRegionError,
    UnsupportedError,
    ValueOutOfRangeError,
)
from sheet_author.model import CellStyleRecord, StyleRegistry
from sheet_author.utils import estimate_col_width, estimate_row_height

logger = logging.getLogger(sheet_author_name)
debug = logger.debug

__all__ = ["Document", "Sheet"]

BORDER_SIDES = ["top", "bottom", "left", "right"]


class Document:
    """
    Create an instance of a new workbook document.

    If ``filename`` is ``None``, an empty document with no sheets is created.
    Add sheets with :py:meth:`create_sheet` before writing it.

    Parameters
    ----------
    filename: str, optional
        Excel ``.xlsx`` document to read.
    workbook: openpyxl.Workbook, optional
        An existing openpyxl workbook to author into.

    Raises
    ------
    FileError:
        If the document cannot be read.
    FileFormatError:
        If the file is not a valid workbook.
    TypeError:
        If both ``filename`` and ``workbook`` are given.
    """

    def __init__(self, filename: Optional[str] = None, workbook: Optional[Workbook] = None):
        if filename is not None and workbook is not None:
            raise TypeError("pass either a filename or a workbook, not both")

        if workbook is not None:
            self._workbook = workbook
        elif filename is not None:
            self._workbook = _read_workbook(filename)
        else:
            self._workbook = Workbook()
            self._workbook.remove(self._workbook.active)

        self._registry = StyleRegistry()
        sheets = [Sheet(ws, self._registry) for ws in self._workbook.worksheets]
        self._sheets = ItemsList(sheets, "sheet")

    @property
    def sheets(self) -> List["Sheet"]:
        """List[:class:`Sheet`]: The sheets in the document.

        Sheets can be looked up by position or by name, and the same
        :class:`Sheet` object is returned every time.

        .. code-block:: python

            >>> doc.sheets[0]
            <sheet_author.document.Sheet object at 0x104d2f9d0>
            >>> doc.sheets["Summary"] is doc.sheets[0]
            True
        """
        return self._sheets

    @property
    def cell_styles(self) -> Mapping[Style, CellStyleRecord]:
        """Mapping[:class:`Style`, CellStyleRecord]: The style records created for the document."""
        return self._registry.cell_styles

    @property
    def fonts(self) -> Mapping[Font, object]:
        """Mapping[:class:`Font`, openpyxl.styles.Font]: The font records created for the document."""
        return self._registry.fonts

    @property
    def native(self) -> Workbook:
        """openpyxl.Workbook: The underlying workbook."""
        return self._workbook

    def create_sheet(self, title: Optional[str] = None) -> "Sheet":
        """
        Add a new sheet to the end of the document.

        If no title is provided, the next available numbered sheet
        will be generated in the series ``Sheet 1``, ``Sheet 2``, etc.

        Parameters
        ----------
        title: str, optional
            The name of the sheet to add to the document

        Returns
        -------
        Sheet:
            The newly created sheet.

        Raises
        ------
        IndexError:
            If the sheet name already exists in the document.
        """
        if title is not None:
            if title in self._sheets:
                raise IndexError(f"sheet '{title}' already exists")
        else:
            sheet_num = 1
            while f"{DEFAULT_SHEET_PREFIX} {sheet_num}" in self._sheets:
                sheet_num += 1
            title = f"{DEFAULT_SHEET_PREFIX} {sheet_num}"

        sheet = Sheet(self._workbook.create_sheet(title), self._registry)
        self._sheets.append(sheet)
        debug("created sheet '%s'", title)
        return sheet

    def register_style(self, style: Style) -> CellStyleRecord:
        """Return the document's shared record for a style, creating it if needed."""
        return self._registry.register_style(style)

    def register_font(self, font: Font) -> object:
        """Return the document's shared record for a font, creating it if needed."""
        return self._registry.register_font(font)

    def write(self, stream: BinaryIO) -> None:
        """
        Write the document as ``.xlsx`` data to a binary stream.

        The stream is flushed but not closed.

        Parameters
        ----------
        stream: BinaryIO
            A writable binary file object.

        Raises
        ------
        FileError:
            If the stream cannot be written to.
        UnsupportedError:
            If the document has no sheets.
        """
        if len(self._workbook.worksheets) == 0:
            raise UnsupportedError("cannot write a document with no sheets")

        error = None
        try:
            self._workbook.save(stream)
        except (OSError, ValueError) as e:
            error = e
        finally:
            try:
                stream.flush()
            except (OSError, ValueError) as e:
                # The first failure is the one reported
                error = error or e
        if error is not None:
            raise FileError(f"failed to write document: {error}") from error
        debug("wrote %d sheets, %d styles", len(self._sheets), len(self.cell_styles))

    def save(self, filename: str) -> None:
        """
        Save the document in the specified filename.

        Parameters
        ----------
        filename: str
            The path to save the document to. If the file already exists,
            it will be overwritten.

        Raises
        ------
        FileError:
            If the file cannot be written.
        """
        try:
            with open(filename, "wb") as fh:
                self.write(fh)
        except OSError as e:
            raise FileError(f"{filename}: {e}") from e


def _read_workbook(filename: str) -> Workbook:
    try:
        return load_workbook(filename)
    except FileNotFoundError:
        raise FileError(f"{filename}: no such file or directory") from None
    except (InvalidFileException, BadZipFile, KeyError) as e:
        raise FileFormatError(f"{filename}: invalid workbook") from e
    except OSError as e:
        raise FileError(f"{filename}: {e}") from e


class Sheet:
    """
    A worksheet in a :class:`Document`.

    .. NOTE::
        Do not instantiate directly. Sheets are created by
        :py:meth:`Document.create_sheet` and returned by :py:attr:`Document.sheets`.

    Cells can be referenced in two forms of notation: **row-column** and **A1**:

    .. code-block:: python

        (6, 1)      # Row-column notation.
        ("B7")      # The same cell in A1 notation.

    Regions of cells are given either as an A1 range, a pair of A1
    references, or as ``first_row, last_row, first_col, last_col``:

    .. code-block:: python

        ("B7:D9")               # A1 range.
        ("B7", "D9")            # The same region as two references.
        (6, 8, 1, 3)            # The same region as rows 6-8, columns 1-3.
    """

    def __init__(self, worksheet: object, registry: StyleRegistry):
        self._worksheet = worksheet
        self._registry = registry
        self._cells = CellStore(worksheet, registry)

    @property
    def name(self) -> str:
        """str: The name of the sheet."""
        return self._worksheet.title

    @name.setter
    def name(self, value: str):
        self._worksheet.title = value

    @property
    def native(self) -> object:
        """openpyxl.worksheet.worksheet.Worksheet: The underlying worksheet."""
        return self._worksheet

    @property
    def highest_modified_row(self) -> Optional[int]:
        """int: The highest row written to, or ``None`` if nothing has been written."""
        return self._cells.highest_modified_row

    @property
    def highest_modified_col(self) -> Optional[int]:
        """int: The highest column written to, or ``None`` if nothing has been written."""
        return self._cells.highest_modified_col

    @property
    def default_row_height(self) -> float:
        """float: The sheet's default row height in points."""
        return self._worksheet.sheet_format.defaultRowHeight or DEFAULT_ROW_HEIGHT

    @property
    def merge_ranges(self) -> List[str]:
        """List[str]: The merge ranges of cells in A1 notation.

        Example
        -------

        .. code-block:: python

            >>> sheet.merge_cells("B3:D5", "Totals")
            >>> sheet.merge_ranges
            ['B3:D5']
        """
        return sorted(x.coord for x in self._worksheet.merged_cells.ranges)

    def cell(self, *args) -> Cell:
        """
        Return a single cell in the sheet, creating it if it does not exist.

        Parameters
        ----------
        param1: int
            The row number (zero indexed).
        param2: int
            The column number (zero indexed).

        Returns
        -------
        Cell:
            The cell at that reference. Repeated calls return the same object.

        Example
        -------

        .. code-block:: python

            >>> sheet.write("B2", "Debit")
            >>> sheet.cell(1, 1).value
            'Debit'
            >>> sheet.cell("B2") is sheet.cell(1, 1)
            True
        """
        (row, col, *values) = self._validate_cell_coords(*args)
        if len(values) > 0:
            raise TypeError("too many arguments to cell()")
        return self._cells.cell(row, col)

    def write(self, *args, style: Optional[Style] = None) -> None:
        """
        Write a value to a cell and optionally set its style.

        .. code:: python

            sheet.write(1, 1, "This is new text")
            sheet.write("B7", datetime(2020, 12, 25), style=date_style)

        Parameters
        ----------
        row: int
            The row number (zero indexed)
        col: int
            The column number (zero indexed)
        value: str | int | float | bool | datetime | timedelta | None
            The value to write to the cell. ``None`` empties the cell.
        style: Style, optional
            The style to apply to the cell.

        Warns
        -----
        RuntimeWarning:
            If the value is a float that is rounded to the maximum number
            of supported digits.

        Raises
        ------
        IndexError:
            If the cell reference is invalid or beyond the sheet's limits.
        MalformedAddressError:
            If an A1 reference cannot be parsed.
        UnsupportedError:
            If the cell is hidden by a merged region.
        ValueError:
            If the cell type cannot be determined from the type of the value.
        """
        (row, col, *values) = self._validate_cell_coords(*args)
        if len(values) != 1:
            raise TypeError("write() takes a cell reference and a single value")
        self._write(row, col, values[0], style)

    def set_cell_style(self, *args) -> None:
        """Replace the style of a single cell, e.g. ``set_cell_style("B2", style)``."""
        (row, col, *values) = self._validate_cell_coords(*args)
        if len(values) != 1:
            raise TypeError("set_cell_style() takes a cell reference and a style")
        self._cells.cell(row, col).set_style(values[0])

    def apply_style(self, *args) -> None:
        """Apply the set fields of a style over a cell's existing style."""
        (row, col, *values) = self._validate_cell_coords(*args)
        if len(values) != 1:
            raise TypeError("apply_style() takes a cell reference and a style")
        self._cells.cell(row, col).apply_style(values[0])

    def set_range_style(self, *args) -> None:
        """Replace the style of every cell in a region, e.g. ``set_range_style("A1:C3", style)``."""
        (first_row, last_row, first_col, last_col, *values) = self._validate_region(*args)
        if len(values) != 1:
            raise TypeError("set_range_style() takes a cell range and a style")
        for row in range(first_row, last_row + 1):
            for col in range(first_col, last_col + 1):
                self._cells.cell(row, col).set_style(values[0])

    def print_across(self, *args, style: Optional[Style] = None) -> int:
        """
        Write a sequence of values along a row.

        .. code:: python

            next_col = sheet.print_across(0, 0, "Name", "Qty", "Price", style=heading)
            sheet.write(0, next_col, "Total", style=heading)

        Parameters
        ----------
        row: int
            The row number (zero indexed) of the first value
        col: int
            The column number (zero indexed) of the first value
        values: str | int | float | bool | datetime | timedelta | None
            The values to write, one per column.
        style: Style, optional
            The style to apply to every cell written.

        Returns
        -------
        int:
            The column after the last value written.
        """
        (row, col, *values) = self._validate_cell_coords(*args)
        for offset, value in enumerate(values):
            self.write(row, col + offset, value, style=style)
        return col + len(values)

    def print_down(self, *args, style: Optional[Style] = None) -> int:
        """
        Write a sequence of values down a column.

        Takes the same arguments as :py:meth:`print_across`.

        Returns
        -------
        int:
            The row after the last value written.
        """
        (row, col, *values) = self._validate_cell_coords(*args)
        for offset, value in enumerate(values):
            self.write(row + offset, col, value, style=style)
        return row + len(values)

    def merge_cells(self, *args, style: Optional[Style] = None) -> None:
        """
        Merge a region of cells and write a value to it.

        The value is written to the top-left cell and ``style`` is applied
        to every cell in the region so that borders and fills cover the
        whole merged area.

        .. code:: python

            sheet.merge_cells("B3:D5", "Totals", style=boxed)
            sheet.merge_cells(2, 4, 1, 3, "Totals", style=boxed)

        Raises
        ------
        InvalidRegionError:
            If the first row or column of the region is after the last.
        """
        (first_row, last_row, first_col, last_col, *values) = self._validate_region(*args)
        if len(values) != 1:
            raise TypeError("merge_cells() takes a cell range and a single value")

        self._worksheet.merge_cells(
            start_row=first_row + 1,
            start_column=first_col + 1,
            end_row=last_row + 1,
            end_column=last_col + 1,
        )
        for row in range(first_row, last_row + 1):
            for col in range(first_col, last_col + 1):
                self._cells.refresh(row, col)

        self._write(first_row, first_col, values[0], None)
        if style is not None:
            for col in range(first_col, last_col + 1):
                for row in range(first_row, last_row + 1):
                    self._cells.cell(row, col).set_style(style)
        debug("%s: merged rows %d-%d, columns %d-%d", self.name, first_row, last_row, first_col, last_col)

    def set_border(self, *args) -> None:
        """
        Set a border along one or more edges of a region.

        The border is added to the existing style of each cell on the edge,
        so a corner cell keeps borders set on both of its edges. The name(s)
        of the side(s) must be one of ``"top"``, ``"right"``, ``"bottom"`` or ``"left"``.

        .. code-block:: python

            # Thin line along the bottom of B7:D7
            sheet.set_border("B7:D7", "bottom", BorderType.THIN)
            # Dashed line down the left of rows 6-8 of column B
            sheet.set_border(6, 8, 1, 1, "left", "dashed")

        Raises
        ------
        TypeError:
            If an invalid number of arguments is passed, the side is not
            valid, or the border type is invalid.
        """
        (first_row, last_row, first_col, last_col, *args) = self._validate_region(*args)
        if len(args) != 2:
            raise TypeError("invalid number of arguments to set_border()")
        (side, border) = args

        if isinstance(side, list):
            for s in side:
                self.set_border(first_row, last_row, first_col, last_col, s, border)
            return

        if side == "top":
            cells = [(first_row, col) for col in range(first_col, last_col + 1)]
        elif side == "bottom":
            cells = [(last_row, col) for col in range(first_col, last_col + 1)]
        elif side == "left":
            cells = [(row, first_col) for row in range(first_row, last_row + 1)]
        elif side == "right":
            cells = [(row, last_col) for row in range(first_row, last_row + 1)]
        else:
            raise TypeError("side must be a valid border segment")

        edge_style = Style(**{f"{side}_border": border})
        for row, col in cells:
            self._cells.cell(row, col).apply_style(edge_style)

    def set_top_border(self, row: int, first_col: int, last_col: int, border) -> None:
        """Set the top border of the cells in ``row`` from ``first_col`` to ``last_col``."""
        self.set_border(row, row, first_col, last_col, "top", border)

    def set_bottom_border(self, row: int, first_col: int, last_col: int, border) -> None:
        """Set the bottom border of the cells in ``row`` from ``first_col`` to ``last_col``."""
        self.set_border(row, row, first_col, last_col, "bottom", border)

    def set_left_border(self, first_row: int, last_row: int, col: int, border) -> None:
        """Set the left border of the cells in ``col`` from ``first_row`` to ``last_row``."""
        self.set_border(first_row, last_row, col, col, "left", border)

    def set_right_border(self, first_row: int, last_row: int, col: int, border) -> None:
        """Set the right border of the cells in ``col`` from ``first_row`` to ``last_row``."""
        self.set_border(first_row, last_row, col, col, "right", border)

    def set_surround_border(self, *args) -> None:
        """
        Draw a border around the outside of a region.

        .. code-block:: python

            sheet.set_surround_border("A1:C3", BorderType.MEDIUM)
            sheet.set_surround_border(0, 2, 0, 2, "medium")
        """
        (first_row, last_row, first_col, last_col, *args) = self._validate_region(*args)
        if len(args) != 1:
            raise TypeError("invalid number of arguments to set_surround_border()")
        for side in BORDER_SIDES:
            self.set_border(first_row, last_row, first_col, last_col, side, args[0])

    def col_width(self, col: int, width: Optional[int] = None) -> int:
        """
        The width of a column in 1/256ths of a character width.

        Parameters
        ----------
        col: int
            The column number (zero indexed).
        width: int, optional
            If provided, the new width of the column.

        Returns
        -------
        int:
            The width of the column.

        Raises
        ------
        ValueOutOfRangeError:
            If the width is negative or wider than 255 characters.
        """
        _validate_index(col, MAX_COL_COUNT, "column")
        letter = xl_col_to_name(col)
        if width is not None:
            if not 0 <= width <= MAX_COLUMN_WIDTH:
                raise ValueOutOfRangeError(
                    f"column width {width} out of range 0 to {MAX_COLUMN_WIDTH}"
                )
            self._worksheet.column_dimensions[letter].width = width / COLUMN_WIDTH_UNITS
            return width

        dimension = self._worksheet.column_dimensions.get(letter)
        if dimension is None or dimension.width is None:
            base_width = self._worksheet.sheet_format.baseColWidth or DEFAULT_COLUMN_WIDTH
            return base_width * COLUMN_WIDTH_UNITS
        return round(dimension.width * COLUMN_WIDTH_UNITS)

    def row_height(self, row: int, height: Optional[int] = None) -> int:
        """
        The height of a row in twips (1/20th of a point).

        Parameters
        ----------
        row: int
            The row number (zero indexed).
        height: int, optional
            If provided, the new height of the row.

        Returns
        -------
        int:
            The height of the row.

        Raises
        ------
        ValueOutOfRangeError:
            If the height is negative or taller than 409 points.
        """
        _validate_index(row, MAX_ROW_COUNT, "row")
        if height is not None:
            if not 0 <= height <= MAX_ROW_HEIGHT:
                raise ValueOutOfRangeError(f"row height {height} out of range 0 to {MAX_ROW_HEIGHT}")
            self._worksheet.row_dimensions[row + 1].height = height / TWIPS_PER_POINT
            return height

        dimension = self._worksheet.row_dimensions.get(row + 1)
        if dimension is None or dimension.height is None:
            return round(self.default_row_height * TWIPS_PER_POINT)
        return round(dimension.height * TWIPS_PER_POINT)

    def add_spacer(self) -> None:
        """Narrow the first column to use it as a margin."""
        self.col_width(0, SPACER_COLUMN_WIDTH)

    def add_picture(self, *args) -> None:
        """
        Add an image with its top-left corner at a cell.

        The image keeps its natural size.

        .. code-block:: python

            with open("logo.png", "rb") as fh:
                sheet.add_picture("B2", fh.read())

        Raises
        ------
        FileFormatError:
            If the image data cannot be decoded.
        TypeError:
            If the image data is not ``bytes``.
        """
        (row, col, *args) = self._validate_cell_coords(*args)
        if len(args) != 1:
            raise TypeError("add_picture() takes a cell reference and image data")
        if not isinstance(args[0], (bytes, bytearray)):
            raise TypeError("image data must be bytes")

        try:
            image = Image(BytesIO(args[0]))
        except OSError as e:
            raise FileFormatError("invalid image data") from e
        anchor = xl_col_to_name(col) + str(row + 1)
        self._worksheet.add_image(image, anchor)
        debug("%s: added %dx%d %s image at %s", self.name, image.width, image.height, image.format, anchor)

    def estimate_row_height(self, font_size: float, num_lines: int) -> float:
        """Estimate the height in points of a row using this sheet's default row height."""
        return estimate_row_height(font_size, num_lines, self.default_row_height)

    def autosize_row(self, row: int) -> None:
        """
        Set a row's height to fit the text written to it.

        The height is estimated from the font size and number of lines of
        each text cell in the row. Rows that fit within the default height
        are reset to automatic height rather than fixed at a height.
        """
        _validate_index(row, MAX_ROW_COUNT, "row")
        tallest_cell = -1.0
        for col in self._cells.col_range():
            cell = self._cells.cell(row, col)
            if cell.is_text:
                cell_height = self.estimate_row_height(cell.font_size, cell.num_lines)
                tallest_cell = max(tallest_cell, cell_height)

        dimension = self._worksheet.row_dimensions[row + 1]
        if tallest_cell <= self.default_row_height + ROW_HEIGHT_RESET_MARGIN:
            dimension.height = None
        else:
            dimension.height = tallest_cell

    def autosize_rows(self) -> None:
        """Autosize every row up to the highest row written."""
        for row in self._cells.row_range():
            self.autosize_row(row)
        debug("%s: autosized %d rows", self.name, len(self._cells.row_range()))

    def autosize_cols(self) -> None:
        """Set the width of every column up to the highest column written to fit its values."""
        for col in self._cells.col_range():
            width = None
            for row in self._cells.row_range():
                cell = self._cells.cell(row, col)
                if cell.value is None or cell.is_merged:
                    continue
                cell_width = estimate_col_width(str(cell.value), cell.font_size)
                width = cell_width if width is None else max(width, cell_width)
            if width is not None:
                self._worksheet.column_dimensions[xl_col_to_name(col)].width = width
        debug("%s: autosized %d columns", self.name, len(self._cells.col_range()))

    def autosize_rows_and_cols(self) -> None:
        self.autosize_cols()
        self.autosize_rows()

    def force_autosize_rows(self) -> None:
        """Autosize rows including cells that were not written through this sheet.

        Use this for sheets loaded from a file.
        """
        self._cells.rescan()
        self.autosize_rows()

    def _write(self, row: int, col: int, value, style: Optional[Style]) -> None:
        cell = self._cells.set_value(row, col, value)
        if style is not None:
            cell.set_style(style)

    def _validate_cell_coords(self, *args) -> Tuple:
        if len(args) > 0 and isinstance(args[0], str):
            (row, col) = xl_cell_to_rowcol(args[0])
            values = args[1:]
        elif len(args) < 2:
            raise IndexError("invalid cell reference " + str(args))
        else:
            (row, col) = args[0:2]
            values = args[2:]

        _validate_index(row, MAX_ROW_COUNT, "row")
        _validate_index(col, MAX_COL_COUNT, "column")
        return (row, col) + tuple(values)

    def _validate_region(self, *args) -> Tuple:
        if len(args) > 0 and isinstance(args[0], str):
            if (
                ":" in args[0]
                or len(args) < 2
                or not isinstance(args[1], str)
                or not range_parts.fullmatch(args[1])
            ):
                (first_row, first_col, last_row, last_col) = xl_range_to_rowcols(args[0])
                values = args[1:]
            else:
                (first_row, first_col) = xl_cell_to_rowcol(args[0])
                (last_row, last_col) = xl_cell_to_rowcol(args[1])
                values = args[2:]
        elif len(args) < 4:
            raise IndexError("invalid cell range " + str(args))
        else:
            (first_row, last_row, first_col, last_col) = args[0:4]
            values = args[4:]

        for row in [first_row, last_row]:
            _validate_index(row, MAX_ROW_COUNT, "row")
        for col in [first_col, last_col]:
            _validate_index(col, MAX_COL_COUNT, "column")
        if first_row > last_row or first_col > last_col:
            raise InvalidRegionError(
                f"invalid region rows {first_row}-{last_row}, columns {first_col}-{last_col}"
            )
        return (first_row, last_row, first_col, last_col) + tuple(values)


def _validate_index(value: int, limit: int, name: str) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0:
        raise IndexError(f"{name} reference {value} below zero")
    if value >= limit:
        raise IndexError(f"{value} exceeds maximum {name} {limit - 1}")

