import logging
import re
from collections import namedtuple
from dataclasses import dataclass, fields, replace
from datetime import date as builtin_date
from datetime import datetime as builtin_datetime
from datetime import time as builtin_time
from datetime import timedelta as builtin_timedelta
from typing import Optional, Tuple, Union
from warnings import warn

import sigfig
from openpyxl.cell.cell import MergedCell
from pendulum import instance as pendulum_instance

from sheet_author import __name__ as sheet_author_name
from sheet_author.constants import (
    DEFAULT_FONT_SIZE,
    MAX_SIGNIFICANT_DIGITS,
    BorderType,
    HorizontalAlignment,
    VerticalAlignment,
)
from sheet_author.exceptions import MalformedAddressError, UnsupportedError
from sheet_author.utils import count_lines

logger = logging.getLogger(sheet_author_name)
debug = logger.debug

__all__ = [
    "Cell",
    "DEFAULT_STYLE",
    "Font",
    "RGB",
    "Style",
    "xl_cell_to_rowcol",
    "xl_col_to_name",
    "xl_range",
    "xl_range_to_rowcols",
    "xl_rowcol_to_cell",
]

RGB = namedtuple("RGB", ["r", "g", "b"])


def rgb_color(color) -> RGB:
    """Raise a TypeError if a color is not a valid RGB value."""
    if color is None:
        return None
    if isinstance(color, RGB):
        return color
    if isinstance(color, tuple):
        if not (len(color) == 3 and all(isinstance(x, int) for x in color)):
            msg = "RGB color must be an RGB or a tuple of 3 integers"
            raise TypeError(msg)
        return RGB(*color)
    msg = "RGB color must be an RGB or a tuple of 3 integers"
    raise TypeError(msg)


def _enum_member(enum_cls, value, attr: str):
    """Normalise an enum member or its name/value string to the member."""
    if value is None or isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        key = value.lower()
        for member in enum_cls:
            if member.name.lower() == key:
                return member
            if isinstance(member.value, str) and member.value.lower() == key:
                return member
    msg = f"invalid {attr} '{value}'"
    raise TypeError(msg)


def _check_type(obj: object, attrs, types, description: str) -> None:
    types = types if isinstance(types, tuple) else (types,)
    for attr in attrs:
        value = getattr(obj, attr)
        if value is None:
            continue
        if isinstance(value, bool) and bool not in types:
            msg = f"{attr} argument must be {description}"
            raise TypeError(msg)
        if not isinstance(value, types):
            msg = f"{attr} argument must be {description}"
            raise TypeError(msg)


@dataclass(frozen=True)
class Font:
    """A font description that can be attached to a :py:class:`Style`.

    Fonts are immutable and compare by value: two fonts created with the
    same arguments are interchangeable and share a single font record in
    the saved workbook. Any argument left as ``None`` keeps the workbook's
    default for that property.

    .. code-block:: python

        heading = Font(name="Arial", size=14, bold=True)

    Parameters
    ----------
    name: str, optional
        Font name
    size: float, optional
        Font size in points
    bold: bool, optional
        ``True`` if the font is bold
    italic: bool, optional
        ``True`` if the font is italic
    strikeout: bool, optional
        ``True`` if the font is struck through
    underline: bool, optional
        ``True`` for a single underline, ``False`` for none
    double_underline: bool, optional
        ``True`` for a double underline, ``False`` for none
    offset: int, optional
        Baseline offset, one of the :py:class:`~sheet_author.BaselineOffset` values

    Raises
    ------
    TypeError:
        If arguments do not match the specified types
    """

    name: Optional[str] = None
    size: Optional[float] = None
    bold: Optional[bool] = None
    italic: Optional[bool] = None
    strikeout: Optional[bool] = None
    underline: Optional[bool] = None
    double_underline: Optional[bool] = None
    offset: Optional[int] = None

    def __post_init__(self):
        _check_type(self, ["name"], str, "a string")
        _check_type(self, ["size"], (int, float), "a number of points")
        _check_type(
            self,
            ["bold", "italic", "strikeout", "underline", "double_underline"],
            bool,
            "boolean",
        )
        _check_type(self, ["offset"], int, "an integer")

    def merge(self, other: "Font") -> "Font":
        """Return a copy of this font with the set fields of ``other`` applied over it."""
        changes = {f.name: getattr(other, f.name) for f in fields(other)}
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


@dataclass(frozen=True)
class Style:
    """A cell style that can be applied to cells.

    Styles are immutable and compare by value. Documents keep one style
    record per distinct style, however many cells use it, so styles can be
    created freely wherever they are needed. Any argument left as ``None``
    keeps the workbook's default.

    .. code-block:: python

        total = Style(
            align="right",
            top_border="thin",
            data_format="#,##0.00",
            font=Font(bold=True),
        )
        sheet.write("B7", 1234.5, style=total)

    Parameters
    ----------
    align: HorizontalAlignment | str, optional
        Horizontal alignment of the cell
    vertical_align: VerticalAlignment | str, optional
        Vertical alignment of the cell
    top_border: BorderType | str, optional
        Line style of the top border
    left_border: BorderType | str, optional
        Line style of the left border
    bottom_border: BorderType | str, optional
        Line style of the bottom border
    right_border: BorderType | str, optional
        Line style of the right border
    locked: bool, optional
        ``True`` if the cell is locked when the sheet is protected
    hidden: bool, optional
        ``True`` if formulas are hidden when the sheet is protected
    wrap_text: bool, optional
        ``True`` if text wrapping is enabled
    indentation: int, optional
        Indent level, 0 to 255
    rotation: int, optional
        Text rotation in degrees, -90 to 90
    background_color: RGB, optional
        Solid background fill color
    data_format: str, optional
        Number format string, e.g. ``"0.00%"``
    font: Font, optional
        Font for the cell text

    Raises
    ------
    TypeError:
        If arguments do not match the specified types, or alignments and
        border names are invalid
    """

    align: Optional[HorizontalAlignment] = None
    vertical_align: Optional[VerticalAlignment] = None
    top_border: Optional[BorderType] = None
    left_border: Optional[BorderType] = None
    bottom_border: Optional[BorderType] = None
    right_border: Optional[BorderType] = None
    locked: Optional[bool] = None
    hidden: Optional[bool] = None
    wrap_text: Optional[bool] = None
    indentation: Optional[int] = None
    rotation: Optional[int] = None
    background_color: Optional[RGB] = None
    data_format: Optional[str] = None
    font: Optional[Font] = None

    def __post_init__(self):
        normalised = {
            "align": _enum_member(HorizontalAlignment, self.align, "alignment"),
            "vertical_align": _enum_member(
                VerticalAlignment, self.vertical_align, "vertical alignment"
            ),
            "background_color": rgb_color(self.background_color),
        }
        for side in ["top_border", "left_border", "bottom_border", "right_border"]:
            normalised[side] = _enum_member(BorderType, getattr(self, side), "border style")
        for attr, value in normalised.items():
            object.__setattr__(self, attr, value)

        _check_type(self, ["locked", "hidden", "wrap_text"], bool, "boolean")
        _check_type(self, ["indentation", "rotation"], int, "an integer")
        _check_type(self, ["data_format"], str, "a string")
        _check_type(self, ["font"], Font, "a Font object")

    def merge(self, other: "Style") -> "Style":
        """Return a copy of this style with the set fields of ``other`` applied over it.

        Fonts are merged field by field, so applying ``Style(font=Font(bold=True))``
        to a style with a 14pt font gives a bold 14pt font.
        """
        changes = {f.name: getattr(other, f.name) for f in fields(other)}
        changes = {k: v for k, v in changes.items() if v is not None}
        if self.font is not None and other.font is not None:
            changes["font"] = self.font.merge(other.font)
        return replace(self, **changes)


DEFAULT_STYLE = Style()


class Cell:
    """.. NOTE::
    Do not instantiate directly. Cells are created by :py:class:`~sheet_author.Sheet`.
    """

    def __init__(self, row: int, col: int, native: object, registry: object) -> None:
        self.row = row
        self.col = col
        self._native = native
        self._registry = registry
        self._style = DEFAULT_STYLE
        self._record = None

    def __str__(self) -> str:
        return f"Cell({self.address}, value={self.value!r})"

    @property
    def address(self) -> str:
        """str: The cell reference in A1 notation."""
        return xl_rowcol_to_cell(self.row, self.col)

    @property
    def native(self) -> object:
        """The underlying openpyxl cell."""
        return self._native

    @property
    def value(self) -> Union[str, int, float, bool, builtin_datetime, builtin_timedelta, None]:
        """The value of the cell, or ``None`` if it is empty."""
        return self._native.value

    @value.setter
    def value(self, value) -> None:
        if self.is_merged:
            msg = f"cell {self.address} is part of a merged region"
            raise UnsupportedError(msg)
        self._native.value = _native_value(value)

    @property
    def is_text(self) -> bool:
        """bool: ``True`` if the cell holds a text value."""
        return self._native.data_type == "s" and self._native.value is not None

    @property
    def is_merged(self) -> bool:
        """bool: ``True`` if the cell is hidden by a merged region."""
        return isinstance(self._native, MergedCell)

    @property
    def num_lines(self) -> int:
        """int: The number of lines of text in the cell."""
        return count_lines(self._native.value) if self.is_text else 1

    @property
    def font_size(self) -> float:
        """float: The size in points of the cell's font."""
        size = self._native.font.sz
        return float(size) if size is not None else DEFAULT_FONT_SIZE

    @property
    def style(self) -> "Style":
        """Style: The style last applied to the cell."""
        return self._style

    @property
    def style_record(self) -> object:
        """The workbook style record shared by all cells with an equal style."""
        return self._record

    def set_style(self, style: Style) -> None:
        """Replace the cell's style."""
        if not isinstance(style, Style):
            msg = "style must be a Style object"
            raise TypeError(msg)
        record = self._registry.register_style(style)
        record.apply(self._native)
        self._style = style
        self._record = record

    def apply_style(self, style: Style) -> None:
        """Apply the set fields of ``style`` over the cell's current style."""
        if not isinstance(style, Style):
            msg = "style must be a Style object"
            raise TypeError(msg)
        self.set_style(self._style.merge(style))

    def _rebind(self, native: object) -> None:
        self._native = native
        if self._record is not None:
            self._record.apply(native)


def _native_value(value):
    if value is None or isinstance(value, (str, bool, int)):
        return value
    elif isinstance(value, float):
        rounded_value = sigfig.round(value, sigfigs=MAX_SIGNIFICANT_DIGITS, warn=False)
        if rounded_value != value:
            warn(
                f"'{value}' rounded to {MAX_SIGNIFICANT_DIGITS} significant digits",
                RuntimeWarning,
                stacklevel=6,
            )
        return rounded_value
    elif isinstance(value, builtin_datetime):
        if value.tzinfo is not None:
            # Workbooks have no timezones; keep the wall-clock time
            debug("dropped timezone %s from %s", value.tzinfo, value)
            value = pendulum_instance(value).naive()
        # openpyxl picks number formats by exact type so subclasses are converted
        return builtin_datetime(*value.timetuple()[:6], value.microsecond)
    elif isinstance(value, builtin_timedelta):
        return builtin_timedelta(value.days, value.seconds, value.microseconds)
    elif isinstance(value, builtin_date):
        return builtin_date(value.year, value.month, value.day)
    elif isinstance(value, builtin_time):
        return builtin_time(value.hour, value.minute, value.second, value.microsecond)
    raise ValueError("Can't determine cell type from type " + type(value).__name__)


# Cell reference conversion from  https://github.com/jmcnamara/XlsxWriter
# Copyright (c) 2013-2021, John McNamara <jmcnamara@cpan.org>
range_parts = re.compile(r"(\$?)([A-Z]+)(\$?)([0-9]+)")


def xl_cell_to_rowcol(cell_str: str) -> Tuple[int, int]:
    """Convert a cell reference in A1 notation to a zero indexed row and column.

    Parameters
    ----------
    cell_str:  str
        A1 notation cell reference

    Returns
    -------
    row, col: int, int
        Cell row and column numbers (zero indexed).

    Raises
    ------
    MalformedAddressError:
        If the reference is not a column in upper case letters followed by a row number.
    """
    if not isinstance(cell_str, str):
        msg = f"invalid cell reference {cell_str!r}"
        raise MalformedAddressError(msg)

    match = range_parts.fullmatch(cell_str)
    if not match:
        msg = f"invalid cell reference {cell_str!r}"
        raise MalformedAddressError(msg)

    col_str = match.group(2)
    row_str = match.group(4)

    # Convert base26 column string to number.
    expn = 0
    col = 0
    for char in reversed(col_str):
        col += (ord(char) - ord("A") + 1) * (26**expn)
        expn += 1

    # Convert 1-index to zero-index
    row = int(row_str) - 1
    col -= 1

    if row < 0:
        msg = f"invalid cell reference {cell_str!r}"
        raise MalformedAddressError(msg)

    return row, col


def xl_range_to_rowcols(range_str: str) -> Tuple[int, int, int, int]:
    """Convert a range in A1:B1 notation to zero indexed corners.

    A single cell reference is treated as a range of one cell.

    Returns
    -------
    first_row, first_col, last_row, last_col: int, int, int, int
        Corner row and column numbers (zero indexed).
    """
    if not isinstance(range_str, str):
        msg = f"invalid cell range {range_str!r}"
        raise MalformedAddressError(msg)
    parts = range_str.split(":")
    if len(parts) == 1:
        parts = parts * 2
    elif len(parts) != 2:
        msg = f"invalid cell range {range_str!r}"
        raise MalformedAddressError(msg)

    (first_row, first_col) = xl_cell_to_rowcol(parts[0])
    (last_row, last_col) = xl_cell_to_rowcol(parts[1])
    return first_row, first_col, last_row, last_col


def xl_range(first_row, first_col, last_row, last_col):
    """Convert zero indexed row and col cell references to a A1:B1 range string.

    Parameters
    ----------
    first_row: int
        The first cell row.
    first_col: int
        The first cell column.
    last_row: int
        The last cell row.
    last_col: int
        The last cell column.

    Returns
    -------
    str:
        A1:B1 style range string.
    """
    range1 = xl_rowcol_to_cell(first_row, first_col)
    range2 = xl_rowcol_to_cell(last_row, last_col)

    if range1 == range2:
        return range1
    else:
        return range1 + ":" + range2


def xl_rowcol_to_cell(row, col, row_abs=False, col_abs=False):
    """Convert a zero indexed row and column cell reference to a A1 style string.

    Parameters
    ----------
    row: int
         The cell row.
    col: int
        The cell column.
    row_abs: bool
        If ``True``, make the row absolute.
    col_abs: bool
        If ``True``, make the column absolute.

    Returns
    -------
    str:
        A1 style string.
    """
    if row < 0:
        msg = f"row reference {row} below zero"
        raise IndexError(msg)

    if col < 0:
        msg = f"column reference {col} below zero"
        raise IndexError(msg)

    row += 1  # Change to 1-index.
    row_abs = "$" if row_abs else ""

    col_str = xl_col_to_name(col, col_abs)

    return col_str + row_abs + str(row)


def xl_col_to_name(col, col_abs=False):
    """Convert a zero indexed column cell reference to a string.

    Parameters
    ----------
    col: int
        The column number (zero indexed).
    col_abs: bool, default: False
        If ``True``, make the column absolute.

    Returns
    -------
        str:
            Column in A1 notation.
    """
    if col < 0:
        msg = f"column reference {col} below zero"
        raise IndexError(msg)

    col += 1  # Change to 1-index.
    col_str = ""
    col_abs = "$" if col_abs else ""

    while col:
        # Set remainder from 1 .. 26
        remainder = col % 26

        if remainder == 0:
            remainder = 26

        # Convert the remainder to a character.
        col_letter = chr(ord("A") + remainder - 1)

        # Accumulate the column letters, right to left.
        col_str = col_letter + col_str

        # Get the next order of magnitude.
        col = (col - 1) // 26

    return col_abs + col_str
