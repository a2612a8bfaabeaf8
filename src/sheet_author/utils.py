import math

from sheet_author.constants import (
    COLUMN_WIDTH_PADDING,
    DEFAULT_FONT_SIZE,
    LINE_HEIGHT_FACTOR,
    MAX_AUTOSIZE_WIDTH,
    ROW_HEIGHT_PRECISION,
)


def count_lines(text: str) -> int:
    """Return the number of lines in a text value, counting embedded line breaks."""
    return 1 + text.count("\n")


def estimate_row_height(
    font_size: float, num_lines: int, default_row_height: float
) -> float:
    """
    Estimate the height of a row from its font size and number of lines.

    This is an approximation of the row heights a spreadsheet application
    uses for wrapped text rather than a measurement of rendered text. A
    line is taken to be 1.3 times the font size, or the sheet's default
    row height if that is taller, and the total is rounded to the nearest
    quarter point.

    Parameters
    ----------
    font_size: float
        Font size in points.
    num_lines: int
        Number of lines of text.
    default_row_height: float
        The sheet's default row height in points.

    Returns
    -------
    float:
        The estimated row height in points.

    Example
    -------

    .. code-block:: python

        >>> estimate_row_height(12, 1, 15.0)
        15.5
        >>> estimate_row_height(11, 2, 15.0)
        30.0
    """
    line_height = max(LINE_HEIGHT_FACTOR * font_size, default_row_height)
    row_height = line_height * num_lines
    # Halves round up to the next quarter point
    return math.floor(row_height * ROW_HEIGHT_PRECISION + 0.5) / ROW_HEIGHT_PRECISION


def estimate_col_width(text: str, font_size: float = DEFAULT_FONT_SIZE) -> float:
    """
    Estimate the width in characters of a column needed to show a value.

    Uses the longest line in the value scaled by the font size relative to
    the default font, plus padding, capped at the widest column a sheet can hold.
    """
    longest = max(len(line) for line in text.split("\n"))
    width = longest * font_size / DEFAULT_FONT_SIZE + COLUMN_WIDTH_PADDING
    return min(round(width, 2), MAX_AUTOSIZE_WIDTH)
