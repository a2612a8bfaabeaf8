from enum import Enum, IntEnum

import enum_tools.documentation

__all__ = [
    "BaselineOffset",
    "BorderType",
    "HorizontalAlignment",
    "VerticalAlignment",
]

# Workbook limits
MAX_ROW_COUNT = 1048576
MAX_COL_COUNT = 16384
MAX_SIGNIFICANT_DIGITS = 15

# New document defaults
DEFAULT_FONT_SIZE = 11.0
DEFAULT_ROW_HEIGHT = 15.0
DEFAULT_COLUMN_WIDTH = 8
DEFAULT_SHEET_PREFIX = "Sheet"
SPACER_COLUMN_WIDTH = 768

# Unit conversions
COLUMN_WIDTH_UNITS = 256
TWIPS_PER_POINT = 20

# Style ranges that a workbook can represent
MIN_FONT_SIZE = 1
MAX_FONT_SIZE = 409
MAX_INDENTATION = 255
MIN_ROTATION = -90
MAX_ROTATION = 90
MAX_COLUMN_WIDTH = 255 * COLUMN_WIDTH_UNITS
MAX_ROW_HEIGHT = 409 * TWIPS_PER_POINT

# Row height estimation
LINE_HEIGHT_FACTOR = 1.3
ROW_HEIGHT_RESET_MARGIN = 1.0
ROW_HEIGHT_PRECISION = 4

# Column width estimation
COLUMN_WIDTH_PADDING = 2
MAX_AUTOSIZE_WIDTH = 255


@enum_tools.documentation.document_enum
class BorderType(Enum):
    """
    Line styles for cell borders.

    Border types can be passed to :py:class:`~sheet_author.Style` either as
    enum members or by their lowercase name, e.g. ``"thin"``.
    """

    NONE = None
    """No border."""
    THIN = "thin"
    """A thin solid line."""
    MEDIUM = "medium"
    """A medium solid line."""
    THICK = "thick"
    """A thick solid line."""
    DOUBLE = "double"
    """Two thin lines."""
    HAIR = "hair"
    """A hairline."""
    DOTTED = "dotted"
    """A dotted line."""
    DASHED = "dashed"
    """A dashed line."""
    MEDIUM_DASHED = "mediumDashed"
    """A medium dashed line."""
    DASH_DOT = "dashDot"
    """Alternating dashes and dots."""
    MEDIUM_DASH_DOT = "mediumDashDot"
    """Medium alternating dashes and dots."""
    DASH_DOT_DOT = "dashDotDot"
    """A dash followed by two dots."""
    MEDIUM_DASH_DOT_DOT = "mediumDashDotDot"
    """A medium dash followed by two dots."""
    SLANTED_DASH_DOT = "slantDashDot"
    """Slanted alternating dashes and dots."""


@enum_tools.documentation.document_enum
class HorizontalAlignment(Enum):
    """Horizontal alignment of text within a cell."""

    GENERAL = "general"
    """Text to the left, numbers to the right."""
    LEFT = "left"
    """Left aligned."""
    CENTER = "center"
    """Centered in the cell."""
    RIGHT = "right"
    """Right aligned."""
    FILL = "fill"
    """Repeat the text to fill the cell."""
    JUSTIFY = "justify"
    """Justified across wrapped lines."""
    CENTER_CONTINUOUS = "centerContinuous"
    """Centered across the selection."""
    DISTRIBUTED = "distributed"
    """Distributed across the cell width."""


@enum_tools.documentation.document_enum
class VerticalAlignment(Enum):
    """Vertical alignment of text within a cell."""

    TOP = "top"
    """Aligned to the top of the cell."""
    CENTER = "center"
    """Centered vertically."""
    BOTTOM = "bottom"
    """Aligned to the bottom of the cell."""
    JUSTIFY = "justify"
    """Justified between top and bottom."""
    DISTRIBUTED = "distributed"
    """Distributed across the cell height."""


@enum_tools.documentation.document_enum
class BaselineOffset(IntEnum):
    """Font baseline offset."""

    NONE = 0
    """Normal baseline."""
    SUPERSCRIPT = 1
    """Raised and reduced in size."""
    SUBSCRIPT = 2
    """Lowered and reduced in size."""


BASELINE_OFFSET_MAP = {
    BaselineOffset.NONE: "baseline",
    BaselineOffset.SUPERSCRIPT: "superscript",
    BaselineOffset.SUBSCRIPT: "subscript",
}
