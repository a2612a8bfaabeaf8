import logging
from copy import copy
from types import MappingProxyType
from typing import Mapping

from openpyxl.styles import Alignment, Border, PatternFill, Protection, Side
from openpyxl.styles import Font as WorkbookFont
from openpyxl.styles.fonts import DEFAULT_FONT
from openpyxl.styles.numbers import FORMAT_GENERAL

from sheet_author import __name__ as sheet_author_name
from sheet_author.cell import RGB, Font, Style
from sheet_author.constants import (
    BASELINE_OFFSET_MAP,
    MAX_FONT_SIZE,
    MAX_INDENTATION,
    MAX_ROTATION,
    MIN_FONT_SIZE,
    MIN_ROTATION,
)
from sheet_author.exceptions import ValueOutOfRangeError

logger = logging.getLogger(sheet_author_name)
debug = logger.debug


def _check_range(value: int, minimum: int, maximum: int, name: str) -> None:
    if not minimum <= value <= maximum:
        msg = f"{name} {value} out of range {minimum} to {maximum}"
        raise ValueOutOfRangeError(msg)


def _argb(color: RGB) -> str:
    for component in color:
        _check_range(component, 0, 255, "color component")
    return "FF{:02X}{:02X}{:02X}".format(*color)


def _text_rotation(rotation: int) -> int:
    _check_range(rotation, MIN_ROTATION, MAX_ROTATION, "rotation")
    # Downward rotations are stored as 91 to 180 degrees
    return rotation if rotation >= 0 else 90 - rotation


class CellStyleRecord:
    """A complete set of workbook style objects for one :py:class:`~sheet_author.Style`.

    Records are created by :py:class:`StyleRegistry` and are shared by every
    cell with an equal style. Properties a style leaves unset hold the
    workbook defaults.
    """

    __slots__ = ("font", "border", "alignment", "fill", "protection", "number_format")

    def __init__(  # noqa: PLR0913
        self,
        font: WorkbookFont,
        border: Border,
        alignment: Alignment,
        fill: PatternFill,
        protection: Protection,
        number_format: str = None,
    ) -> None:
        self.font = font
        self.border = border
        self.alignment = alignment
        self.fill = fill
        self.protection = protection
        self.number_format = number_format

    def apply(self, cell: object) -> None:
        """Assign every part of the record to a worksheet cell."""
        cell.font = self.font
        cell.border = self.border
        cell.alignment = self.alignment
        cell.fill = self.fill
        cell.protection = self.protection
        if self.number_format is not None:
            cell.number_format = self.number_format
        elif cell.data_type != "d":
            # Dates keep the format openpyxl chose when the value was written
            cell.number_format = FORMAT_GENERAL


class StyleRegistry:
    """Deduplicates styles and fonts for a document.

    A workbook can only hold a limited number of style records, so each
    distinct :py:class:`~sheet_author.Style` and :py:class:`~sheet_author.Font`
    value is converted to workbook objects once and the result reused for
    every later request with an equal value. Records are never modified or
    removed once created.
    """

    def __init__(self) -> None:
        self._fonts = {}
        self._styles = {}

    @property
    def fonts(self) -> Mapping[Font, WorkbookFont]:
        """Mapping[Font, openpyxl.styles.Font]: Read-only view of registered fonts."""
        return MappingProxyType(self._fonts)

    @property
    def cell_styles(self) -> Mapping[Style, CellStyleRecord]:
        """Mapping[Style, CellStyleRecord]: Read-only view of registered styles."""
        return MappingProxyType(self._styles)

    def register_font(self, font: Font) -> WorkbookFont:
        """Return the workbook font for ``font``, creating it on first use.

        Raises
        ------
        TypeError:
            If ``font`` is not a :py:class:`~sheet_author.Font`.
        ValueOutOfRangeError:
            If the font size or baseline offset cannot be stored in a workbook.
        """
        if not isinstance(font, Font):
            msg = "font must be a Font object"
            raise TypeError(msg)
        if font not in self._fonts:
            self._fonts[font] = self._create_font(font)
            debug("created font record %d: %s", len(self._fonts), font)
        return self._fonts[font]

    def register_style(self, style: Style) -> CellStyleRecord:
        """Return the style record for ``style``, creating it on first use.

        Raises
        ------
        TypeError:
            If ``style`` is not a :py:class:`~sheet_author.Style`.
        ValueOutOfRangeError:
            If the indentation, rotation, color or font cannot be stored in a workbook.
        """
        if not isinstance(style, Style):
            msg = "style must be a Style object"
            raise TypeError(msg)
        if style not in self._styles:
            self._styles[style] = self._create_style(style)
            debug("created style record %d: %s", len(self._styles), style)
        return self._styles[style]

    def _create_font(self, font: Font) -> WorkbookFont:
        workbook_font = copy(DEFAULT_FONT)
        if font.name is not None:
            workbook_font.name = font.name
        if font.size is not None:
            _check_range(font.size, MIN_FONT_SIZE, MAX_FONT_SIZE, "font size")
            workbook_font.sz = float(font.size)
        if font.bold is not None:
            workbook_font.b = font.bold
        if font.italic is not None:
            workbook_font.i = font.italic
        if font.strikeout is not None:
            workbook_font.strike = font.strikeout
        if font.underline is not None:
            workbook_font.u = "single" if font.underline else None
        if font.double_underline is not None:
            workbook_font.u = "double" if font.double_underline else None
        if font.offset is not None:
            if font.offset not in BASELINE_OFFSET_MAP:
                msg = f"baseline offset {font.offset} out of range 0 to 2"
                raise ValueOutOfRangeError(msg)
            workbook_font.vertAlign = BASELINE_OFFSET_MAP[font.offset]
        return workbook_font

    def _create_style(self, style: Style) -> CellStyleRecord:
        if style.font is not None:
            font = self.register_font(style.font)
        else:
            font = DEFAULT_FONT

        sides = {}
        for side in ["top", "left", "bottom", "right"]:
            border_type = getattr(style, f"{side}_border")
            sides[side] = Side(style=border_type.value if border_type is not None else None)

        alignment = {}
        if style.align is not None:
            alignment["horizontal"] = style.align.value
        if style.vertical_align is not None:
            alignment["vertical"] = style.vertical_align.value
        if style.wrap_text is not None:
            alignment["wrap_text"] = style.wrap_text
        if style.indentation is not None:
            _check_range(style.indentation, 0, MAX_INDENTATION, "indentation")
            alignment["indent"] = style.indentation
        if style.rotation is not None:
            alignment["text_rotation"] = _text_rotation(style.rotation)

        protection = {}
        if style.locked is not None:
            protection["locked"] = style.locked
        if style.hidden is not None:
            protection["hidden"] = style.hidden

        if style.background_color is not None:
            color = _argb(style.background_color)
            fill = PatternFill(fill_type="solid", start_color=color, end_color=color)
        else:
            fill = PatternFill()

        return CellStyleRecord(
            font=font,
            border=Border(**sides),
            alignment=Alignment(**alignment),
            fill=fill,
            protection=Protection(**protection),
            number_format=style.data_format,
        )
