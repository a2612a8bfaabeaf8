import pytest
from pytest_check import check

from sheet_author import BorderType, Document, Font, Style

ALL_BORDERS = ["top", "right", "bottom", "left"]


def check_borders(cell, ref: dict) -> bool:
    valid = True
    for side in ALL_BORDERS:
        border = ref.get(side)
        if border is None:
            valid &= check.is_in(getattr(cell.style, f"{side}_border"), [None, BorderType.NONE])
            valid &= check.is_none(getattr(cell.native.border, side).style)
        else:
            valid &= check.equal(getattr(cell.style, f"{side}_border"), border)
            valid &= check.equal(getattr(cell.native.border, side).style, border.value)
    if not valid:
        print(f"@{cell.address}: {cell.style}")
    return valid


def test_surround_border():
    doc = Document()
    sheet = doc.create_sheet()
    sheet.set_surround_border(0, 2, 0, 2, BorderType.THIN)

    thin = BorderType.THIN
    check_borders(sheet.cell(0, 0), {"top": thin, "left": thin})
    check_borders(sheet.cell(0, 1), {"top": thin})
    check_borders(sheet.cell(0, 2), {"top": thin, "right": thin})
    check_borders(sheet.cell(1, 0), {"left": thin})
    check_borders(sheet.cell(1, 1), {})
    check_borders(sheet.cell(1, 2), {"right": thin})
    check_borders(sheet.cell(2, 0), {"bottom": thin, "left": thin})
    check_borders(sheet.cell(2, 1), {"bottom": thin})
    check_borders(sheet.cell(2, 2), {"bottom": thin, "right": thin})
    check_borders(sheet.cell(3, 3), {})
    assert sheet.cell(1, 1).style == Style()


def test_edge_borders():
    doc = Document()
    sheet = doc.create_sheet()
    sheet.set_top_border(1, 1, 3, BorderType.MEDIUM)
    sheet.set_bottom_border(4, 1, 3, "double")
    sheet.set_left_border(1, 4, 1, "dashed")
    sheet.set_right_border(1, 4, 3, BorderType.DASH_DOT)

    check_borders(sheet.cell("B2"), {"top": BorderType.MEDIUM, "left": BorderType.DASHED})
    check_borders(sheet.cell("C2"), {"top": BorderType.MEDIUM})
    check_borders(sheet.cell("D5"), {"bottom": BorderType.DOUBLE, "right": BorderType.DASH_DOT})
    check_borders(sheet.cell("C3"), {})
    assert sheet.cell("D3").native.border.right.style == "dashDot"


def test_border_forms():
    doc = Document()
    sheet = doc.create_sheet()
    sheet.set_border("A1:C1", ["top", "bottom"], "thick")
    sheet.set_border("E1", "E3", "left", "hair")
    sheet.set_surround_border("G1", "medium")

    for col in range(3):
        check_borders(sheet.cell(0, col), {"top": BorderType.THICK, "bottom": BorderType.THICK})
    for row in range(3):
        check_borders(sheet.cell(row, 4), {"left": BorderType.HAIR})
    medium = BorderType.MEDIUM
    check_borders(
        sheet.cell("G1"), {"top": medium, "right": medium, "bottom": medium, "left": medium}
    )


def test_borders_keep_style():
    doc = Document()
    sheet = doc.create_sheet()
    sheet.write("A1", "text", style=Style(align="center", font=Font(bold=True)))
    sheet.set_surround_border("A1:B2", "thin")

    native = sheet.cell("A1").native
    assert sheet.cell("A1").value == "text"
    assert native.font.b
    assert native.alignment.horizontal == "center"
    assert native.border.top.style == "thin"

    sheet.set_top_border(0, 0, 1, BorderType.NONE)
    check_borders(sheet.cell("A1"), {"left": BorderType.THIN})
    check_borders(sheet.cell("B1"), {"right": BorderType.THIN})


def test_merged_borders():
    doc = Document()
    sheet = doc.create_sheet()
    sheet.merge_cells("B2:D3", "merged")
    sheet.set_surround_border("B2:D3", "thin")

    thin = BorderType.THIN
    check_borders(sheet.cell("B2"), {"top": thin, "left": thin})
    check_borders(sheet.cell("C3"), {"bottom": thin})
    check_borders(sheet.cell("D3"), {"bottom": thin, "right": thin})
    assert sheet.cell("B2").value == "merged"


def test_border_exceptions():
    doc = Document()
    sheet = doc.create_sheet()
    with pytest.raises(TypeError) as e:
        sheet.set_border("A1:B2", "middle", "thin")
    assert "side must be a valid border segment" in str(e)
    with pytest.raises(TypeError) as e:
        sheet.set_border("A1:B2", "top", "wobbly")
    assert "invalid border style 'wobbly'" in str(e)
    with pytest.raises(TypeError) as e:
        sheet.set_border("A1:B2", "top")
    assert "invalid number of arguments to set_border()" in str(e)
    with pytest.raises(TypeError) as e:
        sheet.set_surround_border("A1:B2")
    assert "invalid number of arguments to set_surround_border()" in str(e)
