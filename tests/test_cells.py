import pytest

from sheet_author import Document, MalformedAddressError, Style
from sheet_author.constants import MAX_COL_COUNT, MAX_ROW_COUNT


def test_cell_refs():
    doc = Document()
    sheet = doc.create_sheet()
    sheet.write("B2", "Debit")
    assert sheet.cell(1, 1).value == "Debit"
    assert sheet.cell("B2") is sheet.cell(1, 1)
    assert sheet.cell("B2").address == "B2"
    assert (sheet.cell("B2").row, sheet.cell("B2").col) == (1, 1)
    assert str(sheet.cell("B2")) == "Cell(B2, value='Debit')"
    assert sheet.cell("B2").is_text
    assert sheet.cell("B2").num_lines == 1
    assert sheet.cell("C3").style == Style()
    assert sheet.cell("C3").style_record is None


def test_cell_limits():
    doc = Document()
    sheet = doc.create_sheet()
    sheet.write(MAX_ROW_COUNT - 1, MAX_COL_COUNT - 1, "last")
    assert sheet.cell("XFD1048576").value == "last"

    with pytest.raises(IndexError) as e:
        sheet.write(MAX_ROW_COUNT, 0, "x")
    assert "1048576 exceeds maximum row 1048575" in str(e)
    with pytest.raises(IndexError) as e:
        sheet.write(0, MAX_COL_COUNT, "x")
    assert "16384 exceeds maximum column 16383" in str(e)
    with pytest.raises(IndexError) as e:
        sheet.write(-1, 0, "x")
    assert "row reference -1 below zero" in str(e)
    with pytest.raises(IndexError) as e:
        _ = sheet.cell("XFE1")
    assert "exceeds maximum column" in str(e)


def test_cell_exceptions():
    doc = Document()
    sheet = doc.create_sheet()
    with pytest.raises(IndexError) as e:
        sheet.write(0)
    assert "invalid cell reference" in str(e)
    with pytest.raises(MalformedAddressError) as e:
        sheet.write("1A", "x")
    assert "invalid cell reference '1A'" in str(e)
    with pytest.raises(TypeError) as e:
        sheet.write(1.5, 0, "x")
    assert "row must be an int" in str(e)
    with pytest.raises(TypeError) as e:
        sheet.write("A1")
    assert "write() takes a cell reference and a single value" in str(e)
    with pytest.raises(TypeError) as e:
        sheet.write("A1", "x", "y")
    assert "write() takes a cell reference and a single value" in str(e)
    with pytest.raises(TypeError) as e:
        sheet.set_cell_style("A1", "bold")
    assert "style must be a Style object" in str(e)
    with pytest.raises(TypeError) as e:
        _ = sheet.cell("A1", "x")
    assert "too many arguments to cell()" in str(e)
