import pytest
from openpyxl import Workbook

from sheet_author import Document, Sheet


def test_create_sheets():
    doc = Document()
    assert len(doc.sheets) == 0
    assert doc.native.sheetnames == []

    sheet_1 = doc.create_sheet()
    sheet_2 = doc.create_sheet()
    data = doc.create_sheet("Data")
    assert isinstance(sheet_1, Sheet)
    assert [sheet.name for sheet in doc.sheets] == ["Sheet 1", "Sheet 2", "Data"]
    assert doc.native.sheetnames == ["Sheet 1", "Sheet 2", "Data"]
    assert data.native is doc.native["Data"]


def test_cached_sheets():
    doc = Document()
    data = doc.create_sheet("Data")
    assert doc.sheets[0] is data
    assert doc.sheets["Data"] is data
    assert doc.sheets[-1] is data
    assert "data" in doc.sheets

    data.write("A1", "value")
    assert doc.sheets["Data"].cell("A1") is data.cell("A1")


def test_sheet_names():
    doc = Document()
    sheet = doc.create_sheet()
    sheet.name = "Renamed"
    assert doc.sheets["Renamed"] is sheet
    assert doc.native.sheetnames == ["Renamed"]

    assert doc.create_sheet().name == "Sheet 1"
    assert doc.create_sheet().name == "Sheet 2"


def test_sheet_exceptions():
    doc = Document()
    doc.create_sheet("Data")

    with pytest.raises(IndexError) as e:
        doc.create_sheet("Data")
    assert "sheet 'Data' already exists" in str(e)
    with pytest.raises(IndexError) as e:
        doc.create_sheet("DATA")
    assert "sheet 'DATA' already exists" in str(e)
    with pytest.raises(KeyError) as e:
        _ = doc.sheets["Missing"]
    assert "no sheet named 'Missing'" in str(e)
    with pytest.raises(IndexError) as e:
        _ = doc.sheets[1]
    assert "index 1 out of range" in str(e)
    with pytest.raises(LookupError) as e:
        _ = doc.sheets[1.0]
    assert "invalid index type float" in str(e)


def test_existing_workbook():
    workbook = Workbook()
    workbook.active.title = "First"
    workbook.create_sheet("Second")

    doc = Document(workbook=workbook)
    assert doc.native is workbook
    assert [sheet.name for sheet in doc.sheets] == ["First", "Second"]
    assert doc.sheets["Second"].native is workbook["Second"]
    assert doc.create_sheet().name == "Sheet 1"

    with pytest.raises(TypeError) as e:
        _ = Document("test.xlsx", workbook=workbook)
    assert "pass either a filename or a workbook, not both" in str(e)
