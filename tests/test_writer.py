from __future__ import annotations

from openpyxl.drawing.spreadsheet_drawing import OneCellAnchor
from openpyxl.utils.units import pixels_to_EMU

from conftest import load_output
from excel_filter.models import FilteredRow, RowImageBundle
from excel_filter.writer import write_workbook

HEADERS = ["Name", "Dept"]
ROWS = [
    FilteredRow(original_row=2, new_index=0, values={"Name": "Alice", "Dept": "Sales"}),
    FilteredRow(original_row=5, new_index=1, values={"Name": "Dan", "Dept": "Sales, HR"}),
]


def test_writes_single_filtered_sheet():
    wb = load_output(write_workbook(HEADERS, ROWS))
    assert wb.sheetnames == ["Filtered"]
    ws = wb.active
    assert [c.value for c in ws[1]] == ["Name", "Dept"]
    assert [c.value for c in ws[2]] == ["Alice", "Sales"]
    assert [c.value for c in ws[3]] == ["Dan", "Sales, HR"]
    assert ws.max_row == 3


def test_header_and_data_styles():
    ws = load_output(write_workbook(HEADERS, ROWS)).active

    header = ws["A1"]
    assert header.font.bold
    assert header.alignment.horizontal == "center"
    assert header.alignment.vertical == "center"

    data = ws["B3"]
    assert not data.font.bold
    assert data.alignment.horizontal == "center"
    assert data.alignment.vertical == "center"
    assert data.alignment.wrap_text


def test_default_sizes():
    ws = load_output(write_workbook(HEADERS, ROWS)).active
    assert ws.sheet_format.defaultColWidth == 15
    assert ws.sheet_format.defaultRowHeight == 80


def test_header_only_when_no_rows_kept():
    ws = load_output(write_workbook(HEADERS, [])).active
    assert ws.max_row == 1
    assert ws._images == []


def test_images_placed_at_new_row_and_original_column(red_png, blue_png):
    bundles = [
        RowImageBundle(new_index=1, source_column=3, data=red_png),
        RowImageBundle(new_index=0, source_column=1, data=blue_png),
    ]
    ws = load_output(write_workbook(HEADERS, ROWS, bundles)).active

    assert len(ws._images) == 2
    placed = sorted(
        (img.anchor._from.row, img.anchor._from.col, img._data()) for img in ws._images
    )
    assert placed == [(1, 0, blue_png), (2, 2, red_png)]

    for img in ws._images:
        anchor = img.anchor
        assert isinstance(anchor, OneCellAnchor)
        assert anchor._from.rowOff == pixels_to_EMU(5)
        assert anchor._from.colOff == pixels_to_EMU(5)
        assert anchor.ext.cx == pixels_to_EMU(100)
        assert anchor.ext.cy == pixels_to_EMU(100)


def test_unreadable_image_is_left_out(red_png):
    bundles = [
        RowImageBundle(new_index=0, source_column=1, data=b"not an image"),
        RowImageBundle(new_index=1, source_column=1, data=red_png),
    ]
    ws = load_output(write_workbook(HEADERS, ROWS, bundles)).active
    assert len(ws._images) == 1
    assert ws._images[0].anchor._from.row == 2
