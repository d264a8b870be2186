from __future__ import annotations

import io
from datetime import date

import pytest
from openpyxl import load_workbook

from site_attendance.core.exceptions import ValidationError
from site_attendance.reports.excel_export import export_attendance_xlsx, export_filename
from site_attendance.reports.model import GridRow, MonthGrid


def _grid(year, month, days, letters):
    return MonthGrid(
        year=year,
        month=month,
        days_in_month=days,
        rows=[GridRow(employee_id=1, full_name="Hoa Dang", letters=letters, total_p=1, total_a=1, total_i=0)],
    )


@pytest.fixture
def workbook():
    june = _grid(2024, 6, 30, ["P", "A", "—"] + ["—"] * 27)
    may = _grid(2024, 5, 31, ["W", "L", "I"] + ["—"] * 28)
    return load_workbook(io.BytesIO(export_attendance_xlsx([june, may])))


def test_one_sheet_per_month(workbook):
    assert workbook.sheetnames == ["Jun 2024", "May 2024"]


def test_header_and_values(workbook):
    ws = workbook["Jun 2024"]

    header = [c.value for c in ws[1]]
    assert header[0] == "Employee Name"
    assert header[1:4] == ["1", "2", "3"]
    assert header[-3:] == ["Total P", "Total A", "Total I"]
    assert len(header) == 1 + 30 + 3

    row = [c.value for c in ws[2]]
    assert row[0] == "Hoa Dang"
    assert row[1:4] == ["P", "A", "—"]
    assert row[-3:] == [1, 1, 0]


def test_layout_and_colours(workbook):
    ws = workbook["May 2024"]

    assert ws.freeze_panes == "B2"
    assert ws.column_dimensions["A"].width == 25
    assert ws.column_dimensions["B"].width == 4
    assert ws.column_dimensions["AG"].width == 8
    assert ws["A1"].font.bold
    assert ws["B2"].font.color.rgb == "FF00008B"
    assert ws["C2"].font.color.rgb == "FF808080"
    assert ws["D2"].font.color.rgb == "FFFF8C00"
    assert ws["E2"].font.color.rgb == "FFC0C0C0"
    assert ws["B2"].alignment.horizontal == "center"


def test_empty_selection_is_rejected():
    with pytest.raises(ValidationError):
        export_attendance_xlsx([])


def test_export_filename():
    assert export_filename(date(2024, 6, 19)) == "Attendance_Report_2024-06-19.xlsx"
