"""Multi-month attendance workbook.

One sheet per month, employees as rows and days as letter columns, styled
cell by cell with openpyxl after pandas writes the values.
"""

from __future__ import annotations

import io
from datetime import date
from typing import Sequence

import pandas as pd
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from ..attendance.projections import NOT_APPLICABLE_MARK
from ..core.exceptions import ValidationError
from .model import MonthGrid

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

NAME_HEADER = "Employee Name"
TOTAL_HEADERS = ("Total P", "Total A", "Total I")

NAME_WIDTH = 25
DAY_WIDTH = 4
TOTAL_WIDTH = 8

LETTER_COLORS = {
    "P": "FF006400",
    "W": "FF00008B",
    "A": "FF8B0000",
    "I": "FFFF8C00",
    "L": "FF808080",
    NOT_APPLICABLE_MARK: "FFC0C0C0",
}
DEFAULT_COLOR = "FF000000"

_side = Side(style="thin", color="FFD0D0D0")
_border = Border(top=_side, bottom=_side, left=_side, right=_side)
_fill = PatternFill(fill_type="solid", fgColor="FFFFFFFF")
_center = Alignment(horizontal="center", vertical="center")


def export_filename(today: date) -> str:
    return f"Attendance_Report_{today.strftime('%Y-%m-%d')}.xlsx"


def grid_to_frame(grid: MonthGrid) -> pd.DataFrame:
    day_headers = [str(d) for d in range(1, grid.days_in_month + 1)]
    columns = [NAME_HEADER, *day_headers, *TOTAL_HEADERS]
    records = [
        [row.full_name, *row.letters, row.total_p, row.total_a, row.total_i]
        for row in grid.rows
    ]
    return pd.DataFrame(records, columns=columns)


def _style_sheet(ws, days_in_month: int) -> None:
    ws.column_dimensions["A"].width = NAME_WIDTH
    for col in range(2, days_in_month + 2):
        ws.column_dimensions[get_column_letter(col)].width = DAY_WIDTH
    for col in range(days_in_month + 2, days_in_month + 2 + len(TOTAL_HEADERS)):
        ws.column_dimensions[get_column_letter(col)].width = TOTAL_WIDTH

    ws.freeze_panes = "B2"

    for row in ws.iter_rows():
        for cell in row:
            cell.alignment = _center
            cell.border = _border
            cell.fill = _fill
            if cell.row == 1:
                cell.font = Font(bold=True, color=DEFAULT_COLOR)
            elif 2 <= cell.column <= days_in_month + 1:
                cell.font = Font(bold=True, color=LETTER_COLORS.get(cell.value, DEFAULT_COLOR))
            else:
                cell.font = Font(color=DEFAULT_COLOR)


def export_attendance_xlsx(grids: Sequence[MonthGrid]) -> bytes:
    if not grids:
        raise ValidationError("Select at least one month to export")

    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        for grid in grids:
            grid_to_frame(grid).to_excel(writer, index=False, sheet_name=grid.sheet_name)
            _style_sheet(writer.sheets[grid.sheet_name], grid.days_in_month)

    return output.getvalue()
