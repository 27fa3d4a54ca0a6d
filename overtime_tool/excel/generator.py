"""Layer 5 — Excel Report Generator.

Writes one block per employee: the per-day split from the daily pass,
the weekly conversion row, and the final week totals. Excel formulas are
NOT relied upon; all values are pre-computed in Python.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from pathlib import Path

import openpyxl
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from overtime_tool.engine.calculator import WEEKLY_OVERTIME_THRESHOLD
from overtime_tool.engine.resolver import policy_key
from overtime_tool.models import ZERO, TimesheetReport, WeekResult

SHEET_TITLE = "Overtime Report"
TITLE_ROW = 1
SETTINGS_START_ROW = 3
FIRST_BLOCK_ROW = 8

COLUMNS = ["Date", "Hours", "Regular", "OT 1.5x", "OT 2.0x"]
LAST_COL = len(COLUMNS)

# Formatting constants
THIN_BORDER = Border(
    left=Side(style='thin'),
    right=Side(style='thin'),
    top=Side(style='thin'),
    bottom=Side(style='thin'),
)

HEADER_FONT = Font(name='Calibri', size=11, bold=True)
DATA_FONT = Font(name='Calibri', size=11)
TITLE_FONT = Font(name='Calibri', size=12, bold=True)
CENTER_ALIGN = Alignment(horizontal='center', vertical='center')
HEADER_FILL = PatternFill(fill_type='solid', start_color='DDEBF7', end_color='DDEBF7')
TOTAL_FILL = PatternFill(fill_type='solid', start_color='F2F2F2', end_color='F2F2F2')
NUMBER_FORMAT = '#,##0.00'
DATE_FORMAT = '[$-F800]dddd, mmmm dd, yyyy'


def _write_row(ws, row: int, values: list, font=DATA_FONT, fill=None) -> None:
    for col, value in enumerate(values, start=1):
        cell = ws.cell(row=row, column=col)
        if isinstance(value, Decimal):
            value = float(value)
            cell.number_format = NUMBER_FORMAT
        cell.value = value
        cell.font = font
        cell.alignment = CENTER_ALIGN
        cell.border = THIN_BORDER
        if fill is not None:
            cell.fill = fill


def _write_week(ws, row: int, week: WeekResult) -> int:
    """Write one workweek and return the next free row."""
    start = week.workweek_start or (week.dates[0] if week.dates else None)
    label = f"Week of {start.isoformat()}" if start else "Week"
    ws.merge_cells(start_row=row, start_column=1, end_row=row, end_column=LAST_COL)
    ws.cell(row=row, column=1).value = label
    ws.cell(row=row, column=1).font = HEADER_FONT
    row += 1

    for dt, split in week.days.items():
        _write_row(ws, row, [None, split.total, split.regular, split.ot_1_5, split.ot_2_0])
        date_cell = ws.cell(row=row, column=1)
        date_cell.value = datetime(dt.year, dt.month, dt.day)
        date_cell.number_format = DATE_FORMAT
        if dt == week.seventh_day:
            date_cell.font = HEADER_FONT
        row += 1

    if week.converted_hours > 0:
        _write_row(ws, row, [
            f"Weekly conversion (>{WEEKLY_OVERTIME_THRESHOLD}h)",
            None,
            -week.converted_hours,
            week.converted_hours,
            ZERO,
        ])
        row += 1

    b = week.breakdown
    _write_row(
        ws, row,
        ["Week Total", b.total_hours, b.regular_hours, b.overtime_hours_1_5, b.overtime_hours_2_0],
        font=HEADER_FONT, fill=TOTAL_FILL,
    )
    return row + 1


def _write_employee_block(ws, row: int, report: TimesheetReport) -> int:
    ws.merge_cells(start_row=row, start_column=1, end_row=row, end_column=LAST_COL)
    cell = ws.cell(row=row, column=1)
    cell.value = report.employee_name
    cell.font = TITLE_FONT
    cell.alignment = CENTER_ALIGN
    row += 1

    _write_row(ws, row, COLUMNS, font=HEADER_FONT, fill=HEADER_FILL)
    row += 1

    for week in report.weeks:
        row = _write_week(ws, row, week)

    _write_row(
        ws, row,
        [
            "Total Hours",
            report.total_hours,
            report.regular_hours,
            report.overtime_hours_1_5,
            report.overtime_hours_2_0,
        ],
        font=HEADER_FONT, fill=HEADER_FILL,
    )
    return row + 2


def generate_excel_report(
    reports: list[TimesheetReport],
    output_path: str | Path,
) -> Path:
    """Generate the Excel overtime report from computed results."""
    output_path = Path(output_path)

    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE

    ws.merge_cells(start_row=TITLE_ROW, start_column=1, end_row=TITLE_ROW, end_column=LAST_COL)
    title_cell = ws.cell(row=TITLE_ROW, column=1)
    title_cell.value = 'Overtime Summary for Hours Worked'
    title_cell.font = TITLE_FONT
    title_cell.alignment = CENTER_ALIGN

    if reports:
        settings = reports[0].settings
        info = [
            ("Region", settings.region),
            ("State", settings.state or ""),
            ("Policy", policy_key(settings)),
            ("Week Starts", settings.week_start.capitalize()),
        ]
        for offset, (label, value) in enumerate(info):
            ws.cell(row=SETTINGS_START_ROW + offset, column=1).value = label
            ws.cell(row=SETTINGS_START_ROW + offset, column=1).font = HEADER_FONT
            ws.cell(row=SETTINGS_START_ROW + offset, column=2).value = value

    row = FIRST_BLOCK_ROW
    for report in reports:
        row = _write_employee_block(ws, row, report)

    ws.column_dimensions['A'].width = 36
    for col in range(2, LAST_COL + 1):
        ws.column_dimensions[get_column_letter(col)].width = 14

    wb.save(str(output_path))
    return output_path
