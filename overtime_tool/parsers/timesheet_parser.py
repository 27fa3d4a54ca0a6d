"""Layer 1 — Timesheet Parser.

Reads worked hours from timesheet exports. Supported inputs:
  CSV  (.csv) : header row + one row per time entry
  XLSX (.xlsx): first worksheet, same layout as CSV
  PDF  (.pdf) : first table on each page with a Date/Hours header

Recognised columns (case-insensitive):
  Date      : "date", "work date", "day"
  Hours     : "hours", "hours worked", "hours_worked", "total hours"
  Employee  : "employee", "name", "technician"   (optional)

When no employee column is present, the file name stem is used as the
employee name. Rows with zero hours are skipped.
"""

from __future__ import annotations

import csv
import logging
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Iterable, Optional, Sequence

import openpyxl
import pdfplumber

from overtime_tool.models import StrictValidationError, TimesheetEntry

logger = logging.getLogger(__name__)

DATE_HEADERS = {"date", "work date", "day"}
HOURS_HEADERS = {"hours", "hours worked", "hours_worked", "total hours"}
EMPLOYEE_HEADERS = {"employee", "name", "technician"}


def _parse_date_flexible(value: object) -> date:
    """Parse dates in multiple formats."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    date_str = str(value).strip()

    formats = [
        "%Y-%m-%d",      # 2026-01-12
        "%d/%m/%Y",      # 12/01/2026
        "%d-%b-%y",      # 12-Jan-26
        "%d-%b-%Y",      # 12-Jan-2026
        "%d.%m.%Y",      # 12.01.2026
    ]

    for fmt in formats:
        try:
            return datetime.strptime(date_str, fmt).date()
        except ValueError:
            continue

    raise ValueError(f"Cannot parse date: '{date_str}'")


def _parse_hours(value: object) -> Decimal:
    """Convert a cell value to Decimal hours; empty cells are 0.

    Accepts plain numbers and "H:MM" durations. NaN and infinity are rejected.
    """
    if value is None:
        return Decimal("0")

    text = str(value).strip()
    if not text:
        return Decimal("0")

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float)):
        result = Decimal(str(value))
    elif ":" in text:
        hours_part, _, minutes_part = text.partition(":")
        try:
            return Decimal(int(hours_part)) + Decimal(int(minutes_part)) / Decimal(60)
        except ValueError:
            raise ValueError(f"Cannot parse hours: '{text}'")
    else:
        try:
            result = Decimal(text.replace(",", "."))
        except InvalidOperation:
            raise ValueError(f"Cannot parse hours: '{text}'")

    if not result.is_finite():
        raise ValueError(f"Cannot parse hours: '{text}'")
    return result


def _find_column(header: Sequence[object], names: set[str]) -> Optional[int]:
    for idx, cell in enumerate(header):
        if cell is not None and str(cell).strip().lower() in names:
            return idx
    return None


def _is_header(row: Sequence[object]) -> bool:
    return (
        _find_column(row, DATE_HEADERS) is not None
        and _find_column(row, HOURS_HEADERS) is not None
    )


def entries_from_rows(
    rows: Iterable[Sequence[object]],
    source_file: str,
) -> list[TimesheetEntry]:
    """Turn tabular rows (header first) into timesheet entries.

    Rows before the header are ignored, so title lines above the table
    are fine.
    """
    entries: list[TimesheetEntry] = []
    errors: list[str] = []
    default_name = Path(source_file).stem

    date_col = hours_col = name_col = None

    for row_num, row in enumerate(rows, start=1):
        if not row or all(c is None or str(c).strip() == "" for c in row):
            continue

        if date_col is None:
            if _is_header(row):
                date_col = _find_column(row, DATE_HEADERS)
                hours_col = _find_column(row, HOURS_HEADERS)
                name_col = _find_column(row, EMPLOYEE_HEADERS)
            continue

        # Repeated header (e.g. one per PDF page)
        if _is_header(row):
            continue

        raw_date = row[date_col] if date_col < len(row) else None
        raw_hours = row[hours_col] if hours_col < len(row) else None
        if raw_date is None or str(raw_date).strip() == "":
            continue

        try:
            entry_date = _parse_date_flexible(raw_date)
            hours = _parse_hours(raw_hours)
        except ValueError as e:
            errors.append(f"{source_file} row {row_num}: {e}")
            continue

        if hours == 0:
            continue

        name = default_name
        if name_col is not None and name_col < len(row) and row[name_col]:
            name = str(row[name_col]).strip()

        entries.append(TimesheetEntry(
            employee_name=name,
            date=entry_date,
            hours=hours,
            source_file=source_file,
        ))

    if date_col is None:
        errors.append(f"{source_file}: no header row with Date and Hours columns found")

    if errors:
        raise StrictValidationError(errors)

    logger.debug("Parsed %d entries from %s", len(entries), source_file)
    return entries


def _read_csv_rows(path: Path) -> list[list[str]]:
    with path.open(newline="", encoding="utf-8-sig") as fh:
        return list(csv.reader(fh))


def _read_xlsx_rows(path: Path) -> list[tuple]:
    wb = openpyxl.load_workbook(str(path), read_only=True, data_only=True)
    try:
        return list(wb.worksheets[0].iter_rows(values_only=True))
    finally:
        wb.close()


def _read_pdf_rows(path: Path) -> list[list]:
    rows: list[list] = []
    with pdfplumber.open(str(path)) as pdf:
        for page in pdf.pages:
            for table in page.extract_tables():
                rows.extend(table)
    return rows


def parse_timesheet(path: str | Path) -> list[TimesheetEntry]:
    """Parse a timesheet file, picking the reader from its extension."""
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".csv":
        rows = _read_csv_rows(path)
    elif suffix in (".xlsx", ".xlsm"):
        rows = _read_xlsx_rows(path)
    elif suffix == ".pdf":
        rows = _read_pdf_rows(path)
    else:
        raise StrictValidationError([f"Unsupported timesheet format: {path.name}"])

    return entries_from_rows(rows, str(path))
