"""Tests for timesheet parsers (CSV, XLSX, PDF and tabular rows)."""

import pytest
from pathlib import Path
from decimal import Decimal
from datetime import date, datetime

import openpyxl

from overtime_tool.models import StrictValidationError
from overtime_tool.parsers import timesheet_parser
from overtime_tool.parsers.timesheet_parser import (
    _parse_date_flexible,
    _parse_hours,
    entries_from_rows,
    parse_timesheet,
)


class TestParseHelpers:
    @pytest.mark.parametrize("raw,expected", [
        ("2026-01-12", date(2026, 1, 12)),
        ("12/01/2026", date(2026, 1, 12)),
        ("12-Jan-26", date(2026, 1, 12)),
        ("12-Jan-2026", date(2026, 1, 12)),
        ("12.01.2026", date(2026, 1, 12)),
        (datetime(2026, 1, 12, 0, 0), date(2026, 1, 12)),
        (date(2026, 1, 12), date(2026, 1, 12)),
    ])
    def test_dates(self, raw, expected):
        assert _parse_date_flexible(raw) == expected

    def test_bad_date(self):
        with pytest.raises(ValueError, match="Cannot parse date"):
            _parse_date_flexible("someday")

    @pytest.mark.parametrize("raw,expected", [
        ("8", Decimal("8")),
        (" 7.5 ", Decimal("7.5")),
        ("7,5", Decimal("7.5")),
        ("7:30", Decimal("7.5")),
        (9, Decimal("9")),
        (8.25, Decimal("8.25")),
        ("", Decimal("0")),
        (None, Decimal("0")),
    ])
    def test_hours(self, raw, expected):
        assert _parse_hours(raw) == expected

    def test_bad_hours(self):
        with pytest.raises(ValueError, match="Cannot parse hours"):
            _parse_hours("lots")

    @pytest.mark.parametrize("raw", ["nan", "NaN", "inf", "-Infinity", float("nan"), Decimal("Infinity")])
    def test_non_finite_hours_rejected(self, raw):
        with pytest.raises(ValueError, match="Cannot parse hours"):
            _parse_hours(raw)


class TestEntriesFromRows:
    def test_basic(self):
        rows = [
            ["Date", "Hours"],
            ["2026-01-12", "9"],
            ["2026-01-13", "10.5"],
        ]
        entries = entries_from_rows(rows, "jane_doe.csv")
        assert len(entries) == 2
        assert entries[0].employee_name == "jane_doe"
        assert entries[0].date == date(2026, 1, 12)
        assert entries[1].hours == Decimal("10.5")
        assert all(e.source_file == "jane_doe.csv" for e in entries)

    def test_employee_column(self):
        rows = [
            ["Employee", "Work Date", "Hours Worked"],
            ["Ana", "2026-01-12", "8"],
            ["Ben", "2026-01-12", "6"],
        ]
        entries = entries_from_rows(rows, "team.csv")
        assert [e.employee_name for e in entries] == ["Ana", "Ben"]

    def test_title_rows_and_repeated_header_skipped(self):
        rows = [
            ["Weekly Timesheet", None],
            [None, None],
            ["DATE", "HOURS"],
            ["2026-01-12", "8"],
            ["DATE", "HOURS"],
            ["2026-01-13", "8"],
        ]
        entries = entries_from_rows(rows, "ts.pdf")
        assert [e.date for e in entries] == [date(2026, 1, 12), date(2026, 1, 13)]

    def test_zero_and_blank_rows_skipped(self):
        rows = [
            ["Date", "Hours"],
            ["2026-01-12", "0"],
            ["", ""],
            ["2026-01-13", ""],
            ["2026-01-14", "4"],
        ]
        entries = entries_from_rows(rows, "ts.csv")
        assert len(entries) == 1
        assert entries[0].date == date(2026, 1, 14)

    def test_bad_rows_collected(self):
        rows = [
            ["Date", "Hours"],
            ["yesterday", "8"],
            ["2026-01-13", "many"],
        ]
        with pytest.raises(StrictValidationError) as exc_info:
            entries_from_rows(rows, "ts.csv")
        assert len(exc_info.value.errors) == 2
        assert "row 2" in exc_info.value.errors[0]

    def test_missing_header(self):
        with pytest.raises(StrictValidationError, match="no header row"):
            entries_from_rows([["2026-01-12", "8"]], "ts.csv")

    def test_nan_row_reported_as_parse_error(self):
        rows = [["Date", "Hours"], ["2026-01-12", "8"], ["2026-01-13", "nan"]]
        with pytest.raises(StrictValidationError) as exc_info:
            entries_from_rows(rows, "ts.csv")
        assert exc_info.value.errors == ["ts.csv row 3: Cannot parse hours: 'nan'"]

    def test_pdf_table_shape(self):
        # extract_tables: list of rows, None for empty cells, one header per page
        rows = [
            ["Employee", "Date", "Hours"],
            ["Kim", "12/01/2026", "9"],
            ["Kim", "13/01/2026", None],
            ["Employee", "Date", "Hours"],
            ["Kim", "14/01/2026", "7,5"],
        ]
        entries = entries_from_rows(rows, "kim.pdf")
        assert [(e.date, e.hours) for e in entries] == [
            (date(2026, 1, 12), Decimal("9")),
            (date(2026, 1, 14), Decimal("7.5")),
        ]


class TestParseTimesheetFiles:
    def test_csv(self, tmp_path: Path):
        path = tmp_path / "Maria.csv"
        path.write_text("Date,Hours\n2026-01-12,9\n2026-01-13,7:45\n", encoding="utf-8")
        entries = parse_timesheet(path)
        assert [e.employee_name for e in entries] == ["Maria", "Maria"]
        assert entries[1].hours == Decimal("7.75")

    def test_xlsx(self, tmp_path: Path):
        path = tmp_path / "crew.xlsx"
        wb = openpyxl.Workbook()
        ws = wb.active
        ws.append(["Crew timesheet"])
        ws.append(["Name", "Date", "Hours"])
        ws.append(["Lee", datetime(2026, 1, 12), 10])
        ws.append(["Lee", datetime(2026, 1, 13), 12.5])
        wb.save(str(path))

        entries = parse_timesheet(path)
        assert len(entries) == 2
        assert entries[0].employee_name == "Lee"
        assert entries[0].date == date(2026, 1, 12)
        assert entries[1].hours == Decimal("12.5")

    def test_unsupported_extension(self, tmp_path: Path):
        path = tmp_path / "ts.txt"
        path.write_text("Date,Hours\n", encoding="utf-8")
        with pytest.raises(StrictValidationError, match="Unsupported timesheet format"):
            parse_timesheet(path)

    def test_pdf_tables_from_every_page(self, tmp_path: Path, monkeypatch):
        pages = [
            [[["Date", "Hours"], ["2026-01-12", "10"]]],
            [[["Date", "Hours"], ["2026-01-13", "8:30"]]],
        ]

        class _Page:
            def __init__(self, tables):
                self._tables = tables

            def extract_tables(self):
                return self._tables

        class _Pdf:
            def __init__(self, path):
                self.path = path
                self.pages = [_Page(t) for t in pages]

            def __enter__(self):
                return self

            def __exit__(self, *exc):
                return False

        opened = []

        def _open(path):
            opened.append(path)
            return _Pdf(path)

        monkeypatch.setattr(timesheet_parser.pdfplumber, "open", _open)
        path = tmp_path / "Jo.pdf"
        path.write_bytes(b"%PDF-1.4")

        entries = parse_timesheet(path)

        assert opened == [str(path)]
        assert [e.employee_name for e in entries] == ["Jo", "Jo"]
        assert [e.hours for e in entries] == [Decimal("10"), Decimal("8.5")]
