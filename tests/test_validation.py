"""Tests for the strict validation engine."""

import pytest
from decimal import Decimal
from datetime import date

from overtime_tool.engine.validator import validate_day_hours, validate_entries
from overtime_tool.models import StrictValidationError, TimesheetEntry


def _make_entry(
    dt: date = date(2026, 1, 12),
    hours: str = "8",
    name: str = "Test",
) -> TimesheetEntry:
    return TimesheetEntry(
        employee_name=name,
        date=dt,
        hours=Decimal(hours),
        source_file="test.csv",
    )


class TestValidateDayHours:
    def test_valid_map_parsed_and_sorted(self):
        result = validate_day_hours({"2026-01-13": 9, "2026-01-12": "7.5"})
        assert result == {
            date(2026, 1, 12): Decimal("7.5"),
            date(2026, 1, 13): Decimal("9"),
        }
        assert list(result) == [date(2026, 1, 12), date(2026, 1, 13)]

    def test_empty_map_is_valid(self):
        assert validate_day_hours({}) == {}

    def test_negative_hours(self):
        with pytest.raises(StrictValidationError, match="negative hours"):
            validate_day_hours({"2026-01-12": -1})

    def test_more_than_24_hours(self):
        with pytest.raises(StrictValidationError, match="> 24"):
            validate_day_hours({"2026-01-12": 25})

    def test_non_numeric(self):
        with pytest.raises(StrictValidationError, match="must be numeric"):
            validate_day_hours({"2026-01-12": "eight"})

    def test_bool_rejected(self):
        with pytest.raises(StrictValidationError, match="must be numeric"):
            validate_day_hours({"2026-01-12": True})

    def test_nan(self):
        with pytest.raises(StrictValidationError, match="not finite"):
            validate_day_hours({"2026-01-12": float("nan")})

    def test_invalid_date(self):
        with pytest.raises(StrictValidationError, match="Invalid date"):
            validate_day_hours({"2026-13-01": 8})

    def test_same_date_as_str_and_date_is_summed(self):
        result = validate_day_hours({"2026-01-12": 8, date(2026, 1, 12): 2})
        assert result == {date(2026, 1, 12): Decimal("10")}

    def test_same_date_combined_over_24(self):
        with pytest.raises(StrictValidationError, match="combined hours=26"):
            validate_day_hours({"2026-01-12": 14, date(2026, 1, 12): 12})

    def test_more_than_seven_dates(self):
        days = {date(2026, 1, d): 8 for d in range(11, 19)}
        with pytest.raises(StrictValidationError, match="at most 7"):
            validate_day_hours(days)

    def test_span_more_than_one_week(self):
        with pytest.raises(StrictValidationError, match="more than one week"):
            validate_day_hours({"2026-01-11": 8, "2026-01-18": 8})

    def test_crosses_sunday_week_boundary(self):
        with pytest.raises(StrictValidationError, match="cross a sunday workweek boundary"):
            validate_day_hours({"2026-01-10": 8, "2026-01-11": 8}, week_start="sunday")

    def test_same_dates_fine_for_monday_week(self):
        result = validate_day_hours({"2026-01-10": 8, "2026-01-11": 8}, week_start="monday")
        assert len(result) == 2

    def test_all_errors_collected(self):
        with pytest.raises(StrictValidationError) as exc_info:
            validate_day_hours({"2026-01-12": -1, "2026-01-13": 30, "bad": 1})
        assert len(exc_info.value.errors) == 3


class TestValidateEntries:
    def test_valid_entries_pass(self):
        entries = [_make_entry(), _make_entry(date(2026, 1, 13), "10")]
        assert validate_entries(entries) == entries

    def test_empty_entries_raise(self):
        with pytest.raises(StrictValidationError, match="No timesheet entries"):
            validate_entries([])

    def test_negative_hours_raise(self):
        with pytest.raises(StrictValidationError, match="negative hours"):
            validate_entries([_make_entry(hours="-5")])

    def test_nan_hours_raise(self):
        with pytest.raises(StrictValidationError, match="not finite"):
            validate_entries([_make_entry(hours="NaN")])

    def test_daily_aggregate_over_24_raises(self):
        entries = [_make_entry(hours="14"), _make_entry(hours="12")]
        with pytest.raises(StrictValidationError, match="aggregated daily total=26"):
            validate_entries(entries)

    def test_aggregate_is_per_employee(self):
        entries = [_make_entry(hours="14", name="A"), _make_entry(hours="12", name="B")]
        assert validate_entries(entries) == entries
