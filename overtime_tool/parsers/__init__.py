"""Timesheet parsing layer."""
from overtime_tool.parsers.timesheet_parser import entries_from_rows, parse_timesheet

__all__ = ["entries_from_rows", "parse_timesheet"]
