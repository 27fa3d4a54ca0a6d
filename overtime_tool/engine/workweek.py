"""Workweek boundaries and grouping of timesheet entries into weeks."""

from __future__ import annotations

from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable

from overtime_tool.models import ZERO, TimesheetEntry

# date.weekday(): Monday=0, Sunday=6
_WEEKDAY_INDEX = {"monday": 0, "sunday": 6}


def workweek_start_for(day: date, week_start: str) -> date:
    """Most recent week-start weekday on or before ``day``."""
    offset = (day.weekday() - _WEEKDAY_INDEX[week_start]) % 7
    return day - timedelta(days=offset)


def workweek_period(day: date, week_start: str) -> tuple[date, date]:
    start = workweek_start_for(day, week_start)
    return start, start + timedelta(days=6)


def group_by_workweek(
    entries: Iterable[TimesheetEntry],
    week_start: str,
) -> dict[date, dict[date, Decimal]]:
    """Sum hours per date and bucket the dates by workweek start.

    Both the weeks and the dates inside each week come out in
    chronological order.
    """
    by_date: dict[date, Decimal] = defaultdict(lambda: ZERO)
    for entry in entries:
        by_date[entry.date] += entry.hours

    weeks: dict[date, dict[date, Decimal]] = {}
    for dt in sorted(by_date):
        start = workweek_start_for(dt, week_start)
        weeks.setdefault(start, {})[dt] = by_date[dt]
    return weeks
