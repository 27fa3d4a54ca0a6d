"""Layer 4 — Overtime Calculation Engine.

Daily pass first, then the weekly 40h threshold. Weekly excess is moved
from regular to OT 1.5x only, so hours already paid at a daily premium are
never counted twice and OT 2.0x hours are never re-bucketed.

All hours are Decimal; nothing is rounded here. Callers round the final
figures for display.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Mapping, Optional, Union

from overtime_tool.engine.day_splitter import seventh_consecutive_day, split_days
from overtime_tool.engine.resolver import resolve_policy
from overtime_tool.engine.workweek import group_by_workweek
from overtime_tool.models import (
    ZERO,
    DaySplit,
    TenantLaborSettings,
    TimesheetEntry,
    TimesheetReport,
    WeekBreakdown,
    WeekResult,
    WeekSummary,
)

WEEKLY_OVERTIME_THRESHOLD = Decimal("40")

DayHoursInput = Mapping[Union[date, str], Union[Decimal, float, int, str]]


def _to_date(value: Union[date, str]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip())


def _to_hours(value: Union[Decimal, float, int, str]) -> Decimal:
    hours = value if isinstance(value, Decimal) else Decimal(str(value))
    return max(ZERO, hours)


def normalize_day_hours(day_hours: DayHoursInput) -> dict[date, Decimal]:
    """Convert caller input to a date-keyed, date-ordered Decimal map."""
    normalized: dict[date, Decimal] = defaultdict(lambda: ZERO)
    for key, value in day_hours.items():
        normalized[_to_date(key)] += _to_hours(value)
    return {dt: normalized[dt] for dt in sorted(normalized)}


def _sum_splits(splits: Iterable[DaySplit]) -> WeekBreakdown:
    regular = ot_1_5 = ot_2_0 = ZERO
    for split in splits:
        regular += split.regular
        ot_1_5 += split.ot_1_5
        ot_2_0 += split.ot_2_0
    return WeekBreakdown(
        total_hours=regular + ot_1_5 + ot_2_0,
        regular_hours=regular,
        overtime_hours_1_5=ot_1_5,
        overtime_hours_2_0=ot_2_0,
    )


def calculate_daily_breakdown(
    settings: TenantLaborSettings,
    day_hours: DayHoursInput,
) -> WeekBreakdown:
    """Breakdown from daily thresholds only, ignoring the weekly threshold."""
    policy = resolve_policy(settings)
    return _sum_splits(split_days(normalize_day_hours(day_hours), policy).values())


def calculate_week(
    settings: TenantLaborSettings,
    day_hours: DayHoursInput,
    workweek_start: Optional[date] = None,
) -> WeekResult:
    """Run the daily pass and weekly reconciliation for one workweek."""
    policy = resolve_policy(settings)
    hours = normalize_day_hours(day_hours)

    days = split_days(hours, policy)
    provisional = _sum_splits(days.values())

    if policy.has_weekly_overtime:
        weekly_excess = max(provisional.total_hours - WEEKLY_OVERTIME_THRESHOLD, ZERO)
    else:
        weekly_excess = ZERO

    convert = min(weekly_excess, provisional.regular_hours)

    breakdown = WeekBreakdown(
        total_hours=provisional.total_hours,
        regular_hours=provisional.regular_hours - convert,
        overtime_hours_1_5=provisional.overtime_hours_1_5 + convert,
        overtime_hours_2_0=provisional.overtime_hours_2_0,
    )

    return WeekResult(
        settings=settings,
        policy=policy,
        days=days,
        provisional=provisional,
        weekly_excess=weekly_excess,
        converted_hours=convert,
        breakdown=breakdown,
        workweek_start=workweek_start,
        seventh_day=seventh_consecutive_day(hours) if policy.has_daily_overtime else None,
    )


def calculate_week_breakdown(
    settings: TenantLaborSettings,
    day_hours: DayHoursInput,
) -> WeekBreakdown:
    """Final Regular/OT1.5/OT2.0 breakdown for one workweek."""
    return calculate_week(settings, day_hours).breakdown


def calculate_week_summary(
    settings: TenantLaborSettings,
    day_hours: DayHoursInput,
    workweek_start: Optional[date] = None,
) -> WeekSummary:
    """Week figures collapsed to regular + overtime for the summary view."""
    breakdown = calculate_week_breakdown(settings, day_hours)
    return WeekSummary(
        regular_hours=breakdown.regular_hours,
        overtime_hours=breakdown.overtime_hours,
        workweek_start=workweek_start,
    )


def calculate_timesheet(
    entries: list[TimesheetEntry],
    settings: TenantLaborSettings,
) -> list[TimesheetReport]:
    """Compute every workweek of every employee found in the entries."""
    by_employee: dict[str, list[TimesheetEntry]] = defaultdict(list)
    for entry in entries:
        by_employee[entry.employee_name].append(entry)

    reports: list[TimesheetReport] = []
    for name, emp_entries in sorted(by_employee.items()):
        weeks = group_by_workweek(emp_entries, settings.week_start)
        reports.append(TimesheetReport(
            employee_name=name,
            settings=settings,
            weeks=[
                calculate_week(settings, week_hours, workweek_start=start)
                for start, week_hours in weeks.items()
            ],
            entries=sorted(emp_entries, key=lambda e: e.date),
        ))

    return reports
