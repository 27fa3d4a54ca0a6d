"""Layer 3 — Strict Validation Engine.

Validates caller input before it reaches the calculator. The calculator
itself assumes non-negative numeric hours within a single workweek.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Mapping, Optional

from overtime_tool.engine.workweek import workweek_start_for
from overtime_tool.models import StrictValidationError, TimesheetEntry

MAX_HOURS_PER_DAY = Decimal("24")
MAX_DAYS_PER_WEEK = 7


def _check_hours(label: str, value: object, errors: list[str]) -> Optional[Decimal]:
    if isinstance(value, bool):
        errors.append(f"{label}: hours must be numeric, got {value!r}")
        return None
    try:
        hours = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        errors.append(f"{label}: hours must be numeric, got {value!r}")
        return None

    if not hours.is_finite():
        errors.append(f"{label}: hours is not finite")
        return None
    if hours < 0:
        errors.append(f"{label}: negative hours={hours}")
    if hours > MAX_HOURS_PER_DAY:
        errors.append(f"{label}: hours={hours} > {MAX_HOURS_PER_DAY}")
    return hours


def validate_day_hours(
    day_hours: Mapping[object, object],
    week_start: Optional[str] = None,
) -> dict[date, Decimal]:
    """Validate one workweek's date -> hours map.

    Returns the map with parsed dates and Decimal hours if all checks pass.
    When ``week_start`` is given, all dates must fall into the same workweek.
    """
    errors: list[str] = []
    parsed: dict[date, Decimal] = {}
    repeated: set[date] = set()

    for key, value in day_hours.items():
        if isinstance(key, datetime):
            dt = key.date()
        elif isinstance(key, date):
            dt = key
        else:
            try:
                dt = date.fromisoformat(str(key).strip())
            except ValueError:
                errors.append(f"Invalid date '{key}' (expected YYYY-MM-DD)")
                continue

        hours = _check_hours(str(dt), value, errors)
        if hours is None:
            continue
        # Same date given as str and as date: summed, like the calculator
        if dt in parsed:
            repeated.add(dt)
            parsed[dt] += hours
        else:
            parsed[dt] = hours

    for dt in sorted(repeated):
        if parsed[dt] > MAX_HOURS_PER_DAY:
            errors.append(
                f"{dt}: combined hours={parsed[dt]} > {MAX_HOURS_PER_DAY} for a date supplied more than once"
            )

    if len(parsed) > MAX_DAYS_PER_WEEK:
        errors.append(f"{len(parsed)} dates supplied, a workweek has at most {MAX_DAYS_PER_WEEK}")

    if parsed:
        first, last = min(parsed), max(parsed)
        if (last - first).days >= MAX_DAYS_PER_WEEK:
            errors.append(f"Dates span {first} to {last}, more than one week")
        elif week_start is not None:
            starts = {workweek_start_for(dt, week_start) for dt in parsed}
            if len(starts) > 1:
                errors.append(
                    f"Dates {first} to {last} cross a {week_start} workweek boundary"
                )

    if errors:
        raise StrictValidationError(errors)

    return {dt: parsed[dt] for dt in sorted(parsed)}


def validate_entries(entries: list[TimesheetEntry]) -> list[TimesheetEntry]:
    """Validate parsed timesheet entries.

    In strict mode, ANY problem is treated as an error and stops processing.
    Returns the validated entries if all checks pass.
    """
    errors: list[str] = []

    if not entries:
        errors.append("No timesheet entries extracted from any file")
        raise StrictValidationError(errors)

    for entry in entries:
        label = f"{entry.employee_name} on {entry.date}"
        if not entry.hours.is_finite():
            errors.append(f"{label}: hours is not finite (source: {entry.source_file})")
            continue
        if entry.hours < 0:
            errors.append(
                f"{label}: negative hours={entry.hours} (source: {entry.source_file})"
            )

    # Per-employee-per-date aggregation
    daily_totals: dict[tuple[str, date], Decimal] = defaultdict(Decimal)
    for entry in entries:
        if entry.hours.is_finite():
            daily_totals[(entry.employee_name, entry.date)] += entry.hours

    for (name, dt), total in daily_totals.items():
        if total > MAX_HOURS_PER_DAY:
            errors.append(
                f"{name} on {dt}: aggregated daily total={total} > {MAX_HOURS_PER_DAY} across all source files"
            )

    if errors:
        raise StrictValidationError(errors)

    return entries
