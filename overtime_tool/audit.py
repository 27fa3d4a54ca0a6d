"""Layer 6 — Audit Engine.

Generates full traceability JSON output: for every week, the daily pass,
the weekly excess and how much of it was converted.
"""

from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path

from overtime_tool.engine.resolver import needs_state_warning
from overtime_tool.models import TenantLaborSettings, TimesheetReport, WeekBreakdown, WeekResult


class DecimalEncoder(json.JSONEncoder):
    """JSON encoder that handles Decimal values."""
    def default(self, obj):
        if isinstance(obj, Decimal):
            return float(obj)
        return super().default(obj)


def _breakdown_dict(breakdown: WeekBreakdown) -> dict:
    return {key: float(value) for key, value in breakdown.as_dict().items()}


def week_audit_dict(week: WeekResult) -> dict:
    """Audit record for a single computed workweek (no file I/O)."""
    return {
        "workweek_start": week.workweek_start.isoformat() if week.workweek_start else None,
        "policy": week.policy.value,
        "seventh_consecutive_day": week.seventh_day.isoformat() if week.seventh_day else None,
        "days": [
            {
                "date": dt.isoformat(),
                "hours": float(split.total),
                "regular_hours": float(split.regular),
                "overtime_hours_1_5": float(split.ot_1_5),
                "overtime_hours_2_0": float(split.ot_2_0),
            }
            for dt, split in week.days.items()
        ],
        "daily_pass": _breakdown_dict(week.provisional),
        "weekly_excess_hours": float(week.weekly_excess),
        "converted_hours": float(week.converted_hours),
        "breakdown": _breakdown_dict(week.breakdown),
    }


def generate_audit_dict(
    reports: list[TimesheetReport],
    settings: TenantLaborSettings,
) -> dict:
    """Build audit dictionary from computed timesheet reports (no file I/O)."""
    employees = []
    for report in reports:
        employees.append({
            "name": report.employee_name,
            "weeks": [week_audit_dict(w) for w in report.weeks],
            "hours": {
                "total": float(report.total_hours),
                "regular": float(report.regular_hours),
                "overtime_1_5": float(report.overtime_hours_1_5),
                "overtime_2_0": float(report.overtime_hours_2_0),
            },
            "source_files": sorted({
                e.source_file for e in report.entries
            }),
        })

    all_dates = sorted({dt for r in reports for w in r.weeks for dt in w.days})

    return {
        "settings": settings.as_dict(),
        "policy": reports[0].weeks[0].policy.value if reports and reports[0].weeks else None,
        "state_warning": needs_state_warning(settings),
        "employees": employees,
        "summary": {
            "total_employees": len(reports),
            "total_weeks": sum(len(r.weeks) for r in reports),
            "total_hours": float(sum((r.total_hours for r in reports), Decimal("0"))),
            "regular_hours": float(sum((r.regular_hours for r in reports), Decimal("0"))),
            "overtime_hours_1_5": float(sum((r.overtime_hours_1_5 for r in reports), Decimal("0"))),
            "overtime_hours_2_0": float(sum((r.overtime_hours_2_0 for r in reports), Decimal("0"))),
        },
        "date_range": {
            "start": all_dates[0].isoformat() if all_dates else None,
            "end": all_dates[-1].isoformat() if all_dates else None,
            "total_dates": len(all_dates),
        },
    }


def generate_audit(
    reports: list[TimesheetReport],
    settings: TenantLaborSettings,
    output_path: str | Path,
) -> Path:
    """Generate audit JSON file from computed timesheet reports."""
    output_path = Path(output_path)
    audit = generate_audit_dict(reports, settings)
    output_path.write_text(json.dumps(audit, indent=2, cls=DecimalEncoder), encoding='utf-8')
    return output_path
