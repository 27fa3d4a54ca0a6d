"""API routes for the Overtime Compliance Tool."""

from __future__ import annotations

import base64
import json
import logging
import tempfile
from datetime import date
from pathlib import Path

from fastapi import APIRouter, File, Form, UploadFile

from overtime_tool.audit import generate_audit_dict, week_audit_dict
from overtime_tool.engine import (
    calculate_daily_breakdown,
    calculate_timesheet,
    calculate_week,
    calculate_week_summary,
    validate_day_hours,
    validate_entries,
)
from overtime_tool.engine.resolver import needs_state_warning, policy_key
from overtime_tool.engine.workweek import workweek_start_for
from overtime_tool.excel import generate_excel_report
from overtime_tool.models import StrictValidationError, TenantLaborSettings, WeekBreakdown
from overtime_tool.parsers import parse_timesheet

from api.schemas import (
    Breakdown,
    BreakdownResponse,
    EmployeeSummary,
    PolicyResponse,
    ReportResponse,
    SummaryResponse,
    TenantSettingsIn,
    WeekOut,
    WeekRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1")


def _settings(data: TenantSettingsIn) -> TenantLaborSettings:
    return TenantLaborSettings.from_dict(data.model_dump())


def _breakdown(b: WeekBreakdown) -> Breakdown:
    return Breakdown(**{key: float(value) for key, value in b.as_dict().items()})


@router.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok"}


@router.get("/policy", response_model=PolicyResponse)
async def policy(region: str = "", state: str | None = None):
    """Resolve the overtime policy for a region/state pair."""
    settings = TenantLaborSettings(region=region, state=state)
    return PolicyResponse(
        policy=policy_key(settings),
        state_warning=needs_state_warning(settings),
    )


@router.post("/overtime/daily", response_model=BreakdownResponse)
async def daily_breakdown(request: WeekRequest):
    """Breakdown from daily thresholds only."""
    try:
        settings = _settings(request.settings)
    except ValueError as e:
        return BreakdownResponse(success=False, error_type="config_error", errors=[str(e)])

    try:
        day_hours = validate_day_hours(request.day_hours)
    except StrictValidationError as e:
        return BreakdownResponse(success=False, error_type="validation_error", errors=e.errors)

    return BreakdownResponse(
        success=True,
        policy=policy_key(settings),
        breakdown=_breakdown(calculate_daily_breakdown(settings, day_hours)),
    )


@router.post("/overtime/week", response_model=BreakdownResponse)
async def week_breakdown(request: WeekRequest):
    """Full weekly breakdown (daily pass + weekly reconciliation) with trace."""
    try:
        settings = _settings(request.settings)
        start = date.fromisoformat(request.workweek_start) if request.workweek_start else None
    except ValueError as e:
        return BreakdownResponse(success=False, error_type="config_error", errors=[str(e)])

    try:
        day_hours = validate_day_hours(request.day_hours, settings.week_start)
    except StrictValidationError as e:
        return BreakdownResponse(success=False, error_type="validation_error", errors=e.errors)

    if start is None and day_hours:
        start = workweek_start_for(next(iter(day_hours)), settings.week_start)

    week = calculate_week(settings, day_hours, workweek_start=start)
    return BreakdownResponse(
        success=True,
        policy=week.policy.value,
        breakdown=_breakdown(week.breakdown),
        week=WeekOut(**week_audit_dict(week)),
    )


@router.post("/overtime/summary", response_model=SummaryResponse)
async def week_summary(request: WeekRequest):
    """Week collapsed to regular + overtime hours, rounded for display."""
    try:
        settings = _settings(request.settings)
        start = date.fromisoformat(request.workweek_start) if request.workweek_start else None
    except ValueError as e:
        return SummaryResponse(success=False, error_type="config_error", errors=[str(e)])

    try:
        day_hours = validate_day_hours(request.day_hours, settings.week_start)
    except StrictValidationError as e:
        return SummaryResponse(success=False, error_type="validation_error", errors=e.errors)

    if start is None and day_hours:
        start = workweek_start_for(next(iter(day_hours)), settings.week_start)

    summary = calculate_week_summary(settings, day_hours, workweek_start=start)
    return SummaryResponse(
        success=True,
        regular_hours=round(float(summary.regular_hours), 2),
        overtime_hours=round(float(summary.overtime_hours), 2),
        overtime_rate=float(summary.overtime_rate),
        workweek_start=summary.workweek_start.isoformat() if summary.workweek_start else None,
    )


@router.post("/timesheets/report", response_model=ReportResponse)
async def timesheet_report(
    timesheets: list[UploadFile] = File(..., description="Timesheet files (csv, xlsx, pdf)"),
    tenant_settings: str = Form(..., description="JSON tenant settings"),
    strict: bool = Form(True, description="Strict validation mode"),
):
    """Compute overtime for uploaded timesheets.

    Returns per-employee weekly breakdowns, a base64-encoded Excel report
    and the audit data.
    """
    try:
        settings = TenantLaborSettings.from_dict(json.loads(tenant_settings))
    except (json.JSONDecodeError, AttributeError, ValueError) as e:
        return ReportResponse(
            success=False,
            error_type="config_error",
            errors=[f"Invalid tenant settings: {e}"],
        )

    with tempfile.TemporaryDirectory() as tmpdir:
        tmp = Path(tmpdir)

        try:
            all_entries = []
            for i, ts in enumerate(timesheets):
                # Keep the original name; it is the fallback employee name
                safe_name = Path(ts.filename or f"timesheet_{i}.csv").name
                ts_path = tmp / safe_name
                ts_path.write_bytes(await ts.read())
                all_entries.extend(parse_timesheet(ts_path))

            try:
                validated = validate_entries(all_entries)
            except StrictValidationError:
                if strict:
                    raise
                validated = all_entries

            reports = calculate_timesheet(validated, settings)

            out_excel = tmp / "Overtime_Report.xlsx"
            generate_excel_report(reports, out_excel)
            excel_b64 = base64.b64encode(out_excel.read_bytes()).decode("ascii")

            audit = generate_audit_dict(reports, settings)

            employees = [
                EmployeeSummary(
                    name=report.employee_name,
                    total_hours=float(report.total_hours),
                    regular_hours=float(report.regular_hours),
                    overtime_hours_1_5=float(report.overtime_hours_1_5),
                    overtime_hours_2_0=float(report.overtime_hours_2_0),
                    weeks=[WeekOut(**week_audit_dict(w)) for w in report.weeks],
                )
                for report in reports
            ]

            return ReportResponse(
                success=True,
                policy=policy_key(settings),
                employees=employees,
                excel_base64=excel_b64,
                audit=audit,
            )

        except StrictValidationError as e:
            return ReportResponse(
                success=False,
                error_type="validation_error",
                errors=e.errors,
            )
        except Exception as e:
            logger.exception("Timesheet report failed")
            return ReportResponse(
                success=False,
                error_type="processing_error",
                errors=[str(e)],
            )
