"""CLI entry point.

Usage:
    python -m overtime_tool \
        --timesheet "Timesheets/*.csv" \
        --region US --state CA --week-start sunday \
        --out "Overtime_Report.xlsx" \
        --audit-out "Audit.json" \
        --strict
"""

from __future__ import annotations

import glob
import json
from pathlib import Path
from typing import Optional

import typer

from overtime_tool.models import StrictValidationError, TenantLaborSettings

app = typer.Typer(add_completion=False)


def load_settings(
    tenant_config_file: Optional[str],
    region: Optional[str],
    state: Optional[str],
    week_start: Optional[str],
) -> TenantLaborSettings:
    """Tenant settings from the optional JSON file, overridden by CLI options."""
    data: dict = {}
    if tenant_config_file:
        data = json.loads(Path(tenant_config_file).read_text(encoding='utf-8'))
    if region is not None:
        data["region"] = region
    if state is not None:
        data["state"] = state
    if week_start is not None:
        data["week_start"] = week_start
    return TenantLaborSettings.from_dict(data)


@app.command()
def generate(
    timesheets: str = typer.Option(..., "--timesheet", help="Glob pattern for timesheet files (csv, xlsx, pdf)"),
    region: Optional[str] = typer.Option(None, "--region", help="Tenant region, e.g. US or EU"),
    state: Optional[str] = typer.Option(None, "--state", help="Tenant state, e.g. CA or NY"),
    week_start: Optional[str] = typer.Option(None, "--week-start", help="sunday or monday"),
    tenant_config_file: Optional[str] = typer.Option(None, "--tenant-config", help="JSON file with region/state/week_start"),
    out: Optional[str] = typer.Option(None, "--out", help="Output Excel file path"),
    audit_out: Optional[str] = typer.Option(None, "--audit-out", help="Output audit JSON file path"),
    strict: bool = typer.Option(True, "--strict/--no-strict", help="Enable strict validation (default: True)"),
) -> None:
    """Compute weekly overtime breakdowns from timesheet files."""
    from overtime_tool.audit import generate_audit
    from overtime_tool.engine import calculate_timesheet, validate_entries
    from overtime_tool.engine.resolver import needs_state_warning, policy_key
    from overtime_tool.excel import generate_excel_report
    from overtime_tool.parsers import parse_timesheet

    ts_files = sorted(glob.glob(timesheets))
    if not ts_files:
        typer.echo(f"ERROR: No timesheet files found matching: {timesheets}", err=True)
        raise typer.Exit(1)

    try:
        settings = load_settings(tenant_config_file, region, state, week_start)
    except (OSError, json.JSONDecodeError, ValueError) as e:
        typer.echo(f"ERROR: Invalid tenant configuration: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"Policy: {policy_key(settings)} (week starts {settings.week_start})")
    if needs_state_warning(settings):
        typer.echo("WARNING: US region without a state, federal rules applied.", err=True)

    try:
        # Step 1: Parse timesheets
        typer.echo("\nParsing timesheets...")
        all_entries = []
        for ts_path in ts_files:
            typer.echo(f"  Parsing: {Path(ts_path).name}...")
            entries = parse_timesheet(ts_path)
            typer.echo(f"    -> {len(entries)} entries extracted")
            all_entries.extend(entries)

        # Step 2: Validate
        typer.echo("\nRunning strict validation...")
        try:
            validated = validate_entries(all_entries)
            typer.echo("  Validation PASSED")
        except StrictValidationError as e:
            typer.echo("\nSTRICT VALIDATION FAILED:", err=True)
            for error in e.errors:
                typer.echo(f"  ERROR: {error}", err=True)
            if strict:
                typer.echo("\nReport NOT generated (strict mode).", err=True)
                raise typer.Exit(1)
            typer.echo("\nWARNING: Continuing in non-strict mode...", err=True)
            validated = all_entries

        # Step 3: Calculate
        typer.echo("\nCalculating overtime...")
        reports = calculate_timesheet(validated, settings)

        for report in reports:
            typer.echo(f"  {report.employee_name}:")
            for week in report.weeks:
                b = week.breakdown
                typer.echo(
                    f"    Week of {week.workweek_start}: total {b.total_hours}h = "
                    f"regular {b.regular_hours}h + OT1.5 {b.overtime_hours_1_5}h + "
                    f"OT2.0 {b.overtime_hours_2_0}h"
                )

        # Step 4: Excel
        if out:
            typer.echo(f"\nGenerating Excel report: {out}...")
            generate_excel_report(reports, out)

        # Step 5: Audit
        if audit_out:
            typer.echo(f"\nGenerating audit file: {audit_out}...")
            generate_audit(reports, settings, audit_out)

        typer.echo("\nSUCCESS: Overtime calculated.")

    except StrictValidationError as e:
        typer.echo("\nPARSING FAILED:", err=True)
        for error in e.errors:
            typer.echo(f"  ERROR: {error}", err=True)
        raise typer.Exit(1)

    except typer.Exit:
        raise

    except Exception as e:
        typer.echo(f"\nFATAL ERROR: {e}", err=True)
        raise typer.Exit(1)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
