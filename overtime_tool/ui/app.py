"""Streamlit drag-and-drop UI.

Thin shell over the CLI engine: parse, validate, calculate, export.
"""

from __future__ import annotations

import json
import tempfile
from pathlib import Path

import streamlit as st

from overtime_tool.audit import DecimalEncoder, generate_audit_dict
from overtime_tool.engine import calculate_timesheet, validate_entries
from overtime_tool.engine.resolver import needs_state_warning, policy_key
from overtime_tool.excel import generate_excel_report
from overtime_tool.models import StrictValidationError, TenantLaborSettings, TimesheetReport
from overtime_tool.parsers import parse_timesheet

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def week_rows(report: TimesheetReport) -> list[dict]:
    """One display row per computed workweek of an employee."""
    rows = []
    for week in report.weeks:
        b = week.breakdown
        rows.append({
            "Week of": week.workweek_start.isoformat() if week.workweek_start else "",
            "Total": float(b.total_hours),
            "Regular": float(b.regular_hours),
            "OT 1.5x": float(b.overtime_hours_1_5),
            "OT 2.0x": float(b.overtime_hours_2_0),
            "Converted >40h": float(week.converted_hours),
            "7th day": week.seventh_day.isoformat() if week.seventh_day else "",
        })
    return rows


def _sidebar_settings() -> TenantLaborSettings:
    with st.sidebar:
        st.header("Tenant Settings")
        region = st.text_input("Region", value="US")
        state = st.text_input("State", value="CA")
        week_start = st.radio("Week starts on", ["sunday", "monday"], horizontal=True)
    return TenantLaborSettings.from_dict(
        {"region": region, "state": state, "week_start": week_start}
    )


def _compute(uploads, settings: TenantLaborSettings, strict: bool) -> list[TimesheetReport]:
    entries = []
    with tempfile.TemporaryDirectory() as tmpdir:
        for upload in uploads:
            path = Path(tmpdir) / Path(upload.name).name
            path.write_bytes(upload.getvalue())
            parsed = parse_timesheet(path)
            st.caption(f"{path.name}: {len(parsed)} entries")
            entries.extend(parsed)

    try:
        entries = validate_entries(entries)
    except StrictValidationError as e:
        if strict:
            raise
        st.warning(f"Validation found {len(e.errors)} issue(s); continuing in non-strict mode.")
    return calculate_timesheet(entries, settings)


def main() -> None:
    st.set_page_config(page_title="Overtime Compliance Tool", layout="wide")
    st.title("Overtime Compliance Tool")
    st.markdown("Split worked hours into regular / OT 1.5x / OT 2.0x per workweek.")

    settings = _sidebar_settings()
    if needs_state_warning(settings):
        st.warning("US region without a state: federal overtime rules will apply.")
    else:
        st.info(f"Policy active: {policy_key(settings)}")

    uploads = st.file_uploader(
        "Upload Timesheets", type=["csv", "xlsx", "pdf"], accept_multiple_files=True,
    )
    strict = st.toggle("Strict validation", value=True)

    if not st.button("Calculate Overtime", type="primary", disabled=not uploads):
        return

    try:
        with st.spinner("Calculating overtime..."):
            reports = _compute(uploads, settings, strict)
    except StrictValidationError as e:
        st.error("Validation failed:")
        st.code("\n".join(e.errors))
        return
    except ValueError as e:
        st.error(str(e))
        return

    for report in reports:
        st.subheader(report.employee_name)
        st.dataframe(week_rows(report), hide_index=True)

    with tempfile.TemporaryDirectory() as tmpdir:
        out_path = generate_excel_report(reports, Path(tmpdir) / "Overtime_Report.xlsx")
        excel_bytes = out_path.read_bytes()
    audit_json = json.dumps(generate_audit_dict(reports, settings), indent=2, cls=DecimalEncoder)

    left, right = st.columns(2)
    left.download_button("Download Excel Report", data=excel_bytes,
                         file_name="Overtime_Report.xlsx", mime=XLSX_MIME)
    right.download_button("Download Audit JSON", data=audit_json,
                          file_name="Audit.json", mime="application/json")


if __name__ == "__main__":
    main()
