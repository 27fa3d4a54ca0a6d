"""Validation, rule resolution and overtime calculation engines."""
from overtime_tool.engine.validator import validate_day_hours, validate_entries
from overtime_tool.engine.resolver import policy_key, resolve_policy
from overtime_tool.engine.calculator import (
    calculate_daily_breakdown,
    calculate_timesheet,
    calculate_week,
    calculate_week_breakdown,
    calculate_week_summary,
)

__all__ = [
    "validate_day_hours",
    "validate_entries",
    "policy_key",
    "resolve_policy",
    "calculate_daily_breakdown",
    "calculate_timesheet",
    "calculate_week",
    "calculate_week_breakdown",
    "calculate_week_summary",
]
