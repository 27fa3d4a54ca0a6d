"""Pydantic request/response models for the Overtime API."""

from __future__ import annotations

from pydantic import BaseModel, Field


class TenantSettingsIn(BaseModel):
    region: str = ""
    state: str | None = None
    week_start: str = "sunday"


class WeekRequest(BaseModel):
    settings: TenantSettingsIn
    day_hours: dict[str, float] = Field(
        ..., description="ISO date -> hours worked, one workweek",
    )
    workweek_start: str | None = None


class Breakdown(BaseModel):
    total_hours: float
    regular_hours: float
    overtime_hours_1_5: float
    overtime_hours_2_0: float


class DaySplitOut(BaseModel):
    date: str
    hours: float
    regular_hours: float
    overtime_hours_1_5: float
    overtime_hours_2_0: float


class WeekOut(BaseModel):
    workweek_start: str | None = None
    policy: str
    seventh_consecutive_day: str | None = None
    days: list[DaySplitOut]
    weekly_excess_hours: float
    converted_hours: float
    breakdown: Breakdown


class PolicyResponse(BaseModel):
    policy: str
    state_warning: bool


class BreakdownResponse(BaseModel):
    success: bool
    policy: str | None = None
    breakdown: Breakdown | None = None
    week: WeekOut | None = None
    error_type: str | None = None
    errors: list[str] | None = None


class SummaryResponse(BaseModel):
    success: bool
    regular_hours: float | None = None
    overtime_hours: float | None = None
    overtime_rate: float | None = None
    workweek_start: str | None = None
    error_type: str | None = None
    errors: list[str] | None = None


class EmployeeSummary(BaseModel):
    name: str
    total_hours: float
    regular_hours: float
    overtime_hours_1_5: float
    overtime_hours_2_0: float
    weeks: list[WeekOut]


class ReportResponse(BaseModel):
    success: bool
    policy: str | None = None
    employees: list[EmployeeSummary] | None = None
    excel_base64: str | None = None
    audit: dict | None = None
    error_type: str | None = None
    errors: list[str] | None = None
