"""Layer 2 — Canonical Data Model for the overtime compliance tool."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping, Optional

ZERO = Decimal("0")

WEEK_STARTS = ("sunday", "monday")


class OvertimePolicy(Enum):
    """Jurisdiction policies. Values are the canonical keys shown to users."""
    US_CALIFORNIA = "US-CA"
    US_NEW_YORK = "US-NY"
    US_FEDERAL_FALLBACK = "US-FLSA"
    NON_US_NO_OVERTIME = "NON-US"

    @property
    def has_daily_overtime(self) -> bool:
        return self is OvertimePolicy.US_CALIFORNIA

    @property
    def has_weekly_overtime(self) -> bool:
        return self is not OvertimePolicy.NON_US_NO_OVERTIME


@dataclass(frozen=True)
class TenantLaborSettings:
    """Labor-law relevant slice of a tenant's settings."""
    region: str
    state: Optional[str] = None
    week_start: str = "sunday"

    def __post_init__(self) -> None:
        if self.week_start not in WEEK_STARTS:
            raise ValueError(
                f"week_start must be one of {', '.join(WEEK_STARTS)}, got '{self.week_start}'"
            )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TenantLaborSettings":
        week_start = str(data.get("week_start") or "sunday").strip().lower()
        state = data.get("state")
        return cls(
            region=str(data.get("region") or ""),
            state=str(state) if state else None,
            week_start=week_start,
        )

    def as_dict(self) -> dict:
        return {"region": self.region, "state": self.state, "week_start": self.week_start}


@dataclass(frozen=True)
class DaySplit:
    """One day's hours split into pay tiers."""
    regular: Decimal = ZERO
    ot_1_5: Decimal = ZERO
    ot_2_0: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return self.regular + self.ot_1_5 + self.ot_2_0


@dataclass(frozen=True)
class WeekBreakdown:
    """Regular / OT1.5 / OT2.0 totals for one workweek."""
    total_hours: Decimal
    regular_hours: Decimal
    overtime_hours_1_5: Decimal
    overtime_hours_2_0: Decimal

    def __post_init__(self) -> None:
        for name in ("total_hours", "regular_hours", "overtime_hours_1_5", "overtime_hours_2_0"):
            val = getattr(self, name)
            if val < 0:
                raise ValueError(f"'{name}' must not be negative, got {val}")
        buckets = self.regular_hours + self.overtime_hours_1_5 + self.overtime_hours_2_0
        if buckets != self.total_hours:
            raise ValueError(
                f"Breakdown does not add up: total={self.total_hours} vs buckets={buckets}"
            )

    @property
    def overtime_hours(self) -> Decimal:
        return self.overtime_hours_1_5 + self.overtime_hours_2_0

    def as_dict(self) -> dict[str, Decimal]:
        return {
            "total_hours": self.total_hours,
            "regular_hours": self.regular_hours,
            "overtime_hours_1_5": self.overtime_hours_1_5,
            "overtime_hours_2_0": self.overtime_hours_2_0,
        }


@dataclass(frozen=True)
class WeekSummary:
    """Flattened week figures for the timesheet summary view."""
    regular_hours: Decimal
    overtime_hours: Decimal
    overtime_rate: Decimal = Decimal("1.5")
    workweek_start: Optional[date] = None


@dataclass(frozen=True)
class WeekResult:
    """Full trace of one weekly calculation."""
    settings: TenantLaborSettings
    policy: OvertimePolicy
    days: dict[date, DaySplit]
    provisional: WeekBreakdown
    weekly_excess: Decimal
    converted_hours: Decimal
    breakdown: WeekBreakdown
    workweek_start: Optional[date] = None
    seventh_day: Optional[date] = None

    @property
    def dates(self) -> list[date]:
        return sorted(self.days)


@dataclass
class TimesheetEntry:
    """Single worked-hours row from a timesheet (canonical form)."""
    employee_name: str
    date: date
    hours: Decimal
    source_file: str


@dataclass
class TimesheetReport:
    """Computed weeks for one employee, ready for Excel/audit output."""
    employee_name: str
    settings: TenantLaborSettings
    weeks: list[WeekResult] = field(default_factory=list)
    entries: list[TimesheetEntry] = field(default_factory=list)

    @property
    def total_hours(self) -> Decimal:
        return sum((w.breakdown.total_hours for w in self.weeks), ZERO)

    @property
    def regular_hours(self) -> Decimal:
        return sum((w.breakdown.regular_hours for w in self.weeks), ZERO)

    @property
    def overtime_hours_1_5(self) -> Decimal:
        return sum((w.breakdown.overtime_hours_1_5 for w in self.weeks), ZERO)

    @property
    def overtime_hours_2_0(self) -> Decimal:
        return sum((w.breakdown.overtime_hours_2_0 for w in self.weeks), ZERO)


class StrictValidationError(Exception):
    """Raised when strict validation fails."""
    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"Strict validation failed with {len(errors)} error(s):\n" +
                         "\n".join(f"  - {e}" for e in errors))
