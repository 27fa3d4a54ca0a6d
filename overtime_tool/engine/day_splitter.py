"""Per-day hours splitting for overtime policies.

Business Rules:
- Only California has daily overtime. Every other policy books the
  whole day as regular and leaves overtime to the weekly pass.
- California normal day:
  - First 8 hours = Regular
  - Hours 8 through 12 = OT 1.5x
  - Hours beyond 12 = OT 2.0x
- California 7th consecutive working day of the workweek:
  - First 8 hours = OT 1.5x (no regular allowance)
  - Hours beyond 8 = OT 2.0x

A day counts as the 7th consecutive day only when the week holds exactly
seven worked dates (hours > 0) forming an unbroken calendar run.
"""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal
from typing import Mapping, Optional

from overtime_tool.models import ZERO, DaySplit, OvertimePolicy

CA_DAILY_REGULAR_LIMIT = Decimal("8")
CA_DAILY_DOUBLE_TIME_AFTER = Decimal("12")
CONSECUTIVE_DAYS_FOR_RULE = 7


def split_day_hours(
    hours: Decimal,
    policy: OvertimePolicy,
    seventh_day: bool = False,
) -> DaySplit:
    """Split one day's hours into Regular/OT1.5/OT2.0."""
    hours = max(ZERO, hours)

    if not policy.has_daily_overtime:
        return DaySplit(regular=hours)

    if seventh_day:
        ot_1_5 = min(hours, CA_DAILY_REGULAR_LIMIT)
        return DaySplit(ot_1_5=ot_1_5, ot_2_0=hours - ot_1_5)

    regular = min(hours, CA_DAILY_REGULAR_LIMIT)
    ot_1_5 = min(
        max(hours - CA_DAILY_REGULAR_LIMIT, ZERO),
        CA_DAILY_DOUBLE_TIME_AFTER - CA_DAILY_REGULAR_LIMIT,
    )
    ot_2_0 = max(hours - CA_DAILY_DOUBLE_TIME_AFTER, ZERO)
    return DaySplit(regular=regular, ot_1_5=ot_1_5, ot_2_0=ot_2_0)


def seventh_consecutive_day(day_hours: Mapping[date, Decimal]) -> Optional[date]:
    """Return the 7th consecutive worked date of the week, if there is one."""
    if len(day_hours) != CONSECUTIVE_DAYS_FOR_RULE:
        return None

    if any(hours <= 0 for hours in day_hours.values()):
        return None

    dates = sorted(day_hours)
    for prev, cur in zip(dates, dates[1:]):
        if cur - prev != timedelta(days=1):
            return None

    return dates[-1]


def split_days(
    day_hours: Mapping[date, Decimal],
    policy: OvertimePolicy,
) -> dict[date, DaySplit]:
    """Apply the daily split to every date of one workweek, in date order."""
    seventh = seventh_consecutive_day(day_hours) if policy.has_daily_overtime else None

    return {
        dt: split_day_hours(day_hours[dt], policy, seventh_day=(dt == seventh))
        for dt in sorted(day_hours)
    }
