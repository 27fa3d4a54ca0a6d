"""Layer 4a — Overtime rule resolution.

Maps a tenant's region/state onto the jurisdiction policy whose rules
apply. First match wins:

- region is not US            -> NON-US (no overtime)
- state CA                    -> US-CA (daily + weekly, 7th day rule)
- state NY                    -> US-NY (weekly only)
- any other or missing state  -> US-FLSA (federal weekly only)

Region may also be given in the older composite shape ("US-CA"); the
suffix is then the state and any separately set state is ignored.
"""

from __future__ import annotations

from overtime_tool.models import OvertimePolicy, TenantLaborSettings

_STATE_POLICIES = {
    "CA": OvertimePolicy.US_CALIFORNIA,
    "NY": OvertimePolicy.US_NEW_YORK,
}


def _normalize(value: str | None) -> str:
    return (value or "").strip().upper()


def _region_and_state(settings: TenantLaborSettings) -> tuple[str, str]:
    region = _normalize(settings.region)
    state = _normalize(settings.state)

    # Composite regions carry their own state; a separate state is ignored
    if region.startswith("US-"):
        region, state = "US", region[3:]

    return region, state


def resolve_policy(settings: TenantLaborSettings) -> OvertimePolicy:
    """Return the overtime policy that applies to the tenant."""
    region, state = _region_and_state(settings)

    if region != "US":
        return OvertimePolicy.NON_US_NO_OVERTIME

    return _STATE_POLICIES.get(state, OvertimePolicy.US_FEDERAL_FALLBACK)


def policy_key(settings: TenantLaborSettings) -> str:
    """Canonical policy label ('US-CA', 'US-NY', 'US-FLSA', 'NON-US')."""
    return resolve_policy(settings).value


def needs_state_warning(settings: TenantLaborSettings) -> bool:
    """True for US tenants with no state configured (silently on federal rules)."""
    region, state = _region_and_state(settings)
    return region == "US" and not state
