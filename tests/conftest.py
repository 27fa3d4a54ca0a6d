"""Shared fixtures."""

import pytest

from overtime_tool.models import TenantLaborSettings


@pytest.fixture
def ca_settings() -> TenantLaborSettings:
    return TenantLaborSettings(region="US", state="CA")


@pytest.fixture
def ny_settings() -> TenantLaborSettings:
    return TenantLaborSettings(region="US", state="NY")


@pytest.fixture
def eu_settings() -> TenantLaborSettings:
    return TenantLaborSettings(region="EU", week_start="monday")
