"""Tests for SettingsIdentityValidator."""

import pytest

from core.domain.errors import UnauthorizedError
from core.infrastructure.adapters.identity import SettingsIdentityValidator
from core.settings import MonitorSettings


def _validator(**overrides) -> SettingsIdentityValidator:
    values = {
        "auth_enabled": True,
        "allowed_user_names_raw": "alice@contoso.com, Bob@Contoso.com",
        "allowed_task_hubs_raw": "",
    }
    values.update(overrides)
    return SettingsIdentityValidator(MonitorSettings(**values))


@pytest.mark.asyncio
async def test_allowed_principal():
    """Test allow-listed principals pass, case-insensitively."""
    await _validator().validate("BOB@contoso.com", {}, "AnyHub")


@pytest.mark.asyncio
async def test_principal_from_header():
    """Test the principal falls back to the principal header."""
    await _validator().validate(None, {"x-ms-client-principal-name": "alice@contoso.com"}, "AnyHub")


@pytest.mark.asyncio
@pytest.mark.parametrize("principal", [None, "mallory@contoso.com"])
async def test_rejected_principal(principal):
    """Test missing and unlisted principals are rejected."""
    with pytest.raises(UnauthorizedError):
        await _validator().validate(principal, {}, "AnyHub")


@pytest.mark.asyncio
async def test_task_hub_allow_list():
    """Test task hubs outside the allow-list are rejected even with auth off."""
    validator = _validator(auth_enabled=False, allowed_task_hubs_raw="HubA,HubB")

    await validator.validate(None, {}, "huba")
    with pytest.raises(UnauthorizedError):
        await validator.validate(None, {}, "HubC")


@pytest.mark.asyncio
async def test_auth_disabled():
    """Test disabled auth accepts anonymous callers."""
    await _validator(auth_enabled=False).validate(None, {}, "AnyHub")


def test_allow_lists_are_split():
    """Test comma-separated allow-lists are split and trimmed."""
    settings = MonitorSettings(allowed_user_names_raw=" a@x.com ,, b@x.com", allowed_task_hubs_raw="")

    assert settings.allowed_user_names == ["a@x.com", "b@x.com"]
    assert settings.allowed_task_hubs == []
