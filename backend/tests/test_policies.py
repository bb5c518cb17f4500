"""Tests for shift policies, the policy catalog, and the policy API."""

from __future__ import annotations

from datetime import time
from decimal import Decimal
from typing import TYPE_CHECKING

import pytest

from timesheet.domain.policies import (
    BUILTIN_POLICIES,
    H4,
    PolicyCatalog,
    ShiftPolicy,
    ShiftWindow,
    default_catalog,
    set_policy_catalog,
    weekly_policy,
)
from timesheet.exceptions import UnknownPolicyError
from timesheet.models.enums import DayClass

if TYPE_CHECKING:
    from httpx import AsyncClient


def _window(start: int, end: int, brk: int = 60) -> ShiftWindow:
    return ShiftWindow(time(start, 0), time(end, 0), brk)


# ---------------------------------------------------------------------------
# ShiftWindow
# ---------------------------------------------------------------------------


def test_window_net_minutes() -> None:
    window = _window(7, 17)
    assert window.duration_minutes == 600
    assert window.net_minutes == 540
    assert not window.is_day_off


def test_day_off_window_is_zero_length() -> None:
    window = ShiftWindow.day_off()
    assert window.duration_minutes == 0
    assert window.net_minutes == 0
    assert window.is_day_off


def test_window_end_before_start_rejected() -> None:
    with pytest.raises(ValueError, match="scheduled_end"):
        ShiftWindow(time(17, 0), time(7, 0))


def test_window_break_longer_than_window_rejected() -> None:
    with pytest.raises(ValueError, match="cannot exceed"):
        ShiftWindow(time(7, 0), time(8, 0), 90)


def test_window_negative_break_rejected() -> None:
    with pytest.raises(ValueError, match="non-negative"):
        ShiftWindow(time(7, 0), time(8, 0), -1)


# ---------------------------------------------------------------------------
# ShiftPolicy
# ---------------------------------------------------------------------------


def test_h4_windows() -> None:
    assert H4.window_for(0) == _window(7, 17)
    assert H4.window_for(3) == _window(7, 17)
    assert H4.window_for(4) == _window(7, 16)
    assert H4.window_for(5).is_day_off
    assert H4.window_for(6).is_day_off
    assert H4.overtime_multiplier == Decimal("1.25")


def test_holiday_window_overrides_weekday() -> None:
    assert H4.window_for(0, is_holiday=True) == H4.windows[DayClass.HOLIDAY]
    assert H4.window_for(DayClass.MONDAY, is_holiday=True).is_day_off


def test_window_for_accepts_day_class() -> None:
    assert H4.window_for(DayClass.FRIDAY) == H4.window_for(4)


def test_window_lookup_is_idempotent() -> None:
    first = [H4.window_for(day) for day in range(7)]
    second = [H4.window_for(day) for day in range(7)]
    assert first == second


def test_policy_requires_every_day_class() -> None:
    windows = {DayClass.MONDAY: _window(7, 17)}
    with pytest.raises(ValueError, match="has no window for"):
        ShiftPolicy(code="BROKEN", windows=windows)


def test_policy_rejects_multiplier_below_one() -> None:
    with pytest.raises(ValueError, match="overtime_multiplier"):
        weekly_policy("CHEAP", {}, overtime_multiplier=Decimal("0.5"))


def test_policy_windows_are_read_only() -> None:
    with pytest.raises(TypeError):
        H4.windows[DayClass.SATURDAY] = _window(7, 17)  # type: ignore[index]


def test_weekly_policy_fills_days_off() -> None:
    policy = weekly_policy("WEEKENDS", {DayClass.SATURDAY: _window(8, 12, 0)})
    assert policy.window_for(DayClass.SATURDAY).net_minutes == 240
    assert policy.window_for(DayClass.MONDAY).is_day_off
    assert policy.window_for(DayClass.SATURDAY, is_holiday=True).is_day_off


def test_builtin_policies_all_have_holiday_as_day_off() -> None:
    for policy in BUILTIN_POLICIES:
        assert policy.windows[DayClass.HOLIDAY].is_day_off, policy.code


def test_h1_2_is_h1_1_shifted_one_day() -> None:
    catalog = default_catalog()
    h1_1 = catalog.resolve("H1_1")
    h1_2 = catalog.resolve("H1_2")
    assert h1_2.window_for(DayClass.MONDAY).is_day_off
    assert h1_2.window_for(DayClass.TUESDAY) == h1_1.window_for(DayClass.MONDAY)
    assert h1_2.window_for(DayClass.SATURDAY) == h1_1.window_for(DayClass.FRIDAY)


def test_h1_6_saturday_has_no_break() -> None:
    saturday = default_catalog().resolve("H1_6").window_for(DayClass.SATURDAY)
    assert saturday == ShiftWindow(time(8, 0), time(12, 0))
    assert saturday.net_minutes == 240


# ---------------------------------------------------------------------------
# PolicyCatalog
# ---------------------------------------------------------------------------


def test_default_catalog_codes() -> None:
    catalog = default_catalog()
    assert catalog.codes() == ["H4", "H1_1", "H1_2", "H1_4", "H1_5", "H1_6", "H1_7", "H2_2"]
    assert len(catalog) == 8
    assert "H4" in catalog
    assert "H9" not in catalog


def test_catalog_resolve_returns_same_policy() -> None:
    catalog = default_catalog()
    assert catalog.resolve("H4") is catalog.resolve("H4")


def test_catalog_unknown_code() -> None:
    with pytest.raises(UnknownPolicyError) as exc_info:
        default_catalog().resolve("H99")
    assert exc_info.value.policy_code == "H99"
    assert exc_info.value.status_code == 404


def test_catalog_duplicate_code_rejected() -> None:
    with pytest.raises(ValueError, match="Duplicate"):
        PolicyCatalog([H4, H4])


def test_catalog_iterates_in_registration_order() -> None:
    extra = weekly_policy("NIGHTS", {DayClass.MONDAY: _window(18, 23, 30)})
    catalog = PolicyCatalog([extra, H4])
    assert [policy.code for policy in catalog] == ["NIGHTS", "H4"]


# ---------------------------------------------------------------------------
# Policy API
# ---------------------------------------------------------------------------


async def test_list_policies(async_client: AsyncClient) -> None:
    resp = await async_client.get("/policies")
    assert resp.status_code == 200
    data = resp.json()
    assert data["total"] == 8
    assert [item["code"] for item in data["items"]][0] == "H4"


async def test_get_policy(async_client: AsyncClient) -> None:
    resp = await async_client.get("/policies/H4")
    assert resp.status_code == 200
    data = resp.json()
    assert data["code"] == "H4"
    assert Decimal(data["overtime_multiplier"]) == Decimal("1.25")

    windows = {window["day"]: window for window in data["windows"]}
    assert set(windows) == {day.value for day in DayClass}
    assert windows["MONDAY"]["scheduled_start"] == "07:00:00"
    assert windows["MONDAY"]["scheduled_end"] == "17:00:00"
    assert Decimal(windows["MONDAY"]["net_hours"]) == Decimal("9.00")
    assert Decimal(windows["FRIDAY"]["net_hours"]) == Decimal("8.00")
    assert windows["SUNDAY"]["is_day_off"] is True
    assert windows["HOLIDAY"]["is_day_off"] is True


async def test_get_unknown_policy_returns_404(async_client: AsyncClient) -> None:
    resp = await async_client.get("/policies/NOPE")
    assert resp.status_code == 404
    data = resp.json()
    assert data["error"] == "UnknownPolicyError"
    assert data["context"]["policy_code"] == "NOPE"


async def test_policy_api_uses_installed_catalog(async_client: AsyncClient) -> None:
    set_policy_catalog(PolicyCatalog([weekly_policy("ONLY", {DayClass.MONDAY: _window(9, 13, 0)})]))
    resp = await async_client.get("/policies")
    assert resp.json()["total"] == 1
    assert resp.json()["items"][0]["code"] == "ONLY"
