from datetime import date

import pytest

from leave_sheets.core.exceptions import ConflictError, NotFoundError, ValidationError
from leave_sheets.services.settings_service import SettingsService

THIS_YEAR = date.today().year


@pytest.mark.asyncio
async def test_seeded_policy_defaults(seeded_store):
    policy = await SettingsService(seeded_store).get_policy_settings()
    assert policy.annual_leave_max == 10
    assert policy.sick_leave_max == 30
    assert policy.personal_leave_max == 6
    assert policy.maternity_leave_max == 120
    assert policy.sterilization_leave_max == 999
    assert policy.unpaid_leave_max == 999
    assert policy.compassionate_leave_max == 3
    assert policy.min_advance_notice_days == 3
    assert policy.carry_over_enabled is False
    assert policy.carry_over_max_days == 5


@pytest.mark.asyncio
async def test_policy_for_year_without_rows_uses_defaults(seeded_store):
    service = SettingsService(seeded_store)
    assert await service.get_settings(1999) == []
    assert (await service.get_policy_settings(1999)).annual_leave_max == 10


@pytest.mark.asyncio
async def test_update_settings_merges_in_place(seeded_store):
    service = SettingsService(seeded_store)
    before = len(seeded_store.backend.snapshot("Settings"))

    saved = await service.update_settings({"annualLeaveMax": 12, "carryOverEnabled": True})

    assert {s.key: s.value for s in saved}["annualLeaveMax"] == "12"
    assert len(seeded_store.backend.snapshot("Settings")) == before
    policy = await service.get_policy_settings()
    assert policy.annual_leave_max == 12
    assert policy.carry_over_enabled is True
    assert policy.sick_leave_max == 30


@pytest.mark.asyncio
async def test_update_settings_for_new_year_keeps_other_years(seeded_store):
    service = SettingsService(seeded_store)

    await service.update_settings({"annualLeaveMax": 15}, year=THIS_YEAR + 1)

    assert [(s.key, s.value) for s in await service.get_settings(THIS_YEAR + 1)] == [("annualLeaveMax", "15")]
    assert (await service.get_policy_settings(THIS_YEAR)).annual_leave_max == 10
    assert len(await service.get_settings(THIS_YEAR)) == 10


@pytest.mark.asyncio
async def test_update_single_setting(seeded_store):
    service = SettingsService(seeded_store)
    await service.update_setting("sickLeaveMax", 20)
    await service.update_setting("probationDays", 90)

    values = {s.key: s.value for s in await service.get_settings()}
    assert values["sickLeaveMax"] == "20"
    assert values["probationDays"] == "90"
    assert len(values) == 11


@pytest.mark.asyncio
async def test_unparseable_policy_value_falls_back_to_default(seeded_store):
    service = SettingsService(seeded_store)
    await service.update_setting("sickLeaveMax", "lots")
    await service.update_setting("annualLeaveMax", 0)

    policy = await service.get_policy_settings()
    assert policy.sick_leave_max == 30
    assert policy.annual_leave_max == 0


@pytest.mark.asyncio
async def test_seeded_holidays(seeded_store):
    service = SettingsService(seeded_store)
    holidays = await service.get_holidays(2025)
    assert len(holidays) == 18
    assert holidays[0].date == "2025-01-01"
    assert holidays[-1].date == "2025-12-31"
    assert await service.get_holidays(2024) == []


@pytest.mark.asyncio
async def test_add_and_delete_holiday(seeded_store):
    service = SettingsService(seeded_store)

    await service.add_holiday("2026-01-01", "วันขึ้นปีใหม่")
    assert len(await service.list_holidays()) == 19
    with pytest.raises(ConflictError):
        await service.add_holiday("2026-01-01", "duplicate")

    await service.delete_holiday("2025-02-12")
    dates = [h.date for h in await service.list_holidays()]
    assert "2025-02-12" not in dates
    assert len(dates) == 18
    assert len(seeded_store.backend.snapshot("Holidays")) == 19
    with pytest.raises(NotFoundError):
        await service.delete_holiday("2025-02-12")


@pytest.mark.asyncio
async def test_add_holiday_validation(seeded_store):
    service = SettingsService(seeded_store)
    with pytest.raises(ValidationError):
        await service.add_holiday("12/02/2025", "bad format")
    with pytest.raises(ValidationError):
        await service.add_holiday("2025-02-30", "no such day")
    with pytest.raises(ValidationError):
        await service.add_holiday("2025-11-01", " ")


@pytest.mark.asyncio
async def test_update_settings_collapses_hand_edited_duplicates(seeded_store):
    service = SettingsService(seeded_store)
    await seeded_store.append_rows("Settings", [["annualLeaveMax", "20", THIS_YEAR]])
    assert (await service.get_policy_settings()).annual_leave_max == 20

    await service.update_settings({"annualLeaveMax": 12})

    assert (await service.get_policy_settings()).annual_leave_max == 12
    assert [s.value for s in await service.get_settings() if s.key == "annualLeaveMax"] == ["12"]


@pytest.mark.asyncio
async def test_update_setting_rewrites_every_duplicate_row(seeded_store):
    service = SettingsService(seeded_store)
    await seeded_store.append_rows("Settings", [["sickLeaveMax", "45", THIS_YEAR]])

    await service.update_setting("sickLeaveMax", 25)

    assert [s.value for s in await service.get_settings() if s.key == "sickLeaveMax"] == ["25", "25"]
    assert (await service.get_policy_settings()).sick_leave_max == 25
