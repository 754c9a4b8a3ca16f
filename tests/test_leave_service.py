import uuid
from datetime import date

import pytest

from leave_sheets.core.exceptions import NotFoundError, ValidationError
from leave_sheets.models import LeaveStatus, LeaveType
from leave_sheets.services.leave_service import LeaveService
from leave_sheets.services.settings_service import SettingsService


async def _file(service, start, end, emp_id="EMP001", leave_type=LeaveType.ANNUAL):
    return await service.create(emp_id, leave_type, start, end, "ธุระส่วนตัว")


@pytest.mark.asyncio
async def test_create_counts_business_days_net_of_holidays(seeded_store):
    leaves = LeaveService(seeded_store)
    leave = await _file(leaves, "2025-04-11", "2025-04-15")

    assert leave.total_days == 1
    assert leave.status == LeaveStatus.PENDING
    assert leave.approver_note is None
    assert uuid.UUID(leave.id).version == 4
    assert leave.created_at == leave.updated_at
    assert await leaves.get_required(leave.id) == leave


@pytest.mark.asyncio
async def test_create_uses_holidays_of_every_year_in_range(seeded_store):
    await SettingsService(seeded_store).add_holiday("2026-01-01", "วันขึ้นปีใหม่")
    leaves = LeaveService(seeded_store)

    # Wed 31 Dec 2025 and Thu 1 Jan 2026 are holidays, Fri 2 Jan is not
    leave = await _file(leaves, date(2025, 12, 31), date(2026, 1, 2))

    assert leave.total_days == 1


@pytest.mark.asyncio
async def test_create_validation(seeded_store):
    leaves = LeaveService(seeded_store)
    with pytest.raises(ValidationError):
        await _file(leaves, "2025-03-10", "2025-03-07")
    with pytest.raises(ValidationError):
        await leaves.create("EMP001", LeaveType.SICK, "2025-03-03", "2025-03-04", "   ")
    with pytest.raises(ValidationError):
        await leaves.create("EMP001", "vacation", "2025-03-03", "2025-03-04", "trip")
    with pytest.raises(ValidationError):
        await leaves.create("EMP001", LeaveType.SICK, "03/03/2025", "2025-03-04", "flu")
    assert await leaves.list_all() == []


@pytest.mark.asyncio
async def test_lookup_and_filters(seeded_store):
    leaves = LeaveService(seeded_store)
    mine = await _file(leaves, "2025-03-03", "2025-03-04", emp_id="EMP001")
    await _file(leaves, "2025-03-05", "2025-03-05", emp_id="EMP002")

    assert [leave.id for leave in await leaves.list_by_emp_id("EMP001")] == [mine.id]
    assert len(await leaves.list_pending()) == 2
    assert await leaves.get_by_id("missing") is None
    with pytest.raises(NotFoundError):
        await leaves.get_required("missing")


@pytest.mark.asyncio
async def test_approve_rewrites_the_row_in_place(seeded_store):
    leaves = LeaveService(seeded_store)
    await _file(leaves, "2025-03-03", "2025-03-04")
    second = await _file(leaves, "2025-03-05", "2025-03-06")
    seeded_store.backend.writes.clear()

    approved = await leaves.update_status(second.id, LeaveStatus.APPROVED)

    assert approved.status == LeaveStatus.APPROVED
    assert approved.approver_note is None
    assert approved.updated_at >= second.updated_at
    assert seeded_store.backend.writes == [("update", "Leaves!A3:K3")]
    assert len(await leaves.list_all()) == 2


@pytest.mark.asyncio
async def test_repeated_status_update_overwrites_the_note(seeded_store):
    leaves = LeaveService(seeded_store)
    leave = await _file(leaves, "2025-03-03", "2025-03-04")

    await leaves.update_status(leave.id, "approved", "ok")
    final = await leaves.update_status(leave.id, "rejected", "team is short-staffed")

    stored = await leaves.get_required(leave.id)
    assert stored == final
    assert stored.status == LeaveStatus.REJECTED
    assert stored.approver_note == "team is short-staffed"


@pytest.mark.asyncio
async def test_update_status_validation(seeded_store):
    leaves = LeaveService(seeded_store)
    leave = await _file(leaves, "2025-03-03", "2025-03-04")

    with pytest.raises(ValidationError):
        await leaves.update_status(leave.id, LeaveStatus.REJECTED)
    with pytest.raises(ValidationError):
        await leaves.update_status(leave.id, LeaveStatus.REJECTED, "  ")
    with pytest.raises(ValidationError):
        await leaves.update_status(leave.id, LeaveStatus.PENDING)
    with pytest.raises(ValidationError):
        await leaves.update_status(leave.id, "cancelled")
    with pytest.raises(NotFoundError):
        await leaves.update_status("missing", LeaveStatus.APPROVED)

    assert (await leaves.get_required(leave.id)).status == LeaveStatus.PENDING


@pytest.mark.asyncio
async def test_statistics(seeded_store):
    leaves = LeaveService(seeded_store)
    assert (await leaves.get_statistics()).approval_rate == 0

    filed = [await _file(leaves, "2025-03-03", "2025-03-03") for _ in range(3)]
    await leaves.update_status(filed[0].id, LeaveStatus.APPROVED)
    await leaves.update_status(filed[1].id, LeaveStatus.APPROVED)

    stats = await leaves.get_statistics()
    assert stats.total_requests == 3
    assert stats.pending_requests == 1
    assert stats.approved_requests == 2
    assert stats.rejected_requests == 0
    assert stats.approval_rate == 67


@pytest.mark.asyncio
async def test_approval_rate_rounds_half_up(seeded_store):
    leaves = LeaveService(seeded_store)
    filed = [await _file(leaves, "2025-03-03", "2025-03-03") for _ in range(8)]
    await leaves.update_status(filed[0].id, LeaveStatus.APPROVED)

    assert (await leaves.get_statistics()).approval_rate == 13


@pytest.mark.asyncio
async def test_list_by_date_range_overlap_rules(seeded_store):
    leaves = LeaveService(seeded_store)
    starts_inside = await _file(leaves, "2025-04-20", "2025-05-05")
    ends_inside = await _file(leaves, "2025-03-25", "2025-04-02")
    spans = await _file(leaves, "2025-03-01", "2025-05-30")
    await _file(leaves, "2025-06-02", "2025-06-03")

    found = {leave.id for leave in await leaves.list_by_date_range("2025-04-01", "2025-04-30")}
    assert found == {starts_inside.id, ends_inside.id, spans.id}

    found = {leave.id for leave in await leaves.list_by_date_range(date(2025, 4, 10), date(2025, 4, 11))}
    assert found == {spans.id}


@pytest.mark.asyncio
async def test_list_approved_in_month(seeded_store):
    leaves = LeaveService(seeded_store)
    march = await _file(leaves, "2025-03-31", "2025-04-01")
    pending = await _file(leaves, "2025-03-10", "2025-03-10")
    await leaves.update_status(march.id, LeaveStatus.APPROVED)

    assert [leave.id for leave in await leaves.list_approved_in_month(2025, 3)] == [march.id]
    assert [leave.id for leave in await leaves.list_approved_in_month(2025, 4)] == [march.id]
    assert await leaves.list_approved_in_month(2025, 5) == []
    assert pending.status == LeaveStatus.PENDING
    with pytest.raises(ValidationError):
        await leaves.list_approved_in_month(2025, 13)


@pytest.mark.asyncio
async def test_create_with_end_date_at_calendar_limit(seeded_store):
    leaves = LeaveService(seeded_store)
    leave = await _file(leaves, "9999-12-30", "9999-12-31")

    expected = sum(1 for d in (date(9999, 12, 30), date.max) if d.weekday() < 5)
    assert leave.total_days == expected
    assert (await leaves.get_required(leave.id)).end_date == date.max
