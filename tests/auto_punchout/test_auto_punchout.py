from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timedelta

import pytest

from timetrack.core.enums import TimeEntrySource, TimeEntryType

COMPANY_ID = 1


@pytest.fixture
def morning_shift(container):
    shift = container.schedule_service.create(company_id=COMPANY_ID, name="Morning", start_time="09:00", end_time="17:00")
    container.schedule_service.assign(
        company_id=COMPANY_ID, schedule_id=shift.schedule_id, employee_ids=[1], start_date=date(2025, 1, 1)
    )
    return shift


def test_without_schedule_waits_for_max_plus_margin(container, repos):
    repos.time_entries_repo.add(1, TimeEntryType.IN, datetime(2025, 1, 13, 7, 0))
    service = container.auto_punchout_service

    assert service.run(now=datetime(2025, 1, 13, 15, 20)) == []

    closed = service.run(now=datetime(2025, 1, 13, 15, 40))
    assert len(closed) == 1
    assert closed[0].employee_id == 1
    assert closed[0].punch_out_at == datetime(2025, 1, 13, 15, 40)
    assert "no schedule" in closed[0].reason


def test_closes_at_shift_end_once_margin_is_exceeded(container, repos, morning_shift):
    # 09:05 local clock-in against a 09:00-17:00 local shift
    opening = repos.time_entries_repo.add(1, TimeEntryType.IN, datetime(2025, 1, 13, 8, 5))

    closed = container.auto_punchout_service.run(now=datetime(2025, 1, 13, 16, 40))

    assert len(closed) == 1
    assert closed[0].open_entry_id == opening.entry_id
    assert closed[0].punch_out_at == datetime(2025, 1, 13, 16, 0)
    assert "exceeded by 40 min" in closed[0].reason

    out = repos.time_entries_repo.entries[closed[0].entry_id]
    assert out.entry_type == TimeEntryType.OUT
    assert out.source == TimeEntrySource.AUTO


def test_second_pass_is_a_no_op(container, repos, morning_shift):
    repos.time_entries_repo.add(1, TimeEntryType.IN, datetime(2025, 1, 13, 8, 5))
    now = datetime(2025, 1, 13, 16, 40)

    assert len(container.auto_punchout_service.run(now=now)) == 1
    assert container.auto_punchout_service.run(now=now + timedelta(minutes=5)) == []


def test_clock_in_after_shift_end_gets_max_duration(container, repos, morning_shift):
    repos.time_entries_repo.add(1, TimeEntryType.IN, datetime(2025, 1, 13, 16, 30))

    closed = container.auto_punchout_service.run(now=datetime(2025, 1, 14, 0, 31))

    assert closed[0].punch_out_at == datetime(2025, 1, 14, 0, 30)


def test_disabled_company_is_skipped(container, repos):
    company = repos.companies_repo.companies[COMPANY_ID]
    repos.companies_repo.companies[COMPANY_ID] = replace(company, auto_punchout_enabled=False)
    repos.time_entries_repo.add(1, TimeEntryType.IN, datetime(2025, 1, 13, 7, 0))

    assert container.auto_punchout_service.run(now=datetime(2025, 1, 14, 7, 0)) == []


def test_closed_session_is_left_alone(container, repos):
    repos.time_entries_repo.add(1, TimeEntryType.IN, datetime(2025, 1, 13, 7, 0))
    repos.time_entries_repo.add(1, TimeEntryType.OUT, datetime(2025, 1, 13, 15, 0))

    assert container.auto_punchout_service.run(now=datetime(2025, 1, 14, 7, 0)) == []


def test_clock_in_before_shift_start_is_closed_at_the_start(container, repos, morning_shift):
    # 06:30 local, two and a half hours before the 09:00 local shift
    repos.time_entries_repo.add(1, TimeEntryType.IN, datetime(2025, 1, 13, 5, 30))
    service = container.auto_punchout_service

    assert service.run(now=datetime(2025, 1, 13, 13, 25)) == []

    closed = service.run(now=datetime(2025, 1, 13, 13, 31))
    assert len(closed) == 1
    assert closed[0].punch_out_at == datetime(2025, 1, 13, 8, 0)
    assert "before the shift" in closed[0].reason


@pytest.fixture
def night_shift(container):
    shift = container.schedule_service.create(company_id=COMPANY_ID, name="Night", start_time="22:00", end_time="06:00")
    container.schedule_service.assign(
        company_id=COMPANY_ID, schedule_id=shift.schedule_id, employee_ids=[1], start_date=date(2025, 1, 1)
    )
    return shift


def test_overnight_shift_ends_on_the_next_morning(container, repos, night_shift):
    # 22:00 local on the 13th, the shift ends at 06:00 local (05:00 UTC) on the 14th
    repos.time_entries_repo.add(1, TimeEntryType.IN, datetime(2025, 1, 13, 21, 0))
    service = container.auto_punchout_service

    assert service.run(now=datetime(2025, 1, 14, 5, 20)) == []

    closed = service.run(now=datetime(2025, 1, 14, 5, 31))
    assert len(closed) == 1
    assert closed[0].punch_out_at == datetime(2025, 1, 14, 5, 0)
    assert "shift end exceeded by 31 min" in closed[0].reason
