from __future__ import annotations

from datetime import date, datetime

import pytest

from timetrack.core.enums import GroupBy, TimeEntryType
from timetrack.core.exceptions import NotFoundError, ValidationError
from timetrack.reports.model import AttendanceReport, DelayReport

COMPANY_ID = 1


def test_filters_require_a_valid_period(container):
    service = container.report_service

    with pytest.raises(ValidationError, match="required"):
        service.filters(company_id=COMPANY_ID, start_date=None, end_date=date(2025, 1, 31))
    with pytest.raises(ValidationError, match="after"):
        service.filters(company_id=COMPANY_ID, start_date=date(2025, 2, 1), end_date=date(2025, 1, 31))
    with pytest.raises(ValidationError, match="366 days"):
        service.filters(company_id=COMPANY_ID, start_date=date(2024, 1, 1), end_date=date(2025, 3, 1))
    with pytest.raises(ValidationError, match="group_by"):
        service.filters(company_id=COMPANY_ID, start_date=date(2025, 1, 1), end_date=date(2025, 1, 31), group_by="year")


def test_filters_normalize_employee_ids_and_grouping(container):
    filters = container.report_service.filters(
        company_id=COMPANY_ID,
        start_date=date(2025, 1, 1),
        end_date=date(2025, 1, 31),
        employee_ids=[2, 1, 2],
        group_by="month",
    )

    assert filters.employee_ids == (1, 2)
    assert filters.group_by == GroupBy.MONTH
    assert filters.days == 31


def test_build_dispatches_by_report_type(container):
    service = container.report_service
    filters = service.filters(company_id=COMPANY_ID, start_date=date(2025, 1, 13), end_date=date(2025, 1, 17))

    assert isinstance(service.build("attendance", filters), AttendanceReport)
    assert isinstance(service.build("delays", filters), DelayReport)
    with pytest.raises(ValidationError):
        service.build("payroll", filters)


def test_unknown_company_is_not_found(container):
    service = container.report_service
    filters = service.filters(company_id=42, start_date=date(2025, 1, 13), end_date=date(2025, 1, 17))

    with pytest.raises(NotFoundError):
        service.time_report(filters)


def test_company_holidays_reduce_work_days(container):
    container.holiday_service.create(company_id=COMPANY_ID, holiday_date="2025-01-15", name="Local holiday")
    service = container.report_service
    filters = service.filters(company_id=COMPANY_ID, start_date=date(2025, 1, 13), end_date=date(2025, 1, 17))

    report = service.attendance_report(filters)

    assert {r.work_days for r in report.details} == {4}


def test_overnight_shift_from_the_day_before_the_period(container, repos):
    night = container.schedule_service.create(company_id=COMPANY_ID, name="Night", start_time="22:00", end_time="06:00")
    # Sunday 12 January belongs to the week starting Monday 6 January.
    container.weekly_schedule_service.upsert(
        company_id=COMPANY_ID, employee_id=2, week_start=date(2025, 1, 6), day_of_week=0, schedule_id=night.schedule_id
    )
    # 00:20 local on Monday the 13th
    repos.time_entries_repo.add(2, TimeEntryType.IN, datetime(2025, 1, 12, 23, 20))
    service = container.report_service
    filters = service.filters(company_id=COMPANY_ID, start_date=date(2025, 1, 13), end_date=date(2025, 1, 13))

    report = service.delay_report(filters)

    assert len(report.details) == 1
    delay = report.details[0].delays[0]
    assert delay.schedule_name == "Night"
    assert delay.shift_date == date(2025, 1, 12)
    assert delay.delay_minutes == 140


def test_break_resumed_after_the_period_keeps_its_duration(container, repos):
    coffee = container.break_type_service.create(company_id=COMPANY_ID, name="Coffee")
    entries = repos.time_entries_repo
    # 22:00 and 23:50 local on Friday the 17th, resumed at 00:10 local on the 18th
    entries.add(1, TimeEntryType.IN, datetime(2025, 1, 17, 21, 0))
    entries.add(1, TimeEntryType.BREAK, datetime(2025, 1, 17, 22, 50), break_type_id=coffee.break_type_id)
    entries.add(1, TimeEntryType.RESUME, datetime(2025, 1, 17, 23, 10))
    service = container.report_service
    filters = service.filters(company_id=COMPANY_ID, start_date=date(2025, 1, 17), end_date=date(2025, 1, 17))

    report = service.break_type_report(filters)

    row = report.details[0]
    assert row.entries[0].resumed_at == datetime(2025, 1, 17, 23, 10)
    assert row.entries[0].duration_minutes == 20
    assert row.total_minutes == 20


def test_break_never_resumed_has_no_duration(container, repos):
    coffee = container.break_type_service.create(company_id=COMPANY_ID, name="Coffee")
    repos.time_entries_repo.add(1, TimeEntryType.IN, datetime(2025, 1, 17, 8, 0))
    repos.time_entries_repo.add(1, TimeEntryType.BREAK, datetime(2025, 1, 17, 10, 0), break_type_id=coffee.break_type_id)
    service = container.report_service
    filters = service.filters(company_id=COMPANY_ID, start_date=date(2025, 1, 17), end_date=date(2025, 1, 17))

    row = service.break_type_report(filters).details[0]

    assert row.entries[0].duration_minutes is None
    assert row.total_minutes == 0


def test_options_lists_reports_and_groupings(container):
    options = container.report_service.options()

    assert "monthly-consolidated" in options["report_types"]
    assert options["group_by"] == ["day", "week", "month"]
