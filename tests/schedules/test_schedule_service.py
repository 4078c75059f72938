from datetime import date, time

import pytest

from timetrack.core.exceptions import ConflictError, NotFoundError, ValidationError

COMPANY_ID = 1


def test_create_schedule_parses_times(container):
    night = container.schedule_service.create(
        company_id=COMPANY_ID, name="Night", start_time="22:00", end_time="06:00", break_minutes=30
    )

    assert night.start_time == time(22, 0)
    assert night.is_overnight
    assert night.span_minutes == 480
    assert night.net_minutes == 450


def test_create_rejects_bad_input(container):
    service = container.schedule_service

    with pytest.raises(ValidationError, match="cannot be equal"):
        service.create(company_id=COMPANY_ID, name="Zero", start_time="08:00", end_time="08:00")
    with pytest.raises(ValidationError, match="HH:MM"):
        service.create(company_id=COMPANY_ID, name="Broken", start_time="8am", end_time="16:00")

    service.create(company_id=COMPANY_ID, name="Morning", start_time="08:00", end_time="16:00")
    with pytest.raises(ConflictError):
        service.create(company_id=COMPANY_ID, name="Morning", start_time="09:00", end_time="17:00")


def test_assigned_schedule_needs_force_to_delete(container):
    service = container.schedule_service
    morning = service.create(company_id=COMPANY_ID, name="Morning", start_time="08:00", end_time="16:00")
    service.assign(company_id=COMPANY_ID, schedule_id=morning.schedule_id, employee_ids=[1, 2], start_date=date(2025, 1, 1))

    with pytest.raises(ConflictError, match="2 time"):
        service.delete(company_id=COMPANY_ID, schedule_id=morning.schedule_id)

    service.delete(company_id=COMPANY_ID, schedule_id=morning.schedule_id, force=True)
    with pytest.raises(NotFoundError):
        service.get(company_id=COMPANY_ID, schedule_id=morning.schedule_id)


def test_assign_checks_employees_and_dates(container):
    service = container.schedule_service
    morning = service.create(company_id=COMPANY_ID, name="Morning", start_time="08:00", end_time="16:00")

    with pytest.raises(NotFoundError, match="99"):
        service.assign(company_id=COMPANY_ID, schedule_id=morning.schedule_id, employee_ids=[1, 99], start_date=date(2025, 1, 1))
    with pytest.raises(ValidationError):
        service.assign(
            company_id=COMPANY_ID,
            schedule_id=morning.schedule_id,
            employee_ids=[1],
            start_date=date(2025, 2, 1),
            end_date=date(2025, 1, 1),
        )
