from datetime import date

import pytest

from timetrack.core.exceptions import ConflictError, NotFoundError
from timetrack.holidays.model import CompanyHoliday

COMPANY_ID = 1


def test_recurring_holiday_repeats_from_its_year_on():
    christmas = CompanyHoliday(holiday_id=1, company_id=COMPANY_ID, holiday_date=date(2024, 12, 25), name="Christmas", is_recurring=True)
    one_off = CompanyHoliday(holiday_id=2, company_id=COMPANY_ID, holiday_date=date(2025, 3, 3), name="Local fair")

    assert christmas.falls_on(date(2026, 12, 25))
    assert not christmas.falls_on(date(2023, 12, 25))
    assert one_off.falls_on(date(2025, 3, 3))
    assert not one_off.falls_on(date(2026, 3, 3))


def test_one_holiday_per_date(container):
    service = container.holiday_service
    service.create(company_id=COMPANY_ID, holiday_date="2025-01-06", name="Epiphany")

    with pytest.raises(ConflictError, match="already exists"):
        service.create(company_id=COMPANY_ID, holiday_date=date(2025, 1, 6), name="Duplicate")


def test_dates_between_expands_recurring_holidays(container):
    service = container.holiday_service
    service.create(company_id=COMPANY_ID, holiday_date="2024-01-01", name="New Year", is_recurring=True)
    service.create(company_id=COMPANY_ID, holiday_date="2025-01-06", name="Epiphany")
    service.create(company_id=COMPANY_ID, holiday_date="2025-02-10", name="Outside")

    assert service.dates_between(company_id=COMPANY_ID, start=date(2025, 1, 1), end=date(2025, 1, 31)) == {
        date(2025, 1, 1),
        date(2025, 1, 6),
    }


def test_update_and_delete(container):
    service = container.holiday_service
    holiday = service.create(company_id=COMPANY_ID, holiday_date="2025-05-01", name="Labour day")

    moved = service.update(company_id=COMPANY_ID, holiday_id=holiday.holiday_id, changes={"holiday_date": "2025-05-02"})
    assert moved.holiday_date == date(2025, 5, 2)

    service.delete(company_id=COMPANY_ID, holiday_id=holiday.holiday_id)
    with pytest.raises(NotFoundError):
        service.get(company_id=COMPANY_ID, holiday_id=holiday.holiday_id)
