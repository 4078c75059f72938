from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Optional

from ..common.datetime_utils import iter_days, parse_iso_date
from ..common.validators import require_non_empty
from ..core.exceptions import ConflictError, NotFoundError
from .model import CompanyHoliday
from .repository import HolidayRepository


def _as_date(value) -> date:
    if isinstance(value, date):
        return value
    return parse_iso_date(require_non_empty(value, "Date"))


class HolidayService:
    def __init__(self, holidays: HolidayRepository):
        self._holidays = holidays

    def list(self, *, company_id: int, year: Optional[int] = None) -> list[CompanyHoliday]:
        return list(self._holidays.list_for_company(int(company_id), year=year))

    def get(self, *, company_id: int, holiday_id: int) -> CompanyHoliday:
        holiday = self._holidays.get(int(company_id), int(holiday_id))
        if not holiday:
            raise NotFoundError("Holiday not found")
        return holiday

    def _require_free_date(self, company_id: int, day: date, *, current_id: Optional[int] = None) -> None:
        clash = self._holidays.get_by_date(int(company_id), day)
        if clash and clash.holiday_id != current_id:
            raise ConflictError("A holiday already exists for this date")

    def create(self, *, company_id: int, holiday_date, name: str, is_recurring: bool = False) -> CompanyHoliday:
        day = _as_date(holiday_date)
        self._require_free_date(company_id, day)
        holiday_id = self._holidays.create(
            company_id=int(company_id),
            holiday_date=day,
            name=require_non_empty(name, "Name"),
            is_recurring=bool(is_recurring),
        )
        return self.get(company_id=company_id, holiday_id=holiday_id)

    def update(self, *, company_id: int, holiday_id: int, changes: dict) -> CompanyHoliday:
        updated = self.get(company_id=company_id, holiday_id=holiday_id)
        if "holiday_date" in changes:
            day = _as_date(changes["holiday_date"])
            self._require_free_date(company_id, day, current_id=updated.holiday_id)
            updated = replace(updated, holiday_date=day)
        if "name" in changes:
            updated = replace(updated, name=require_non_empty(changes["name"], "Name"))
        if "is_recurring" in changes:
            updated = replace(updated, is_recurring=bool(changes["is_recurring"]))

        self._holidays.update(updated)
        return updated

    def delete(self, *, company_id: int, holiday_id: int) -> None:
        holiday = self.get(company_id=company_id, holiday_id=holiday_id)
        self._holidays.delete(int(company_id), holiday.holiday_id)

    def dates_between(self, *, company_id: int, start: date, end: date) -> set[date]:
        """Holiday dates inside [start, end], recurring ones repeated every year."""
        holidays = self._holidays.list_for_company(int(company_id))
        return {day for day in iter_days(start, end) if any(h.falls_on(day) for h in holidays)}
