from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import CompanyHoliday


class HolidayRepository(Protocol):
    def list_for_company(self, company_id: int, *, year: Optional[int] = None) -> Sequence[CompanyHoliday]:
        """Holidays dated in ``year`` plus every recurring holiday when a year is given."""

        raise NotImplementedError

    def get(self, company_id: int, holiday_id: int) -> Optional[CompanyHoliday]:
        raise NotImplementedError

    def get_by_date(self, company_id: int, holiday_date: date) -> Optional[CompanyHoliday]:
        raise NotImplementedError

    def create(self, *, company_id: int, holiday_date: date, name: str, is_recurring: bool) -> int:
        raise NotImplementedError

    def update(self, holiday: CompanyHoliday) -> bool:
        raise NotImplementedError

    def delete(self, company_id: int, holiday_id: int) -> bool:
        raise NotImplementedError
