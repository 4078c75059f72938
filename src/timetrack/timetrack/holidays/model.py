from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class CompanyHoliday:
    holiday_id: int
    company_id: int
    holiday_date: date
    name: str
    is_recurring: bool = False

    def falls_on(self, day: date) -> bool:
        if self.is_recurring:
            return (day.month, day.day) == (self.holiday_date.month, self.holiday_date.day) and day.year >= self.holiday_date.year
        return day == self.holiday_date
