from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..common.datetime_utils import date_for_week_day


@dataclass(frozen=True)
class WeeklyScheduleAssignment:
    """Schedule of an employee for one day of one week.

    ``day_of_week`` counts from Sunday (0) to Saturday (6); ``week_start`` is
    always a Monday. A row without ``schedule_id`` marks a rest day.
    """

    assignment_id: int
    company_id: int
    employee_id: int
    week_start: date
    day_of_week: int
    schedule_id: Optional[int] = None
    notes: Optional[str] = None

    @property
    def is_rest_day(self) -> bool:
        return self.schedule_id is None

    @property
    def work_date(self) -> date:
        return date_for_week_day(self.week_start, self.day_of_week)


@dataclass(frozen=True)
class DailyHours:
    day_of_week: int
    day_name: str
    hours: float
    employee_count: int


@dataclass(frozen=True)
class WeeklyHoursSummary:
    week_start: date
    total_hours: float
    employees_with_schedule: int
    days: list[DailyHours]
