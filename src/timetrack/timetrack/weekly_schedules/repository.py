from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Protocol, Sequence

from .model import WeeklyScheduleAssignment


class WeeklyScheduleRepository(Protocol):
    def get(self, company_id: int, assignment_id: int) -> Optional[WeeklyScheduleAssignment]:
        raise NotImplementedError

    def list_range(
        self,
        company_id: int,
        *,
        first_week: date,
        last_week: date,
        employee_ids: Optional[Iterable[int]] = None,
    ) -> Sequence[WeeklyScheduleAssignment]:
        """Assignments of every week whose Monday is between the two dates (inclusive)."""

        raise NotImplementedError

    def create(
        self,
        *,
        company_id: int,
        employee_id: int,
        week_start: date,
        day_of_week: int,
        schedule_id: Optional[int],
        notes: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def delete(self, company_id: int, assignment_id: int) -> bool:
        raise NotImplementedError

    def delete_for_day(self, company_id: int, *, employee_id: int, week_start: date, day_of_week: int) -> int:
        raise NotImplementedError

    def delete_for_week(self, company_id: int, *, week_start: date, employee_ids: Iterable[int]) -> int:
        raise NotImplementedError
