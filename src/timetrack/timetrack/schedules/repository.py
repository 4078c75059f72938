from __future__ import annotations

from datetime import date, time
from typing import Iterable, Optional, Protocol, Sequence

from .model import EmployeeSchedule, Schedule


class ScheduleRepository(Protocol):
    def list_for_company(self, company_id: int, *, active_only: bool = False) -> Sequence[Schedule]:
        raise NotImplementedError

    def get(self, company_id: int, schedule_id: int) -> Optional[Schedule]:
        raise NotImplementedError

    def get_by_name(self, company_id: int, name: str) -> Optional[Schedule]:
        raise NotImplementedError

    def create(
        self,
        *,
        company_id: int,
        name: str,
        start_time: time,
        end_time: time,
        break_minutes: int,
        is_flexible: bool,
        color: str,
    ) -> int:
        raise NotImplementedError

    def update(self, schedule: Schedule) -> bool:
        raise NotImplementedError

    def delete(self, company_id: int, schedule_id: int) -> bool:
        raise NotImplementedError

    def count_assignments(self, schedule_id: int) -> int:
        """Default plus weekly assignments that reference the schedule."""

        raise NotImplementedError

    def assign(self, *, employee_id: int, schedule_id: int, start_date: date, end_date: Optional[date]) -> int:
        raise NotImplementedError

    def remove_assignment(self, *, schedule_id: int, employee_id: int) -> bool:
        raise NotImplementedError

    def list_employee_schedules(
        self,
        company_id: int,
        *,
        employee_ids: Optional[Iterable[int]] = None,
    ) -> Sequence[EmployeeSchedule]:
        raise NotImplementedError
