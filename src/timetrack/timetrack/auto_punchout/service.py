from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ..common.datetime_utils import minutes_between, now_utc, to_local, to_utc, work_day_for
from ..companies.model import Company
from ..companies.service import CompanyService
from ..core.enums import TimeEntrySource, TimeEntryType
from ..employees.repository import EmployeeRepository
from ..schedules.model import Schedule
from ..time_entries.model import NewTimeEntry, TimeEntry
from ..time_entries.repository import TimeEntryRepository
from ..weekly_schedules.service import WeeklyScheduleService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AutoPunchout:
    company_id: int
    employee_id: int
    entry_id: int
    open_entry_id: int
    punch_out_at: datetime
    reason: str


@dataclass(frozen=True)
class _ShiftWindow:
    start: datetime
    end: datetime


class AutoPunchoutService:
    """Closes work sessions employees forgot to clock out of.

    Run periodically (see ``scripts/auto_punchout.py``); each pass is
    idempotent because only sessions whose last punch is still IN/RESUME are
    considered.
    """

    def __init__(
        self,
        entries: TimeEntryRepository,
        companies: CompanyService,
        employees: EmployeeRepository,
        weekly_schedules: WeeklyScheduleService,
    ):
        self._entries = entries
        self._companies = companies
        self._employees = employees
        self._weekly = weekly_schedules

    def run(self, *, now: Optional[datetime] = None) -> list[AutoPunchout]:
        now = now or now_utc()
        created: list[AutoPunchout] = []
        for company in self._companies.list_active():
            if not company.auto_punchout_enabled:
                continue
            created.extend(self.run_for_company(company, now=now))
        logger.info("Auto punch-out pass finished: %d sessions closed", len(created))
        return created

    def run_for_company(self, company: Company, *, now: datetime) -> list[AutoPunchout]:
        created: list[AutoPunchout] = []
        for employee in self._employees.list_for_company(company.company_id, active_only=True):
            try:
                result = self._process_employee(company, employee.employee_id, now)
            except Exception:
                # One broken employee record must not stop the whole pass.
                logger.exception("Auto punch-out failed for employee %s (company %s)", employee.employee_id, company.company_id)
                continue
            if result:
                created.append(result)
        return created

    def _shift_windows(self, company: Company, shifts: list[Schedule], work_day) -> list[_ShiftWindow]:
        offset = self._companies.offset_for(company)
        windows = []
        for s in shifts:
            start_local = datetime.combine(work_day, s.start_time)
            end_local = datetime.combine(work_day, s.end_time)
            if s.is_overnight:
                end_local += timedelta(days=1)
            windows.append(_ShiftWindow(start=to_utc(start_local, offset), end=to_utc(end_local, offset)))
        return windows

    def decide(
        self,
        *,
        company: Company,
        last: TimeEntry,
        shifts: list[Schedule],
        now: datetime,
    ) -> Optional[tuple[datetime, str]]:
        """Punch-out time and reason for an open entry, or None when it should stay open."""
        max_minutes = company.auto_punchout_max_minutes
        margin_before = company.auto_punchout_margin_before
        margin_after = company.auto_punchout_margin_after

        elapsed = minutes_between(last.timestamp, now)
        if elapsed <= max_minutes:
            return None

        if not shifts:
            if elapsed > max_minutes + margin_after:
                return now, "Automatic punch-out: maximum time exceeded with no schedule assigned"
            return None

        offset = self._companies.offset_for(company)
        work_day = work_day_for(to_local(last.timestamp, offset))
        entry = last.timestamp
        for window in self._shift_windows(company, shifts, work_day):
            if entry < window.start and minutes_between(window.start, now) > margin_before:
                return window.start, f"Automatic punch-out: clocked in before the shift, {margin_before} min margin exceeded"
            if window.start <= entry <= window.end and minutes_between(window.end, now) > margin_after:
                late = int(minutes_between(window.end, now))
                return window.end, f"Automatic punch-out: shift end exceeded by {late} min (margin {margin_after} min)"
            if entry > window.end and minutes_between(window.end, now) > margin_after:
                return entry + timedelta(minutes=max_minutes), "Automatic punch-out: clocked in after the shift, maximum time exceeded"
        return None

    def _process_employee(self, company: Company, employee_id: int, now: datetime) -> Optional[AutoPunchout]:
        last = self._entries.last_for_employee(company.company_id, employee_id, until=now)
        if not last or last.entry_type not in (TimeEntryType.IN, TimeEntryType.RESUME):
            return None

        offset = self._companies.offset_for(company)
        work_day = work_day_for(to_local(last.timestamp, offset))
        shifts = self._weekly.schedules_for_date(company_id=company.company_id, employee_id=employee_id, day=work_day)

        decision = self.decide(company=company, last=last, shifts=shifts, now=now)
        if not decision:
            return None
        punch_out_at, reason = decision

        entry_id = self._entries.create(
            NewTimeEntry(
                employee_id=employee_id,
                company_id=company.company_id,
                entry_type=TimeEntryType.OUT,
                timestamp=punch_out_at,
                source=TimeEntrySource.AUTO,
                notes=reason,
            )
        )
        logger.info("Auto punch-out for employee %s at %s (entry %s): %s", employee_id, punch_out_at, entry_id, reason)
        return AutoPunchout(
            company_id=company.company_id,
            employee_id=employee_id,
            entry_id=entry_id,
            open_entry_id=last.entry_id,
            punch_out_at=punch_out_at,
            reason=reason,
        )
