from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from timetrack.absences.model import Absence, AbsenceFilters, NewAbsence
from timetrack.break_types.model import BreakType
from timetrack.companies.model import Company
from timetrack.container import wire
from timetrack.core.enums import AbsenceStatus, TimeEntryType
from timetrack.employees.model import Employee
from timetrack.holidays.model import CompanyHoliday
from timetrack.schedules.model import EmployeeSchedule, Schedule
from timetrack.time_entries.model import NewTimeEntry, TimeEntry
from timetrack.vacation.model import VacationBalance, VacationPolicy
from timetrack.weekly_schedules.model import WeeklyScheduleAssignment

COMPANY_ID = 1
KIOSK_PIN = "1234"


class InMemoryCompanies:
    def __init__(self, companies=()):
        self.companies: dict[int, Company] = {c.company_id: c for c in companies}

    def get_by_id(self, company_id: int) -> Optional[Company]:
        return self.companies.get(company_id)

    def list_active(self):
        return [c for c in sorted(self.companies.values(), key=lambda c: c.company_id) if c.active]


class InMemoryEmployees:
    def __init__(self):
        self._rows: dict[tuple[int, int], Employee] = {}
        self._next_id = 1

    def add(self, company_id: int, employee: Employee) -> Employee:
        self._rows[(company_id, employee.employee_id)] = employee
        self._next_id = max(self._next_id, employee.employee_id + 1)
        return employee

    def list_for_company(self, company_id: int, *, active_only: bool = False, employee_ids=None):
        ids = set(employee_ids) if employee_ids is not None else None
        rows = [
            e
            for (c, _), e in self._rows.items()
            if c == company_id and (not active_only or e.active) and (ids is None or e.employee_id in ids)
        ]
        return sorted(rows, key=lambda e: e.employee_id)

    def get_for_company(self, company_id: int, employee_id: int) -> Optional[Employee]:
        return self._rows.get((company_id, employee_id))

    def get_by_dni(self, company_id: int, dni: str) -> Optional[Employee]:
        for (c, _), e in self._rows.items():
            if c == company_id and e.dni == dni:
                return e
        return None

    def create(self, *, company_id, name, surname, dni, email, pin_hash) -> int:
        employee = Employee(
            employee_id=self._next_id, name=name, surname=surname, dni=dni, email=email, pin_hash=pin_hash
        )
        self.add(company_id, employee)
        return employee.employee_id

    def set_active(self, company_id: int, employee_id: int, active: bool) -> bool:
        key = (company_id, employee_id)
        if key not in self._rows:
            return False
        self._rows[key] = replace(self._rows[key], active=active)
        return True


class InMemorySchedules:
    def __init__(self):
        self.schedules: dict[int, Schedule] = {}
        self.defaults: dict[int, tuple[int, EmployeeSchedule]] = {}
        self._next_id = 1
        self._next_assignment = 1

    def list_for_company(self, company_id: int, *, active_only: bool = False):
        rows = [s for s in self.schedules.values() if s.company_id == company_id and (s.active or not active_only)]
        return sorted(rows, key=lambda s: s.name)

    def get(self, company_id: int, schedule_id: int) -> Optional[Schedule]:
        s = self.schedules.get(schedule_id)
        return s if s and s.company_id == company_id else None

    def get_by_name(self, company_id: int, name: str) -> Optional[Schedule]:
        for s in self.schedules.values():
            if s.company_id == company_id and s.name == name:
                return s
        return None

    def create(self, *, company_id, name, start_time, end_time, break_minutes, is_flexible, color) -> int:
        schedule_id = self._next_id
        self._next_id += 1
        self.schedules[schedule_id] = Schedule(
            schedule_id=schedule_id,
            company_id=company_id,
            name=name,
            start_time=start_time,
            end_time=end_time,
            break_minutes=break_minutes,
            is_flexible=is_flexible,
            color=color,
        )
        return schedule_id

    def update(self, schedule: Schedule) -> bool:
        self.schedules[schedule.schedule_id] = schedule
        return True

    def delete(self, company_id: int, schedule_id: int) -> bool:
        return self.schedules.pop(schedule_id, None) is not None

    def count_assignments(self, schedule_id: int) -> int:
        return sum(1 for _, a in self.defaults.values() if a.schedule_id == schedule_id)

    def assign(self, *, employee_id, schedule_id, start_date, end_date) -> int:
        assignment_id = self._next_assignment
        self._next_assignment += 1
        company_id = self.schedules[schedule_id].company_id
        self.defaults[assignment_id] = (
            company_id,
            EmployeeSchedule(
                assignment_id=assignment_id,
                employee_id=employee_id,
                schedule_id=schedule_id,
                start_date=start_date,
                end_date=end_date,
            ),
        )
        return assignment_id

    def remove_assignment(self, *, schedule_id: int, employee_id: int) -> bool:
        for key, (_, a) in list(self.defaults.items()):
            if a.schedule_id == schedule_id and a.employee_id == employee_id:
                del self.defaults[key]
                return True
        return False

    def list_employee_schedules(self, company_id: int, *, employee_ids=None):
        ids = set(employee_ids) if employee_ids is not None else None
        return [
            a
            for c, a in self.defaults.values()
            if c == company_id and (ids is None or a.employee_id in ids)
        ]


class InMemoryWeeklySchedules:
    def __init__(self):
        self.rows: dict[int, WeeklyScheduleAssignment] = {}
        self._next_id = 1

    def get(self, company_id: int, assignment_id: int) -> Optional[WeeklyScheduleAssignment]:
        row = self.rows.get(assignment_id)
        return row if row and row.company_id == company_id else None

    def list_range(self, company_id: int, *, first_week: date, last_week: date, employee_ids=None):
        ids = set(employee_ids) if employee_ids is not None else None
        rows = [
            r
            for r in self.rows.values()
            if r.company_id == company_id
            and first_week <= r.week_start <= last_week
            and (ids is None or r.employee_id in ids)
        ]
        return sorted(rows, key=lambda r: (r.week_start, r.employee_id, r.day_of_week, r.assignment_id))

    def create(self, *, company_id, employee_id, week_start, day_of_week, schedule_id, notes=None) -> int:
        assignment_id = self._next_id
        self._next_id += 1
        self.rows[assignment_id] = WeeklyScheduleAssignment(
            assignment_id=assignment_id,
            company_id=company_id,
            employee_id=employee_id,
            week_start=week_start,
            day_of_week=day_of_week,
            schedule_id=schedule_id,
            notes=notes,
        )
        return assignment_id

    def delete(self, company_id: int, assignment_id: int) -> bool:
        if not self.get(company_id, assignment_id):
            return False
        del self.rows[assignment_id]
        return True

    def delete_for_day(self, company_id: int, *, employee_id: int, week_start: date, day_of_week: int) -> int:
        doomed = [
            k
            for k, r in self.rows.items()
            if r.company_id == company_id
            and r.employee_id == employee_id
            and r.week_start == week_start
            and r.day_of_week == day_of_week
        ]
        for k in doomed:
            del self.rows[k]
        return len(doomed)

    def delete_for_week(self, company_id: int, *, week_start: date, employee_ids) -> int:
        ids = set(employee_ids)
        doomed = [
            k
            for k, r in self.rows.items()
            if r.company_id == company_id and r.week_start == week_start and r.employee_id in ids
        ]
        for k in doomed:
            del self.rows[k]
        return len(doomed)


class InMemoryBreakTypes:
    def __init__(self):
        self.break_types: dict[int, BreakType] = {}
        self.entry_counts: dict[int, int] = {}
        self._next_id = 1

    def list_for_company(self, company_id: int, *, active_only: bool = False):
        rows = [b for b in self.break_types.values() if b.company_id == company_id and (b.active or not active_only)]
        return sorted(rows, key=lambda b: b.break_type_id)

    def get(self, company_id: int, break_type_id: int) -> Optional[BreakType]:
        b = self.break_types.get(break_type_id)
        return b if b and b.company_id == company_id else None

    def get_by_name(self, company_id: int, name: str) -> Optional[BreakType]:
        for b in self.break_types.values():
            if b.company_id == company_id and b.name == name:
                return b
        return None

    def create(self, *, company_id, name, description, color, requires_reason, max_minutes) -> int:
        break_type_id = self._next_id
        self._next_id += 1
        self.break_types[break_type_id] = BreakType(
            break_type_id=break_type_id,
            company_id=company_id,
            name=name,
            description=description,
            color=color,
            requires_reason=requires_reason,
            max_minutes=max_minutes,
        )
        return break_type_id

    def update(self, break_type: BreakType) -> bool:
        self.break_types[break_type.break_type_id] = break_type
        return True

    def delete(self, company_id: int, break_type_id: int) -> bool:
        return self.break_types.pop(break_type_id, None) is not None

    def count_entries(self, break_type_id: int) -> int:
        return self.entry_counts.get(break_type_id, 0)


class InMemoryTimeEntries:
    def __init__(self):
        self.entries: dict[int, TimeEntry] = {}
        self.edit_logs: list = []
        self._next_id = 1

    def add(self, employee_id: int, entry_type: TimeEntryType, timestamp: datetime, *, company_id: int = COMPANY_ID, **extra) -> TimeEntry:
        entry_id = self.create(
            NewTimeEntry(employee_id=employee_id, company_id=company_id, entry_type=entry_type, timestamp=timestamp, **extra)
        )
        return self.entries[entry_id]

    def create(self, entry: NewTimeEntry) -> int:
        entry_id = self._next_id
        self._next_id += 1
        self.entries[entry_id] = TimeEntry(entry_id=entry_id, **vars(entry))
        return entry_id

    def get(self, company_id: int, entry_id: int) -> Optional[TimeEntry]:
        e = self.entries.get(entry_id)
        return e if e and e.company_id == company_id else None

    def _ordered(self, company_id: int):
        return sorted(
            (e for e in self.entries.values() if e.company_id == company_id),
            key=lambda e: (e.timestamp, e.entry_id),
        )

    def last_for_employee(self, company_id: int, employee_id: int, *, since=None, until=None) -> Optional[TimeEntry]:
        rows = [
            e
            for e in self._ordered(company_id)
            if e.employee_id == employee_id
            and (since is None or e.timestamp >= since)
            and (until is None or e.timestamp <= until)
        ]
        return rows[-1] if rows else None

    def list_range(self, company_id: int, *, start, end, employee_ids=None, entry_type=None):
        ids = set(employee_ids) if employee_ids is not None else None
        return [
            e
            for e in self._ordered(company_id)
            if start <= e.timestamp <= end
            and (ids is None or e.employee_id in ids)
            and (entry_type is None or e.entry_type == entry_type)
        ]

    def first_after(self, company_id: int, employee_id: int, *, after, entry_type):
        for e in self._ordered(company_id):
            if e.employee_id == employee_id and e.entry_type == entry_type and e.timestamp > after:
                return e
        return None

    def search(self, company_id: int, *, employee_id=None, start=None, end=None, entry_type=None, source=None, offset=0, limit=20):
        rows = [
            e
            for e in reversed(self._ordered(company_id))
            if (employee_id is None or e.employee_id == employee_id)
            and (start is None or e.timestamp >= start)
            and (end is None or e.timestamp <= end)
            and (entry_type is None or e.entry_type == entry_type)
            and (source is None or e.source == source)
        ]
        return rows[offset : offset + limit], len(rows)

    def update(self, entry: TimeEntry) -> bool:
        self.entries[entry.entry_id] = entry
        return True

    def delete(self, company_id: int, entry_id: int) -> bool:
        return self.entries.pop(entry_id, None) is not None

    def add_edit_log(self, log) -> int:
        self.edit_logs.append(log)
        return len(self.edit_logs)


class InMemoryAbsences:
    def __init__(self):
        self.absences: dict[int, Absence] = {}
        self._next_id = 1

    def create(self, absence: NewAbsence) -> int:
        absence_id = self._next_id
        self._next_id += 1
        self.absences[absence_id] = Absence(absence_id=absence_id, **vars(absence))
        return absence_id

    def get(self, company_id: int, absence_id: int) -> Optional[Absence]:
        a = self.absences.get(absence_id)
        return a if a and a.company_id == company_id else None

    def update(self, absence: Absence) -> bool:
        self.absences[absence.absence_id] = absence
        return True

    def cancel(self, company_id: int, absence_id: int, *, notes) -> bool:
        a = self.get(company_id, absence_id)
        if not a:
            return False
        self.absences[absence_id] = replace(a, status=AbsenceStatus.CANCELLED, notes=notes)
        return True

    def set_status(self, *, company_id, absence_id, status, decided_by, decided_at, rejection_reason=None) -> bool:
        a = self.get(company_id, absence_id)
        if not a:
            return False
        self.absences[absence_id] = replace(
            a, status=status, approved_by=decided_by, approved_at=decided_at, rejection_reason=rejection_reason
        )
        return True

    def list(self, company_id: int, filters: AbsenceFilters):
        rows = [
            a
            for a in self.absences.values()
            if a.company_id == company_id
            and (filters.employee_id is None or a.employee_id == filters.employee_id)
            and (filters.status is None or a.status == filters.status)
            and (filters.absence_type is None or a.absence_type == filters.absence_type)
            and (filters.start_date is None or a.end_date >= filters.start_date)
            and (filters.end_date is None or a.start_date <= filters.end_date)
        ]
        return sorted(rows, key=lambda a: (a.start_date, a.absence_id), reverse=True)

    def find_overlapping(self, company_id: int, *, employee_id, start, end, statuses, exclude_id=None):
        statuses = set(statuses)
        return [
            a
            for a in self.absences.values()
            if a.company_id == company_id
            and a.employee_id == employee_id
            and a.status in statuses
            and a.absence_id != exclude_id
            and a.overlaps(start, end)
        ]


class InMemoryVacation:
    def __init__(self):
        self.policies: dict[int, VacationPolicy] = {}
        self.balances: dict[tuple[int, int, int], VacationBalance] = {}
        self._next_policy = 1
        self._next_balance = 1

    def list_policies(self, company_id: int, *, active_only: bool = False):
        rows = [p for p in self.policies.values() if p.company_id == company_id and (p.active or not active_only)]
        return sorted(rows, key=lambda p: p.policy_id)

    def get_policy(self, company_id: int, policy_id: int) -> Optional[VacationPolicy]:
        p = self.policies.get(policy_id)
        return p if p and p.company_id == company_id else None

    def create_policy(self, *, company_id, name, yearly_days, max_carry_over_days, min_notice_days, allow_half_days) -> int:
        policy_id = self._next_policy
        self._next_policy += 1
        self.policies[policy_id] = VacationPolicy(
            policy_id=policy_id,
            company_id=company_id,
            name=name,
            yearly_days=yearly_days,
            max_carry_over_days=max_carry_over_days,
            min_notice_days=min_notice_days,
            allow_half_days=allow_half_days,
        )
        return policy_id

    def update_policy(self, policy: VacationPolicy) -> bool:
        self.policies[policy.policy_id] = policy
        return True

    def get_balance(self, company_id: int, employee_id: int, year: int) -> Optional[VacationBalance]:
        return self.balances.get((company_id, employee_id, year))

    def create_balance(self, *, company_id, employee_id, policy_id, year, total_days, carried_over_days) -> int:
        balance_id = self._next_balance
        self._next_balance += 1
        self.balances[(company_id, employee_id, year)] = VacationBalance(
            balance_id=balance_id,
            company_id=company_id,
            employee_id=employee_id,
            policy_id=policy_id,
            year=year,
            total_days=total_days,
            carried_over_days=carried_over_days,
        )
        return balance_id

    def update_balance(self, balance: VacationBalance) -> bool:
        self.balances[(balance.company_id, balance.employee_id, balance.year)] = balance
        return True


class InMemoryHolidays:
    def __init__(self):
        self.holidays: dict[int, CompanyHoliday] = {}
        self._next_id = 1

    def list_for_company(self, company_id: int, *, year: Optional[int] = None):
        rows = [
            h
            for h in self.holidays.values()
            if h.company_id == company_id and (year is None or h.holiday_date.year == year or h.is_recurring)
        ]
        return sorted(rows, key=lambda h: h.holiday_date)

    def get(self, company_id: int, holiday_id: int) -> Optional[CompanyHoliday]:
        h = self.holidays.get(holiday_id)
        return h if h and h.company_id == company_id else None

    def get_by_date(self, company_id: int, holiday_date: date) -> Optional[CompanyHoliday]:
        for h in self.holidays.values():
            if h.company_id == company_id and h.holiday_date == holiday_date:
                return h
        return None

    def create(self, *, company_id, holiday_date, name, is_recurring) -> int:
        holiday_id = self._next_id
        self._next_id += 1
        self.holidays[holiday_id] = CompanyHoliday(
            holiday_id=holiday_id, company_id=company_id, holiday_date=holiday_date, name=name, is_recurring=is_recurring
        )
        return holiday_id

    def update(self, holiday: CompanyHoliday) -> bool:
        self.holidays[holiday.holiday_id] = holiday
        return True

    def delete(self, company_id: int, holiday_id: int) -> bool:
        return self.holidays.pop(holiday_id, None) is not None


@dataclass
class FakeRepos:
    companies_repo: InMemoryCompanies = field(default_factory=InMemoryCompanies)
    employees_repo: InMemoryEmployees = field(default_factory=InMemoryEmployees)
    schedules_repo: InMemorySchedules = field(default_factory=InMemorySchedules)
    weekly_repo: InMemoryWeeklySchedules = field(default_factory=InMemoryWeeklySchedules)
    break_types_repo: InMemoryBreakTypes = field(default_factory=InMemoryBreakTypes)
    time_entries_repo: InMemoryTimeEntries = field(default_factory=InMemoryTimeEntries)
    absences_repo: InMemoryAbsences = field(default_factory=InMemoryAbsences)
    vacation_repo: InMemoryVacation = field(default_factory=InMemoryVacation)
    holidays_repo: InMemoryHolidays = field(default_factory=InMemoryHolidays)


@pytest.fixture
def repos() -> FakeRepos:
    """Company 1 (UTC+1) with two active employees and one inactive."""
    repos = FakeRepos()
    repos.companies_repo.companies[COMPANY_ID] = Company(
        company_id=COMPANY_ID, name="Acme", utc_offset_minutes=60, auto_punchout_enabled=True
    )
    pin_hash = generate_password_hash(KIOSK_PIN)
    repos.employees_repo.add(COMPANY_ID, Employee(1, "Ana", "Garcia", "11111111A", pin_hash=pin_hash))
    repos.employees_repo.add(COMPANY_ID, Employee(2, "Luis", "Perez", "22222222B", pin_hash=pin_hash))
    repos.employees_repo.add(COMPANY_ID, Employee(3, "Marta", "Ruiz", "33333333C", active=False, pin_hash=pin_hash))
    return repos


@pytest.fixture
def container(repos: FakeRepos):
    return wire(**vars(repos))
