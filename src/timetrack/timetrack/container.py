from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .absences.mysql_absence_repository import MySQLAbsenceRepository
from .absences.repository import AbsenceRepository
from .absences.service import AbsenceService
from .auto_punchout.service import AutoPunchoutService
from .break_types.mysql_break_type_repository import MySQLBreakTypeRepository
from .break_types.repository import BreakTypeRepository
from .break_types.service import BreakTypeService
from .companies.mysql_company_repository import MySQLCompanyRepository
from .companies.repository import CompanyRepository
from .companies.service import CompanyService
from .core.constants import DEFAULT_REPORT_MAX_DAYS, DEFAULT_UTC_OFFSET_MINUTES
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeService
from .holidays.mysql_holiday_repository import MySQLHolidayRepository
from .holidays.repository import HolidayRepository
from .holidays.service import HolidayService
from .reports.service import ReportService
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.repository import ScheduleRepository
from .schedules.service import ScheduleService
from .time_entries.mysql_time_entry_repository import MySQLTimeEntryRepository
from .time_entries.repository import TimeEntryRepository
from .time_entries.service import TimeEntryService
from .vacation.mysql_vacation_repository import MySQLVacationRepository
from .vacation.repository import VacationRepository
from .vacation.service import VacationService
from .weekly_schedules.mysql_weekly_schedule_repository import MySQLWeeklyScheduleRepository
from .weekly_schedules.repository import WeeklyScheduleRepository
from .weekly_schedules.service import WeeklyScheduleService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    companies_repo: CompanyRepository
    employees_repo: EmployeeRepository
    schedules_repo: ScheduleRepository
    weekly_repo: WeeklyScheduleRepository
    break_types_repo: BreakTypeRepository
    time_entries_repo: TimeEntryRepository
    absences_repo: AbsenceRepository
    vacation_repo: VacationRepository
    holidays_repo: HolidayRepository

    company_service: CompanyService
    employee_service: EmployeeService
    schedule_service: ScheduleService
    weekly_schedule_service: WeeklyScheduleService
    break_type_service: BreakTypeService
    time_entry_service: TimeEntryService
    auto_punchout_service: AutoPunchoutService
    vacation_service: VacationService
    absence_service: AbsenceService
    holiday_service: HolidayService
    report_service: ReportService


def wire(
    *,
    companies_repo: CompanyRepository,
    employees_repo: EmployeeRepository,
    schedules_repo: ScheduleRepository,
    weekly_repo: WeeklyScheduleRepository,
    break_types_repo: BreakTypeRepository,
    time_entries_repo: TimeEntryRepository,
    absences_repo: AbsenceRepository,
    vacation_repo: VacationRepository,
    holidays_repo: HolidayRepository,
    conn: Optional[DatabaseConnection] = None,
    default_utc_offset_minutes: int = DEFAULT_UTC_OFFSET_MINUTES,
    report_max_days: int = DEFAULT_REPORT_MAX_DAYS,
) -> Container:
    """Build every service on top of the given repositories."""
    company_service = CompanyService(companies_repo, default_utc_offset_minutes=default_utc_offset_minutes)
    employee_service = EmployeeService(employees_repo)
    schedule_service = ScheduleService(schedules_repo, employees_repo)
    weekly_schedule_service = WeeklyScheduleService(weekly_repo, schedules_repo, employees_repo)
    break_type_service = BreakTypeService(break_types_repo)
    time_entry_service = TimeEntryService(time_entries_repo, company_service, employee_service, break_types_repo)
    auto_punchout_service = AutoPunchoutService(
        time_entries_repo, company_service, employees_repo, weekly_schedule_service
    )
    vacation_service = VacationService(vacation_repo, employee_service)
    absence_service = AbsenceService(absences_repo, employee_service, vacation_service)
    holiday_service = HolidayService(holidays_repo)
    report_service = ReportService(
        companies=company_service,
        employees=employee_service,
        entries=time_entries_repo,
        weekly_schedules=weekly_schedule_service,
        holidays=holiday_service,
        break_types=break_type_service,
        max_days=report_max_days,
    )

    return Container(
        conn=conn,
        companies_repo=companies_repo,
        employees_repo=employees_repo,
        schedules_repo=schedules_repo,
        weekly_repo=weekly_repo,
        break_types_repo=break_types_repo,
        time_entries_repo=time_entries_repo,
        absences_repo=absences_repo,
        vacation_repo=vacation_repo,
        holidays_repo=holidays_repo,
        company_service=company_service,
        employee_service=employee_service,
        schedule_service=schedule_service,
        weekly_schedule_service=weekly_schedule_service,
        break_type_service=break_type_service,
        time_entry_service=time_entry_service,
        auto_punchout_service=auto_punchout_service,
        vacation_service=vacation_service,
        absence_service=absence_service,
        holiday_service=holiday_service,
        report_service=report_service,
    )


def build_container(
    *,
    db_config: dict,
    default_utc_offset_minutes: int = DEFAULT_UTC_OFFSET_MINUTES,
    report_max_days: int = DEFAULT_REPORT_MAX_DAYS,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire(
        conn=conn,
        companies_repo=MySQLCompanyRepository(conn),
        employees_repo=MySQLEmployeeRepository(conn),
        schedules_repo=MySQLScheduleRepository(conn),
        weekly_repo=MySQLWeeklyScheduleRepository(conn),
        break_types_repo=MySQLBreakTypeRepository(conn),
        time_entries_repo=MySQLTimeEntryRepository(conn),
        absences_repo=MySQLAbsenceRepository(conn),
        vacation_repo=MySQLVacationRepository(conn),
        holidays_repo=MySQLHolidayRepository(conn),
        default_utc_offset_minutes=default_utc_offset_minutes,
        report_max_days=report_max_days,
    )
