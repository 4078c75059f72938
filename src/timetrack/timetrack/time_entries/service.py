from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import replace
from datetime import date, datetime
from typing import Iterable, Optional

from ..break_types.repository import BreakTypeRepository
from ..common.datetime_utils import (
    minutes_between,
    now_utc,
    parse_iso_datetime,
    to_local,
    to_utc,
    work_day_bounds_local,
    work_day_for,
)
from ..common.geo import haversine_distance
from ..common.serialization import to_jsonable
from ..common.validators import clean_optional_text, require_enum, require_non_empty, require_positive_int
from ..companies.model import Company
from ..companies.service import CompanyService
from ..core.constants import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from ..core.enums import EditAction, TimeEntrySource, TimeEntryType
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.service import EmployeeService
from .calculator.base import WorkTimeCalculator
from .calculator.standard_calculator import StandardWorkTimeCalculator
from .model import DailySummaryRow, EditLog, NewTimeEntry, Page, PunchState, TimeEntry
from .repository import TimeEntryRepository
from .rules import allowed_next, validate_transition

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = ("entry_type", "timestamp", "notes", "location", "break_type_id", "break_reason", "is_remote_work")


def _optional_float(value, field_name: str) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")


class TimeEntryService:
    def __init__(
        self,
        entries: TimeEntryRepository,
        companies: CompanyService,
        employees: EmployeeService,
        break_types: BreakTypeRepository,
        *,
        calculator: WorkTimeCalculator | None = None,
    ):
        self._entries = entries
        self._companies = companies
        self._employees = employees
        self._break_types = break_types
        self._calculator = calculator or StandardWorkTimeCalculator()

    def _work_day_window(self, company: Company, now: datetime) -> tuple[date, datetime, datetime]:
        """Work day of ``now`` and its UTC bounds."""
        offset = self._companies.offset_for(company)
        work_day = work_day_for(to_local(now, offset))
        start_local, end_local = work_day_bounds_local(work_day)
        return work_day, to_utc(start_local, offset), to_utc(end_local, offset)

    def _last_of_work_day(self, company: Company, employee_id: int, now: datetime) -> tuple[date, Optional[TimeEntry]]:
        work_day, start, _ = self._work_day_window(company, now)
        last = self._entries.last_for_employee(company.company_id, employee_id, since=start, until=now)
        return work_day, last

    def current_state(self, *, company_id: int, employee_id: int, now: Optional[datetime] = None) -> PunchState:
        now = now or now_utc()
        company = self._companies.get(company_id)
        self._employees.get(company_id=company_id, employee_id=employee_id)

        work_day, last = self._last_of_work_day(company, int(employee_id), now)
        allowed = allowed_next(last.entry_type if last else None)
        return PunchState(
            employee_id=int(employee_id),
            work_day=work_day,
            last_entry=last,
            can_clock_in=TimeEntryType.IN in allowed,
            can_clock_out=TimeEntryType.OUT in allowed,
            can_start_break=TimeEntryType.BREAK in allowed,
            can_end_break=TimeEntryType.RESUME in allowed,
        )

    def _check_geofence(
        self,
        company: Company,
        *,
        latitude: Optional[float],
        longitude: Optional[float],
        is_remote_work: bool,
    ) -> None:
        if is_remote_work or not company.has_geofence:
            return
        if latitude is None or longitude is None:
            raise ValidationError("Location is required to punch for this company")

        distance = haversine_distance(company.latitude, company.longitude, latitude, longitude)
        if distance > company.geofence_radius_meters:
            raise ValidationError(
                f"You are {distance:.0f} m from the workplace; the allowed radius is {company.geofence_radius_meters} m"
            )

    def _check_break_type(self, company_id: int, break_type_id: Optional[int], break_reason: Optional[str]) -> None:
        if break_type_id is None:
            if self._break_types.list_for_company(company_id, active_only=True):
                raise ValidationError("Select a break type")
            return

        break_type = self._break_types.get(company_id, int(break_type_id))
        if not break_type or not break_type.active:
            raise ValidationError("Unknown or inactive break type")
        if break_type.requires_reason and not break_reason:
            raise ValidationError(f"A reason is required for '{break_type.name}' breaks")

    def _warn_long_break(self, company_id: int, last: Optional[TimeEntry], now: datetime) -> None:
        if not last or last.entry_type != TimeEntryType.BREAK or last.break_type_id is None:
            return
        break_type = self._break_types.get(company_id, last.break_type_id)
        if break_type and break_type.max_minutes and minutes_between(last.timestamp, now) > break_type.max_minutes:
            logger.warning(
                "Employee %s exceeded the %s min limit of break type '%s'",
                last.employee_id, break_type.max_minutes, break_type.name,
            )

    def punch(
        self,
        *,
        company_id: int,
        employee_id: int,
        entry_type: TimeEntryType | str,
        now: Optional[datetime] = None,
        source: TimeEntrySource | str = TimeEntrySource.WEB,
        latitude=None,
        longitude=None,
        location: Optional[str] = None,
        is_remote_work: bool = False,
        device_info: Optional[str] = None,
        notes: Optional[str] = None,
        break_type_id: Optional[int] = None,
        break_reason: Optional[str] = None,
        check_location: bool = True,
    ) -> TimeEntry:
        now = now or now_utc()
        entry_type = require_enum(TimeEntryType, entry_type, "type")
        source = require_enum(TimeEntrySource, source, "source")
        company = self._companies.get(company_id)
        employee = self._employees.require_active(company_id=company_id, employee_id=employee_id)

        _, last = self._last_of_work_day(company, employee.employee_id, now)
        validate_transition(last.entry_type if last else None, entry_type)

        latitude = _optional_float(latitude, "latitude")
        longitude = _optional_float(longitude, "longitude")
        if check_location:
            self._check_geofence(company, latitude=latitude, longitude=longitude, is_remote_work=bool(is_remote_work))

        break_reason = clean_optional_text(break_reason)
        if entry_type == TimeEntryType.BREAK:
            self._check_break_type(company.company_id, break_type_id, break_reason)
        else:
            break_type_id, break_reason = None, None
        if entry_type == TimeEntryType.RESUME:
            self._warn_long_break(company.company_id, last, now)

        entry_id = self._entries.create(
            NewTimeEntry(
                employee_id=employee.employee_id,
                company_id=company.company_id,
                entry_type=entry_type,
                timestamp=now,
                source=source,
                location=clean_optional_text(location),
                latitude=latitude,
                longitude=longitude,
                is_remote_work=bool(is_remote_work),
                device_info=clean_optional_text(device_info),
                notes=clean_optional_text(notes),
                break_type_id=int(break_type_id) if break_type_id is not None else None,
                break_reason=break_reason,
            )
        )
        logger.info("Punch %s recorded for employee %s (entry %s, %s)", entry_type.value, employee.employee_id, entry_id, source.value)
        return self.get(company_id=company_id, entry_id=entry_id)

    def kiosk_punch(
        self,
        *,
        company_id: int,
        dni: str,
        pin: str,
        entry_type: TimeEntryType | str,
        now: Optional[datetime] = None,
        device_info: Optional[str] = None,
        break_type_id: Optional[int] = None,
        break_reason: Optional[str] = None,
    ) -> TimeEntry:
        employee = self._employees.verify_pin(company_id=company_id, dni=dni, pin=pin)
        return self.punch(
            company_id=company_id,
            employee_id=employee.employee_id,
            entry_type=entry_type,
            now=now,
            source=TimeEntrySource.KIOSK,
            # The kiosk device sits at the workplace.
            check_location=False,
            device_info=device_info,
            break_type_id=break_type_id,
            break_reason=break_reason,
        )

    def get(self, *, company_id: int, entry_id: int) -> TimeEntry:
        entry = self._entries.get(int(company_id), int(entry_id))
        if not entry:
            raise NotFoundError("Time entry not found")
        return entry

    def list(
        self,
        *,
        company_id: int,
        employee_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        entry_type: Optional[str] = None,
        source: Optional[str] = None,
        page: int = 1,
        limit: int = DEFAULT_PAGE_LIMIT,
    ) -> Page[TimeEntry]:
        page = max(int(page or 1), 1)
        limit = int(limit or DEFAULT_PAGE_LIMIT)
        if limit < 1 or limit > MAX_PAGE_LIMIT:
            raise ValidationError(f"limit must be between 1 and {MAX_PAGE_LIMIT}")
        if start and end and end < start:
            raise ValidationError("end cannot be before start")

        items, total = self._entries.search(
            int(company_id),
            employee_id=employee_id,
            start=start,
            end=end,
            entry_type=require_enum(TimeEntryType, entry_type, "type") if entry_type else None,
            source=require_enum(TimeEntrySource, source, "source") if source else None,
            offset=(page - 1) * limit,
            limit=limit,
        )
        return Page(items=list(items), total=total, page=page, limit=limit)

    def update(
        self,
        *,
        company_id: int,
        entry_id: int,
        changes: dict,
        reason: str,
        edited_by: Optional[str] = None,
    ) -> TimeEntry:
        reason = require_non_empty(reason, "Reason")
        current = self.get(company_id=company_id, entry_id=entry_id)

        unknown = set(changes) - set(_EDITABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")

        updated = current
        if "entry_type" in changes:
            updated = replace(updated, entry_type=require_enum(TimeEntryType, changes["entry_type"], "type"))
        if "timestamp" in changes:
            ts = changes["timestamp"]
            updated = replace(updated, timestamp=ts if isinstance(ts, datetime) else parse_iso_datetime(str(ts)))
        if "notes" in changes:
            updated = replace(updated, notes=clean_optional_text(changes["notes"]))
        if "location" in changes:
            updated = replace(updated, location=clean_optional_text(changes["location"]))
        if "is_remote_work" in changes:
            updated = replace(updated, is_remote_work=bool(changes["is_remote_work"]))
        if "break_type_id" in changes or "break_reason" in changes:
            break_type_id = changes.get("break_type_id", updated.break_type_id)
            if break_type_id is not None and not self._break_types.get(int(company_id), int(break_type_id)):
                raise ValidationError("Unknown break type")
            updated = replace(
                updated,
                break_type_id=int(break_type_id) if break_type_id is not None else None,
                break_reason=clean_optional_text(changes.get("break_reason", updated.break_reason)),
            )
        if updated.entry_type != TimeEntryType.BREAK:
            updated = replace(updated, break_type_id=None, break_reason=None)

        self._entries.update(updated)
        self._entries.add_edit_log(
            EditLog(
                entry_id=current.entry_id,
                company_id=current.company_id,
                employee_id=current.employee_id,
                action=EditAction.UPDATE,
                old_values=to_jsonable(current),
                new_values=to_jsonable(updated),
                reason=reason,
                edited_by=edited_by,
            )
        )
        logger.info("Time entry %s edited by %s: %s", entry_id, edited_by or "-", reason)
        return updated

    def delete(self, *, company_id: int, entry_id: int, reason: str, edited_by: Optional[str] = None) -> None:
        reason = require_non_empty(reason, "Reason")
        current = self.get(company_id=company_id, entry_id=entry_id)

        self._entries.add_edit_log(
            EditLog(
                entry_id=current.entry_id,
                company_id=current.company_id,
                employee_id=current.employee_id,
                action=EditAction.DELETE,
                old_values=to_jsonable(current),
                new_values=None,
                reason=reason,
                edited_by=edited_by,
            )
        )
        self._entries.delete(int(company_id), current.entry_id)
        logger.info("Time entry %s deleted by %s: %s", entry_id, edited_by or "-", reason)

    def bulk_create(self, *, company_id: int, items: Iterable[dict]) -> list[TimeEntry]:
        """Admin import; entries are validated as a whole before anything is stored."""
        company = self._companies.get(company_id)
        items = list(items or [])
        if not items:
            raise ValidationError("No entries to create")

        pending: list[NewTimeEntry] = []
        for index, item in enumerate(items, start=1):
            try:
                employee_id = require_positive_int(item.get("employee_id"), "employee_id")
                self._employees.get(company_id=company.company_id, employee_id=employee_id)
                entry_type = require_enum(TimeEntryType, item.get("type") or item.get("entry_type"), "type")
                timestamp = parse_iso_datetime(str(item.get("timestamp") or ""))
                break_type_id = None
                if entry_type == TimeEntryType.BREAK and item.get("break_type_id") is not None:
                    break_type_id = require_positive_int(item["break_type_id"], "break_type_id")
                    if not self._break_types.get(company.company_id, break_type_id):
                        raise NotFoundError("Break type not found")
            except (ValidationError, NotFoundError) as exc:
                raise ValidationError(f"Entry #{index}: {exc}")

            pending.append(
                NewTimeEntry(
                    employee_id=employee_id,
                    company_id=company.company_id,
                    entry_type=entry_type,
                    timestamp=timestamp,
                    source=TimeEntrySource.ADMIN,
                    location=clean_optional_text(item.get("location")),
                    notes=clean_optional_text(item.get("notes")),
                    is_remote_work=bool(item.get("is_remote_work", False)),
                    break_type_id=break_type_id,
                    break_reason=clean_optional_text(item.get("break_reason")) if break_type_id else None,
                )
            )

        created = [self._entries.create(p) for p in pending]
        logger.info("Bulk created %d time entries in company %s", len(created), company.company_id)
        return [self.get(company_id=company.company_id, entry_id=i) for i in created]

    def daily_summary(
        self,
        *,
        company_id: int,
        day: date,
        employee_ids: Optional[Iterable[int]] = None,
        now: Optional[datetime] = None,
    ) -> list[DailySummaryRow]:
        """Per-employee totals for one local work day."""
        now = now or now_utc()
        company = self._companies.get(company_id)
        offset = self._companies.offset_for(company)
        employees = self._employees.list(company_id=company_id, active_only=True, employee_ids=employee_ids)

        start_local, end_local = work_day_bounds_local(day)
        start, end = to_utc(start_local, offset), to_utc(end_local, offset)
        by_employee: dict[int, list[TimeEntry]] = defaultdict(list)
        for e in self._entries.list_range(company.company_id, start=start, end=end, employee_ids=[x.employee_id for x in employees]):
            by_employee[e.employee_id].append(e)

        cutoff = min(now, end)
        rows: list[DailySummaryRow] = []
        for employee in employees:
            entries = by_employee.get(employee.employee_id, [])
            ins = [e.timestamp for e in entries if e.entry_type == TimeEntryType.IN]
            outs = [e.timestamp for e in entries if e.entry_type == TimeEntryType.OUT]
            worked = self._calculator.worked_minutes(entries, until=cutoff)
            rows.append(
                DailySummaryRow(
                    employee_id=employee.employee_id,
                    employee_name=employee.full_name,
                    work_day=day,
                    first_in=min(ins) if ins else None,
                    last_out=max(outs) if outs else None,
                    entry_count=len(entries),
                    worked_minutes=round(worked),
                    break_minutes=round(self._calculator.break_minutes(entries, day_end=cutoff)),
                    overtime_minutes=round(self._calculator.overtime_minutes(worked)),
                    is_open=bool(entries) and entries[-1].entry_type != TimeEntryType.OUT,
                )
            )
        return rows
