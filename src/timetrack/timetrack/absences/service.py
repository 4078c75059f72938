from __future__ import annotations

import logging
from collections import Counter, defaultdict
from dataclasses import replace
from datetime import date
from typing import Optional

from ..common.datetime_utils import now_utc, parse_iso_date
from ..common.validators import clean_optional_text, require_enum
from ..core.enums import AbsenceStatus, AbsenceType, HalfDayPart
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..employees.service import EmployeeService
from ..vacation.service import VacationService
from .calculator import absence_days
from .model import Absence, AbsenceFilters, AbsenceStats, NewAbsence
from .repository import AbsenceRepository

logger = logging.getLogger(__name__)

_BLOCKING = (AbsenceStatus.PENDING, AbsenceStatus.APPROVED)


def _as_date(value, field_name: str) -> date:
    if isinstance(value, date):
        return value
    if not value:
        raise ValidationError(f"{field_name} is required")
    return parse_iso_date(str(value))


def _optional_half(value, field_name: str) -> Optional[HalfDayPart]:
    if value in (None, ""):
        return None
    return require_enum(HalfDayPart, value, field_name)


def _check_range(start: date, end: date, half_day: bool) -> None:
    if end < start:
        raise ValidationError("End date cannot be before the start date")
    if half_day and start != end:
        raise ValidationError("A half-day absence must start and end on the same date")


class AbsenceService:
    def __init__(self, absences: AbsenceRepository, employees: EmployeeService, vacation: VacationService):
        self._absences = absences
        self._employees = employees
        self._vacation = vacation

    def get(self, *, company_id: int, absence_id: int) -> Absence:
        absence = self._absences.get(int(company_id), int(absence_id))
        if not absence:
            raise NotFoundError("Absence not found")
        return absence

    def list(
        self,
        *,
        company_id: int,
        employee_id: Optional[int] = None,
        status=None,
        absence_type=None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[Absence]:
        filters = AbsenceFilters(
            employee_id=employee_id,
            status=require_enum(AbsenceStatus, status, "Status") if status else None,
            absence_type=require_enum(AbsenceType, absence_type, "Type") if absence_type else None,
            start_date=start_date,
            end_date=end_date,
        )
        return list(self._absences.list(int(company_id), filters))

    def _require_no_overlap(
        self, company_id: int, employee_id: int, start: date, end: date, *, exclude_id: Optional[int] = None
    ) -> None:
        clash = self._absences.find_overlapping(
            int(company_id),
            employee_id=int(employee_id),
            start=start,
            end=end,
            statuses=_BLOCKING,
            exclude_id=exclude_id,
        )
        if clash:
            raise ConflictError("The employee already has an absence in this period")

    def _check_vacation_rules(self, company_id: int, absence_type: AbsenceType, days: float) -> None:
        if absence_type != AbsenceType.VACATION or days == int(days):
            return
        policy = self._vacation.active_policy(company_id=company_id)
        if not policy.allow_half_days:
            raise ValidationError("The vacation policy does not allow half days")

    def _reserve_pending(self, absence: Absence) -> None:
        if absence.absence_type == AbsenceType.VACATION and absence.status == AbsenceStatus.PENDING:
            self._vacation.adjust(
                company_id=absence.company_id,
                employee_id=absence.employee_id,
                field="pending",
                days=absence.days,
                year=absence.start_date.year,
            )

    def _release_pending(self, absence: Absence, *, to_used: bool = False) -> None:
        if absence.absence_type == AbsenceType.VACATION and absence.status == AbsenceStatus.PENDING:
            self._vacation.move_pending(
                company_id=absence.company_id,
                employee_id=absence.employee_id,
                year=absence.start_date.year,
                days=absence.days,
                to_used=to_used,
            )

    def create(
        self,
        *,
        company_id: int,
        employee_id: int,
        absence_type,
        start_date,
        end_date,
        half_day: bool = False,
        start_half_day=None,
        end_half_day=None,
        reason: Optional[str] = None,
        notes: Optional[str] = None,
        requested_by: Optional[str] = None,
        approve: bool = False,
    ) -> Absence:
        absence_type = require_enum(AbsenceType, absence_type, "Type")
        start = _as_date(start_date, "Start date")
        end = _as_date(end_date, "End date")
        half_day = bool(half_day)
        _check_range(start, end, half_day)
        start_half = _optional_half(start_half_day, "Start half day")
        end_half = _optional_half(end_half_day, "End half day")

        self._employees.require_active(company_id=company_id, employee_id=employee_id)
        self._require_no_overlap(company_id, employee_id, start, end)

        days = absence_days(start, end, half_day=half_day, start_half_day=start_half, end_half_day=end_half)
        self._check_vacation_rules(company_id, absence_type, days)

        absence_id = self._absences.create(
            NewAbsence(
                company_id=int(company_id),
                employee_id=int(employee_id),
                absence_type=absence_type,
                start_date=start,
                end_date=end,
                days=days,
                half_day=half_day,
                start_half_day=start_half,
                end_half_day=end_half,
                reason=clean_optional_text(reason),
                notes=clean_optional_text(notes),
                requested_by=requested_by,
            )
        )
        absence = self.get(company_id=company_id, absence_id=absence_id)
        self._reserve_pending(absence)
        logger.info(
            "Absence %s created for employee %s: %s %s..%s (%.1f days)",
            absence_id,
            employee_id,
            absence_type.value,
            start,
            end,
            days,
        )

        if approve:
            return self.approve(company_id=company_id, absence_id=absence_id, approved_by=requested_by)
        return absence

    def update(self, *, company_id: int, absence_id: int, changes: dict) -> Absence:
        current = self.get(company_id=company_id, absence_id=absence_id)
        if current.status == AbsenceStatus.CANCELLED:
            raise ConflictError("A cancelled absence cannot be modified")

        date_fields = {"start_date", "end_date", "half_day", "start_half_day", "end_half_day"}
        touches_dates = bool(date_fields & set(changes))
        if current.status == AbsenceStatus.APPROVED and touches_dates:
            raise ValidationError("The dates of an approved absence cannot be changed")

        updated = current
        if "absence_type" in changes:
            absence_type = require_enum(AbsenceType, changes["absence_type"], "Type")
            # Approved vacation days are already counted as used
            if current.status == AbsenceStatus.APPROVED and absence_type != current.absence_type:
                raise ValidationError("The type of an approved absence cannot be changed")
            updated = replace(updated, absence_type=absence_type)
        if "reason" in changes:
            updated = replace(updated, reason=clean_optional_text(changes["reason"]))
        if "notes" in changes:
            updated = replace(updated, notes=clean_optional_text(changes["notes"]))

        if touches_dates:
            updated = replace(
                updated,
                start_date=_as_date(changes["start_date"], "Start date") if "start_date" in changes else current.start_date,
                end_date=_as_date(changes["end_date"], "End date") if "end_date" in changes else current.end_date,
                half_day=bool(changes.get("half_day", current.half_day)),
                start_half_day=(
                    _optional_half(changes["start_half_day"], "Start half day")
                    if "start_half_day" in changes
                    else current.start_half_day
                ),
                end_half_day=(
                    _optional_half(changes["end_half_day"], "End half day")
                    if "end_half_day" in changes
                    else current.end_half_day
                ),
            )
            _check_range(updated.start_date, updated.end_date, updated.half_day)
            self._require_no_overlap(
                company_id, current.employee_id, updated.start_date, updated.end_date, exclude_id=current.absence_id
            )
            updated = replace(
                updated,
                days=absence_days(
                    updated.start_date,
                    updated.end_date,
                    half_day=updated.half_day,
                    start_half_day=updated.start_half_day,
                    end_half_day=updated.end_half_day,
                ),
            )

        self._check_vacation_rules(company_id, updated.absence_type, updated.days)
        self._release_pending(current)
        self._absences.update(updated)
        self._reserve_pending(updated)
        return updated

    def delete(self, *, company_id: int, absence_id: int, deleted_by: Optional[str] = None) -> None:
        current = self.get(company_id=company_id, absence_id=absence_id)
        if current.status == AbsenceStatus.APPROVED:
            raise ValidationError("An approved absence cannot be deleted")
        if current.status == AbsenceStatus.CANCELLED:
            return

        note = f"Cancelled by: {deleted_by or 'unknown'}"
        self._release_pending(current)
        self._absences.cancel(int(company_id), current.absence_id, notes=f"{current.notes}\n\n{note}" if current.notes else note)
        logger.info("Absence %s cancelled by %s", absence_id, deleted_by)

    def _require_pending(self, absence: Absence) -> None:
        if absence.status != AbsenceStatus.PENDING:
            raise ConflictError("The absence has already been processed")

    def approve(self, *, company_id: int, absence_id: int, approved_by: Optional[str] = None) -> Absence:
        current = self.get(company_id=company_id, absence_id=absence_id)
        self._require_pending(current)

        self._absences.set_status(
            company_id=int(company_id),
            absence_id=current.absence_id,
            status=AbsenceStatus.APPROVED,
            decided_by=approved_by,
            decided_at=now_utc(),
        )
        self._release_pending(current, to_used=True)
        logger.info("Absence %s approved by %s", absence_id, approved_by)
        return self.get(company_id=company_id, absence_id=absence_id)

    def reject(
        self,
        *,
        company_id: int,
        absence_id: int,
        rejection_reason: str,
        rejected_by: Optional[str] = None,
    ) -> Absence:
        reason = clean_optional_text(rejection_reason)
        if not reason:
            raise ValidationError("A rejection reason is required")
        current = self.get(company_id=company_id, absence_id=absence_id)
        self._require_pending(current)

        self._absences.set_status(
            company_id=int(company_id),
            absence_id=current.absence_id,
            status=AbsenceStatus.REJECTED,
            decided_by=rejected_by,
            decided_at=now_utc(),
            rejection_reason=reason,
        )
        self._release_pending(current)
        logger.info("Absence %s rejected by %s", absence_id, rejected_by)
        return self.get(company_id=company_id, absence_id=absence_id)

    def stats(
        self,
        *,
        company_id: int,
        employee_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> AbsenceStats:
        absences = self._absences.list(
            int(company_id), AbsenceFilters(employee_id=employee_id, start_date=start_date, end_date=end_date)
        )

        by_status = Counter(a.status.value.lower() for a in absences)
        by_type: dict[str, dict] = defaultdict(lambda: {"count": 0, "days": 0.0})
        by_month: dict[str, dict] = defaultdict(lambda: {"count": 0, "days": 0.0})
        for a in absences:
            by_type[a.absence_type.value]["count"] += 1
            by_type[a.absence_type.value]["days"] += a.days
            month = a.start_date.strftime("%Y-%m")
            by_month[month]["count"] += 1
            by_month[month]["days"] += a.days

        return AbsenceStats(
            total=len(absences),
            total_days=sum(a.days for a in absences),
            by_status={s.value.lower(): by_status.get(s.value.lower(), 0) for s in AbsenceStatus},
            by_type=dict(by_type),
            by_month=dict(sorted(by_month.items())),
        )
