from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AbsenceStatus, AbsenceType, HalfDayPart


@dataclass(frozen=True)
class Absence:
    absence_id: int
    company_id: int
    employee_id: int
    absence_type: AbsenceType
    start_date: date
    end_date: date
    days: float
    status: AbsenceStatus = AbsenceStatus.PENDING
    half_day: bool = False
    start_half_day: Optional[HalfDayPart] = None
    end_half_day: Optional[HalfDayPart] = None
    reason: Optional[str] = None
    notes: Optional[str] = None
    requested_by: Optional[str] = None
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None

    def overlaps(self, start: date, end: date) -> bool:
        return self.start_date <= end and start <= self.end_date


@dataclass(frozen=True)
class NewAbsence:
    company_id: int
    employee_id: int
    absence_type: AbsenceType
    start_date: date
    end_date: date
    days: float
    half_day: bool = False
    start_half_day: Optional[HalfDayPart] = None
    end_half_day: Optional[HalfDayPart] = None
    reason: Optional[str] = None
    notes: Optional[str] = None
    requested_by: Optional[str] = None


@dataclass(frozen=True)
class AbsenceFilters:
    employee_id: Optional[int] = None
    status: Optional[AbsenceStatus] = None
    absence_type: Optional[AbsenceType] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


@dataclass(frozen=True)
class AbsenceStats:
    total: int
    total_days: float
    by_status: dict
    by_type: dict
    by_month: dict
