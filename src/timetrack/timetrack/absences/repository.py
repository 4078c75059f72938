from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import AbsenceStatus
from .model import Absence, AbsenceFilters, NewAbsence


class AbsenceRepository(Protocol):
    def create(self, absence: NewAbsence) -> int:
        raise NotImplementedError

    def get(self, company_id: int, absence_id: int) -> Optional[Absence]:
        raise NotImplementedError

    def update(self, absence: Absence) -> bool:
        raise NotImplementedError

    def cancel(self, company_id: int, absence_id: int, *, notes: Optional[str]) -> bool:
        """Mark the absence CANCELLED; cancelled rows are kept for the audit trail."""

        raise NotImplementedError

    def set_status(
        self,
        *,
        company_id: int,
        absence_id: int,
        status: AbsenceStatus,
        decided_by: Optional[str],
        decided_at: datetime,
        rejection_reason: Optional[str] = None,
    ) -> bool:
        raise NotImplementedError

    def list(self, company_id: int, filters: AbsenceFilters) -> Sequence[Absence]:
        raise NotImplementedError

    def find_overlapping(
        self,
        company_id: int,
        *,
        employee_id: int,
        start: date,
        end: date,
        statuses: Iterable[AbsenceStatus],
        exclude_id: Optional[int] = None,
    ) -> Sequence[Absence]:
        raise NotImplementedError
