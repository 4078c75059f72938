from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional, Sequence

from ..core.enums import AbsenceStatus, AbsenceType, HalfDayPart
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, as_float, db_cursor, fetchall, fetchone, in_clause
from .model import Absence, AbsenceFilters, NewAbsence
from .repository import AbsenceRepository

_COLUMNS = """
    absence_id, company_id, employee_id, absence_type, start_date, end_date, days, status,
    half_day, start_half_day, end_half_day, reason, notes, requested_by, approved_by,
    approved_at, rejection_reason
"""


def _half(value) -> Optional[HalfDayPart]:
    return HalfDayPart(value) if value else None


def _to_absence(r: dict) -> Absence:
    return Absence(
        absence_id=int(r["absence_id"]),
        company_id=int(r["company_id"]),
        employee_id=int(r["employee_id"]),
        absence_type=AbsenceType(r["absence_type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        days=as_float(r["days"]) or 0.0,
        status=AbsenceStatus(r["status"]),
        half_day=as_bool(r.get("half_day")),
        start_half_day=_half(r.get("start_half_day")),
        end_half_day=_half(r.get("end_half_day")),
        reason=r.get("reason"),
        notes=r.get("notes"),
        requested_by=r.get("requested_by"),
        approved_by=r.get("approved_by"),
        approved_at=r.get("approved_at"),
        rejection_reason=r.get("rejection_reason"),
    )


def _enum_value(value) -> Optional[str]:
    return value.value if value is not None else None


class MySQLAbsenceRepository(AbsenceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, absence: NewAbsence) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO absences(
                    company_id, employee_id, absence_type, start_date, end_date, days, half_day,
                    start_half_day, end_half_day, reason, notes, requested_by
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    absence.company_id,
                    absence.employee_id,
                    absence.absence_type.value,
                    absence.start_date,
                    absence.end_date,
                    absence.days,
                    1 if absence.half_day else 0,
                    _enum_value(absence.start_half_day),
                    _enum_value(absence.end_half_day),
                    absence.reason,
                    absence.notes,
                    absence.requested_by,
                ),
            )
            return int(cur.lastrowid)

    def get(self, company_id: int, absence_id: int) -> Optional[Absence]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM absences WHERE company_id=%s AND absence_id=%s",
                (int(company_id), int(absence_id)),
            )
            r = fetchone(cur)
            return _to_absence(r) if r else None

    def update(self, absence: Absence) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE absences
                SET absence_type=%s, start_date=%s, end_date=%s, days=%s, half_day=%s,
                    start_half_day=%s, end_half_day=%s, reason=%s, notes=%s
                WHERE company_id=%s AND absence_id=%s
                """,
                (
                    absence.absence_type.value,
                    absence.start_date,
                    absence.end_date,
                    absence.days,
                    1 if absence.half_day else 0,
                    _enum_value(absence.start_half_day),
                    _enum_value(absence.end_half_day),
                    absence.reason,
                    absence.notes,
                    absence.company_id,
                    absence.absence_id,
                ),
            )
            return cur.rowcount >= 0

    def cancel(self, company_id: int, absence_id: int, *, notes: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE absences SET status=%s, notes=%s WHERE company_id=%s AND absence_id=%s",
                (AbsenceStatus.CANCELLED.value, notes, int(company_id), int(absence_id)),
            )
            return cur.rowcount > 0

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE absences
                SET status=%s, approved_by=%s, approved_at=%s, rejection_reason=%s
                WHERE company_id=%s AND absence_id=%s
                """,
                (status.value, decided_by, decided_at, rejection_reason, int(company_id), int(absence_id)),
            )
            return cur.rowcount > 0

    def list(self, company_id: int, filters: AbsenceFilters) -> Sequence[Absence]:
        clauses = ["company_id=%s"]
        params: list[object] = [int(company_id)]
        if filters.employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(int(filters.employee_id))
        if filters.status is not None:
            clauses.append("status=%s")
            params.append(filters.status.value)
        if filters.absence_type is not None:
            clauses.append("absence_type=%s")
            params.append(filters.absence_type.value)
        if filters.start_date is not None:
            clauses.append("end_date >= %s")
            params.append(filters.start_date)
        if filters.end_date is not None:
            clauses.append("start_date <= %s")
            params.append(filters.end_date)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM absences WHERE {' AND '.join(clauses)} ORDER BY start_date DESC, absence_id DESC",
                tuple(params),
            )
            return [_to_absence(r) for r in fetchall(cur)]

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
        status_sql, status_values = in_clause("status", [s.value for s in statuses])
        clauses = ["company_id=%s", "employee_id=%s", "start_date <= %s", "end_date >= %s", status_sql]
        params: list[object] = [int(company_id), int(employee_id), end, start, *status_values]
        if exclude_id is not None:
            clauses.append("absence_id <> %s")
            params.append(int(exclude_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM absences WHERE {' AND '.join(clauses)}", tuple(params))
            return [_to_absence(r) for r in fetchall(cur)]
