from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import WeeklyScheduleAssignment
from .repository import WeeklyScheduleRepository

_COLUMNS = "assignment_id, company_id, employee_id, week_start, day_of_week, schedule_id, notes"


def _to_assignment(r: dict) -> WeeklyScheduleAssignment:
    return WeeklyScheduleAssignment(
        assignment_id=int(r["assignment_id"]),
        company_id=int(r["company_id"]),
        employee_id=int(r["employee_id"]),
        week_start=r["week_start"],
        day_of_week=int(r["day_of_week"]),
        schedule_id=int(r["schedule_id"]) if r.get("schedule_id") is not None else None,
        notes=r.get("notes"),
    )


class MySQLWeeklyScheduleRepository(WeeklyScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, company_id: int, assignment_id: int) -> Optional[WeeklyScheduleAssignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM weekly_schedules WHERE company_id=%s AND assignment_id=%s",
                (int(company_id), int(assignment_id)),
            )
            r = fetchone(cur)
            return _to_assignment(r) if r else None

    def list_range(
        self,
        company_id: int,
        *,
        first_week: date,
        last_week: date,
        employee_ids: Optional[Iterable[int]] = None,
    ) -> Sequence[WeeklyScheduleAssignment]:
        clauses = ["company_id=%s", "week_start BETWEEN %s AND %s"]
        params: list[object] = [int(company_id), first_week, last_week]
        if employee_ids is not None:
            sql, values = in_clause("employee_id", employee_ids)
            clauses.append(sql)
            params.extend(values)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM weekly_schedules
                WHERE {' AND '.join(clauses)}
                ORDER BY week_start, employee_id, day_of_week, assignment_id
                """,
                tuple(params),
            )
            return [_to_assignment(r) for r in fetchall(cur)]

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO weekly_schedules(company_id, employee_id, week_start, day_of_week, schedule_id, notes)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(company_id), int(employee_id), week_start, int(day_of_week), schedule_id, notes),
            )
            return int(cur.lastrowid)

    def delete(self, company_id: int, assignment_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM weekly_schedules WHERE company_id=%s AND assignment_id=%s",
                (int(company_id), int(assignment_id)),
            )
            return cur.rowcount > 0

    def delete_for_day(self, company_id: int, *, employee_id: int, week_start: date, day_of_week: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                DELETE FROM weekly_schedules
                WHERE company_id=%s AND employee_id=%s AND week_start=%s AND day_of_week=%s
                """,
                (int(company_id), int(employee_id), week_start, int(day_of_week)),
            )
            return int(cur.rowcount)

    def delete_for_week(self, company_id: int, *, week_start: date, employee_ids: Iterable[int]) -> int:
        sql, values = in_clause("employee_id", employee_ids)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"DELETE FROM weekly_schedules WHERE company_id=%s AND week_start=%s AND {sql}",
                (int(company_id), week_start, *values),
            )
            return int(cur.rowcount)
